from fastapi import APIRouter, Depends

from onecode.core.messages import RESPONSE_MESSAGES
from onecode.dependencies import Services, get_current_user_id, get_services
from onecode.tracks.models import JoinTrackRequest

router = APIRouter(tags=["Tracks"])


@router.get("/tracks")
async def get_all_tracks(services: Services = Depends(get_services)):
    tracks = await services.tracks.list_tracks()
    return {"data": tracks, "message": RESPONSE_MESSAGES["fetched_track"], "status": 200}


@router.post("/tracks/join", status_code=201)
async def join_track(
    body: JoinTrackRequest,
    user_id: str = Depends(get_current_user_id),
    services: Services = Depends(get_services),
):
    joined = await services.tracks.join_track(user_id, body.track_id)
    return {"data": {"joined": joined}, "message": RESPONSE_MESSAGES["joined_track"], "status": 201}


@router.get("/tracks/{track_id}/progress")
async def get_track_progress(
    track_id: str,
    user_id: str = Depends(get_current_user_id),
    services: Services = Depends(get_services),
):
    progress = await services.progress.track_progress(user_id, track_id)
    return {"data": progress, "message": RESPONSE_MESSAGES["fetched_track_progress"], "status": 200}
