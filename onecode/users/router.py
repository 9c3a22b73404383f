from fastapi import APIRouter, Depends

from onecode.core.messages import RESPONSE_MESSAGES
from onecode.dependencies import Services, get_current_user_id, get_services

router = APIRouter(tags=["Users"])


@router.post("/users", status_code=201)
async def create_user(
    user_id: str = Depends(get_current_user_id),
    services: Services = Depends(get_services),
):
    """Create a profile and seed its ranks"""
    profile = await services.users.register(user_id)
    return {"data": profile, "message": RESPONSE_MESSAGES["created_user"], "status": 201}


@router.get("/users/me")
async def get_my_profile(
    user_id: str = Depends(get_current_user_id),
    services: Services = Depends(get_services),
):
    profile = await services.users.get_profile(user_id)
    return {"data": profile, "message": RESPONSE_MESSAGES["fetched_user"], "status": 200}


@router.get("/users/me/stats")
async def get_my_stats(
    user_id: str = Depends(get_current_user_id),
    services: Services = Depends(get_services),
):
    stats = await services.progress.user_stats(user_id)
    return {"data": stats, "message": RESPONSE_MESSAGES["fetched_stats"], "status": 200}
