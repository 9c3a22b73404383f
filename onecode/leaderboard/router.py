from fastapi import APIRouter, Depends

from onecode.core.messages import RESPONSE_MESSAGES
from onecode.dependencies import Services, get_services

router = APIRouter(tags=["Leaderboards"])


@router.get("/leaderboard/global")
async def get_global_top20(services: Services = Depends(get_services)):
    board = await services.leaderboard.global_top20()
    return {"data": board, "message": RESPONSE_MESSAGES["fetched_leaderboard"], "status": 200}


@router.get("/leaderboard/weekly")
async def get_weekly_top20(services: Services = Depends(get_services)):
    board = await services.leaderboard.weekly_top20()
    return {"data": board, "message": RESPONSE_MESSAGES["fetched_leaderboard"], "status": 200}
