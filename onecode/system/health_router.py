from datetime import datetime

from fastapi import APIRouter

router = APIRouter(tags=["System"])


@router.get("/health")
async def health():
    return {"status": "UP", "timestamp": datetime.utcnow().isoformat()}
