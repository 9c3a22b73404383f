"""
1Code Engine - Main Application
Tracks, exercises, submissions and progress for the learning platform
"""

import logging
from typing import Optional

import httpx
import redis.asyncio as redis
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from motor.motor_asyncio import AsyncIOMotorDatabase

from onecode.core import config
from onecode.core.cache import create_redis_client
from onecode.core.database import create_mongo_client, ensure_indexes, get_database
from onecode.core.errors import ServiceError
from onecode.core.logging_setup import configure_logging
from onecode.dependencies import Services
from onecode.exercises.compiler import create_http_client
from onecode.exercises.router import router as exercises_router
from onecode.leaderboard.router import router as leaderboard_router
from onecode.system.health_router import router as health_router
from onecode.tracks.router import router as tracks_router
from onecode.users.router import router as users_router

logger = logging.getLogger(__name__)


def create_app(
    db: Optional[AsyncIOMotorDatabase] = None,
    redis_client: Optional[redis.Redis] = None,
    http_client: Optional[httpx.AsyncClient] = None,
    ensure_db_indexes: bool = True,
) -> FastAPI:
    """
    Build the app. Clients not passed in are created from configuration
    and closed on shutdown.
    """
    configure_logging()
    app = FastAPI(title="1Code Engine")

    mongo_client = None
    if db is None:
        mongo_client = create_mongo_client(config.MONGO_URL)
        db = get_database(mongo_client, config.MONGO_DB_NAME)
    owns_redis = redis_client is None
    if owns_redis:
        redis_client = create_redis_client(
            config.REDIS_HOST, config.REDIS_PORT, config.REDIS_PASSWORD, config.REDIS_DB
        )
    owns_http = http_client is None
    if owns_http:
        http_client = create_http_client()

    app.state.services = Services(db, redis_client, http_client)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(ServiceError)
    async def service_error_handler(request: Request, exc: ServiceError):
        return JSONResponse(
            status_code=exc.status_code,
            content=exc.to_envelope(include_diagnostics=config.DEV_MODE),
        )

    @app.on_event("startup")
    async def startup_event():
        if ensure_db_indexes:
            await ensure_indexes(db)
        logger.info("[APP] 1Code engine started")

    @app.on_event("shutdown")
    async def shutdown_event():
        if owns_http:
            await http_client.aclose()
        if owns_redis:
            await redis_client.aclose()
        if mongo_client is not None:
            mongo_client.close()
        logger.info("[APP] 1Code engine stopped")

    # ==================== ROUTER REGISTRATION ====================
    app.include_router(health_router)
    app.include_router(tracks_router)
    app.include_router(exercises_router)
    app.include_router(users_router)
    app.include_router(leaderboard_router)

    return app
