# onecode/dependencies.py

import uuid

import httpx
import redis.asyncio as redis
from fastapi import Header, Request
from motor.motor_asyncio import AsyncIOMotorDatabase

from onecode.core.cache import CacheStore
from onecode.core.errors import BadInput, Unauthorized
from onecode.core.messages import ERROR_MESSAGES
from onecode.exercises.compiler import ExecutionClient
from onecode.exercises.evaluator import SubmissionEvaluator
from onecode.exercises.records import CompletionRecordManager
from onecode.exercises.service import ExerciseService
from onecode.leaderboard.service import LeaderboardService
from onecode.progress.tracker import ProgressTracker
from onecode.tracks.service import TrackService
from onecode.users.service import UserService


class Services:
    """Every component, built once per app with its collaborators injected"""

    def __init__(self, db: AsyncIOMotorDatabase, redis_client: redis.Redis, http_client: httpx.AsyncClient):
        self.db = db
        self.cache = CacheStore(redis_client)
        self.exercises = ExerciseService(db, self.cache)
        self.records = CompletionRecordManager(db)
        self.compiler = ExecutionClient(http_client)
        self.evaluator = SubmissionEvaluator(self.exercises, self.records, self.compiler, self.cache)
        self.progress = ProgressTracker(db, self.cache)
        self.tracks = TrackService(db)
        self.users = UserService(db, self.progress)
        self.leaderboard = LeaderboardService(self.cache)


# ==================== DEPENDENCY FUNCTIONS ====================

def get_services(request: Request) -> Services:
    return request.app.state.services


async def get_current_user_id(x_user_id: str = Header(None)) -> str:
    """
    User id verified upstream, forwarded in X-User-Id
    """
    if not x_user_id:
        raise Unauthorized(ERROR_MESSAGES["missing_user_id"])
    try:
        return str(uuid.UUID(x_user_id))
    except ValueError:
        raise BadInput(ERROR_MESSAGES["invalid_user_id"])
