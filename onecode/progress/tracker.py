"""
Progress tracker

Derived per-user views (points, streaks, track completion) computed from
MongoDB and cached in Redis. Only total points is invalidated on writes;
the rest expire by TTL.
"""

import logging
from contextlib import contextmanager
from datetime import date, datetime
from typing import Callable, Optional

from motor.motor_asyncio import AsyncIOMotorDatabase

from onecode.core.cache import (
    CacheStore,
    profile_created_key,
    solved_count_key,
    streak_key,
    total_points_key,
    track_exercise_count_key,
    track_progress_key,
)
from onecode.core.config import (
    PROFILE_CREATED_TTL,
    SOLVED_COUNT_TTL,
    STREAK_TTL,
    TOTAL_POINTS_TTL,
    TRACK_EXERCISE_COUNT_TTL,
    TRACK_PROGRESS_TTL,
)
from onecode.core.database import StoreError, store_errors
from onecode.core.errors import Conflict, NotFound
from onecode.core.messages import ERROR_MESSAGES
from onecode.progress.streaks import Streaks, compute_streaks

logger = logging.getLogger(__name__)


def _utc_today() -> date:
    return datetime.utcnow().date()


def _decode_count(value) -> int:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise TypeError(f"expected a number, got {type(value).__name__}")
    return int(value)


def _decode_percentage(value) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise TypeError(f"expected a number, got {type(value).__name__}")
    return float(value)


def _decode_streaks(data) -> Streaks:
    if not isinstance(data, dict):
        raise TypeError(f"expected an object, got {type(data).__name__}")
    return Streaks(current=_decode_count(data["current"]), longest=_decode_count(data["longest"]))


@contextmanager
def _conflict_on_store_error(action: str, subject: str):
    try:
        with store_errors():
            yield
    except StoreError as e:
        logger.error("[PROGRESS] Unable to %s for %s: %s", action, subject, e)
        raise Conflict(ERROR_MESSAGES["unable_to_fetch_progress"], hint=e.hint, details=e.details) from e


class ProgressTracker:
    def __init__(self, db: AsyncIOMotorDatabase, cache: CacheStore, today: Callable[[], date] = _utc_today):
        self._db = db
        self._cache = cache
        self._today = today

    # ==================== POINTS ====================

    async def total_points(self, user_id: str) -> int:
        return await self._cache.fetch_or_compute(
            total_points_key(user_id), TOTAL_POINTS_TTL, lambda: self._sum_points(user_id), decode=_decode_count
        )

    async def _sum_points(self, user_id: str) -> int:
        with _conflict_on_store_error("sum points", user_id):
            docs = await self._db.user_exercises.find(
                {"user_id": user_id}, {"_id": 0, "points_earned": 1}
            ).to_list(length=None)
        return sum(int(d.get("points_earned", 0) or 0) for d in docs)

    # ==================== TRACKS ====================

    async def track_exercise_count(self, track_id: str) -> int:
        return await self._cache.fetch_or_compute(
            track_exercise_count_key(track_id),
            TRACK_EXERCISE_COUNT_TTL,
            lambda: self._count_track_exercises(track_id),
            decode=_decode_count,
        )

    async def _count_track_exercises(self, track_id: str) -> int:
        with _conflict_on_store_error("count exercises", track_id):
            return await self._db.exercises.count_documents({"track_id": track_id})

    async def track_completion_percentage(self, user_id: str, track_id: str) -> float:
        """Completed records in the track over exercises in the track, as a percentage"""
        return await self._cache.fetch_or_compute(
            track_progress_key(user_id, track_id),
            TRACK_PROGRESS_TTL,
            lambda: self._compute_track_percentage(user_id, track_id),
            decode=_decode_percentage,
        )

    async def _compute_track_percentage(self, user_id: str, track_id: str) -> float:
        total = await self.track_exercise_count(track_id)
        if total == 0:
            return 0.0
        with _conflict_on_store_error("count completed", user_id):
            completed = await self._db.user_exercises.count_documents(
                {"user_id": user_id, "track_id": track_id, "is_completed": True}
            )
        return completed / total * 100

    async def track_progress(self, user_id: str, track_id: str) -> dict:
        return {
            "trackId": track_id,
            "totalExercises": await self.track_exercise_count(track_id),
            "completedPercentage": await self.track_completion_percentage(user_id, track_id),
        }

    # ==================== STREAKS ====================

    async def streaks(self, user_id: str) -> Streaks:
        return await self._cache.fetch_or_compute(
            streak_key(user_id), STREAK_TTL, lambda: self._compute_streaks(user_id), decode=_decode_streaks
        )

    async def _compute_streaks(self, user_id: str) -> dict:
        with _conflict_on_store_error("read activity", user_id):
            docs = await self._db.user_activity.find(
                {"user_id": user_id}, {"_id": 0, "created_at": 1}
            ).to_list(length=None)
        result = compute_streaks((d.get("created_at") for d in docs), self._today())
        return {"current": result.current, "longest": result.longest}

    # ==================== PROFILE COUNTERS ====================

    async def exercises_solved_count(self, user_id: str) -> int:
        return await self._cache.fetch_or_compute(
            solved_count_key(user_id), SOLVED_COUNT_TTL, lambda: self._count_solved(user_id), decode=_decode_count
        )

    async def _count_solved(self, user_id: str) -> int:
        with _conflict_on_store_error("count solved", user_id):
            return await self._db.user_exercises.count_documents({"user_id": user_id, "is_completed": True})

    async def profile_created_at(self, user_id: str) -> Optional[str]:
        return await self._cache.fetch_or_compute(
            profile_created_key(user_id), PROFILE_CREATED_TTL, lambda: self._load_created_at(user_id)
        )

    async def _load_created_at(self, user_id: str) -> Optional[str]:
        with _conflict_on_store_error("read profile", user_id):
            doc = await self._db.users.find_one({"user_id": user_id}, {"_id": 0, "created_at": 1})
        if not doc:
            raise NotFound(ERROR_MESSAGES["user_profile_not_found"])
        created_at = doc.get("created_at")
        return created_at.isoformat() if isinstance(created_at, datetime) else created_at

    async def user_stats(self, user_id: str) -> dict:
        streaks = await self.streaks(user_id)
        return {
            "totalPoints": await self.total_points(user_id),
            "streak": streaks.current,
            "longestStreak": streaks.longest,
            "exercisesSolved": await self.exercises_solved_count(user_id),
            "createdAt": await self.profile_created_at(user_id),
        }
