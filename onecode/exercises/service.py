"""
Exercise catalogue and activity log
"""

import logging
from dataclasses import asdict, dataclass
from datetime import datetime
from typing import List, Optional

from motor.motor_asyncio import AsyncIOMotorDatabase

from onecode.core.cache import CacheStore, exercise_tests_key
from onecode.core.config import EXERCISE_TESTS_TTL
from onecode.core.database import StoreError, store_errors
from onecode.core.errors import Conflict, NotFound
from onecode.core.messages import ERROR_MESSAGES

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ExerciseTests:
    """Metadata needed to run and score a submission"""
    tests: str
    language: str
    min_points: int
    max_points: int
    track_id: Optional[str]


def _decode_exercise_tests(data: dict) -> ExerciseTests:
    if not isinstance(data, dict):
        raise TypeError("cached exercise tests must be an object")
    if not isinstance(data.get("tests"), str) or not isinstance(data.get("language"), str):
        raise TypeError("tests and language must be strings")
    track_id = data.get("track_id")
    if track_id is not None and not isinstance(track_id, str):
        raise TypeError("track_id must be a string")
    return ExerciseTests(
        tests=data["tests"],
        language=data["language"],
        min_points=int(data["min_points"]),
        max_points=int(data["max_points"]),
        track_id=track_id,
    )


class ExerciseService:
    def __init__(self, db: AsyncIOMotorDatabase, cache: CacheStore):
        self._db = db
        self._cache = cache

    async def list_track_exercises(self, track_id: str) -> List[dict]:
        """
        All exercises in a track.
        An empty track is reported the same way as a store error.
        """
        try:
            with store_errors():
                docs = await self._db.exercises.find(
                    {"track_id": track_id},
                    {"_id": 0, "id": 1, "name": 1, "level": 1, "max_points": 1},
                ).to_list(length=None)
        except StoreError as e:
            logger.error("[EXERCISES] Unable to fetch exercises from track w/ id %s", track_id)
            raise Conflict(ERROR_MESSAGES["unable_to_fetch_exercises"], hint=e.hint, details=e.details)

        if not docs:
            logger.error("[EXERCISES] No exercises in track w/ id %s", track_id)
            raise Conflict(ERROR_MESSAGES["unable_to_fetch_exercises"])

        logger.info("[EXERCISES] Fetched all the available (%s) exercises", len(docs))
        return [
            {
                "id": d.get("id"),
                "name": d.get("name"),
                "level": d.get("level", 0),
                "maxPoints": d.get("max_points", 0),
            }
            for d in docs
        ]

    async def get_exercise_details(self, exercise_id: str) -> dict:
        try:
            with store_errors():
                doc = await self._db.exercises.find_one(
                    {"id": exercise_id},
                    {"_id": 0, "id": 1, "name": 1, "max_points": 1, "min_points": 1,
                     "instructions": 1, "base_code": 1},
                )
        except StoreError as e:
            logger.error("[EXERCISES] Unable to fetch details of exercise w/ id %s", exercise_id)
            raise Conflict(ERROR_MESSAGES["unable_to_fetch_exercise_details"], hint=e.hint, details=e.details)

        if not doc:
            logger.error("[EXERCISES] Exercise not found w/ id %s", exercise_id)
            raise NotFound(ERROR_MESSAGES["exercise_not_found"])

        logger.info("[EXERCISES] Fetched details of exercise w/ id %s", exercise_id)
        return {
            "id": doc.get("id"),
            "name": doc.get("name"),
            "maxPoints": doc.get("max_points", 0),
            "minPoints": doc.get("min_points", 0),
            "instructions": doc.get("instructions"),
            "baseCode": doc.get("base_code"),
        }

    async def get_exercise_tests(self, exercise_id: str) -> ExerciseTests:
        """Hidden tests and scoring bounds, cached for a day"""
        return await self._cache.fetch_or_compute(
            exercise_tests_key(exercise_id),
            EXERCISE_TESTS_TTL,
            lambda: self._load_exercise_tests(exercise_id),
            decode=_decode_exercise_tests,
        )

    async def _load_exercise_tests(self, exercise_id: str) -> dict:
        try:
            with store_errors():
                doc = await self._db.exercises.find_one(
                    {"id": exercise_id},
                    {"_id": 0, "tests": 1, "language": 1, "min_points": 1, "max_points": 1, "track_id": 1},
                )
        except StoreError as e:
            logger.error("[EXERCISES] Unable to fetch tests of exercise w/ id %s", exercise_id)
            raise Conflict(ERROR_MESSAGES["unable_to_fetch_exercise_details"], hint=e.hint, details=e.details)

        if not doc:
            logger.error("[EXERCISES] Exercise not found w/ id %s", exercise_id)
            raise NotFound(ERROR_MESSAGES["exercise_not_found"])

        return asdict(ExerciseTests(
            tests=doc.get("tests") or "",
            language=doc.get("language") or "",
            min_points=int(doc.get("min_points", 0) or 0),
            max_points=int(doc.get("max_points", 0) or 0),
            track_id=doc.get("track_id"),
        ))

    async def create_user_activity(self, user_id: str, exercise_id: str, language: str) -> bool:
        """Append one submission event"""
        try:
            with store_errors():
                await self._db.user_activity.insert_one({
                    "user_id": user_id,
                    "exercise_id": exercise_id,
                    "language": language,
                    "created_at": datetime.utcnow(),
                })
        except StoreError as e:
            logger.error(
                "[EXERCISES] Unable to create user activity for user w/ %s id for exercise w/ %s id",
                user_id, exercise_id,
            )
            raise Conflict(ERROR_MESSAGES["unable_to_create_activity"], hint=e.hint, details=e.details)
        return True
