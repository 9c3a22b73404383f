"""
Completion records: one row per (user_id, exercise_id)

Lifecycle: absent -> is_completed=False -> is_completed=True.
Completed rows are frozen; update() only matches rows that are still open.
"""

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from motor.motor_asyncio import AsyncIOMotorDatabase

from onecode.core.database import StoreError, store_errors
from onecode.core.errors import AlreadyProcessed, Conflict
from onecode.core.messages import ERROR_MESSAGES

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CompletionRecord:
    user_id: str
    exercise_id: str
    is_completed: bool
    points_earned: int
    track_id: Optional[str] = None
    users_code: Optional[str] = None
    updated_at: Optional[datetime] = None

    @classmethod
    def from_document(cls, doc: dict) -> "CompletionRecord":
        return cls(
            user_id=doc["user_id"],
            exercise_id=doc["exercise_id"],
            is_completed=bool(doc.get("is_completed", False)),
            points_earned=int(doc.get("points_earned", 0) or 0),
            track_id=doc.get("track_id"),
            users_code=doc.get("users_code"),
            updated_at=doc.get("updated_at"),
        )


class CompletionRecordManager:
    def __init__(self, db: AsyncIOMotorDatabase):
        self._db = db

    async def read(self, user_id: str, exercise_id: str) -> Optional[CompletionRecord]:
        """Advisory lookup: absence and store errors both resolve to None"""
        try:
            with store_errors():
                doc = await self._db.user_exercises.find_one(
                    {"user_id": user_id, "exercise_id": exercise_id},
                    {"_id": 0},
                )
        except StoreError as e:
            logger.warning("[RECORDS] Lookup failed for user %s exercise %s: %s", user_id, exercise_id, e)
            return None

        if not doc:
            return None
        return CompletionRecord.from_document(doc)

    async def create(
        self,
        user_id: str,
        exercise_id: str,
        track_id: Optional[str],
        users_code: str,
        is_completed: bool,
        points_earned: int,
    ) -> bool:
        """
        Insert the first record for the pair.

        Raises AlreadyProcessed when a concurrent submission created it first,
        Conflict on any other store error.
        """
        now = datetime.utcnow()
        try:
            with store_errors():
                await self._db.user_exercises.insert_one({
                    "user_id": user_id,
                    "exercise_id": exercise_id,
                    "track_id": track_id,
                    "users_code": users_code,
                    "is_completed": is_completed,
                    "points_earned": points_earned,
                    "created_at": now,
                    "updated_at": now,
                })
        except StoreError as e:
            if e.is_unique_violation:
                logger.warning("[RECORDS] Record for user %s exercise %s already created", user_id, exercise_id)
                raise AlreadyProcessed(ERROR_MESSAGES["db_error"], hint=e.hint, details=e.details)
            logger.error("[RECORDS] Unable to create record for exercise %s for %s", exercise_id, user_id)
            raise Conflict(ERROR_MESSAGES["unable_to_create_activity"], hint=e.hint, details=e.details)
        return True

    async def update(
        self,
        user_id: str,
        exercise_id: str,
        users_code: str,
        is_completed: bool,
        points_earned: int,
    ) -> bool:
        """
        Update an open record in place.

        Raises AlreadyProcessed when no open record matched (completed by a
        concurrent submission), Conflict on store errors.
        """
        try:
            with store_errors():
                result = await self._db.user_exercises.update_one(
                    {"user_id": user_id, "exercise_id": exercise_id, "is_completed": False},
                    {"$set": {
                        "users_code": users_code,
                        "is_completed": is_completed,
                        "points_earned": points_earned,
                        "updated_at": datetime.utcnow(),
                    }},
                )
        except StoreError as e:
            logger.error("[RECORDS] Unable to update record for exercise %s for %s", exercise_id, user_id)
            raise Conflict(ERROR_MESSAGES["unable_to_create_activity"], hint=e.hint, details=e.details)

        if result.matched_count == 0:
            logger.warning("[RECORDS] No open record for user %s exercise %s", user_id, exercise_id)
            raise AlreadyProcessed(ERROR_MESSAGES["db_error"])
        return True
