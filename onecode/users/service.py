"""
User profiles and ranks

Identifiers arrive already verified; this module only stores profiles.
"""

import logging
from datetime import datetime
from typing import Optional

from motor.motor_asyncio import AsyncIOMotorDatabase

from onecode.core.database import StoreError, store_errors
from onecode.core.errors import Conflict, Duplicate, NotFound
from onecode.core.messages import ERROR_MESSAGES
from onecode.progress.tracker import ProgressTracker

logger = logging.getLogger(__name__)


class UserService:
    def __init__(self, db: AsyncIOMotorDatabase, progress: ProgressTracker):
        self._db = db
        self._progress = progress

    async def create_user(self, user_id: str) -> Optional[dict]:
        """
        Create the user's profile row.
        Returns None when the profile already exists.
        """
        doc = {
            "user_id": user_id,
            "longest_streak": 0,
            "streak": 0,
            "total_points": 0,
            "created_at": datetime.utcnow(),
        }
        try:
            with store_errors():
                await self._db.users.insert_one(doc)
        except StoreError as e:
            if e.is_unique_violation:
                logger.warning("[USERS] User with UID already exists in users collection")
                return None
            logger.error("[USERS] Db error has occurred while creating %s: %s", user_id, e)
            raise Conflict(ERROR_MESSAGES["unable_to_create_user"], hint=e.hint, details=e.details)

        logger.info("[USERS] User with uid %s, created successfully!", user_id)
        return {k: v for k, v in doc.items() if k != "_id"}

    async def count_users(self) -> int:
        try:
            with store_errors():
                return await self._db.users.count_documents({})
        except StoreError as e:
            raise Conflict(ERROR_MESSAGES["unable_to_create_user"], hint=e.hint, details=e.details)

    async def create_user_ranks(self, user_id: str, users_count: int) -> None:
        """New users start ranked last on both boards"""
        try:
            with store_errors():
                await self._db.user_ranks.insert_one({
                    "user_id": user_id,
                    "global_rank": users_count,
                    "weekly_rank": users_count,
                })
        except StoreError as e:
            if e.is_unique_violation:
                raise Duplicate(ERROR_MESSAGES["user_already_created"], hint=e.hint, details=e.details)
            raise Conflict(ERROR_MESSAGES["unable_to_create_user"], hint=e.hint, details=e.details)

    async def register(self, user_id: str) -> dict:
        user = await self.create_user(user_id)
        users_count = await self.count_users()
        await self.create_user_ranks(user_id, users_count)

        user = user or {}
        return {
            "longestStreak": user.get("longest_streak", 0),
            "streak": user.get("streak", 0),
            "totalPoints": user.get("total_points", 0),
            "globalRank": users_count,
            "weeklyRank": users_count,
        }

    async def get_profile(self, user_id: str) -> dict:
        try:
            with store_errors():
                user = await self._db.users.find_one({"user_id": user_id}, {"_id": 0})
                ranks = await self._db.user_ranks.find_one({"user_id": user_id}, {"_id": 0})
        except StoreError as e:
            logger.error("[USERS] Unable to fetch profile of %s", user_id)
            raise Conflict(ERROR_MESSAGES["unable_to_fetch_user"], hint=e.hint, details=e.details)

        if not user:
            raise NotFound(ERROR_MESSAGES["user_profile_not_found"])

        ranks = ranks or {}
        stats = await self._progress.user_stats(user_id)
        return {
            "uid": user_id,
            "globalRank": ranks.get("global_rank"),
            "weeklyRank": ranks.get("weekly_rank"),
            **stats,
        }
