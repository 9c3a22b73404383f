"""
Track catalogue and enrolment
"""

import logging
from datetime import datetime
from typing import List

from motor.motor_asyncio import AsyncIOMotorDatabase

from onecode.core.config import TRACKS_FETCH_LIMIT
from onecode.core.database import StoreError, store_errors
from onecode.core.errors import Conflict, Duplicate, NotFound
from onecode.core.messages import ERROR_MESSAGES

logger = logging.getLogger(__name__)


class TrackService:
    def __init__(self, db: AsyncIOMotorDatabase):
        self._db = db

    async def list_tracks(self) -> List[dict]:
        """Available tracks, capped at TRACKS_FETCH_LIMIT"""
        try:
            with store_errors():
                docs = await self._db.tracks.find({}, {"_id": 0}).limit(TRACKS_FETCH_LIMIT).to_list(
                    length=TRACKS_FETCH_LIMIT
                )
        except StoreError as e:
            logger.error("[TRACKS] Unable to fetch all available tracks")
            raise Conflict(ERROR_MESSAGES["unable_to_fetch_tracks"], hint=e.hint, details=e.details)

        if not docs:
            logger.error("[TRACKS] No tracks available")
            raise Conflict(ERROR_MESSAGES["unable_to_fetch_tracks"])

        logger.info("[TRACKS] Fetched all the available %s tracks", len(docs))
        return [
            {
                "id": d.get("id"),
                "name": d.get("name"),
                "tags": d.get("tags", []),
                "logo": d.get("logo"),
            }
            for d in docs
        ]

    async def join_track(self, user_id: str, track_id: str) -> bool:
        """Enrol the user in an existing track. Joining twice is a Duplicate."""
        try:
            with store_errors():
                track = await self._db.tracks.find_one({"id": track_id}, {"_id": 0, "id": 1})
        except StoreError as e:
            logger.error("[TRACKS] Unable to look up track w/ id %s", track_id)
            raise Conflict(ERROR_MESSAGES["unable_to_join_track"], hint=e.hint, details=e.details)

        if not track:
            logger.error("[TRACKS] Track not found w/ id %s", track_id)
            raise NotFound(ERROR_MESSAGES["track_not_found"])

        try:
            with store_errors():
                await self._db.user_tracks.insert_one({
                    "user_id": user_id,
                    "track_id": track_id,
                    "joined_at": datetime.utcnow(),
                })
        except StoreError as e:
            if e.is_unique_violation:
                logger.error("[TRACKS] User %s has already joined track w/ id %s", user_id, track_id)
                raise Duplicate(ERROR_MESSAGES["track_already_joined"], hint=e.hint, details=e.details)
            logger.error("[TRACKS] Unable to join track w/ id %s for user w/ %s uid", track_id, user_id)
            raise Conflict(ERROR_MESSAGES["unable_to_join_track"], hint=e.hint, details=e.details)

        logger.info("[TRACKS] User %s joined track %s", user_id, track_id)
        return True
