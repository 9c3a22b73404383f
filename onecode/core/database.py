"""
MongoDB access boundary

Collections used by the engine:
    exercises        immutable exercise catalogue (hidden tests included)
    tracks           immutable track catalogue
    users            one profile row per user
    user_ranks       precomputed global/weekly ranks
    user_tracks      joined tracks, unique per (user_id, track_id)
    user_activity    append-only submission events
    user_exercises   completion records, unique per (user_id, exercise_id)

pymongo raises loosely typed exceptions; they are classified into a
StoreError with a StoreErrorKind here and nowhere else.
"""

import logging
from contextlib import contextmanager
from enum import Enum
from typing import Optional

from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorDatabase
from pymongo.errors import DuplicateKeyError, PyMongoError

logger = logging.getLogger(__name__)

DUPLICATE_KEY_CODE = 11000


class StoreErrorKind(str, Enum):
    UNIQUE_VIOLATION = "UNIQUE_VIOLATION"
    OTHER = "OTHER"


class StoreError(Exception):
    def __init__(self, kind: StoreErrorKind, code: Optional[int] = None, details: Optional[str] = None):
        super().__init__(details or kind.value)
        self.kind = kind
        self.code = code
        self.details = details

    @property
    def is_unique_violation(self) -> bool:
        return self.kind is StoreErrorKind.UNIQUE_VIOLATION

    @property
    def hint(self) -> Optional[str]:
        return str(self.code) if self.code is not None else self.kind.value


def classify_store_error(exc: PyMongoError) -> StoreError:
    code = getattr(exc, "code", None)
    if isinstance(exc, DuplicateKeyError) or code == DUPLICATE_KEY_CODE:
        return StoreError(StoreErrorKind.UNIQUE_VIOLATION, code=DUPLICATE_KEY_CODE, details=str(exc))
    return StoreError(StoreErrorKind.OTHER, code=code, details=str(exc))


@contextmanager
def store_errors():
    """Re-raise any pymongo failure inside the block as a classified StoreError"""
    try:
        yield
    except PyMongoError as exc:
        raise classify_store_error(exc) from exc


# ==================== CONNECTION ====================

def create_mongo_client(url: str) -> AsyncIOMotorClient:
    return AsyncIOMotorClient(url)


def get_database(client: AsyncIOMotorClient, name: str) -> AsyncIOMotorDatabase:
    return client[name]


# ==================== INDEXES ====================

async def ensure_indexes(db: AsyncIOMotorDatabase) -> None:
    """Create indexes the engine relies on for uniqueness and lookups"""
    await db.exercises.create_index("id", unique=True)
    await db.exercises.create_index("track_id")

    await db.tracks.create_index("id", unique=True)

    await db.users.create_index("user_id", unique=True)
    await db.user_ranks.create_index("user_id", unique=True)
    await db.user_tracks.create_index([("user_id", 1), ("track_id", 1)], unique=True)

    await db.user_activity.create_index([("user_id", 1), ("created_at", -1)])

    # One completion record per (user, exercise); concurrent first submissions rely on this
    await db.user_exercises.create_index([("user_id", 1), ("exercise_id", 1)], unique=True)
    await db.user_exercises.create_index([("user_id", 1), ("track_id", 1), ("is_completed", 1)])

    logger.info("[DB] Indexes ensured")
