import json
import logging
from typing import Any, Optional

from onecode.core.cache import CacheStore
from onecode.core.config import GLOBAL_LEADERBOARD_KEY, WEEKLY_LEADERBOARD_KEY

logger = logging.getLogger(__name__)


class LeaderboardService:
    """Read-only passthrough of the top 20 blobs an external job precomputes"""

    def __init__(self, cache: CacheStore):
        self._cache = cache

    async def global_top20(self) -> Optional[Any]:
        return await self._read_blob(GLOBAL_LEADERBOARD_KEY)

    async def weekly_top20(self) -> Optional[Any]:
        return await self._read_blob(WEEKLY_LEADERBOARD_KEY)

    async def _read_blob(self, key: str) -> Optional[Any]:
        raw = await self._cache.get_raw(key)
        if raw is None:
            logger.info("[LEADERBOARD] No cached board at %s", key)
            return None
        try:
            return json.loads(raw)
        except ValueError:
            return raw
