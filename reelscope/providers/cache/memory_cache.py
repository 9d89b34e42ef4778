"""In-memory record cache using cachetools.TTLCache.

Simple, fast cache suitable for single-process deployments.  Can be
swapped for Redis or another backend via the IRecordCache interface.
"""

from __future__ import annotations

import time

import structlog
from cachetools import TTLCache

from reelscope.interfaces.cache_provider import IRecordCache
from reelscope.models.record import CanonicalRecord, QualityTier

logger = structlog.get_logger(logger_name=__name__)


class MemoryRecordCache(IRecordCache):
    """Fingerprint-keyed TTL cache that only admits non-basic records.

    Records are deep-copied on the way in and on the way out so no caller
    ever holds a reference to the stored instance.

    Parameters
    ----------
    max_size:
        Maximum number of entries before the least-recently-used entry
        is evicted.
    ttl:
        Time-to-live in seconds for cache entries.
    """

    def __init__(self, max_size: int = 1000, ttl: int = 3600) -> None:
        self._cache: TTLCache[str, tuple[CanonicalRecord, float]] = TTLCache(
            maxsize=max_size, ttl=ttl
        )

    # ------------------------------------------------------------------
    # IRecordCache implementation
    # ------------------------------------------------------------------

    async def get(self, fingerprint: str) -> CanonicalRecord | None:
        entry = self._cache.get(fingerprint)
        if entry is None:
            logger.debug("cache_miss", fingerprint=fingerprint)
            return None
        logger.debug("cache_hit", fingerprint=fingerprint)
        record, _inserted_at = entry
        return record.model_copy(deep=True)

    async def put(self, fingerprint: str, record: CanonicalRecord) -> bool:
        """Store *record*; ``basic`` records are refused and ``False`` returned."""
        if record.quality_tier is QualityTier.BASIC:
            logger.debug("cache_reject_basic", fingerprint=fingerprint)
            return False
        self._cache[fingerprint] = (record.model_copy(deep=True), time.time())
        logger.debug("cache_set", fingerprint=fingerprint, tier=record.quality_tier.value)
        return True

    async def delete(self, fingerprint: str) -> None:
        self._cache.pop(fingerprint, None)
        logger.debug("cache_delete", fingerprint=fingerprint)

    async def exists(self, fingerprint: str) -> bool:
        return fingerprint in self._cache

    async def clear(self) -> None:
        self._cache.clear()

    def __len__(self) -> int:
        return len(self._cache)
