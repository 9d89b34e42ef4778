"""Unit tests for the in-memory record cache."""

from __future__ import annotations

import pytest

from reelscope.models.record import CanonicalRecord, Platform, QualityTier
from reelscope.providers.cache.memory_cache import MemoryRecordCache


def _record(tier: QualityTier = QualityTier.HIGH, **overrides) -> CanonicalRecord:
    fields = {
        "content_id": "dQw4w9WgXcQ",
        "url": "https://www.youtube.com/watch?v=dQw4w9WgXcQ",
        "platform": Platform.YOUTUBE,
        "title": "Video",
        "views": 100,
        "hashtags": ("#one",),
        "quality_tier": tier,
    }
    fields.update(overrides)
    return CanonicalRecord(**fields)


class TestMemoryRecordCache:
    @pytest.fixture()
    def cache(self) -> MemoryRecordCache:
        return MemoryRecordCache(max_size=10, ttl=60)

    @pytest.mark.asyncio
    async def test_set_and_get(self, cache: MemoryRecordCache) -> None:
        record = _record()
        assert await cache.put("fp1", record) is True
        cached = await cache.get("fp1")
        assert cached == record

    @pytest.mark.asyncio
    async def test_get_missing_returns_none(self, cache: MemoryRecordCache) -> None:
        assert await cache.get("nonexistent") is None

    @pytest.mark.asyncio
    async def test_medium_tier_is_cached(self, cache: MemoryRecordCache) -> None:
        assert await cache.put("fp1", _record(QualityTier.MEDIUM)) is True
        assert await cache.exists("fp1") is True

    @pytest.mark.asyncio
    async def test_basic_tier_is_refused(self, cache: MemoryRecordCache) -> None:
        assert await cache.put("fp1", _record(QualityTier.BASIC)) is False
        assert await cache.get("fp1") is None
        assert len(cache) == 0

    @pytest.mark.asyncio
    async def test_returns_copies(self, cache: MemoryRecordCache) -> None:
        record = _record()
        await cache.put("fp1", record)
        first = await cache.get("fp1")
        second = await cache.get("fp1")
        assert first is not record
        assert first is not second
        assert first == second

    @pytest.mark.asyncio
    async def test_delete(self, cache: MemoryRecordCache) -> None:
        await cache.put("fp1", _record())
        await cache.delete("fp1")
        assert await cache.exists("fp1") is False
        # Deleting a missing key is a no-op.
        await cache.delete("fp1")

    @pytest.mark.asyncio
    async def test_clear(self, cache: MemoryRecordCache) -> None:
        await cache.put("fp1", _record())
        await cache.put("fp2", _record(content_id="other"))
        await cache.clear()
        assert len(cache) == 0

    @pytest.mark.asyncio
    async def test_max_size_evicts(self) -> None:
        cache = MemoryRecordCache(max_size=2, ttl=60)
        for i in range(3):
            await cache.put(f"fp{i}", _record(content_id=f"id{i}"))
        assert len(cache) == 2
