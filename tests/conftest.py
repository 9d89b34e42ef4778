"""Shared pytest fixtures for the reelscope test suite."""

from __future__ import annotations

import asyncio
from collections.abc import Callable
from pathlib import Path
from typing import Any

import httpx
import pytest

from reelscope.interfaces.source_adapter import ISourceAdapter
from reelscope.models.extraction import ContentRef, MappingResult
from reelscope.models.record import Author, CanonicalRecord, Platform, SourceKind
from reelscope.services.platform_detector import PlatformDetector

YOUTUBE_ID = "dQw4w9WgXcQ"
YOUTUBE_URL = f"https://www.youtube.com/watch?v={YOUTUBE_ID}"
TIKTOK_ID = "7234567890123456789"
TIKTOK_URL = f"https://www.tiktok.com/@dancer/video/{TIKTOK_ID}"


# ---------------------------------------------------------------------------
# Stub source adapter
# ---------------------------------------------------------------------------


class StubAdapter(ISourceAdapter):
    """Configurable in-memory strategy used by orchestrator tests.

    ``fetch_calls`` counts how often the orchestrator actually reached the
    transport step, so tests can assert that skipped strategies did no I/O.
    """

    def __init__(
        self,
        name: str,
        platform: Platform = Platform.YOUTUBE,
        source_kind: SourceKind = SourceKind.FIRST_PARTY_API,
        *,
        record: CanonicalRecord | None = None,
        mapping: MappingResult | None = None,
        error: Exception | None = None,
        available: bool = True,
        credential: str | None = None,
        delay: float = 0.0,
        hints: list[str] | None = None,
    ) -> None:
        self.name = name
        self.platform = platform
        self.source_kind = source_kind
        self.required_credential = credential
        self.record = record
        self.mapping = mapping
        self.error = error
        self.available = available
        self.delay = delay
        self.hints = list(hints or [])
        self.fetch_calls = 0

    def get_provider_name(self) -> str:
        return self.name

    def is_available(self) -> bool:
        return self.available

    async def fetch(self, ref: ContentRef) -> Any:
        self.fetch_calls += 1
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.error is not None:
            raise self.error
        return {"content_id": ref.content_id}

    def normalize(self, payload: Any, ref: ContentRef) -> MappingResult:
        if self.mapping is not None:
            return self.mapping
        record = self.record or make_record(ref.platform, ref.content_id, url=ref.url)
        return MappingResult.success(record)

    def remediation(self, error: Exception) -> list[str]:
        return list(self.hints)


def make_record(
    platform: Platform = Platform.YOUTUBE,
    content_id: str = YOUTUBE_ID,
    **overrides: Any,
) -> CanonicalRecord:
    """Build a canonical record with realistic engagement numbers."""
    fields: dict[str, Any] = {
        "content_id": content_id,
        "url": YOUTUBE_URL if platform is Platform.YOUTUBE else TIKTOK_URL,
        "platform": platform,
        "title": "Morning routine #fyp #dance",
        "description": "Filmed on a sunny day",
        "views": 120_000,
        "likes": 9_800,
        "comments": 412,
        "shares": 57,
        "author": Author(username="dancer", display_name="Dancer", follower_count=50_000),
        "hashtags": ("#fyp", "#dance"),
        "duration_seconds": 65,
    }
    fields.update(overrides)
    return CanonicalRecord(**fields)


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def project_root() -> Path:
    """Return the project root directory."""
    return Path(__file__).parent.parent


@pytest.fixture
def detector() -> PlatformDetector:
    return PlatformDetector()


@pytest.fixture
def youtube_ref(detector: PlatformDetector) -> ContentRef:
    return detector.detect(YOUTUBE_URL)


@pytest.fixture
def tiktok_ref(detector: PlatformDetector) -> ContentRef:
    return detector.detect(TIKTOK_URL)


@pytest.fixture
def sample_record() -> CanonicalRecord:
    return make_record()


@pytest.fixture
def record_factory() -> Callable[..., CanonicalRecord]:
    """Factory fixture: ``record_factory(Platform.TIKTOK, "123", views=0)``."""
    return make_record


@pytest.fixture
def make_adapter() -> Callable[..., StubAdapter]:
    """Factory fixture: ``make_adapter("oembed", source_kind=SourceKind.OEMBED)``."""
    return StubAdapter


@pytest.fixture
def mock_http() -> Callable[[Callable[[httpx.Request], httpx.Response]], httpx.AsyncClient]:
    """Build an ``httpx.AsyncClient`` backed by a request handler.

    Usage::

        client = mock_http(lambda request: httpx.Response(200, json={...}))
    """

    def _build(handler: Callable[[httpx.Request], httpx.Response]) -> httpx.AsyncClient:
        return httpx.AsyncClient(transport=httpx.MockTransport(handler))

    return _build
