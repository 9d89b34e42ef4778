"""Canonical content record produced by every extraction strategy.

Defines enums and Pydantic v2 models for the platform-agnostic metadata
record.  All models use frozen config so a record handed out by the
orchestrator or the cache cannot be mutated by callers; adapters and the
quality classifier derive new copies via ``model_copy(update={...})``.

Count coercion is enforced here, not in each adapter: the ``views``,
``likes``, ``comments``, ``shares`` and ``follower_count`` validators run
every raw value through :func:`reelscope.utils.normalizers.parse_count`,
so ``"12.3K"``, ``"1,204"``, ``None`` and ``NaN`` all land as non-negative
integers regardless of which upstream produced them.
"""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from reelscope.utils.normalizers import (
    MAX_HASHTAGS,
    dedupe_hashtags,
    parse_count,
    parse_duration,
)


class Platform(str, Enum):  # noqa: UP042
    """Content platforms known to the platform detector."""

    YOUTUBE = "youtube"
    TIKTOK = "tiktok"


class QualityTier(str, Enum):  # noqa: UP042
    """Trust tier derived from the strategy that produced a record.

    HIGH:   first-party authenticated API
    MEDIUM: third-party proxy API, or scraping that recovered real counts
    BASIC:  oEmbed, or scraping that recovered no counts
    """

    HIGH = "high"
    MEDIUM = "medium"
    BASIC = "basic"


class SourceKind(str, Enum):  # noqa: UP042
    """Category of an extraction strategy, in descending trust order."""

    FIRST_PARTY_API = "first_party_api"
    PROXY_API = "proxy_api"
    SCRAPE = "scrape"
    OEMBED = "oembed"
    LOCAL_FILE = "local_file"


class Author(BaseModel):
    """The account that published a piece of content.

    Every field is always populated; upstreams that omit a field get the
    defaults below rather than ``None``.
    """

    model_config = ConfigDict(frozen=True)

    username: str = "unknown"
    display_name: str = "unknown"
    follower_count: int = 0
    verified: bool = False
    avatar_url: str = ""
    bio: str = ""

    @field_validator("follower_count", mode="before")
    @classmethod
    def _coerce_followers(cls, value: Any) -> int:
        return parse_count(value)

    @field_validator("verified", mode="before")
    @classmethod
    def _coerce_verified(cls, value: Any) -> bool:
        if isinstance(value, str):
            return value.strip().lower() in ("1", "true", "yes")
        return bool(value)

    @field_validator("username", "display_name", mode="before")
    @classmethod
    def _default_names(cls, value: Any) -> str:
        text = str(value).strip() if value is not None else ""
        return text or "unknown"

    @field_validator("avatar_url", "bio", mode="before")
    @classmethod
    def _default_text(cls, value: Any) -> str:
        return str(value) if value is not None else ""


class CanonicalRecord(BaseModel):
    """Normalized, platform-agnostic representation of one piece of content.

    ``quality_tier``, ``is_authentic`` and ``provenance`` are stamped by the
    orchestrator after the quality classifier runs; adapters leave the
    defaults in place.
    """

    model_config = ConfigDict(frozen=True)

    content_id: str
    url: str
    platform: Platform
    title: str = ""
    description: str = ""
    views: int = 0
    likes: int = 0
    comments: int = 0
    shares: int = 0
    author: Author = Field(default_factory=Author)
    hashtags: tuple[str, ...] = ()
    published_at: datetime | None = None
    duration_seconds: int = 0
    thumbnail_url: str = ""
    media_urls: tuple[str, ...] = ()
    engagement_rating: int = Field(default=0, ge=0, le=5)
    is_authentic: bool = False
    quality_tier: QualityTier = QualityTier.BASIC
    provenance: str = ""
    # Sub-lookups that failed independently of the main lookup, e.g.
    # "channel lookup failed: HTTP 403".
    notes: tuple[str, ...] = ()

    @field_validator("views", "likes", "comments", "shares", mode="before")
    @classmethod
    def _coerce_counts(cls, value: Any) -> int:
        return parse_count(value)

    @field_validator("duration_seconds", mode="before")
    @classmethod
    def _coerce_duration(cls, value: Any) -> int:
        return parse_duration(value)

    @field_validator("hashtags", mode="before")
    @classmethod
    def _cap_hashtags(cls, value: Any) -> tuple[str, ...]:
        if not value:
            return ()
        return tuple(dedupe_hashtags(list(value), limit=MAX_HASHTAGS))

    @field_validator("title", "description", "thumbnail_url", mode="before")
    @classmethod
    def _coerce_text(cls, value: Any) -> str:
        return str(value) if value is not None else ""

    @property
    def has_engagement(self) -> bool:
        """``True`` when at least one engagement count is non-zero."""
        return any((self.views, self.likes, self.comments, self.shares))
