"""Invidious adapter: YouTube metadata from public Invidious instances.

Instances are tried in configured order until one answers; individual
instance failures are only logged.  Invidious exposes view and like counts
without an API key, so records land in the proxy (medium) tier.  The
strategy is registered but not part of the default YouTube chain.
"""

from __future__ import annotations

from typing import Any

import httpx

from reelscope.models.extraction import ContentRef, MappingResult
from reelscope.models.record import Author, CanonicalRecord, Platform, SourceKind
from reelscope.providers.base import HttpSourceAdapter
from reelscope.utils.errors import UpstreamFailureError
from reelscope.utils.normalizers import (
    dedupe_hashtags,
    engagement_rating,
    extract_hashtags,
    parse_count,
    parse_timestamp,
)


class InvidiousProvider(HttpSourceAdapter):
    """Query ``/api/v1/videos/<id>`` on each configured instance in turn."""

    platform = Platform.YOUTUBE
    source_kind = SourceKind.PROXY_API
    required_credential = None

    def __init__(self, http_client: httpx.AsyncClient, instances: list[str] | None = None) -> None:
        super().__init__(http_client)
        self._instances = [i.rstrip("/") for i in (instances or []) if i]

    def get_provider_name(self) -> str:
        return "invidious_api"

    def is_available(self) -> bool:
        return bool(self._instances)

    async def fetch(self, ref: ContentRef) -> Any:
        errors: list[str] = []
        for instance in self._instances:
            try:
                return await self._get_json(f"{instance}/api/v1/videos/{ref.content_id}")
            except UpstreamFailureError as exc:
                errors.append(f"{instance}: {exc.message}")
                self._logger.debug("invidious_instance_failed", instance=instance, error=exc.message)
        raise UpstreamFailureError(
            message="All Invidious instances failed: " + "; ".join(errors),
            provider_name=self.get_provider_name(),
        )

    def normalize(self, payload: Any, ref: ContentRef) -> MappingResult:
        if not isinstance(payload, dict) or not payload.get("title"):
            return MappingResult.parse_failure("Invidious payload has no title")

        title = payload.get("title") or ""
        description = payload.get("description") or ""
        views = parse_count(payload.get("viewCount"))
        likes = parse_count(payload.get("likeCount"))

        tags = extract_hashtags(title, description)
        if not tags and isinstance(payload.get("keywords"), list):
            tags = dedupe_hashtags(payload["keywords"])

        thumbnails = payload.get("videoThumbnails") or []
        thumbnail = thumbnails[0].get("url", "") if thumbnails and isinstance(thumbnails[0], dict) else ""
        avatars = payload.get("authorThumbnails") or []
        avatar = avatars[-1].get("url", "") if avatars and isinstance(avatars[-1], dict) else ""

        record = CanonicalRecord(
            content_id=ref.content_id,
            url=ref.url,
            platform=ref.platform,
            title=title,
            description=description,
            views=views,
            likes=likes,
            comments=payload.get("commentCount"),
            author=Author(
                username=payload.get("authorId") or payload.get("author"),
                display_name=payload.get("author"),
                follower_count=payload.get("subCountText"),
                verified=payload.get("authorVerified", False),
                avatar_url=avatar,
            ),
            hashtags=tags,
            published_at=parse_timestamp(payload.get("published")),
            duration_seconds=payload.get("lengthSeconds"),
            thumbnail_url=thumbnail,
            media_urls=(ref.canonical_url,),
            engagement_rating=engagement_rating(views, likes),
        )
        return MappingResult.success(record)

    def remediation(self, error: Exception) -> list[str]:
        if isinstance(error, UpstreamFailureError):
            return ["Check INVIDIOUS_INSTANCES points at reachable Invidious instances"]
        return []
