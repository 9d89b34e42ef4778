"""YouTube Data API v3 adapter -- the first-party, highest-trust strategy.

Performs two calls: ``videos`` (snippet, statistics, contentDetails) and
``channels`` (snippet, statistics) for the uploader.  A failed channel
lookup does not fail the strategy; the record is returned as a partial
mapping with a note explaining which sub-lookup failed.
"""

from __future__ import annotations

from typing import Any

import httpx

from reelscope.models.extraction import ContentRef, MappingResult
from reelscope.models.record import Platform, SourceKind
from reelscope.providers.base import HttpSourceAdapter
from reelscope.providers.youtube.mapping import map_video_resource
from reelscope.utils.errors import MissingCredentialError, UpstreamFailureError

_API_BASE = "https://www.googleapis.com/youtube/v3"
_VIDEO_PARTS = "snippet,statistics,contentDetails"
_CHANNEL_PARTS = "snippet,statistics"


class YouTubeDataAPIProvider(HttpSourceAdapter):
    """First-party YouTube adapter authenticated with ``YOUTUBE_API_KEY``."""

    platform = Platform.YOUTUBE
    source_kind = SourceKind.FIRST_PARTY_API
    required_credential = "YOUTUBE_API_KEY"

    def __init__(self, http_client: httpx.AsyncClient, api_key: str | None = None) -> None:
        super().__init__(http_client)
        self._api_key = api_key or ""

    def get_provider_name(self) -> str:
        return "first_party_api"

    def is_available(self) -> bool:
        return bool(self._api_key)

    async def fetch(self, ref: ContentRef) -> dict[str, Any]:
        payload = await self._get_json(
            f"{_API_BASE}/videos",
            params={"part": _VIDEO_PARTS, "id": ref.content_id, "key": self._api_key},
        )
        items = payload.get("items") if isinstance(payload, dict) else None
        if not items:
            raise UpstreamFailureError(
                message=f"Video {ref.content_id} not found",
                provider_name=self.get_provider_name(),
                status_code=404,
            )

        video = items[0]
        channel: dict[str, Any] | None = None
        channel_error: str | None = None
        channel_id = (video.get("snippet") or {}).get("channelId")
        if channel_id:
            try:
                channel_payload = await self._get_json(
                    f"{_API_BASE}/channels",
                    params={"part": _CHANNEL_PARTS, "id": channel_id, "key": self._api_key},
                )
            except UpstreamFailureError as exc:
                channel_error = exc.message
                self._logger.warning(
                    "youtube_channel_lookup_failed",
                    channel_id=channel_id,
                    error=exc.message,
                )
            else:
                channel_items = channel_payload.get("items") or []
                if channel_items:
                    channel = channel_items[0]
                else:
                    channel_error = f"channel {channel_id} not found"

        return {"video": video, "channel": channel, "channel_error": channel_error}

    def normalize(self, payload: Any, ref: ContentRef) -> MappingResult:
        if not isinstance(payload, dict) or not isinstance(payload.get("video"), dict):
            return MappingResult.parse_failure("videos payload missing")
        video = payload["video"]
        if not isinstance(video.get("snippet"), dict):
            return MappingResult.parse_failure("videos resource has no snippet")

        record = map_video_resource(video, ref, channel=payload.get("channel"))
        if payload.get("channel_error"):
            return MappingResult.partial(
                record, f"channel lookup failed: {payload['channel_error']}"
            )
        return MappingResult.success(record)

    def remediation(self, error: Exception) -> list[str]:
        if isinstance(error, MissingCredentialError):
            return ["Configure YOUTUBE_API_KEY to enable the YouTube Data API"]
        if not isinstance(error, UpstreamFailureError):
            return []

        text = error.message.lower()
        if "disabled" in text or "not been used" in text:
            return ["Enable YouTube Data API v3 in Google Cloud Console"]
        if "quota" in text:
            return ["YouTube Data API quota exhausted; wait for the daily reset or raise the quota"]
        if "api key not valid" in text or error.status_code in (400, 401):
            return ["Check that YOUTUBE_API_KEY is a valid YouTube Data API key"]
        if error.status_code == 403:
            return ["Verify the API key restrictions allow the YouTube Data API"]
        return []
