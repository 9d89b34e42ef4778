"""RapidAPI ``youtube-v31`` proxy adapter (medium trust).

The proxy mirrors the Data API ``videos`` resource, so the mapping is
shared with :mod:`reelscope.providers.youtube.data_api_provider`.  No
channel lookup is made; author details come from the video snippet.
"""

from __future__ import annotations

from typing import Any

import httpx

from reelscope.models.extraction import ContentRef, MappingResult
from reelscope.models.record import Platform, SourceKind
from reelscope.providers.base import HttpSourceAdapter
from reelscope.providers.youtube.mapping import map_video_resource
from reelscope.utils.errors import MissingCredentialError, UpstreamFailureError

_HOST = "youtube-v31.p.rapidapi.com"


class YouTubeProxyAPIProvider(HttpSourceAdapter):
    """YouTube metadata through RapidAPI, authenticated with ``RAPIDAPI_KEY``."""

    platform = Platform.YOUTUBE
    source_kind = SourceKind.PROXY_API
    required_credential = "RAPIDAPI_KEY"

    def __init__(self, http_client: httpx.AsyncClient, api_key: str | None = None) -> None:
        super().__init__(http_client)
        self._api_key = api_key or ""

    def get_provider_name(self) -> str:
        return "proxy_api"

    def is_available(self) -> bool:
        return bool(self._api_key)

    async def fetch(self, ref: ContentRef) -> Any:
        return await self._get_json(
            f"https://{_HOST}/videos",
            params={"part": "snippet,statistics", "id": ref.content_id},
            headers={"X-RapidAPI-Key": self._api_key, "X-RapidAPI-Host": _HOST},
        )

    def normalize(self, payload: Any, ref: ContentRef) -> MappingResult:
        if not isinstance(payload, dict):
            return MappingResult.parse_failure("proxy response is not an object")
        items = payload.get("items")
        if not isinstance(items, list) or not items or not isinstance(items[0], dict):
            return MappingResult.parse_failure("proxy response has no items")
        if not isinstance(items[0].get("snippet"), dict):
            return MappingResult.parse_failure("proxy item has no snippet")
        return MappingResult.success(map_video_resource(items[0], ref))

    def remediation(self, error: Exception) -> list[str]:
        if isinstance(error, MissingCredentialError):
            return ["Configure RAPIDAPI_KEY to enable the RapidAPI YouTube proxy"]
        if isinstance(error, UpstreamFailureError) and error.status_code in (403, 429):
            return ["Verify RapidAPI subscription and quota limits"]
        return []
