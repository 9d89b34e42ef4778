"""YouTube oEmbed adapter -- the keyless last resort.

oEmbed only exposes title, author and thumbnail; every count stays ``0``
and the record is classified ``basic`` (never authentic).
"""

from __future__ import annotations

from typing import Any

import httpx

from reelscope.models.extraction import ContentRef, MappingResult
from reelscope.models.record import Platform, SourceKind
from reelscope.providers.base import HttpSourceAdapter
from reelscope.providers.oembed import map_oembed_payload

_OEMBED_URL = "https://www.youtube.com/oembed"


class YouTubeOEmbedProvider(HttpSourceAdapter):
    platform = Platform.YOUTUBE
    source_kind = SourceKind.OEMBED
    required_credential = None

    def __init__(self, http_client: httpx.AsyncClient) -> None:
        super().__init__(http_client)

    def get_provider_name(self) -> str:
        return "oembed"

    def is_available(self) -> bool:
        return True

    async def fetch(self, ref: ContentRef) -> Any:
        return await self._get_json(
            _OEMBED_URL, params={"url": ref.canonical_url, "format": "json"}
        )

    def normalize(self, payload: Any, ref: ContentRef) -> MappingResult:
        return map_oembed_payload(payload, ref)
