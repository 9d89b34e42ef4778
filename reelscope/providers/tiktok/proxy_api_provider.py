"""RapidAPI TikTok proxy adapter (medium trust).

Several RapidAPI listings wrap TikTok's private API.  They are tried in
configured order with the same key; the first one that returns a
recognisable item wins.  Response shapes vary:

* ``{"data": {"video": {...}, "author": {...}, "stats": {...}}}``
* ``{"data": {...item..., "author": {...}}}``
* ``{"video": {...}, "stats": {...}}`` or ``{"result": {...}}``

with counts under ``stats`` or ``statistics`` and the uploader under
``author`` or ``user``.
"""

from __future__ import annotations

from typing import Any

import httpx

from reelscope.models.extraction import ContentRef, MappingResult
from reelscope.models.record import Platform, SourceKind
from reelscope.providers.base import HttpSourceAdapter
from reelscope.providers.tiktok.mapping import as_dict, has_counts, map_item
from reelscope.utils.errors import MissingCredentialError, UpstreamFailureError

DEFAULT_ENDPOINTS: tuple[str, ...] = (
    "https://tiktok-scraper7.p.rapidapi.com/video/info",
    "https://tiktok-video-info1.p.rapidapi.com/get_video_info",
    "https://tiktok-api24.p.rapidapi.com/video/info",
)


def _locate(payload: dict[str, Any]) -> tuple[dict[str, Any], dict[str, Any], dict[str, Any]]:
    """Return ``(item, author, stats)`` from any supported response shape."""
    data = as_dict(payload.get("data"))
    item = (
        as_dict(data.get("video"))
        or as_dict(payload.get("video"))
        or as_dict(payload.get("result"))
        or data
        or payload
    )
    author = (
        as_dict(data.get("author"))
        or as_dict(payload.get("author"))
        or as_dict(item.get("author"))
        or as_dict(payload.get("user"))
        or as_dict(item.get("user"))
    )
    stats = (
        as_dict(data.get("stats"))
        or as_dict(payload.get("stats"))
        or as_dict(payload.get("statistics"))
        or as_dict(item.get("stats"))
        or as_dict(item.get("statistics"))
    )
    return item, author, stats


class TikTokProxyAPIProvider(HttpSourceAdapter):
    """TikTok metadata via RapidAPI, authenticated with ``RAPIDAPI_TIKTOK_KEY``."""

    platform = Platform.TIKTOK
    source_kind = SourceKind.PROXY_API
    required_credential = "RAPIDAPI_TIKTOK_KEY"

    def __init__(
        self,
        http_client: httpx.AsyncClient,
        api_key: str | None = None,
        endpoints: list[str] | tuple[str, ...] | None = None,
    ) -> None:
        super().__init__(http_client)
        self._api_key = api_key or ""
        self._endpoints = tuple(endpoints or DEFAULT_ENDPOINTS)

    def get_provider_name(self) -> str:
        return "proxy_api"

    def is_available(self) -> bool:
        return bool(self._api_key)

    async def fetch(self, ref: ContentRef) -> Any:
        failures: list[str] = []
        last_status: int | None = None
        for endpoint in self._endpoints:
            host = httpx.URL(endpoint).host
            try:
                payload = await self._post_json(
                    endpoint,
                    json_body={"url": ref.canonical_url, "video_url": ref.canonical_url},
                    headers={
                        "X-RapidAPI-Key": self._api_key,
                        "X-RapidAPI-Host": host,
                        "Accept": "application/json",
                    },
                )
            except UpstreamFailureError as exc:
                failures.append(f"{host}: {exc.message}")
                last_status = exc.status_code or last_status
                self._logger.debug("tiktok_proxy_endpoint_failed", host=host, error=exc.message)
                continue

            if isinstance(payload, dict) and (
                payload.get("data") or payload.get("video") or payload.get("result")
            ):
                return payload
            failures.append(f"{host}: empty response")

        raise UpstreamFailureError(
            message="All RapidAPI TikTok endpoints failed: " + "; ".join(failures),
            provider_name=self.get_provider_name(),
            status_code=last_status,
        )

    def normalize(self, payload: Any, ref: ContentRef) -> MappingResult:
        if not isinstance(payload, dict):
            return MappingResult.parse_failure("proxy response is not an object")
        item, author, stats = _locate(payload)
        if not (item.get("desc") or item.get("title") or has_counts(item, stats)):
            return MappingResult.parse_failure("proxy response has no recognisable item")
        return MappingResult.success(map_item(item, ref, author=author, stats=stats))

    def remediation(self, error: Exception) -> list[str]:
        if isinstance(error, MissingCredentialError):
            return ["Configure RAPIDAPI_TIKTOK_KEY to enable the RapidAPI TikTok proxy"]
        if isinstance(error, UpstreamFailureError) and error.status_code in (403, 429):
            return ["Verify RapidAPI subscription and quota limits"]
        return []
