"""TikTok page scraping adapter.

Fetches the public video page with a browser User-Agent and reads:

1. Open Graph ``<meta>`` tags (title, description, image) -- always
   present when the page renders at all.
2. The web app's embedded state, when present, in order of preference:
   ``<script id="__UNIVERSAL_DATA_FOR_REHYDRATION__">``,
   ``<script id="SIGI_STATE">`` and an inline
   ``window.__INITIAL_STATE__ = {...};`` assignment.

Counts are only trusted when they come from embedded state.  A page that
yields meta tags but no counts maps to a record with zero engagement,
which the quality classifier places in the ``basic`` tier.
"""

from __future__ import annotations

import json
import re
from typing import Any

import httpx
from bs4 import BeautifulSoup

from reelscope.models.extraction import ContentRef, MappingResult
from reelscope.models.record import Platform, SourceKind
from reelscope.providers.base import USER_AGENT, HttpSourceAdapter
from reelscope.providers.tiktok.mapping import as_dict, map_item

_INITIAL_STATE_RE = re.compile(r"window\.__INITIAL_STATE__\s*=\s*(\{.*?\});", re.DOTALL)
_TITLE_SUFFIX_RE = re.compile(r"\s*\|\s*TikTok\s*$", re.IGNORECASE)


def _meta(soup: BeautifulSoup, prop: str) -> str:
    tag = soup.find("meta", attrs={"property": prop}) or soup.find("meta", attrs={"name": prop})
    if tag is None:
        return ""
    return str(tag.get("content") or "").strip()


def _load_script_json(soup: BeautifulSoup, script_id: str) -> dict[str, Any]:
    tag = soup.find("script", id=script_id)
    if tag is None or not tag.string:
        return {}
    try:
        return as_dict(json.loads(tag.string))
    except ValueError:
        return {}


def _from_item_module(state: dict[str, Any], content_id: str) -> dict[str, Any]:
    """Resolve an item from SIGI_STATE / __INITIAL_STATE__ ``ItemModule`` layout."""
    items = as_dict(state.get("ItemModule"))
    if not items:
        return {}
    item = as_dict(items.get(content_id)) or as_dict(next(iter(items.values()), None))
    if not item:
        return {}

    author = item.get("author")
    users = as_dict(as_dict(state.get("UserModule")).get("users"))
    user_stats = as_dict(as_dict(state.get("UserModule")).get("stats"))
    if isinstance(author, str):
        return {
            "item": item,
            "author": as_dict(users.get(author)) or {"uniqueId": author, "nickname": item.get("nickname")},
            "author_stats": as_dict(user_stats.get(author)),
        }
    return {"item": item, "author": as_dict(author), "author_stats": as_dict(item.get("authorStats"))}


def extract_embedded_item(soup: BeautifulSoup, html: str, content_id: str) -> dict[str, Any]:
    """Return ``{"item", "author", "author_stats"}`` from embedded state, or ``{}``."""
    universal = _load_script_json(soup, "__UNIVERSAL_DATA_FOR_REHYDRATION__")
    if universal:
        scope = as_dict(universal.get("__DEFAULT_SCOPE__"))
        detail = as_dict(scope.get("webapp.video-detail"))
        item = as_dict(as_dict(detail.get("itemInfo")).get("itemStruct"))
        if item:
            return {
                "item": item,
                "author": as_dict(item.get("author")),
                "author_stats": as_dict(item.get("authorStats")),
            }

    sigi = _load_script_json(soup, "SIGI_STATE")
    found = _from_item_module(sigi, content_id)
    if found:
        return found

    match = _INITIAL_STATE_RE.search(html)
    if match:
        try:
            state = as_dict(json.loads(match.group(1)))
        except ValueError:
            state = {}
        found = _from_item_module(state, content_id)
        if found:
            return found
    return {}


class TikTokScrapeProvider(HttpSourceAdapter):
    """Scrape the public TikTok page; no credential required."""

    platform = Platform.TIKTOK
    source_kind = SourceKind.SCRAPE
    required_credential = None

    def __init__(self, http_client: httpx.AsyncClient) -> None:
        super().__init__(http_client)

    def get_provider_name(self) -> str:
        return "scrape"

    def is_available(self) -> bool:
        return True

    async def fetch(self, ref: ContentRef) -> str:
        return await self._get_text(
            ref.canonical_url,
            headers={
                "User-Agent": USER_AGENT,
                "Accept": "text/html,application/xhtml+xml",
                "Accept-Language": "en-US,en;q=0.9",
            },
        )

    def normalize(self, payload: Any, ref: ContentRef) -> MappingResult:
        if not isinstance(payload, str) or not payload.strip():
            return MappingResult.parse_failure("empty page")

        soup = BeautifulSoup(payload, "html.parser")
        og_title = _TITLE_SUFFIX_RE.sub("", _meta(soup, "og:title"))
        og_description = _meta(soup, "og:description")
        og_image = _meta(soup, "og:image")

        embedded = extract_embedded_item(soup, payload, ref.content_id)
        if not embedded and not og_title:
            return MappingResult.parse_failure("page has neither meta tags nor embedded state")

        item = embedded.get("item", {})
        record = map_item(
            item,
            ref,
            author=embedded.get("author"),
            stats=as_dict(item.get("stats")) or as_dict(item.get("statistics")),
            author_stats=embedded.get("author_stats"),
            fallback_title=og_title,
            fallback_description=og_description,
            fallback_thumbnail=og_image,
        )
        if not embedded:
            return MappingResult.partial(record, "embedded state not found; counts unavailable")
        return MappingResult.success(record)
