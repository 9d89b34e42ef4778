"""oEmbed payload mapping shared by the YouTube and TikTok oEmbed adapters."""

from __future__ import annotations

from typing import Any
from urllib.parse import urlparse

from reelscope.models.extraction import ContentRef, MappingResult
from reelscope.models.record import Author, CanonicalRecord
from reelscope.utils.normalizers import extract_hashtags


def username_from_author_url(author_url: str | None) -> str | None:
    """``https://www.youtube.com/@handle`` -> ``handle``; ``None`` if absent."""
    if not author_url:
        return None
    path = urlparse(author_url).path.strip("/")
    if not path:
        return None
    last = path.split("/")[-1]
    return last.lstrip("@") or None


def map_oembed_payload(payload: Any, ref: ContentRef) -> MappingResult:
    if not isinstance(payload, dict) or not payload.get("title"):
        return MappingResult.parse_failure("oEmbed payload has no title")

    title = str(payload["title"])
    author_name = payload.get("author_name")
    username = payload.get("author_unique_id") or username_from_author_url(payload.get("author_url"))
    record = CanonicalRecord(
        content_id=ref.content_id,
        url=ref.url,
        platform=ref.platform,
        title=title,
        author=Author(username=username or author_name, display_name=author_name),
        hashtags=extract_hashtags(title),
        thumbnail_url=payload.get("thumbnail_url"),
        media_urls=(ref.canonical_url,),
    )
    return MappingResult.success(record)
