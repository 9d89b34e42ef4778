"""Mapping of YouTube Data API v3 resources onto the canonical record.

The first-party API and the RapidAPI ``youtube-v31`` proxy return the same
``videos`` resource shape (``snippet`` / ``statistics`` /
``contentDetails``), so both adapters share this mapper.
"""

from __future__ import annotations

from typing import Any

from reelscope.models.extraction import ContentRef
from reelscope.models.record import Author, CanonicalRecord
from reelscope.utils.normalizers import (
    dedupe_hashtags,
    engagement_rating,
    extract_hashtags,
    first_present,
    parse_count,
    parse_timestamp,
)

_THUMBNAIL_PREFERENCE = ("maxres", "standard", "high", "medium", "default")


def best_thumbnail(thumbnails: Any) -> str:
    if not isinstance(thumbnails, dict):
        return ""
    for size in _THUMBNAIL_PREFERENCE:
        entry = thumbnails.get(size)
        if isinstance(entry, dict) and entry.get("url"):
            return str(entry["url"])
    return ""


def map_channel(channel: dict[str, Any] | None, snippet: dict[str, Any]) -> Author:
    """Build an :class:`Author` from a ``channels`` resource.

    Falls back to the video snippet's ``channelTitle`` when the channel
    lookup was not possible.
    """
    channel_title = snippet.get("channelTitle")
    if not channel:
        return Author(username=channel_title, display_name=channel_title)

    ch_snippet = channel.get("snippet") or {}
    ch_stats = channel.get("statistics") or {}
    # customUrl is the channel handle with its "@" prefix.
    handle = str(ch_snippet.get("customUrl") or "").strip().lstrip("@")
    return Author(
        username=first_present(handle, channel_title),
        display_name=first_present(ch_snippet.get("title"), channel_title),
        follower_count=ch_stats.get("subscriberCount"),
        avatar_url=best_thumbnail(ch_snippet.get("thumbnails")),
        bio=ch_snippet.get("description"),
    )


def map_video_resource(
    item: dict[str, Any],
    ref: ContentRef,
    channel: dict[str, Any] | None = None,
) -> CanonicalRecord:
    """Map one ``videos`` resource (plus optional channel) to a record."""
    snippet = item.get("snippet") or {}
    stats = item.get("statistics") or {}
    details = item.get("contentDetails") or {}

    title = snippet.get("title") or ""
    description = snippet.get("description") or ""
    tags = extract_hashtags(title, description)
    if not tags and isinstance(snippet.get("tags"), list):
        tags = dedupe_hashtags(snippet["tags"])

    views = parse_count(stats.get("viewCount"))
    likes = parse_count(stats.get("likeCount"))

    return CanonicalRecord(
        content_id=str(item.get("id") or ref.content_id),
        url=ref.url,
        platform=ref.platform,
        title=title,
        description=description,
        views=views,
        likes=likes,
        comments=stats.get("commentCount"),
        # The Data API does not expose share counts.
        shares=0,
        author=map_channel(channel, snippet),
        hashtags=tags,
        published_at=parse_timestamp(snippet.get("publishedAt")),
        duration_seconds=details.get("duration"),
        thumbnail_url=best_thumbnail(snippet.get("thumbnails")),
        media_urls=(ref.canonical_url,),
        engagement_rating=engagement_rating(views, likes),
    )
