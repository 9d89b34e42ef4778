"""Field mapping for TikTok item payloads.

RapidAPI proxies and the web app's embedded state all describe a video
with the same vocabulary but disagree on casing and nesting
(``playCount`` vs ``play_count``, ``stats`` vs ``statistics``, ``author``
vs ``user``).  :func:`map_item` accepts the already-located item, author
and stats dictionaries and resolves the aliases in one place.
"""

from __future__ import annotations

from typing import Any

from reelscope.models.extraction import ContentRef
from reelscope.models.record import Author, CanonicalRecord
from reelscope.utils.normalizers import (
    engagement_rating,
    extract_hashtags,
    first_present,
    parse_count,
    parse_timestamp,
)

VIEW_KEYS = ("playCount", "play_count", "view_count", "viewCount")
LIKE_KEYS = ("diggCount", "digg_count", "like_count", "likeCount")
COMMENT_KEYS = ("commentCount", "comment_count")
SHARE_KEYS = ("shareCount", "share_count")
FOLLOWER_KEYS = ("followerCount", "follower_count", "followers")


def as_dict(value: Any) -> dict[str, Any]:
    return value if isinstance(value, dict) else {}


def pick(sources: tuple[dict[str, Any], ...], keys: tuple[str, ...]) -> Any:
    """First present value for any of *keys*, searching *sources* in order."""
    for source in sources:
        for key in keys:
            value = source.get(key)
            if value is not None and value != "":
                return value
    return None


def has_counts(item: dict[str, Any], stats: dict[str, Any]) -> bool:
    sources = (stats, item)
    return any(
        pick(sources, keys) is not None
        for keys in (VIEW_KEYS, LIKE_KEYS, COMMENT_KEYS, SHARE_KEYS)
    )


def _cover(item: dict[str, Any]) -> str:
    video = as_dict(item.get("video"))
    value = first_present(
        item.get("cover"),
        item.get("origin_cover"),
        item.get("thumbnail"),
        video.get("cover"),
        video.get("originCover"),
    )
    if isinstance(value, dict):
        urls = value.get("url_list") or []
        return str(urls[0]) if urls else ""
    return str(value) if value else ""


def map_item(
    item: dict[str, Any],
    ref: ContentRef,
    *,
    author: dict[str, Any] | None = None,
    stats: dict[str, Any] | None = None,
    author_stats: dict[str, Any] | None = None,
    fallback_title: str = "",
    fallback_description: str = "",
    fallback_thumbnail: str = "",
) -> CanonicalRecord:
    """Build a canonical record from one TikTok item and its satellites."""
    author = as_dict(author)
    stats = as_dict(stats)
    author_stats = as_dict(author_stats)
    video = as_dict(item.get("video"))

    caption = first_present(item.get("desc"), item.get("title"), fallback_description) or ""
    title = first_present(item.get("title"), item.get("desc"), fallback_title) or ""

    count_sources = (stats, item)
    views = parse_count(pick(count_sources, VIEW_KEYS))
    likes = parse_count(pick(count_sources, LIKE_KEYS))

    avatar = first_present(
        author.get("avatarMedium"),
        author.get("avatar"),
        author.get("avatar_thumb"),
        author.get("avatarThumb"),
    )
    if isinstance(avatar, dict):
        urls = avatar.get("url_list") or []
        avatar = urls[0] if urls else ""

    return CanonicalRecord(
        content_id=str(first_present(item.get("id"), item.get("video_id"), ref.content_id)),
        url=ref.url,
        platform=ref.platform,
        title=title,
        description=caption,
        views=views,
        likes=likes,
        comments=pick(count_sources, COMMENT_KEYS),
        shares=pick(count_sources, SHARE_KEYS),
        author=Author(
            username=first_present(
                author.get("uniqueId"), author.get("unique_id"), author.get("username")
            ),
            display_name=first_present(
                author.get("nickname"), author.get("display_name"), author.get("displayName")
            ),
            follower_count=pick((author_stats, author), FOLLOWER_KEYS),
            verified=author.get("verified", False),
            avatar_url=avatar,
            bio=first_present(author.get("signature"), author.get("bio")),
        ),
        hashtags=extract_hashtags(caption, title),
        published_at=parse_timestamp(first_present(item.get("createTime"), item.get("create_time"))),
        duration_seconds=first_present(item.get("duration"), video.get("duration")),
        thumbnail_url=_cover(item) or fallback_thumbnail,
        media_urls=(ref.canonical_url,),
        engagement_rating=engagement_rating(views, likes),
    )
