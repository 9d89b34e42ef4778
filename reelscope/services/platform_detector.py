"""URL -> platform / content-id resolution.

Detection is table-driven: each :class:`PlatformPattern` pairs a host
predicate with an ordered list of id extractors.  Supporting a new URL
form (or a new platform) means registering another pattern, not editing
conditionals.  Detection never performs network I/O, so an unsupported
URL fails fast before any strategy runs.

The detector also derives the cache **fingerprint**: a SHA-256 digest of
``platform:content_id`` truncated to 16 hex characters.  Different URL
spellings of the same video (``youtu.be/<id>`` vs ``watch?v=<id>``)
therefore share one cache entry.
"""

from __future__ import annotations

import hashlib
import re
from collections.abc import Callable
from dataclasses import dataclass, field
from urllib.parse import parse_qs, urlparse

from reelscope.models.extraction import ContentRef
from reelscope.models.record import Platform
from reelscope.utils.errors import UnsupportedPlatformError
from reelscope.utils.logging import get_logger

_FINGERPRINT_LENGTH = 16
_YOUTUBE_ID = r"([A-Za-z0-9_-]{11})"

IdExtractor = Callable[[str, "ParsedURL"], str | None]


@dataclass(frozen=True)
class ParsedURL:
    host: str
    path: str
    query: dict[str, list[str]]


@dataclass(frozen=True)
class PlatformPattern:
    """One platform's recognition rules.

    Attributes
    ----------
    platform:
        Tag assigned when this pattern matches.
    host_matches:
        Predicate over the lower-cased host (``www.`` / ``m.`` stripped).
    extractors:
        Tried in order; the first non-``None`` id wins.
    canonicalize:
        Builds the URL handed to scrape / oEmbed strategies.
    """

    platform: Platform
    host_matches: Callable[[str], bool]
    extractors: tuple[IdExtractor, ...]
    canonicalize: Callable[[str, str], str] = field(default=lambda url, _id: url)


def _path_regex(pattern: str) -> IdExtractor:
    compiled = re.compile(pattern)

    def extract(_url: str, parsed: ParsedURL) -> str | None:
        match = compiled.search(parsed.path)
        return match.group(1) if match else None

    return extract


def _youtube_query_id(_url: str, parsed: ParsedURL) -> str | None:
    if parsed.path.rstrip("/") != "/watch":
        return None
    values = parsed.query.get("v") or []
    if values and re.fullmatch(_YOUTUBE_ID, values[0]):
        return values[0]
    return None


def _youtu_be_id(_url: str, parsed: ParsedURL) -> str | None:
    if parsed.host != "youtu.be":
        return None
    match = re.match(rf"^/{_YOUTUBE_ID}(?:[/?#]|$)", parsed.path)
    return match.group(1) if match else None


def _tiktok_short_code(_url: str, parsed: ParsedURL) -> str | None:
    if parsed.host not in ("vm.tiktok.com", "vt.tiktok.com"):
        return None
    match = re.match(r"^/([A-Za-z0-9]+)/?$", parsed.path)
    return match.group(1) if match else None


def _is_youtube_host(host: str) -> bool:
    return host in ("youtube.com", "youtu.be", "youtube-nocookie.com", "music.youtube.com")


def _is_tiktok_host(host: str) -> bool:
    return host == "tiktok.com" or host.endswith(".tiktok.com")


def _youtube_canonical(_url: str, content_id: str) -> str:
    return f"https://www.youtube.com/watch?v={content_id}"


def _tiktok_canonical(url: str, _content_id: str) -> str:
    parsed = urlparse(url if "://" in url else f"https://{url}")
    return f"https://{parsed.netloc}{parsed.path}"


DEFAULT_PATTERNS: tuple[PlatformPattern, ...] = (
    PlatformPattern(
        platform=Platform.YOUTUBE,
        host_matches=_is_youtube_host,
        extractors=(
            _youtube_query_id,
            _youtu_be_id,
            _path_regex(rf"^/embed/{_YOUTUBE_ID}"),
            _path_regex(rf"^/shorts/{_YOUTUBE_ID}"),
            _path_regex(rf"^/v/{_YOUTUBE_ID}"),
            _path_regex(rf"^/live/{_YOUTUBE_ID}"),
        ),
        canonicalize=_youtube_canonical,
    ),
    PlatformPattern(
        platform=Platform.TIKTOK,
        host_matches=_is_tiktok_host,
        extractors=(
            _path_regex(r"/video/(\d+)"),
            _tiktok_short_code,
        ),
        canonicalize=_tiktok_canonical,
    ),
)


def fingerprint_for(platform: Platform, content_id: str) -> str:
    """Stable cache key for a piece of content, independent of URL spelling."""
    digest = hashlib.sha256(f"{platform.value}:{content_id}".encode("utf-8")).hexdigest()
    return digest[:_FINGERPRINT_LENGTH]


def _parse(url: str) -> ParsedURL | None:
    text = url.strip()
    if not text:
        return None
    if "://" not in text:
        text = f"https://{text}"
    parsed = urlparse(text)
    if parsed.scheme not in ("http", "https") or not parsed.hostname:
        return None
    host = parsed.hostname.lower()
    for prefix in ("www.", "m."):
        if host.startswith(prefix):
            host = host[len(prefix):]
            break
    return ParsedURL(host=host, path=parsed.path or "/", query=parse_qs(parsed.query))


class PlatformDetector:
    """Resolve URLs into :class:`ContentRef` values using registered patterns."""

    def __init__(self, patterns: tuple[PlatformPattern, ...] | list[PlatformPattern] = DEFAULT_PATTERNS) -> None:
        self._patterns: list[PlatformPattern] = list(patterns)
        self._logger = get_logger(__name__)

    def register(self, pattern: PlatformPattern) -> None:
        """Add *pattern*; it is consulted after the existing ones."""
        self._patterns.append(pattern)

    @property
    def platforms(self) -> list[Platform]:
        return [p.platform for p in self._patterns]

    def detect(self, url: str) -> ContentRef:
        """Return the :class:`ContentRef` for *url*.

        Raises
        ------
        UnsupportedPlatformError
            If no pattern recognises the host or no id can be extracted.
        """
        parsed = _parse(url or "")
        if parsed is None:
            raise UnsupportedPlatformError(message=f"Not a valid http(s) URL: {url!r}")

        for pattern in self._patterns:
            if not pattern.host_matches(parsed.host):
                continue
            for extractor in pattern.extractors:
                content_id = extractor(url, parsed)
                if content_id:
                    ref = ContentRef(
                        url=url,
                        platform=pattern.platform,
                        content_id=content_id,
                        fingerprint=fingerprint_for(pattern.platform, content_id),
                        canonical_url=pattern.canonicalize(url.strip(), content_id),
                    )
                    self._logger.debug(
                        "platform_detected",
                        platform=ref.platform.value,
                        content_id=content_id,
                        fingerprint=ref.fingerprint,
                    )
                    return ref
            raise UnsupportedPlatformError(
                message=f"Unrecognised {pattern.platform.value} URL form: {url}"
            )

        raise UnsupportedPlatformError(message=f"Unsupported platform for URL: {url}")
