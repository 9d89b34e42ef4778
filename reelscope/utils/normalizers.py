"""Normalization helpers shared by every source adapter.

Upstream sources disagree on almost every primitive: counts arrive as ints,
numeric strings, ``"12.3K"`` style compact notation or ``"1,204 views"``
labels; durations arrive as ISO-8601 (``PT4M13S``), plain seconds or
``"mm:ss"`` clock strings; timestamps arrive as ISO strings or epoch
seconds.  Every adapter funnels its raw values through these functions so
the canonical record is built from one set of rules:

1. **parse_count** -- integer coercion with compact-suffix support.  Never
   returns NaN or a negative number; anything unparseable becomes ``0``.
2. **parse_duration** -- ISO-8601 / seconds / clock string to whole seconds.
3. **extract_hashtags** -- Unicode-aware hashtag scan (Latin, Hebrew and
   Arabic ranges), de-duplicated in first-seen order and capped at 15.
4. **parse_timestamp** -- ISO string or epoch seconds to aware UTC datetime.
5. **engagement_rating** -- 0-5 like/view rating bands.
"""

from __future__ import annotations

import math
import re
from datetime import datetime, timezone
from typing import Any

MAX_HASHTAGS = 15

_COMPACT_SUFFIXES = {
    "k": 1_000,
    "m": 1_000_000,
    "b": 1_000_000_000,
}

# "12.3K", "4M", "1,204", "1 204", "98.1k views"; a leading "-" marks a negative count
_COUNT_RE = re.compile(
    r"(?P<sign>-\s*)?(?P<digits>\d[\d,\s]*(?:\.\d+)?)\s*(?P<suffix>[kmb])?\b", re.IGNORECASE
)

# PT#H#M#S with optional day component; fractional seconds are truncated.
_ISO_DURATION_RE = re.compile(
    r"^P(?:(?P<days>\d+)D)?"
    r"(?:T(?:(?P<hours>\d+)H)?(?:(?P<minutes>\d+)M)?(?:(?P<seconds>\d+(?:\.\d+)?)S)?)?$",
    re.IGNORECASE,
)
_CLOCK_RE = re.compile(r"^(?:(\d+):)?(\d{1,2}):(\d{2})$")

# Word characters plus the Hebrew (U+0590-05FF) and Arabic (U+0600-06FF,
# U+0750-077F) blocks.  Python's \w is already Unicode-aware; the explicit
# ranges keep Arabic combining marks (harakat) inside a tag.
_HASHTAG_RE = re.compile(r"#([\w\u0590-\u05ff\u0600-\u06ff\u0750-\u077f]+)", re.UNICODE)


def parse_count(value: Any) -> int:
    """Coerce a count-like value into a non-negative integer.

    Args:
        value: int, float, numeric string, or compact notation such as
               ``"12.3K"`` (12300) or ``"4M"`` (4000000).

    Returns:
        The parsed count, or ``0`` when the value cannot be interpreted.
    """
    if value is None or isinstance(value, bool):
        return 0

    if isinstance(value, int):
        return max(0, value)

    if isinstance(value, float):
        if math.isnan(value) or math.isinf(value):
            return 0
        return max(0, int(value))

    text = str(value).strip()
    if not text:
        return 0

    match = _COUNT_RE.search(text)
    if not match:
        return 0

    if match.group("sign"):
        return 0

    digits = re.sub(r"[,\s]", "", match.group("digits"))
    try:
        number = float(digits)
    except ValueError:
        return 0

    suffix = (match.group("suffix") or "").lower()
    number *= _COMPACT_SUFFIXES.get(suffix, 1)

    if math.isnan(number) or math.isinf(number):
        return 0
    # round() avoids 12.3 * 1000 -> 12299.999...
    return max(0, int(round(number)))


def parse_duration(value: Any) -> int:
    """Parse a duration into whole seconds.

    Accepts ISO-8601 durations (``PT1H2M3S`` -> 3723), plain seconds as
    int/float/numeric string, and ``h:mm:ss`` / ``m:ss`` clock strings.
    Returns ``0`` for anything unparseable, including ``PT0S``.
    """
    if value is None or isinstance(value, bool):
        return 0

    if isinstance(value, (int, float)):
        if isinstance(value, float) and (math.isnan(value) or math.isinf(value)):
            return 0
        return max(0, int(value))

    text = str(value).strip()
    if not text:
        return 0

    iso = _ISO_DURATION_RE.match(text)
    if iso and text.upper() not in ("P", "PT"):
        parts = {k: float(v) if v else 0.0 for k, v in iso.groupdict().items()}
        total = (
            parts["days"] * 86400
            + parts["hours"] * 3600
            + parts["minutes"] * 60
            + parts["seconds"]
        )
        return int(total)

    clock = _CLOCK_RE.match(text)
    if clock:
        hours = int(clock.group(1) or 0)
        return hours * 3600 + int(clock.group(2)) * 60 + int(clock.group(3))

    try:
        seconds = float(text)
    except ValueError:
        return 0
    if math.isnan(seconds) or math.isinf(seconds):
        return 0
    return max(0, int(seconds))


def extract_hashtags(*texts: str | None, limit: int = MAX_HASHTAGS) -> list[str]:
    """Scan one or more captions for hashtags.

    Tags are returned with their leading ``#``, de-duplicated
    case-insensitively, in first-seen order, and capped at *limit*.
    """
    seen: set[str] = set()
    tags: list[str] = []
    for text in texts:
        if not text:
            continue
        for match in _HASHTAG_RE.finditer(text):
            tag = f"#{match.group(1)}"
            key = tag.casefold()
            if key in seen:
                continue
            seen.add(key)
            tags.append(tag)
            if len(tags) >= limit:
                return tags
    return tags


def dedupe_hashtags(tags: list[str] | tuple[str, ...], limit: int = MAX_HASHTAGS) -> list[str]:
    """De-duplicate an already-extracted tag list, normalizing the ``#`` prefix."""
    seen: set[str] = set()
    result: list[str] = []
    for raw in tags:
        tag = str(raw).strip()
        if not tag:
            continue
        if not tag.startswith("#"):
            tag = f"#{tag}"
        key = tag.casefold()
        if key in seen:
            continue
        seen.add(key)
        result.append(tag)
        if len(result) >= limit:
            break
    return result


def parse_timestamp(value: Any) -> datetime | None:
    """Parse an ISO-8601 string or epoch seconds/milliseconds into UTC."""
    if value is None or value == "" or isinstance(value, bool):
        return None

    if isinstance(value, datetime):
        return value if value.tzinfo else value.replace(tzinfo=timezone.utc)

    if isinstance(value, (int, float)) or (isinstance(value, str) and value.strip().isdigit()):
        epoch = float(value)
        if epoch <= 0:
            return None
        # TikTok proxies occasionally return milliseconds.
        if epoch > 10_000_000_000:
            epoch /= 1000.0
        try:
            return datetime.fromtimestamp(epoch, tz=timezone.utc)
        except (OverflowError, OSError, ValueError):
            return None

    text = str(value).strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        return None
    return parsed if parsed.tzinfo else parsed.replace(tzinfo=timezone.utc)


def engagement_rating(views: int, likes: int) -> int:
    """Rate engagement 0-5 from the like/view ratio.

    Zero views rate 0; otherwise the like rate in percent maps to
    >=10 -> 5, >=5 -> 4, >=2 -> 3, >=1 -> 2, else 1.
    """
    if views <= 0:
        return 0
    rate = (likes / views) * 100
    if rate >= 10:
        return 5
    if rate >= 5:
        return 4
    if rate >= 2:
        return 3
    if rate >= 1:
        return 2
    return 1


def first_present(*values: Any) -> Any:
    """Return the first value that is not ``None`` and not an empty string."""
    for value in values:
        if value is None:
            continue
        if isinstance(value, str) and not value.strip():
            continue
        return value
    return None
