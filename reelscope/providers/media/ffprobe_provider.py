"""FFprobe media-inspection provider implementing IMediaProbeProvider.

Probing degrades in three steps, recorded in ``MediaSpecs.probe_method``:

1. ``ffprobe -v quiet -print_format json -show_format -show_streams``
2. ``ffmpeg -i <file> -f null -`` with the stderr banner parsed by regex
3. file-stat only (size and container extension; everything else unknown)

Only a missing or unreadable file is an error; a tool that is absent,
times out or produces garbage just moves the probe to the next step.
"""

from __future__ import annotations

import asyncio
import json
import re
from pathlib import Path
from typing import Any

from reelscope.interfaces.media_probe_provider import IMediaProbeProvider
from reelscope.models.compliance import MediaSpecs
from reelscope.utils.errors import MediaProbeError
from reelscope.utils.logging import get_logger
from reelscope.utils.process import run_process

_DURATION_RE = re.compile(r"Duration:\s*(\d+):(\d{2}):(\d{2}(?:\.\d+)?)")
_RESOLUTION_RE = re.compile(r"Video:.*?(\d{2,5})x(\d{2,5})")
_BITRATE_RE = re.compile(r"bitrate:\s*(\d+)\s*kb/s")
_FPS_RE = re.compile(r"(\d+(?:\.\d+)?)\s*fps")


def parse_frame_rate(value: Any) -> float:
    """``"30000/1001"`` -> ``29.97``; ``"0/0"`` or garbage -> ``0.0``."""
    if value is None:
        return 0.0
    text = str(value).strip()
    try:
        if "/" in text:
            num, den = (float(part) for part in text.split("/", 1))
            return round(num / den, 2) if den else 0.0
        return round(float(text), 2)
    except ValueError:
        return 0.0


def _as_float(value: Any) -> float:
    try:
        return float(value)
    except (TypeError, ValueError):
        return 0.0


def _as_int(value: Any) -> int:
    try:
        return int(float(value))
    except (TypeError, ValueError):
        return 0


def _mapping(value: Any) -> dict[str, Any]:
    return value if isinstance(value, dict) else {}


def specs_from_ffprobe(path: Path, payload: Any, size_bytes: int) -> MediaSpecs:
    """Build :class:`MediaSpecs` from ``ffprobe`` JSON output.

    Parts of the payload with the wrong shape are treated as absent.
    """
    payload = _mapping(payload)
    streams = payload.get("streams")
    streams = [s for s in streams if isinstance(s, dict)] if isinstance(streams, list) else []
    fmt = _mapping(payload.get("format"))
    video = next((s for s in streams if s.get("codec_type") == "video"), None) or {}
    audio = next((s for s in streams if s.get("codec_type") == "audio"), None)
    tags = {str(k).lower(): v for k, v in _mapping(fmt.get("tags")).items()}

    duration = _as_float(fmt.get("duration"))
    if duration <= 0:
        duration = _as_float(video.get("duration"))
    if duration <= 0 and audio:
        duration = _as_float(audio.get("duration"))

    return MediaSpecs(
        path=str(path),
        duration_seconds=round(duration, 2),
        width=_as_int(video.get("width")),
        height=_as_int(video.get("height")),
        size_bytes=_as_int(fmt.get("size")) or size_bytes,
        bitrate=_as_int(fmt.get("bit_rate")),
        frame_rate=parse_frame_rate(video.get("r_frame_rate") or video.get("avg_frame_rate")),
        has_audio=audio is not None,
        video_codec=video.get("codec_name") or "",
        audio_codec=(audio or {}).get("codec_name") or "",
        container_format=fmt.get("format_name") or path.suffix.lstrip(".").lower(),
        title=tags.get("title"),
        artist=tags.get("artist"),
        date=tags.get("date") or tags.get("creation_time"),
        comment=tags.get("comment"),
        probe_method="ffprobe",
    )


def specs_from_ffmpeg_banner(path: Path, banner: str, size_bytes: int) -> MediaSpecs | None:
    """Parse the ``ffmpeg -i`` stderr banner; ``None`` if no duration is found."""
    duration_match = _DURATION_RE.search(banner)
    if not duration_match:
        return None
    hours, minutes, seconds = duration_match.groups()
    duration = int(hours) * 3600 + int(minutes) * 60 + float(seconds)
    if duration <= 0:
        return None

    resolution = _RESOLUTION_RE.search(banner)
    bitrate = _BITRATE_RE.search(banner)
    fps = _FPS_RE.search(banner)
    return MediaSpecs(
        path=str(path),
        duration_seconds=round(duration, 2),
        width=int(resolution.group(1)) if resolution else 0,
        height=int(resolution.group(2)) if resolution else 0,
        size_bytes=size_bytes,
        bitrate=int(bitrate.group(1)) * 1000 if bitrate else 0,
        frame_rate=float(fps.group(1)) if fps else 0.0,
        has_audio="Audio:" in banner,
        container_format=path.suffix.lstrip(".").lower(),
        probe_method="ffmpeg",
    )


class FFprobeProvider(IMediaProbeProvider):
    """Probe local media with ffprobe, falling back to ffmpeg and file stat."""

    def __init__(
        self,
        ffprobe_path: str = "ffprobe",
        ffmpeg_path: str = "ffmpeg",
        timeout: float = 30.0,
    ) -> None:
        self._ffprobe = ffprobe_path
        self._ffmpeg = ffmpeg_path
        self._timeout = timeout
        self._logger = get_logger(__name__)

    def get_provider_name(self) -> str:
        return "ffprobe"

    async def probe(self, path: Path) -> MediaSpecs:
        path = Path(path)
        try:
            size_bytes = path.stat().st_size
        except OSError as exc:
            raise MediaProbeError(
                message=f"Cannot read media file {path}: {exc}",
                provider_name=self.get_provider_name(),
            ) from exc
        if not path.is_file():
            raise MediaProbeError(
                message=f"Not a regular file: {path}",
                provider_name=self.get_provider_name(),
            )

        specs = await self._try_ffprobe(path, size_bytes)
        if specs is None:
            specs = await self._try_ffmpeg(path, size_bytes)
        if specs is None:
            self._logger.info("media_probe_file_stat_only", path=str(path))
            specs = MediaSpecs(
                path=str(path),
                size_bytes=size_bytes,
                container_format=path.suffix.lstrip(".").lower(),
                probe_method="file_stat",
            )
        return specs

    async def _try_ffprobe(self, path: Path, size_bytes: int) -> MediaSpecs | None:
        try:
            result = await run_process(
                self._ffprobe,
                "-v", "quiet",
                "-print_format", "json",
                "-show_format",
                "-show_streams",
                str(path),
                timeout=self._timeout,
            )
        except (OSError, asyncio.TimeoutError) as exc:
            self._logger.warning("ffprobe_unavailable", path=str(path), error=str(exc))
            return None

        if result.returncode != 0:
            self._logger.warning("ffprobe_failed", path=str(path), code=result.returncode)
            return None
        try:
            payload = json.loads(result.stdout)
        except ValueError:
            self._logger.warning("ffprobe_bad_json", path=str(path))
            return None

        specs = specs_from_ffprobe(path, payload, size_bytes)
        if specs.duration_seconds <= 0:
            self._logger.warning("ffprobe_no_duration", path=str(path))
            return None
        return specs

    async def _try_ffmpeg(self, path: Path, size_bytes: int) -> MediaSpecs | None:
        try:
            # ffmpeg exits non-zero without an output file; the banner is still printed.
            result = await run_process(
                self._ffmpeg, "-i", str(path), "-f", "null", "-", timeout=self._timeout
            )
        except (OSError, asyncio.TimeoutError) as exc:
            self._logger.warning("ffmpeg_unavailable", path=str(path), error=str(exc))
            return None
        return specs_from_ffmpeg_banner(path, result.stderr, size_bytes)
