"""Music-rights check for local media files.

Extracts a short mono WAV sample with ``ffmpeg`` and hands it to the
configured :class:`~reelscope.interfaces.rights_provider.IRightsProvider`.
The sample lives in a private temporary directory that is removed on every
exit path, including cancellation and provider failure.
"""

from __future__ import annotations

import asyncio
import tempfile
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from pathlib import Path

from reelscope.interfaces.rights_provider import IRightsProvider
from reelscope.models.compliance import RightsSignal
from reelscope.utils.logging import get_logger
from reelscope.utils.process import run_process

_SAMPLE_SECONDS = 10
_SAMPLE_RATE = 44100


@asynccontextmanager
async def scoped_workdir(prefix: str = "reelscope-") -> AsyncIterator[Path]:
    """Yield a temporary directory that is deleted when the block exits."""
    workdir = tempfile.TemporaryDirectory(prefix=prefix)
    try:
        yield Path(workdir.name)
    finally:
        workdir.cleanup()


class RightsService:
    """Sample audio from a media file and identify any music in it.

    Parameters
    ----------
    provider:
        Audio-fingerprinting backend (ACRCloud in production).
    ffmpeg_path:
        Executable used to cut the sample.
    timeout:
        Seconds allowed for the ffmpeg extraction.
    """

    def __init__(
        self,
        provider: IRightsProvider,
        ffmpeg_path: str = "ffmpeg",
        timeout: float = 30.0,
    ) -> None:
        self._provider = provider
        self._ffmpeg = ffmpeg_path
        self._timeout = timeout
        self._logger = get_logger(__name__)

    async def analyze(self, media_path: Path, has_audio: bool = True) -> RightsSignal:
        """Return the rights signal for *media_path*.

        Media without an audio stream short-circuits to ``no_audio``.  A
        missing provider or a failed sample extraction yields an explicit
        ``unavailable`` signal.
        """
        provider_name = self._provider.get_provider_name()
        if not has_audio:
            return RightsSignal.no_audio(provider=provider_name)
        if not self._provider.is_available():
            return RightsSignal.unavailable(
                f"{provider_name} is not configured", provider=provider_name
            )

        async with scoped_workdir() as workdir:
            sample = workdir / "sample.wav"
            error = await self._extract_sample(Path(media_path), sample)
            if error:
                self._logger.warning(
                    "rights_sample_failed", path=str(media_path), error=error
                )
                return RightsSignal.unavailable(error, provider=provider_name)

            signal = await self._provider.identify(sample)

        self._logger.info(
            "rights_analyzed",
            path=str(media_path),
            status=signal.status.value,
            confidence=signal.confidence,
        )
        return signal.model_copy(update={"sample_seconds": float(_SAMPLE_SECONDS)})

    async def _extract_sample(self, media_path: Path, sample: Path) -> str | None:
        """Cut the audio sample; return an error message or ``None`` on success."""
        try:
            result = await run_process(
                self._ffmpeg,
                "-i", str(media_path),
                "-t", str(_SAMPLE_SECONDS),
                "-vn",
                "-acodec", "pcm_s16le",
                "-ar", str(_SAMPLE_RATE),
                "-ac", "1",
                "-y",
                str(sample),
                timeout=self._timeout,
            )
        except FileNotFoundError:
            return f"{self._ffmpeg} is not installed"
        except asyncio.TimeoutError:
            return f"audio sample extraction timed out after {self._timeout:g}s"
        except OSError as exc:
            return f"audio sample extraction failed: {exc}"

        if result.returncode != 0 or not sample.exists():
            return f"audio sample extraction failed (exit code {result.returncode})"
        return None
