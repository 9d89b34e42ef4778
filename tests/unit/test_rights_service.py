"""Unit tests for the rights service (audio sampling + identification)."""

from __future__ import annotations

import asyncio
from pathlib import Path
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from reelscope.interfaces.rights_provider import IRightsProvider
from reelscope.models.compliance import RightsSignal, RightsStatus
from reelscope.services.rights_service import RightsService, scoped_workdir
from reelscope.utils.process import ProcessResult

_RUN = "reelscope.services.rights_service.run_process"


def _provider(available: bool = True, signal: RightsSignal | None = None) -> IRightsProvider:
    mock = MagicMock(spec=IRightsProvider)
    mock.get_provider_name.return_value = "acrcloud"
    mock.is_available.return_value = available
    mock.identify = AsyncMock(
        return_value=signal or RightsSignal(status=RightsStatus.NO_MATCH, provider="acrcloud")
    )
    return mock


async def _ffmpeg_writes_sample(*args: str, timeout: float = 30.0) -> ProcessResult:
    Path(args[-1]).write_bytes(b"RIFF")
    return ProcessResult(returncode=0, stdout="", stderr="")


class TestRightsService:
    @pytest.mark.asyncio
    async def test_samples_and_identifies(self, tmp_path: Path) -> None:
        provider = _provider()
        service = RightsService(provider, ffmpeg_path="ffmpeg", timeout=5)
        media = tmp_path / "clip.mp4"

        with patch(_RUN, side_effect=_ffmpeg_writes_sample) as run:
            signal = await service.analyze(media)

        assert signal.status is RightsStatus.NO_MATCH
        assert signal.sample_seconds == 10.0

        args = run.call_args.args
        assert args[:3] == ("ffmpeg", "-i", str(media))
        assert "-vn" in args
        assert args[args.index("-ar") + 1] == "44100"
        assert run.call_args.kwargs["timeout"] == 5

        sample = provider.identify.call_args.args[0]
        assert sample.name == "sample.wav"
        # The scratch directory is gone once analyze() returns.
        assert not sample.parent.exists()

    @pytest.mark.asyncio
    async def test_no_audio_short_circuits(self, tmp_path: Path) -> None:
        provider = _provider()
        service = RightsService(provider)

        with patch(_RUN, new=AsyncMock()) as run:
            signal = await service.analyze(tmp_path / "silent.mp4", has_audio=False)

        assert signal.status is RightsStatus.NO_AUDIO
        run.assert_not_called()
        provider.identify.assert_not_called()

    @pytest.mark.asyncio
    async def test_unconfigured_provider(self, tmp_path: Path) -> None:
        service = RightsService(_provider(available=False))
        with patch(_RUN, new=AsyncMock()) as run:
            signal = await service.analyze(tmp_path / "clip.mp4")

        assert signal.status is RightsStatus.UNAVAILABLE
        assert signal.errors == ("acrcloud is not configured",)
        run.assert_not_called()

    @pytest.mark.asyncio
    async def test_ffmpeg_missing(self, tmp_path: Path) -> None:
        provider = _provider()
        service = RightsService(provider, ffmpeg_path="/opt/no/ffmpeg")
        with patch(_RUN, new=AsyncMock(side_effect=FileNotFoundError("ffmpeg"))):
            signal = await service.analyze(tmp_path / "clip.mp4")

        assert signal.status is RightsStatus.UNAVAILABLE
        assert signal.errors == ("/opt/no/ffmpeg is not installed",)
        provider.identify.assert_not_called()

    @pytest.mark.asyncio
    async def test_ffmpeg_nonzero_exit(self, tmp_path: Path) -> None:
        service = RightsService(_provider())
        result = ProcessResult(returncode=1, stdout="", stderr="Invalid data")
        with patch(_RUN, new=AsyncMock(return_value=result)):
            signal = await service.analyze(tmp_path / "clip.mp4")

        assert signal.errors == ("audio sample extraction failed (exit code 1)",)

    @pytest.mark.asyncio
    async def test_ffmpeg_timeout(self, tmp_path: Path) -> None:
        service = RightsService(_provider(), timeout=2)
        with patch(_RUN, new=AsyncMock(side_effect=asyncio.TimeoutError())):
            signal = await service.analyze(tmp_path / "clip.mp4")

        assert signal.errors == ("audio sample extraction timed out after 2s",)


class TestScopedWorkdir:
    @pytest.mark.asyncio
    async def test_removed_on_error(self) -> None:
        captured: list[Path] = []
        with pytest.raises(RuntimeError):
            async with scoped_workdir() as workdir:
                captured.append(workdir)
                (workdir / "sample.wav").write_bytes(b"x")
                raise RuntimeError("provider blew up")

        assert captured
        assert not captured[0].exists()
