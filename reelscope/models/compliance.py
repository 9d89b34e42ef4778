"""Compliance evaluation models: rights signals, media specs, reports.

``RightsSignal`` is the contract between the audio-fingerprinting
collaborator and the compliance evaluator.  A provider that cannot answer
(no credentials, network down, no audio sample) returns
``RightsStatus.UNAVAILABLE`` with ``confidence=0``; it never guesses.

``ComplianceReport`` is recomputed on every call and never cached.
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class RightsStatus(str, Enum):  # noqa: UP042
    """What the fingerprinting collaborator was able to determine."""

    IDENTIFIED = "identified"    # A catalogue track matched
    NO_MATCH = "no_match"        # Provider answered; nothing matched
    NO_AUDIO = "no_audio"        # Media has no audio stream to check
    UNAVAILABLE = "unavailable"  # Provider absent or failed -- no signal


class CopyrightUsage(str, Enum):  # noqa: UP042
    COMMERCIAL = "commercial"
    NON_COMMERCIAL = "non-commercial"
    UNKNOWN = "unknown"


class TrackInfo(BaseModel):
    """Catalogue metadata for a matched track."""

    model_config = ConfigDict(frozen=True)

    title: str = "unknown"
    artist: str = "unknown"
    album: str | None = None
    label: str | None = None
    release_date: str | None = None
    duration_seconds: int | None = None
    genres: tuple[str, ...] = ()


class RightsSignal(BaseModel):
    """Output of ``IRightsProvider.identify()``."""

    model_config = ConfigDict(frozen=True)

    status: RightsStatus
    is_protected: bool = False
    confidence: int = Field(default=0, ge=0, le=100)
    track_info: TrackInfo | None = None
    copyright_usage: CopyrightUsage = CopyrightUsage.UNKNOWN
    provider: str = ""
    sample_seconds: float = 0.0
    errors: tuple[str, ...] = ()

    @property
    def available(self) -> bool:
        return self.status is not RightsStatus.UNAVAILABLE

    @classmethod
    def unavailable(cls, reason: str, provider: str = "") -> RightsSignal:
        return cls(status=RightsStatus.UNAVAILABLE, provider=provider, errors=(reason,))

    @classmethod
    def no_audio(cls, provider: str = "") -> RightsSignal:
        return cls(status=RightsStatus.NO_AUDIO, provider=provider)


class MediaSpecs(BaseModel):
    """Technical properties of a local media file, as reported by ffprobe.

    ``width``/``height``/``duration_seconds`` are ``0`` when the probe
    could not determine them; ``probe_method`` records how far the
    fallback chain had to go (``ffprobe`` -> ``ffmpeg`` -> ``file_stat``).
    """

    model_config = ConfigDict(frozen=True)

    path: str
    duration_seconds: float = 0.0
    width: int = 0
    height: int = 0
    size_bytes: int = 0
    bitrate: int = 0
    frame_rate: float = 0.0
    has_audio: bool = False
    video_codec: str = ""
    audio_codec: str = ""
    container_format: str = ""
    title: str | None = None
    artist: str | None = None
    date: str | None = None
    comment: str | None = None
    probe_method: str = "ffprobe"

    @property
    def has_resolution(self) -> bool:
        return self.width > 0 and self.height > 0

    @property
    def resolution(self) -> str:
        return f"{self.width}x{self.height}" if self.has_resolution else "unknown"


class PlatformRules(BaseModel):
    """Per-platform eligibility thresholds consumed by the evaluator.

    ``None`` disables a bound.  Resolution minimums compare against the
    short and long edges so portrait and landscape uploads are judged alike.
    """

    model_config = ConfigDict(frozen=True)

    min_duration_seconds: float | None = None
    max_duration_seconds: float | None = None
    monetization_min_seconds: float | None = None
    min_short_edge: int | None = None
    min_long_edge: int | None = None
    max_file_size_bytes: int | None = None
    native_resolutions: tuple[str, ...] = ()
    rights_confidence_threshold: int = 50


class ComplianceCheck(BaseModel):
    """One independent pass/fail rule."""

    model_config = ConfigDict(frozen=True)

    name: str
    passed: bool
    details: str
    weight: float = 1.0
    needs_manual_review: bool = False


class ComplianceReport(BaseModel):
    """Checklist outcome for one record.

    ``overall_score`` is ``round(passed weight / total weight * 100)``;
    with the default equal weights that is ``passed / total * 100``.
    """

    model_config = ConfigDict(frozen=True)

    platform: str
    checks: tuple[ComplianceCheck, ...]
    violations: tuple[str, ...] = ()
    recommendations: tuple[str, ...] = ()
    overall_score: int = Field(ge=0, le=100)

    @property
    def compliant(self) -> bool:
        return not self.violations

    @property
    def passed_checks(self) -> list[str]:
        return [c.name for c in self.checks if c.passed]

    @property
    def failed_checks(self) -> list[str]:
        return [c.name for c in self.checks if not c.passed]

    def get_check(self, name: str) -> ComplianceCheck | None:
        for check in self.checks:
            if check.name == name:
                return check
        return None
