"""Custom exception hierarchy for reelscope.

All application exceptions inherit from :class:`ReelScopeError`, which
carries an optional ``provider_name`` so error handlers can identify which
upstream source (e.g. "youtube_data_api", "acrcloud", "ffprobe") caused the
failure.

The hierarchy is organized by how the extraction chain treats each error:

    ReelScopeError  (base -- catch-all for any reelscope error)
    +-- UnsupportedPlatformError     (fatal: no detector pattern matched)
    +-- MissingCredentialError       (per-attempt: strategy skipped, chain continues)
    +-- UpstreamFailureError         (per-attempt: non-2xx, timeout, transport error)
    +-- ParseFailureError            (per-attempt: payload has the wrong shape)
    +-- AllStrategiesExhaustedError  (fatal: every strategy failed or was skipped)
    +-- ConfigurationError           (startup / invalid config)
    +-- MediaProbeError              (ffprobe / ffmpeg could not read a file)
    +-- RightsProviderError          (audio fingerprinting call failed)

Per-attempt errors are always recovered by the orchestrator.  Only
UnsupportedPlatformError and AllStrategiesExhaustedError reach callers of
``extract()``.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from reelscope.models.extraction import ExtractionTrace


class ReelScopeError(Exception):
    """Base exception for all reelscope errors.

    Every subclass carries a human-readable ``message`` and an optional
    ``provider_name`` identifying which upstream source triggered the
    error.  The ``__str__`` method prefixes the provider name in brackets
    for structured log output, e.g. ``[youtube_data_api] HTTP 403``.
    """

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        provider_name: str | None = None,
    ) -> None:
        self._message = message
        self._provider_name = provider_name
        super().__init__(self._message)

    @property
    def message(self) -> str:
        return self._message

    @property
    def provider_name(self) -> str | None:
        return self._provider_name

    def __str__(self) -> str:
        if self._provider_name:
            return f"[{self._provider_name}] {self._message}"
        return self._message


# ---------------------------------------------------------------------------
# Fatal errors surfaced to callers
# ---------------------------------------------------------------------------

class UnsupportedPlatformError(ReelScopeError):
    """Raised when no registered platform pattern matches a URL.

    Raised by the platform detector before any network I/O happens.
    """

    def __init__(
        self,
        message: str = "Unsupported content platform",
        provider_name: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)


class AllStrategiesExhaustedError(ReelScopeError):
    """Raised after every strategy in a platform's chain failed or was skipped.

    Carries the full ordered attempt trace, the aggregated failure reasons
    and a de-duplicated list of remediation hints (e.g. which credential to
    configure) so the caller can show actionable output.
    """

    def __init__(
        self,
        message: str = "All extraction strategies were exhausted",
        provider_name: str | None = None,
        trace: ExtractionTrace | None = None,
        failure_reasons: list[str] | None = None,
        remediation: list[str] | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)
        self._trace = trace
        self._failure_reasons = list(failure_reasons or [])
        self._remediation = list(remediation or [])

    @property
    def trace(self) -> ExtractionTrace | None:
        return self._trace

    @property
    def failure_reasons(self) -> list[str]:
        return list(self._failure_reasons)

    @property
    def remediation(self) -> list[str]:
        return list(self._remediation)


# ---------------------------------------------------------------------------
# Per-attempt errors (recovered by the orchestrator)
# ---------------------------------------------------------------------------

class MissingCredentialError(ReelScopeError):
    """Raised when a strategy needs a credential that is not configured."""

    def __init__(
        self,
        message: str = "Required credential is not configured",
        provider_name: str | None = None,
        credential: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)
        self._credential = credential

    @property
    def credential(self) -> str | None:
        return self._credential


class UpstreamFailureError(ReelScopeError):
    """Raised when an upstream source returns a non-2xx or unusable response.

    ``status_code`` is populated for HTTP failures so adapters can derive
    remediation hints (quota exceeded, API disabled, ...).
    """

    def __init__(
        self,
        message: str = "Upstream source failed",
        provider_name: str | None = None,
        status_code: int | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)
        self._status_code = status_code

    @property
    def status_code(self) -> int | None:
        return self._status_code


class ParseFailureError(ReelScopeError):
    """Raised when an upstream payload cannot be interpreted at all.

    Missing optional fields are NOT parse failures; adapters report those
    as partial mappings instead.
    """

    def __init__(
        self,
        message: str = "Upstream payload could not be parsed",
        provider_name: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)


# ---------------------------------------------------------------------------
# Configuration and local tooling errors
# ---------------------------------------------------------------------------

class ConfigurationError(ReelScopeError):
    """Raised when configuration is invalid or missing at startup."""

    def __init__(
        self,
        message: str = "Invalid or missing configuration",
        provider_name: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)


class MediaProbeError(ReelScopeError):
    """Raised when a local media file cannot be probed at all."""

    def __init__(
        self,
        message: str = "Media probe failed",
        provider_name: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)


class RightsProviderError(ReelScopeError):
    """Raised when the audio fingerprinting provider call fails."""

    def __init__(
        self,
        message: str = "Rights provider call failed",
        provider_name: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)
