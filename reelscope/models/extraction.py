"""Extraction bookkeeping models: content references, attempts, traces.

The orchestrator appends one :class:`ExtractionAttempt` per strategy it
tries or skips, then freezes the list into an :class:`ExtractionTrace`.
The trace travels with the result (or with ``AllStrategiesExhaustedError``)
so callers can see exactly which sources were consulted and why each one
failed.

:class:`MappingResult` is the return type of every adapter's pure
``normalize()`` step.  It distinguishes a complete mapping, a partial one
(main lookup succeeded, a sub-lookup did not) and a payload that could not
be interpreted at all, without using exceptions for the expected
"field absent" cases.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

from pydantic import BaseModel, ConfigDict

from reelscope.models.record import CanonicalRecord, Platform


@dataclass(frozen=True)
class ContentRef:
    """Output of the platform detector.

    Attributes
    ----------
    url:
        The URL exactly as supplied by the caller.
    platform:
        Detected platform tag.
    content_id:
        Platform-specific content identifier (video id, short-link code).
    fingerprint:
        Cache key derived from ``platform:content_id``.
    canonical_url:
        Normalized URL for the content, used by oEmbed and scrape strategies.
    """

    url: str
    platform: Platform
    content_id: str
    fingerprint: str
    canonical_url: str


class AttemptOutcome(str, Enum):  # noqa: UP042
    """Outcome of a single strategy in the chain."""

    SUCCESS = "success"
    FAILED = "failed"
    MISSING_CREDENTIAL = "missing_credential"
    NOT_ATTEMPTED = "not_attempted"


class ExtractionAttempt(BaseModel):
    """One entry in the ordered attempt trace."""

    model_config = ConfigDict(frozen=True)

    strategy: str
    outcome: AttemptOutcome
    error: str | None = None
    elapsed_seconds: float = 0.0

    @property
    def label(self) -> str:
        return f"{self.strategy}({self.outcome.value})"


class ExtractionTrace(BaseModel):
    """Frozen, ordered record of what the strategy chain did for one call.

    ``attempts`` mirrors the strategies actually tried or skipped; it
    never contains an entry after the first ``success``.  A cache hit has
    an empty attempt list and ``cache_hit=True``.
    """

    model_config = ConfigDict(frozen=True)

    url: str
    platform: Platform
    content_id: str
    fingerprint: str
    attempts: tuple[ExtractionAttempt, ...] = ()
    cache_hit: bool = False
    elapsed_seconds: float = 0.0

    @property
    def successful_strategy(self) -> str | None:
        for attempt in self.attempts:
            if attempt.outcome is AttemptOutcome.SUCCESS:
                return attempt.strategy
        return None

    def strategy_names(self) -> list[str]:
        return [a.strategy for a in self.attempts]

    def labels(self) -> list[str]:
        """Render attempts as ``strategy(outcome)`` strings, or ``["cache_hit"]``."""
        if self.cache_hit:
            return ["cache_hit"]
        return [a.label for a in self.attempts]

    def failure_reasons(self) -> list[str]:
        return [
            f"{a.strategy}: {a.error}"
            for a in self.attempts
            if a.outcome is not AttemptOutcome.SUCCESS and a.error
        ]


class ExtractionResult(BaseModel):
    """Successful outcome of ``extract()``: the record plus its trace."""

    model_config = ConfigDict(frozen=True)

    record: CanonicalRecord
    trace: ExtractionTrace


class MappingStatus(str, Enum):  # noqa: UP042
    """Result of mapping one upstream payload onto the canonical schema."""

    SUCCESS = "success"
    PARTIAL = "partial"
    PARSE_FAILURE = "parse_failure"


@dataclass(frozen=True)
class MappingResult:
    """Return value of ``ISourceAdapter.normalize()``.

    ``record`` is set for SUCCESS and PARTIAL; ``notes`` explain which
    sub-fields are missing (PARTIAL) or why the payload was rejected
    (PARSE_FAILURE).
    """

    status: MappingStatus
    record: CanonicalRecord | None = None
    notes: tuple[str, ...] = field(default_factory=tuple)

    @property
    def usable(self) -> bool:
        return self.status is not MappingStatus.PARSE_FAILURE and self.record is not None

    @classmethod
    def success(cls, record: CanonicalRecord) -> MappingResult:
        return cls(status=MappingStatus.SUCCESS, record=record)

    @classmethod
    def partial(cls, record: CanonicalRecord, *notes: str) -> MappingResult:
        merged = record.model_copy(update={"notes": tuple(record.notes) + tuple(notes)})
        return cls(status=MappingStatus.PARTIAL, record=merged, notes=tuple(notes))

    @classmethod
    def parse_failure(cls, reason: str) -> MappingResult:
        return cls(status=MappingStatus.PARSE_FAILURE, notes=(reason,))
