"""Extraction orchestrator: URL in, classified canonical record out.

Flow for one ``extract(url)`` call:

    1. Detect platform and content id (no I/O; unsupported URLs fail here).
    2. Cache lookup by fingerprint.  A hit returns at once with an empty
       attempt list and ``cache_hit=True``.
    3. Coalesce with any in-flight extraction of the same fingerprint.
    4. Walk the platform's strategy chain in order:
         - adapter without its credential -> ``missing_credential``, no I/O
         - chain deadline spent          -> remaining strategies ``not_attempted``
         - fetch + normalize bounded by min(strategy timeout, remaining budget)
         - failure / timeout / unusable payload -> ``failed``, next strategy
         - first usable record wins; later strategies are never consulted
    5. Classify the winning record (tier, authenticity, provenance), offer
       it to the cache, and return it with the frozen attempt trace.
    6. If nothing succeeded, raise ``AllStrategiesExhaustedError`` with the
       trace, the failure reasons and de-duplicated remediation hints.

There are no retries inside a strategy; resilience comes from the chain.
"""

from __future__ import annotations

import asyncio
import time

import structlog

from reelscope.interfaces.cache_provider import IRecordCache
from reelscope.interfaces.source_adapter import ISourceAdapter
from reelscope.models.extraction import (
    AttemptOutcome,
    ContentRef,
    ExtractionAttempt,
    ExtractionResult,
    ExtractionTrace,
)
from reelscope.models.record import CanonicalRecord
from reelscope.pipeline.strategy_chain import StrategyRegistry
from reelscope.services.platform_detector import PlatformDetector
from reelscope.services.quality_classifier import classify
from reelscope.utils.concurrency import Deadline, SingleFlight
from reelscope.utils.errors import (
    AllStrategiesExhaustedError,
    MissingCredentialError,
    ParseFailureError,
    ReelScopeError,
)
from reelscope.utils.logging import get_logger

_DEFAULT_STRATEGY_TIMEOUT = 10.0


class ExtractionOrchestrator:
    """Run the per-platform strategy chain for a URL.

    All collaborators are injected; the orchestrator never constructs
    adapters or clients itself.  ``cache`` may be ``None`` to disable
    caching entirely.
    """

    def __init__(
        self,
        detector: PlatformDetector,
        registry: StrategyRegistry,
        cache: IRecordCache | None = None,
        strategy_timeout: float = _DEFAULT_STRATEGY_TIMEOUT,
        chain_deadline: float | None = None,
    ) -> None:
        self._detector = detector
        self._registry = registry
        self._cache = cache
        self._strategy_timeout = strategy_timeout
        self._chain_deadline = chain_deadline
        self._flights: SingleFlight[ExtractionResult] = SingleFlight()
        self._logger: structlog.BoundLogger = get_logger(__name__)

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    async def extract(self, url: str, deadline: float | None = None) -> ExtractionResult:
        """Extract and classify the content behind *url*.

        Parameters
        ----------
        url:
            Content URL in any supported spelling.
        deadline:
            Optional budget in seconds for the whole chain; overrides the
            configured ``chain_deadline`` for this call.

        Raises
        ------
        UnsupportedPlatformError
            If the URL is not recognised (raised before any network I/O).
        AllStrategiesExhaustedError
            If every strategy failed, was skipped or was not attempted.
        """
        ref = self._detector.detect(url)
        started = time.monotonic()

        cached = await self._cache.get(ref.fingerprint) if self._cache else None
        if cached is not None:
            self._logger.info("extraction_cache_hit", fingerprint=ref.fingerprint, url=url)
            trace = ExtractionTrace(
                url=url,
                platform=ref.platform,
                content_id=ref.content_id,
                fingerprint=ref.fingerprint,
                cache_hit=True,
                elapsed_seconds=time.monotonic() - started,
            )
            return ExtractionResult(record=cached, trace=trace)

        budget = deadline if deadline is not None else self._chain_deadline
        return await self._flights.do(ref.fingerprint, lambda: self._run_chain(ref, budget))

    # ------------------------------------------------------------------
    # Chain execution
    # ------------------------------------------------------------------

    async def _run_chain(self, ref: ContentRef, budget: float | None) -> ExtractionResult:
        deadline = Deadline(budget)
        chain = self._registry.chain_for(ref.platform)
        attempts: list[ExtractionAttempt] = []
        remediation: list[str] = []

        log = self._logger.bind(platform=ref.platform.value, fingerprint=ref.fingerprint)
        log.info("extraction_started", url=ref.url, chain=[a.get_provider_name() for a in chain])

        for index, adapter in enumerate(chain):
            name = adapter.get_provider_name()

            if deadline.expired():
                for skipped in chain[index:]:
                    attempts.append(
                        ExtractionAttempt(
                            strategy=skipped.get_provider_name(),
                            outcome=AttemptOutcome.NOT_ATTEMPTED,
                            error=f"chain deadline of {deadline.budget:g}s exceeded",
                        )
                    )
                log.warning("extraction_deadline_exceeded", remaining=len(chain) - index)
                break

            if not adapter.is_available():
                credential = adapter.required_credential or "credential"
                missing = MissingCredentialError(
                    message=f"{credential} is not configured",
                    provider_name=name,
                    credential=adapter.required_credential,
                )
                attempts.append(
                    ExtractionAttempt(
                        strategy=name,
                        outcome=AttemptOutcome.MISSING_CREDENTIAL,
                        error=missing.message,
                    )
                )
                remediation.extend(adapter.remediation(missing))
                log.info("strategy_skipped_missing_credential", strategy=name, credential=credential)
                continue

            timeout = deadline.timeout_for(self._strategy_timeout)
            attempt_started = time.monotonic()
            try:
                record = await asyncio.wait_for(self._attempt(adapter, ref), timeout=timeout)
            except asyncio.TimeoutError:
                attempts.append(
                    ExtractionAttempt(
                        strategy=name,
                        outcome=AttemptOutcome.FAILED,
                        error=f"timed out after {timeout:g}s",
                        elapsed_seconds=time.monotonic() - attempt_started,
                    )
                )
                log.warning("strategy_timeout", strategy=name, timeout=timeout)
                continue
            except ReelScopeError as exc:
                attempts.append(
                    ExtractionAttempt(
                        strategy=name,
                        outcome=AttemptOutcome.FAILED,
                        error=exc.message,
                        elapsed_seconds=time.monotonic() - attempt_started,
                    )
                )
                remediation.extend(adapter.remediation(exc))
                log.warning("strategy_failed", strategy=name, error=exc.message)
                continue
            except Exception as exc:
                # Adapter bugs must not break the chain; the trace keeps the reason.
                attempts.append(
                    ExtractionAttempt(
                        strategy=name,
                        outcome=AttemptOutcome.FAILED,
                        error=f"{type(exc).__name__}: {exc}",
                        elapsed_seconds=time.monotonic() - attempt_started,
                    )
                )
                log.error("strategy_crashed", strategy=name, error=str(exc), exc_info=True)
                continue

            attempts.append(
                ExtractionAttempt(
                    strategy=name,
                    outcome=AttemptOutcome.SUCCESS,
                    elapsed_seconds=time.monotonic() - attempt_started,
                )
            )
            classified = classify(record, adapter.source_kind, provenance=name)
            trace = self._freeze(ref, attempts, deadline)
            if self._cache is not None:
                await self._cache.put(ref.fingerprint, classified)
            log.info(
                "extraction_succeeded",
                strategy=name,
                tier=classified.quality_tier.value,
                authentic=classified.is_authentic,
                attempts=trace.labels(),
            )
            return ExtractionResult(record=classified, trace=trace)

        trace = self._freeze(ref, attempts, deadline)
        unique_hints = list(dict.fromkeys(remediation))
        log.error("chain_exhausted", attempts=trace.labels(), remediation=unique_hints)
        raise AllStrategiesExhaustedError(
            message=f"All {ref.platform.value} extraction strategies failed for {ref.url}",
            trace=trace,
            failure_reasons=trace.failure_reasons(),
            remediation=unique_hints,
        )

    @staticmethod
    async def _attempt(adapter: ISourceAdapter, ref: ContentRef) -> CanonicalRecord:
        payload = await adapter.fetch(ref)
        mapping = adapter.normalize(payload, ref)
        if not mapping.usable or mapping.record is None:
            raise ParseFailureError(
                message="; ".join(mapping.notes) or "payload could not be mapped",
                provider_name=adapter.get_provider_name(),
            )
        return mapping.record

    @staticmethod
    def _freeze(
        ref: ContentRef, attempts: list[ExtractionAttempt], deadline: Deadline
    ) -> ExtractionTrace:
        return ExtractionTrace(
            url=ref.url,
            platform=ref.platform,
            content_id=ref.content_id,
            fingerprint=ref.fingerprint,
            attempts=tuple(attempts),
            elapsed_seconds=deadline.elapsed(),
        )
