"""Shared concurrency primitives for the extraction pipeline.

Two patterns are exposed:

1. **SingleFlight** -- Coalesces concurrent calls that share a key.  The
   first caller for a key starts the coroutine as a task owned by the
   flight; every caller that arrives while it is in flight awaits the same
   task and receives the same result (or the same exception).  The
   orchestrator keys it by content fingerprint so two simultaneous
   ``extract()`` calls for one video spend upstream quota once.

2. **Deadline** -- A monotonic budget shared by every strategy in a chain.
   Each attempt is given ``min(per_strategy_timeout, remaining)`` so the
   total latency of a chain is bounded by the caller, not by the sum of
   per-strategy timeouts.
"""

from __future__ import annotations

import asyncio
import time
from collections.abc import Awaitable, Callable
from typing import Generic, TypeVar

import structlog

from reelscope.utils.logging import get_logger

_T = TypeVar("_T")

_logger: structlog.BoundLogger = get_logger(__name__)


class _Flight(Generic[_T]):
    """A shared task plus the number of callers currently awaiting it."""

    __slots__ = ("task", "waiters")

    def __init__(self, task: asyncio.Future[_T]) -> None:
        self.task = task
        self.waiters = 0


class SingleFlight(Generic[_T]):
    """Per-key in-flight request coalescing.

    Must be used from a single event loop.  The coroutine runs as a task
    owned by the flight rather than by the first caller, so cancelling one
    caller never cancels the others.  The task is cancelled only once every
    caller waiting on it has gone away.  Keys are released as soon as the
    task finishes, so a later call for the same key starts a fresh flight
    (and will normally be served by the result cache).
    """

    def __init__(self) -> None:
        self._inflight: dict[str, _Flight[_T]] = {}

    def __contains__(self, key: str) -> bool:
        return key in self._inflight

    def __len__(self) -> int:
        return len(self._inflight)

    async def do(self, key: str, fn: Callable[[], Awaitable[_T]]) -> _T:
        """Run *fn* once per concurrent *key* and share its outcome.

        Parameters
        ----------
        key:
            Coalescing key (content fingerprint).
        fn:
            Zero-argument coroutine factory.  Only invoked for a new flight.

        Returns
        -------
        _T
            The shared result.  Every caller re-raises the shared exception.
        """
        # No await between the lookup and the insert, so no lock is needed.
        flight = self._inflight.get(key)
        if flight is None:
            flight = _Flight(asyncio.ensure_future(fn()))
            self._inflight[key] = flight
            flight.task.add_done_callback(lambda _task, f=flight: self._release(key, f))
        else:
            _logger.debug("single_flight_joined", key=key, waiters=flight.waiters)

        flight.waiters += 1
        try:
            # shield() keeps a cancelled caller from cancelling the shared task.
            return await asyncio.shield(flight.task)
        finally:
            flight.waiters -= 1
            if flight.waiters == 0 and not flight.task.done():
                flight.task.cancel()
                _logger.debug("single_flight_abandoned", key=key)

    def _release(self, key: str, flight: _Flight[_T]) -> None:
        if self._inflight.get(key) is flight:
            del self._inflight[key]


class Deadline:
    """Monotonic time budget shared across a strategy chain.

    ``Deadline(None)`` is unbounded: :meth:`remaining` returns ``None`` and
    :meth:`expired` is always ``False``.
    """

    def __init__(self, budget_seconds: float | None) -> None:
        self._budget = budget_seconds
        self._start = time.monotonic()

    @property
    def budget(self) -> float | None:
        return self._budget

    def elapsed(self) -> float:
        return time.monotonic() - self._start

    def remaining(self) -> float | None:
        if self._budget is None:
            return None
        return max(0.0, self._budget - self.elapsed())

    def expired(self) -> bool:
        remaining = self.remaining()
        return remaining is not None and remaining <= 0.0

    def timeout_for(self, per_call_timeout: float | None) -> float | None:
        """Return the timeout an individual call should use right now."""
        remaining = self.remaining()
        if remaining is None:
            return per_call_timeout
        if per_call_timeout is None:
            return remaining
        return min(per_call_timeout, remaining)
