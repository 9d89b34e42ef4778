"""Abstract base class for the extraction result cache.

The cache is keyed by content fingerprint (see the platform detector) and
stores only records worth reusing: implementations must refuse records
whose quality tier is ``basic`` so a later call gets a chance to reach a
better source.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from reelscope.models.record import CanonicalRecord


class IRecordCache(ABC):
    """Contract for fingerprint -> record caches.

    All operations are async to allow for network-backed stores (e.g. Redis)
    without blocking the event loop.  Implementations hand out copies, so a
    caller mutating a returned record never affects the stored entry.
    """

    @abstractmethod
    async def get(self, fingerprint: str) -> CanonicalRecord | None:
        """Return the cached record for *fingerprint*, or ``None``."""

    @abstractmethod
    async def put(self, fingerprint: str, record: CanonicalRecord) -> bool:
        """Store *record* under *fingerprint*.

        Returns
        -------
        bool
            ``True`` if the record was admitted, ``False`` if it was
            rejected (``basic`` tier).
        """

    @abstractmethod
    async def delete(self, fingerprint: str) -> None:
        """Remove the entry for *fingerprint* (no-op if absent)."""

    @abstractmethod
    async def exists(self, fingerprint: str) -> bool:
        """Return ``True`` if *fingerprint* is cached and not expired."""

    @abstractmethod
    async def clear(self) -> None:
        """Drop every entry."""
