"""Abstract base class for content-extraction strategies.

Every upstream that can describe a piece of content (first-party API,
third-party proxy, HTML scrape, oEmbed) is wrapped in an
:class:`ISourceAdapter`.  The orchestrator only ever talks to this
interface, so strategies can be reordered, added or removed through
configuration without touching the chain logic.

An adapter splits its work into two steps:

``fetch()``
    Transport only.  Performs the network call(s) and returns the raw
    payload.  Any transport problem (HTTP error, timeout, non-JSON body)
    is raised as :class:`~reelscope.utils.errors.UpstreamFailureError`.
``normalize()``
    Pure.  Maps the raw payload onto a
    :class:`~reelscope.models.record.CanonicalRecord` and reports the
    outcome as a :class:`~reelscope.models.extraction.MappingResult`.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

from reelscope.models.extraction import ContentRef, MappingResult
from reelscope.models.record import Platform, SourceKind


class ISourceAdapter(ABC):
    """Contract for one extraction strategy on one platform."""

    #: Platform this adapter serves.
    platform: Platform
    #: Trust category; drives the quality tier.
    source_kind: SourceKind
    #: Environment variable holding the credential, or ``None``.
    required_credential: str | None = None

    @abstractmethod
    def get_provider_name(self) -> str:
        """Return the strategy name used in traces and config chains.

        Example return values: ``"first_party_api"``, ``"oembed"``.
        """

    @abstractmethod
    def is_available(self) -> bool:
        """Return ``True`` if the adapter's credential (if any) is configured.

        Called before ``fetch()``; an unavailable adapter is recorded as
        ``missing_credential`` without any network I/O.
        """

    @abstractmethod
    async def fetch(self, ref: ContentRef) -> Any:
        """Retrieve the raw upstream payload for *ref*.

        Raises
        ------
        reelscope.utils.errors.UpstreamFailureError
            On transport failure or a non-success HTTP status.
        """

    @abstractmethod
    def normalize(self, payload: Any, ref: ContentRef) -> MappingResult:
        """Map *payload* onto the canonical record schema.

        Must not perform I/O and must not raise for missing fields; an
        uninterpretable payload is reported as ``MappingResult.parse_failure``.
        """

    def remediation(self, error: Exception) -> list[str]:
        """Return operator-facing hints for fixing *error*.

        The default has no advice; adapters with credentials override it.
        """
        return []
