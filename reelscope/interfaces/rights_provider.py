"""Abstract base class for audio-fingerprinting (music rights) providers.

The compliance evaluator's ``music_rights`` check consumes the
:class:`~reelscope.models.compliance.RightsSignal` produced here.  A
provider that cannot answer must say so with
``RightsSignal.unavailable(...)`` rather than inventing a result.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from pathlib import Path

from reelscope.models.compliance import RightsSignal


class IRightsProvider(ABC):
    """Contract for services that identify copyrighted music in audio."""

    @abstractmethod
    async def identify(self, audio_path: Path) -> RightsSignal:
        """Fingerprint the audio sample at *audio_path*.

        Never raises for upstream problems; failures are reported as an
        ``unavailable`` signal carrying the error text.
        """

    @abstractmethod
    def get_provider_name(self) -> str:
        """Return a human-readable identifier, e.g. ``"acrcloud"``."""

    @abstractmethod
    def is_available(self) -> bool:
        """Return ``True`` if credentials are configured."""
