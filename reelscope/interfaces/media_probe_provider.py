"""Abstract base class for local media inspection."""

from __future__ import annotations

from abc import ABC, abstractmethod
from pathlib import Path

from reelscope.models.compliance import MediaSpecs


class IMediaProbeProvider(ABC):
    """Contract for tools that read technical properties of a media file."""

    @abstractmethod
    async def probe(self, path: Path) -> MediaSpecs:
        """Return the :class:`MediaSpecs` for the file at *path*.

        Raises
        ------
        reelscope.utils.errors.MediaProbeError
            If the file does not exist or cannot be read at all.
        """

    @abstractmethod
    def get_provider_name(self) -> str:
        """Return a human-readable identifier, e.g. ``"ffprobe"``."""
