"""Public interface definitions for every external collaborator.

Concrete adapters live in ``reelscope/providers/`` and are assembled in
``reelscope/main.py``; business logic depends only on these contracts.

CONCRETE PROVIDER MAP:
    Interface              ->  Concrete implementations
    ISourceAdapter         ->  YouTubeDataAPIProvider, YouTubeProxyAPIProvider,
                               InvidiousProvider, YouTubeOEmbedProvider,
                               TikTokProxyAPIProvider, TikTokScrapeProvider,
                               TikTokOEmbedProvider
    IRecordCache           ->  MemoryRecordCache
    IRightsProvider        ->  ACRCloudProvider
    IMediaProbeProvider    ->  FFprobeProvider
"""

from reelscope.interfaces.cache_provider import IRecordCache
from reelscope.interfaces.media_probe_provider import IMediaProbeProvider
from reelscope.interfaces.rights_provider import IRightsProvider
from reelscope.interfaces.source_adapter import ISourceAdapter

__all__ = [
    "IMediaProbeProvider",
    "IRecordCache",
    "IRightsProvider",
    "ISourceAdapter",
]
