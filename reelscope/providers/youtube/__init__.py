"""YouTube source adapters, in default chain order."""

from reelscope.providers.youtube.data_api_provider import YouTubeDataAPIProvider
from reelscope.providers.youtube.invidious_provider import InvidiousProvider
from reelscope.providers.youtube.oembed_provider import YouTubeOEmbedProvider
from reelscope.providers.youtube.proxy_api_provider import YouTubeProxyAPIProvider

__all__ = [
    "InvidiousProvider",
    "YouTubeDataAPIProvider",
    "YouTubeOEmbedProvider",
    "YouTubeProxyAPIProvider",
]
