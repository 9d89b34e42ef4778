"""TikTok source adapters, in default chain order."""

from reelscope.providers.tiktok.oembed_provider import TikTokOEmbedProvider
from reelscope.providers.tiktok.proxy_api_provider import TikTokProxyAPIProvider
from reelscope.providers.tiktok.scrape_provider import TikTokScrapeProvider

__all__ = [
    "TikTokOEmbedProvider",
    "TikTokProxyAPIProvider",
    "TikTokScrapeProvider",
]
