"""reelscope dependency-injection wiring.

Builds every adapter, service and pipeline object from :class:`Settings`
and the YAML config, sharing one ``httpx.AsyncClient``.  The CLI and any
embedding application call :func:`build_content_pipeline` (or the smaller
factories) instead of constructing collaborators themselves.
"""

from __future__ import annotations

from typing import Any

import httpx
import structlog

from reelscope.config.loader import load_config, platform_rules, strategy_chains
from reelscope.config.settings import Settings
from reelscope.pipeline.content_pipeline import ContentPipeline
from reelscope.pipeline.orchestrator import ExtractionOrchestrator
from reelscope.pipeline.strategy_chain import StrategyRegistry
from reelscope.providers.cache.memory_cache import MemoryRecordCache
from reelscope.providers.media.ffprobe_provider import FFprobeProvider
from reelscope.providers.rights.acrcloud_provider import ACRCloudProvider
from reelscope.providers.tiktok.oembed_provider import TikTokOEmbedProvider
from reelscope.providers.tiktok.proxy_api_provider import TikTokProxyAPIProvider
from reelscope.providers.tiktok.scrape_provider import TikTokScrapeProvider
from reelscope.providers.youtube.data_api_provider import YouTubeDataAPIProvider
from reelscope.providers.youtube.invidious_provider import InvidiousProvider
from reelscope.providers.youtube.oembed_provider import YouTubeOEmbedProvider
from reelscope.providers.youtube.proxy_api_provider import YouTubeProxyAPIProvider
from reelscope.services.compliance_evaluator import ComplianceEvaluator
from reelscope.services.platform_detector import PlatformDetector
from reelscope.services.rights_service import RightsService
from reelscope.utils.logging import get_logger

_logger: structlog.BoundLogger = get_logger(__name__)


def build_http_client(app_settings: Settings) -> httpx.AsyncClient:
    """Shared client; callers own it and must ``aclose()`` it."""
    return httpx.AsyncClient(timeout=app_settings.http_timeout_seconds)


def build_registry(
    app_settings: Settings,
    http_client: httpx.AsyncClient,
    config: dict[str, Any] | None = None,
) -> StrategyRegistry:
    """Register every known adapter and apply the configured chains."""
    config = config or {}
    registry = StrategyRegistry(chains=strategy_chains(config))

    # -- YouTube --
    registry.register(YouTubeDataAPIProvider(http_client, api_key=app_settings.youtube_api_key))
    registry.register(YouTubeProxyAPIProvider(http_client, api_key=app_settings.rapidapi_key))
    registry.register(
        InvidiousProvider(http_client, instances=app_settings.get_invidious_instances())
    )
    registry.register(YouTubeOEmbedProvider(http_client))

    # -- TikTok --
    registry.register(
        TikTokProxyAPIProvider(
            http_client,
            api_key=app_settings.tiktok_proxy_key,
            endpoints=config.get("tiktok_proxy_endpoints") or None,
        )
    )
    registry.register(TikTokScrapeProvider(http_client))
    registry.register(TikTokOEmbedProvider(http_client))

    registry.validate()
    return registry


def build_orchestrator(
    app_settings: Settings,
    http_client: httpx.AsyncClient,
    config: dict[str, Any] | None = None,
) -> ExtractionOrchestrator:
    """Timeouts and cache bounds come from the ``extraction`` and ``cache``
    config sections, falling back to *app_settings* for missing keys."""
    config = config or {}
    extraction = config.get("extraction") or {}
    cache = config.get("cache") or {}
    return ExtractionOrchestrator(
        detector=PlatformDetector(),
        registry=build_registry(app_settings, http_client, config),
        cache=MemoryRecordCache(
            max_size=cache.get("max_size", app_settings.cache_max_size),
            ttl=cache.get("ttl_seconds", app_settings.cache_ttl_seconds),
        ),
        strategy_timeout=extraction.get(
            "strategy_timeout_seconds", app_settings.strategy_timeout_seconds
        ),
        # 0 or null disables the chain-wide budget.
        chain_deadline=extraction.get("chain_deadline_seconds", app_settings.chain_deadline) or None,
    )


def build_content_pipeline(
    custom_settings: Settings | None = None,
    http_client: httpx.AsyncClient | None = None,
    config: dict[str, Any] | None = None,
) -> tuple[ContentPipeline, httpx.AsyncClient]:
    """Construct the full pipeline with injected dependencies.

    Returns
    -------
    tuple
        The pipeline and the HTTP client it shares, which the caller must
        close when done.
    """
    s = custom_settings or Settings()
    if config is None:
        config = load_config(settings=s)
    client = http_client or build_http_client(s)

    orchestrator = build_orchestrator(s, client, config)
    evaluator = ComplianceEvaluator(rules=platform_rules(config))
    media_probe = FFprobeProvider(
        ffprobe_path=s.ffprobe_path,
        ffmpeg_path=s.ffmpeg_path,
        timeout=s.media_tool_timeout_seconds,
    )
    rights = RightsService(
        provider=ACRCloudProvider(
            client,
            host=s.acrcloud_host,
            access_key=s.acrcloud_access_key,
            access_secret=s.acrcloud_access_secret,
        ),
        ffmpeg_path=s.ffmpeg_path,
        timeout=s.media_tool_timeout_seconds,
    )

    _logger.info(
        "pipeline_built",
        credentials=s.get_configured_credentials(),
        chains={p.value: names for p, names in strategy_chains(config).items()},
    )
    pipeline = ContentPipeline(
        orchestrator=orchestrator,
        evaluator=evaluator,
        media_probe=media_probe,
        rights_service=rights,
    )
    return pipeline, client
