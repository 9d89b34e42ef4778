"""Unit tests for the strategy registry."""

from __future__ import annotations

import pytest

from reelscope.models.record import Platform, SourceKind
from reelscope.pipeline.strategy_chain import DEFAULT_CHAINS, StrategyRegistry
from reelscope.utils.errors import ConfigurationError


class TestStrategyRegistry:
    @pytest.fixture()
    def registry(self, make_adapter) -> StrategyRegistry:
        registry = StrategyRegistry(chains={Platform.YOUTUBE: ["first_party_api", "oembed"]})
        registry.register(make_adapter("first_party_api"))
        registry.register(make_adapter("oembed", source_kind=SourceKind.OEMBED))
        registry.register(make_adapter("oembed", platform=Platform.TIKTOK, source_kind=SourceKind.OEMBED))
        return registry

    def test_chain_in_configured_order(self, registry: StrategyRegistry) -> None:
        names = [a.get_provider_name() for a in registry.chain_for(Platform.YOUTUBE)]
        assert names == ["first_party_api", "oembed"]

    def test_same_name_on_two_platforms(self, registry: StrategyRegistry) -> None:
        youtube = registry.get(Platform.YOUTUBE, "oembed")
        tiktok = registry.get(Platform.TIKTOK, "oembed")
        assert youtube is not tiktok
        assert tiktok.platform is Platform.TIKTOK

    def test_duplicate_registration(self, registry: StrategyRegistry, make_adapter) -> None:
        with pytest.raises(ConfigurationError, match="already registered"):
            registry.register(make_adapter("oembed", source_kind=SourceKind.OEMBED))

    def test_unknown_strategy(self, registry: StrategyRegistry) -> None:
        with pytest.raises(ConfigurationError, match="Unknown youtube strategy 'scrape'"):
            registry.get(Platform.YOUTUBE, "scrape")

    def test_default_tiktok_chain_is_unregistered(self, registry: StrategyRegistry) -> None:
        # Only oembed is registered for TikTok; the default chain names proxy_api first.
        with pytest.raises(ConfigurationError):
            registry.validate()

    def test_set_chain(self, registry: StrategyRegistry) -> None:
        registry.set_chain(Platform.TIKTOK, ["oembed"])
        registry.validate()
        assert [a.get_provider_name() for a in registry.chain_for(Platform.TIKTOK)] == ["oembed"]

    def test_empty_chain(self, registry: StrategyRegistry) -> None:
        registry.set_chain(Platform.YOUTUBE, [])
        with pytest.raises(ConfigurationError, match="No strategy chain"):
            registry.chain_for(Platform.YOUTUBE)

    def test_registered(self, registry: StrategyRegistry) -> None:
        assert registry.registered(Platform.YOUTUBE) == ["first_party_api", "oembed"]

    def test_defaults(self) -> None:
        assert DEFAULT_CHAINS[Platform.YOUTUBE] == ("first_party_api", "proxy_api", "oembed")
        assert DEFAULT_CHAINS[Platform.TIKTOK] == ("proxy_api", "scrape", "oembed")
