"""Registry of source adapters and the per-platform strategy order.

Adapters register under ``(platform, strategy name)``.  The chain for a
platform is an ordered list of strategy names, normally read from
``config/config.yaml``; reordering or dropping strategies is a
configuration change.  Registering an adapter does not put it in a chain
(``invidious_api`` is registered but opt-in).
"""

from __future__ import annotations

from reelscope.interfaces.source_adapter import ISourceAdapter
from reelscope.models.record import Platform
from reelscope.utils.errors import ConfigurationError

DEFAULT_CHAINS: dict[Platform, tuple[str, ...]] = {
    Platform.YOUTUBE: ("first_party_api", "proxy_api", "oembed"),
    Platform.TIKTOK: ("proxy_api", "scrape", "oembed"),
}


class StrategyRegistry:
    """Holds every known adapter and the configured order per platform."""

    def __init__(self, chains: dict[Platform, list[str] | tuple[str, ...]] | None = None) -> None:
        self._adapters: dict[tuple[Platform, str], ISourceAdapter] = {}
        self._chains: dict[Platform, tuple[str, ...]] = dict(DEFAULT_CHAINS)
        for platform, names in (chains or {}).items():
            self._chains[platform] = tuple(names)

    def register(self, adapter: ISourceAdapter) -> None:
        key = (adapter.platform, adapter.get_provider_name())
        if key in self._adapters:
            raise ConfigurationError(
                message=f"Strategy {key[1]!r} already registered for {key[0].value}"
            )
        self._adapters[key] = adapter

    def set_chain(self, platform: Platform, names: list[str] | tuple[str, ...]) -> None:
        self._chains[platform] = tuple(names)

    def registered(self, platform: Platform) -> list[str]:
        return [name for (p, name) in self._adapters if p is platform]

    def get(self, platform: Platform, name: str) -> ISourceAdapter:
        try:
            return self._adapters[(platform, name)]
        except KeyError:
            raise ConfigurationError(
                message=f"Unknown {platform.value} strategy {name!r}; "
                f"registered: {', '.join(self.registered(platform)) or 'none'}"
            ) from None

    def chain_for(self, platform: Platform) -> list[ISourceAdapter]:
        """Return the adapters for *platform* in configured order.

        Raises
        ------
        ConfigurationError
            If the chain is empty or names an unregistered strategy.
        """
        names = self._chains.get(platform, ())
        if not names:
            raise ConfigurationError(message=f"No strategy chain configured for {platform.value}")
        return [self.get(platform, name) for name in names]

    def validate(self) -> None:
        """Fail fast on a misconfigured chain (called once at startup)."""
        for platform in self._chains:
            self.chain_for(platform)
