"""Configuration module -- exports Settings and load_config."""

from reelscope.config.loader import load_config, platform_rules, strategy_chains
from reelscope.config.settings import Settings

__all__ = ["Settings", "load_config", "platform_rules", "strategy_chains"]
