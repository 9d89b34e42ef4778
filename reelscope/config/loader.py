"""YAML configuration loader with environment variable overrides.

Configuration is loaded in layers (later layers override earlier):

    1. config/config.yaml  -- strategy chains and compliance rules
    2. .env file           -- local developer overrides (not committed)
    3. Environment vars    -- set at deploy time

``load_config()`` reads the YAML file first, then lays the
environment-backed :class:`Settings` values over the app, extraction, cache
and logging sections.  A Settings default only fills keys the YAML leaves
out.  Helpers below turn the merged dictionary into the typed objects the
pipeline consumes.
"""

from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from reelscope.config.settings import Settings
from reelscope.models.compliance import PlatformRules
from reelscope.models.record import Platform
from reelscope.utils.errors import ConfigurationError

DEFAULT_CONFIG_PATH = "config/config.yaml"


def load_config(path: str = DEFAULT_CONFIG_PATH, settings: Settings | None = None) -> dict:
    """Load YAML config and merge with environment-based Settings.

    Environment variables (via Settings) override YAML values where keys overlap.

    Args:
        path: Path to the YAML configuration file.
        settings: Pre-built settings; read from the environment when omitted.

    Returns:
        Fully resolved configuration dictionary.
    """
    config_path = Path(path)
    if config_path.exists():
        try:
            with open(config_path, encoding="utf-8") as f:
                yaml_config = yaml.safe_load(f) or {}
        except yaml.YAMLError as exc:
            raise ConfigurationError(message=f"Invalid YAML in {config_path}: {exc}") from exc
    else:
        yaml_config = {}
    if not isinstance(yaml_config, dict):
        raise ConfigurationError(message=f"{config_path} must contain a mapping")

    settings = settings or Settings()
    env_overrides = {
        ("app", "env"): ("app_env", settings.app_env),
        ("extraction", "strategy_timeout_seconds"): (
            "strategy_timeout_seconds",
            settings.strategy_timeout_seconds,
        ),
        ("extraction", "chain_deadline_seconds"): ("chain_deadline_seconds", settings.chain_deadline),
        ("cache", "max_size"): ("cache_max_size", settings.cache_max_size),
        ("cache", "ttl_seconds"): ("cache_ttl_seconds", settings.cache_ttl_seconds),
        ("logging", "level"): ("log_level", settings.log_level),
    }

    # A Settings default only fills a gap; an explicitly set value
    # (environment, .env or constructor) replaces the YAML value.
    for (section_name, key), (field, value) in env_overrides.items():
        section = _section(yaml_config, section_name)
        if field in settings.model_fields_set or key not in section:
            section[key] = value
    _section(yaml_config, "extraction")["configured_credentials"] = settings.get_configured_credentials()
    return yaml_config


def _section(config: dict, name: str) -> dict:
    section = config.get(name)
    if section is None:
        section = config[name] = {}
    elif not isinstance(section, dict):
        raise ConfigurationError(message=f"{name} must be a mapping")
    return section


def _platform(key: str) -> Platform:
    try:
        return Platform(str(key).lower())
    except ValueError:
        raise ConfigurationError(message=f"Unknown platform in config: {key!r}") from None


def strategy_chains(config: dict[str, Any]) -> dict[Platform, list[str]]:
    """Read ``strategies: {platform: [names...]}`` from the merged config."""
    raw = config.get("strategies") or {}
    chains: dict[Platform, list[str]] = {}
    for key, names in raw.items():
        if not isinstance(names, list) or not all(isinstance(n, str) for n in names):
            raise ConfigurationError(message=f"strategies.{key} must be a list of names")
        chains[_platform(key)] = list(names)
    return chains


def platform_rules(config: dict[str, Any]) -> dict[Platform, PlatformRules]:
    """Read ``compliance: {platform: {...thresholds}}`` into PlatformRules."""
    raw = config.get("compliance") or {}
    rules: dict[Platform, PlatformRules] = {}
    for key, values in raw.items():
        values = dict(values or {})
        max_mb = values.pop("max_file_size_mb", None)
        if max_mb is not None and "max_file_size_bytes" not in values:
            values["max_file_size_bytes"] = int(max_mb) * 1024 * 1024
        if "native_resolutions" in values:
            values["native_resolutions"] = tuple(values["native_resolutions"] or ())
        try:
            rules[_platform(key)] = PlatformRules(**values)
        except ValidationError as exc:
            raise ConfigurationError(message=f"Invalid compliance rules for {key}: {exc}") from exc
    return rules
