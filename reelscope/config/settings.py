"""Application settings loaded from environment variables via pydantic-settings.

Values are read from (highest priority first) environment variables, a
``.env`` file in the working directory, then the defaults below.  Field
``youtube_api_key`` maps to env var ``YOUTUBE_API_KEY`` and so on.

An empty credential means "not configured": the matching strategy is
recorded as ``missing_credential`` and skipped without any network I/O.
"""

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """reelscope settings.

    Environment variables override defaults. Loaded from .env file when present.
    """

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # === Extraction credentials ===
    youtube_api_key: str = ""
    rapidapi_key: str = ""
    # Falls back to rapidapi_key when empty (see tiktok_proxy_key).
    rapidapi_tiktok_key: str = ""
    # Comma-separated base URLs, e.g. "https://yewtu.be,https://inv.nadeko.net"
    invidious_instances: str = ""

    # === Rights (ACRCloud) ===
    acrcloud_host: str = ""
    acrcloud_access_key: str = ""
    acrcloud_access_secret: str = ""

    # === Local media tools ===
    ffprobe_path: str = "ffprobe"
    ffmpeg_path: str = "ffmpeg"
    media_tool_timeout_seconds: float = 30.0

    # === Chain behaviour ===
    strategy_timeout_seconds: float = 10.0
    # 0 disables the chain-wide budget.
    chain_deadline_seconds: float = 0.0
    http_timeout_seconds: float = 15.0

    # === Cache ===
    cache_max_size: int = 1000
    cache_ttl_seconds: int = 3600

    # === App Config ===
    app_env: str = "development"
    log_level: str = "INFO"

    @field_validator("strategy_timeout_seconds", "http_timeout_seconds", "media_tool_timeout_seconds")
    @classmethod
    def _positive_timeout(cls, value: float) -> float:
        if value <= 0:
            raise ValueError("timeouts must be positive")
        return value

    @property
    def tiktok_proxy_key(self) -> str:
        return self.rapidapi_tiktok_key or self.rapidapi_key

    @property
    def chain_deadline(self) -> float | None:
        return self.chain_deadline_seconds if self.chain_deadline_seconds > 0 else None

    def get_invidious_instances(self) -> list[str]:
        return [i.strip() for i in self.invidious_instances.split(",") if i.strip()]

    def get_configured_credentials(self) -> list[str]:
        """Return env var names of credentials that have non-empty values."""
        configured: list[str] = []
        if self.youtube_api_key:
            configured.append("YOUTUBE_API_KEY")
        if self.rapidapi_key:
            configured.append("RAPIDAPI_KEY")
        if self.rapidapi_tiktok_key:
            configured.append("RAPIDAPI_TIKTOK_KEY")
        if self.acrcloud_access_key and self.acrcloud_access_secret and self.acrcloud_host:
            configured.append("ACRCLOUD")
        return configured
