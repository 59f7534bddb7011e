"""Application Configuration: environment-driven settings via pydantic-settings.

Invariants:
    - Every limit and interval is configurable; defaults match the reference deployment
    - get_settings() is cached (lru_cache): single instance per process

Design Decisions:
    - pydantic-settings over raw os.environ: validation, type coercion, .env file support
"""

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False)

    # Service
    service_name: str = "audittoolbox-mcp"
    service_version: str = "0.1.0"
    host: str = "0.0.0.0"
    port: int = 3001

    # Streaming transport
    messages_path: str = "/messages"
    keepalive_interval_seconds: float = Field(15.0, gt=0)

    # Connection limiter (per client address)
    connection_window_seconds: float = Field(15 * 60, gt=0)
    connection_max_per_window: int = Field(10, ge=1)

    # Invocation limiter (per session)
    invocation_window_seconds: float = Field(60, gt=0)
    invocation_max_per_window: int = Field(30, ge=1)
    invocation_max_per_session: int = Field(100, ge=1)
    rate_limit_stale_after_seconds: float = Field(60 * 60, ge=0)
    rate_limit_sweep_interval_seconds: float = Field(5 * 60, gt=0)

    # Validation
    max_payload_mb: float = Field(10.0, gt=0)

    # API
    cors_origins: list[str] = ["*"]

    # Observability
    log_level: str = "INFO"
    log_format: str = "json"

    @property
    def max_payload_bytes(self) -> int:
        return int(self.max_payload_mb * 1024 * 1024)


@lru_cache
def get_settings() -> Settings:
    return Settings()
