"""Application configuration (settings and environment).

Single source of truth for cache and service configuration. Uses
pydantic-settings with .env support. Values are validated at load time.
"""

from functools import lru_cache

from pydantic import SecretStr, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Settings loaded from environment and .env.

    Every field has a default so the cache layer can be imported without
    any environment; validate_ranges rejects nonsensical values.
    """

    # App
    app_name: str = "project-cache"
    app_version: str = "1.0.0"
    debug: bool = False
    log_level: str = "INFO"

    # Redis connection: REDIS_URL wins over host/port/db/password when set.
    redis_enabled: bool = True
    redis_url: str | None = None
    redis_host: str = "localhost"
    redis_port: int = 6379
    redis_db: int = 0
    redis_password: SecretStr | None = None
    redis_max_connections: int = 10
    redis_socket_connect_timeout: float = 5.0
    redis_socket_timeout: float = 5.0

    # Cache behaviour
    cache_default_ttl: int = 3600  # 1 hour; 0 = no expiry
    cache_scan_batch_size: int = 500

    # OpenTelemetry
    telemetry_enabled: bool = False
    telemetry_exporter: str = "console"
    telemetry_otlp_endpoint: str | None = None
    telemetry_sample_rate: float = 1.0
    telemetry_environment: str = "development"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=False,
    )

    @model_validator(mode="after")
    def validate_ranges(self) -> "Settings":
        """Reject values the cache layer cannot work with."""
        if self.cache_default_ttl < 0:
            raise ValueError(
                f"CACHE_DEFAULT_TTL must be >= 0 (0 disables expiry), got {self.cache_default_ttl}"
            )
        if self.cache_scan_batch_size <= 0:
            raise ValueError(
                f"CACHE_SCAN_BATCH_SIZE must be positive, got {self.cache_scan_batch_size}"
            )
        if not 1 <= self.redis_port <= 65535:
            raise ValueError(f"REDIS_PORT must be in 1-65535, got {self.redis_port}")
        if self.log_level.upper() not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
            raise ValueError(f"LOG_LEVEL must be a standard logging level, got: {self.log_level!r}")
        if self.telemetry_exporter not in ("console", "otlp", "none"):
            raise ValueError(
                f"telemetry_exporter must be 'console', 'otlp' or 'none', got: {self.telemetry_exporter!r}"
            )
        return self

    def redis_location(self) -> str:
        """Return host:port/db for log lines (never includes credentials)."""
        if self.redis_url:
            return self.redis_url.rsplit("@", 1)[-1]
        return f"{self.redis_host}:{self.redis_port}/{self.redis_db}"


@lru_cache
def get_settings() -> Settings:
    """Return cached settings (single instance per process).

    Validation runs on first call, not at import time. In tests, call
    get_settings.cache_clear() before overriding env vars so the next
    get_settings() uses the new values.

    Returns:
        Loaded and validated Settings instance.
    """
    return Settings()
