from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

VERSION = "0.1.0"


class Settings(BaseSettings):
    """Client settings loaded from environment variables.

    All settings can be configured via ``SNOWREST_``-prefixed environment
    variables or a .env file.
    """

    # API location
    base_host: str = "https://discord.com"
    api_version: int = 10
    user_agent_url: str = "https://github.com/snowrest/snowrest"

    # Retry policy
    max_attempts: int = 3  # Counted attempts (502 and other failures)
    max_rate_limit_retries: int | None = None  # None keeps 429 retries uncapped

    # Bucket defaults used until the first response headers arrive
    bucket_default_limit: int = 5
    bucket_default_remaining: int = 1
    bucket_default_reset_ms: int = 5000
    reaction_min_reset_ms: int = 250  # Reactions are limited to 1 per 250ms

    # HTTP client connection pool settings
    httpx_connect_timeout: float = 10.0
    httpx_read_timeout: float = 30.0
    httpx_write_timeout: float = 30.0  # Uploads can be large
    httpx_pool_timeout: float = 5.0
    httpx_keepalive_expiry: float = 30.0
    httpx_max_connections: int = 100
    httpx_max_keepalive_connections: int = 20

    # Logging settings
    log_level: str = "INFO"
    log_format: str = "text"  # text | structured | json

    @property
    def base_url(self) -> str:
        """Build the versioned REST base URL."""
        return f"{self.base_host.rstrip('/')}/api/v{self.api_version}"

    @field_validator("max_attempts", "bucket_default_limit", "api_version")
    @classmethod
    def validate_at_least_one(cls, v: int) -> int:
        """Validate ceilings and limits are at least 1."""
        if v < 1:
            raise ValueError("value must be at least 1")
        return v

    @field_validator("max_rate_limit_retries")
    @classmethod
    def validate_rate_limit_retries(cls, v: int | None) -> int | None:
        """Validate the optional 429 retry cap."""
        if v is not None and v < 0:
            raise ValueError("max_rate_limit_retries must not be negative")
        return v

    @field_validator(
        "bucket_default_remaining", "bucket_default_reset_ms", "reaction_min_reset_ms"
    )
    @classmethod
    def validate_not_negative(cls, v: int) -> int:
        """Validate bucket defaults are not negative."""
        if v < 0:
            raise ValueError("bucket defaults must not be negative")
        return v

    @field_validator(
        "httpx_connect_timeout", "httpx_read_timeout", "httpx_write_timeout", "httpx_pool_timeout"
    )
    @classmethod
    def validate_timeout_positive(cls, v: float) -> float:
        """Validate timeout values are positive."""
        if v <= 0:
            raise ValueError("Timeout values must be positive")
        return v

    model_config = SettingsConfigDict(
        env_prefix="SNOWREST_", env_file=".env", extra="ignore"
    )


# Global settings instance
settings = Settings()
