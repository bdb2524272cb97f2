"""Client configuration using pydantic-settings.

Values are read from ``EVT_*`` environment variables or a local ``.env`` file.
"""

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Client settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="EVT_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # ======================
    # Chain node endpoint
    # ======================
    endpoint_protocol: str = Field(default="http", description="Chain node protocol (http/https)")
    endpoint_host: str = Field(default="127.0.0.1", description="Chain node host")
    endpoint_port: int = Field(default=8888, description="Chain node port")
    request_timeout: float = Field(default=30.0, description="HTTP request timeout in seconds")

    # ======================
    # Transactions
    # ======================
    expiration_seconds: int = Field(
        default=100, description="Seconds until a pushed transaction expires"
    )

    # ======================
    # Keys
    # ======================
    private_keys: str = Field(
        default="", description="Comma-separated signing keys used by the command line client"
    )

    # ======================
    # Runtime
    # ======================
    debug: bool = Field(default=False, description="Enable debug logging")

    @property
    def endpoint_url(self) -> str:
        """Base URL of the chain node."""
        return f"{self.endpoint_protocol}://{self.endpoint_host}:{self.endpoint_port}"

    @property
    def key_list(self) -> list[str]:
        """Parse configured keys into a list."""
        if not self.private_keys:
            return []
        return [key.strip() for key in self.private_keys.split(",") if key.strip()]

    def get_safe_dict(self) -> dict:
        """Return settings dict with key material redacted."""
        return {
            "endpoint": self.endpoint_url,
            "request_timeout": self.request_timeout,
            "expiration_seconds": self.expiration_seconds,
            "private_keys": f"*** ({len(self.key_list)} configured)" if self.key_list else "(not set)",
            "debug": self.debug,
        }


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
