"""Configuration management using pydantic-settings."""

from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from hawkish.bewit.credentials import Algorithm, Credentials
from hawkish.common.errors import BewitError


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="HAWKISH_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Credentials
    key_id: str = Field(
        default="default",
        description="Key identifier embedded in generated bewits",
    )
    key: str | None = Field(
        default=None,
        description="Shared secret used to sign and verify bewits",
    )
    algorithm: Literal["sha1", "sha256"] = Field(
        default="sha256",
        description="HMAC digest algorithm",
    )

    # Bewits
    default_ttl_seconds: int = Field(
        default=300,
        ge=0,
        description="Lifetime of generated bewits when no TTL is given",
    )
    bewit_param: str = Field(
        default="bewit",
        description="Query parameter carrying the bewit",
    )
    auth_exempt_paths: tuple[str, ...] = Field(
        default=("/health",),
        description="Paths exempt from bewit authentication",
    )

    # Logging
    log_level: str = Field(
        default="INFO",
        description="Log level",
    )
    log_json: bool = Field(
        default=False,
        description="Emit logs as JSON lines",
    )

    def credentials(self) -> Credentials:
        """Build credentials from the configured key."""
        if not self.key:
            raise BewitError("No bewit key configured (set HAWKISH_KEY)")
        return Credentials(
            key_id=self.key_id,
            key=self.key,
            algorithm=Algorithm(self.algorithm),
        )


@lru_cache
def get_settings() -> Settings:
    """Get cached application settings."""
    return Settings()
