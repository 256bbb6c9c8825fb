"""
Configuration settings for the Gym Sync API.

Uses environment variables with sensible defaults for development.
"""

from functools import lru_cache
from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from gymsync.client import DEFAULT_BASE_URL, DEFAULT_RESOURCE_PATH, ClientConfig


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    app_name: str = "Gym Sync API"
    app_version: str = "0.1.0"
    debug: bool = Field(default=False)
    environment: Literal["development", "staging", "production"] = "development"

    # API
    api_v1_prefix: str = "/api/v1"
    allowed_origins: list[str] = Field(
        default=["http://localhost:3000", "http://localhost:8080"]
    )

    # Remote business units API
    brp_api_base_url: str = DEFAULT_BASE_URL
    brp_resource_path: str = DEFAULT_RESOURCE_PATH
    brp_api_timeout: float = Field(default=30.0, gt=0)
    brp_api_token: str | None = None
    brp_accept_language: str | None = "da-DK"

    # Reconciliation
    sync_max_concurrency: int = Field(default=1, ge=1)
    sync_validate_first: bool = False
    catalog_path: str | None = None

    @field_validator("allowed_origins", mode="before")
    @classmethod
    def parse_origins(cls, v):
        """Parse comma-separated origins string to list."""
        if isinstance(v, str):
            return [origin.strip() for origin in v.split(",")]
        return v

    def client_config(self) -> ClientConfig:
        """Client configuration for the remote API."""
        return ClientConfig(
            base_url=self.brp_api_base_url,
            resource_path=self.brp_resource_path,
            timeout=self.brp_api_timeout,
            api_token=self.brp_api_token,
            accept_language=self.brp_accept_language,
        )


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


# Global settings instance
settings = get_settings()
