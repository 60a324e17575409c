"""
Application settings using pydantic-settings for type-safe configuration.

All environment variables are centralized here with proper typing, validation,
and sensible defaults. Settings are loaded once at startup and cached.
"""

from __future__ import annotations

import logging
import os
from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger(__name__)


def _is_github_actions() -> bool:
    """Detect if running in GitHub Actions CI (both CI=true and GITHUB_ACTIONS=true)."""
    return os.getenv("CI") == "true" and os.getenv("GITHUB_ACTIONS") == "true"


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    Defaults suit local development; production values come from the
    environment or a .env file.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=False,
    )

    # === Authentication ===
    auth_mode: str = Field(
        default="production",
        description="Authentication mode: 'production' (JWT validation) or 'bypass' (dev only)",
    )
    jwt_secret: str = Field(
        default="",
        description="Shared HS256 secret used to verify access tokens",
    )
    jwt_issuer: str = Field(
        default="sendme-logistics",
        description="Expected 'iss' claim of access tokens",
    )
    jwt_audience: str = Field(
        default="sendme-users",
        description="Expected 'aud' claim of access tokens",
    )

    # === Routing ===
    api_prefix: str = Field(
        default="/api",
        description="Mount point of the gated route table",
    )
    default_page_size: int = Field(
        default=20,
        ge=1,
        le=100,
        description="Default 'limit' for list endpoints",
    )

    # === CORS Configuration ===
    allowed_origins_str: str = Field(
        default="http://localhost:3000,http://localhost:5173",
        alias="ALLOWED_ORIGINS",
        description="Allowed CORS origins (comma-separated)",
    )

    # === Docker Detection ===
    is_docker: bool = Field(
        default=False,
        description="Whether running in Docker container",
    )

    @property
    def allowed_origins(self) -> list[str]:
        """Parse comma-separated origins string into list."""
        return [origin.strip() for origin in self.allowed_origins_str.split(",") if origin.strip()]

    @field_validator("auth_mode", mode="after")
    @classmethod
    def validate_auth_mode(cls, v: str) -> str:
        """Validate and normalize auth_mode."""
        v = v.lower()
        if v not in ("bypass", "production"):
            raise ValueError(f"Invalid AUTH_MODE: {v}. Must be 'bypass' or 'production'")
        return v

    @field_validator("jwt_secret", mode="after")
    @classmethod
    def validate_jwt_secret(cls, v: str) -> str:
        """Warn when the token secret is unset or trivially guessable."""
        if v in {"", "secret", "changeme", "password"} or len(v) < 16:
            logger.warning(
                "SECURITY WARNING: JWT_SECRET is not set or too weak. "
                "Set a strong secret in your .env file for production use."
            )
        return v

    @field_validator("api_prefix", mode="after")
    @classmethod
    def normalize_api_prefix(cls, v: str) -> str:
        """Ensure the prefix starts with a slash and has no trailing slash."""
        v = "/" + v.strip("/")
        return "" if v == "/" else v

    def get_effective_auth_mode(self) -> str:
        """Get effective auth mode, forcing production in Docker (except CI)."""
        from sendme.auth_middleware import _is_docker_environment

        in_docker = self.is_docker or _is_docker_environment()
        if in_docker and not _is_github_actions():
            return "production"
        return self.auth_mode


@lru_cache
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Settings are loaded once and cached for the lifetime of the application.
    """
    return Settings()
