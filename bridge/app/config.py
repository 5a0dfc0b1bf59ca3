"""
Configuration module for the CAST AI MCP Bridge.

This module uses Pydantic Settings to load and validate environment variables
for the listening socket, the upstream CAST AI API, CORS and logging.

Environment variables are loaded from .env file or system environment.
The resulting Settings object is frozen: it is built once at startup and
handed to the application factory.
"""

import logging
from functools import lru_cache
from typing import List

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


DEFAULT_CASTAI_API_BASE = "https://api.cast.ai"


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.
    """

    # =========================================================================
    # Server Configuration
    # =========================================================================

    HOST: str = Field(
        default="0.0.0.0",
        description="Host to bind the bridge server",
    )

    PORT: int = Field(
        default=3000,
        description="Port to bind the bridge server",
        ge=1,
        le=65535,
    )

    # =========================================================================
    # Upstream Configuration
    # =========================================================================

    CASTAI_API_BASE: str = Field(
        default=DEFAULT_CASTAI_API_BASE,
        description="CAST AI API base URL (e.g., https://api.cast.ai)",
        min_length=1,
    )

    OPENAPI_SPEC_PATH: str = Field(
        default="openapi-spec.yaml",
        description="Path of the OpenAPI document served at /openapi.json",
    )

    # =========================================================================
    # CORS / Logging
    # =========================================================================

    ALLOWED_ORIGINS: str = Field(
        default="*",
        description="Comma-separated list of allowed CORS origins",
    )

    LOG_LEVEL: str = Field(
        default="INFO",
        description="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)",
    )

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
        frozen=True,
    )

    # =========================================================================
    # Computed Properties
    # =========================================================================

    @property
    def allowed_origins_list(self) -> List[str]:
        """
        Parse and return ALLOWED_ORIGINS as a list.

        Returns:
            List of allowed origin URLs, or empty list if not configured.
        """
        return [
            origin.strip()
            for origin in self.ALLOWED_ORIGINS.split(",")
            if origin.strip()
        ]

    # =========================================================================
    # Validators
    # =========================================================================

    @field_validator("CASTAI_API_BASE")
    @classmethod
    def validate_api_base(cls, v: str) -> str:
        """
        Validate the upstream base URL and strip any trailing slash.

        Raises:
            ValueError: If the URL does not use http or https
        """
        v = v.strip()
        if not v.startswith(("http://", "https://")):
            raise ValueError(
                f"CASTAI_API_BASE must be an http(s) URL, got: {v}"
            )
        return v.rstrip("/")

    @field_validator("LOG_LEVEL")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        level = v.strip().upper()
        if not isinstance(logging.getLevelName(level), int):
            raise ValueError(f"Unknown LOG_LEVEL: {v}")
        return level


# =============================================================================
# Settings Singleton
# =============================================================================

@lru_cache()
def get_settings() -> Settings:
    """
    Get or create a singleton Settings instance.

    This function is cached so that the settings are loaded only once
    during the application lifecycle.

    Returns:
        Settings instance with all configuration loaded and validated.

    Raises:
        ValidationError: If environment variables are invalid.
    """
    return Settings()
