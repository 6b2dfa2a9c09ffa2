# -*- coding: utf-8 -*-
"""Location: ./index9_mcp/config.py
Copyright 2025
SPDX-License-Identifier: Apache-2.0
Authors: index9 contributors

index9 MCP gateway configuration settings.
Settings are loaded from environment variables (or a local ``.env`` file) exactly
once per process and are immutable afterwards.

Examples:
    >>> s = Settings(index9_api_timeout=5000, test_model_timeout=60000)
    >>> s.api_timeout_seconds, s.test_timeout_seconds
    (5.0, 60.0)
"""

# Standard
from functools import lru_cache
from typing import Optional

# Third-Party
from pydantic import Field, field_validator, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict

_LOG_LEVELS = {"CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG"}


class Settings(BaseSettings):
    """Gateway settings read from the environment.

    Field names double as (case-insensitive) environment variable names, so
    ``index9_api_url`` is populated from ``INDEX9_API_URL``.
    """

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore", frozen=True)

    # Backend
    index9_api_url: str = Field(default="https://index9.dev/api", description="Base URL of the index9 catalog API")
    index9_api_timeout: int = Field(default=30000, gt=0, description="Timeout for catalog reads, in milliseconds")
    test_model_timeout: int = Field(default=120000, gt=0, description="Timeout for live model tests, in milliseconds")

    # Rate limiting
    rate_limit_window_ms: int = Field(default=60000, gt=0, description="Fixed window length, in milliseconds")
    rate_limit_max_requests: int = Field(default=100, ge=1, description="Admissions per window for each tool")

    # Credentials
    open_router_api_key: Optional[SecretStr] = Field(default=None, description="OpenRouter key forwarded by test_model")

    # Logging
    log_level: str = Field(default="WARNING", description="stderr log level")
    debug_mcp: bool = Field(default=False, description="Log server lifecycle events at INFO")

    @field_validator("index9_api_url")
    @classmethod
    def _strip_trailing_slash(cls, v: str) -> str:
        """Normalize the base URL so request paths can always start with ``/``.

        Args:
            v: Raw base URL.

        Returns:
            str: URL without trailing slashes.

        Examples:
            >>> Settings(index9_api_url="http://localhost:3000/api/").index9_api_url
            'http://localhost:3000/api'
        """
        return v.rstrip("/")

    @field_validator("open_router_api_key", mode="before")
    @classmethod
    def _empty_key_is_unset(cls, v):
        """Treat an empty or blank key as missing.

        Args:
            v: Raw value from the environment.

        Returns:
            The value, or None when blank.
        """
        if isinstance(v, str) and not v.strip():
            return None
        return v

    @field_validator("log_level", mode="before")
    @classmethod
    def _normalize_log_level(cls, v: str) -> str:
        """Upper-case the level and accept ``warn`` as an alias.

        Args:
            v: Raw level name.

        Returns:
            str: A standard logging level name.

        Raises:
            ValueError: If the level is unknown.

        Examples:
            >>> Settings(log_level="warn").log_level
            'WARNING'
            >>> Settings(log_level="debug").log_level
            'DEBUG'
        """
        level = str(v).strip().upper()
        if level == "WARN":
            level = "WARNING"
        if level not in _LOG_LEVELS:
            raise ValueError(f"Unsupported log level: {v}")
        return level

    @property
    def api_timeout_seconds(self) -> float:
        """Read timeout in seconds, as httpx expects it.

        Returns:
            float: ``index9_api_timeout`` converted to seconds.
        """
        return self.index9_api_timeout / 1000

    @property
    def test_timeout_seconds(self) -> float:
        """Live-test timeout in seconds.

        Returns:
            float: ``test_model_timeout`` converted to seconds.
        """
        return self.test_model_timeout / 1000

    @property
    def has_open_router_key(self) -> bool:
        """Whether a usable OpenRouter key is configured.

        Returns:
            bool: True when ``open_router_api_key`` is set.

        Examples:
            >>> Settings(open_router_api_key="sk-or-123").has_open_router_key
            True
            >>> Settings(open_router_api_key="  ").has_open_router_key
            False
        """
        return self.open_router_api_key is not None


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance.

    Returns:
        Settings: A cached instance of the Settings class.
    """
    return Settings()
