"""Environment-based settings using pydantic-settings.

This module provides type-safe environment variable loading with validation.
CLI options override whatever is loaded here.

Usage:
    from doclinks.env_settings import get_env_settings

    env = get_env_settings()
    print(env.checker.concurrency)  # From DOCLINKS_CONCURRENCY env var

Environment Variables:
    Checker:
        DOCLINKS_DOC_HOST - Documentation host (default: "docs.itrsgroup.com")
        DOCLINKS_CONCURRENCY - Max simultaneous link probes (default: 50)
        DOCLINKS_TIMEOUT - Per-request timeout in seconds (default: 30)
        DOCLINKS_PRODUCT_MAP - YAML product map overriding the bundled one
        DOCLINKS_USER_AGENT - User-Agent header for probes

    Application:
        LOG_LEVEL - Logging level (default: "INFO")
"""

from __future__ import annotations

import logging
from functools import lru_cache
from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from doclinks import __version__
from doclinks.prober import DEFAULT_CONCURRENCY, DEFAULT_TIMEOUT
from doclinks.resolver import DEFAULT_DOC_HOST

logger = logging.getLogger(__name__)


class CheckerEnvSettings(BaseSettings):
    """Link checker settings from environment variables.

    Reads from DOCLINKS_* env vars.
    """

    model_config = SettingsConfigDict(
        env_prefix="DOCLINKS_",
        extra="ignore",
    )

    doc_host: str = Field(default=DEFAULT_DOC_HOST, description="Documentation host name")
    concurrency: int = Field(
        default=DEFAULT_CONCURRENCY, ge=1, description="Max simultaneous link probes"
    )
    timeout: float = Field(default=DEFAULT_TIMEOUT, gt=0, description="Request timeout (seconds)")
    product_map: Path | None = Field(default=None, description="Product map YAML file")
    user_agent: str = Field(default=f"doclinks/{__version__}", description="User-Agent header")

    @field_validator("doc_host")
    @classmethod
    def validate_doc_host(cls, v: str) -> str:
        """Documentation host must be a bare host name."""
        v = v.strip().rstrip("/")
        if not v or "://" in v or "/" in v:
            raise ValueError(f"DOCLINKS_DOC_HOST must be a bare host name, got: {v!r}")
        return v

    @field_validator("product_map")
    @classmethod
    def validate_product_map(cls, v: Path | None) -> Path | None:
        """Warn early about a product map that does not exist."""
        if v is not None and not v.exists():
            logger.warning("Product map not found at: %s", v)
        return v


class AppEnvSettings(BaseSettings):
    """Application-level settings from environment variables.

    Reads from the LOG_LEVEL env var.
    """

    model_config = SettingsConfigDict(
        extra="ignore",
    )

    log_level: str = Field(
        default="INFO",
        validation_alias="LOG_LEVEL",
        description="Logging level",
    )

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate and normalize log level."""
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        upper = v.upper()
        if upper not in valid_levels:
            raise ValueError(f"LOG_LEVEL must be one of {valid_levels}, got: {v}")
        return upper


class EnvSettings(BaseSettings):
    """Combined environment settings.

    Use get_env_settings() to get a cached instance.

    Example:
        env = get_env_settings()
        print(env.checker.doc_host)
        print(env.app.log_level)
    """

    model_config = SettingsConfigDict(
        extra="ignore",
    )

    checker: CheckerEnvSettings = Field(default_factory=CheckerEnvSettings)
    app: AppEnvSettings = Field(default_factory=AppEnvSettings)


@lru_cache(maxsize=1)
def get_env_settings() -> EnvSettings:
    """Get cached environment settings.

    The cache is populated on first call.
    """
    return EnvSettings()


def clear_env_settings_cache() -> None:
    """Clear the cached environment settings.

    Useful for testing to ensure fresh settings are loaded.
    """
    get_env_settings.cache_clear()


def load_env_settings_from_file(env_file: Path) -> EnvSettings:
    """Load environment settings from a specific .env file.

    Args:
        env_file: Path to .env file to load.

    Returns:
        EnvSettings instance with configuration from the file.
    """
    from dotenv import load_dotenv

    load_dotenv(env_file, override=True)

    clear_env_settings_cache()
    return get_env_settings()
