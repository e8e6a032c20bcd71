"""Tests for pydantic-settings based environment configuration."""

from __future__ import annotations

import os
from pathlib import Path
from unittest import mock

import pytest
from pydantic import ValidationError

from doclinks import __version__
from doclinks.env_settings import (
    AppEnvSettings,
    CheckerEnvSettings,
    EnvSettings,
    clear_env_settings_cache,
    get_env_settings,
    load_env_settings_from_file,
)


class TestCheckerEnvSettings:
    """Tests for link checker environment settings."""

    def test_default_values(self) -> None:
        """Test default values when no env vars set."""
        with mock.patch.dict(os.environ, {}, clear=True):
            settings = CheckerEnvSettings()
            assert settings.doc_host == "docs.itrsgroup.com"
            assert settings.concurrency == 50
            assert settings.timeout == 30.0
            assert settings.product_map is None
            assert settings.user_agent == f"doclinks/{__version__}"

    def test_loads_from_env(self, tmp_path: Path) -> None:
        """Test loading from environment variables."""
        product_map = tmp_path / "products.yaml"
        product_map.write_text("geneos: docs/geneos\n")
        env = {
            "DOCLINKS_DOC_HOST": "docs.example.com",
            "DOCLINKS_CONCURRENCY": "8",
            "DOCLINKS_TIMEOUT": "2.5",
            "DOCLINKS_PRODUCT_MAP": str(product_map),
        }
        with mock.patch.dict(os.environ, env, clear=True):
            settings = CheckerEnvSettings()
            assert settings.doc_host == "docs.example.com"
            assert settings.concurrency == 8
            assert settings.timeout == 2.5
            assert settings.product_map == product_map

    def test_strips_trailing_slash(self) -> None:
        """Test trailing slash is stripped from the host."""
        with mock.patch.dict(os.environ, {"DOCLINKS_DOC_HOST": "docs.example.com/"}, clear=True):
            assert CheckerEnvSettings().doc_host == "docs.example.com"

    @pytest.mark.parametrize("host", ["https://docs.example.com", "docs.example.com/x", " "])
    def test_rejects_non_bare_host(self, host: str) -> None:
        """Test the host must not carry a scheme or path."""
        with (
            mock.patch.dict(os.environ, {"DOCLINKS_DOC_HOST": host}, clear=True),
            pytest.raises(ValidationError, match="bare host name"),
        ):
            CheckerEnvSettings()

    def test_rejects_zero_concurrency(self) -> None:
        """Test concurrency must be at least one."""
        with (
            mock.patch.dict(os.environ, {"DOCLINKS_CONCURRENCY": "0"}, clear=True),
            pytest.raises(ValidationError),
        ):
            CheckerEnvSettings()

    def test_rejects_non_positive_timeout(self) -> None:
        """Test timeout must be positive."""
        with (
            mock.patch.dict(os.environ, {"DOCLINKS_TIMEOUT": "0"}, clear=True),
            pytest.raises(ValidationError),
        ):
            CheckerEnvSettings()

    def test_missing_product_map_warns(
        self, tmp_path: Path, caplog: pytest.LogCaptureFixture
    ) -> None:
        """Test a missing product map is accepted with a warning."""
        missing = tmp_path / "missing.yaml"
        with mock.patch.dict(os.environ, {"DOCLINKS_PRODUCT_MAP": str(missing)}, clear=True):
            settings = CheckerEnvSettings()
        assert settings.product_map == missing
        assert "Product map not found" in caplog.text


class TestAppEnvSettings:
    """Tests for application environment settings."""

    def test_default_log_level(self) -> None:
        """Test default log level."""
        with mock.patch.dict(os.environ, {}, clear=True):
            assert AppEnvSettings().log_level == "INFO"

    def test_normalizes_log_level(self) -> None:
        """Test log level is upper-cased."""
        with mock.patch.dict(os.environ, {"LOG_LEVEL": "debug"}, clear=True):
            assert AppEnvSettings().log_level == "DEBUG"

    def test_invalid_log_level(self) -> None:
        """Test unknown log levels are rejected."""
        with (
            mock.patch.dict(os.environ, {"LOG_LEVEL": "LOUD"}, clear=True),
            pytest.raises(ValidationError, match="LOG_LEVEL must be one of"),
        ):
            AppEnvSettings()


class TestEnvSettingsCache:
    """Tests for get_env_settings() caching."""

    def test_combined(self) -> None:
        """Test the combined settings expose both groups."""
        settings = get_env_settings()
        assert isinstance(settings, EnvSettings)
        assert settings.checker.concurrency == 50
        assert settings.app.log_level == "INFO"

    def test_cached(self) -> None:
        """Test the same instance is returned until cleared."""
        first = get_env_settings()
        assert get_env_settings() is first
        clear_env_settings_cache()
        assert get_env_settings() is not first

    def test_load_from_file(self, tmp_path: Path) -> None:
        """Test values from a .env file are picked up."""
        env_file = tmp_path / ".env"
        env_file.write_text("DOCLINKS_CONCURRENCY=7\nLOG_LEVEL=warning\n")

        settings = load_env_settings_from_file(env_file)

        assert settings.checker.concurrency == 7
        assert settings.app.log_level == "WARNING"
