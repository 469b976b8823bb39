# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Unit tests for application settings."""

import os
from unittest.mock import patch

import pytest
from pydantic import ValidationError

from src.core.config.settings import (
    APISettings,
    CORSSettings,
    RecordStoreSettings,
    Settings,
    clear_settings_cache,
    get_settings,
)


class TestRecordStoreSettings:
    """Tests for RecordStoreSettings."""

    def test_default_values(self) -> None:
        """Test default configuration values."""
        with patch.dict(os.environ, {}, clear=True):
            settings = RecordStoreSettings()

        assert settings.url == "http://127.0.0.1:8090"
        assert settings.timeout == 30.0
        assert settings.page_size == 500

    def test_loads_from_environment(self) -> None:
        """Test that settings load from PB_ environment variables."""
        env = {
            "PB_URL": "https://pb.school.test",
            "PB_TIMEOUT": "5",
            "PB_PAGE_SIZE": "200",
        }

        with patch.dict(os.environ, env, clear=False):
            settings = RecordStoreSettings()

        assert settings.url == "https://pb.school.test"
        assert settings.timeout == 5.0
        assert settings.page_size == 200

    def test_page_size_bounds(self) -> None:
        with pytest.raises(ValidationError):
            RecordStoreSettings(page_size=0)


class TestCORSSettings:
    """Tests for CORSSettings."""

    def test_origins_list(self) -> None:
        settings = CORSSettings(origins="https://a.test, https://b.test,")

        assert settings.origins_list == ["https://a.test", "https://b.test"]


class TestAPISettings:
    """Tests for APISettings."""

    def test_default_port(self) -> None:
        with patch.dict(os.environ, {}, clear=True):
            assert APISettings().port == 8000


class TestSettings:
    """Tests for the main Settings class."""

    def test_environment_flags(self) -> None:
        assert Settings(environment="development").is_development is True
        assert Settings(environment="production").is_production is True
        assert Settings(environment="staging").is_production is False

    def test_subsettings_loaded(self) -> None:
        with patch.dict(os.environ, {"PB_URL": "http://pb:8090"}, clear=False):
            settings = Settings()

        assert settings.record_store.url == "http://pb:8090"

    def test_get_settings_is_cached(self, clean_settings) -> None:
        assert get_settings() is get_settings()

    def test_clear_settings_cache(self, clean_settings) -> None:
        first = get_settings()
        clear_settings_cache()

        assert get_settings() is not first
