"""Settings snapshot built from environment variables."""

import dataclasses

import pytest

from perplexica.config import DEFAULT_BASE_URL, DEFAULT_TIMEOUT_MS, load_settings


class TestLoadSettings:
    def test_defaults_when_environment_is_empty(self):
        settings = load_settings({})
        assert settings.base_url == DEFAULT_BASE_URL == "http://localhost:3000"
        assert settings.default_timeout_ms == DEFAULT_TIMEOUT_MS == 120_000
        assert settings.log_level == "info"

    def test_reads_overrides(self):
        settings = load_settings({
            "PERPLEXICA_BASE_URL": "http://perplexica:3001",
            "MCP_REQUEST_TIMEOUT_MS": "30000",
            "MCP_LOG_LEVEL": "DEBUG",
        })
        assert settings.base_url == "http://perplexica:3001"
        assert settings.default_timeout_ms == 30_000
        assert settings.log_level == "debug"

    def test_bad_timeout_falls_back(self):
        for raw in ("abc", "0", "-10", ""):
            assert load_settings({"MCP_REQUEST_TIMEOUT_MS": raw}).default_timeout_ms == DEFAULT_TIMEOUT_MS

    def test_unknown_log_level_falls_back_to_info(self):
        assert load_settings({"MCP_LOG_LEVEL": "verbose"}).log_level == "info"

    def test_settings_are_frozen(self):
        settings = load_settings({})
        with pytest.raises(dataclasses.FrozenInstanceError):
            settings.base_url = "http://elsewhere"
