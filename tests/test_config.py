"""Tests for settings: environment, argv overrides, defaults."""
import pytest

from superui.config import (
    DEFAULT_API_BASE_URL,
    DEFAULT_TIMEOUT_MS,
    Settings,
    load_settings,
    parse_argv_overrides,
)


class TestArgvOverrides:
    @pytest.mark.parametrize("arg", [
        "API_BASE_URL=http://api:9000",
        "--API_BASE_URL=http://api:9000",
        "/API_BASE_URL:http://api:9000",
        "-API_BASE_URL=http://api:9000",
        '--API_BASE_URL="http://api:9000"',
    ])
    def test_forms(self, arg):
        assert parse_argv_overrides([arg]) == {"API_BASE_URL": "http://api:9000"}

    def test_unknown_keys_ignored(self):
        assert parse_argv_overrides(["FOO=bar", "--verbose", "TIMEOUT=5000"]) == {"TIMEOUT": "5000"}

    def test_later_argument_wins(self):
        assert parse_argv_overrides(["TIMEOUT=1", "--TIMEOUT=2"]) == {"TIMEOUT": "2"}


class TestLoadSettings:
    def test_defaults(self):
        settings = load_settings([], environ={})
        assert settings == Settings()
        assert settings.api_base_url == DEFAULT_API_BASE_URL
        assert settings.timeout_ms == DEFAULT_TIMEOUT_MS
        assert settings.is_development

    def test_environment(self):
        settings = load_settings([], environ={
            "API_BASE_URL": "http://api:9000/",
            "TIMEOUT": "5000",
            "PORT": "4000",
            "MCP_TRANSPORT": "streamable-http",
            "SUPERUI_ENV": "production",
            "CORS_ORIGINS": "https://a.example, https://b.example",
            "LOG_LEVEL": "debug",
        })
        assert settings.api_base_url == "http://api:9000"
        assert settings.timeout_ms == 5000
        assert settings.port == 4000
        assert settings.mcp_transport == "streamable-http"
        assert not settings.is_development
        assert settings.cors_origins == ("https://a.example", "https://b.example")
        assert settings.log_level == "DEBUG"

    def test_argv_beats_environment(self):
        settings = load_settings(
            ["--API_BASE_URL=http://cli:1", "TIMEOUT=100"],
            environ={"API_BASE_URL": "http://env:2", "TIMEOUT": "200"},
        )
        assert settings.api_base_url == "http://cli:1"
        assert settings.timeout_ms == 100

    def test_bad_integer_falls_back(self):
        settings = load_settings([], environ={"TIMEOUT": "soon", "PORT": ""})
        assert settings.timeout_ms == DEFAULT_TIMEOUT_MS
        assert settings.port == 3001

    def test_settings_are_frozen(self):
        with pytest.raises(AttributeError):
            Settings().port = 1
