"""Unit tests for environment settings."""
import pytest
from hypothesis import given
from hypothesis import strategies as st
from pydantic import ValidationError

from stockchat.config import Settings
from stockchat.ui.config import LogLevel


class TestSettings:
    """Tests for Settings.from_env."""

    def test_defaults(self):
        """Test settings with an empty environment."""
        settings = Settings.from_env({})

        assert settings.agent_url == "http://localhost:3000"
        assert settings.streaming is True
        assert settings.memory_backend == "memory"
        assert settings.request_timeout == 60.0
        assert not settings.sheet_configured

    def test_values_are_parsed(self):
        """Test string parsing of every kind of field."""
        settings = Settings.from_env({
            "STOCKCHAT_AGENT_URL": " https://agent.example.com/ ",
            "STOCKCHAT_API_KEY": "secret",
            "STOCKCHAT_SHEET_ID": "abc123",
            "STOCKCHAT_SHEET_GID": "7",
            "STOCKCHAT_STREAMING": "off",
            "STOCKCHAT_MEMORY_BACKEND": "SQLite",
            "STOCKCHAT_MAX_TOKENS": "512",
            "STOCKCHAT_LOG_LEVEL": "DEBUG",
            "UNRELATED": "ignored",
        })

        assert settings.agent_url == "https://agent.example.com"
        assert settings.api_key == "secret"
        assert settings.sheet_configured
        assert settings.sheet_gid == 7
        assert settings.streaming is False
        assert settings.memory_backend == "sqlite"
        assert settings.max_tokens == 512
        assert settings.log_level == "debug"

    def test_blank_values_are_unset(self):
        """Test that blank optional variables count as unset."""
        settings = Settings.from_env({"STOCKCHAT_API_KEY": "  ", "STOCKCHAT_MAX_TOKENS": ""})

        assert settings.api_key is None
        assert settings.max_tokens is None

    @pytest.mark.parametrize("name, value", [
        ("STOCKCHAT_AGENT_URL", "ftp://agent"),
        ("STOCKCHAT_REQUEST_TIMEOUT", "0"),
        ("STOCKCHAT_SHEET_GID", "-1"),
        ("STOCKCHAT_MEMORY_BACKEND", "redis"),
        ("STOCKCHAT_STREAMING", "maybe"),
        ("STOCKCHAT_MAX_TOKENS", "lots"),
    ])
    def test_invalid_values(self, name: str, value: str):
        """Test that invalid variables fail validation."""
        with pytest.raises(ValidationError):
            Settings.from_env({name: value})

    @given(st.floats(min_value=0.001, max_value=3600))
    def test_positive_timeouts_accepted(self, timeout: float):
        """Property test: any positive timeout is accepted."""
        settings = Settings.from_env({"STOCKCHAT_REQUEST_TIMEOUT": repr(timeout)})
        assert settings.request_timeout == pytest.approx(timeout)


class TestLogLevel:
    """Tests for LogLevel parsing."""

    @pytest.mark.parametrize("text, level", [
        ("debug", LogLevel.DEBUG),
        ("INFO", LogLevel.INFO),
        ("warning", LogLevel.WARNING),
        ("error", LogLevel.ERROR),
        ("unknown", LogLevel.DEBUG),
    ])
    def test_from_string(self, text: str, level: int):
        """Test parsing level names."""
        assert LogLevel.from_string(text) == level

    def test_ordering(self):
        """Test that levels are ordered by severity."""
        assert LogLevel.DEBUG < LogLevel.INFO < LogLevel.WARNING < LogLevel.ERROR
