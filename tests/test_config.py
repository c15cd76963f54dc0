"""
Tests for settings and environment loading.
"""

import os

import pytest

from pintitles.config import Settings, parse_limit
from pintitles.env import load_env
from pintitles.errors import ConfigError


class TestParseLimit:
    """Test the optional processing limit argument."""

    def test_positive_integer(self):
        assert parse_limit("50") == 50
        assert parse_limit(7) == 7

    def test_unbounded_values(self):
        """Missing, non-positive and non-integer values mean no limit."""
        for value in (None, "", "0", "-3", "abc", "2.5", True):
            assert parse_limit(value) is None


class TestSettings:
    """Test settings construction and validation."""

    def test_defaults(self):
        settings = Settings(token="user:TOKEN")

        assert settings.limit is None
        assert settings.page_size == 100
        assert settings.delay_ms == 0
        assert settings.title_timeout_ms == 3000
        assert settings.excluded_suffixes == (".pdf",)
        assert settings.api_base == "https://api.pinboard.in/v1"

    def test_missing_token(self):
        """A missing token is a startup error."""
        with pytest.raises(ConfigError, match="PINBOARD_TOKEN"):
            Settings(token="")

    def test_invalid_values(self):
        with pytest.raises(ConfigError):
            Settings(token="t", page_size=0)
        with pytest.raises(ConfigError):
            Settings(token="t", delay_ms=-1)
        with pytest.raises(ConfigError):
            Settings(token="t", log_level="LOUD")

    def test_from_env(self):
        env = {
            "PINBOARD_TOKEN": " user:XYZ ",
            "PINTITLES_DELAY_MS": "3000",
            "PINTITLES_PAGE_SIZE": "50",
        }
        settings = Settings.from_env(env)

        assert settings.token == "user:XYZ"
        assert settings.delay_ms == 3000
        assert settings.page_size == 50

    def test_overrides_win_and_none_is_ignored(self):
        env = {"PINBOARD_TOKEN": "env-token", "PINTITLES_DELAY_MS": "3000"}
        settings = Settings.from_env(env, token="cli-token", delay_ms=None, limit=10)

        assert settings.token == "cli-token"
        assert settings.delay_ms == 3000
        assert settings.limit == 10

    def test_from_env_bad_integer(self):
        with pytest.raises(ConfigError, match="PINTITLES_PAGE_SIZE"):
            Settings.from_env({"PINBOARD_TOKEN": "t", "PINTITLES_PAGE_SIZE": "many"})

    def test_from_env_without_token(self):
        with pytest.raises(ConfigError):
            Settings.from_env({})


class TestLoadEnv:
    """Test .env loading."""

    def test_loads_dotenv_file(self, tmp_path, monkeypatch):
        monkeypatch.setenv("PINTITLES_TEST_VALUE", "placeholder")
        monkeypatch.delenv("PINTITLES_TEST_VALUE")
        env_file = tmp_path / ".env"
        env_file.write_text("PINTITLES_TEST_VALUE=from-file\n")

        load_env(env_file)

        assert os.environ["PINTITLES_TEST_VALUE"] == "from-file"

    def test_existing_environment_wins(self, tmp_path, monkeypatch):
        monkeypatch.setenv("PINTITLES_TEST_VALUE", "from-env")
        env_file = tmp_path / ".env"
        env_file.write_text("PINTITLES_TEST_VALUE=from-file\n")

        load_env(env_file)

        assert os.environ["PINTITLES_TEST_VALUE"] == "from-env"

    def test_missing_file_is_ignored(self, tmp_path):
        load_env(tmp_path / "nope.env")
