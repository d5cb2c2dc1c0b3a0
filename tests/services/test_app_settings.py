"""Unit tests for SettingsManager."""

import logging
from pathlib import Path

import pytest

from vocab_highlighter.logging_config import configure_logging
from vocab_highlighter.services import SettingsManager

ENV_KEYS = (
    "VOCAB_DB_PATH",
    "VOCAB_LOG_LEVEL",
    "VOCAB_POPUP_HIDE_DELAY_MS",
    "VOCAB_REINIT_DELAY_MS",
)


@pytest.fixture
def clean_env(monkeypatch):
    """Remove vocab settings from the environment for the test."""
    for key in ENV_KEYS:
        monkeypatch.delenv(key, raising=False)
    return monkeypatch


@pytest.fixture
def settings(tmp_path, clean_env):
    """Provide a SettingsManager rooted at an empty .env."""
    (tmp_path / ".env").write_text("")
    return SettingsManager(project_root=tmp_path)


class TestDefaults:
    """Values used when nothing is configured."""

    def test_db_path_defaults_to_home(self, settings):
        assert settings.get_db_path() == Path.home() / ".vocab_highlighter" / "words.db"

    def test_log_level_defaults_to_info(self, settings):
        assert settings.get_log_level() == "INFO"

    def test_delays(self, settings):
        assert settings.get_popup_hide_delay_ms() == 300
        assert settings.get_reinit_delay_ms() == 1000


class TestEnvFile:
    """Values read from the project's .env file."""

    def test_values_loaded_from_env_file(self, tmp_path, clean_env):
        db_path = tmp_path / "data" / "words.db"
        (tmp_path / ".env").write_text(
            f"VOCAB_DB_PATH={db_path}\n"
            "VOCAB_LOG_LEVEL=debug\n"
            "VOCAB_POPUP_HIDE_DELAY_MS=150\n"
        )

        settings = SettingsManager(project_root=tmp_path)

        assert settings.get_db_path() == db_path
        assert settings.get_log_level() == "DEBUG"
        assert settings.get_popup_hide_delay_ms() == 150
        assert settings.get_reinit_delay_ms() == 1000

    def test_environment_overrides_env_file(self, tmp_path, clean_env):
        (tmp_path / ".env").write_text("VOCAB_REINIT_DELAY_MS=500\n")
        clean_env.setenv("VOCAB_REINIT_DELAY_MS", "2500")

        settings = SettingsManager(project_root=tmp_path)

        assert settings.get_reinit_delay_ms() == 2500

    def test_reload_env_picks_up_changes(self, tmp_path, settings):
        (tmp_path / ".env").write_text("VOCAB_POPUP_HIDE_DELAY_MS=700\n")

        settings.reload_env()

        assert settings.get_popup_hide_delay_ms() == 700


@pytest.mark.parametrize("raw", ["abc", "0", "-20", "   "])
def test_invalid_delay_falls_back_to_default(settings, clean_env, raw):
    clean_env.setenv("VOCAB_POPUP_HIDE_DELAY_MS", raw)
    assert settings.get_popup_hide_delay_ms() == 300


def test_db_path_expands_user(settings, clean_env):
    clean_env.setenv("VOCAB_DB_PATH", "~/vocab/words.db")
    assert settings.get_db_path() == Path.home() / "vocab" / "words.db"


class TestConfigureLogging:
    """Tests for configure_logging."""

    def test_applies_named_level(self):
        assert configure_logging("debug") == "DEBUG"
        assert logging.getLogger().level == logging.DEBUG

    def test_unknown_level_falls_back_to_info(self):
        assert configure_logging("chatty") == "INFO"
        assert logging.getLogger().level == logging.INFO
