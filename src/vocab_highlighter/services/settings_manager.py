"""Settings Manager - Handles database location and interaction tuning."""

import os
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

DEFAULT_POPUP_HIDE_DELAY_MS = 300
DEFAULT_REINIT_DELAY_MS = 1000
DEFAULT_LOG_LEVEL = "INFO"


class SettingsManager:
    """
    Manages settings read from the environment.

    Values come from a .env file in the project root, overridable by real
    environment variables.
    """

    def __init__(self, project_root: Optional[Path] = None):
        """
        Initialize settings manager.

        Args:
            project_root: Path to project root where .env is located.
                         If None, searches upward from current file.
        """
        if project_root is None:
            current = Path(__file__).resolve()
            project_root = current.parent.parent.parent.parent

        env_path = project_root / ".env"
        load_dotenv(dotenv_path=env_path)

        self._project_root = project_root

    def get_db_path(self) -> Path:
        """Location of the SQLite word store."""
        value = os.getenv("VOCAB_DB_PATH")
        if value and value.strip():
            return Path(value.strip()).expanduser()
        return Path.home() / ".vocab_highlighter" / "words.db"

    def get_log_level(self) -> str:
        value = os.getenv("VOCAB_LOG_LEVEL")
        return value.strip().upper() if value and value.strip() else DEFAULT_LOG_LEVEL

    def get_popup_hide_delay_ms(self) -> int:
        """Delay before a popup hides after the pointer leaves it."""
        return self._get_positive_int("VOCAB_POPUP_HIDE_DELAY_MS", DEFAULT_POPUP_HIDE_DELAY_MS)

    def get_reinit_delay_ms(self) -> int:
        """Delay of the one-shot retry when a page is not ready to highlight."""
        return self._get_positive_int("VOCAB_REINIT_DELAY_MS", DEFAULT_REINIT_DELAY_MS)

    def reload_env(self) -> None:
        """Reload environment variables from .env file."""
        env_path = self._project_root / ".env"
        load_dotenv(dotenv_path=env_path, override=True)

    @staticmethod
    def _get_positive_int(name: str, default: int) -> int:
        value = os.getenv(name)
        if value is None or not value.strip():
            return default
        try:
            parsed = int(value.strip())
        except ValueError:
            return default
        return parsed if parsed > 0 else default
