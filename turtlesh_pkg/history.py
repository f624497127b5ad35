"""Command history stored in a plain text file in the user's home directory."""

from __future__ import annotations

import os
import pwd
from pathlib import Path

from .config import HISTORY_FILE_NAME
from .logging_config import get_logger

logger = get_logger("history")


def home_directory() -> Path:
    """Return ``$HOME``, or the home directory from the password database if unset."""
    home = os.environ.get("HOME")
    if home:
        return Path(home)
    return Path(pwd.getpwuid(os.getuid()).pw_dir)


class HistoryFile:
    """Append-only history file, one executed line per row."""

    def __init__(self, path: Path | str | None = None):
        self._path = Path(path) if path is not None else home_directory() / HISTORY_FILE_NAME

    @property
    def path(self) -> Path:
        return self._path

    def append(self, tokens: list[str]) -> bool:
        """Append a line as its space-joined tokens.

        Returns:
            True if the line was written. Empty lines and unwritable files
            are skipped.
        """
        if not tokens:
            return False
        try:
            with open(self._path, "a", encoding="utf-8") as f:
                f.write(" ".join(tokens) + "\n")
        except OSError as e:
            logger.warning(f"Could not write history file {self._path}: {e}")
            return False
        return True
