"""Logging setup for turtlesh.

Every record carries the id of the process that wrote it: pipeline stages
run in forked children that inherit the shell's handlers, and their records
would otherwise be indistinguishable from the shell's own.

Records go to stderr (never stdout), because stdout is the data channel of
pipes and redirects.
"""

import logging
import os
import sys
from datetime import datetime
from typing import Optional

ROOT_LOGGER_NAME = "turtlesh"

_LEVELS = {
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARNING": logging.WARNING,
    "ERROR": logging.ERROR,
    "CRITICAL": logging.CRITICAL,
}


class StructuredFormatter(logging.Formatter):
    """``<iso time> [LEVEL] pid=<pid> <logger>: <message>`` plus any traceback."""

    def format(self, record: logging.LogRecord) -> str:
        timestamp = datetime.fromtimestamp(record.created).isoformat(timespec="milliseconds")
        text = (
            f"{timestamp} [{record.levelname}] pid={record.process} "
            f"{record.name}: {record.getMessage()}"
        )
        if record.exc_info:
            text += "\n" + self.formatException(record.exc_info)
        return text


def setup_logging(level: str = "WARNING", log_file: Optional[str] = None) -> logging.Logger:
    """Attach the stderr handler (and optionally a file handler) to the shell's logger.

    Calling it again replaces the handlers instead of stacking them. Records
    do not propagate to the root logger.

    Args:
        level: Level name; unknown names fall back to WARNING
        log_file: Optional path; the file is opened in append mode

    Returns:
        The ``turtlesh`` logger
    """
    shell_logger = logging.getLogger(ROOT_LOGGER_NAME)
    shell_logger.setLevel(_LEVELS.get(level.upper(), logging.WARNING))
    shell_logger.propagate = False

    for handler in list(shell_logger.handlers):
        shell_logger.removeHandler(handler)
        handler.close()

    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stderr)]
    if log_file:
        handlers.append(logging.FileHandler(os.path.expanduser(log_file), encoding="utf-8"))
    for handler in handlers:
        handler.setFormatter(StructuredFormatter())
        shell_logger.addHandler(handler)
    return shell_logger


def get_logger(name: str) -> logging.Logger:
    """Logger for one module, named ``turtlesh.<name>``."""
    return logging.getLogger(f"{ROOT_LOGGER_NAME}.{name}")
