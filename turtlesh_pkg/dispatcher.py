"""Built-in command dispatch.

A command whose first token names a built-in is handled inside the shell
process; anything else is handed to the process launcher. Built-in names are
case-sensitive.
"""

from __future__ import annotations

import os
from typing import Callable

from .config import GENERIC_FAILURE_STATUS
from .evaluator import evaluate, format_number
from .history import HistoryFile, home_directory
from .launcher import launch, report_error
from .logging_config import get_logger
from .session import ShellSession
from .types import ParseError

logger = get_logger("dispatcher")


class Dispatcher:
    """Route a single operator-free command to a built-in or an external program."""

    def __init__(
        self,
        session: ShellSession,
        history: HistoryFile,
        launcher: Callable[[list[str]], int] = launch,
    ):
        self._session = session
        self._history = history
        self._launch = launcher
        self._builtins: dict[str, Callable[[list[str]], int]] = {
            "exit": self._exit,
            "cd": self._cd,
            "history": self._show_history,
            "math": self._math,
            "setmemlimit": self._set_mem_limit,
            "showmemlimit": self._show_mem_limit,
            "stopwatch": self._stopwatch,
        }

    @property
    def session(self) -> ShellSession:
        return self._session

    def is_builtin(self, name: str) -> bool:
        return name in self._builtins

    def dispatch(self, argv: list[str]) -> int:
        """Run one command and return its exit status.

        An empty command is an implicit ``exit``.
        """
        if not argv:
            return self._exit(argv)
        if not self.is_builtin(argv[0]):
            return self._launch(argv)
        handler = self._builtins[argv[0]]
        logger.debug(f"built-in {argv[0]} {argv[1:]!r}")
        try:
            return handler(argv)
        except BrokenPipeError:
            logger.debug(f"{argv[0]}: output pipe closed by reader")
            return GENERIC_FAILURE_STATUS

    def _exit(self, argv: list[str]) -> int:
        self._session.request_exit()
        return 1

    def _cd(self, argv: list[str]) -> int:
        target = argv[1] if len(argv) > 1 else str(home_directory())
        try:
            os.chdir(target)
        except OSError as e:
            report_error(f"cd: {target}: {e.strerror or e}")
            return 1
        return 0

    def _show_history(self, argv: list[str]) -> int:
        return self._launch(["cat", "-n", str(self._history.path)])

    def _evaluate_argument(self, argv: list[str]) -> float | None:
        if len(argv) < 2:
            report_error(f'expected argument to "{argv[0]}"')
            return None
        expression = "".join(argv[1:])
        try:
            return evaluate(expression, strict=self._session.strict_math)
        except ParseError as e:
            report_error(f"{argv[0]}: {e}")
            return None

    def _math(self, argv: list[str]) -> int:
        value = self._evaluate_argument(argv)
        if value is None:
            return 1
        print(format_number(value), flush=True)
        return 0

    def _set_mem_limit(self, argv: list[str]) -> int:
        value = self._evaluate_argument(argv)
        if value is None:
            return 1
        self._session.mem_limit = value
        logger.info(f"memory alert threshold set to {value}%")
        return 0

    def _show_mem_limit(self, argv: list[str]) -> int:
        print(f"{format_number(self._session.mem_limit)}%", flush=True)
        return 0

    def _stopwatch(self, argv: list[str]) -> int:
        action = argv[1] if len(argv) > 1 else ""
        if action == "start":
            self._session.stopwatch.start()
            return 0
        if action == "stop":
            elapsed = self._session.stopwatch.stop()
            print(f"{elapsed:.3f} seconds", flush=True)
            return 0
        report_error("usage: stopwatch start|stop")
        return 1
