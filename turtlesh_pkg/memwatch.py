"""Background system memory monitoring.

The watcher samples system-wide memory usage at a fixed interval and, when
usage is above the session's alert threshold, reports the processes using the
most memory. Reports go to stderr so they never end up inside a pipe or a
redirect target the shell has wired to stdout at that moment.
"""

from __future__ import annotations

import sys
import threading
from typing import Any, TextIO

import psutil

from .config import MEM_POLL_SECONDS, MEM_TOP_PROCESSES
from .logging_config import get_logger
from .session import ShellSession

logger = get_logger("memwatch")


def memory_usage_percent() -> float:
    """Current system-wide memory usage in percent."""
    return float(psutil.virtual_memory().percent)


def top_processes(count: int = MEM_TOP_PROCESSES) -> list[dict[str, Any]]:
    """Return the ``count`` processes with the highest memory share.

    Each entry has ``pid``, ``name``, ``memory_percent`` and ``cpu_percent``.
    Processes that vanish or deny access while being inspected are skipped.
    """
    processes: list[dict[str, Any]] = []
    for proc in psutil.process_iter(["pid", "name", "memory_percent", "cpu_percent"]):
        try:
            info = proc.info
        except (psutil.NoSuchProcess, psutil.AccessDenied):
            continue
        processes.append(
            {
                "pid": info.get("pid"),
                "name": info.get("name") or "?",
                "memory_percent": info.get("memory_percent") or 0.0,
                "cpu_percent": info.get("cpu_percent") or 0.0,
            }
        )
    processes.sort(key=lambda p: p["memory_percent"], reverse=True)
    return processes[:count]


def format_report(usage: float, limit: float, processes: list[dict[str, Any]]) -> str:
    lines = [
        f"turtlesh: memory usage {usage:.1f}% is above the {limit:g}% limit",
        f"{'PID':>7}  {'MEM%':>5}  {'CPU%':>5}  NAME",
    ]
    for p in processes:
        lines.append(
            f"{p['pid']:>7}  {p['memory_percent']:>5.1f}  {p['cpu_percent']:>5.1f}  {p['name']}"
        )
    return "\n".join(lines) + "\n"


class MemoryWatcher:
    """Periodic memory check running on a daemon thread.

    The only session state it reads is the alert threshold.

    Example:
        >>> watcher = MemoryWatcher(session, interval=5)
        >>> watcher.start()
        >>> ...
        >>> watcher.stop()
    """

    def __init__(
        self,
        session: ShellSession,
        interval: float = MEM_POLL_SECONDS,
        top_count: int = MEM_TOP_PROCESSES,
        stream: TextIO | None = None,
    ):
        self._session = session
        self._interval = interval
        self._top_count = top_count
        self._stream = stream
        self._stop_event = threading.Event()
        self._thread: threading.Thread | None = None

    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def check_once(self) -> bool:
        """Sample memory once and report if over the limit.

        Returns:
            True if an alert was reported
        """
        usage = memory_usage_percent()
        limit = self._session.mem_limit
        if usage <= limit:
            return False
        logger.info(f"memory usage {usage:.1f}% exceeds limit {limit}%")
        stream = self._stream or sys.stderr
        stream.write(format_report(usage, limit, top_processes(self._top_count)))
        stream.flush()
        return True

    def _run(self) -> None:
        while not self._stop_event.wait(self._interval):
            try:
                self.check_once()
            except (psutil.Error, OSError) as e:
                logger.debug(f"memory check failed: {e}")

    def start(self) -> None:
        if self.running:
            return
        self._stop_event.clear()
        self._thread = threading.Thread(target=self._run, name="turtlesh-memwatch", daemon=True)
        self._thread.start()
        logger.info("Memory monitoring started.")

    def stop(self, timeout: float | None = None) -> None:
        """Signal the thread to finish and wait for it."""
        self._stop_event.set()
        if self._thread is not None:
            self._thread.join(timeout)
            self._thread = None
        logger.info("Memory monitoring stopped.")
