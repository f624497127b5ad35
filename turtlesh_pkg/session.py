"""Process-wide shell session state.

The session is shared by the interactive loop and the background memory
poller, so every field is read and written under a lock.
"""

from __future__ import annotations

import threading
import time

from .config import DEFAULT_MEM_LIMIT


class Stopwatch:
    """One-shot stopwatch measured on the monotonic clock.

    A stopwatch that was never started measures from a zero timestamp, so
    ``stop()`` still returns a non-negative number.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._started_at = 0.0

    def start(self) -> None:
        with self._lock:
            self._started_at = time.monotonic()

    def stop(self) -> float:
        """Return seconds since the last ``start()``."""
        with self._lock:
            return max(0.0, time.monotonic() - self._started_at)


class ShellSession:
    """Mutable state that lives for the whole shell process.

    Attributes are exposed as properties so callers on other threads never
    touch the raw fields.
    """

    def __init__(self, mem_limit: float = DEFAULT_MEM_LIMIT, strict_math: bool = False):
        self._lock = threading.Lock()
        self._exit_requested = False
        self._mem_limit = float(mem_limit)
        self._strict_math = strict_math
        self._stopwatch = Stopwatch()

    @property
    def exit_requested(self) -> bool:
        with self._lock:
            return self._exit_requested

    def request_exit(self) -> None:
        """Ask the interactive loop to stop after the current line."""
        with self._lock:
            self._exit_requested = True

    @property
    def mem_limit(self) -> float:
        with self._lock:
            return self._mem_limit

    @mem_limit.setter
    def mem_limit(self, value: float) -> None:
        with self._lock:
            self._mem_limit = float(value)

    @property
    def strict_math(self) -> bool:
        return self._strict_math

    @property
    def stopwatch(self) -> Stopwatch:
        return self._stopwatch
