"""Spawn external programs with fork/exec and wait for them.

This module also holds the process helpers the connector builds on:
- ``fork_process`` turns a failed ``os.fork`` into the fatal ``ForkError``
- ``decode_wait_status`` maps a raw ``waitpid`` status word to an exit code
- ``flush_std_streams`` empties Python's stdio buffers before a fork or a
  descriptor swap, so buffered text is neither duplicated nor misrouted
"""

from __future__ import annotations

import os
import signal
import sys

from .config import (
    EXEC_FAILED_STATUS,
    EXEC_NOT_FOUND_STATUS,
    GENERIC_FAILURE_STATUS,
)
from .logging_config import get_logger
from .types import ForkError

logger = get_logger("launcher")


def flush_std_streams() -> None:
    for stream in (sys.stdout, sys.stderr):
        try:
            stream.flush()
        except (OSError, ValueError):
            # closed or broken stream; nothing left to lose
            pass


def fork_process(purpose: str) -> int:
    """Fork, returning the child's pid in the parent and 0 in the child.

    Raises:
        ForkError: if the OS refuses to create the process
    """
    flush_std_streams()
    try:
        return os.fork()
    except OSError as e:
        raise ForkError(f"{purpose} failed to fork: {e.strerror or e}") from e


def decode_wait_status(status: int) -> int:
    """Exit code of a normally exited child, the generic failure code otherwise."""
    if os.WIFEXITED(status):
        return os.WEXITSTATUS(status)
    return GENERIC_FAILURE_STATUS


def wait_for(pid: int) -> int:
    """Block until ``pid`` terminates and return its decoded exit code."""
    _, status = os.waitpid(pid, 0)
    code = decode_wait_status(status)
    logger.debug(f"pid {pid} finished with status {code}")
    return code


def report_error(message: str) -> None:
    """Write a diagnostic straight to file descriptor 2."""
    flush_std_streams()
    os.write(2, f"turtlesh: {message}\n".encode(errors="replace"))


def _exec_in_child(argv: list[str]) -> None:
    # Python ignores SIGPIPE; programs expect the default disposition
    signal.signal(signal.SIGPIPE, signal.SIG_DFL)
    try:
        os.execvp(argv[0], argv)
    except FileNotFoundError:
        report_error(f"{argv[0]}: command not found")
        os._exit(EXEC_NOT_FOUND_STATUS)
    except OSError as e:
        report_error(f"{argv[0]}: {e.strerror or e}")
        os._exit(EXEC_FAILED_STATUS)
    except ValueError as e:
        # embedded NUL byte in an argument
        report_error(f"{argv[0]}: {e}")
        os._exit(EXEC_FAILED_STATUS)
    finally:
        # only reached if execvp failed in an unexpected way
        os._exit(EXEC_FAILED_STATUS)


def launch(argv: list[str]) -> int:
    """Run an external program and wait for it.

    The program is looked up on ``PATH`` and receives ``argv`` (including
    ``argv[0]``) as its argument vector.

    Args:
        argv: Program name followed by its arguments

    Returns:
        The program's exit code, 127 if it was not found, 126 if it could
        not be executed, 1 if it was terminated by a signal

    Raises:
        ForkError: if no child process could be created
    """
    logger.debug(f"launching {argv!r}")
    pid = fork_process("Execute")
    if pid == 0:
        _exec_in_child(argv)
    return wait_for(pid)
