"""Wire commands together through OS pipes.

A connected chain is a head command followed by one or more stages:

    head | stage 1 | stage 2 ... | last stage      (pipeline)
    head | ... > file                              (pipeline ending in a redirect)
    head > file                                    (plain redirect)

All pipes are created and every child's stdin/stdout is arranged before the
head runs. The head runs in the shell process itself with stdout temporarily
pointed at the first pipe, so built-ins such as ``cd`` or ``exit`` keep their
effect on the shell. Each stage runs in its own forked child: a command stage
goes back through the executor (the last one may still hold ``&&`` or ``;``),
a sink stage copies its stdin into a file.

The chain's status is the decoded exit code of its last stage.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Callable, NoReturn

from .config import (
    COPY_CHUNK_SIZE,
    GENERIC_FAILURE_STATUS,
    REDIRECT_FILE_MODE,
)
from .launcher import flush_std_streams, fork_process, report_error, wait_for
from .logging_config import get_logger
from .types import Operator

logger = get_logger("connector")


@dataclass
class Stage:
    """One downstream process of a connected chain.

    ``sink`` is ``Operator.APPEND_REDIRECT`` or ``Operator.TRUNCATE_REDIRECT``
    for a file writer, in which case only ``tokens[0]`` (the path) is used.
    """

    tokens: list[str]
    sink: Operator | None = None


def _write_all(fd: int, data: bytes) -> None:
    view = memoryview(data)
    while view:
        written = os.write(fd, view)
        view = view[written:]


def open_redirect_target(path: str, operator: Operator) -> int:
    """Open a redirect destination, creating it if missing.

    Raises:
        OSError: if the file cannot be opened for writing
    """
    flags = os.O_WRONLY | os.O_CREAT
    if operator is Operator.APPEND_REDIRECT:
        flags |= os.O_APPEND
    else:
        flags |= os.O_TRUNC
    return os.open(path, flags, REDIRECT_FILE_MODE)


class Connector:
    """Run connected chains of commands.

    Args:
        run_command: Runs one operator-free command in the current process
        run_line: Runs a full command line (operators allowed) in the current
            process
    """

    def __init__(
        self,
        run_command: Callable[[list[str]], int],
        run_line: Callable[[list[str]], int],
    ):
        self._run_command = run_command
        self._run_line = run_line

    def redirect(self, left: list[str], right: list[str], operator: Operator) -> int:
        """Send the output of ``left`` into the file named by ``right[0]``."""
        return self.connect(left, [Stage(right, sink=operator)])

    def connect(self, head: list[str], stages: list[Stage]) -> int:
        """Run ``head`` with its output feeding ``stages`` in order.

        Raises:
            ForkError: if a stage process cannot be created
        """
        pipes = [os.pipe() for _ in stages]
        open_fds = {fd for pair in pipes for fd in pair}
        children: list[int] = []
        statuses: list[int] = []
        try:
            for index, stage in enumerate(stages):
                pid = fork_process("Connector")
                if pid == 0:
                    self._run_stage(index, stage, pipes)
                children.append(pid)
                logger.debug(f"stage {index} {stage.tokens!r} running as pid {pid}")

            head_write = pipes[0][1]
            for fd in list(open_fds):
                if fd != head_write:
                    os.close(fd)
                    open_fds.discard(fd)

            head_status = self._run_head(head, head_write)
            logger.debug(f"head {head!r} finished with status {head_status}")
        finally:
            for fd in open_fds:
                os.close(fd)
            statuses = [wait_for(pid) for pid in children]
        if not statuses:
            return GENERIC_FAILURE_STATUS
        return statuses[-1]

    def _run_head(self, head: list[str], write_fd: int) -> int:
        flush_std_streams()
        saved_stdout = os.dup(1)
        try:
            os.dup2(write_fd, 1)
            try:
                return self._run_command(head)
            finally:
                flush_std_streams()
        finally:
            os.dup2(saved_stdout, 1)
            os.close(saved_stdout)

    def _run_stage(self, index: int, stage: Stage, pipes: list[tuple[int, int]]) -> NoReturn:
        status = GENERIC_FAILURE_STATUS
        try:
            os.dup2(pipes[index][0], 0)
            if index + 1 < len(pipes):
                os.dup2(pipes[index + 1][1], 1)
            for read_fd, write_fd in pipes:
                os.close(read_fd)
                os.close(write_fd)

            if stage.sink is not None:
                status = self._copy_to_file(stage)
            else:
                status = self._run_line(stage.tokens)
        except Exception:
            logger.exception(f"stage {stage.tokens!r} failed")
        finally:
            flush_std_streams()
            os._exit(status)

    def _copy_to_file(self, stage: Stage) -> int:
        if not stage.tokens:
            report_error(f"expected file name after '{stage.sink.value}'")
            return GENERIC_FAILURE_STATUS
        path = stage.tokens[0]
        try:
            fd = open_redirect_target(path, stage.sink)
        except OSError as e:
            report_error(f"{path}: {e.strerror or e}")
            return GENERIC_FAILURE_STATUS
        try:
            while True:
                chunk = os.read(0, COPY_CHUNK_SIZE)
                if not chunk:
                    break
                _write_all(fd, chunk)
        finally:
            os.close(fd)
        return 0
