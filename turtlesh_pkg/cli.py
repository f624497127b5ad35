"""Command-line entry point and interactive loop for turtlesh."""

from __future__ import annotations

import argparse
import os
import sys

from .config import (
    DEFAULT_MEM_LIMIT,
    ENABLE_MEMWATCH,
    LOG_LEVEL,
    MEM_POLL_SECONDS,
    PROMPT_SUFFIX,
    STRICT_MATH,
    VERSION,
)
from .dispatcher import Dispatcher
from .executor import Executor
from .history import HistoryFile
from .logging_config import get_logger, setup_logging
from .memwatch import MemoryWatcher
from .session import ShellSession
from .tokenizer import tokenize
from .types import ForkError

logger = get_logger("cli")


def build_prompt() -> str:
    """Current working directory followed by ``$ ``."""
    try:
        cwd = os.getcwd()
    except FileNotFoundError:
        # working directory was removed underneath the shell
        cwd = "?"
    return f"{cwd}{PROMPT_SUFFIX}"


def repl_loop(executor: Executor, history: HistoryFile) -> int:
    """Read, execute and record lines until ``exit`` or end of input.

    Raises:
        ForkError: propagated so the caller can terminate the shell
    """
    try:
        import readline  # noqa: F401
    except (ImportError, ModuleNotFoundError):
        # readline is optional line editing
        pass

    session = executor.dispatcher.session
    while not session.exit_requested:
        try:
            raw = input(build_prompt())
        except EOFError:
            # end of input behaves like an empty command line: exit
            print("exit")
            executor.execute([])
            break
        except KeyboardInterrupt:
            print()
            break

        tokens = tokenize(raw)
        if not tokens:
            continue
        try:
            status = executor.execute(tokens)
            logger.debug(f"{raw!r} -> status {status}")
        except ForkError:
            raise
        except Exception as e:
            logger.error(f"Unexpected error running {raw!r}: {e}", exc_info=True)
            print(f"turtlesh: {e}", file=sys.stderr)
        history.append(tokens)
    return 0


def main_entry(argv: list[str] | None = None) -> int:
    """
    Main entry point for the turtlesh CLI.

    Args:
        argv: Optional command-line arguments (defaults to sys.argv)

    Returns:
        Exit code (0 for success, non-zero for errors)
    """
    parser = argparse.ArgumentParser(prog="turtlesh")
    parser.add_argument(
        "-c",
        "--command",
        type=str,
        help="Run one command line and exit with its status (non-interactive)",
    )
    parser.add_argument(
        "-v", "--version", action="store_true", help="Show program version"
    )
    parser.add_argument(
        "--log-level",
        type=str,
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        default=LOG_LEVEL.upper(),
        help="Set logging level",
    )
    parser.add_argument("--log-file", type=str, help="Write logs to file")
    parser.add_argument(
        "--mem-limit",
        type=float,
        default=DEFAULT_MEM_LIMIT,
        help=f"Memory alert threshold in percent (default: {DEFAULT_MEM_LIMIT:g})",
    )
    parser.add_argument(
        "--mem-interval",
        type=float,
        default=MEM_POLL_SECONDS,
        help=f"Seconds between memory checks (default: {MEM_POLL_SECONDS:g})",
    )
    parser.add_argument(
        "--no-memwatch",
        action="store_true",
        help="Disable the background memory monitor",
    )
    parser.add_argument(
        "--strict-math",
        action="store_true",
        help="Report malformed math expressions instead of treating bad input as 0",
    )
    args = parser.parse_args(argv)

    if args.version:
        print(VERSION)
        return 0

    setup_logging(level=args.log_level, log_file=args.log_file)

    session = ShellSession(
        mem_limit=args.mem_limit, strict_math=args.strict_math or STRICT_MATH
    )
    history = HistoryFile()
    executor = Executor(Dispatcher(session, history))

    if args.command is not None:
        try:
            return executor.execute(tokenize(args.command))
        except ForkError as e:
            print(f"turtlesh: {e}", file=sys.stderr)
            return 1

    watcher = None
    if ENABLE_MEMWATCH and not args.no_memwatch and args.mem_interval > 0:
        watcher = MemoryWatcher(session, interval=args.mem_interval)
        watcher.start()
    try:
        return repl_loop(executor, history)
    except ForkError as e:
        print(f"turtlesh: {e}", file=sys.stderr)
        return 1
    finally:
        if watcher is not None:
            watcher.stop(timeout=1.0)


if __name__ == "__main__":
    sys.exit(main_entry())
