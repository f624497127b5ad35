"""Public API for turtlesh - run command lines and evaluate expressions from Python."""

from __future__ import annotations

from .dispatcher import Dispatcher
from .evaluator import evaluate as _evaluate
from .evaluator import format_number
from .executor import Executor
from .history import HistoryFile
from .session import ShellSession
from .tokenizer import tokenize
from .types import EvalResult, ParseError


def evaluate(expression: str, strict: bool = False) -> EvalResult:
    """Evaluate an arithmetic expression with the ``math`` built-in's grammar.

    Args:
        expression: Expression string (e.g., "2+3*4", "!5", "s(pi/2)")
        strict: Report malformed input instead of substituting zero

    Returns:
        EvalResult with the value and its printed form

    Example:
        >>> from turtlesh_pkg.api import evaluate
        >>> evaluate("2^3^2").text
        '64'
        >>> evaluate("2+x", strict=True).code
        'UNEXPECTED_CHARACTER'
    """
    try:
        value = _evaluate(expression, strict=strict)
    except ParseError as e:
        return EvalResult(ok=False, error=e.message, code=e.code)
    return EvalResult(ok=True, value=value, text=format_number(value))


def create_executor(
    session: ShellSession | None = None, history: HistoryFile | None = None
) -> Executor:
    """Build an executor with its own session and history file.

    Args:
        session: Shared session state (a fresh one by default)
        history: History file used by the ``history`` built-in
            (``$HOME/.turtlesh_history`` by default)
    """
    session = session if session is not None else ShellSession()
    history = history if history is not None else HistoryFile()
    return Executor(Dispatcher(session, history))


def run_command(line: str, executor: Executor | None = None) -> int:
    """Tokenize and execute one command line.

    Output goes straight to the process's stdout/stderr file descriptors.

    Returns:
        The line's exit status

    Raises:
        ForkError: if a child process cannot be created
    """
    executor = executor if executor is not None else create_executor()
    return executor.execute(tokenize(line))
