"""Operator scanning and command-line execution.

A command line is never turned into a tree. The executor finds the leftmost
operator token, splits the line around it, handles the left side and recurses
on the right side, one operator at a time:

    a ; b | c     ->  Sequence(a, "b | c")
    a | b && c    ->  Pipe(a, "b && c")

Operators are only recognized as whole unquoted tokens: ``|``, ``>>``, ``>``,
``&&`` and ``;``.
"""

from __future__ import annotations

from .connector import Connector, Stage
from .dispatcher import Dispatcher
from .logging_config import get_logger
from .tokenizer import is_quoted
from .types import Operator

logger = get_logger("executor")


def find_operator(tokens: list[str]) -> tuple[int, Operator]:
    """Locate the leftmost operator token.

    Quoted tokens are never operators.

    Returns:
        ``(index, operator)``, or ``(-1, Operator.NONE)`` if the line has none
    """
    for index, token in enumerate(tokens):
        if is_quoted(token):
            continue
        operator = Operator.from_token(token)
        if operator is not Operator.NONE:
            return index, operator
    return -1, Operator.NONE


def split_command_line(tokens: list[str]) -> tuple[list[str], Operator, list[str]]:
    """Split a line around its leftmost operator.

    The left part never contains an operator. Without an operator the whole
    line is returned as the left part and the right part is empty.
    """
    index, operator = find_operator(tokens)
    if operator is Operator.NONE:
        return list(tokens), operator, []
    return list(tokens[:index]), operator, list(tokens[index + 1:])


def collect_pipeline(tokens: list[str]) -> list[Stage]:
    """Turn the right-hand side of a pipe into connector stages.

    Consecutive ``|`` operators become one stage each. A redirect that follows
    a pipe becomes a file-sink stage. Any other operator stops the collection
    and the remainder becomes the last stage, run through the executor.

    Example:
        >>> [s.tokens for s in collect_pipeline(["b", "|", "c", "&&", "d"])]
        [['b'], ['c', '&&', 'd']]
    """
    stages: list[Stage] = []
    rest = list(tokens)
    while True:
        index, operator = find_operator(rest)
        if operator is Operator.PIPE:
            stages.append(Stage(rest[:index]))
            rest = rest[index + 1:]
        elif operator.is_redirect:
            stages.append(Stage(rest[:index]))
            stages.append(Stage(rest[index + 1:], sink=operator))
            return stages
        else:
            stages.append(Stage(rest))
            return stages


class Executor:
    """Execute tokenized command lines for one shell session."""

    def __init__(self, dispatcher: Dispatcher):
        self._dispatcher = dispatcher
        self._connector = Connector(dispatcher.dispatch, self.execute)

    @property
    def dispatcher(self) -> Dispatcher:
        return self._dispatcher

    def execute(self, tokens: list[str]) -> int:
        """Run a command line and return its exit status.

        Raises:
            ForkError: if a child process cannot be created
        """
        left, operator, right = split_command_line(tokens)
        if operator is Operator.NONE:
            return self._dispatcher.dispatch(left)

        logger.debug(f"{operator.name}: {left!r} / {right!r}")
        if operator is Operator.PIPE:
            return self._connector.connect(left, collect_pipeline(right))
        if operator.is_redirect:
            return self._connector.redirect(left, right, operator)
        if operator is Operator.AND:
            # 1 only when the left side succeeded and the right side failed
            return int(self._dispatcher.dispatch(left) == 0 and self.execute(right) != 0)

        self._dispatcher.dispatch(left)
        return self.execute(right)
