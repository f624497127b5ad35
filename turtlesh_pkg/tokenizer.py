"""Split an input line into tokens.

Words are separated by whitespace. A double-quoted group keeps its whitespace
and may be glued to surrounding characters (``a"b c"d`` is one token,
``ab cd``). Quotes do not nest and there are no escapes; an unterminated quote
runs to the end of the line. ``""`` yields an empty token. Operators are
recognized later by the scanner, and only as whole unquoted tokens, so
``echo "|"`` passes a literal ``|`` to ``echo``.
"""

from __future__ import annotations


class QuotedToken(str):
    """A token that contained at least one double-quoted group.

    It compares and behaves like a plain ``str``; the scanner uses the
    ``quoted`` marker to never read it as an operator.
    """

    quoted = True


def is_quoted(token: str) -> bool:
    return getattr(token, "quoted", False)


def tokenize(line: str) -> list[str]:
    """Tokenize one command line.

    Args:
        line: Raw input line, with or without its trailing newline

    Returns:
        List of tokens, empty for a blank line. Tokens built from a quoted
        group are ``QuotedToken`` instances.
    """
    tokens: list[str] = []
    current: list[str] = []
    in_token = False
    in_quotes = False
    had_quotes = False

    def finish() -> None:
        text = "".join(current)
        tokens.append(QuotedToken(text) if had_quotes else text)

    for char in line:
        if char == '"':
            in_quotes = not in_quotes
            in_token = True
            had_quotes = True
        elif char.isspace() and not in_quotes:
            if in_token:
                finish()
                current = []
                in_token = False
                had_quotes = False
        else:
            current.append(char)
            in_token = True

    if in_token:
        finish()
    return tokens
