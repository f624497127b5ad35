"""Type definitions, result dataclasses and exceptions shared across turtlesh."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any


class Operator(Enum):
    """Command-line operators recognized by the scanner, keyed by their literal."""

    NONE = ""
    PIPE = "|"
    APPEND_REDIRECT = ">>"
    TRUNCATE_REDIRECT = ">"
    AND = "&&"
    SEQUENCE = ";"

    @classmethod
    def from_token(cls, token: str) -> Operator:
        """Return the operator a token spells exactly, or ``Operator.NONE``."""
        if not token:
            return cls.NONE
        try:
            return cls(token)
        except ValueError:
            return cls.NONE

    @property
    def is_redirect(self) -> bool:
        return self in (Operator.APPEND_REDIRECT, Operator.TRUNCATE_REDIRECT)


@dataclass
class EvalResult:
    """Result of evaluating an arithmetic expression through the public API."""

    ok: bool
    value: float | None = None
    text: str | None = None
    error: str | None = None
    code: str | None = None

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        result_dict: dict[str, Any] = {"ok": self.ok}
        if self.value is not None:
            result_dict["value"] = self.value
        if self.text is not None:
            result_dict["text"] = self.text
        if self.error is not None:
            result_dict["error"] = self.error
        if self.code is not None:
            result_dict["code"] = self.code
        return result_dict

    def __repr__(self) -> str:
        """Return string representation of the result."""
        if not self.ok:
            return f"EvalResult(ok=False, error={self.error!r}, code={self.code!r})"
        return f"EvalResult(ok=True, value={self.value!r}, text={self.text!r})"


class ParseError(Exception):
    """Raised by the expression evaluator in strict mode."""

    def __init__(self, message: str, code: str = "PARSE_ERROR", position: int = -1):
        self.message = message
        self.code = code
        self.position = position
        super().__init__(self.message)

    def __str__(self) -> str:
        return self.message


class ForkError(Exception):
    """Raised when the shell cannot create a child process.

    This is the only condition that terminates the whole shell.
    """

    def __init__(self, message: str, code: str = "FORK_FAILED"):
        self.message = message
        self.code = code
        super().__init__(self.message)

    def __str__(self) -> str:
        return self.message
