"""Recursive-descent arithmetic evaluator used by the ``math`` and ``setmemlimit`` built-ins.

Grammar (single left-to-right pass, one character of lookahead, no backtracking):

    expression := term (('+'|'-') term)*
    term       := texp (('*'|'/'|'//') texp)*
    texp       := factor ('^' factor)*
    factor     := number | "pi" | "e" | '(' expression ')'
                | '-' factor | '!' factor
                | 's' factor | 'c' factor | 't' factor | 'l' factor
                | <any other character>
    number     := digit+ ('.' digit+)?

Notes:
- ``^`` is left associative: ``2^3^2`` is ``(2^3)^2`` = 64.
- ``!``, ``s``, ``c``, ``t`` and ``l`` are prefix operators that consume exactly
  one following factor (factorial, sin, cos, tan, natural log).
- Any other character in factor position is consumed and contributes 0. In
  strict mode a ``ParseError`` is raised instead.
- Arithmetic follows IEEE float semantics: nothing here raises on division by
  zero, log of zero or overflow.
"""

from __future__ import annotations

import math

from .config import FACTORIAL_OVERFLOW_AT, OUTPUT_PRECISION
from .types import ParseError

_PREFIX_FUNCTIONS = {
    "s": "sin",
    "c": "cos",
    "t": "tan",
    "l": "log",
}


def factorial(x: float) -> float:
    """Iterative product 1*2*...*floor(x); 1 for anything below 1."""
    if x >= FACTORIAL_OVERFLOW_AT:
        return math.inf
    product = 1.0
    i = 1.0
    while i <= x:
        product *= i
        i += 1.0
    return product


def _divide(a: float, b: float) -> float:
    if b == 0.0:
        if a == 0.0 or math.isnan(a):
            return math.nan
        return math.copysign(math.inf, a) * math.copysign(1.0, b)
    return a / b


def _truncating_divide(a: float, b: float) -> float:
    quotient = _divide(a, b)
    if math.isinf(quotient) or math.isnan(quotient):
        return quotient
    return float(int(quotient))


def _power(base: float, exponent: float) -> float:
    try:
        return math.pow(base, exponent)
    except OverflowError:
        return math.inf
    except ValueError:
        # negative base with a fractional exponent, 0 to a negative power
        if base == 0.0:
            return math.inf
        return math.nan


def _apply_function(name: str, x: float) -> float:
    if name == "log":
        if x == 0.0:
            return -math.inf
        if x < 0.0 or math.isnan(x):
            return math.nan
        return math.log(x)
    try:
        return getattr(math, name)(x)
    except ValueError:
        # sin/cos/tan of an infinity
        return math.nan


def format_number(val: float, precision: int = OUTPUT_PRECISION) -> str:
    """Format a numeric value with the given number of significant digits.

    Args:
        val: Numeric value to format
        precision: Number of significant digits (default: OUTPUT_PRECISION)

    Returns:
        Formatted string, e.g. ``14``, ``3.14159``, ``inf``
    """
    try:
        fmt = "{:." + str(int(precision)) + "g}"
        return fmt.format(float(val))
    except (ValueError, TypeError, OverflowError):
        return str(val)


class ExpressionParser:
    """Parser over one input string that owns its cursor.

    Each instance is single-use and independent, so several built-ins (or
    threads) can evaluate expressions at the same time.

    Example:
        >>> ExpressionParser("2+3*4").parse()
        14.0
    """

    def __init__(self, text: str, strict: bool = False):
        self._text = text
        self._pos = 0
        self._strict = strict

    @property
    def position(self) -> int:
        return self._pos

    @property
    def remaining(self) -> str:
        return self._text[self._pos:]

    def peek(self) -> str:
        """Return the current character, or '' at end of input."""
        if self._pos < len(self._text):
            return self._text[self._pos]
        return ""

    def get(self) -> str:
        """Return the current character and advance past it."""
        char = self.peek()
        if char:
            self._pos += 1
        return char

    def parse(self) -> float:
        """Evaluate one expression from the current position.

        In strict mode the whole input must be consumed.

        Raises:
            ParseError: strict mode only
        """
        if self._strict and not self._text.strip():
            raise ParseError("Empty expression", "EMPTY_EXPRESSION", 0)
        value = self.expression()
        if self._strict and self._pos < len(self._text):
            raise ParseError(
                f"Unexpected input {self.remaining!r} at position {self._pos}",
                "TRAILING_INPUT",
                self._pos,
            )
        return value

    def expression(self) -> float:
        result = self.term()
        while self.peek() in ("+", "-"):
            if self.get() == "+":
                result += self.term()
            else:
                result -= self.term()
        return result

    def term(self) -> float:
        result = self.texp()
        while self.peek() in ("*", "/"):
            if self.get() == "*":
                result *= self.texp()
            elif self.peek() == "/":
                while self.peek() == "/":
                    self.get()
                result = _truncating_divide(result, self.texp())
            else:
                result = _divide(result, self.texp())
        return result

    def texp(self) -> float:
        result = self.factor()
        while self.peek() == "^":
            self.get()
            result = _power(result, self.factor())
        return result

    def factor(self) -> float:
        char = self.peek()
        if self._is_digit(char):
            return self.number()
        if char == "p":
            self.get()
            if self.peek() == "i":
                self.get()
                return math.pi
            return self._unrecognized("p", self._pos - 1)
        if char == "e":
            self.get()
            return math.e
        if char == "(":
            start = self._pos
            self.get()
            result = self.expression()
            closing = self.get()
            if self._strict and closing != ")":
                raise ParseError(
                    f"Missing ')' for '(' at position {start}",
                    "UNBALANCED_PARENTHESES",
                    start,
                )
            return result
        if char == "-":
            self.get()
            return -self.factor()
        if char == "!":
            self.get()
            return factorial(self.factor())
        if char in _PREFIX_FUNCTIONS:
            self.get()
            return _apply_function(_PREFIX_FUNCTIONS[char], self.factor())
        position = self._pos
        return self._unrecognized(self.get(), position)

    def number(self) -> float:
        start = self._pos
        while self._is_digit(self.peek()):
            self.get()
        # a single decimal point; "1." is still 1
        if self.peek() == ".":
            self.get()
            while self._is_digit(self.peek()):
                self.get()
        return float(self._text[start:self._pos])

    @staticmethod
    def _is_digit(char: str) -> bool:
        return bool(char) and "0" <= char <= "9"

    def _unrecognized(self, char: str, position: int) -> float:
        if self._strict:
            if not char:
                raise ParseError(
                    "Unexpected end of expression", "UNEXPECTED_CHARACTER", position
                )
            raise ParseError(
                f"Unexpected character {char!r} at position {position}",
                "UNEXPECTED_CHARACTER",
                position,
            )
        return 0.0


def evaluate(text: str, strict: bool = False) -> float:
    """Evaluate an expression string.

    Args:
        text: Expression such as ``"2+3*4"`` or ``"!5"``
        strict: Raise ``ParseError`` instead of substituting zero for
            unrecognized input

    Returns:
        The value as a float
    """
    return ExpressionParser(text, strict=strict).parse()


def parse_expression(text: str) -> tuple[float, str]:
    """Evaluate the longest leading expression and return it with the unparsed rest.

    Example:
        >>> parse_expression("2+3)x")
        (5.0, ')x')
    """
    parser = ExpressionParser(text)
    value = parser.expression()
    return value, parser.remaining
