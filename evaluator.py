"""
Expression Evaluator for GlassCalc
Validates and computes arithmetic expressions without eval()

Grammar (standard precedence, left associative):

    expression := term (('+' | '-') term)*
    term       := factor (('*' | '/') factor)*
    factor     := ('+' | '-') factor | primary
    primary    := NUMBER | '(' expression ')'
"""
import math
import re
from dataclasses import dataclass
from decimal import Decimal
from enum import Enum
from typing import List, Tuple, Union

from logging_config import get_logger

logger = get_logger("evaluator")

ALLOWED_PATTERN = re.compile(r"^[0-9+\-*/().\s]*$")

_TOKEN_SPEC = [
    ("NUMBER",   r"[0-9]+\.?[0-9]*|\.[0-9]+"),
    ("OP",       r"[+\-*/]"),
    ("LPAREN",   r"\("),
    ("RPAREN",   r"\)"),
    ("SKIP",     r"\s+"),
    ("MISMATCH", r"."),
]
_TOKEN_RE = re.compile("|".join(f"(?P<{name}>{pattern})" for name, pattern in _TOKEN_SPEC), re.DOTALL)

# Leading numeric prefix of a display string ("12.5abc" -> 12.5)
_LEADING_NUMBER = re.compile(r"\s*([+-]?(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:[eE][+-]?[0-9]+)?)")

Token = Tuple[str, str]


class ErrorKind(Enum):
    SYNTAX = "SyntaxError"
    MATH = "MathError"
    DOMAIN = "DomainError"


class CalculationError(Exception):
    """Base class for calculator errors."""
    kind = ErrorKind.SYNTAX


class ExpressionSyntaxError(CalculationError):
    """Invalid character or unparsable expression."""
    kind = ErrorKind.SYNTAX


class MathError(CalculationError):
    """Infinite or undefined result."""
    kind = ErrorKind.MATH


class DomainError(CalculationError):
    """Argument outside the range an operation supports."""
    kind = ErrorKind.DOMAIN


@dataclass(frozen=True)
class Ok:
    value: float
    ok = True


@dataclass(frozen=True)
class Err:
    kind: ErrorKind
    ok = False


Outcome = Union[Ok, Err]


def tokenize(text: str) -> List[Token]:
    tokens = []
    for match in _TOKEN_RE.finditer(text):
        kind = match.lastgroup
        value = match.group()
        if kind == "SKIP":
            continue
        if kind == "MISMATCH":
            raise ExpressionSyntaxError(f"Unexpected character {value!r} at position {match.start()}")
        tokens.append((kind, value))
    return tokens


def _divide(left, right):
    """IEEE division: x/0 is a signed infinity and 0/0 is NaN."""
    if right == 0:
        if left == 0 or math.isnan(left):
            return math.nan
        return math.copysign(math.inf, left) * math.copysign(1.0, right)
    return left / right


class _Parser:
    """Recursive descent parser that computes the value as it goes."""

    def __init__(self, tokens):
        self.tokens = tokens
        self.pos = 0

    def parse(self):
        if not self.tokens:
            raise ExpressionSyntaxError("Empty expression")
        value = self._expression()
        if self.pos < len(self.tokens):
            raise ExpressionSyntaxError(f"Unexpected token {self.tokens[self.pos][1]!r}")
        return value

    def _peek(self):
        if self.pos < len(self.tokens):
            return self.tokens[self.pos]
        return None

    def _next(self):
        token = self._peek()
        if token is None:
            raise ExpressionSyntaxError("Unexpected end of expression")
        self.pos += 1
        return token

    def _expression(self):
        value = self._term()
        while self._peek() in (("OP", "+"), ("OP", "-")):
            _, op = self._next()
            right = self._term()
            value = value + right if op == "+" else value - right
        return value

    def _term(self):
        value = self._factor()
        while self._peek() in (("OP", "*"), ("OP", "/")):
            _, op = self._next()
            right = self._factor()
            value = value * right if op == "*" else _divide(value, right)
        return value

    def _factor(self):
        if self._peek() in (("OP", "+"), ("OP", "-")):
            _, op = self._next()
            operand = self._factor()
            return operand if op == "+" else -operand
        return self._primary()

    def _primary(self):
        kind, value = self._next()
        if kind == "NUMBER":
            return float(value)
        if kind == "LPAREN":
            inner = self._expression()
            closing = self._next()
            if closing[0] != "RPAREN":
                raise ExpressionSyntaxError(f"Expected ')' but found {closing[1]!r}")
            return inner
        raise ExpressionSyntaxError(f"Unexpected token {value!r}")


def compute(text: str) -> float:
    """Evaluate an expression, raising a CalculationError on failure"""
    if not ALLOWED_PATTERN.match(text):
        raise ExpressionSyntaxError("Invalid characters in expression")

    try:
        result = _Parser(tokenize(text)).parse()
    except RecursionError:
        raise ExpressionSyntaxError("Expression nested too deeply") from None
    except OverflowError:
        raise MathError("Numeric overflow") from None

    if not math.isfinite(result):
        raise MathError("Math error (e.g., division by zero)")
    return result


def evaluate(text: str) -> Outcome:
    """Evaluate an expression into Ok(value) or Err(kind). Never raises."""
    try:
        return Ok(compute(text))
    except CalculationError as exc:
        logger.debug("Evaluation of %r failed: %s", text, exc)
        return Err(exc.kind)


def format_number(value: float) -> str:
    """Render a result the way the display shows it.

    Whole numbers drop the fractional part ("4", not "4.0") and values from
    1e-6 up to 1e21 are written without an exponent.
    """
    if value == 0:
        return "0"
    if float(value).is_integer() and abs(value) < 1e21:
        return str(int(value))

    text = repr(float(value))
    if "e" not in text:
        return text
    if 1e-6 <= abs(value) < 1e21:
        return format(Decimal(text), "f")

    mantissa, exponent = text.split("e")
    sign = "-" if exponent.startswith("-") else "+"
    return f"{mantissa}e{sign}{int(exponent.lstrip('+-'))}"


def parse_display_number(text: str) -> float:
    """Read the leading number of a display string; anything unparsable is 0"""
    match = _LEADING_NUMBER.match(text or "")
    if not match:
        return 0.0
    value = float(match.group(1))
    if not math.isfinite(value) or value == 0:
        return 0.0
    return value
