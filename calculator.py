"""
Calculator Engine for GlassCalc
Handles calculator state, unary operations, memory and display updates
"""
import math
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Optional

import config
from evaluator import (
    CalculationError,
    DomainError,
    Err,
    MathError,
    Ok,
    evaluate,
    format_number,
    parse_display_number,
)
from expression_buffer import ExpressionBuffer
from logging_config import get_logger

logger = get_logger("calculator")

VALID_TOKENS = "0123456789+-*/()."


class CalcState(Enum):
    ENTERING = "entering"
    RESULT = "result"
    ERROR = "error"


class DisplayMode(Enum):
    NORMAL = "normal"
    SUCCESS = "success"
    ERROR = "error"


@dataclass(frozen=True)
class DisplayState:
    """What the presentation layer renders.

    ``expiry_ms`` is how long a success/error colouring lasts before the
    display should revert to normal; it is None for normal updates.
    """
    text: str
    mode: DisplayMode = DisplayMode.NORMAL
    expiry_ms: Optional[int] = None
    memory_active: bool = False


class UnknownCommandError(ValueError):
    """Raised by Calculator.dispatch for a command name it does not know."""


# ── Unary operations ─────────────────────────────────────────────────────────
# Each takes the displayed number and raises a CalculationError on bad input.

def _square_root(value):
    if value < 0:
        raise MathError("Square root of a negative number")
    return math.sqrt(value)


def _percentage(value):
    return value / 100


def _square(value):
    return value * value


def _factorial(value):
    if value < 0 or value > config.FACTORIAL_LIMIT or not float(value).is_integer():
        raise DomainError(f"Factorial needs an integer between 0 and {config.FACTORIAL_LIMIT}")
    result = 1.0
    for i in range(2, int(value) + 1):
        result *= i
    return result


def _reciprocal(value):
    if value == 0:
        raise MathError("Reciprocal of zero")
    return 1 / value


class Calculator:
    # command name -> method name
    COMMANDS = {
        "append": "append",
        "calculate": "calculate",
        "backspace": "backspace",
        "clear_entry": "clear_entry",
        "clear_all": "clear_all",
        "square_root": "square_root",
        "percentage": "percentage",
        "square": "square",
        "factorial": "factorial",
        "reciprocal": "reciprocal",
        "toggle_sign": "toggle_sign",
        "pi": "insert_pi",
        "memory_add": "memory_add",
        "memory_subtract": "memory_subtract",
        "memory_recall": "memory_recall",
        "memory_clear": "memory_clear",
    }

    def __init__(self):
        self.memory = 0.0
        self.last_result = 0.0
        self.buffer = ExpressionBuffer()
        self.state = CalcState.ENTERING
        self.display_text = ""
        self.mode = DisplayMode.NORMAL
        self.expiry_ms = None
        self._observers = []

    # ── Observers / display ──────────────────────────────────────────────────
    def subscribe(self, callback: Callable[[DisplayState], None]):
        """Call ``callback(DisplayState)`` after every change"""
        self._observers.append(callback)

    def unsubscribe(self, callback):
        if callback in self._observers:
            self._observers.remove(callback)

    def display_state(self) -> DisplayState:
        return DisplayState(
            text=self.display_text,
            mode=self.mode,
            expiry_ms=self.expiry_ms,
            memory_active=self.memory != 0,
        )

    def get_expression(self):
        """Get current expression"""
        return self.buffer.read()

    def _show(self, text, mode=DisplayMode.NORMAL, expiry_ms=None):
        self.display_text = text
        self.mode = mode
        self.expiry_ms = expiry_ms
        state = self.display_state()
        for callback in list(self._observers):
            callback(state)

    def _succeed(self, value, flash=False):
        text = self.buffer.set(format_number(value))
        self.last_result = value
        self.state = CalcState.RESULT
        if flash:
            self._show(text, DisplayMode.SUCCESS, config.SUCCESS_FLASH_MS)
        else:
            self._show(text)
        return Ok(value)

    def _fail(self, kind):
        self.buffer.clear()
        self.state = CalcState.ERROR
        logger.info("Calculation error: %s", kind.value)
        self._show(config.ERROR_TEXT, DisplayMode.ERROR, config.ERROR_FLASH_MS)
        return Err(kind)

    # ── Input ────────────────────────────────────────────────────────────────
    def append(self, token):
        """Add a digit, operator, parenthesis or decimal point"""
        if not isinstance(token, str) or len(token) != 1 or token not in VALID_TOKENS:
            logger.debug("Ignoring invalid token %r", token)
            return self.buffer.read()
        self.buffer.append(token)
        self.state = CalcState.ENTERING
        self._show(self.buffer.read())
        return self.buffer.read()

    def insert_pi(self):
        """Insert pi, multiplying when it follows a number or ')'"""
        self.buffer.insert_constant(repr(math.pi))
        self._show(self.buffer.read())
        return self.buffer.read()

    def backspace(self):
        self.buffer.backspace()
        self._show(self.buffer.read())
        return self.buffer.read()

    def clear_entry(self):
        """Clear the expression, keeping state and memory"""
        self.buffer.clear()
        self._show("")
        return ""

    def clear_all(self):
        """Clear the expression and return to normal entry"""
        self.buffer.clear()
        self.state = CalcState.ENTERING
        self._show("", DisplayMode.NORMAL)
        return ""

    def calculate(self):
        """Evaluate the current expression"""
        outcome = evaluate(self.buffer.read())
        if isinstance(outcome, Ok):
            logger.debug("%s = %s", self.buffer.read(), outcome.value)
            return self._succeed(outcome.value, flash=True)
        return self._fail(outcome.kind)

    # ── Unary operations on the displayed value ──────────────────────────────
    def _apply_unary(self, operation):
        value = parse_display_number(self.display_text)
        try:
            result = operation(value)
            if not math.isfinite(result):
                raise MathError("Result is not finite")
        except CalculationError as exc:
            return self._fail(exc.kind)
        return self._succeed(result)

    def square_root(self):
        return self._apply_unary(_square_root)

    def percentage(self):
        return self._apply_unary(_percentage)

    def square(self):
        return self._apply_unary(_square)

    def factorial(self):
        return self._apply_unary(_factorial)

    def reciprocal(self):
        return self._apply_unary(_reciprocal)

    def toggle_sign(self):
        """Negate the displayed value without changing state or last result"""
        result = -parse_display_number(self.display_text)
        self._show(self.buffer.set(format_number(result)))
        return Ok(result)

    # ── Memory ───────────────────────────────────────────────────────────────
    def _memory_operand(self):
        outcome = evaluate(self.buffer.read())
        if isinstance(outcome, Ok):
            return outcome.value
        return parse_display_number(self.display_text)

    def _set_memory(self, value):
        if not math.isfinite(value):
            logger.warning("Memory overflow, keeping %s", self.memory)
            return self.memory
        self.memory = value
        self._show(self.display_text, self.mode)
        return self.memory

    def memory_add(self):
        """Add the current value to memory (M+)"""
        return self._set_memory(self.memory + self._memory_operand())

    def memory_subtract(self):
        """Subtract the current value from memory (M-)"""
        return self._set_memory(self.memory - self._memory_operand())

    def memory_recall(self):
        """Recall memory value (MR)"""
        text = self.buffer.set(format_number(self.memory))
        self.state = CalcState.ENTERING
        self._show(text)
        return text

    def memory_clear(self):
        """Clear memory (MC)"""
        self.memory = 0.0
        self._show(self.display_text, self.mode)
        return self.memory

    # ── Command dispatch ─────────────────────────────────────────────────────
    def dispatch(self, command, token=None):
        """Run a named command, e.g. ``dispatch("append", "5")``"""
        method_name = self.COMMANDS.get(command)
        if method_name is None:
            raise UnknownCommandError(command)
        method = getattr(self, method_name)
        if command == "append":
            return method(token)
        return method()
