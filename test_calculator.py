"""
Tests for the calculator controller: state machine, unary operations and memory
"""
import math

import pytest

import config
from calculator import CalcState, Calculator, DisplayMode, DisplayState, UnknownCommandError
from evaluator import ErrorKind, Err, Ok


def enter(calc, text):
    for token in text:
        calc.append(token)
    return calc


class TestInput:
    def setup_method(self):
        self.calc = Calculator()

    def test_initial_state(self):
        assert self.calc.state == CalcState.ENTERING
        assert self.calc.display_state() == DisplayState("")
        assert self.calc.memory == 0

    def test_operator_collapsing(self):
        enter(self.calc, "3+-")
        assert self.calc.get_expression() == "3-"
        assert self.calc.display_text == "3-"

    def test_duplicate_decimal(self):
        enter(self.calc, "3..")
        assert self.calc.get_expression() == "3."

    @pytest.mark.parametrize("token", ["a", "12", "", None, "^", " "])
    def test_invalid_tokens_are_ignored(self, token):
        enter(self.calc, "12")
        self.calc.append(token)
        assert self.calc.get_expression() == "12"

    def test_pi_after_digit_multiplies(self):
        enter(self.calc, "5")
        self.calc.insert_pi()
        assert self.calc.get_expression() == "5*" + repr(math.pi)
        assert self.calc.state == CalcState.ENTERING

    def test_pi_keeps_result_state(self):
        enter(self.calc, "2+2")
        self.calc.calculate()
        self.calc.insert_pi()
        assert self.calc.get_expression().startswith("4*3.14159")
        assert self.calc.state == CalcState.RESULT

    def test_backspace(self):
        enter(self.calc, "123")
        self.calc.backspace()
        assert self.calc.get_expression() == "12"
        assert self.calc.display_text == "12"

    def test_clear_entry_keeps_state_and_memory(self):
        enter(self.calc, "7")
        self.calc.memory_add()
        self.calc.calculate()
        self.calc.clear_entry()
        assert self.calc.get_expression() == ""
        assert self.calc.state == CalcState.RESULT
        assert self.calc.memory == 7

    def test_clear_all_is_idempotent(self):
        enter(self.calc, "1/0")
        self.calc.calculate()
        self.calc.clear_all()
        once = (self.calc.display_state(), self.calc.state, self.calc.get_expression())
        self.calc.clear_all()
        twice = (self.calc.display_state(), self.calc.state, self.calc.get_expression())
        assert once == twice
        assert self.calc.state == CalcState.ENTERING
        assert self.calc.display_state().mode == DisplayMode.NORMAL


class TestCalculate:
    def setup_method(self):
        self.calc = Calculator()

    def test_success(self):
        enter(self.calc, "2*(3+4)")
        assert self.calc.calculate() == Ok(14)
        assert self.calc.get_expression() == "14"
        assert self.calc.last_result == 14
        assert self.calc.state == CalcState.RESULT
        state = self.calc.display_state()
        assert state.text == "14"
        assert state.mode == DisplayMode.SUCCESS
        assert state.expiry_ms == config.SUCCESS_FLASH_MS

    def test_result_can_be_chained(self):
        enter(self.calc, "2+2")
        self.calc.calculate()
        enter(self.calc, "*3")
        assert self.calc.get_expression() == "4*3"
        assert self.calc.state == CalcState.ENTERING
        assert self.calc.calculate() == Ok(12)

    @pytest.mark.parametrize("expression, kind", [
        ("10/0", ErrorKind.MATH),
        ("2+", ErrorKind.SYNTAX),
        ("", ErrorKind.SYNTAX),
    ])
    def test_error(self, expression, kind):
        enter(self.calc, expression)
        assert self.calc.calculate() == Err(kind)
        assert self.calc.get_expression() == ""
        assert self.calc.state == CalcState.ERROR
        state = self.calc.display_state()
        assert state.text == config.ERROR_TEXT
        assert state.mode == DisplayMode.ERROR
        assert state.expiry_ms == config.ERROR_FLASH_MS

    def test_error_keeps_last_result(self):
        enter(self.calc, "6*7")
        self.calc.calculate()
        enter(self.calc, "/0")
        self.calc.calculate()
        assert self.calc.last_result == 42

    def test_input_after_error_replaces_message(self):
        enter(self.calc, "1/0")
        self.calc.calculate()
        self.calc.append("8")
        assert self.calc.display_text == "8"
        assert self.calc.state == CalcState.ENTERING
        assert self.calc.display_state().mode == DisplayMode.NORMAL


class TestUnaryOperations:
    def setup_method(self):
        self.calc = Calculator()

    def test_factorial(self):
        enter(self.calc, "5")
        assert self.calc.factorial() == Ok(120)
        assert self.calc.get_expression() == "120"
        assert self.calc.last_result == 120
        assert self.calc.state == CalcState.RESULT

    def test_factorial_of_zero(self):
        enter(self.calc, "0")
        assert self.calc.factorial() == Ok(1)

    def test_factorial_upper_bound_is_finite(self):
        enter(self.calc, "170")
        outcome = self.calc.factorial()
        assert outcome.ok
        assert math.isfinite(outcome.value)

    @pytest.mark.parametrize("text", ["171", "-1", "2.5"])
    def test_factorial_domain_error(self, text):
        enter(self.calc, text)
        assert self.calc.factorial() == Err(ErrorKind.DOMAIN)
        assert self.calc.state == CalcState.ERROR
        assert self.calc.get_expression() == ""
        assert self.calc.display_text == config.ERROR_TEXT

    def test_square_root(self):
        enter(self.calc, "9")
        assert self.calc.square_root() == Ok(3)
        assert self.calc.display_text == "3"

    def test_square_root_of_negative(self):
        enter(self.calc, "-4")
        assert self.calc.square_root() == Err(ErrorKind.MATH)
        assert self.calc.state == CalcState.ERROR

    def test_reciprocal(self):
        enter(self.calc, "4")
        assert self.calc.reciprocal() == Ok(0.25)
        assert self.calc.get_expression() == "0.25"

    def test_reciprocal_of_zero(self):
        enter(self.calc, "0")
        assert self.calc.reciprocal() == Err(ErrorKind.MATH)

    def test_percentage(self):
        enter(self.calc, "50")
        assert self.calc.percentage() == Ok(0.5)

    def test_square(self):
        enter(self.calc, "1.5")
        assert self.calc.square() == Ok(2.25)

    def test_square_overflow(self):
        self.calc.buffer.set("1" + "0" * 200)
        self.calc.display_text = self.calc.buffer.read()
        assert self.calc.square() == Err(ErrorKind.MATH)

    def test_operates_on_leading_number_of_display(self):
        enter(self.calc, "16+9")
        assert self.calc.square_root() == Ok(4)

    def test_unparsable_display_is_zero(self):
        enter(self.calc, "1/0")
        self.calc.calculate()
        assert self.calc.square_root() == Ok(0)

    def test_toggle_sign_keeps_state(self):
        enter(self.calc, "2+3")
        self.calc.calculate()
        self.calc.clear_entry()
        enter(self.calc, "8")
        assert self.calc.toggle_sign() == Ok(-8)
        assert self.calc.get_expression() == "-8"
        assert self.calc.state == CalcState.ENTERING
        assert self.calc.last_result == 5

    def test_toggle_sign_of_zero(self):
        self.calc.toggle_sign()
        assert self.calc.display_text == "0"


class TestMemory:
    def setup_method(self):
        self.calc = Calculator()

    def test_round_trip(self):
        self.calc.memory_clear()
        enter(self.calc, "5")
        self.calc.memory_add()
        assert self.calc.memory == 5
        self.calc.clear_entry()
        enter(self.calc, "2")
        self.calc.memory_subtract()
        assert self.calc.memory == 3
        self.calc.memory_recall()
        assert self.calc.get_expression() == "3"
        assert self.calc.state == CalcState.ENTERING

    def test_add_evaluates_expression(self):
        enter(self.calc, "2*3")
        self.calc.memory_add()
        assert self.calc.memory == 6

    def test_add_falls_back_to_display(self):
        enter(self.calc, "4+")
        self.calc.memory_add()
        assert self.calc.memory == 4
        assert self.calc.state == CalcState.ENTERING

    def test_add_after_error_adds_zero(self):
        enter(self.calc, "1/0")
        self.calc.calculate()
        self.calc.memory_add()
        assert self.calc.memory == 0
        assert self.calc.display_text == config.ERROR_TEXT

    def test_calculation_does_not_reset_memory(self):
        enter(self.calc, "9")
        self.calc.memory_add()
        self.calc.clear_all()
        enter(self.calc, "1+1")
        self.calc.calculate()
        assert self.calc.memory == 9

    def test_memory_clear(self):
        enter(self.calc, "9")
        self.calc.memory_add()
        self.calc.memory_clear()
        assert self.calc.memory == 0
        assert not self.calc.display_state().memory_active

    def test_memory_indicator(self):
        enter(self.calc, "9")
        self.calc.memory_add()
        assert self.calc.display_state().memory_active

    def test_memory_add_keeps_success_mode(self):
        enter(self.calc, "2+2")
        self.calc.calculate()
        self.calc.memory_add()
        state = self.calc.display_state()
        assert state.mode == DisplayMode.SUCCESS
        assert state.expiry_ms is None
        assert state.text == "4"
        assert self.calc.memory == 4

    def test_memory_ops_keep_error_mode(self):
        enter(self.calc, "1/0")
        self.calc.calculate()
        for operation in (self.calc.memory_add, self.calc.memory_subtract, self.calc.memory_clear):
            operation()
            state = self.calc.display_state()
            assert state.mode == DisplayMode.ERROR
            assert state.text == config.ERROR_TEXT
            assert state.expiry_ms is None


class TestObserversAndDispatch:
    def setup_method(self):
        self.calc = Calculator()
        self.seen = []
        self.calc.subscribe(self.seen.append)

    def test_every_mutation_notifies(self):
        enter(self.calc, "1+2")
        self.calc.calculate()
        assert [s.text for s in self.seen] == ["1", "1+", "1+2", "3"]
        assert self.seen[-1].mode == DisplayMode.SUCCESS

    def test_ignored_token_does_not_notify(self):
        self.calc.append("x")
        assert self.seen == []

    def test_unsubscribe(self):
        self.calc.unsubscribe(self.seen.append)
        self.calc.append("1")
        assert self.seen == []

    def test_independent_instances(self):
        other = Calculator()
        enter(self.calc, "5")
        self.calc.memory_add()
        assert other.memory == 0
        assert other.get_expression() == ""

    def test_dispatch(self):
        self.calc.dispatch("append", "9")
        assert self.calc.dispatch("square_root") == Ok(3)
        self.calc.dispatch("pi")
        assert self.calc.get_expression() == "3*" + repr(math.pi)

    def test_dispatch_unknown_command(self):
        with pytest.raises(UnknownCommandError):
            self.calc.dispatch("explode")
