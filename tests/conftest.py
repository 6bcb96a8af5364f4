import pytest

from calculator_state import Calculator


class FakeCapability:
    """Stands in for the microphone + recognizer; events are fired by the test."""

    def __init__(self, fail_on_start: Exception | None = None):
        self.fail_on_start = fail_on_start
        self.start_calls = 0

    def start(self):
        self.start_calls += 1
        if self.fail_on_start is not None:
            raise self.fail_on_start


@pytest.fixture
def calculator():
    """Provide a fresh Calculator."""
    return Calculator()


@pytest.fixture
def capability():
    return FakeCapability()


def press_keys(calculator, keys: str):
    """Press keys on the calculator: digits, '.', operators and '='."""
    for key in keys.split():
        if key == "=":
            calculator.handle_equals()
        elif key in ("+", "-", "*", "/", "^", "×", "÷"):
            calculator.perform_operation(key)
        else:
            for char in key:
                if char == ".":
                    calculator.input_decimal()
                else:
                    calculator.input_digit(char)


@pytest.fixture
def keys(calculator):
    """keys("3 + 4 =") presses those keys on the calculator fixture."""
    return lambda sequence: press_keys(calculator, sequence)
