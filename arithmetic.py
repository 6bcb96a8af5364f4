"""
Arithmetic engine for the calculator.

Every function here is pure and never raises for numeric reasons: division by
zero, overflow and domain errors come back as IEEE sentinels (inf / nan) so
they can flow straight into the display. Values are evaluated as numpy
float64 scalars inside np.errstate(all="ignore"), which is what gives the
"no exceptions" behaviour (plain Python floats raise ZeroDivisionError and
OverflowError instead).
"""

import math
from enum import Enum

import numpy as np

from calculator_config import TAN_COS_EPSILON


class AngleMode(Enum):
    RADIANS = "rad"
    DEGREES = "deg"

    @property
    def label(self) -> str:
        return self.value.upper()

    def toggled(self) -> "AngleMode":
        return AngleMode.DEGREES if self is AngleMode.RADIANS else AngleMode.RADIANS


# Binary operators understood by calculate(); glyphs map onto them
BINARY_OPERATORS = ("+", "-", "*", "/", "^")
OPERATOR_ALIASES = {"×": "*", "÷": "/", "−": "-", "**": "^"}
OPERATOR_GLYPHS = {"*": "×", "/": "÷"}

TRIG_FUNCTIONS = ("sin", "cos", "tan")


def normalize_operator(op: str) -> str:
    """Map a display glyph (×, ÷, −) to its operator symbol."""
    return OPERATOR_ALIASES.get(op, op)


def operator_glyph(op: str) -> str:
    """Symbol used when an operator is shown to the user (history lines)."""
    return OPERATOR_GLYPHS.get(op, op)


def calculate(first: float, second: float, op: str) -> float:
    """
    Apply a binary operator to two operands.

    Division is true floating-point division, so 5 / 0 is inf and 0 / 0 is
    nan. Power accepts negative and fractional exponents; a negative base
    with a fractional exponent gives nan. An operator this engine does not
    know returns the second operand unchanged.
    """
    op = normalize_operator(op)
    a = np.float64(first)
    b = np.float64(second)

    with np.errstate(all="ignore"):
        if op == "+":
            result = a + b
        elif op == "-":
            result = a - b
        elif op == "*":
            result = a * b
        elif op == "/":
            result = a / b
        elif op == "^":
            result = np.power(a, b)
        else:
            result = b

    return float(result)


def square(value: float) -> float:
    with np.errstate(all="ignore"):
        return float(np.power(np.float64(value), 2))


def square_root(value: float) -> float:
    # negative input -> nan
    with np.errstate(all="ignore"):
        return float(np.sqrt(np.float64(value)))


def percent(value: float) -> float:
    return float(np.float64(value) / 100)


def to_radians(value: float, angle_mode: AngleMode) -> float:
    if angle_mode is AngleMode.DEGREES:
        return value * (math.pi / 180)
    return value


def trig(func: str, value: float, angle_mode: AngleMode) -> float:
    """
    Evaluate sin, cos or tan of value in the given angle mode.

    Degrees are converted to radians once, here. tan returns nan where the
    cosine is within TAN_COS_EPSILON of zero (90°, 270°, ...), rather than a
    huge finite number produced by rounding.
    """
    radians = np.float64(to_radians(value, angle_mode))

    with np.errstate(all="ignore"):
        if func == "sin":
            return float(np.sin(radians))
        if func == "cos":
            return float(np.cos(radians))
        if func == "tan":
            if abs(np.cos(radians)) < TAN_COS_EPSILON:
                return math.nan
            return float(np.tan(radians))

    return math.nan


def format_number(value: float) -> str:
    """
    Render a result the way the display shows it.

    Examples:
        8.0        -> "8"
        -0.0       -> "0"
        0.1 + 0.2  -> "0.30000000000000004"
        nan        -> "NaN"
        -inf       -> "-Infinity"
    """
    value = float(value)

    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "Infinity" if value > 0 else "-Infinity"
    if value.is_integer() and abs(value) < 1e21:
        return str(int(value))

    return repr(value)


def parse_number(text: str) -> float | None:
    """
    Read a display string as a number.

    Returns None when the text is not a number or is the NaN sentinel, which
    is what unary operations use to decide whether to do anything at all.
    """
    try:
        value = float(text)
    except ValueError:
        return None

    if math.isnan(value):
        return None
    return value
