"""
Arithmetic engine tests
=======================
"""

import math

import pytest

from arithmetic import (
    AngleMode,
    calculate,
    format_number,
    parse_number,
    percent,
    square,
    square_root,
    trig,
)


# ============================================================
# Binary operations
# ============================================================

class TestCalculate:

    @pytest.mark.parametrize("first, second, op, expected", [
        (5, 3, "+", 8),
        (5, 3, "-", 2),
        (5, 3, "*", 15),
        (6, 3, "/", 2),
        (2, 10, "^", 1024),
        (4, 0.5, "^", 2),
        (2, -1, "^", 0.5),
        (6, 3, "×", 18),
        (6, 3, "÷", 2),
    ])
    def test_operators(self, first, second, op, expected):
        assert calculate(first, second, op) == pytest.approx(expected)

    def test_divide_by_zero_is_infinite_not_an_error(self):
        assert calculate(5, 0, "/") == math.inf
        assert calculate(-5, 0, "/") == -math.inf

    def test_zero_divided_by_zero_is_nan(self):
        assert math.isnan(calculate(0, 0, "/"))

    def test_negative_base_fractional_exponent_is_nan(self):
        assert math.isnan(calculate(-8, 1 / 3, "^"))

    def test_overflow_is_infinite(self):
        assert calculate(10, 400, "^") == math.inf

    def test_unknown_operator_returns_second_operand(self):
        assert calculate(5, 3, "?") == 3


# ============================================================
# Unary operations
# ============================================================

class TestUnary:

    def test_square(self):
        assert square(-4) == 16

    def test_square_root(self):
        assert square_root(64) == 8

    def test_square_root_of_negative_is_nan(self):
        assert math.isnan(square_root(-1))

    def test_percent(self):
        assert percent(50) == 0.5


class TestTrig:

    def test_sin_degrees(self):
        assert trig("sin", 90, AngleMode.DEGREES) == pytest.approx(1)

    def test_sin_radians(self):
        assert trig("sin", math.pi / 2, AngleMode.RADIANS) == pytest.approx(1)

    def test_cos_degrees(self):
        assert trig("cos", 60, AngleMode.DEGREES) == pytest.approx(0.5)

    def test_tan_degrees(self):
        assert trig("tan", 45, AngleMode.DEGREES) == pytest.approx(1)

    def test_tan_at_ninety_degrees_is_nan(self):
        assert math.isnan(trig("tan", 90, AngleMode.DEGREES))

    def test_tan_at_half_pi_radians_is_nan(self):
        assert math.isnan(trig("tan", math.pi / 2, AngleMode.RADIANS))

    def test_unknown_function_is_nan(self):
        assert math.isnan(trig("sec", 1, AngleMode.RADIANS))

    def test_angle_mode_toggles(self):
        assert AngleMode.RADIANS.toggled() is AngleMode.DEGREES
        assert AngleMode.DEGREES.toggled() is AngleMode.RADIANS
        assert AngleMode.DEGREES.label == "DEG"


# ============================================================
# Display formatting
# ============================================================

class TestFormatting:

    @pytest.mark.parametrize("value, text", [
        (8.0, "8"),
        (-0.0, "0"),
        (2.5, "2.5"),
        (0.1 + 0.2, "0.30000000000000004"),
        (math.nan, "NaN"),
        (math.inf, "Infinity"),
        (-math.inf, "-Infinity"),
    ])
    def test_format_number(self, value, text):
        assert format_number(value) == text

    def test_parse_number(self):
        assert parse_number("3.5") == 3.5
        assert parse_number("0.") == 0
        assert parse_number("Infinity") == math.inf

    def test_parse_number_rejects_nan_and_garbage(self):
        assert parse_number("NaN") is None
        assert parse_number("-") is None
        assert parse_number("") is None
