"""
Calculator state machine.

A Calculator owns the display text, the pending first operand, the pending
operator and the "waiting for second operand" flag. Buttons and replayed
speech commands call its methods; every method mutates state synchronously
and then notifies subscribers with the new display value and a history
snapshot so a presentation layer can redraw.

There is no expression parser: chained operators are evaluated strictly
left to right as they are entered (3 + 4 × 2 is 14, not 11).
"""

from enum import Enum, auto
from typing import Callable

import arithmetic
from arithmetic import AngleMode, format_number, parse_number
from history_log import HistoryLog, format_entry, split_entry

# listener(display_value, history_snapshot)
ChangeListener = Callable[[str, list[str]], None]


class Phase(Enum):
    IDLE = auto()                     # Nothing pending; entering the first number
    AWAITING_SECOND_OPERAND = auto()  # Operator stored; next digit starts the second number
    OPERAND_PENDING = auto()          # Operator stored; second number is being typed


class Calculator:
    def __init__(self, history: HistoryLog | None = None):
        self.display_value: str = "0"
        self.first_operand: float | None = None
        self.operator: str | None = None
        self.waiting_for_second_operand: bool = False
        self.angle_mode: AngleMode = AngleMode.RADIANS

        self.history_log = history if history is not None else HistoryLog()
        self._listeners: list[ChangeListener] = []

    # ------------------------------------------------------------------
    # observers
    # ------------------------------------------------------------------

    def subscribe(self, listener: ChangeListener) -> None:
        self._listeners.append(listener)

    def _notify(self) -> None:
        snapshot = self.history_log.entries
        for listener in self._listeners:
            listener(self.display_value, snapshot)

    # ------------------------------------------------------------------
    # derived state
    # ------------------------------------------------------------------

    @property
    def phase(self) -> Phase:
        if self.operator is None:
            return Phase.IDLE
        if self.waiting_for_second_operand:
            return Phase.AWAITING_SECOND_OPERAND
        return Phase.OPERAND_PENDING

    @property
    def pending_expression(self) -> str:
        """The stored half of the calculation, e.g. "3 +"; empty when idle."""
        if self.phase is Phase.IDLE:
            return ""
        return f"{format_number(self.first_operand)} {arithmetic.operator_glyph(self.operator)}"

    @property
    def history(self) -> list[str]:
        return self.history_log.entries

    @property
    def is_cleared(self) -> bool:
        return self.display_value == "0" and self.first_operand is None

    @property
    def clear_label(self) -> str:
        """AC when already at the idle baseline, C otherwise."""
        return "AC" if self.is_cleared else "C"

    def _display_number(self) -> float:
        # binary operations read the display even when it holds NaN
        try:
            return float(self.display_value)
        except ValueError:
            return float("nan")

    # ------------------------------------------------------------------
    # entry
    # ------------------------------------------------------------------

    def input_digit(self, digit: str) -> None:
        if self.waiting_for_second_operand:
            self.display_value = digit
            self.waiting_for_second_operand = False
        elif self.display_value == "0":
            self.display_value = digit
        else:
            self.display_value += digit
        self._notify()

    def input_decimal(self) -> None:
        if self.waiting_for_second_operand:
            self.display_value = "0."
            self.waiting_for_second_operand = False
        elif "." not in self.display_value:
            self.display_value += "."
        self._notify()

    def set_display(self, text: str) -> None:
        """Enter a whole number at once (used by the spoken square root idiom)."""
        self.display_value = text
        self.waiting_for_second_operand = False
        self._notify()

    def toggle_sign(self) -> None:
        if self.display_value.startswith("-"):
            self.display_value = self.display_value[1:]
        else:
            self.display_value = "-" + self.display_value
        self._notify()

    def clear_all(self) -> None:
        self.display_value = "0"
        self.first_operand = None
        self.operator = None
        self.waiting_for_second_operand = False
        self._notify()

    def toggle_angle_mode(self) -> None:
        self.angle_mode = self.angle_mode.toggled()
        self._notify()

    # ------------------------------------------------------------------
    # binary operations
    # ------------------------------------------------------------------

    def perform_operation(self, next_operator: str) -> None:
        """
        Store an operator, evaluating any pending one first.

        - No first operand yet: the display becomes the first operand.
        - An operator already pending: compute it with the display as the
          second operand, show the result and keep it as the new first
          operand (left-to-right chaining).
        """
        input_value = self._display_number()

        if self.first_operand is None:
            self.first_operand = input_value
        elif self.operator is not None:
            result = arithmetic.calculate(self.first_operand, input_value, self.operator)
            self.display_value = format_number(result)
            self.first_operand = result

        self.operator = arithmetic.normalize_operator(next_operator)
        self.waiting_for_second_operand = True
        self._notify()

    def handle_equals(self) -> None:
        if self.operator is None or self.first_operand is None:
            return

        input_value = self._display_number()
        result = arithmetic.calculate(self.first_operand, input_value, self.operator)

        expression = (
            f"{format_number(self.first_operand)} "
            f"{arithmetic.operator_glyph(self.operator)} "
            f"{format_number(input_value)}"
        )
        self.history_log.append(format_entry(expression, format_number(result)))

        self.display_value = format_number(result)
        self.first_operand = None
        self.operator = None
        self.waiting_for_second_operand = True
        self._notify()

    # ------------------------------------------------------------------
    # unary operations
    # ------------------------------------------------------------------

    def apply_unary_operation(
        self,
        operation: Callable[[float], float],
        expression: Callable[[str], str],
    ) -> None:
        """
        Apply operation to the displayed value and record it in history.

        expression receives the formatted operand and returns the left-hand
        side of the history line, e.g. lambda n: f"√({n})". Nothing happens
        when the display is not a usable number.
        """
        input_value = parse_number(self.display_value)
        if input_value is None:
            return

        result = operation(input_value)
        self.history_log.append(
            format_entry(expression(format_number(input_value)), format_number(result))
        )

        self.display_value = format_number(result)
        self.waiting_for_second_operand = True
        self._notify()

    def percent(self) -> None:
        self.apply_unary_operation(arithmetic.percent, lambda n: f"{n}%")

    def square(self) -> None:
        self.apply_unary_operation(arithmetic.square, lambda n: f"sqr({n})")

    def square_root(self) -> None:
        self.apply_unary_operation(arithmetic.square_root, lambda n: f"√({n})")

    def handle_trig(self, func: str) -> None:
        # angle mode is read now, so each call converts exactly once
        mode = self.angle_mode
        self.apply_unary_operation(
            lambda n: arithmetic.trig(func, n, mode),
            lambda n: f"{func}({n})",
        )

    # ------------------------------------------------------------------
    # history
    # ------------------------------------------------------------------

    def recall(self, entry: str) -> None:
        """Start a fresh calculation from the result part of a history line."""
        parts = split_entry(entry)
        if parts is None:
            return

        _, result = parts
        self.display_value = result
        self.first_operand = None
        self.operator = None
        self.waiting_for_second_operand = True
        self._notify()

    def clear_history(self) -> None:
        self.history_log.clear()
        self._notify()
