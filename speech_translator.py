"""
Turn a speech transcript into calculator commands.

    "five plus three"            -> Clear, Digit 5, Operator +, Digit 3
    "square root of six four"    -> Clear, EnterNumber 64, UnaryOp square_root

The vocabulary is deliberately small and fixed: single digit words, point
words, a handful of operator words and four multi-word phrases. Anything
else in the transcript is ignored, so filler words ("um", "what is") never
interrupt a spoken calculation.
"""

import re
from dataclasses import dataclass
from typing import Union

from calculator_state import Calculator

# ============================================================
# ======================= VOCABULARY =========================
# ============================================================

NUMBER_WORDS = {
    "zero": "0", "one": "1", "two": "2", "three": "3", "four": "4",
    "five": "5", "six": "6", "seven": "7", "eight": "8", "nine": "9",
}

POINT_WORDS = {"point": ".", "dot": "."}

OPERATOR_WORDS = {
    "plus": "+", "add": "+",
    "minus": "-", "subtract": "-",
    "times": "*",
    "divide": "/",
    "power": "^",
    # symbols, either spoken phrases replaced below or digits-and-symbols ASR output
    "+": "+", "-": "-", "*": "*", "/": "/", "^": "^",
}

# Multi-word phrases are swapped for symbols before splitting into tokens,
# otherwise "divided by" would reach the tokenizer as two unknown words.
PHRASE_REPLACEMENTS = {
    "multiply by": " * ",
    "multiplied by": " * ",
    "divided by": " / ",
    "to the power of": " ^ ",
}

SQUARE_ROOT_PREFIX = "square root of"

# "42", "3.5", "7.", ".5"
UNSIGNED_NUMBER = re.compile(r"^(\d+\.?\d*|\.\d+)$")
# same, with an optional leading minus ("-5" from the recognizer)
NUMERIC_TOKEN = re.compile(r"^-?(\d+\.?\d*|\.\d+)$")

# ============================================================
# ======================== COMMANDS ==========================
# ============================================================


@dataclass(frozen=True)
class Digit:
    char: str

    def apply(self, calculator: Calculator) -> None:
        calculator.input_digit(self.char)


@dataclass(frozen=True)
class Decimal:
    def apply(self, calculator: Calculator) -> None:
        calculator.input_decimal()


@dataclass(frozen=True)
class Operator:
    symbol: str

    def apply(self, calculator: Calculator) -> None:
        calculator.perform_operation(self.symbol)


@dataclass(frozen=True)
class UnaryOp:
    kind: str   # square_root, square, percent, sin, cos, tan

    def apply(self, calculator: Calculator) -> None:
        if self.kind == "square_root":
            calculator.square_root()
        elif self.kind == "square":
            calculator.square()
        elif self.kind == "percent":
            calculator.percent()
        elif self.kind in ("sin", "cos", "tan"):
            calculator.handle_trig(self.kind)


@dataclass(frozen=True)
class EnterNumber:
    text: str

    def apply(self, calculator: Calculator) -> None:
        calculator.set_display(self.text)


@dataclass(frozen=True)
class ToggleSign:
    def apply(self, calculator: Calculator) -> None:
        calculator.toggle_sign()


@dataclass(frozen=True)
class Clear:
    def apply(self, calculator: Calculator) -> None:
        calculator.clear_all()


SpeechCommand = Union[Digit, Decimal, Operator, UnaryOp, EnterNumber, ToggleSign, Clear]

# ============================================================
# ======================= TRANSLATION ========================
# ============================================================


def replace_phrases(text: str) -> str:
    for phrase, symbol in PHRASE_REPLACEMENTS.items():
        text = text.replace(phrase, symbol)
    return text


def spoken_number(text: str) -> str:
    """
    Read a run of spoken digits into a numeric string.

    Digit and point words are matched wherever they start, with or without
    spaces between them, so "six four", "sixfour" and "64" all give "64".
    Only whitespace is dropped: any other character is kept as-is, so
    "minus four" or "nine hundred" come out as something that is not a
    number and the caller can reject it.
    """
    spoken = {**NUMBER_WORDS, **POINT_WORDS}
    chars: list[str] = []
    i = 0

    while i < len(text):
        if text[i].isspace():
            i += 1
            continue

        for word, char in spoken.items():
            if text.startswith(word, i):
                chars.append(char)
                i += len(word)
                break
        else:
            chars.append(text[i])
            i += 1

    return "".join(chars)


def token_to_commands(token: str) -> list[SpeechCommand]:
    if token in NUMBER_WORDS:
        return [Digit(NUMBER_WORDS[token])]

    if token in POINT_WORDS:
        return [Decimal()]

    if token in OPERATOR_WORDS:
        return [Operator(OPERATOR_WORDS[token])]

    if NUMERIC_TOKEN.match(token):
        # Already-numeric recognizer output is typed in one key at a time,
        # then "+/-" for a negative number
        keys: list[SpeechCommand] = [
            Decimal() if char == "." else Digit(char) for char in token.lstrip("-")
        ]
        if token.startswith("-"):
            keys.append(ToggleSign())
        return keys

    return []


def translate(transcript: str) -> list[SpeechCommand]:
    """
    Convert a transcript into an ordered list of calculator commands.

    Steps:
        1. Lowercase the transcript.
        2. Replace the fixed multi-word phrases with operator symbols.
        3. "square root of <digits>" becomes one number entry plus a square
           root; the generic tokenizer is not used for that idiom.
        4. Otherwise split on whitespace and map every token through the
           vocabulary; unknown tokens are dropped.

    The first command is always Clear: every spoken calculation starts fresh.
    """
    text = replace_phrases(transcript.lower().strip())
    commands: list[SpeechCommand] = [Clear()]

    if text.startswith(SQUARE_ROOT_PREFIX):
        number = spoken_number(text[len(SQUARE_ROOT_PREFIX):])
        if UNSIGNED_NUMBER.match(number):
            if number.startswith("."):
                number = "0" + number
            commands.append(EnterNumber(number))
            commands.append(UnaryOp("square_root"))
        return commands

    for token in text.split():
        commands.extend(token_to_commands(token))

    return commands


def run(transcript: str, calculator: Calculator) -> list[SpeechCommand]:
    """Translate a transcript and replay it against the calculator, in order."""
    commands = translate(transcript)
    print(f"[PARSED]: {transcript!r} -> {len(commands) - 1} command(s)")

    for command in commands:
        command.apply(calculator)

    return commands
