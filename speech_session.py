"""
Voice input controller.

VoiceSession sits between a speech capability (anything with a start()
method that later reports on_start / on_result / on_error / on_end) and the
Calculator. It guards against overlapping listening sessions, turns
capability problems into a short status message, and presses "=" for the
user when a session ends with a calculation still pending.

All handlers must be called on the thread that owns the calculator; the
desktop app forwards capability events through its GUI queue for that.
"""

from typing import Callable, Protocol

import speech_translator
from calculator_state import Calculator

# Error code meaning "nothing was recognized"; it is not worth a message
NO_SPEECH_ERROR = "no-speech"

UNSUPPORTED_MESSAGE = "Speech recognition is not supported on this system."
START_FAILED_MESSAGE = "Could not start listening. Please check permissions."
LISTENING_MESSAGE = "Listening..."


class SpeechCapabilityError(Exception):
    """The speech capability could not be loaded or started."""


class SpeechCapability(Protocol):
    def start(self) -> None:
        """Begin one listening session; events are reported later."""


class VoiceSession:
    def __init__(
        self,
        calculator: Calculator,
        capability: SpeechCapability | None,
        announce: Callable[[str], None] | None = None,
    ):
        self.calculator = calculator
        self.capability = capability
        self.announce = announce

        self.listening = False
        self.diagnostic: str | None = None
        self._session_open = False
        self._unary_result = False

        if capability is None:
            # Permanent: voice input stays disabled for this run
            self.diagnostic = UNSUPPORTED_MESSAGE

    @property
    def available(self) -> bool:
        return self.capability is not None

    @property
    def status_text(self) -> str:
        if self.listening:
            return LISTENING_MESSAGE
        return self.diagnostic or ""

    def listen(self) -> None:
        if self.capability is None or self._session_open:
            return

        self._session_open = True
        try:
            self.capability.start()
        except Exception as e:  # e.g. SpeechCapabilityError, PortAudio or thread start errors
            print(f"[SPEECH ERROR]: could not start listening: {e}")
            self._session_open = False
            self.diagnostic = START_FAILED_MESSAGE

    # ------------------------------------------------------------------
    # capability events
    # ------------------------------------------------------------------

    def on_start(self) -> None:
        self._session_open = True
        self.listening = True
        self.diagnostic = None

    def on_result(self, transcript: str) -> None:
        print(f"[YOU]: {transcript}")
        commands = speech_translator.run(transcript.strip(), self.calculator)
        # "square root of ..." is complete on its own; read it back at the end
        self._unary_result = isinstance(commands[-1], speech_translator.UnaryOp)

    def on_error(self, code: str) -> None:
        if code != NO_SPEECH_ERROR:
            print(f"[SPEECH ERROR]: {code}")
            self.diagnostic = f"Error: {code}"
        self.listening = False

    def on_end(self) -> None:
        """
        Finish a listening session.

        A spoken "five plus three" leaves 5, + and a typed 3 behind; the end of
        speech is taken as the end of the calculation and equals is pressed.
        Duplicate or late end events find no open session and do nothing.
        """
        if not self._session_open:
            return

        self._session_open = False
        self.listening = False

        calc = self.calculator
        produced = self._unary_result
        self._unary_result = False

        if (
            calc.operator is not None
            and calc.first_operand is not None
            and not calc.waiting_for_second_operand
        ):
            calc.handle_equals()
            produced = True

        if produced and self.announce is not None:
            self.announce(f"The result is {calc.display_value}")
