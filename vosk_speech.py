"""
Offline speech capability built on sounddevice + Vosk.

VoskSpeechCapability behaves like a browser SpeechRecognition object: start()
returns immediately and the outcome arrives later through the on_start,
on_result, on_error and on_end callbacks. Callbacks run on the worker
thread, so callers must hand them over to their own thread before touching
any shared state.
"""

import json
import queue
import threading
import time
from typing import Callable

import numpy as np
import sounddevice as sd
from vosk import KaldiRecognizer, Model, SetLogLevel

from audio_utils import apply_audio_filter, is_speech_detected
from calculator_config import (
    BLOCK_SIZE,
    CALC_GRAMMAR,
    MAX_LISTEN_SECONDS,
    SAMPLE_RATE,
    SILENCE_THRESHOLD,
)
from speech_session import NO_SPEECH_ERROR, SpeechCapabilityError

AUDIO_CAPTURE_ERROR = "audio-capture"


def _ignore(*args) -> None:
    pass


class VoskSpeechCapability:
    def __init__(
        self,
        model: Model,
        max_seconds: float = MAX_LISTEN_SECONDS,
        silence_threshold: float = SILENCE_THRESHOLD,
    ):
        self.model = model
        self.max_seconds = max_seconds
        self.silence_threshold = silence_threshold

        self.on_start: Callable[[], None] = _ignore
        self.on_result: Callable[[str], None] = _ignore
        self.on_error: Callable[[str], None] = _ignore
        self.on_end: Callable[[], None] = _ignore

        self._thread: threading.Thread | None = None
        self._stop_event = threading.Event()

    @property
    def active(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def start(self) -> None:
        if self.active:
            raise SpeechCapabilityError("already listening")

        self._stop_event.clear()
        self._thread = threading.Thread(target=self._run_session, daemon=True)
        self._thread.start()

    def stop(self) -> None:
        """Cut the current session short; whatever was heard is still reported."""
        self._stop_event.set()

    def _run_session(self) -> None:
        self.on_start()
        try:
            text = self.listen_phrase()
        except sd.PortAudioError as e:
            print(f"[AUDIO ERROR]: {e}")
            self.on_error(AUDIO_CAPTURE_ERROR)
        else:
            if text:
                self.on_result(text)
            else:
                self.on_error(NO_SPEECH_ERROR)
        finally:
            self.on_end()

    def listen_phrase(self) -> str:
        """
        Record from the default microphone until the phrase is over.

        Listening stops when Vosk reports a final utterance, when
        silence_threshold seconds pass without speech after the user started
        talking, after max_seconds, or when stop() is called.

        Returns:
            Recognized text, or "" when nothing was understood.
        """
        recognizer = KaldiRecognizer(self.model, SAMPLE_RATE, json.dumps(CALC_GRAMMAR))
        blocks: "queue.Queue[bytes]" = queue.Queue()

        def audio_callback(indata, frames, t, status):
            if status:
                print(f"[AUDIO STATUS]: {status}")

            samples = indata[:, 0].copy()
            if is_speech_detected(samples):
                blocks.put(apply_audio_filter(samples).tobytes())
            else:
                # keep the recognizer's clock running through pauses
                blocks.put(np.zeros_like(samples).tobytes())

        with sd.InputStream(
            samplerate=SAMPLE_RATE,
            blocksize=BLOCK_SIZE,
            dtype="int16",
            channels=1,
            callback=audio_callback,
        ):
            started = time.monotonic()
            last_speech = started
            has_spoken = False
            print(f"[LISTENING] Max {self.max_seconds}s, silence stop after {self.silence_threshold}s")

            while not self._stop_event.is_set():
                now = time.monotonic()
                if now - started > self.max_seconds:
                    print("[TIMEOUT] Max recording time reached")
                    break
                if has_spoken and now - last_speech > self.silence_threshold:
                    print("[SILENCE] Finalizing")
                    break

                try:
                    data = blocks.get(timeout=0.2)
                except queue.Empty:
                    continue

                if recognizer.AcceptWaveform(data):
                    text = json.loads(recognizer.Result()).get("text", "")
                    print(f"[FINAL STT]: {text}")
                    return clean_transcript(text)

                partial = json.loads(recognizer.PartialResult()).get("partial", "")
                if partial:
                    last_speech = time.monotonic()
                    has_spoken = True

            text = json.loads(recognizer.FinalResult()).get("text", "")
            print(f"[FINAL STT timeout]: {text}")
            return clean_transcript(text)


def clean_transcript(text: str) -> str:
    # grammar mode reports out-of-vocabulary words as [unk]
    return " ".join(word for word in text.split() if word != "[unk]")


def load_speech_capability(model_path: str) -> VoskSpeechCapability:
    """
    Load the Vosk model and make sure a microphone is present.

    Raises:
        SpeechCapabilityError if either is missing.
    """
    SetLogLevel(-1)

    try:
        model = Model(model_path)
    except Exception as e:  # vosk raises a bare Exception for a bad model path
        raise SpeechCapabilityError(f"Failed to load Vosk model from {model_path}: {e}") from e

    try:
        sd.query_devices(kind="input")
    except (sd.PortAudioError, ValueError) as e:
        raise SpeechCapabilityError(f"No microphone available: {e}") from e

    return VoskSpeechCapability(model)
