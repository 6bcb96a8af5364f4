import os
import sys

# ============================================================
# ====================== CONFIG SECTION =======================
# ============================================================

# Calculator behaviour
HISTORY_CAPACITY = 50        # Newest-first history keeps at most this many entries
TAN_COS_EPSILON = 1e-15      # tan() returns NaN when |cos(x)| is below this (avoids near-infinite results)

# Audio sampling configuration
SAMPLE_RATE = 16000          # Samples per second for the microphone input (16kHz is what Vosk models expect)
BLOCK_SIZE = 8000            # Samples per callback block (about 0.5s at 16kHz)

# Recording/recognition behaviour
MAX_LISTEN_SECONDS = 15      # Hard stop for a single listening session
SILENCE_THRESHOLD = 1.5      # Seconds of silence after speech that end the session

# Audio filtering / speech gate
NOISE_REDUCTION_ENABLED = True
HIGH_PASS_ALPHA = 0.95       # Coefficient of the first-order high-pass filter
NORMALIZE_PEAK = 0.8         # Filtered audio is scaled so its peak hits 80% of int16 range
VOLUME_THRESHOLD = 500       # Minimum RMS level to treat a block as speech

# Read back voice results with pyttsx3
SPEAK_RESULTS = True
TTS_RATE = 175               # Words per minute for the read-back voice

# Vocabulary handed to the Vosk recognizer.
# Keeping it to the words the translator understands makes recognition far more predictable.
CALC_GRAMMAR = [
    # digits
    "zero", "one", "two", "three", "four", "five", "six", "seven", "eight", "nine",
    "point", "dot",

    # operators
    "plus", "add", "minus", "subtract", "times",
    "multiply by", "multiplied by", "divide", "divided by",
    "power", "to the power of",

    # idioms
    "square root of",

    # anything else is reported as unknown and dropped by the translator
    "[unk]",
]


def resource_path(relative_path: str) -> str:
    """
    Return the absolute path to a bundled resource (the Vosk model folder).

    When frozen with PyInstaller, data files live under sys._MEIPASS;
    otherwise they are resolved against the current working directory.
    """
    if hasattr(sys, "_MEIPASS"):
        base_path = sys._MEIPASS  # type: ignore[attr-defined]
    else:
        base_path = os.path.abspath(".")

    return os.path.join(base_path, relative_path)


# Folder name of the Vosk speech model shipped next to the app
VOSK_MODEL_DIR = "vosk-model-small-en-us"
VOSK_MODEL_PATH = resource_path(VOSK_MODEL_DIR)
