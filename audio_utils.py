import numpy as np

from calculator_config import (
    HIGH_PASS_ALPHA,
    NOISE_REDUCTION_ENABLED,
    NORMALIZE_PEAK,
    VOLUME_THRESHOLD,
)

INT16_MAX = 32767


def apply_audio_filter(samples: np.ndarray, enabled: bool = NOISE_REDUCTION_ENABLED) -> np.ndarray:
    """
    Clean up one block of int16 microphone samples before recognition.

    1. High-pass: y[n] = a * (y[n-1] + x[n] - x[n-1]) strips DC offset and rumble.
    2. Normalize so the loudest sample sits at NORMALIZE_PEAK of full scale.

    Empty, silent or disabled input is returned unchanged.
    """
    if not enabled or samples.size == 0:
        return samples

    x = samples.astype(np.float32)
    y = np.empty_like(x)
    y[0] = x[0]

    deltas = np.diff(x)
    for n, delta in enumerate(deltas, start=1):
        y[n] = HIGH_PASS_ALPHA * (y[n - 1] + delta)

    peak = np.max(np.abs(y))
    if peak == 0:
        return samples

    y *= (INT16_MAX * NORMALIZE_PEAK) / peak
    return y.astype(np.int16)


def rms(samples: np.ndarray) -> float:
    if samples.size == 0:
        return 0.0
    return float(np.sqrt(np.mean(samples.astype(np.float32) ** 2)))


def is_speech_detected(samples: np.ndarray, threshold: float = VOLUME_THRESHOLD) -> bool:
    """Crude voice activity check: is the block louder than the threshold?"""
    return rms(samples) > threshold
