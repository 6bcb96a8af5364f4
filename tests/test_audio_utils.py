import numpy as np

from audio_utils import apply_audio_filter, is_speech_detected, rms


class TestAudioFilter:

    def test_disabled_returns_input(self):
        samples = np.array([1, 2, 3], dtype=np.int16)
        assert apply_audio_filter(samples, enabled=False) is samples

    def test_silence_is_unchanged(self):
        samples = np.zeros(100, dtype=np.int16)
        assert apply_audio_filter(samples) is samples

    def test_empty_block(self):
        samples = np.array([], dtype=np.int16)
        assert apply_audio_filter(samples).size == 0

    def test_removes_dc_offset(self):
        samples = np.full(2000, 1000, dtype=np.int16)
        samples[0] = 0
        filtered = apply_audio_filter(samples)
        # a constant signal decays towards zero after the initial step
        assert abs(int(filtered[-1])) < abs(int(filtered[1]))

    def test_normalizes_peak(self):
        t = np.linspace(0, 1, 1600, endpoint=False)
        samples = (200 * np.sin(2 * np.pi * 440 * t)).astype(np.int16)
        filtered = apply_audio_filter(samples)

        assert filtered.dtype == np.int16
        assert np.max(np.abs(filtered)) == int(32767 * 0.8)


class TestSpeechGate:

    def test_rms(self):
        assert rms(np.array([3, -3, 3, -3], dtype=np.int16)) == 3.0
        assert rms(np.array([], dtype=np.int16)) == 0.0

    def test_quiet_block_is_not_speech(self):
        assert not is_speech_detected(np.full(100, 10, dtype=np.int16))

    def test_loud_block_is_speech(self):
        assert is_speech_detected(np.full(100, 2000, dtype=np.int16))

    def test_custom_threshold(self):
        assert is_speech_detected(np.full(100, 10, dtype=np.int16), threshold=5)
