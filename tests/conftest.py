import numpy as np
import pytest
import soundfile as sf


@pytest.fixture(autouse=True)
def _seed_numpy_rng():
    """Ensure deterministic noise generation for reproducible tests."""
    np.random.seed(0)


def make_tone(freqs_hz, sample_rate: int, duration: float, amplitudes=None) -> np.ndarray:
    """Sum of real sines, one per frequency."""
    n_samples = int(round(duration * sample_rate))
    t = np.arange(n_samples) / sample_rate
    amplitudes = amplitudes or [1.0 / len(freqs_hz)] * len(freqs_hz)

    signal = np.zeros(n_samples)
    for freq, amp in zip(freqs_hz, amplitudes):
        signal += amp * np.sin(2 * np.pi * freq * t)
    return signal


@pytest.fixture
def tone_file(tmp_path):
    """Write a 1s, 8 kHz FLAC with a 1 kHz tone on the left channel and 500 Hz on the right."""
    def _write(name="tone.flac", duration=1.0, sample_rate=8000):
        left = make_tone([1000.0], sample_rate, duration, [0.5])
        right = make_tone([500.0], sample_rate, duration, [0.5])
        path = tmp_path / name
        sf.write(str(path), np.column_stack([left, right]), sample_rate, subtype='PCM_16')
        return path
    return _write
