"""
Spectral analysis of a single chunk.

A chunk of N real samples is transformed, the lower half of the spectrum
(bins 0 .. N//2 - 2, Nyquist excluded) is turned into (frequency, magnitude)
candidates and the strongest few are kept as the chunk's fingerprint.
"""

import librosa
import numpy as np
import scipy.fft

from .config import FREQUENCY_COUNT, TRANSFORM
from .models import Fingerprint, FrequencyMagnitude


# Any consistently normalized DFT will do: fingerprints are only ever
# compared against fingerprints produced with the same settings.
TRANSFORMS = {
    'numpy': np.fft.fft,
    'scipy': scipy.fft.fft,
}


def get_transform(name: str):
    if name not in TRANSFORMS:
        raise ValueError(f"Unknown transform: {name}. Choose from {list(TRANSFORMS.keys())}")
    return TRANSFORMS[name]


def magnitude_spectrum(block: np.ndarray, sample_rate: int, transform: str = TRANSFORM):
    """
    Magnitudes of the candidate bins of one block.

    Args:
        block: 1D array of N samples
        sample_rate: Sample rate in Hz
        transform: Name of the DFT implementation (see TRANSFORMS)

    Returns:
        (freqs, magnitudes) arrays of length max(0, N//2 - 1), where
        freqs[i] = i * sample_rate / N
    """
    n = len(block)
    spectrum = get_transform(transform)(block)
    n_candidates = max(0, n // 2 - 1)

    magnitudes = np.abs(spectrum[:n_candidates])
    freqs = librosa.fft_frequencies(sr=sample_rate, n_fft=n)[:n_candidates]
    return freqs, magnitudes


def top_k_bins(magnitudes: np.ndarray, k: int) -> np.ndarray:
    """
    Indices of the k largest magnitudes, strongest first.

    Uses a partial partition instead of sorting every candidate; only the k
    winners are ordered. Equal magnitudes keep ascending bin order.
    """
    k = min(k, len(magnitudes))
    if k <= 0:
        return np.empty(0, dtype=np.intp)

    idx = np.argpartition(magnitudes, -k)[-k:]
    order = np.lexsort((idx, -magnitudes[idx]))
    return idx[order]


def analyze(block, sample_rate: int, frequency_count: int = FREQUENCY_COUNT,
            transform: str = TRANSFORM) -> Fingerprint:
    """
    Fingerprint one chunk of audio.

    Args:
        block: Sequence of N real-valued samples (N >= 1)
        sample_rate: Sample rate in Hz
        frequency_count: Number of strongest bins to keep (K)
        transform: Name of the DFT implementation (see TRANSFORMS)

    Returns:
        Fingerprint with min(K, N//2 - 1) entries in descending magnitude order
    """
    block = np.asarray(block, dtype=np.float64)
    if block.ndim != 1 or len(block) == 0:
        raise ValueError(f"Expected a non-empty 1D block of samples, got shape {block.shape}")
    if sample_rate <= 0:
        raise ValueError(f"Sample rate must be positive, got {sample_rate}")
    if frequency_count < 0:
        raise ValueError(f"Frequency count must not be negative, got {frequency_count}")

    freqs, magnitudes = magnitude_spectrum(block, sample_rate, transform)
    best = top_k_bins(magnitudes, frequency_count)

    return Fingerprint(tuple(
        FrequencyMagnitude(frequency=float(freqs[i]), magnitude=float(magnitudes[i]))
        for i in best
    ))
