"""
Tests for single-chunk spectral analysis
"""

import numpy as np
import pytest

from toneprint.spectral import TRANSFORMS, analyze, get_transform, magnitude_spectrum, top_k_bins
from tests.conftest import make_tone


SAMPLE_RATE = 8000
N = 800  # 10 Hz per bin


class TestAnalyze:
    """Top-K frequency extraction from one block"""

    def test_single_tone_is_strongest(self):
        block = make_tone([440.0], SAMPLE_RATE, N / SAMPLE_RATE, [1.0])
        fingerprint = analyze(block, SAMPLE_RATE)

        assert fingerprint.frequencies[0].frequency == pytest.approx(440.0)

    def test_three_tones_in_descending_magnitude_order(self):
        block = make_tone([1000.0, 440.0, 2500.0], SAMPLE_RATE, N / SAMPLE_RATE, [0.5, 1.0, 0.25])
        fingerprint = analyze(block, SAMPLE_RATE, frequency_count=3)

        assert fingerprint.hz == pytest.approx([440.0, 1000.0, 2500.0])
        magnitudes = [f.magnitude for f in fingerprint.frequencies]
        assert magnitudes == sorted(magnitudes, reverse=True)
        # bin-exact sine of amplitude a has magnitude a * N / 2
        assert magnitudes[0] == pytest.approx(N / 2, rel=1e-6)

    def test_magnitudes_non_increasing_on_noise(self):
        block = np.random.randn(1024)
        fingerprint = analyze(block, SAMPLE_RATE, frequency_count=10)

        magnitudes = [f.magnitude for f in fingerprint.frequencies]
        assert len(magnitudes) == 10
        assert all(a >= b for a, b in zip(magnitudes, magnitudes[1:]))
        assert all(m >= 0 for m in magnitudes)

    def test_frequency_of_bin(self):
        # bin i -> i * sample_rate / N
        block = make_tone([1230.0], SAMPLE_RATE, N / SAMPLE_RATE, [1.0])
        fingerprint = analyze(block, SAMPLE_RATE, frequency_count=1)

        assert fingerprint.hz == pytest.approx([123 * SAMPLE_RATE / N])

    def test_count_clamped_to_candidates(self):
        # N = 6 leaves N//2 - 1 = 2 candidate bins
        fingerprint = analyze([0.1, -0.2, 0.3, 0.0, 0.5, -0.1], SAMPLE_RATE, frequency_count=3)
        assert len(fingerprint) == 2

    def test_no_candidates_gives_empty_fingerprint(self):
        assert len(analyze([0.5], SAMPLE_RATE)) == 0
        assert len(analyze([0.5, 0.25], SAMPLE_RATE)) == 0

    def test_nyquist_half_excluded(self):
        # bin 399 = N//2 - 1 is the first bin not considered
        block = make_tone([3990.0], SAMPLE_RATE, N / SAMPLE_RATE, [1.0])
        fingerprint = analyze(block, SAMPLE_RATE, frequency_count=5)

        assert len(fingerprint) == 5
        assert all(f < 3990.0 for f in fingerprint.hz)

    def test_input_not_modified(self):
        block = np.random.randn(N)
        original = block.copy()
        analyze(block, SAMPLE_RATE)
        np.testing.assert_array_equal(block, original)

    def test_transforms_agree(self):
        block = make_tone([440.0, 1000.0, 2500.0], SAMPLE_RATE, N / SAMPLE_RATE, [1.0, 0.5, 0.25])
        results = [analyze(block, SAMPLE_RATE, transform=name).hz for name in TRANSFORMS]

        for hz in results[1:]:
            assert hz == pytest.approx(results[0])

    @pytest.mark.parametrize("block", [[], [[0.1, 0.2], [0.3, 0.4]]])
    def test_invalid_block(self, block):
        with pytest.raises(ValueError):
            analyze(block, SAMPLE_RATE)

    def test_invalid_sample_rate(self):
        with pytest.raises(ValueError):
            analyze(np.zeros(16), 0)


class TestHelpers:

    def test_unknown_transform(self):
        with pytest.raises(ValueError, match="Unknown transform"):
            get_transform("fftw")

    def test_magnitude_spectrum_lengths(self):
        freqs, magnitudes = magnitude_spectrum(np.zeros(N), SAMPLE_RATE)
        assert len(freqs) == len(magnitudes) == N // 2 - 1
        assert freqs[1] == pytest.approx(SAMPLE_RATE / N)

    def test_top_k_bins_ties_keep_bin_order(self):
        magnitudes = np.array([1.0, 3.0, 3.0, 2.0])
        assert list(top_k_bins(magnitudes, 2)) == [1, 2]
        assert list(top_k_bins(magnitudes, 4)) == [1, 2, 3, 0]

    def test_top_k_bins_empty(self):
        assert len(top_k_bins(np.array([1.0, 2.0]), 0)) == 0
        assert len(top_k_bins(np.array([]), 3)) == 0
