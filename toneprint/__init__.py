"""
toneprint - dominant-frequency audio fingerprints and their alignment.

1. Fingerprinting: audio is cut into fixed-duration chunks and each chunk is
   reduced to its strongest few frequencies
2. Comparison: the shorter of two fingerprint sequences is slid over the
   longer one to find the offset with the smallest spectral distance
"""

from toneprint.chunking import chunk, fingerprint_source, iter_fingerprints
from toneprint.comparison import compare, compare_sequences, element_loss
from toneprint.config import FingerprintConfig, load_config
from toneprint.models import (
    ComparisonResult,
    Fingerprint,
    FingerprintSequence,
    FrequencyMagnitude,
    TimestampedFingerprint,
)
from toneprint.spectral import analyze
from toneprint.storage import load_fingerprints, save_fingerprints

__all__ = [
    'analyze', 'chunk', 'iter_fingerprints', 'fingerprint_source',
    'compare', 'compare_sequences', 'element_loss',
    'FingerprintConfig', 'load_config',
    'ComparisonResult', 'Fingerprint', 'FingerprintSequence', 'FrequencyMagnitude',
    'TimestampedFingerprint',
    'load_fingerprints', 'save_fingerprints',
]
