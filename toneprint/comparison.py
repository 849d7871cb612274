"""
Alignment of two fingerprint sequences.

The shorter sequence (the window) slides over the longer one (the
reference). At every offset where the window fits completely, the element
losses of the aligned fingerprints are summed; the smallest sum, divided by
the window length, is the global loss.
"""

import heapq
import logging
import math
from typing import List, Sequence, Tuple

import numpy as np

from .errors import IncompatibleFingerprintsError
from .models import ComparisonResult, FingerprintSequence

log = logging.getLogger(__name__)


def element_loss(a: Sequence[float], b: Sequence[float]) -> float:
    """
    Distance between two fingerprints' frequency lists.

    Both lists are sorted ascending (as copies) and the smallest absolute
    difference between same-rank frequencies is returned, so a single close
    match is enough for a low loss.

    >>> element_loss([100, 205, 300], [101, 200, 310])
    1.0
    """
    if len(a) != len(b):
        raise IncompatibleFingerprintsError(
            f"Fingerprints do not have matching frequency sample counts ({len(a)} != {len(b)})"
        )
    if len(a) == 0:
        return math.inf

    return float(np.min(np.abs(np.sort(a) - np.sort(b))))


def _sorted_frequencies(fingerprints: FingerprintSequence) -> np.ndarray:
    """(n, K) array of each fingerprint's frequencies, every row sorted ascending."""
    counts = sorted({len(fp.frequencies) for fp in fingerprints})
    if len(counts) > 1:
        raise IncompatibleFingerprintsError(
            f"Fingerprints do not have matching frequency sample counts (found {counts})"
        )
    k = counts[0] if counts else 0
    rows = np.array([fp.hz for fp in fingerprints], dtype=np.float64).reshape(len(fingerprints), k)
    return np.sort(rows, axis=1)


def comparison_order(first: FingerprintSequence, second: FingerprintSequence
                     ) -> Tuple[FingerprintSequence, FingerprintSequence, bool]:
    """
    Pick (window, reference, swapped).

    The shorter sequence is the window. On equal lengths the first argument
    is the window.
    """
    if len(second) < len(first):
        return second, first, True
    return first, second, False


def window_losses(window: FingerprintSequence, reference: FingerprintSequence) -> List[float]:
    """
    Summed element loss for every offset where the window fits in the reference.

    Returns:
        List of len(reference) - len(window) + 1 losses, indexed by offset
        (empty when the window is longer than the reference)
    """
    win = _sorted_frequencies(window)
    ref = _sorted_frequencies(reference)

    if len(window) and len(reference) and win.shape[1] != ref.shape[1]:
        raise IncompatibleFingerprintsError(
            f"Fingerprints do not have matching frequency sample counts "
            f"({win.shape[1]} != {ref.shape[1]})"
        )

    n_offsets = len(reference) - len(window) + 1
    if n_offsets <= 0:
        return []
    if win.shape[1] == 0 and len(window):
        return [math.inf] * n_offsets

    w = len(window)
    losses = []
    for i in range(n_offsets):
        diffs = np.abs(ref[i:i + w] - win)
        losses.append(float(diffs.min(axis=1).sum()) if w else 0.0)
    return losses


def compare(first: FingerprintSequence, second: FingerprintSequence) -> ComparisonResult:
    """
    Find the best alignment of two fingerprint sequences.

    Args:
        first, second: Fingerprint sequences produced with the same settings

    Returns:
        ComparisonResult with the normalized minimal loss and its offset.
        Ties between offsets resolve to the earliest one.

    Raises:
        IncompatibleFingerprintsError: if a sequence is empty or the
            fingerprints carry different numbers of frequencies
    """
    if not first or not second:
        raise IncompatibleFingerprintsError("Cannot compare an empty fingerprint sequence")

    window, reference, swapped = comparison_order(first, second)
    losses = window_losses(window, reference)

    candidates = [(loss, offset) for offset, loss in enumerate(losses)]
    heapq.heapify(candidates)
    best_loss, best_offset = heapq.heappop(candidates)

    result = ComparisonResult(
        global_loss=best_loss / len(window),
        offset_index=best_offset,
        offset_seconds=reference[best_offset].timestamp,
        window_length=len(window),
        reference_length=len(reference),
        swapped=swapped,
        losses=tuple(losses),
    )
    log.debug(f"Compared window of {result.window_length} against reference of "
              f"{result.reference_length} over {len(losses)} offsets")
    return result


def compare_sequences(sequences: Sequence[FingerprintSequence]) -> ComparisonResult:
    """Compare a list of sequences; exactly two are required."""
    if len(sequences) != 2:
        raise IncompatibleFingerprintsError(
            f"Expected exactly two fingerprint sequences to compare, got {len(sequences)}"
        )
    return compare(sequences[0], sequences[1])
