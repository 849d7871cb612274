"""
Chunking pipeline: sample stream -> fixed-size chunks -> timestamped fingerprints.
"""

import logging
import math
from typing import Iterable, Iterator, Optional

import numpy as np
from tqdm import tqdm

from .audio import SampleStream
from .base import SampleSource
from .config import FFT_CHUNK_SECONDS, FREQUENCY_COUNT, TRANSFORM, FingerprintConfig
from .models import FingerprintSequence, TimestampedFingerprint
from .spectral import analyze, get_transform

log = logging.getLogger(__name__)


def chunk_size_for(sample_rate: int, chunk_seconds: float) -> int:
    """Number of samples in one chunk: round(sample_rate * chunk_seconds)."""
    if sample_rate <= 0:
        raise ValueError(f"Sample rate must be positive, got {sample_rate}")
    if not math.isfinite(chunk_seconds):
        raise ValueError(f"Chunk duration must be finite, got {chunk_seconds}")
    size = int(round(sample_rate * chunk_seconds))
    if size < 1:
        raise ValueError(
            f"A chunk of {chunk_seconds}s at {sample_rate} Hz holds no samples"
        )
    return size


def iter_fingerprints(
    blocks: Iterable,
    sample_rate: int,
    chunk_seconds: float = FFT_CHUNK_SECONDS,
    frequency_count: int = FREQUENCY_COUNT,
    transform: str = TRANSFORM,
) -> Iterator[TimestampedFingerprint]:
    """
    Fingerprint a stream of sample blocks chunk by chunk.

    Blocks may have any length; chunk boundaries are independent of block
    boundaries. Each full chunk yields one fingerprint stamped
    chunk_index * chunk_seconds. A trailing partial chunk is dropped.

    Args:
        blocks: Iterable of 1D sample arrays, consumed in order
        sample_rate: Sample rate in Hz
        chunk_seconds: Duration of one chunk
        frequency_count: Strongest bins kept per chunk
        transform: Name of the DFT implementation

    Yields:
        TimestampedFingerprint per complete chunk
    """
    chunk_size = chunk_size_for(sample_rate, chunk_seconds)
    get_transform(transform)  # unknown names fail before any decoding

    chunk = np.empty(chunk_size, dtype=np.float64)
    index = 0
    chunk_index = 0

    for block in blocks:
        block = np.asarray(block, dtype=np.float64)
        if block.ndim != 1:
            raise ValueError(f"Expected 1D sample blocks, got shape {block.shape}")

        pos = 0
        while pos < len(block):
            take = min(chunk_size - index, len(block) - pos)
            chunk[index:index + take] = block[pos:pos + take]
            index += take
            pos += take

            if index == chunk_size:
                fingerprint = analyze(chunk, sample_rate, frequency_count, transform)
                yield fingerprint.timestamp(chunk_index * chunk_seconds)
                chunk_index += 1
                index = 0

    if index:
        log.debug(f"Dropped trailing partial chunk of {index}/{chunk_size} samples")


def chunk(
    samples,
    sample_rate: int,
    chunk_seconds: float = FFT_CHUNK_SECONDS,
    frequency_count: int = FREQUENCY_COUNT,
    transform: str = TRANSFORM,
) -> FingerprintSequence:
    """Fingerprint an in-memory 1D sequence of samples."""
    return list(iter_fingerprints([samples], sample_rate, chunk_seconds, frequency_count, transform))


def fingerprint_source(
    source: SampleSource,
    config: Optional[FingerprintConfig] = None,
    progress: bool = False,
) -> FingerprintSequence:
    """
    Fingerprint a whole audio source.

    Decoding runs in a producer thread (see SampleStream) while this thread
    chunks and analyses. If decoding fails, the DecodeError propagates and
    the fingerprints computed so far are discarded.

    Args:
        source: Decoded audio
        config: Chunking/analysis settings (defaults from config.py)
        progress: Show a tqdm progress bar over chunks

    Returns:
        The complete fingerprint sequence
    """
    config = config or FingerprintConfig()
    sample_rate = source.sample_rate
    chunk_size = chunk_size_for(sample_rate, config.chunk_seconds)
    total = source.frames // chunk_size if source.frames is not None else None

    log.debug(f"Chunking at {sample_rate} Hz: {chunk_size} samples per {config.chunk_seconds}s chunk, "
              f"top {config.frequency_count} frequencies, '{config.transform}' transform")

    fingerprints: FingerprintSequence = []
    with SampleStream(source) as stream:
        chunks = iter_fingerprints(
            stream, sample_rate, config.chunk_seconds, config.frequency_count, config.transform
        )
        for fingerprint in tqdm(chunks, total=total, desc="Fingerprinting", unit="chunk",
                                disable=not progress):
            fingerprints.append(fingerprint)

    log.debug(f"Produced {len(fingerprints)} fingerprints")
    return fingerprints
