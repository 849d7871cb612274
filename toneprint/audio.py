import logging
import queue
import threading
from pathlib import Path
from typing import Iterator, Optional

import numpy as np
import soundfile as sf

from .base import SampleSource
from .config import BLOCK_SIZE
from .errors import DecodeError

log = logging.getLogger(__name__)


def normalize(samples) -> np.ndarray:
    """
    Convert samples to float64 full scale.

    Signed integer PCM is divided by 2^(bits-1); unsigned PCM is first shifted
    down by its midpoint 2^(bits-1). Float input is kept as is.
    """
    samples = np.asarray(samples)
    if np.issubdtype(samples.dtype, np.integer):
        full_scale = float(2 ** (samples.dtype.itemsize * 8 - 1))
        if np.issubdtype(samples.dtype, np.unsignedinteger):
            # Unsigned PCM is offset binary: the midpoint is silence.
            return (samples.astype(np.float64) - full_scale) / full_scale
        return samples.astype(np.float64) / full_scale
    return samples.astype(np.float64, copy=False)


def first_channel(samples: np.ndarray) -> np.ndarray:
    # (num_samples, num_channels) -> first channel only, no downmix
    if samples.ndim > 1:
        return samples[:, 0]
    return samples


class SoundFileSource(SampleSource):
    """Audio file decoded incrementally with libsndfile (FLAC, WAV, OGG, ...)."""

    def __init__(self, path, block_size: int = BLOCK_SIZE):
        self.path = Path(path)
        self.block_size = block_size
        try:
            self._file = sf.SoundFile(str(self.path))
        except (sf.SoundFileError, RuntimeError) as e:
            raise DecodeError(f"Could not decode audio file '{self.path}': {e}") from e

        log.debug(f"Opened {self.path.name}: {self._file.samplerate} Hz, "
                  f"{self._file.channels} channel(s), subtype {self._file.subtype}")
        if self._file.channels > 1:
            log.debug(f"Only the first of {self._file.channels} channels is fingerprinted")

    @property
    def sample_rate(self) -> int:
        return self._file.samplerate

    @property
    def frames(self) -> Optional[int]:
        return self._file.frames

    def blocks(self) -> Iterator[np.ndarray]:
        try:
            for block in self._file.blocks(blocksize=self.block_size, dtype='float64', always_2d=True):
                yield np.ascontiguousarray(first_channel(block))
        except (sf.SoundFileError, RuntimeError) as e:
            raise DecodeError(f"Error while decoding '{self.path}': {e}") from e

    def close(self) -> None:
        self._file.close()


class ArraySource(SampleSource):
    """Samples already in memory, shape (n,) or (n, channels)."""

    def __init__(self, samples, sample_rate: int, block_size: int = BLOCK_SIZE):
        if sample_rate <= 0:
            raise ValueError(f"Sample rate must be positive, got {sample_rate}")
        if block_size < 1:
            raise ValueError(f"Block size must be positive, got {block_size}")
        self.samples = first_channel(normalize(samples))
        self._sample_rate = int(sample_rate)
        self.block_size = block_size

    @property
    def sample_rate(self) -> int:
        return self._sample_rate

    @property
    def frames(self) -> Optional[int]:
        return len(self.samples)

    def blocks(self) -> Iterator[np.ndarray]:
        for start in range(0, len(self.samples), self.block_size):
            yield self.samples[start:start + self.block_size]


_END = object()


class SampleStream:
    """
    Decode a SampleSource in a producer thread.

    Blocks are handed to the consumer through a queue of capacity one, so the
    decoder never runs more than one block ahead of the fingerprinting. A
    decode error ends the stream and is re-raised in the consuming thread.

    Usage:
        with SampleStream(source) as stream:
            for block in stream:
                ...
    """

    POLL_SECONDS = 0.1

    def __init__(self, source: SampleSource):
        self.source = source
        self._queue: queue.Queue = queue.Queue(maxsize=1)
        self._cancelled = threading.Event()
        self._thread: Optional[threading.Thread] = None

    def start(self) -> "SampleStream":
        if self._thread is not None:
            raise RuntimeError("SampleStream can only be started once")
        self._thread = threading.Thread(target=self._produce, name="toneprint-decoder", daemon=True)
        self._thread.start()
        return self

    def cancel(self) -> None:
        """Ask the producer to stop; iteration ends at the next hand-off."""
        self._cancelled.set()

    @property
    def cancelled(self) -> bool:
        return self._cancelled.is_set()

    def close(self) -> None:
        self.cancel()
        if self._thread is not None:
            self._thread.join()

    def __enter__(self):
        return self.start()

    def __exit__(self, exc_type, exc, tb):
        self.close()

    def _put(self, item) -> bool:
        while not self._cancelled.is_set():
            try:
                self._queue.put(item, timeout=self.POLL_SECONDS)
                return True
            except queue.Full:
                continue
        return False

    def _produce(self) -> None:
        try:
            for block in self.source.blocks():
                if not self._put(block):
                    return
        except Exception as e:
            # handed to the consumer, which raises it
            self._put(e)
            return
        self._put(_END)

    def _get(self):
        while not self._cancelled.is_set():
            try:
                return self._queue.get(timeout=self.POLL_SECONDS)
            except queue.Empty:
                continue
        return _END

    def __iter__(self) -> Iterator[np.ndarray]:
        if self._thread is None:
            self.start()
        while True:
            item = self._get()
            if item is _END:
                return
            if isinstance(item, DecodeError):
                raise item
            if isinstance(item, Exception):
                raise DecodeError(f"Decoding failed: {item}") from item
            yield item
