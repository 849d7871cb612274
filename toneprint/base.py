"""
Base interface for audio sample sources.
"""

from abc import ABC, abstractmethod
from typing import Iterator, Optional

import numpy as np


class SampleSource(ABC):
    """
    Abstract base class for decoded audio.

    Both the file-backed and the in-memory sources implement this interface,
    so the fingerprinting pipeline never has to know where samples come from.
    Only the first channel is exposed; further channels are ignored.
    """

    @property
    @abstractmethod
    def sample_rate(self) -> int:
        """Sample rate in Hz."""
        pass

    @property
    def frames(self) -> Optional[int]:
        """Total number of frames, or None when unknown."""
        return None

    @abstractmethod
    def blocks(self) -> Iterator[np.ndarray]:
        """
        Yield the first channel as consecutive 1D float arrays.

        Samples are normalized to full scale. The iterator ends when the
        source is exhausted.

        Raises:
            DecodeError: if the audio cannot be decoded
        """
        pass

    def close(self) -> None:
        """Release any underlying resources."""
        pass

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()
