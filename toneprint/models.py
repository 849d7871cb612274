from dataclasses import dataclass, field
from typing import List, Optional, Tuple


@dataclass(frozen=True)
class FrequencyMagnitude:
    """One analysed FFT bin. Magnitude is None when loaded from a fingerprint file."""
    frequency: float
    magnitude: Optional[float] = None


@dataclass(frozen=True)
class Fingerprint:
    """Strongest bins of one chunk, in descending magnitude order."""
    frequencies: Tuple[FrequencyMagnitude, ...] = ()

    @property
    def hz(self) -> List[float]:
        return [f.frequency for f in self.frequencies]

    def timestamp(self, timestamp: float) -> "TimestampedFingerprint":
        return TimestampedFingerprint(self, timestamp)

    def __len__(self) -> int:
        return len(self.frequencies)


@dataclass(frozen=True)
class TimestampedFingerprint:
    fingerprint: Fingerprint
    timestamp: float  # seconds from the start of the stream

    @property
    def frequencies(self) -> Tuple[FrequencyMagnitude, ...]:
        return self.fingerprint.frequencies

    @property
    def hz(self) -> List[float]:
        return self.fingerprint.hz


# Ordered by timestamp, one entry per complete chunk.
FingerprintSequence = List[TimestampedFingerprint]


@dataclass(frozen=True)
class ComparisonResult:
    """
    Best alignment of two fingerprint sequences.

    global_loss is the minimal window loss divided by the window length.
    offset_index is the position in the reference where the window starts,
    offset_seconds the reference timestamp at that position. losses holds the
    raw (unnormalized) loss of every candidate offset.
    """
    global_loss: float
    offset_index: int
    offset_seconds: float
    window_length: int
    reference_length: int
    swapped: bool = False  # True when the second argument was used as the window
    losses: Tuple[float, ...] = field(default=(), repr=False)
