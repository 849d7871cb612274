"""
Fingerprint text format.

One line per timestamped fingerprint:

    <timestamp:%.2f> <freq1:%f> <freq2:%f> ... <freqK:%f>

Frequencies are written in the order the analyzer produced them (strongest
first). Magnitudes are not stored.
"""

from pathlib import Path
from typing import Iterable, Optional, TextIO

from .errors import FingerprintFormatError
from .models import Fingerprint, FingerprintSequence, FrequencyMagnitude, TimestampedFingerprint


def format_fingerprint(fingerprint: TimestampedFingerprint) -> str:
    fields = [f"{fingerprint.timestamp:.2f}"]
    fields.extend(f"{freq.frequency:f}" for freq in fingerprint.frequencies)
    return " ".join(fields) + "\n"


def write_fingerprints(stream: TextIO, fingerprints: Iterable[TimestampedFingerprint]) -> None:
    for fingerprint in fingerprints:
        stream.write(format_fingerprint(fingerprint))


def save_fingerprints(path, fingerprints: FingerprintSequence) -> None:
    with open(path, "w") as f:
        write_fingerprints(f, fingerprints)


def _parse_float(token: str) -> Optional[float]:
    try:
        return float(token)
    except ValueError:
        return None


def parse_fingerprint_line(line: str, line_number: Optional[int] = None,
                           source: Optional[str] = None) -> TimestampedFingerprint:
    """
    Parse one line of the text format.

    Raises:
        FingerprintFormatError: on an empty line, a non-numeric timestamp or
            a non-numeric frequency
    """
    tokens = line.split()
    if not tokens:
        raise FingerprintFormatError(
            f"Incorrectly formatted fingerprint line: '{line.rstrip()}'",
            source=source, line_number=line_number,
        )

    timestamp = _parse_float(tokens[0])
    if timestamp is None:
        raise FingerprintFormatError(
            f"Incorrectly formatted fingerprint timestamp: '{tokens[0]}'",
            source=source, line_number=line_number, token=tokens[0],
        )

    frequencies = []
    for token in tokens[1:]:
        frequency = _parse_float(token)
        if frequency is None:
            raise FingerprintFormatError(
                f"Incorrectly formatted fingerprint frequency: '{token}'",
                source=source, line_number=line_number, token=token,
            )
        frequencies.append(FrequencyMagnitude(frequency=frequency))

    return Fingerprint(tuple(frequencies)).timestamp(timestamp)


def read_fingerprints(stream: TextIO, source: Optional[str] = None) -> FingerprintSequence:
    return [
        parse_fingerprint_line(line, line_number, source)
        for line_number, line in enumerate(stream, start=1)
    ]


def load_fingerprints(path) -> FingerprintSequence:
    """Load a fingerprint file; OSError propagates if it cannot be opened."""
    path = Path(path)
    with open(path, "r") as f:
        return read_fingerprints(f, source=str(path))


def format_report(fingerprints: Iterable[TimestampedFingerprint]) -> str:
    """Human-readable listing with magnitudes, one block per fingerprint."""
    lines = []
    for fingerprint in fingerprints:
        lines.append(f"Fingerprint@{fingerprint.timestamp:.2f}:")
        for freq in fingerprint.frequencies:
            magnitude = "n/a" if freq.magnitude is None else f"{freq.magnitude:.3f}"
            lines.append(f"\t{freq.frequency:.1f}Hz\t ({magnitude})")
    return "\n".join(lines) + "\n" if lines else ""
