"""
Exceptions raised by toneprint.

Every error is terminal for the run that raised it; the command-line
scripts report them and exit non-zero.
"""

from typing import Optional


class ToneprintError(Exception):
    """Base class for toneprint failures."""


class DecodeError(ToneprintError):
    """The audio source could not be opened or decoded."""


class FingerprintFormatError(ToneprintError, ValueError):
    """A line of a fingerprint file does not follow the text format."""

    def __init__(self, message: str, source: Optional[str] = None,
                 line_number: Optional[int] = None, token: Optional[str] = None):
        self.source = source
        self.line_number = line_number
        self.token = token

        location = ""
        if source is not None:
            location = f"{source}:"
        if line_number is not None:
            location += f"{line_number}:"
        super().__init__(f"{location} {message}" if location else message)


class IncompatibleFingerprintsError(ToneprintError, ValueError):
    """Two fingerprint sequences cannot be compared with each other."""
