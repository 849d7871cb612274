import logging
import sys
import time
from contextlib import contextmanager
from typing import Dict, Optional, TextIO

# -----------------------------
# Logging Configuration
# -----------------------------

class PrettyFormatter(logging.Formatter):
    """Timestamped, level-tagged records; colored when writing to a terminal."""

    COLORS = {
        'DEBUG': '\033[36m',     # Cyan
        'INFO': '\033[32m',      # Green
        'WARNING': '\033[33m',   # Yellow
        'ERROR': '\033[31m',     # Red
        'CRITICAL': '\033[35m',  # Magenta
    }
    RESET = '\033[0m'
    BOLD = '\033[1m'

    def __init__(self, use_color: bool = False):
        super().__init__()
        self.use_color = use_color

    def format(self, record):
        timestamp = self.formatTime(record, "%Y-%m-%d %H:%M:%S")
        message = record.getMessage()
        if record.exc_info:
            message = f"{message}\n{self.formatException(record.exc_info)}"

        if not self.use_color:
            return f"[{timestamp}] {record.levelname:<8} │ {message}"

        color = self.COLORS.get(record.levelname, self.RESET)
        return (
            f"{self.BOLD}[{timestamp}]{self.RESET} "
            f"{color}{record.levelname:<8}{self.RESET} │ "
            f"{message}"
        )


def setup_logging(verbose: bool = False, stream: Optional[TextIO] = None) -> logging.Logger:
    """
    Configure the 'toneprint' logger for command-line use.

    Records go to stderr so stdout only carries results. Calling it again
    replaces the previous handler.
    """
    stream = stream or sys.stderr
    logger = logging.getLogger("toneprint")
    logger.setLevel(logging.DEBUG if verbose else logging.INFO)

    for handler in list(logger.handlers):
        if getattr(handler, "_toneprint", False):
            logger.removeHandler(handler)

    console_handler = logging.StreamHandler(stream)
    console_handler.setFormatter(PrettyFormatter(use_color=hasattr(stream, "isatty") and stream.isatty()))
    console_handler._toneprint = True
    logger.addHandler(console_handler)
    return logger


class Timer:
    """Context manager for timing named stages, logged at DEBUG."""

    def __init__(self, logger: Optional[logging.Logger] = None):
        self.logger = logger or logging.getLogger("toneprint")
        self.timings: Dict[str, float] = {}

    @contextmanager
    def measure(self, label: str):
        start = time.perf_counter()
        try:
            yield
        finally:
            elapsed = time.perf_counter() - start
            self.timings[label] = elapsed
            self.logger.debug(f"{label}: {elapsed:.4f}s")

    @property
    def total(self) -> float:
        return sum(self.timings.values())
