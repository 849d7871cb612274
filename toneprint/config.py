# ---------- CONFIG ---------- #

import math
from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Optional

import yaml

FFT_CHUNK_SECONDS = 0.3  # duration of one analysed chunk: 44.1kHz -> 13230 samples
FREQUENCY_COUNT = 3      # strongest bins kept per chunk
TRANSFORM = "numpy"      # see spectral.TRANSFORMS
BLOCK_SIZE = 4096        # frames pulled from the decoder per hand-off


@dataclass(frozen=True)
class FingerprintConfig:
    chunk_seconds: float = FFT_CHUNK_SECONDS
    frequency_count: int = FREQUENCY_COUNT
    transform: str = TRANSFORM
    block_size: int = BLOCK_SIZE

    def __post_init__(self):
        if isinstance(self.chunk_seconds, bool) or not isinstance(self.chunk_seconds, (int, float)) \
                or not math.isfinite(self.chunk_seconds) or self.chunk_seconds <= 0:
            raise ValueError(f"chunk_seconds must be a positive finite number, got {self.chunk_seconds!r}")
        if isinstance(self.frequency_count, bool) or not isinstance(self.frequency_count, int) \
                or self.frequency_count < 1:
            raise ValueError(f"frequency_count must be a positive integer, got {self.frequency_count!r}")
        if isinstance(self.block_size, bool) or not isinstance(self.block_size, int) \
                or self.block_size < 1:
            raise ValueError(f"block_size must be a positive integer, got {self.block_size!r}")

    def override(self, **changes) -> "FingerprintConfig":
        """Return a copy with every non-None keyword applied."""
        changes = {k: v for k, v in changes.items() if v is not None}
        return replace(self, **changes)


def load_config(config_path: Optional[Path] = None) -> FingerprintConfig:
    """
    Build a FingerprintConfig, optionally from a YAML mapping.

    Args:
        config_path: YAML file whose keys are FingerprintConfig field names.
            Missing keys keep their defaults.

    Returns:
        The validated configuration.
    """
    if config_path is None:
        return FingerprintConfig()

    with open(config_path, 'r') as f:
        try:
            data = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ValueError(f"{config_path}: invalid YAML: {e}") from e

    if not isinstance(data, dict):
        raise ValueError(f"{config_path}: expected a mapping of settings")

    known = {f.name for f in fields(FingerprintConfig)}
    unknown = sorted(set(data) - known)
    if unknown:
        raise ValueError(f"{config_path}: unknown settings {unknown}. Choose from {sorted(known)}")

    return FingerprintConfig(**data)
