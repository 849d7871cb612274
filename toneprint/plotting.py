from pathlib import Path

import matplotlib
matplotlib.use("Agg")
import matplotlib.pyplot as plt

from .models import ComparisonResult, FingerprintSequence


def plot_losses_and_save(result: ComparisonResult, reference: FingerprintSequence, output_path: Path):
    """Save the window loss at every offset, with the best offset marked."""
    offsets = [reference[i].timestamp for i in range(len(result.losses))]
    normalized = [loss / result.window_length for loss in result.losses]

    plt.figure(figsize=(10, 4))
    plt.plot(offsets, normalized, c='blue', linewidth=1)
    plt.scatter([result.offset_seconds], [result.global_loss], s=30, c='red', zorder=3,
                label=f"best: {result.offset_seconds:.2f}s ({result.global_loss:.3f})")
    plt.xlabel("Window offset in reference (s)")
    plt.ylabel("Loss per fingerprint (Hz)")
    plt.title("Alignment loss by offset")
    plt.legend()
    plt.grid(True)
    try:
        plt.savefig(output_path)
    finally:
        plt.close()
