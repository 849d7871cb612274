#!/usr/bin/env python3
"""
Compare two fingerprint files and report their alignment loss.

Usage:
    toneprint-compare a.fp b.fp
    toneprint-compare a.fp b.fp --plot losses.png
"""

import argparse
import logging
import sys
from pathlib import Path

from toneprint.comparison import compare_sequences
from toneprint.errors import ToneprintError
from toneprint.logs import setup_logging
from toneprint.storage import load_fingerprints

log = logging.getLogger("toneprint.scripts.compare")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description='toneprint - compare two fingerprint files')
    parser.add_argument('filenames', nargs='*',
                        help='The two fingerprint files to compare')
    parser.add_argument('--plot', type=str, default=None,
                        help='Save the loss-by-offset curve to this image file')
    parser.add_argument('--verbose', '-v', action='store_true',
                        help='Log debug details')
    return parser


def main(argv=None):
    args = build_parser().parse_args(argv)
    setup_logging(args.verbose)

    if len(args.filenames) != 2:
        log.error("Expected the file names of two fingerprints to compare")
        sys.exit(1)

    sequences = []
    for filename in args.filenames:
        try:
            sequences.append(load_fingerprints(filename))
        except OSError as e:
            log.error(f"Could not open file '{filename}': {e.strerror or e}")
            sys.exit(1)
        except ToneprintError as e:
            log.error(str(e))
            sys.exit(1)
        except UnicodeDecodeError as e:
            log.error(f"'{filename}' is not a text fingerprint file: {e}")
            sys.exit(1)
        log.debug(f"Loaded {len(sequences[-1])} fingerprints from {filename}")

    try:
        result = compare_sequences(sequences)
    except ToneprintError as e:
        log.error(f"Cannot compare '{args.filenames[0]}' with '{args.filenames[1]}': {e}")
        sys.exit(1)

    window_name, reference_name = args.filenames
    reference = sequences[1]
    if result.swapped:
        window_name, reference_name = reference_name, window_name
        reference = sequences[0]
    log.info(f"Best offset: {window_name} aligns at {result.offset_seconds:.2f}s "
             f"(fingerprint {result.offset_index}) of {reference_name}")

    if args.plot:
        from toneprint.plotting import plot_losses_and_save
        try:
            plot_losses_and_save(result, reference, Path(args.plot))
        except (OSError, ValueError) as e:
            log.error(f"Could not save plot to '{args.plot}': {e}")
            sys.exit(1)
        log.info(f"Saved loss plot to {args.plot}")

    # Printed last: a failed run never reports a loss.
    print(f"Loss: {result.global_loss:f}")


if __name__ == "__main__":
    main()
