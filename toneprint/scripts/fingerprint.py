#!/usr/bin/env python3
"""
Fingerprint an audio file.

Usage:
    toneprint-fingerprint --filename song.flac --output song.fp
    toneprint-fingerprint --filename song.flac                  # report on stdout
    toneprint-fingerprint --filename song.flac -o song.fp --profile fp.prof
"""

import argparse
import cProfile
import logging
import sys
from contextlib import ExitStack
from pathlib import Path

from toneprint.audio import SoundFileSource
from toneprint.chunking import fingerprint_source
from toneprint.config import load_config
from toneprint.errors import ToneprintError
from toneprint.logs import Timer, setup_logging
from toneprint.spectral import TRANSFORMS
from toneprint.storage import format_report, write_fingerprints

log = logging.getLogger("toneprint.scripts.fingerprint")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description='toneprint - fingerprint an audio file')
    parser.add_argument('--filename', '-f', type=str, required=True,
                        help='Audio file to fingerprint')
    parser.add_argument('--output', '-o', type=str, default=None,
                        help='Fingerprint output file (default: print a report to stdout)')
    parser.add_argument('--profile', '-p', type=str, default=None,
                        help='Profile performance and write the statistics to this file')
    parser.add_argument('--config', '-c', type=str, default=None,
                        help='YAML file overriding chunk_seconds, frequency_count, transform, block_size')
    parser.add_argument('--transform', choices=sorted(TRANSFORMS.keys()), default=None,
                        help='DFT implementation (overrides the config file)')
    parser.add_argument('--progress', action='store_true',
                        help='Show a progress bar')
    parser.add_argument('--verbose', '-v', action='store_true',
                        help='Log debug details and stage timings')
    return parser


def run(args: argparse.Namespace) -> None:
    config = load_config(Path(args.config) if args.config else None).override(transform=args.transform)
    timer = Timer()

    with ExitStack() as stack:
        with timer.measure("Open audio"):
            source = stack.enter_context(SoundFileSource(args.filename, block_size=config.block_size))
        log.info(f"Fingerprinting {args.filename} ({source.sample_rate} Hz)")

        # Create the profile and the output before the run so unwritable paths
        # fail fast. The profile comes first: its failure must not leave an
        # empty output behind.
        if args.profile:
            open(args.profile, 'wb').close()
        output = stack.enter_context(open(args.output, 'w')) if args.output else None

        profiler = None
        if args.profile:
            profiler = cProfile.Profile()
            profiler.enable()

        try:
            with timer.measure("Fingerprint"):
                fingerprints = fingerprint_source(source, config, progress=args.progress)
        except BaseException:
            if output is not None:
                output.close()
                Path(args.output).unlink(missing_ok=True)
            raise
        finally:
            if profiler is not None:
                profiler.disable()
                profiler.dump_stats(args.profile)

        with timer.measure("Write"):
            if output is not None:
                write_fingerprints(output, fingerprints)
            else:
                sys.stdout.write(format_report(fingerprints))

    if output is not None:
        log.info(f"Wrote {len(fingerprints)} fingerprints to {args.output}")
    log.debug(f"Total time: {timer.total:.4f}s")


def main(argv=None):
    args = build_parser().parse_args(argv)
    setup_logging(args.verbose)

    if not Path(args.filename).exists():
        log.error(f"Audio file not found: {args.filename}")
        sys.exit(1)

    try:
        run(args)
    except ToneprintError as e:
        log.error(str(e))
        sys.exit(1)
    except (OSError, ValueError) as e:
        log.error(f"Fingerprinting '{args.filename}' failed: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
