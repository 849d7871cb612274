"""
Tests for the fingerprint text format
"""

import io

import numpy as np
import pytest

from toneprint.chunking import chunk
from toneprint.errors import FingerprintFormatError
from toneprint.models import Fingerprint, FrequencyMagnitude
from toneprint.storage import (
    format_fingerprint,
    format_report,
    load_fingerprints,
    parse_fingerprint_line,
    read_fingerprints,
    save_fingerprints,
    write_fingerprints,
)


def make_fingerprint(timestamp, freqs, magnitudes=None):
    magnitudes = magnitudes or [None] * len(freqs)
    return Fingerprint(tuple(
        FrequencyMagnitude(f, m) for f, m in zip(freqs, magnitudes)
    )).timestamp(timestamp)


class TestWrite:

    def test_line_format(self):
        line = format_fingerprint(make_fingerprint(0.3, [440.0, 1000.0, 2500.5], [9.0, 5.0, 1.0]))
        assert line == "0.30 440.000000 1000.000000 2500.500000\n"

    def test_timestamp_rounded_to_two_decimals(self):
        line = format_fingerprint(make_fingerprint(0.8999999999999999, [1.0]))
        assert line.split()[0] == "0.90"

    def test_stream_one_line_per_fingerprint(self):
        buffer = io.StringIO()
        write_fingerprints(buffer, [make_fingerprint(0.0, [1.0]), make_fingerprint(0.3, [2.0])])
        assert buffer.getvalue() == "0.00 1.000000\n0.30 2.000000\n"


class TestParse:

    def test_parses_timestamp_and_frequencies(self):
        fingerprint = parse_fingerprint_line("1.20 440.000000 1000.5 3.25\n")
        assert fingerprint.timestamp == pytest.approx(1.2)
        assert fingerprint.hz == [440.0, 1000.5, 3.25]
        assert all(f.magnitude is None for f in fingerprint.frequencies)

    def test_any_whitespace(self):
        fingerprint = parse_fingerprint_line("  0.30\t1.5   2.5 ")
        assert fingerprint.hz == [1.5, 2.5]

    def test_timestamp_only(self):
        fingerprint = parse_fingerprint_line("0.60")
        assert fingerprint.hz == []

    @pytest.mark.parametrize("line", ["", "\n", "   \t "])
    def test_empty_line(self, line):
        with pytest.raises(FingerprintFormatError, match="fingerprint line"):
            parse_fingerprint_line(line)

    def test_bad_timestamp(self):
        with pytest.raises(FingerprintFormatError, match="timestamp") as exc:
            parse_fingerprint_line("abc 440.0 1000.0")
        assert exc.value.token == "abc"

    def test_bad_frequency(self):
        with pytest.raises(FingerprintFormatError, match="frequency") as exc:
            parse_fingerprint_line("0.30 440.0 1k 2000.0")
        assert exc.value.token == "1k"

    def test_error_is_value_error(self):
        with pytest.raises(ValueError):
            parse_fingerprint_line("x")

    def test_error_names_file_and_line(self, tmp_path):
        path = tmp_path / "bad.fp"
        path.write_text("0.00 1.0 2.0\n0.30 1.0 oops\n")

        with pytest.raises(FingerprintFormatError) as exc:
            load_fingerprints(path)

        assert exc.value.line_number == 2
        assert exc.value.source == str(path)
        assert f"{path}:2:" in str(exc.value)

    def test_blank_line_in_file(self):
        with pytest.raises(FingerprintFormatError):
            read_fingerprints(io.StringIO("0.00 1.0\n\n0.60 1.0\n"))

    def test_missing_file(self, tmp_path):
        with pytest.raises(OSError):
            load_fingerprints(tmp_path / "missing.fp")


class TestRoundTrip:

    def test_save_and_load(self, tmp_path):
        original = chunk(np.random.randn(8000 * 2), 8000, chunk_seconds=0.3)
        path = tmp_path / "song.fp"
        save_fingerprints(path, original)
        loaded = load_fingerprints(path)

        assert len(loaded) == len(original)
        for a, b in zip(original, loaded):
            assert b.timestamp == pytest.approx(a.timestamp, abs=0.005)
            assert b.hz == pytest.approx(a.hz, abs=1e-6)

    def test_order_preserved(self, tmp_path):
        original = [make_fingerprint(0.0, [300.0, 100.0, 200.0])]
        path = tmp_path / "order.fp"
        save_fingerprints(path, original)
        assert load_fingerprints(path)[0].hz == [300.0, 100.0, 200.0]


class TestReport:

    def test_report_format(self):
        report = format_report([make_fingerprint(0.3, [440.0, 1000.0], [12.3456, 1.0])])
        assert report == "Fingerprint@0.30:\n\t440.0Hz\t (12.346)\n\t1000.0Hz\t (1.000)\n"

    def test_report_without_magnitudes(self):
        report = format_report([make_fingerprint(0.0, [440.0])])
        assert "(n/a)" in report

    def test_empty_report(self):
        assert format_report([]) == ""
