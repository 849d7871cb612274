"""
Tests for toneprint

Test coverage:
- Spectral analysis: top-K selection, ordering and bin frequencies
- Chunking: chunk count, timestamps, block-boundary independence
- Sample sources and the producer/consumer sample stream
- Fingerprint text format: writing, parsing, error reporting
- Alignment: element loss, window selection, offsets, errors
- Command-line scripts
"""
