"""Tests for the fragment compressor."""

import os
import zlib

import pytest

from common.exceptions import CompressionError
from engine.compressor import compress, decompress


@pytest.mark.parametrize("data", [
    b"",
    b"a",
    b"hello world" * 50,
    os.urandom(4096),
])
def test_round_trip(data):
    assert decompress(compress(data)) == data


def test_incompressible_input_is_not_truncated():
    data = os.urandom(100_000)
    compressed = compress(data)
    assert len(compressed) > len(data)
    assert decompress(compressed) == data


def test_highly_compressible_input_expands_beyond_fixed_multiplier():
    """A 10 MiB run of zeros compresses far more than 10x and must still restore fully."""
    data = bytes(10 * 1024 * 1024)
    compressed = compress(data, level=9)
    assert len(data) > 100 * len(compressed)
    assert decompress(compressed) == data


def test_compression_level_is_honoured():
    data = b"abcabcabc" * 1000
    assert len(compress(data, level=0)) > len(compress(data, level=9))


def test_invalid_level_raises():
    with pytest.raises(CompressionError):
        compress(b"data", level=42)


def test_corrupt_input_raises():
    with pytest.raises(CompressionError):
        decompress(b"definitely not zlib")


def test_truncated_stream_raises():
    compressed = compress(b"some text that compresses" * 20)
    with pytest.raises(CompressionError, match="truncated"):
        decompress(compressed[:-4])


def test_trailing_garbage_raises():
    compressed = compress(b"payload")
    with pytest.raises(CompressionError, match="after compressed stream"):
        decompress(compressed + b"junk")


def test_empty_input_to_decompress_raises():
    with pytest.raises(CompressionError):
        decompress(b"")


def test_output_is_standard_zlib():
    assert zlib.decompress(compress(b"interop")) == b"interop"
