"""Reversible zlib transform applied to each fragment before encryption."""

import zlib
from typing import Optional

from common.exceptions import CompressionError
from engine import config

_READ_BLOCK = 64 * 1024


def compress(data: bytes, level: Optional[int] = None) -> bytes:
    """
    Compress a fragment.

    zlib grows its output buffer internally, so incompressible input is
    never truncated.

    Args:
        data: Fragment bytes
        level: zlib level 0-9; defaults to TRIPTYCH_COMPRESSION_LEVEL

    Returns:
        Compressed bytes

    Raises:
        CompressionError: If the codec reports failure
    """
    if level is None:
        level = config.COMPRESSION_LEVEL
    try:
        compressor = zlib.compressobj(level)
        return compressor.compress(data) + compressor.flush()
    except (zlib.error, ValueError) as e:
        raise CompressionError(f"Compression failed: {e}") from e


def decompress(data: bytes) -> bytes:
    """
    Decompress a fragment into a growable buffer.

    Args:
        data: Compressed bytes

    Returns:
        Original fragment bytes

    Raises:
        CompressionError: On corrupt, truncated, or trailing-garbage input
    """
    decompressor = zlib.decompressobj()
    output = bytearray()
    try:
        pending = data
        while pending:
            output += decompressor.decompress(pending, _READ_BLOCK)
            pending = decompressor.unconsumed_tail
        output += decompressor.flush()
    except zlib.error as e:
        raise CompressionError(f"Corrupt compressed data: {e}") from e

    if not decompressor.eof:
        raise CompressionError("Compressed stream is truncated")
    if decompressor.unused_data:
        raise CompressionError(
            f"Unexpected {len(decompressor.unused_data)} bytes after compressed stream"
        )
    return bytes(output)
