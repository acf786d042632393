"""
Piece serialization format.

Layout (big-endian):
    MAGIC(8) | VERSION(1) | META_LEN(4) | metadata JSON | SEPARATOR | payload

The metadata block is length-prefixed and the separator is checked at its
fixed offset, so payload bytes are never scanned and may contain anything.
"""

import json
import struct
from typing import Tuple

from pydantic import ValidationError

from common.constants import PIECE_FORMAT_VERSION, PIECE_MAGIC, PIECE_SEPARATOR
from common.exceptions import FormatError
from engine.schemas.piece import PieceMetadata

_HEADER = struct.Struct(">8sBI")


def encode(metadata: PieceMetadata, payload: bytes) -> bytes:
    """
    Serialize metadata and payload into a single piece.

    Args:
        metadata: Validated piece metadata
        payload: Opaque payload bytes, appended verbatim

    Returns:
        Serialized piece bytes
    """
    meta_bytes = metadata.model_dump_json().encode("utf-8")
    header = _HEADER.pack(PIECE_MAGIC, PIECE_FORMAT_VERSION, len(meta_bytes))
    return b"".join((header, meta_bytes, PIECE_SEPARATOR, payload))


def decode(data: bytes) -> Tuple[PieceMetadata, bytes]:
    """
    Split a serialized piece into metadata and payload.

    Args:
        data: Serialized piece bytes

    Returns:
        Tuple of (metadata, payload)

    Raises:
        FormatError: If the framing is invalid or metadata fails to parse
    """
    metadata, payload_offset = _decode_header(data)
    return metadata, bytes(data[payload_offset:])


def peek_metadata(data: bytes) -> PieceMetadata:
    """Decode only the metadata block of a piece."""
    metadata, _ = _decode_header(data)
    return metadata


def _decode_header(data: bytes) -> Tuple[PieceMetadata, int]:
    if len(data) < _HEADER.size:
        raise FormatError(f"Piece too short: {len(data)} bytes")

    magic, version, meta_len = _HEADER.unpack_from(data, 0)
    if magic != PIECE_MAGIC:
        raise FormatError("Not a piece: bad magic")
    if version != PIECE_FORMAT_VERSION:
        raise FormatError(f"Unsupported piece format version {version}")

    meta_start = _HEADER.size
    meta_end = meta_start + meta_len
    sep_end = meta_end + len(PIECE_SEPARATOR)
    if sep_end > len(data):
        raise FormatError("Metadata length exceeds piece size")
    if data[meta_end:sep_end] != PIECE_SEPARATOR:
        raise FormatError("Separator missing after metadata block")

    try:
        raw = json.loads(bytes(data[meta_start:meta_end]).decode("utf-8"))
    except (UnicodeDecodeError, json.JSONDecodeError) as e:
        raise FormatError(f"Invalid metadata encoding: {e}") from e
    if not isinstance(raw, dict):
        raise FormatError("Metadata must be a JSON object")

    try:
        metadata = PieceMetadata.model_validate(raw)
    except ValidationError as e:
        raise FormatError(f"Invalid metadata: {e.error_count()} validation error(s)") from e

    return metadata, sep_end
