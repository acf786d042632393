"""Tests for the piece serialization format."""

import json
import struct

import pytest

from common.checksum import compute_checksum
from common.constants import PIECE_MAGIC, PIECE_SEPARATOR
from common.exceptions import FormatError
from engine.piece_codec import decode, encode, peek_metadata
from engine.schemas.piece import PieceMetadata


def make_metadata(**overrides) -> PieceMetadata:
    fields = {
        "operation_id": "op-1",
        "index": 1,
        "file_name": "notes.txt",
        "created_at": "2024-05-01T12:00:00+00:00",
        "protected": False,
        "file_hash": compute_checksum(b"whole file"),
        "payload_checksum": compute_checksum(b"payload"),
    }
    fields.update(overrides)
    return PieceMetadata(**fields)


def test_encode_decode_preserves_metadata_and_payload():
    metadata = make_metadata()
    metadata_out, payload_out = decode(encode(metadata, b"payload"))

    assert metadata_out == metadata
    assert payload_out == b"payload"


def test_payload_containing_separator_is_not_split():
    """Separator bytes inside the payload must survive untouched."""
    payload = PIECE_SEPARATOR + b"middle" + PIECE_SEPARATOR + PIECE_MAGIC
    _, payload_out = decode(encode(make_metadata(), payload))
    assert payload_out == payload


def test_empty_payload():
    _, payload_out = decode(encode(make_metadata(), b""))
    assert payload_out == b""


def test_peek_metadata_matches_decode():
    piece = encode(make_metadata(index=2), b"x" * 100)
    assert peek_metadata(piece).index == 2


def test_piece_starts_with_magic():
    assert encode(make_metadata(), b"data").startswith(PIECE_MAGIC)


class TestMalformedPieces:
    """Each framing defect raises FormatError."""

    def test_too_short(self):
        with pytest.raises(FormatError):
            decode(b"TRIP")

    def test_bad_magic(self):
        piece = bytearray(encode(make_metadata(), b"data"))
        piece[0:8] = b"NOTAPIEC"
        with pytest.raises(FormatError, match="magic"):
            decode(bytes(piece))

    def test_unsupported_version(self):
        piece = bytearray(encode(make_metadata(), b"data"))
        piece[8] = 99
        with pytest.raises(FormatError, match="version"):
            decode(bytes(piece))

    def test_metadata_length_beyond_buffer(self):
        piece = bytearray(encode(make_metadata(), b"data"))
        piece[9:13] = struct.pack(">I", 10_000_000)
        with pytest.raises(FormatError):
            decode(bytes(piece))

    def test_separator_missing(self):
        piece = encode(make_metadata(), b"data")
        damaged = piece.replace(PIECE_SEPARATOR, b"\n--BROKEN-\n", 1)
        with pytest.raises(FormatError, match="Separator"):
            decode(damaged)

    def test_metadata_not_json(self):
        body = b"not json at all"
        piece = struct.pack(">8sBI", PIECE_MAGIC, 1, len(body)) + body + PIECE_SEPARATOR
        with pytest.raises(FormatError):
            decode(piece)

    def test_metadata_not_an_object(self):
        body = json.dumps([1, 2, 3]).encode()
        piece = struct.pack(">8sBI", PIECE_MAGIC, 1, len(body)) + body + PIECE_SEPARATOR
        with pytest.raises(FormatError, match="object"):
            decode(piece)

    def test_metadata_fails_validation(self):
        raw = make_metadata().model_dump()
        raw["index"] = 7
        body = json.dumps(raw).encode()
        piece = struct.pack(">8sBI", PIECE_MAGIC, 1, len(body)) + body + PIECE_SEPARATOR
        with pytest.raises(FormatError, match="Invalid metadata"):
            decode(piece)


class TestMetadataValidation:
    """PieceMetadata rejects inconsistent protection fields."""

    def test_protected_requires_share_and_salt(self):
        with pytest.raises(ValueError):
            make_metadata(protected=True)

    def test_unprotected_rejects_share(self):
        with pytest.raises(ValueError):
            make_metadata(key_share="AAAA")

    def test_bad_base64_rejected(self):
        with pytest.raises(ValueError):
            make_metadata(protected=True, key_share="not base64!", salt="AAAA")

    def test_bad_timestamp_rejected(self):
        with pytest.raises(ValueError):
            make_metadata(created_at="yesterday")

    def test_bad_hash_rejected(self):
        with pytest.raises(ValueError):
            make_metadata(file_hash="abc")
