"""Fragmentation engine: file bytes in, PIECE_COUNT serialized pieces out."""

import base64
import logging
import math
import os
import threading
import uuid
from datetime import datetime, timezone
from typing import List, Optional, Tuple

from pydantic import ValidationError

from common.checksum import compute_checksum
from common.constants import PIECE_COUNT
from common.exceptions import FormatError
from common.types import Fragment
from engine import config
from engine.cipher import seal
from engine.compressor import compress
from engine.key_manager import derive_key, generate_content_key, generate_salt, split_key, wipe
from engine.piece_codec import encode
from engine.progress import OperationState, ProgressObserver, ProgressReporter
from engine.schemas.piece import PieceMetadata, associated_data
from engine.workers import run_indexed

logger = logging.getLogger(__name__)


def compute_boundaries(size: int, n: int = PIECE_COUNT) -> List[Tuple[int, int]]:
    """
    Compute [start, end) offsets of n contiguous fragments.

    Every fragment is ceil(size / n) bytes except the trailing ones, which
    take whatever remains (possibly nothing).
    """
    fragment_size = math.ceil(size / n)
    boundaries = []
    for i in range(n):
        start = min(i * fragment_size, size)
        end = min(start + fragment_size, size)
        boundaries.append((start, end))
    return boundaries


def split_fragments(data: bytes, n: int = PIECE_COUNT) -> List[Fragment]:
    return [
        Fragment(index=i, data=bytes(data[start:end]))
        for i, (start, end) in enumerate(compute_boundaries(len(data), n))
    ]


class Fragmenter:
    """
    Splits a file into PIECE_COUNT pieces.

    Each fragment is compressed and, when protection is on, sealed with
    AES-256-GCM under a key derived from the whole content key and a
    per-piece random salt. The content key itself is divided into shares,
    one per piece, so every piece is needed to decrypt any of them.
    """

    def __init__(self, workers: Optional[int] = None, compression_level: Optional[int] = None):
        self.workers = workers or config.WORKERS
        self.compression_level = compression_level

    def fragment(
        self,
        data: bytes,
        file_name: str,
        protect: bool = False,
        progress: Optional[ProgressObserver] = None,
        cancel_event: Optional[threading.Event] = None,
    ) -> List[bytes]:
        """
        Fragment a file into serialized pieces.

        Args:
            data: Whole file contents
            file_name: Original file name, stored in every piece
            protect: Encrypt fragments and distribute key shares
            progress: Observer receiving ProgressEvent updates
            cancel_event: Checked before each fragment is processed

        Returns:
            List of PIECE_COUNT serialized pieces in index order

        Raises:
            CompressionError: If a fragment fails to compress
            FormatError: If piece metadata cannot be built
            OperationCancelledError: If cancel_event is set mid-operation
        """
        if not file_name:
            raise ValueError("file_name must not be empty")
        file_name = storable_name(file_name)

        operation_id = str(uuid.uuid4())
        reporter = ProgressReporter("fragment", PIECE_COUNT, progress)
        content_key: Optional[bytearray] = None

        logger.info(f"Fragmenting {file_name!r} ({len(data)} bytes, protect={protect}) as {operation_id}")
        try:
            reporter.transition(OperationState.SPLITTING, f"Splitting {file_name}")
            fragments = split_fragments(data)
            file_hash = compute_checksum(data)
            created_at = datetime.now(timezone.utc).isoformat()

            shares: List[bytes] = [b""] * PIECE_COUNT
            if protect:
                content_key = generate_content_key()
                shares = split_key(content_key, PIECE_COUNT)

            def build(fragment: Fragment) -> bytes:
                reporter.step(OperationState.COMPRESSING, fragment.index)
                payload = compress(fragment.data, self.compression_level)
                salt = b""
                if content_key is not None:
                    reporter.step(OperationState.ENCRYPTING, fragment.index)
                    salt = generate_salt()
                    payload = seal(
                        payload,
                        derive_key(content_key, salt),
                        associated_data(operation_id, fragment.index),
                    )
                try:
                    metadata = PieceMetadata(
                        operation_id=operation_id,
                        index=fragment.index,
                        file_name=file_name,
                        created_at=created_at,
                        protected=protect,
                        key_share=_b64(shares[fragment.index]),
                        salt=_b64(salt),
                        file_hash=file_hash,
                        payload_checksum=compute_checksum(payload),
                    )
                except ValidationError as e:
                    raise FormatError(
                        f"Invalid metadata for piece {fragment.index}: {e.error_count()} validation error(s)"
                    ) from e
                reporter.step(OperationState.SERIALIZING, fragment.index)
                return encode(metadata, payload)

            reporter.transition(OperationState.PROCESSING, "Processing fragments")
            results = run_indexed(
                build,
                [(fragment.index, fragment) for fragment in fragments],
                reporter,
                self.workers,
                cancel_event,
            )
            pieces = [results[i] for i in range(PIECE_COUNT)]

            reporter.complete(f"Created {PIECE_COUNT} pieces")
            logger.info(f"Fragmented {operation_id} into {PIECE_COUNT} pieces")
            return pieces
        except Exception as e:
            logger.error(f"Fragmentation of {file_name!r} failed: {e}")
            reporter.fail(str(e))
            raise
        finally:
            if content_key is not None:
                wipe(content_key)


def fragment(
    data: bytes,
    file_name: str,
    protect: bool = False,
    progress: Optional[ProgressObserver] = None,
    cancel_event: Optional[threading.Event] = None,
) -> List[bytes]:
    """Fragment with default engine settings. See Fragmenter.fragment."""
    return Fragmenter().fragment(data, file_name, protect, progress, cancel_event)


def storable_name(file_name: str) -> str:
    """
    Return file_name as valid UTF-8 text.

    Names read from the OS may carry undecodable bytes as lone surrogates;
    those bytes are replaced with U+FFFD.
    """
    return os.fsencode(file_name).decode("utf-8", "replace")


def _b64(data: bytes) -> str:
    return base64.b64encode(data).decode("ascii") if data else ""
