"""Reconstruction engine: PIECE_COUNT pieces in, original bytes out."""

import logging
import threading
from typing import List, Optional, Sequence, Tuple

from common.checksum import IncrementalChecksumCalculator, checksums_match, verify_checksum
from common.constants import PIECE_COUNT
from common.exceptions import IncompletePieceSetError, IntegrityError, PieceCountError
from common.types import ReconstructedFile
from engine import config
from engine.cipher import open as open_sealed
from engine.compressor import decompress
from engine.key_manager import derive_key, recombine_key, wipe
from engine.piece_codec import decode
from engine.progress import OperationState, ProgressObserver, ProgressReporter
from engine.schemas.piece import PieceMetadata
from engine.workers import run_indexed

logger = logging.getLogger(__name__)

DecodedPiece = Tuple[PieceMetadata, bytes]


def validate_piece_set(metadata: Sequence[PieceMetadata]) -> PieceMetadata:
    """
    Check that pieces form one complete set from a single operation.

    Returns:
        Metadata of the piece with index 0

    Raises:
        IncompletePieceSetError: On mixed operations, inconsistent metadata,
            or indices that are not exactly 0..PIECE_COUNT-1
    """
    operation_ids = {m.operation_id for m in metadata}
    if len(operation_ids) != 1:
        raise IncompletePieceSetError(
            f"Pieces come from {len(operation_ids)} different operations"
        )

    indices = sorted(m.index for m in metadata)
    if indices != list(range(PIECE_COUNT)):
        missing = sorted(set(range(PIECE_COUNT)) - set(indices))
        duplicated = sorted({i for i in indices if indices.count(i) > 1})
        raise IncompletePieceSetError(
            f"Incomplete piece set: missing {missing}, duplicated {duplicated}"
        )

    for field in ("file_name", "file_hash", "protected"):
        if len({getattr(m, field) for m in metadata}) != 1:
            raise IncompletePieceSetError(f"Pieces disagree on {field}")

    return next(m for m in metadata if m.index == 0)


class Reconstructor:
    """Reassembles and verifies a file from a complete piece set."""

    def __init__(self, workers: Optional[int] = None):
        self.workers = workers or config.WORKERS

    def reconstruct(
        self,
        pieces: Sequence[bytes],
        progress: Optional[ProgressObserver] = None,
        cancel_event: Optional[threading.Event] = None,
    ) -> ReconstructedFile:
        """
        Rebuild the original file from serialized pieces, in any order.

        Args:
            pieces: Exactly PIECE_COUNT serialized pieces
            progress: Observer receiving ProgressEvent updates
            cancel_event: Checked before each piece is processed

        Returns:
            ReconstructedFile with the verified bytes and original file name

        Raises:
            PieceCountError: If len(pieces) != PIECE_COUNT
            FormatError: If a piece cannot be decoded
            IncompletePieceSetError: If the pieces do not form one full set
            IncompleteKeyError: If key shares cannot be recombined
            AuthenticationError: If a protected payload fails verification
            CompressionError: If a payload fails to decompress
            IntegrityError: If a checksum does not match
        """
        reporter = ProgressReporter("reconstruct", PIECE_COUNT, progress)
        content_key: Optional[bytearray] = None

        try:
            if len(pieces) != PIECE_COUNT:
                raise PieceCountError(f"Expected {PIECE_COUNT} pieces, got {len(pieces)}")

            reporter.transition(OperationState.VALIDATING, "Validating pieces")
            decoded: List[DecodedPiece] = []
            for piece in pieces:
                metadata, payload = decode(piece)
                reporter.step(OperationState.DECODING, metadata.index)
                decoded.append((metadata, payload))
            reference = validate_piece_set([metadata for metadata, _ in decoded])
            logger.info(
                f"Reconstructing {reference.file_name!r} from operation {reference.operation_id}"
            )

            if reference.protected:
                content_key = recombine_key(
                    {metadata.index: metadata.key_share_bytes() for metadata, _ in decoded},
                    PIECE_COUNT,
                )

            def restore(piece: DecodedPiece) -> bytes:
                metadata, payload = piece
                if content_key is None:
                    if not verify_checksum(payload, metadata.payload_checksum):
                        raise IntegrityError(f"Payload checksum mismatch in piece {metadata.index}")
                else:
                    reporter.step(OperationState.DECRYPTING, metadata.index)
                    fragment_key = derive_key(content_key, metadata.salt_bytes())
                    payload = open_sealed(payload, fragment_key, metadata.associated_data())
                reporter.step(OperationState.DECOMPRESSING, metadata.index)
                return decompress(payload)

            reporter.transition(OperationState.PROCESSING, "Restoring fragments")
            fragments = run_indexed(
                restore,
                [(piece[0].index, piece) for piece in decoded],
                reporter,
                self.workers,
                cancel_event,
            )

            reporter.transition(OperationState.REASSEMBLING, "Reassembling fragments")
            calculator = IncrementalChecksumCalculator()
            output = bytearray()
            for i in range(PIECE_COUNT):
                calculator.update(fragments[i])
                output += fragments[i]

            reporter.transition(OperationState.VERIFYING, "Verifying file hash")
            if not checksums_match(calculator.finalize(), reference.file_hash):
                raise IntegrityError("Reassembled file does not match recorded hash")

            reporter.complete(f"Reconstructed {reference.file_name}")
            logger.info(f"Reconstructed {reference.file_name!r} ({len(output)} bytes)")
            return ReconstructedFile(data=bytes(output), file_name=reference.file_name)
        except Exception as e:
            logger.error(f"Reconstruction failed: {e}")
            reporter.fail(str(e))
            raise
        finally:
            if content_key is not None:
                wipe(content_key)


def reconstruct(
    pieces: Sequence[bytes],
    progress: Optional[ProgressObserver] = None,
    cancel_event: Optional[threading.Event] = None,
) -> ReconstructedFile:
    """Reconstruct with default engine settings. See Reconstructor.reconstruct."""
    return Reconstructor().reconstruct(pieces, progress, cancel_event)
