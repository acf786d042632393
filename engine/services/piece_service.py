"""Break files into piece files on disk and mend them back."""

import logging
import threading
from pathlib import Path
from typing import List, Optional, Sequence

from common.exceptions import PieceIOError
from engine import config
from engine.fragmenter import Fragmenter
from engine.piece_codec import peek_metadata
from engine.piece_storage import delete_pieces, piece_file_name, read_piece, write_atomic
from engine.progress import ProgressObserver
from engine.reconstructor import Reconstructor
from engine.schemas.piece import PieceMetadata

logger = logging.getLogger(__name__)


class PieceService:
    def __init__(
        self,
        fragmenter: Optional[Fragmenter] = None,
        reconstructor: Optional[Reconstructor] = None,
    ):
        self.fragmenter = fragmenter or Fragmenter()
        self.reconstructor = reconstructor or Reconstructor()

    def break_file(
        self,
        path: Path,
        output_dir: Optional[Path] = None,
        protect: bool = False,
        progress: Optional[ProgressObserver] = None,
        cancel_event: Optional[threading.Event] = None,
    ) -> List[Path]:
        """
        Break a file into piece files.

        Either every piece file is written or none is left behind.

        Args:
            path: File to break
            output_dir: Directory for piece files (defaults to TRIPTYCH_OUTPUT_DIR)
            protect: Encrypt the pieces
            progress: Observer receiving ProgressEvent updates
            cancel_event: Cancels the operation between fragments

        Returns:
            Paths of the written piece files, in index order
        """
        path = Path(path)
        output_dir = Path(output_dir or config.OUTPUT_DIR)

        try:
            data = path.read_bytes()
        except OSError as e:
            raise PieceIOError(f"Failed to read {path}: {e}") from e

        pieces = self.fragmenter.fragment(data, path.name, protect, progress, cancel_event)

        written: List[Path] = []
        try:
            for piece in pieces:
                metadata = peek_metadata(piece)
                target = output_dir / piece_file_name(path.name, metadata.operation_id, metadata.index)
                write_atomic(target, piece)
                written.append(target)
                logger.info(f"Wrote piece {metadata.index + 1} to {target}")
        except Exception as e:
            logger.error(f"Breaking {path} failed: {e}")
            if written:
                logger.info(f"Cleaning up {len(written)} orphaned piece file(s)")
                delete_pieces(written)
            raise

        return written

    def mend_files(
        self,
        paths: Sequence[Path],
        output_dir: Optional[Path] = None,
        progress: Optional[ProgressObserver] = None,
        overwrite: bool = False,
        cancel_event: Optional[threading.Event] = None,
    ) -> Path:
        """
        Rebuild the original file from piece files.

        The output keeps the original file name, reduced to its base name so
        a crafted piece cannot write outside output_dir.

        Args:
            paths: Piece files, in any order
            output_dir: Directory for the mended file (defaults to the current directory)
            progress: Observer receiving ProgressEvent updates
            overwrite: Replace an existing file with the same name
            cancel_event: Cancels the operation between pieces

        Returns:
            Path of the mended file
        """
        pieces = [read_piece(Path(p)) for p in paths]
        result = self.reconstructor.reconstruct(pieces, progress, cancel_event)

        output_dir = Path(output_dir) if output_dir else Path.cwd()
        safe_name = Path(result.file_name).name
        if safe_name in ("", ".", ".."):
            safe_name = "mended_file"
        target = output_dir / safe_name

        if target.exists() and not overwrite:
            raise PieceIOError(f"{target} already exists")

        write_atomic(target, result.data)
        logger.info(f"Mended {len(paths)} pieces into {target}")
        return target

    def inspect_piece(self, path: Path) -> PieceMetadata:
        """Read and validate the metadata block of a piece file."""
        return peek_metadata(read_piece(Path(path)))
