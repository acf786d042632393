"""Manages piece files on disk: naming, atomic writes, reads and cleanup."""

import logging
import os
import tempfile
from pathlib import Path
from typing import Iterable, List

from common.constants import PIECE_COUNT, PIECE_FILE_SUFFIX
from common.exceptions import PieceIOError
from engine.fragmenter import storable_name

logger = logging.getLogger(__name__)


def piece_file_name(file_name: str, operation_id: str, index: int, total: int = PIECE_COUNT) -> str:
    """
    Build the file name for a piece.

    Args:
        file_name: Original file name
        operation_id: UUID of the fragmentation operation
        index: Zero-based piece index

    Returns:
        Name such as "report.pdf.1a2b3c4d.part1of3.piece"
    """
    base = Path(storable_name(file_name)).name or "file"
    return f"{base}.{operation_id[:8]}.part{index + 1}of{total}{PIECE_FILE_SUFFIX}"


def ensure_directory(directory: Path) -> None:
    try:
        directory.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise PieceIOError(f"Cannot create directory {directory}: {e}") from e


def write_atomic(path: Path, data: bytes) -> Path:
    """
    Write bytes to path atomically.

    Data goes to a temporary file in the same directory which is then
    renamed over the target, so readers never see a half-written file.

    Raises:
        PieceIOError: If the write fails
    """
    ensure_directory(path.parent)
    tmp_name = None
    try:
        with tempfile.NamedTemporaryFile(
            dir=path.parent, prefix=f".{path.name}.", suffix=".tmp", delete=False
        ) as tmp:
            tmp_name = tmp.name
            tmp.write(data)
            tmp.flush()
            os.fsync(tmp.fileno())
        os.replace(tmp_name, path)
    except OSError as e:
        if tmp_name is not None and os.path.exists(tmp_name):
            os.unlink(tmp_name)
        raise PieceIOError(f"Failed to write {path}: {e}") from e
    return path


def read_piece(path: Path) -> bytes:
    """
    Read an entire piece file.

    Raises:
        PieceIOError: If the file is missing or unreadable
    """
    try:
        return Path(path).read_bytes()
    except OSError as e:
        raise PieceIOError(f"Failed to read {path}: {e}") from e


def delete_pieces(paths: Iterable[Path]) -> List[Path]:
    """
    Delete piece files, ignoring ones that are already gone.

    Returns:
        Paths that could not be deleted
    """
    failed = []
    for path in paths:
        try:
            Path(path).unlink(missing_ok=True)
        except OSError as e:
            logger.warning(f"Could not delete {path}: {e}")
            failed.append(Path(path))
    return failed
