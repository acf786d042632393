"""Utility functions for CLI operations."""

import sys
from typing import Optional, TextIO

from cli.constants import GREEN, RESET
from engine.progress import ProgressEvent
from engine.schemas.piece import PieceMetadata


class ProgressPrinter:
    """Progress observer that draws a single updating line on stdout."""

    def __init__(self, label: str, stream: Optional[TextIO] = None):
        """
        Initialize the progress printer.

        Args:
            label: Text shown before the counter (e.g. "Breaking report.pdf")
            stream: Output stream, stdout by default
        """
        self.label = label
        self.stream = stream or sys.stdout
        self._finished = False

    def __call__(self, event: ProgressEvent) -> None:
        if self._finished:
            return
        if event.is_terminal:
            self._finish_progress()
            return
        if event.index is None and event.completed:
            self._display_progress(event)

    def _display_progress(self, event: ProgressEvent) -> None:
        """Display current progress."""
        percent = event.fraction * 100
        self.stream.write(
            f"\r{self.label}: {event.completed} / {event.total} ({GREEN}{percent:.1f}%{RESET})"
        )
        self.stream.flush()

    def _finish_progress(self) -> None:
        """Finalize progress display with newline."""
        self._finished = True
        self.stream.write('\n')
        self.stream.flush()


def format_file_size(size_bytes: int) -> str:
    """
    Format file size in bytes to human-readable format with appropriate unit.

    Uses binary units (1024-based) and automatically selects the most
    appropriate unit (B, KiB, MiB, GiB, TiB).

    Args:
        size_bytes: File size in bytes

    Returns:
        Formatted string with size and unit (e.g., "1.50 MiB", "512 B")
    """
    if size_bytes < 1024:
        return f"{size_bytes} B"

    units = ['KiB', 'MiB', 'GiB', 'TiB']
    size = size_bytes / 1024.0

    for unit in units:
        if size < 1024.0:
            return f"{size:.2f} {unit}"
        size /= 1024.0

    return f"{size:.2f} PiB"


def format_metadata(metadata: PieceMetadata) -> str:
    """Render piece metadata for display, without key material."""
    lines = [
        f"File:       {metadata.file_name}",
        f"Piece:      {metadata.index + 1} of {metadata.total}",
        f"Operation:  {metadata.operation_id}",
        f"Created:    {metadata.created_at}",
        f"Protected:  {'yes' if metadata.protected else 'no'}",
        f"File hash:  {metadata.file_hash}",
        f"Format:     v{metadata.version}, {metadata.compression}",
    ]
    return "\n".join(lines)
