"""Service layer for file-level operations."""

from engine.services.piece_service import PieceService

__all__ = [
    "PieceService",
]
