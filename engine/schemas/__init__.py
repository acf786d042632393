"""Pydantic schemas for piece metadata."""

from engine.schemas.piece import PieceMetadata, associated_data

__all__ = [
    "PieceMetadata",
    "associated_data",
]
