"""Shared data type definitions (Fragment, ReconstructedFile, etc.)."""

from dataclasses import dataclass


@dataclass(frozen=True)
class Fragment:
    """
    A contiguous slice of the original file, identified by its index.
    """
    index: int
    data: bytes


@dataclass(frozen=True)
class ReconstructedFile:
    """
    Bytes reassembled from a full piece set, with the original file name.
    """
    data: bytes
    file_name: str

    def __iter__(self):
        return iter((self.data, self.file_name))
