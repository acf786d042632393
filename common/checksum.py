"""Provides SHA-256 checksum calculation and verification helpers."""

import hashlib
import hmac


def compute_checksum(data: bytes) -> str:
    """
    Compute SHA-256 checksum for given data.

    Args:
        data: Bytes to compute checksum for

    Returns:
        Hexadecimal string representation of SHA-256 hash
    """
    return hashlib.sha256(data).hexdigest()


def verify_checksum(data: bytes, expected: str) -> bool:
    """
    Verify that data matches expected checksum.

    Args:
        data: Bytes to verify
        expected: Expected SHA-256 checksum (hex string)

    Returns:
        True if checksum matches, False otherwise
    """
    return checksums_match(compute_checksum(data), expected)


def checksums_match(actual: str, expected: str) -> bool:
    """Constant-time comparison of two hex digests."""
    return hmac.compare_digest(actual.lower(), expected.lower())


class IncrementalChecksumCalculator:
    """
    Calculate SHA-256 checksum incrementally over ordered fragments.

    Usage:
        calculator = IncrementalChecksumCalculator()
        calculator.update(fragment0)
        calculator.update(fragment1)
        final_checksum = calculator.finalize()
    """

    def __init__(self):
        """Initialize a new incremental checksum calculator."""
        self._hasher = hashlib.sha256()
        self._finalized = False

    def update(self, data: bytes) -> None:
        """
        Update checksum with new data.

        Args:
            data: Bytes to add to checksum calculation
        """
        if self._finalized:
            raise ValueError("Cannot update after finalization")
        self._hasher.update(data)

    def finalize(self) -> str:
        """
        Finalize checksum calculation and return result.

        Returns:
            Hexadecimal string representation of SHA-256 hash
        """
        self._finalized = True
        return self._hasher.hexdigest()

