"""
Content key generation, splitting, recombination and derivation.

Splitting divides the key into contiguous byte ranges. This is not secret
sharing: each share reveals its slice of the key, and only the full set of
shares recovers the key.
"""

import os
from typing import List, Mapping, Union

from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.kdf.hkdf import HKDF

from common.constants import CONTENT_KEY_SIZE, KEY_DERIVATION_INFO, SALT_SIZE
from common.exceptions import IncompleteKeyError


KeyMaterial = Union[bytes, bytearray, memoryview]


def generate_content_key() -> bytearray:
    """Return a fresh random content key in a wipeable buffer."""
    return bytearray(os.urandom(CONTENT_KEY_SIZE))


def generate_salt() -> bytes:
    return os.urandom(SALT_SIZE)


def split_key(key: KeyMaterial, n: int) -> List[bytes]:
    """
    Partition a key into n contiguous, non-overlapping shares.

    Shares are len(key) // n bytes each; the last share takes the remainder.

    Args:
        key: Key bytes
        n: Number of shares

    Returns:
        List of n shares in index order
    """
    if n < 1 or n > len(key):
        raise ValueError(f"Cannot split a {len(key)}-byte key into {n} shares")

    share_size = len(key) // n
    shares = []
    for i in range(n):
        start = i * share_size
        end = len(key) if i == n - 1 else start + share_size
        shares.append(bytes(key[start:end]))
    return shares


def recombine_key(shares: Mapping[int, bytes], n: int) -> bytearray:
    """
    Concatenate shares in index order.

    Args:
        shares: Mapping of share index to share bytes
        n: Number of shares expected

    Returns:
        The recombined key in a wipeable buffer

    Raises:
        IncompleteKeyError: If any index in [0, n) is missing or empty,
            or the result is not a full-size key
    """
    missing = [i for i in range(n) if not shares.get(i)]
    if missing:
        raise IncompleteKeyError(f"Missing key share(s) for index {missing}")

    key = bytearray()
    for i in range(n):
        key += shares[i]

    if len(key) != CONTENT_KEY_SIZE:
        size = len(key)
        wipe(key)
        raise IncompleteKeyError(f"Recombined key is {size} bytes, expected {CONTENT_KEY_SIZE}")
    return key


def derive_key(material: KeyMaterial, salt: bytes) -> bytes:
    """
    Derive a 32-byte fragment key with HKDF-SHA256.

    Deterministic for a given (material, salt) pair.
    """
    hkdf = HKDF(
        algorithm=hashes.SHA256(),
        length=CONTENT_KEY_SIZE,
        salt=salt,
        info=KEY_DERIVATION_INFO,
    )
    return hkdf.derive(bytes(material))


def wipe(buffer: bytearray) -> None:
    """Zero a key buffer in place."""
    for i in range(len(buffer)):
        buffer[i] = 0
