"""AES-256-GCM sealing of fragment payloads into self-contained blobs."""

import os
from typing import Optional

from cryptography.exceptions import InvalidTag
from cryptography.hazmat.primitives.ciphers.aead import AESGCM

from common.constants import CONTENT_KEY_SIZE, NONCE_SIZE, TAG_SIZE
from common.exceptions import AuthenticationError


def seal(plaintext: bytes, key: bytes, associated_data: Optional[bytes] = None) -> bytes:
    """
    Encrypt and authenticate plaintext under key.

    A fresh random nonce is drawn on every call.

    Returns:
        nonce | ciphertext | tag
    """
    if len(key) != CONTENT_KEY_SIZE:
        raise ValueError(f"Key must be {CONTENT_KEY_SIZE} bytes, got {len(key)}")
    nonce = os.urandom(NONCE_SIZE)
    return nonce + AESGCM(bytes(key)).encrypt(nonce, plaintext, associated_data)


def open(blob: bytes, key: bytes, associated_data: Optional[bytes] = None) -> bytes:
    """
    Verify and decrypt a sealed blob.

    Raises:
        AuthenticationError: If the blob is malformed, the key is wrong,
            or the tag does not verify
    """
    if len(key) != CONTENT_KEY_SIZE:
        raise AuthenticationError(f"Key must be {CONTENT_KEY_SIZE} bytes, got {len(key)}")
    if len(blob) < NONCE_SIZE + TAG_SIZE:
        raise AuthenticationError(f"Sealed blob too short: {len(blob)} bytes")

    nonce, ciphertext = blob[:NONCE_SIZE], blob[NONCE_SIZE:]
    try:
        return AESGCM(bytes(key)).decrypt(nonce, ciphertext, associated_data)
    except InvalidTag as e:
        raise AuthenticationError("Authentication tag mismatch") from e
