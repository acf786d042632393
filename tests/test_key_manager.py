"""Tests for content key splitting, recombination and derivation."""

import pytest

from common.constants import CONTENT_KEY_SIZE, SALT_SIZE
from common.exceptions import IncompleteKeyError
from engine.key_manager import (
    derive_key,
    generate_content_key,
    generate_salt,
    recombine_key,
    split_key,
    wipe,
)


def test_generate_content_key_is_random_and_sized():
    first = generate_content_key()
    second = generate_content_key()

    assert isinstance(first, bytearray)
    assert len(first) == CONTENT_KEY_SIZE
    assert first != second


def test_generate_salt_size():
    assert len(generate_salt()) == SALT_SIZE


def test_split_into_three_puts_remainder_last():
    key = bytes(range(32))
    shares = split_key(key, 3)

    assert [len(s) for s in shares] == [10, 10, 12]
    assert b"".join(shares) == key


def test_split_is_deterministic():
    key = generate_content_key()
    assert split_key(key, 3) == split_key(key, 3)


@pytest.mark.parametrize("n", [0, 33])
def test_split_rejects_bad_share_count(n):
    with pytest.raises(ValueError):
        split_key(bytes(32), n)


def test_recombine_uses_indices_not_insertion_order():
    key = bytes(range(32))
    shares = split_key(key, 3)
    scrambled = {2: shares[2], 0: shares[0], 1: shares[1]}

    assert recombine_key(scrambled, 3) == bytearray(key)


def test_recombine_missing_share_raises():
    shares = split_key(bytes(range(32)), 3)
    with pytest.raises(IncompleteKeyError, match=r"\[1\]"):
        recombine_key({0: shares[0], 2: shares[2]}, 3)


def test_recombine_empty_share_raises():
    shares = split_key(bytes(range(32)), 3)
    with pytest.raises(IncompleteKeyError):
        recombine_key({0: shares[0], 1: b"", 2: shares[2]}, 3)


def test_recombine_short_key_raises():
    shares = split_key(bytes(range(32)), 3)
    with pytest.raises(IncompleteKeyError, match="expected 32"):
        recombine_key({0: shares[0], 1: shares[1], 2: shares[2][:5]}, 3)


def test_derive_key_is_deterministic_and_salt_dependent():
    material = bytes(range(32))
    salt_a = b"a" * 32
    salt_b = b"b" * 32

    assert derive_key(material, salt_a) == derive_key(material, salt_a)
    assert derive_key(material, salt_a) != derive_key(material, salt_b)
    assert len(derive_key(material, salt_a)) == CONTENT_KEY_SIZE


def test_derive_key_accepts_bytearray():
    material = bytearray(range(32))
    assert derive_key(material, b"s" * 32) == derive_key(bytes(material), b"s" * 32)


def test_wipe_zeroes_buffer():
    key = generate_content_key()
    wipe(key)
    assert key == bytearray(CONTENT_KEY_SIZE)
