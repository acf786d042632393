"""Tests for checksum helpers."""

import hashlib

import pytest

from common.checksum import (
    IncrementalChecksumCalculator,
    checksums_match,
    compute_checksum,
    verify_checksum,
)


def test_compute_checksum():
    assert compute_checksum(b'abc') == hashlib.sha256(b'abc').hexdigest()


def test_verify_checksum_accepts_uppercase():
    assert verify_checksum(b'abc', compute_checksum(b'abc').upper())
    assert not verify_checksum(b'abd', compute_checksum(b'abc'))


def test_checksums_match():
    assert checksums_match('ab' * 32, 'AB' * 32)
    assert not checksums_match('ab' * 32, 'cd' * 32)


def test_incremental_matches_whole():
    calculator = IncrementalChecksumCalculator()
    for part in (b'ABCD', b'EFGH', b'IJ'):
        calculator.update(part)
    assert calculator.finalize() == compute_checksum(b'ABCDEFGHIJ')


def test_incremental_update_after_finalize_raises():
    calculator = IncrementalChecksumCalculator()
    calculator.finalize()
    with pytest.raises(ValueError):
        calculator.update(b'late')

