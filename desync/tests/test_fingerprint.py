"""
Tests for CRC reduction and fingerprint state.
"""

import zlib

from desync.core.fingerprint import Crc, FingerprintState, reduce, reduce_chunks


def test_reduce_is_crc32():
    assert reduce(b"hello").value == zlib.crc32(b"hello")


def test_reduce_empty_fixed():
    """The empty stream always reduces to the same digest."""
    assert reduce(b"") == Crc(0)
    assert reduce(b"") == reduce(b"")


def test_reduce_chunks_matches_reduce():
    chunks = [b"\xe0\x00\x00\x00\x01", b"abc", b"", b"defgh"]
    assert reduce_chunks(chunks) == reduce(b"".join(chunks))


def test_reduce_order_sensitive():
    assert reduce(b"ab") != reduce(b"ba")


def test_crc_hex_fixed_width():
    assert Crc(0x1F).hex() == "0000001f"
    assert str(Crc(0xDEADBEEF)) == "deadbeef"


def test_state_uninitialized_until_publish():
    state = FingerprintState()
    assert state.crc is None
    assert not state.initialized

    state.publish(Crc(1))
    assert state.crc == Crc(1)
    assert state.initialized


def test_state_overwrites():
    """Only the latest digest is kept."""
    state = FingerprintState()
    state.publish(Crc(1))
    state.publish(Crc(2))
    assert state.crc == Crc(2)
