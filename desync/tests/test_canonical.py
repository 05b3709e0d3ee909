"""
Tests for canonical record encoding.

Critical: These tests verify determinism guarantees.
"""

from dataclasses import dataclass, field
from typing import Dict, FrozenSet, List

import pytest

from desync.core.canonical import (
    canonicalize,
    canonical_json_bytes,
    canonical_json_str,
    default_encoder,
    encode_record,
)
from desync.core.errors import ConfigurationError, EncodingError


@dataclass
class Position:
    x: int
    y: int


@dataclass
class Inventory:
    items: FrozenSet[str] = frozenset()
    counts: Dict[int, int] = field(default_factory=dict)
    path: List[Position] = field(default_factory=list)


def test_canonicalize_dict_key_order():
    """Dict key order must not affect canonical output."""
    d1 = {"z": 1, "a": 2, "m": 3}
    d2 = {"a": 2, "m": 3, "z": 1}

    assert canonical_json_bytes(d1) == canonical_json_bytes(d2)


def test_canonicalize_dataclass():
    """Dataclasses become dicts of their fields."""
    assert canonicalize(Position(1, 2)) == {"x": 1, "y": 2}
    assert canonical_json_str(Position(1, 2)) == '{"x":1,"y":2}'


def test_set_iteration_order_ignored():
    """Sets are sorted by encoded element, whatever their insertion history."""
    a = Inventory(items=frozenset(["sword", "apple", "rope"]))
    b = Inventory(items=frozenset(["rope", "sword", "apple"]))

    assert canonical_json_bytes(a) == canonical_json_bytes(b)
    assert canonicalize(a)["items"] == {"__set__": ["apple", "rope", "sword"]}


def test_non_string_keys_become_sorted_pairs():
    """Dicts with int keys are emitted as sorted [key, value] pairs."""
    a = Inventory(counts={3: 1, 1: 5})
    b = Inventory(counts={1: 5, 3: 1})

    assert canonicalize(a)["counts"] == {"__pairs__": [[1, 5], [3, 1]]}
    assert canonical_json_bytes(a) == canonical_json_bytes(b)


def test_nested_dataclasses():
    """Nested records are canonicalized recursively."""
    inv = Inventory(path=[Position(0, 1), Position(2, 3)])
    assert canonicalize(inv)["path"] == [{"x": 0, "y": 1}, {"x": 2, "y": 3}]


def test_to_dict_records():
    """Objects exposing to_dict() are encoded through it."""

    class Health:
        def __init__(self, hp):
            self.hp = hp

        def to_dict(self):
            return {"hp": self.hp}

    assert canonical_json_str(Health(10)) == '{"hp":10}'


def test_canonical_handles_unicode():
    """Unicode strings must be handled consistently."""
    s = canonical_json_str({"name": "日本語"})
    assert "日本語" in s


def test_default_encoder_rejects_plain_class():
    """A type with no serialization capability is rejected up front."""

    class Opaque:
        pass

    with pytest.raises(ConfigurationError, match="no to_dict"):
        default_encoder(Opaque)


def test_default_encoder_accepts_dataclass():
    assert default_encoder(Position)(Position(1, 1)) == b'{"x":1,"y":1}'


def test_encode_record_nan_rejected():
    """NaN has no canonical form."""

    @dataclass
    class Speed:
        v: float

    with pytest.raises(EncodingError, match="Speed"):
        encode_record(Speed(float("nan")))


def test_encode_record_non_serializable_payload():
    """Non-serializable payloads surface as EncodingError."""

    @dataclass
    class Handle:
        obj: object

    with pytest.raises(EncodingError, match="Handle"):
        encode_record(Handle(object()))


def test_encode_record_requires_bytes():
    """Custom encoders must return bytes."""
    with pytest.raises(EncodingError, match="expected bytes"):
        encode_record(Position(0, 0), encoder=lambda r: "not bytes")


def test_encode_record_custom_encoder():
    out = encode_record(Position(1, 2), encoder=lambda r: bytes([r.x, r.y]))
    assert out == b"\x01\x02"


def test_set_and_list_encode_differently():
    """A set field must not collide with a list holding the same items."""
    assert canonical_json_bytes({"v": {1, 2}}) != canonical_json_bytes({"v": [1, 2]})


def test_int_keyed_dict_and_pair_list_encode_differently():
    """A non-string-keyed dict must not collide with a list of [k, v] pairs."""
    assert canonical_json_bytes({"v": {1: 2}}) != canonical_json_bytes({"v": [[1, 2]]})


def test_canonicalize_idempotent_on_tagged_forms():
    once = canonicalize({"v": frozenset({3, 1}), "m": {2: "b", 1: "a"}})
    assert canonicalize(once) == once
