"""
Canonical serialization for deterministic fingerprinting.

Every tracked record goes through these functions, so the same value always
produces the same bytes regardless of dict insertion order, set iteration order
or the process it runs in.
"""

import dataclasses
import json
from typing import Any, Callable, Optional

from .errors import ConfigurationError, EncodingError

# Encoder signature: record -> canonical bytes
Encoder = Callable[[Any], bytes]

SET_TAG = "__set__"
PAIRS_TAG = "__pairs__"


def canonicalize(obj: Any) -> Any:
    """
    Convert a record value to canonical plain data.

    Rules:
    - dataclasses become dicts of their fields
    - objects with to_dict() are converted through it
    - dict keys sorted; non-string keys turn the dict into {"__pairs__": [[key, value], ...]}
      sorted by key bytes
    - tuples converted to lists (a tuple and a list with equal items encode the same)
    - sets and frozensets become {"__set__": [...]} sorted by element bytes
    - recursive normalization

    The tags keep a set or a non-string-keyed dict apart from a plain list.
    A string-keyed dict whose only key is "__set__" or "__pairs__" still
    collides with the tagged form; record fields should keep a fixed type.
    """
    if dataclasses.is_dataclass(obj) and not isinstance(obj, type):
        return {
            f.name: canonicalize(getattr(obj, f.name))
            for f in sorted(dataclasses.fields(obj), key=lambda f: f.name)
        }
    if isinstance(obj, dict):
        if all(isinstance(k, str) for k in obj):
            return {k: canonicalize(obj[k]) for k in sorted(obj.keys())}
        pairs = [[canonicalize(k), canonicalize(v)] for k, v in obj.items()]
        return {PAIRS_TAG: sorted(pairs, key=lambda kv: canonical_json_bytes(kv[0]))}
    if isinstance(obj, (list, tuple)):
        return [canonicalize(x) for x in obj]
    if isinstance(obj, (set, frozenset)):
        items = [canonicalize(x) for x in obj]
        return {SET_TAG: sorted(items, key=canonical_json_bytes)}
    if hasattr(obj, "to_dict") and callable(obj.to_dict):
        return canonicalize(obj.to_dict())
    return obj


def canonical_json_bytes(obj: Any) -> bytes:
    """
    Deterministic JSON bytes for hashing.

    Guarantees:
    - sort_keys=True (secondary safety)
    - separators remove whitespace
    - ensure_ascii=False keeps UTF-8 stable
    - allow_nan=False, NaN has no canonical form
    - canonical preprocessing via canonicalize()

    Returns:
        UTF-8 encoded JSON bytes
    """
    canon = canonicalize(obj)
    s = json.dumps(
        canon,
        sort_keys=True,
        separators=(",", ":"),
        ensure_ascii=False,
        allow_nan=False,
    )
    return s.encode("utf-8")


def canonical_json_str(obj: Any) -> str:
    """Deterministic JSON string (for display)."""
    return canonical_json_bytes(obj).decode("utf-8")


def default_encoder(record_type: type) -> Encoder:
    """
    Build the canonical JSON encoder for a record type.

    Raises:
        ConfigurationError: If the type offers no way to be serialized
    """
    if not (dataclasses.is_dataclass(record_type) or callable(getattr(record_type, "to_dict", None))):
        raise ConfigurationError(
            f"{record_type.__qualname__} is not a dataclass and has no to_dict(); "
            "pass an explicit encoder"
        )
    return canonical_json_bytes


def encode_record(record: Any, encoder: Optional[Encoder] = None) -> bytes:
    """
    Encode one record, turning serialization failures into EncodingError.

    Args:
        record: Record value
        encoder: Encoder to use (canonical JSON when None)

    Returns:
        Canonical bytes
    """
    enc = encoder or canonical_json_bytes
    try:
        out = enc(record)
    except (TypeError, ValueError) as e:
        raise EncodingError(f"Cannot encode {type(record).__qualname__}: {e}") from e
    if not isinstance(out, (bytes, bytearray)):
        raise EncodingError(
            f"Encoder for {type(record).__qualname__} returned {type(out).__name__}, expected bytes"
        )
    return bytes(out)
