"""
Core fingerprinting primitives.

- Canonical: deterministic record encoding
- Registry: tracked record types keyed by registration index
- Ordering: canonical entity sequence (id sort, external map)
- Snapshot: framed byte stream of tracked state
- Fingerprint: CRC reduction and per-run state
"""

from .canonical import canonicalize, canonical_json_bytes, canonical_json_str, default_encoder, encode_record
from .entity import Entity, TrackDesync
from .errors import DesyncError, ConfigurationError, OrderingError, EncodingError
from .registry import RecordRegistry, RecordType, WorldView
from .ordering import OrderingPolicy, sort_entities_ids, ExternalMapOrdering, validate_order
from .snapshot import ENTITY_TAG, collect_snapshot, iter_frames
from .fingerprint import Crc, FingerprintState, reduce, reduce_chunks

__all__ = [
    "canonicalize",
    "canonical_json_bytes",
    "canonical_json_str",
    "default_encoder",
    "encode_record",
    "Entity",
    "TrackDesync",
    "DesyncError",
    "ConfigurationError",
    "OrderingError",
    "EncodingError",
    "RecordRegistry",
    "RecordType",
    "WorldView",
    "OrderingPolicy",
    "sort_entities_ids",
    "ExternalMapOrdering",
    "validate_order",
    "ENTITY_TAG",
    "collect_snapshot",
    "iter_frames",
    "Crc",
    "FingerprintState",
    "reduce",
    "reduce_chunks",
]
