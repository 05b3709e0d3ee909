"""
Snapshot collector: walk the world into one canonical byte stream.

Stream layout (big-endian u32 fields):

    per entity:  ENTITY_TAG  record_count
    per record:  type_id  length  encoded_bytes

Entities are framed even when they carry no registered record, so "entity
exists" and "entity absent" never collide.
"""

import struct
from typing import Iterator

from .ordering import OrderingPolicy, validate_order
from .registry import RecordRegistry, WorldView

ENTITY_TAG = 0xE0

_ENTITY_FRAME = struct.Struct(">BI")
_RECORD_HEADER = struct.Struct(">II")


def iter_frames(
    world: WorldView,
    registry: RecordRegistry,
    policy: OrderingPolicy,
) -> Iterator[bytes]:
    """
    Yield the canonical stream chunk by chunk.

    Args:
        world: Host data set (exclusive access for the duration)
        registry: Registered record types
        policy: Ordering policy, captured by the caller for this snapshot

    Raises:
        OrderingError: If the policy result is malformed
        EncodingError: If a record cannot be encoded
    """
    ordered = list(policy(world))
    validate_order(ordered, world.tracked())

    for entity in ordered:
        records = registry.enumerate_present(world, entity)
        yield _ENTITY_FRAME.pack(ENTITY_TAG, len(records))
        for type_id, data in records:
            yield _RECORD_HEADER.pack(type_id, len(data))
            yield data


def collect_snapshot(
    world: WorldView,
    registry: RecordRegistry,
    policy: OrderingPolicy,
) -> bytes:
    """
    Serialize tracked state to deterministic bytes.

    Returns:
        Canonical framed byte stream
    """
    return b"".join(iter_frames(world, registry, policy))
