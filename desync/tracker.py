"""
DesyncTracker: per-replica fingerprinting context.

Owns the record registry, the current ordering policy and the fingerprint
state. One instance per simulation replica; there is no process-wide state.

Precondition: update_crc() runs with exclusive access to the world, after all
state-mutating steps of the tick and before fingerprints are compared.
"""

import threading
from typing import Optional

from .core.canonical import Encoder
from .core.errors import DesyncError
from .core.fingerprint import Crc, FingerprintState, reduce_chunks
from .core.ordering import OrderingPolicy, sort_entities_ids
from .core.registry import RecordRegistry, RecordType, WorldView
from .core.snapshot import iter_frames
from .logging_config import get_logger


class DesyncTracker:
    """
    Usage:
        tracker = DesyncTracker()
        tracker.track(Position)
        tracker.update_crc(world)
        tracker.crc
    """

    def __init__(
        self,
        entity_sort: OrderingPolicy = sort_entities_ids,
        name: Optional[str] = None,
    ) -> None:
        self.registry = RecordRegistry()
        self.state = FingerprintState()
        self.name = name
        self._policy_lock = threading.Lock()
        self._entity_sort = entity_sort
        self._snapshots = 0
        self.log = get_logger(__name__, trace_id=name)

    def track(self, record_type: type, encoder: Optional[Encoder] = None) -> RecordType:
        """
        Register a record type for fingerprinting.

        Must be called identically on every replica, before the first snapshot.
        """
        try:
            desc = self.registry.register(record_type, encoder)
        except DesyncError as e:
            self.log.error("Record type registration rejected: %s", e)
            raise
        self.log.info(
            "Tracking record type %s", desc.name, extra={"type_id": desc.type_id}
        )
        return desc

    def set_entity_sort(self, policy: OrderingPolicy) -> None:
        """Replace the ordering policy. Takes effect from the next snapshot."""
        with self._policy_lock:
            self._entity_sort = policy
        self.log.info("Ordering policy replaced: %r", policy)

    @property
    def entity_sort(self) -> OrderingPolicy:
        with self._policy_lock:
            return self._entity_sort

    def calculate_crc(self, world: WorldView) -> Crc:
        """
        Compute the fingerprint of the world without publishing it.

        Freezes the registry on first use.

        Raises:
            ConfigurationError: On a malformed ordering
            EncodingError: On a record that cannot be encoded
        """
        self.registry.freeze()
        policy = self.entity_sort
        return reduce_chunks(iter_frames(world, self.registry, policy))

    def update_crc(self, world: WorldView) -> Crc:
        """
        Compute and publish the fingerprint for this tick.

        On failure nothing is published and the error propagates.
        """
        try:
            crc = self.calculate_crc(world)
        except DesyncError as e:
            self.log.error(
                "Fingerprint not published: %s", e, extra={"snapshot": self._snapshots}
            )
            raise
        self.state.publish(crc)
        self._snapshots += 1
        self.log.debug("Fingerprint %s", crc.hex(), extra={"snapshot": self._snapshots})
        return crc

    @property
    def crc(self) -> Optional[Crc]:
        """Latest published fingerprint (None before the first snapshot)."""
        return self.state.crc

    @property
    def snapshots(self) -> int:
        return self._snapshots
