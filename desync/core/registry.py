"""
Record registry: the record types that participate in fingerprinting.

Type identifiers are registration indices. Every replica must register the
same types in the same order; nothing here depends on class identity, id()
or hash(), which differ between processes.
"""

from dataclasses import dataclass
from typing import Any, List, Optional, Protocol, Tuple

from .canonical import Encoder, default_encoder, encode_record
from .entity import Entity, TrackDesync
from .errors import ConfigurationError


class WorldView(Protocol):
    """Read-only surface of the host data set used during a snapshot."""

    def tracked(self) -> List[Entity]: ...

    def contains(self, entity: Entity, component_type: type) -> bool: ...

    def get(self, entity: Entity, component_type: type) -> Any: ...


@dataclass(frozen=True)
class RecordType:
    """
    Registration metadata for one record type.

    Fields:
        type_id: Registration index (stable across replicas)
        record_type: Python class of the record
        name: Qualified class name, for logs and error messages
        encoder: Canonical encoder for values of this type
    """
    type_id: int
    record_type: type
    name: str
    encoder: Encoder


class RecordRegistry:
    """
    Ordered registry of tracked record types.

    Usage:
        registry = RecordRegistry()
        registry.register(Position)
        registry.register(Inventory, encoder=encode_inventory)
        registry.enumerate_present(world, entity)
    """

    def __init__(self) -> None:
        self._types: List[RecordType] = []
        self._frozen = False

    def register(self, record_type: type, encoder: Optional[Encoder] = None) -> RecordType:
        """
        Register a record type.

        Args:
            record_type: Record class
            encoder: Canonical encoder (default: canonical JSON, requires a
                dataclass or a to_dict() method)

        Returns:
            The new RecordType descriptor

        Raises:
            ConfigurationError: If the registry is frozen, the type is already
                registered, is the tracking marker, or has no usable encoder
        """
        name = record_type.__qualname__
        if self._frozen:
            raise ConfigurationError(
                f"Cannot register {name}: registry is frozen after the first snapshot"
            )
        if record_type is TrackDesync:
            raise ConfigurationError("TrackDesync is a marker, not a record type")
        if any(rt.record_type is record_type for rt in self._types):
            raise ConfigurationError(f"{name} is already registered")
        if encoder is not None and not callable(encoder):
            raise ConfigurationError(f"Encoder for {name} is not callable")

        desc = RecordType(
            type_id=len(self._types),
            record_type=record_type,
            name=name,
            encoder=encoder or default_encoder(record_type),
        )
        self._types.append(desc)
        return desc

    def freeze(self) -> None:
        """Reject further registration. Called on the first snapshot."""
        self._frozen = True

    @property
    def frozen(self) -> bool:
        return self._frozen

    def types(self) -> Tuple[RecordType, ...]:
        """Registered descriptors in registration order."""
        return tuple(self._types)

    def present_types(self, world: WorldView, entity: Entity) -> List[RecordType]:
        """Registered types present on an entity, in registration order."""
        return [rt for rt in self._types if world.contains(entity, rt.record_type)]

    def enumerate_present(self, world: WorldView, entity: Entity) -> List[Tuple[int, bytes]]:
        """
        Encode every registered record present on an entity.

        Returns:
            (type_id, encoded bytes) pairs in registration order

        Raises:
            EncodingError: If a record cannot be canonically serialized
        """
        return [
            (rt.type_id, encode_record(world.get(entity, rt.record_type), rt.encoder))
            for rt in self.present_types(world, entity)
        ]

    def __len__(self) -> int:
        return len(self._types)

    def __contains__(self, record_type: object) -> bool:
        return any(rt.record_type is record_type for rt in self._types)
