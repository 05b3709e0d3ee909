"""
In-memory entity-component store.

This is the reference host data set the tracker observes. Slot indices are
reused after despawn with a bumped generation, so identifiers depend on the
history of spawns and despawns, not only on the logical content.
"""

from typing import Any, Dict, Iterator, List, Optional, Type, TypeVar

from .core.entity import Entity, TrackDesync

T = TypeVar("T")


class World:
    """
    Entity-component storage.

    Usage:
        world = World()
        e = world.spawn(Position(0, 0), TrackDesync())
        world.get(e, Position)
    """

    def __init__(self) -> None:
        self._components: Dict[Entity, Dict[type, Any]] = {}
        self._generations: List[int] = []
        self._free: List[int] = []

    def spawn(self, *components: Any) -> Entity:
        """
        Allocate an entity and attach components.

        Freed slots are reused most-recently-freed first.
        """
        if self._free:
            index = self._free.pop()
            self._generations[index] += 1
        else:
            index = len(self._generations)
            self._generations.append(0)
        entity = Entity(index, self._generations[index])
        self._components[entity] = {}
        for component in components:
            self.insert(entity, component)
        return entity

    def spawn_at(self, entity: Entity, *components: Any) -> Entity:
        """
        Recreate an entity with a fixed identifier (used when loading dumps).

        Raises:
            ValueError: If the slot is occupied or the id is negative
        """
        if entity.index < 0 or entity.generation < 0:
            raise ValueError(f"Invalid entity id {entity!r}")
        for live in self._components:
            if live.index == entity.index:
                raise ValueError(f"Slot {entity.index} is occupied by {live!r}")
        while len(self._generations) <= entity.index:
            # Gap slots start at -1 so their first use is generation 0
            self._free.append(len(self._generations))
            self._generations.append(-1)
        if entity.index in self._free:
            self._free.remove(entity.index)
        self._generations[entity.index] = entity.generation
        self._components[entity] = {}
        for component in components:
            self.insert(entity, component)
        return entity

    def despawn(self, entity: Entity) -> bool:
        """Remove an entity and all its components. Returns False if it did not exist."""
        if self._components.pop(entity, None) is None:
            return False
        self._free.append(entity.index)
        return True

    def insert(self, entity: Entity, component: Any) -> None:
        """Attach or replace the component of the value's type."""
        self._require(entity)[type(component)] = component

    def remove(self, entity: Entity, component_type: Type[T]) -> Optional[T]:
        """Detach a component by type, returning it (None if absent)."""
        return self._require(entity).pop(component_type, None)

    def get(self, entity: Entity, component_type: Type[T]) -> Optional[T]:
        return self._require(entity).get(component_type)

    def contains(self, entity: Entity, component_type: type) -> bool:
        return component_type in self._require(entity)

    def component_types(self, entity: Entity) -> List[type]:
        """Component types attached to an entity (no stable order promised)."""
        return list(self._require(entity).keys())

    def is_alive(self, entity: Entity) -> bool:
        return entity in self._components

    def entities(self) -> Iterator[Entity]:
        """Iterate live entities (no stable order promised)."""
        return iter(list(self._components.keys()))

    def tracked(self) -> List[Entity]:
        """Live entities carrying the TrackDesync marker (no stable order promised)."""
        return [e for e, comps in self._components.items() if TrackDesync in comps]

    def __len__(self) -> int:
        return len(self._components)

    def _require(self, entity: Entity) -> Dict[type, Any]:
        try:
            return self._components[entity]
        except KeyError:
            raise KeyError(f"Entity {entity!r} does not exist") from None
