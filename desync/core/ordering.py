"""
Ordering policies: the canonical sequence of tracked entities for a snapshot.

A policy is any callable (world) -> list[Entity] that returns every tracked
entity exactly once, in an order that is identical on every replica holding
the same logical state.
"""

from typing import Callable, Dict, Hashable, List, Mapping, Sequence

from .entity import Entity
from .errors import OrderingError
from .registry import WorldView

# Policy signature: world -> ordered tracked entities
OrderingPolicy = Callable[[WorldView], List[Entity]]


def sort_entities_ids(world: WorldView) -> List[Entity]:
    """
    Sort tracked entities by their raw identifier.

    Only stable when identifier assignment is itself deterministic across
    replicas. Replicas that spawn the same logical entities in a different
    order will report different fingerprints (false positive).
    """
    return sorted(world.tracked())


class ExternalMapOrdering:
    """
    Order tracked entities by an externally supplied canonical identifier.

    The mapping must be a bijection from local entity to canonical id over the
    tracked set, e.g. ids assigned by a network protocol.

    Usage:
        policy = ExternalMapOrdering({e_local: 7, f_local: 3})
        tracker.set_entity_sort(policy)
    """

    def __init__(self, mapping: Mapping[Entity, Hashable]) -> None:
        self._mapping: Dict[Entity, Hashable] = dict(mapping)

    def __call__(self, world: WorldView) -> List[Entity]:
        tracked = world.tracked()
        missing = [e for e in tracked if e not in self._mapping]
        if missing:
            raise OrderingError(
                f"No canonical id for tracked entities: {sorted(missing)}"
            )

        by_canonical: Dict[Hashable, Entity] = {}
        try:
            for entity in tracked:
                canonical = self._mapping[entity]
                if canonical in by_canonical:
                    raise OrderingError(
                        f"Canonical id {canonical!r} maps to both "
                        f"{by_canonical[canonical]!r} and {entity!r}"
                    )
                by_canonical[canonical] = entity
            order = sorted(by_canonical)
        except TypeError as e:
            raise OrderingError(f"Canonical ids are not mutually orderable and hashable: {e}") from e

        return [by_canonical[c] for c in order]

    def canonical_id(self, entity: Entity) -> Hashable:
        return self._mapping[entity]

    def __len__(self) -> int:
        return len(self._mapping)

    def __repr__(self) -> str:
        return f"ExternalMapOrdering({len(self._mapping)} entries)"


def validate_order(ordered: Sequence[Entity], tracked: Sequence[Entity]) -> None:
    """
    Check that a policy result covers every tracked entity exactly once.

    Raises:
        OrderingError: On duplicates, omissions or untracked entities
    """
    seen = set()
    duplicates = []
    for entity in ordered:
        if entity in seen:
            duplicates.append(entity)
        seen.add(entity)
    if duplicates:
        raise OrderingError(f"Ordering policy returned duplicates: {sorted(set(duplicates))}")

    expected = set(tracked)
    missing = expected - seen
    if missing:
        raise OrderingError(f"Ordering policy omitted tracked entities: {sorted(missing)}")
    extra = seen - expected
    if extra:
        raise OrderingError(f"Ordering policy returned untracked entities: {sorted(extra)}")
