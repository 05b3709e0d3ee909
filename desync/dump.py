"""
World dumps: JSON descriptions of tracked state, for offline fingerprinting.

Format:
    {
      "components": ["Position", "Health"],          # registration order
      "entities": [
        {"id": 0, "generation": 0, "tracked": true,
         "components": {"Position": {"x": 1, "y": 2}}}
      ]
    }

Canonical id maps:
    [{"id": 0, "generation": 0, "canonical": 17}, ...]
"""

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Union

from .core.entity import Entity, TrackDesync
from .core.errors import ConfigurationError
from .core.fingerprint import Crc
from .core.ordering import ExternalMapOrdering, OrderingPolicy, sort_entities_ids
from .tracker import DesyncTracker
from .world import World


class DumpComponent:
    """Component loaded from a dump; encodes as its JSON value."""

    __slots__ = ("value",)

    def __init__(self, value: Any) -> None:
        self.value = value

    def to_dict(self) -> Any:
        return self.value


@dataclass
class LoadedDump:
    world: World
    component_types: Dict[str, type]

    def tracker(self, policy: OrderingPolicy = sort_entities_ids) -> DesyncTracker:
        """Tracker with the dump's component types registered in declared order."""
        tracker = DesyncTracker(entity_sort=policy)
        for t in self.component_types.values():
            tracker.track(t)
        return tracker


def _read(source: Union[str, Path, Dict[str, Any], List[Any]]) -> Any:
    if isinstance(source, (dict, list)):
        return source
    with open(source, "r", encoding="utf-8") as f:
        return json.load(f)


def _entity_from(raw: Any, what: str) -> Entity:
    if not isinstance(raw, dict):
        raise ConfigurationError(f"Malformed {what}: {raw!r}")
    try:
        entity = Entity(int(raw["id"]), int(raw.get("generation", 0)))
    except (KeyError, TypeError, ValueError) as e:
        raise ConfigurationError(f"Malformed {what}: {raw!r}") from e
    if entity.index < 0 or entity.generation < 0:
        raise ConfigurationError(f"Negative id or generation in {what}: {raw!r}")
    return entity


def load_world(source: Union[str, Path, Dict[str, Any]]) -> LoadedDump:
    """
    Build a World from a dump.

    Raises:
        ConfigurationError: On malformed dumps or undeclared component names
    """
    data = _read(source)
    if not isinstance(data, dict):
        raise ConfigurationError(f"World dump must be a JSON object, got {type(data).__name__}")
    names = data.get("components", [])
    if not isinstance(names, list) or not all(isinstance(n, str) for n in names):
        raise ConfigurationError("'components' must be a list of strings")
    if len(set(names)) != len(names):
        raise ConfigurationError("Duplicate component names in dump")
    entities = data.get("entities", [])
    if not isinstance(entities, list):
        raise ConfigurationError("'entities' must be a list")

    # One distinct class per name so each gets its own registry slot
    types: Dict[str, type] = {
        name: type(name, (DumpComponent,), {"__slots__": ()}) for name in names
    }

    world = World()
    for raw in entities:
        entity = _entity_from(raw, "entity entry")
        components = raw.get("components", {})
        if not isinstance(components, dict):
            raise ConfigurationError(f"'components' of entity {raw['id']!r} must be an object")
        try:
            world.spawn_at(entity)
        except ValueError as e:
            raise ConfigurationError(str(e)) from e
        if raw.get("tracked", True):
            world.insert(entity, TrackDesync())
        for name, value in components.items():
            if name not in types:
                raise ConfigurationError(f"Component {name!r} is not declared in 'components'")
            world.insert(entity, types[name](value))

    return LoadedDump(world=world, component_types=types)


def load_id_map(source: Union[str, Path, List[Dict[str, Any]]]) -> ExternalMapOrdering:
    """
    Build an ExternalMapOrdering from a canonical id map.

    Raises:
        ConfigurationError: On malformed entries
    """
    data = _read(source)
    if not isinstance(data, list):
        raise ConfigurationError(f"Id map must be a JSON list, got {type(data).__name__}")
    mapping: Dict[Entity, Any] = {}
    for raw in data:
        entity = _entity_from(raw, "id map entry")
        if "canonical" not in raw:
            raise ConfigurationError(f"Malformed id map entry: {raw!r}")
        mapping[entity] = raw["canonical"]
    return ExternalMapOrdering(mapping)


def checksum_dump(
    world_source: Union[str, Path, Dict[str, Any]],
    id_map_source: Union[str, Path, List[Dict[str, Any]], None] = None,
) -> Crc:
    """Fingerprint a dump with the id-sort policy, or the external map when given."""
    dump = load_world(world_source)
    policy = load_id_map(id_map_source) if id_map_source is not None else sort_entities_ids
    return dump.tracker(policy).calculate_crc(dump.world)
