"""
Minimal host runtime: a world, staged systems and the desync plugin.

A tick runs the FIRST, UPDATE and LAST stages in order. DesyncPlugin puts
update_crc in FIRST, so each tick fingerprints the state left by the
previous tick before any system mutates it.
"""

from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional, Type, TypeVar

from .config import DesyncConfig
from .core.canonical import Encoder
from .core.entity import Entity
from .core.ordering import OrderingPolicy, sort_entities_ids
from .core.registry import RecordRegistry, RecordType
from .tracker import DesyncTracker
from .world import World

T = TypeVar("T")

# System signature: world -> None
System = Callable[[World], Any]

FIRST = "first"
UPDATE = "update"
LAST = "last"
STAGES = (FIRST, UPDATE, LAST)


class App:
    """
    Usage:
        app = App()
        app.add_plugins(DesyncPlugin())
        track_desync(app, Position)
        app.world.spawn(Position(0, 0), TrackDesync())
        app.update()
    """

    def __init__(self, name: Optional[str] = None) -> None:
        self.name = name
        self.world = World()
        self.tick = 0
        self._systems: Dict[str, List[System]] = {stage: [] for stage in STAGES}
        self._resources: Dict[type, Any] = {}

    def add_plugins(self, *plugins: "Plugin") -> "App":
        for plugin in plugins:
            plugin.build(self)
        return self

    def add_systems(self, stage: str, *systems: System) -> "App":
        if stage not in self._systems:
            raise ValueError(f"Unknown stage: {stage}")
        self._systems[stage].extend(systems)
        return self

    def insert_resource(self, resource: Any) -> "App":
        self._resources[type(resource)] = resource
        return self

    def resource(self, resource_type: Type[T]) -> T:
        try:
            return self._resources[resource_type]
        except KeyError:
            raise KeyError(f"Resource {resource_type.__qualname__} not inserted") from None

    def has_resource(self, resource_type: type) -> bool:
        return resource_type in self._resources

    def update(self) -> None:
        """Run one tick."""
        for stage in STAGES:
            for system in self._systems[stage]:
                system(self.world)
        self.tick += 1


class Plugin:
    def build(self, app: App) -> None:
        raise NotImplementedError


@dataclass
class DesyncPlugin(Plugin):
    """
    Installs a DesyncTracker resource on the app.

    Fields:
        add_system: Add update_crc to the FIRST stage. Set to False to
            schedule tracker.update_crc yourself (None reads DESYNC_ADD_SYSTEM)
        entity_sort: Ordering policy. The default sorts by entity id, which
            reports false positives when replicas allocate ids differently
    """
    add_system: Optional[bool] = None
    entity_sort: OrderingPolicy = sort_entities_ids

    def build(self, app: App) -> None:
        add_system = self.add_system
        if add_system is None:
            add_system = DesyncConfig.from_env().add_system
        tracker = DesyncTracker(entity_sort=self.entity_sort, name=app.name)
        app.insert_resource(tracker)
        if add_system:
            app.add_systems(FIRST, tracker.update_crc)


def track_desync(app: App, record_type: type, encoder: Optional[Encoder] = None) -> RecordType:
    """Register a record type on the app's tracker."""
    return app.resource(DesyncTracker).track(record_type, encoder)


def get_tracked_components(world: World, entity: Entity, registry: RecordRegistry) -> List[RecordType]:
    """Registered record types present on an entity, in registration order."""
    return registry.present_types(world, entity)
