"""
Tests for the record registry.
"""

from dataclasses import dataclass

import pytest

from desync.core.entity import TrackDesync
from desync.core.errors import ConfigurationError
from desync.core.registry import RecordRegistry
from desync.world import World


@dataclass
class Position:
    x: int
    y: int


@dataclass
class Health:
    hp: int


@dataclass
class Velocity:
    dx: int
    dy: int


def test_type_ids_follow_registration_order():
    """Type ids are registration indices."""
    registry = RecordRegistry()
    assert registry.register(Position).type_id == 0
    assert registry.register(Health).type_id == 1
    assert [rt.name for rt in registry.types()] == ["Position", "Health"]


def test_enumerate_present_uses_registration_order():
    """Insertion order on the entity must not matter."""
    registry = RecordRegistry()
    registry.register(Position)
    registry.register(Health)

    world = World()
    a = world.spawn(Health(5), Position(1, 2), TrackDesync())
    b = world.spawn(Position(1, 2), TrackDesync(), Health(5))

    assert registry.enumerate_present(world, a) == registry.enumerate_present(world, b)
    assert [tid for tid, _ in registry.enumerate_present(world, a)] == [0, 1]


def test_enumerate_present_skips_unregistered_and_absent():
    registry = RecordRegistry()
    registry.register(Position)
    registry.register(Health)

    world = World()
    e = world.spawn(Health(3), Velocity(1, 1), TrackDesync())

    assert registry.enumerate_present(world, e) == [(1, b'{"hp":3}')]


def test_register_after_freeze_fails():
    """Registration after the first snapshot is a configuration error."""
    registry = RecordRegistry()
    registry.register(Position)
    registry.freeze()

    with pytest.raises(ConfigurationError, match="frozen"):
        registry.register(Health)
    assert len(registry) == 1


def test_register_twice_fails():
    registry = RecordRegistry()
    registry.register(Position)

    with pytest.raises(ConfigurationError, match="already registered"):
        registry.register(Position)


def test_register_marker_fails():
    registry = RecordRegistry()
    with pytest.raises(ConfigurationError, match="marker"):
        registry.register(TrackDesync)


def test_register_without_encoder_fails():
    """Plain classes need an explicit encoder."""

    class Opaque:
        pass

    registry = RecordRegistry()
    with pytest.raises(ConfigurationError, match="Opaque"):
        registry.register(Opaque)

    registry.register(Opaque, encoder=lambda r: b"opaque")
    assert Opaque in registry


def test_register_non_callable_encoder_fails():
    registry = RecordRegistry()
    with pytest.raises(ConfigurationError, match="not callable"):
        registry.register(Position, encoder=b"nope")
