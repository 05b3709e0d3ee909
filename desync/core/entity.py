"""
Entity identifiers and the tracking marker.
"""

from dataclasses import dataclass


@dataclass(frozen=True, order=True)
class Entity:
    """
    Opaque entity identifier.

    Fields:
        index: Slot index assigned by the world
        generation: Bumped each time a slot is reused

    Ordering is (index, generation), which is what the default
    ordering policy sorts by.
    """
    index: int
    generation: int = 0

    def bits(self) -> int:
        """Pack into a single integer (generation in the high 32 bits)."""
        return (self.generation << 32) | self.index

    def __repr__(self) -> str:
        return f"{self.index}v{self.generation}"


class TrackDesync:
    """
    Zero-size marker. Only entities carrying it contribute to the fingerprint.
    """

    __slots__ = ()

    def __eq__(self, other: object) -> bool:
        return isinstance(other, TrackDesync)

    def __hash__(self) -> int:
        return 0

    def __repr__(self) -> str:
        return "TrackDesync"
