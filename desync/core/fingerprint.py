"""
Fingerprint reduction and the per-run fingerprint state.
"""

import threading
import zlib
from dataclasses import dataclass
from typing import Iterable, Optional


@dataclass(frozen=True)
class Crc:
    """
    Fixed-width fingerprint of tracked state (CRC-32).

    Fields:
        value: Unsigned 32-bit checksum
    """
    value: int

    def hex(self) -> str:
        return f"{self.value:08x}"

    def __str__(self) -> str:
        return self.hex()


def reduce(stream: bytes) -> Crc:
    """
    Fold a canonical stream into a CRC-32.

    zlib's CRC-32 is unseeded and identical on every platform, unlike hash().
    """
    return Crc(zlib.crc32(stream) & 0xFFFFFFFF)


def reduce_chunks(chunks: Iterable[bytes]) -> Crc:
    """Incremental form of reduce(); same result as reduce(b"".join(chunks))."""
    crc = 0
    for chunk in chunks:
        crc = zlib.crc32(chunk, crc)
    return Crc(crc & 0xFFFFFFFF)


class FingerprintState:
    """
    Latest fingerprint of one simulation replica.

    Holds None until the first snapshot, then the most recent digest.
    Previous digests are not retained.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._crc: Optional[Crc] = None

    def publish(self, crc: Crc) -> None:
        """Replace the held digest."""
        with self._lock:
            self._crc = crc

    @property
    def crc(self) -> Optional[Crc]:
        with self._lock:
            return self._crc

    @property
    def initialized(self) -> bool:
        return self.crc is not None
