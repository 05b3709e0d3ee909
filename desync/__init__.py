"""
Desync Detection

Deterministic state fingerprinting for lockstep simulations: canonical record
encoding, pluggable entity ordering and a per-tick CRC that replicas can compare.
"""

__version__ = "0.1.0"
