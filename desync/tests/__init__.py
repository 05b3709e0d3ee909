"""
Test suite for desync fingerprinting.

Focus areas:
- Canonical encoding determinism
- Registry ordering and freeze
- Ordering policies
- Snapshot framing
- Cross-replica scenarios
"""
