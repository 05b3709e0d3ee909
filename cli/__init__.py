"""
Desync CLI

Commands:
- desync checksum - Fingerprint a world dump
- desync version - Show version information
"""

__version__ = "0.1.0"
