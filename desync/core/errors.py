"""
Exception types for desync fingerprinting.
"""


class DesyncError(Exception):
    """Base class for fingerprinting failures."""
    pass


class ConfigurationError(DesyncError):
    """Raised when the tracker is configured in a way that breaks cross-replica comparability."""
    pass


class OrderingError(ConfigurationError):
    """Raised when an ordering policy returns a malformed entity sequence."""
    pass


class EncodingError(DesyncError):
    """Raised when a record cannot be canonically serialized."""
    pass
