"""breezybridge exception hierarchy.

All exceptions can be imported from this package:
    from breezybridge.exceptions import BridgeError, ErrorKind, NotFoundError
"""

from __future__ import annotations

# Base types
from breezybridge.exceptions.base import BridgeError, ErrorKind, ErrorRecord

# Per-kind exceptions
from breezybridge.exceptions.bridge import (
    AlreadyExistsError,
    ConflictError,
    FormatIncompatibleError,
    GenericError,
    InitializationError,
    NotFoundError,
    PermissionDeniedError,
    TransportError,
    error_class_for,
    error_for_record,
)

# Configuration exceptions
from breezybridge.exceptions.config import ConfigError

__all__ = [
    # Base
    "BridgeError",
    "ErrorKind",
    "ErrorRecord",
    # Kinds
    "AlreadyExistsError",
    "ConflictError",
    "FormatIncompatibleError",
    "GenericError",
    "InitializationError",
    "NotFoundError",
    "PermissionDeniedError",
    "TransportError",
    "error_class_for",
    "error_for_record",
    # Config
    "ConfigError",
]
