"""
Core module for ClipFX Studio.

Contains fundamental components like configuration, exceptions, and constants.
"""

from .exceptions import (
    AmbiguousSourceError,
    # Base
    ClipFXError,
    # Configuration
    ConfigurationError,
    DocumentError,
    # Host
    HostError,
    InvalidFrameRateError,
    MissingParameterError,
    NoTargetError,
    NoTrackingSourceError,
    OperationCancelledError,
    # Preconditions
    PreconditionError,
    # Utility
    handle_errors,
    safe_cleanup,
    wrap_exception,
)

__all__ = [
    # Base
    "ClipFXError",
    # Configuration
    "ConfigurationError",
    "InvalidFrameRateError",
    # Host
    "HostError",
    "MissingParameterError",
    "DocumentError",
    # Preconditions
    "PreconditionError",
    "NoTrackingSourceError",
    "NoTargetError",
    "AmbiguousSourceError",
    "OperationCancelledError",
    # Utility
    "wrap_exception",
    "handle_errors",
    "safe_cleanup",
]
