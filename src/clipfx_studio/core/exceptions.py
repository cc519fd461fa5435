"""
Custom Exceptions für ClipFX Studio.

Hierarchie:
    ClipFXError (Base)
    ├── ConfigurationError
    │   └── InvalidFrameRateError
    ├── HostError
    │   ├── MissingParameterError
    │   └── DocumentError
    ├── PreconditionError
    │   ├── NoTrackingSourceError
    │   ├── NoTargetError
    │   └── AmbiguousSourceError
    └── OperationCancelledError
"""

import logging
from collections.abc import Callable
from functools import wraps
from typing import Any, TypeVar


class ClipFXError(Exception):
    """
    Base exception für alle ClipFX Fehler.

    Alle custom exceptions erben von dieser Klasse.
    Ermöglicht spezifisches Exception-Handling für die Anwendung.
    """

    def __init__(self, message: str = "", details: dict = None):
        """
        Initialize exception with message and optional details.

        Args:
            message: Human-readable error message
            details: Optional dict with additional context
        """
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        if self.details:
            return f"{self.message} | Details: {self.details}"
        return self.message


# =============================================================================
# Configuration Errors
# =============================================================================


class ConfigurationError(ClipFXError):
    """
    Konfigurations-Fehler.

    Raised when:
    - Config value cannot be parsed
    - Pop curve offsets are negative
    - Unknown rounding mode
    """

    pass


class InvalidFrameRateError(ConfigurationError):
    """
    Ungültige Framerate.

    A zero, negative or non-finite frame rate is a caller precondition
    violation. It is reported, never recovered.
    """

    def __init__(self, frame_rate: float = None, **kwargs):
        message = f"Frame rate must be a positive finite number, got {frame_rate!r}"
        super().__init__(message, details={"frame_rate": frame_rate, **kwargs})


# =============================================================================
# Host Errors
# =============================================================================


class HostError(ClipFXError):
    """
    Host-bezogene Fehler.

    Base class for errors raised while reading or writing the host project graph.
    """

    pass


class MissingParameterError(HostError):
    """
    Parameter nicht gefunden.

    Raised when a required parameter is absent on an effect, or present with
    a different kind than requested.
    """

    def __init__(self, parameter: str = None, effect: str = None, **kwargs):
        message = "Parameter not found"
        if parameter:
            message = f"Parameter '{parameter}' not found or not a 2D parameter"
        if effect:
            message += f" on effect '{effect}'"
        super().__init__(message, details={"parameter": parameter, "effect": effect, **kwargs})


class DocumentError(HostError):
    """
    Projekt-Dokument Fehler.

    Raised when:
    - Project document file is missing or unreadable
    - Project document fails validation
    """

    pass


# =============================================================================
# Precondition Errors
# =============================================================================


class PreconditionError(ClipFXError):
    """
    Vorbedingung nicht erfüllt.

    Fatal for the whole operation. Writes already applied are not rolled back
    unless the operation runs transactionally.
    """

    pass


class NoTrackingSourceError(PreconditionError):
    """Raised when no tracking source curve exists among the selected clips."""

    def __init__(self, message: str = "No tracking source found among the selected clips.", **kwargs):
        super().__init__(message, details=kwargs)


class NoTargetError(PreconditionError):
    """Raised when no usable destination exists among the selected clips."""

    def __init__(
        self, message: str = "No Picture in Picture effects found on the selected clips.", **kwargs
    ):
        super().__init__(message, details=kwargs)


class AmbiguousSourceError(PreconditionError):
    """Raised in single-source mode when more than one tracking source is selected."""

    def __init__(self, count: int = None, **kwargs):
        message = "Exactly one tracking source must be selected"
        if count is not None:
            message += f", found {count}"
        super().__init__(message, details={"count": count, **kwargs})


class OperationCancelledError(ClipFXError):
    """Raised when a CancellationToken is triggered during an operation."""

    pass


# =============================================================================
# Utility Functions
# =============================================================================


def wrap_exception(original: Exception, wrapper_class: type) -> ClipFXError:
    """
    Wrap a standard exception in a ClipFX exception.

    Args:
        original: The original exception
        wrapper_class: The ClipFX exception class to use

    Returns:
        Wrapped ClipFXError instance

    Example:
        try:
            load()
        except ValidationError as e:
            raise wrap_exception(e, DocumentError) from e
    """
    return wrapper_class(
        message=str(original),
        details={
            "original_type": type(original).__name__,
            "original_args": original.args,
        },
    )


T = TypeVar("T")


def handle_errors(
    default_return: Any = None,
    log_level: int = logging.ERROR,
    reraise: bool = False,
    wrap_as: type = None,
) -> Callable:
    """
    Decorator für einheitliches Error Handling.

    Args:
        default_return: Rückgabewert bei Fehler (default: None)
        log_level: Log-Level für Fehler (default: ERROR)
        reraise: Ob Exception nach Logging erneut geworfen werden soll
        wrap_as: Optional: Wrapper-Klasse für Exception

    Example:
        @handle_errors(default_return=None, log_level=logging.DEBUG)
        def decode(text):
            return decoder(text)
    """

    def decorator(func: Callable[..., T]) -> Callable[..., T]:
        @wraps(func)
        def wrapper(*args, **kwargs) -> T:
            logger = logging.getLogger(func.__module__)
            try:
                return func(*args, **kwargs)
            except ClipFXError:
                logger.log(log_level, f"{func.__name__} failed", exc_info=True)
                if reraise:
                    raise
                return default_return
            except Exception as e:
                logger.log(
                    log_level, f"{func.__name__} failed: {type(e).__name__}: {e}", exc_info=True
                )
                if wrap_as:
                    wrapped = wrap_exception(e, wrap_as)
                    if reraise:
                        raise wrapped from e
                elif reraise:
                    raise
                return default_return

        return wrapper

    return decorator


def safe_cleanup(func: Callable) -> Callable:
    """
    Decorator für sichere Cleanup-Operationen.

    Fängt alle Exceptions ab und loggt sie, wirft aber nie.
    Used for progress sinks reporting an error state after a failed operation.
    """

    @wraps(func)
    def wrapper(*args, **kwargs):
        logger = logging.getLogger(func.__module__)
        try:
            return func(*args, **kwargs)
        except Exception as e:
            logger.warning(f"Cleanup in {func.__name__} failed (ignored): {e}")
            return None

    return wrapper
