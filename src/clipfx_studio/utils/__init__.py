"""Utility modules: logging, progress reporting, cancellation."""

from .cancellation import CancellationToken
from .progress import CallbackProgress, CountingProgress, LoggingProgress, NullProgress, ProgressSink

__all__ = [
    "CancellationToken",
    "ProgressSink",
    "NullProgress",
    "CountingProgress",
    "LoggingProgress",
    "CallbackProgress",
]
