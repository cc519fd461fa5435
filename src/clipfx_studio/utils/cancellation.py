"""
Cooperative cancellation for curve operations.

Operations run to completion unless a token is passed and cancelled; the
engine checks it before every examined keyframe.
"""

import logging

from ..core.exceptions import OperationCancelledError

logger = logging.getLogger(__name__)


class CancellationToken:
    """Flag shared between the caller and a running operation."""

    def __init__(self):
        self._cancelled = False
        self.reason = ""

    def cancel(self, reason: str = "Cancelled by user") -> None:
        if not self._cancelled:
            logger.info(f"Cancellation requested: {reason}")
        self._cancelled = True
        self.reason = reason

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    def raise_if_cancelled(self) -> None:
        """
        Raises:
            OperationCancelledError: If cancel() was called
        """
        if self._cancelled:
            raise OperationCancelledError(self.reason or "Operation cancelled")
