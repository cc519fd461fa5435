"""
Progress reporting for long-running curve operations.

The engines only ever push into a ProgressSink; they never read from it, so a
sink can redraw a UI, log, or do nothing without affecting the result.

Usage:
    progress = LoggingProgress()
    engine = TransferEngine(time_base, progress=progress)
    engine.transfer(sources, targets)
"""

import logging
from collections.abc import Callable
from typing import Protocol, runtime_checkable

logger = logging.getLogger(__name__)


@runtime_checkable
class ProgressSink(Protocol):
    """Fire-and-forget progress receiver."""

    def set_max(self, maximum: int) -> None:
        """Setzt die Gesamtzahl der Schritte (<= 0 wird als 1 behandelt)."""
        ...

    def increment(self) -> None:
        """Meldet einen abgeschlossenen Schritt."""
        ...

    def set_status(self, text: str) -> None:
        """Setzt den Statustext."""
        ...

    def complete(self, text: str = "Done") -> None:
        """Markiert den Vorgang als abgeschlossen."""
        ...


class NullProgress:
    """ProgressSink that discards everything."""

    def set_max(self, maximum: int) -> None:
        pass

    def increment(self) -> None:
        pass

    def set_status(self, text: str) -> None:
        pass

    def complete(self, text: str = "Done") -> None:
        pass


class CountingProgress:
    """
    ProgressSink that keeps value, maximum and status in memory.

    Base for the logging and callback sinks. The value is capped at the
    maximum, like a progress bar would be.
    """

    def __init__(self):
        self.maximum = 1
        self.value = 0
        self.steps = 0
        self.status = ""
        self.completed = False

    def set_max(self, maximum: int) -> None:
        self.maximum = maximum if maximum > 0 else 1
        self.value = 0
        self.steps = 0
        self.completed = False

    def increment(self) -> None:
        self.steps += 1
        if self.value < self.maximum:
            self.value += 1

    def set_status(self, text: str) -> None:
        self.status = text

    def complete(self, text: str = "Done") -> None:
        self.status = text
        self.value = self.maximum
        self.completed = True

    @property
    def fraction(self) -> float:
        return self.value / self.maximum


class LoggingProgress(CountingProgress):
    """Logs status changes and every `log_every` percent of progress."""

    def __init__(self, log_every: int = 10, log: logging.Logger | None = None):
        super().__init__()
        self.log_every = max(1, log_every)
        self._log = log or logger
        self._last_logged = -1

    def set_max(self, maximum: int) -> None:
        super().set_max(maximum)
        self._last_logged = -1
        self._log.debug(f"Progress: {self.maximum} Schritte")

    def increment(self) -> None:
        super().increment()
        percent = int(self.fraction * 100)
        bucket = percent // self.log_every
        if bucket != self._last_logged:
            self._last_logged = bucket
            self._log.debug(f"Progress: {percent}% ({self.value}/{self.maximum})")

    def set_status(self, text: str) -> None:
        super().set_status(text)
        self._log.info(text)

    def complete(self, text: str = "Done") -> None:
        super().complete(text)
        self._log.info(f"{text} ({self.steps} Schritte)")


class CallbackProgress(CountingProgress):
    """
    Forwards progress as a fraction (0.0-1.0) to a callback.

    Matches the progress_callback(progress_0_to_1) convention used by the
    analysis pipelines.
    """

    def __init__(self, callback: Callable[[float], None]):
        super().__init__()
        self.callback = callback

    def increment(self) -> None:
        super().increment()
        self.callback(self.fraction)

    def complete(self, text: str = "Done") -> None:
        super().complete(text)
        self.callback(1.0)
