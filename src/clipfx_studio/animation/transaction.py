"""
Transaktionale Curve-Edits mit Command Pattern

Optional atomic apply for operations that write into many parameters. Each
parameter touched inside a CurveTransaction is snapshotted by a Command
before its first write; a rollback undoes the commands in reverse order.

Without a transaction (the default) nothing is restored: writes committed
before an error stay in place.

Verwendung:
    >>> with CurveTransaction() as txn:
    ...     txn.track(param)
    ...     param.set_value_at_time(t, value)
    ...     raise SomeError()   # param is restored, error propagates
"""

import logging
from abc import ABC, abstractmethod
from typing import Any

from ..host.protocols import AnimatedParameter, Keyframe
from ..timing import ZERO

logger = logging.getLogger(__name__)


class Command(ABC):
    """
    Abstract Base Class für Commands.

    execute() captures or applies, undo() reverts.
    """

    @abstractmethod
    def execute(self):
        """Führt Command aus."""
        pass

    @abstractmethod
    def undo(self):
        """Macht Command rückgängig."""
        pass

    def get_description(self) -> str:
        """Human-readable Beschreibung des Commands."""
        return self.__class__.__name__


class ParameterSnapshotCommand(Command):
    """
    Captures a parameter's animation state; undo restores it.

    Only uses the AnimatedParameter contract, so it works on any host.
    """

    def __init__(self, parameter: AnimatedParameter):
        self.parameter = parameter
        self._was_animated = False
        self._static: Any = None
        self._keyframes: list[Keyframe] = []

    def execute(self):
        parameter = self.parameter
        self._was_animated = parameter.is_animated
        self._static = parameter.get_value_at_time(ZERO)
        self._keyframes = list(parameter.keyframes) if self._was_animated else []

    def undo(self):
        parameter = self.parameter
        parameter.is_animated = False
        parameter.set_value_at_time(ZERO, self._static)
        if self._was_animated:
            parameter.is_animated = True
            for keyframe in self._keyframes:
                parameter.set_value_at_time(keyframe.time, keyframe.value)

    def get_description(self) -> str:
        return f"Snapshot {self.parameter.name}"


class CurveTransaction:
    """
    Gruppiert Parameter-Snapshots zu einer atomaren Operation.

    Args:
        enabled: False turns tracking and rollback into no-ops
        description: Beschreibung für Logs
    """

    def __init__(self, enabled: bool = True, description: str = "Curve edit"):
        self.enabled = enabled
        self.description = description
        self.commands: list[ParameterSnapshotCommand] = []
        self._tracked: set[int] = set()

    def track(self, parameter: AnimatedParameter) -> None:
        """Snapshot `parameter` unless it is already tracked."""
        if not self.enabled or id(parameter) in self._tracked:
            return
        command = ParameterSnapshotCommand(parameter)
        command.execute()
        self.commands.append(command)
        self._tracked.add(id(parameter))

    def rollback(self) -> int:
        """
        Macht alle Snapshots rückgängig (in umgekehrter Reihenfolge).

        Returns:
            Anzahl wiederhergestellter Parameter
        """
        restored = 0
        for command in reversed(self.commands):
            command.undo()
            restored += 1
        if restored:
            logger.info(f"Rollback '{self.description}': {restored} Parameter wiederhergestellt")
        self.commit()
        return restored

    def commit(self) -> None:
        """Verwirft alle Snapshots."""
        self.commands.clear()
        self._tracked.clear()

    def get_description(self) -> str:
        return f"{self.description} ({len(self.commands)} parameters)"

    def __enter__(self) -> "CurveTransaction":
        return self

    def __exit__(self, exc_type, exc, tb) -> bool:
        if exc_type is None:
            self.commit()
        else:
            logger.warning(f"'{self.description}' fehlgeschlagen: {exc}")
            self.rollback()
        return False
