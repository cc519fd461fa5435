"""
Host Protocols für ClipFX Studio

Defines the interface the animation core consumes from an editing host.
The core never creates clips, effects or parameters; it only looks them up
and writes keyframes into parameters that already exist.

Dieses Protocol ermöglicht:
- Austauschbare Hosts (reference in-memory host, embedded editor bindings)
- Bessere Testbarkeit durch Mock-Implementierungen
- Type Safety mit Protocol statt ABC

Usage:
    def scale_of(effect: EffectLike) -> AnimatedParameter | None:
        return effect.find_parameter("Scale", ParameterKind.SCALAR)
"""

from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from enum import Enum
from typing import Any, Protocol, runtime_checkable

from ..timing import Timecode


class ParameterKind(Enum):
    """Closed set of parameter kinds a host can expose."""

    SCALAR = "scalar"
    VECTOR2 = "vector2"
    BOOLEAN = "boolean"
    STRING = "string"
    CHOICE = "choice"


class ClipKind(Enum):
    """Media type of a clip (and of the track holding it)."""

    VIDEO = "video"
    AUDIO = "audio"


@dataclass(frozen=True)
class Point2D:
    """2D parameter value (pixels or normalized units)."""

    x: float
    y: float

    def scaled(self, sx: float, sy: float) -> "Point2D":
        return Point2D(self.x * sx, self.y * sy)

    def __iter__(self):
        yield self.x
        yield self.y


@dataclass(frozen=True)
class Keyframe:
    """One (time, value) sample of an animation curve."""

    time: Timecode
    value: Any


@runtime_checkable
class AnimatedParameter(Protocol):
    """
    Parameter that is either static or driven by keyframes.

    set_value_at_time creates or overwrites the keyframe at `time` while
    animated, and replaces the single static value otherwise.
    """

    name: str
    kind: ParameterKind

    @property
    def is_animated(self) -> bool: ...

    @is_animated.setter
    def is_animated(self, value: bool) -> None: ...

    @property
    def keyframes(self) -> Sequence[Keyframe]:
        """Keyframes ordered by time (empty while static)."""
        ...

    def get_value_at_time(self, time: Timecode) -> Any: ...

    def set_value_at_time(self, time: Timecode, value: Any) -> None: ...


@runtime_checkable
class ChoiceParameterLike(AnimatedParameter, Protocol):
    """Discrete-choice parameter with an enumerated option list."""

    @property
    def choices(self) -> Sequence[str]: ...


@runtime_checkable
class EffectLike(Protocol):
    """Effect (or generator) applied to a clip."""

    name: str
    plugin_uid: str

    @property
    def parameters(self) -> Mapping[str, AnimatedParameter]:
        """Parameters by case-sensitive name, in host order."""
        ...

    def find_parameter(
        self, name: str, kind: ParameterKind | None = None
    ) -> AnimatedParameter | None:
        """
        Look up a parameter by name.

        Returns None if the name is absent or the parameter is not of `kind`.
        """
        ...


@runtime_checkable
class ClipLike(Protocol):
    """Placed media instance on a track."""

    name: str
    start: Timecode
    length: Timecode
    kind: ClipKind
    selected: bool

    @property
    def effects(self) -> Sequence[EffectLike]:
        """Effect chain in applied order."""
        ...

    @property
    def generator(self) -> EffectLike | None:
        """Media generator of the active take, None for file-based media."""
        ...


@runtime_checkable
class ClipClassifier(Protocol):
    """
    Opaque oracle deciding what a clip or effect is.

    Keeps host naming schemes (plug-in names, unique IDs) out of the core.
    """

    def is_text_clip(self, clip: ClipLike) -> bool: ...

    def is_pip_effect(self, effect: EffectLike) -> bool: ...

    def is_tracking_source(self, effect: EffectLike) -> bool: ...
