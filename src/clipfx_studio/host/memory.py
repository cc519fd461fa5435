"""
Reference in-memory host for ClipFX Studio.

A small object graph (Project -> Track -> Clip -> Effect -> Parameter) that
implements the host protocols. It backs the JSON project documents, the CLI
and the test-suite; an embedded editor binding would replace it with thin
wrappers around the editor's own objects.

Host behavior modeled here:
- Enabling animation on a static parameter starts with an empty curve; the
  static value stays as fallback until the first keyframe is written.
- Disabling animation drops every keyframe and keeps the value at time zero
  as the new static value.
- Animated scalar and 2D values are linearly interpolated between
  keyframes, other kinds hold the previous keyframe.
"""

import bisect
from collections.abc import Iterable, Iterator, Sequence
from dataclasses import dataclass, field
from typing import Any, ClassVar

import numpy as np

from ..timing import ZERO, ClipWindow, RoundingMode, TimeBase, Timecode
from .protocols import ClipKind, Keyframe, ParameterKind, Point2D


class Parameter:
    """
    Base class for in-memory parameters.

    Subclasses fix `kind`, the default value and how raw values are coerced.
    """

    kind: ClassVar[ParameterKind]
    default: ClassVar[Any] = None
    interpolates: ClassVar[bool] = False

    def __init__(self, name: str, value: Any = None):
        self.name = name
        self._value = self.coerce(self.default if value is None else value)
        self._animated = False
        self._curve: dict[Timecode, Any] = {}

    def coerce(self, value: Any) -> Any:
        return value

    @property
    def is_animated(self) -> bool:
        return self._animated

    @is_animated.setter
    def is_animated(self, value: bool) -> None:
        value = bool(value)
        if value == self._animated:
            return
        if not value:
            self._value = self.get_value_at_time(ZERO)
            self._curve.clear()
        self._animated = value

    @property
    def value(self) -> Any:
        """Static value (fallback while the curve is empty)."""
        return self._value

    @value.setter
    def value(self, value: Any) -> None:
        self._value = self.coerce(value)

    @property
    def keyframes(self) -> list[Keyframe]:
        return [Keyframe(time, self._curve[time]) for time in sorted(self._curve)]

    def get_value_at_time(self, time: Timecode) -> Any:
        if not self._animated or not self._curve:
            return self._value
        if time in self._curve:
            return self._curve[time]

        times = sorted(self._curve)
        if self.interpolates:
            return self._interpolate(times, time)

        index = bisect.bisect_right(times, time) - 1
        return self._curve[times[max(index, 0)]]

    def _interpolate(self, times: list[Timecode], time: Timecode) -> Any:
        raise NotImplementedError

    def set_value_at_time(self, time: Timecode, value: Any) -> None:
        value = self.coerce(value)
        if self._animated:
            self._curve[time] = value
        else:
            self._value = value

    def __repr__(self) -> str:
        state = f"{len(self._curve)} keyframes" if self._animated else f"value={self._value!r}"
        return f"{type(self).__name__}(name={self.name!r}, {state})"


class ScalarParameter(Parameter):
    kind = ParameterKind.SCALAR
    default = 0.0
    interpolates = True

    def coerce(self, value: Any) -> float:
        return float(value)

    def _interpolate(self, times: list[Timecode], time: Timecode) -> float:
        xs = [t.milliseconds for t in times]
        ys = [self._curve[t] for t in times]
        return float(np.interp(time.milliseconds, xs, ys))


class Vector2Parameter(Parameter):
    kind = ParameterKind.VECTOR2
    default = Point2D(0.0, 0.0)
    interpolates = True

    def coerce(self, value: Any) -> Point2D:
        if isinstance(value, Point2D):
            return value
        x, y = value
        return Point2D(float(x), float(y))

    def _interpolate(self, times: list[Timecode], time: Timecode) -> Point2D:
        xs = [t.milliseconds for t in times]
        points = [self._curve[t] for t in times]
        return Point2D(
            float(np.interp(time.milliseconds, xs, [p.x for p in points])),
            float(np.interp(time.milliseconds, xs, [p.y for p in points])),
        )


class BooleanParameter(Parameter):
    kind = ParameterKind.BOOLEAN
    default = False

    def coerce(self, value: Any) -> bool:
        return bool(value)


class StringParameter(Parameter):
    kind = ParameterKind.STRING
    default = ""

    def coerce(self, value: Any) -> str:
        return str(value)


class ChoiceParameter(Parameter):
    """
    Discrete choice; values are option labels.

    Integers are accepted as option indices.
    """

    kind = ParameterKind.CHOICE

    def __init__(self, name: str, choices: Sequence[str], value: Any = None):
        self.name = name
        self._choices = tuple(choices)
        if not self._choices:
            raise ValueError(f"Choice parameter '{name}' needs at least one option")
        super().__init__(name, self._choices[0] if value is None else value)

    @property
    def choices(self) -> tuple[str, ...]:
        return self._choices

    def coerce(self, value: Any) -> str:
        if isinstance(value, int) and not isinstance(value, bool):
            return self._choices[value]
        if value not in self._choices:
            raise ValueError(f"'{value}' is not an option of '{self.name}': {self._choices}")
        return value


PARAMETER_TYPES: dict[ParameterKind, type[Parameter]] = {
    ParameterKind.SCALAR: ScalarParameter,
    ParameterKind.VECTOR2: Vector2Parameter,
    ParameterKind.BOOLEAN: BooleanParameter,
    ParameterKind.STRING: StringParameter,
    ParameterKind.CHOICE: ChoiceParameter,
}


def make_parameter(
    kind: ParameterKind, name: str, value: Any = None, choices: Sequence[str] = ()
) -> Parameter:
    """Create a parameter of `kind`."""
    if kind is ParameterKind.CHOICE:
        return ChoiceParameter(name, choices, value)
    return PARAMETER_TYPES[kind](name, value)


class Effect:
    """Effect or media generator with an ordered parameter set."""

    def __init__(self, name: str, plugin_uid: str = "", parameters: Iterable[Parameter] = ()):
        self.name = name
        self.plugin_uid = plugin_uid
        self._parameters: dict[str, Parameter] = {}
        for parameter in parameters:
            self.add_parameter(parameter)

    @property
    def parameters(self) -> dict[str, Parameter]:
        return self._parameters

    def add_parameter(self, parameter: Parameter) -> Parameter:
        if parameter.name in self._parameters:
            raise ValueError(f"Effect '{self.name}' already has a parameter '{parameter.name}'")
        self._parameters[parameter.name] = parameter
        return parameter

    def find_parameter(self, name: str, kind: ParameterKind | None = None) -> Parameter | None:
        parameter = self._parameters.get(name)
        if parameter is None:
            return None
        if kind is not None and parameter.kind is not kind:
            return None
        return parameter

    def __repr__(self) -> str:
        return f"Effect(name={self.name!r}, parameters={len(self._parameters)})"


@dataclass
class Clip:
    """
    Clip placed on a track.

    Attributes:
        name: Display name
        start: Position on the timeline
        length: Duration
        kind: Video or audio
        selected: Selection state in the host UI
        effects: Effect chain in applied order
        generator: Generator of generated media (e.g. a text generator)
    """

    name: str
    start: Timecode
    length: Timecode
    kind: ClipKind = ClipKind.VIDEO
    selected: bool = False
    effects: list[Effect] = field(default_factory=list)
    generator: Effect | None = None

    @property
    def end(self) -> Timecode:
        return self.start + self.length

    def window(self, time_base: TimeBase) -> ClipWindow:
        return time_base.window(self.start, self.length)


@dataclass
class Track:
    """Track holding clips of one kind, ordered by start time."""

    name: str
    kind: ClipKind = ClipKind.VIDEO
    clips: list[Clip] = field(default_factory=list)

    def add_clip(self, clip: Clip) -> Clip:
        if clip.kind is not self.kind:
            raise ValueError(f"Cannot place a {clip.kind.value} clip on {self.kind.value} track")
        starts = [c.start for c in self.clips]
        self.clips.insert(bisect.bisect_right(starts, clip.start), clip)
        return clip


@dataclass
class Project:
    """Project graph: frame rate plus tracks in timeline order."""

    frame_rate: float
    tracks: list[Track] = field(default_factory=list)
    name: str = "Untitled"

    def add_track(self, track: Track) -> Track:
        self.tracks.append(track)
        return track

    def time_base(self, rounding: RoundingMode = RoundingMode.HALF_EVEN) -> TimeBase:
        return TimeBase(self.frame_rate, rounding)

    def iter_clips(
        self, kind: ClipKind | None = None, selected_only: bool = False
    ) -> Iterator[tuple[Track, Clip]]:
        """Yield (track, clip) in track order, then clip order."""
        for track in self.tracks:
            if kind is not None and track.kind is not kind:
                continue
            for clip in track.clips:
                if selected_only and not clip.selected:
                    continue
                yield track, clip
