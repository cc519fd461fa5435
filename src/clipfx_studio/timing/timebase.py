"""
Frame/time conversion for ClipFX Studio.

TimeBase is the only place where timecodes become frame indices. Every frame
number used by the curve generator and the transfer engine is derived through
``TimeBase.to_frames`` so the rounding policy is applied consistently.

Usage:
    from clipfx_studio.timing import TimeBase, Timecode

    tb = TimeBase(30.0)
    tb.to_frames(Timecode.from_seconds(2.0))   # 60
    tb.frame_to_timecode(45)                    # Timecode(milliseconds=1500.0)
"""

import math
import numbers
from collections.abc import Sequence
from dataclasses import dataclass
from enum import Enum

import numpy as np
from numpy.typing import NDArray

from ..core.exceptions import ConfigurationError, InvalidFrameRateError


class RoundingMode(Enum):
    """Tie-break rule for converting fractional frame positions to frames."""

    HALF_EVEN = "half_even"  # 2.5 -> 2, 3.5 -> 4 (banker's rounding)
    HALF_AWAY_FROM_ZERO = "half_away_from_zero"  # 2.5 -> 3, -2.5 -> -3

    @classmethod
    def parse(cls, value: "str | RoundingMode") -> "RoundingMode":
        """
        Parse a rounding mode from its config string.

        Raises:
            ConfigurationError: If the value is not a known mode
        """
        if isinstance(value, cls):
            return value
        normalized = str(value).strip().lower().replace("-", "_")
        for mode in cls:
            if mode.value == normalized:
                return mode
        raise ConfigurationError(
            f"Unknown rounding mode '{value}'",
            details={"allowed": [m.value for m in cls]},
        )


def round_frames(value: float, mode: RoundingMode = RoundingMode.HALF_EVEN) -> int:
    """Round a fractional frame position according to `mode`."""
    if mode is RoundingMode.HALF_EVEN:
        return int(round(value))
    return int(math.copysign(math.floor(abs(value) + 0.5), value))


@dataclass(frozen=True, order=True)
class Timecode:
    """
    Continuous time value.

    Stored as milliseconds; never compare it with frame counts directly, go
    through a TimeBase instead.
    """

    milliseconds: float = 0.0

    @classmethod
    def from_milliseconds(cls, milliseconds: float) -> "Timecode":
        return cls(float(milliseconds))

    @classmethod
    def from_seconds(cls, seconds: float) -> "Timecode":
        return cls(float(seconds) * 1000.0)

    def to_milliseconds(self) -> float:
        return self.milliseconds

    def to_seconds(self) -> float:
        return self.milliseconds / 1000.0

    def __add__(self, other: "Timecode") -> "Timecode":
        if not isinstance(other, Timecode):
            return NotImplemented
        return Timecode(self.milliseconds + other.milliseconds)

    def __sub__(self, other: "Timecode") -> "Timecode":
        if not isinstance(other, Timecode):
            return NotImplemented
        return Timecode(self.milliseconds - other.milliseconds)

    def __repr__(self) -> str:
        return f"Timecode({self.milliseconds:.3f}ms)"


ZERO = Timecode(0.0)


@dataclass(frozen=True)
class ClipWindow:
    """
    Inclusive absolute-frame range during which a clip is active.

    Attributes:
        start_frame: First frame of the clip on the timeline
        end_frame: Frame at start + length (inclusive)
    """

    start_frame: int
    end_frame: int

    def contains(self, frame: int) -> bool:
        return self.start_frame <= frame <= self.end_frame

    def to_local(self, frame: int) -> int:
        """Absolute timeline frame -> frame relative to the clip start."""
        return frame - self.start_frame

    @property
    def length_frames(self) -> int:
        return self.end_frame - self.start_frame


@dataclass(frozen=True)
class TimeBase:
    """
    Converts between Timecode and frame indices at a fixed frame rate.

    ``to_frames`` computes ``round(ms / 1000 * frame_rate)``; the inverse
    ``frame_to_timecode`` needs no rounding, so
    ``to_frames(frame_to_timecode(f)) == f`` for every f >= 0.

    Raises:
        InvalidFrameRateError: If frame_rate is not a positive finite number
    """

    frame_rate: float
    rounding: RoundingMode = RoundingMode.HALF_EVEN

    def __post_init__(self):
        rate = self.frame_rate
        if isinstance(rate, (bool, np.bool_)) or not isinstance(rate, numbers.Real):
            raise InvalidFrameRateError(rate)
        if not math.isfinite(rate) or rate <= 0:
            raise InvalidFrameRateError(rate)
        # numpy-Skalare als float speichern
        object.__setattr__(self, "frame_rate", float(rate))

    @classmethod
    def from_config(cls, frame_rate: float, config) -> "TimeBase":
        """Build a TimeBase using the [Timing] rounding policy."""
        return cls(frame_rate, RoundingMode.parse(config.get("Timing", "rounding", "half_even")))

    def to_frames(self, timecode: Timecode) -> int:
        return round_frames(timecode.to_milliseconds() / 1000.0 * self.frame_rate, self.rounding)

    def to_frames_array(self, milliseconds: Sequence[float]) -> NDArray[np.int64]:
        """Vectorized ``to_frames`` over raw millisecond values."""
        positions = np.asarray(milliseconds, dtype=np.float64) / 1000.0 * self.frame_rate
        if self.rounding is RoundingMode.HALF_EVEN:
            rounded = np.rint(positions)
        else:
            rounded = np.sign(positions) * np.floor(np.abs(positions) + 0.5)
        return rounded.astype(np.int64)

    def frame_to_timecode(self, frame: int) -> Timecode:
        return Timecode(frame * 1000.0 / self.frame_rate)

    def window(self, start: Timecode, length: Timecode) -> ClipWindow:
        """Clip window from a clip's start and length."""
        return ClipWindow(self.to_frames(start), self.to_frames(start + length))
