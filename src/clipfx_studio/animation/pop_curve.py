"""
Pop Curve Generator
-------------------
Generates pop-in / pop-out scale keyframes for caption clips.

Pop-in (always): min -> max -> 1.0 over the first A + B frames.
Pop-out (when the clip is long enough and not suppressed): 1.0 -> max -> min
over the last C + D frames, or a shorter 1.0 -> min over the last D frames.

Usage:
    generator = CurveGenerator(TimeBase(30.0), PopCurveSpec())
    generator.generate(scale_param, clip.length, ScaleBounds(0.5, 1.5))
"""

import logging
from dataclasses import dataclass, field
from enum import Enum

from ..core import constants
from ..core.exceptions import ConfigurationError
from ..host.protocols import AnimatedParameter
from ..timing import TimeBase, Timecode

logger = logging.getLogger(__name__)


class PopOutMode(Enum):
    """Which pop-out variant fits into a clip."""

    FULL = "full"  # 1.0 -> max -> min
    HALF = "half"  # 1.0 -> min
    NONE = "none"  # pop-in only


@dataclass(frozen=True)
class ScaleBounds:
    """Scale extremes of one clip's pop animation."""

    min_scale: float = constants.DEFAULT_MIN_SCALE
    max_scale: float = constants.DEFAULT_MAX_SCALE


@dataclass(frozen=True)
class PopCurveSpec:
    """
    Frame offsets and thresholds of the pop animation.

    Attributes:
        pop_in_frames_a: Frames from min to max scale
        pop_in_frames_b: Frames from max scale to rest
        pop_out_frames_a: Frames from rest to max scale
        pop_out_frames_b: Frames from max scale to min (or rest to min)
        full_pop_out_min_frame_buffer: Free frames needed for the full pop-out
        half_pop_out_min_frame_buffer: Free frames needed for the half pop-out
        default_bounds: Scale bounds when no per-clip bounds are given
    """

    pop_in_frames_a: int = constants.POP_IN_FRAMES_A
    pop_in_frames_b: int = constants.POP_IN_FRAMES_B
    pop_out_frames_a: int = constants.POP_OUT_FRAMES_A
    pop_out_frames_b: int = constants.POP_OUT_FRAMES_B
    full_pop_out_min_frame_buffer: int = constants.FULL_POP_OUT_MIN_FRAME_BUFFER
    half_pop_out_min_frame_buffer: int = constants.HALF_POP_OUT_MIN_FRAME_BUFFER
    default_bounds: ScaleBounds = field(default_factory=ScaleBounds)

    def __post_init__(self):
        offsets = {
            "pop_in_frames_a": self.pop_in_frames_a,
            "pop_in_frames_b": self.pop_in_frames_b,
            "pop_out_frames_a": self.pop_out_frames_a,
            "pop_out_frames_b": self.pop_out_frames_b,
        }
        negative = {name: value for name, value in offsets.items() if value < 0}
        if negative:
            raise ConfigurationError("Pop curve frame offsets must not be negative", negative)

    @classmethod
    def from_config(cls, config) -> "PopCurveSpec":
        """Factory method aus der [PopCurve] Section."""
        section = "PopCurve"
        return cls(
            pop_in_frames_a=config.get_int(section, "pop_in_frames_a", constants.POP_IN_FRAMES_A),
            pop_in_frames_b=config.get_int(section, "pop_in_frames_b", constants.POP_IN_FRAMES_B),
            pop_out_frames_a=config.get_int(
                section, "pop_out_frames_a", constants.POP_OUT_FRAMES_A
            ),
            pop_out_frames_b=config.get_int(
                section, "pop_out_frames_b", constants.POP_OUT_FRAMES_B
            ),
            full_pop_out_min_frame_buffer=config.get_int(
                section, "full_pop_out_min_frame_buffer", constants.FULL_POP_OUT_MIN_FRAME_BUFFER
            ),
            half_pop_out_min_frame_buffer=config.get_int(
                section, "half_pop_out_min_frame_buffer", constants.HALF_POP_OUT_MIN_FRAME_BUFFER
            ),
            default_bounds=ScaleBounds(
                config.get_float(section, "min_scale", constants.DEFAULT_MIN_SCALE),
                config.get_float(section, "max_scale", constants.DEFAULT_MAX_SCALE),
            ),
        )


@dataclass(frozen=True)
class ScaleBoundsPolicy:
    """
    Derives per-clip scale bounds from the caption's longest line.

    A line of `full_width_characters` characters fills the frame width at
    scale 1. Long captions get a smaller pop so they stay inside the frame,
    but the pop never flattens the curve: max >= 1.0 and min <= 1.0.
    """

    full_width_characters: float = constants.FULL_WIDTH_CHARACTERS
    grow_factor: float = constants.SCALE_GROW_FACTOR
    shrink_factor: float = constants.SCALE_SHRINK_FACTOR
    margin: float = constants.SCALE_MARGIN

    @classmethod
    def from_config(cls, config) -> "ScaleBoundsPolicy":
        section = "TextWidth"
        return cls(
            full_width_characters=config.get_float(
                section, "full_width_characters", constants.FULL_WIDTH_CHARACTERS
            ),
            grow_factor=config.get_float(section, "grow_factor", constants.SCALE_GROW_FACTOR),
            shrink_factor=config.get_float(
                section, "shrink_factor", constants.SCALE_SHRINK_FACTOR
            ),
            margin=config.get_float(section, "margin", constants.SCALE_MARGIN),
        )

    def bounds_for(self, longest_line: int | None, fallback: ScaleBounds) -> ScaleBounds:
        """
        Scale bounds for a caption whose longest line has `longest_line` characters.

        Returns `fallback` if no width is known.
        """
        if not longest_line or longest_line <= 0 or self.full_width_characters <= 0:
            return fallback

        base = longest_line / self.full_width_characters
        grown = min(base * self.grow_factor, base + self.margin)
        shrunk = max(base * self.shrink_factor, max(base - self.margin, 0.0))
        return ScaleBounds(
            min_scale=min(shrunk / base, 1.0),
            max_scale=max(grown / base, 1.0),
        )

    def full_width_scale(self, longest_line: int | None) -> float | None:
        """Static scale that stretches the longest line across the frame."""
        if not longest_line or longest_line <= 0:
            return None
        return self.full_width_characters / longest_line


class CurveGenerator:
    """
    Writes pop-in / pop-out keyframes into a scale parameter.

    The parameter's curve is fully replaced on every call.
    """

    def __init__(self, time_base: TimeBase, spec: PopCurveSpec | None = None):
        self.time_base = time_base
        self.spec = spec or PopCurveSpec()

    @staticmethod
    def format_keyframes(keyframes: list[tuple[int, float]]) -> str:
        """Keyframe list as "frame: (value)" pairs, sorted by frame."""
        # Later writes at the same frame win, as on the host
        kf_dict = dict(keyframes)
        return ", ".join(f"{f}: ({kf_dict[f]:.3f})" for f in sorted(kf_dict))

    def pop_out_mode(self, duration_frames: int) -> PopOutMode:
        spec = self.spec
        pop_in = spec.pop_in_frames_a + spec.pop_in_frames_b
        full_free = duration_frames - pop_in - spec.pop_out_frames_a - spec.pop_out_frames_b
        if full_free > spec.full_pop_out_min_frame_buffer:
            return PopOutMode.FULL
        if duration_frames - pop_in - spec.pop_out_frames_b > spec.half_pop_out_min_frame_buffer:
            return PopOutMode.HALF
        return PopOutMode.NONE

    def plan(
        self,
        duration_frames: int,
        bounds: ScaleBounds | None = None,
        suppress_pop_out: bool = False,
    ) -> list[tuple[int, float]]:
        """
        Keyframes (frame, scale) for a clip of `duration_frames`, in write order.

        Pure; nothing is written.
        """
        spec = self.spec
        bounds = bounds or spec.default_bounds
        rest = constants.REST_SCALE
        a, b = spec.pop_in_frames_a, spec.pop_in_frames_b
        c, d = spec.pop_out_frames_a, spec.pop_out_frames_b

        keyframes = [
            (0, bounds.min_scale),
            (a, bounds.max_scale),
            (a + b, rest),
        ]
        if suppress_pop_out:
            return keyframes

        mode = self.pop_out_mode(duration_frames)
        if mode is PopOutMode.FULL:
            keyframes += [
                (duration_frames - c - d, rest),
                (duration_frames - d, bounds.max_scale),
                (duration_frames, bounds.min_scale),
            ]
        elif mode is PopOutMode.HALF:
            keyframes += [
                (duration_frames - d, rest),
                (duration_frames, bounds.min_scale),
            ]
        return keyframes

    def generate(
        self,
        parameter: AnimatedParameter,
        clip_length: Timecode,
        bounds: ScaleBounds | None = None,
        followed_by_text: bool = False,
        ends_with_audio: bool = False,
    ) -> list[tuple[int, float]]:
        """
        Replace the curve of `parameter` with the pop animation.

        Args:
            parameter: Scale parameter of the clip's PiP effect
            clip_length: Clip length (converted with the time base)
            bounds: Per-clip scale bounds (default: spec.default_bounds)
            followed_by_text: Another caption starts on this clip's last frame
            ends_with_audio: An audio clip ends on this clip's last frame

        Returns:
            The keyframes written, as (frame, scale) in write order
        """
        duration_frames = self.time_base.to_frames(clip_length)
        keyframes = self.plan(
            duration_frames, bounds, suppress_pop_out=followed_by_text or ends_with_audio
        )

        # Toggle off and on to drop existing keyframes
        parameter.is_animated = False
        parameter.is_animated = True
        for frame, value in keyframes:
            parameter.set_value_at_time(self.time_base.frame_to_timecode(frame), value)

        logger.debug(
            f"{parameter.name}: {duration_frames} frames -> {self.format_keyframes(keyframes)}"
        )
        return keyframes

    def reverse(self, parameter: AnimatedParameter) -> None:
        """Remove the animation: one static rest scale at frame 0."""
        parameter.is_animated = False
        parameter.set_value_at_time(self.time_base.frame_to_timecode(0), constants.REST_SCALE)
