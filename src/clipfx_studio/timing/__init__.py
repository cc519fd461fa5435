"""Time base: Timecode, frame conversion and clip windows."""

from .timebase import ZERO, ClipWindow, RoundingMode, TimeBase, Timecode, round_frames

__all__ = ["ZERO", "ClipWindow", "RoundingMode", "TimeBase", "Timecode", "round_frames"]
