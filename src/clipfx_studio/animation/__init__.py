"""
Animation-Modul für ClipFX Studio

Komponenten:
- CurveGenerator: Pop-in / pop-out scale keyframes
- TextWidthEstimator: Longest-line metric for per-caption bounds
- TransferEngine: Corner-pin keyframe transfer from tracking sources
- Drivers: captions, tracking, location sync
"""

from .captions import (
    CaptionAnimator,
    CaptionReport,
    animate_captions,
    clear_caption_animation,
    fit_captions_to_full_width,
)
from .location import LocationHandle, sync_text_location
from .pop_curve import CurveGenerator, PopCurveSpec, PopOutMode, ScaleBounds, ScaleBoundsPolicy
from .text_width import PlainTextWidthEstimator, TextWidthEstimator, caption_text, longest_line
from .tracking import apply_tracking_data, collect_tracking_clips
from .transaction import CurveTransaction, ParameterSnapshotCommand
from .transfer import (
    NormalizationScale,
    TransferEngine,
    TransferResult,
    TransferSource,
    TransferTarget,
    TransferTask,
)

__all__ = [
    # Pop curve
    "CurveGenerator",
    "PopCurveSpec",
    "PopOutMode",
    "ScaleBounds",
    "ScaleBoundsPolicy",
    # Text width
    "TextWidthEstimator",
    "PlainTextWidthEstimator",
    "caption_text",
    "longest_line",
    # Transfer
    "NormalizationScale",
    "TransferEngine",
    "TransferResult",
    "TransferSource",
    "TransferTarget",
    "TransferTask",
    "CurveTransaction",
    "ParameterSnapshotCommand",
    # Drivers
    "CaptionAnimator",
    "CaptionReport",
    "animate_captions",
    "clear_caption_animation",
    "fit_captions_to_full_width",
    "apply_tracking_data",
    "collect_tracking_clips",
    "LocationHandle",
    "sync_text_location",
]
