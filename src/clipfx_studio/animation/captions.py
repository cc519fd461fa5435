"""
Caption animation drivers.

Walks the video tracks of a project, picks the text clips, finds the first
Picture-in-Picture effect and its "Scale" parameter, and hands them to the
CurveGenerator. Clips without a PiP effect or scale parameter are skipped.

Adjacency facts used to suppress the pop-out:
- another text clip starts on this clip's end frame (captions hand over
  directly, on any video track)
- an audio clip ends on this clip's end frame
"""

import logging
from collections import Counter
from collections.abc import Iterable
from dataclasses import dataclass, field

from ..core.constants import SCALE_PARAMETER
from ..host.classifier import NameClassifier
from ..host.memory import Project
from ..host.protocols import AnimatedParameter, ClipClassifier, ClipKind, ClipLike, ParameterKind
from ..timing import ZERO, TimeBase
from ..utils.progress import NullProgress, ProgressSink
from .pop_curve import CurveGenerator, PopCurveSpec, ScaleBounds, ScaleBoundsPolicy
from .text_width import PlainTextWidthEstimator, TextWidthEstimator, caption_text

logger = logging.getLogger(__name__)


@dataclass
class CaptionReport:
    """
    Outcome of a caption run.

    Attributes:
        processed: Caption clips whose scale parameter was written
        suppressed: Of those, clips whose pop-out was suppressed
        skipped: Caption clips without PiP effect, scale or text estimate
        clips: Names of the processed clips, in processing order
    """

    operation: str
    processed: int = 0
    suppressed: int = 0
    skipped: int = 0
    clips: list[str] = field(default_factory=list)

    def summary(self) -> str:
        text = f"{self.operation}: {self.processed} caption(s) updated, {self.skipped} skipped"
        if self.suppressed:
            text += f", pop-out suppressed on {self.suppressed}"
        return text


class CaptionAnimator:
    """
    Applies pop animations (or their reverse) to every caption of a project.

    Args:
        project: Host project
        time_base: Time base (default: project frame rate, half-even rounding)
        classifier: Decides which clips are captions and which effects are PiP
        generator: CurveGenerator (default: built from `time_base`)
        bounds_policy: Derives per-clip scale bounds from text width
        estimator: Measures caption text; None disables text-derived bounds
        progress: Progress sink (one step per caption)
    """

    def __init__(
        self,
        project: Project,
        time_base: TimeBase | None = None,
        classifier: ClipClassifier | None = None,
        generator: CurveGenerator | None = None,
        bounds_policy: ScaleBoundsPolicy | None = None,
        estimator: TextWidthEstimator | None = None,
        progress: ProgressSink | None = None,
    ):
        self.project = project
        self.time_base = time_base or project.time_base()
        self.classifier = classifier or NameClassifier()
        self.generator = generator or CurveGenerator(self.time_base)
        self.bounds_policy = bounds_policy or ScaleBoundsPolicy()
        self.estimator = estimator
        self.progress = progress or NullProgress()

    @classmethod
    def from_config(cls, project: Project, config, **kwargs) -> "CaptionAnimator":
        """Factory method: time base, pop curve and text width from config."""
        time_base = TimeBase.from_config(project.frame_rate, config)
        options = {
            "time_base": time_base,
            "classifier": NameClassifier.from_config(config),
            "generator": CurveGenerator(time_base, PopCurveSpec.from_config(config)),
            "bounds_policy": ScaleBoundsPolicy.from_config(config),
            "estimator": (
                PlainTextWidthEstimator()
                if config.get_bool("TextWidth", "enabled", False)
                else None
            ),
        }
        options.update(kwargs)
        return cls(project, **options)

    # === Lookups ===

    def caption_clips(self, selected_only: bool = False) -> list[ClipLike]:
        return [
            clip
            for _, clip in self.project.iter_clips(ClipKind.VIDEO, selected_only)
            if self.classifier.is_text_clip(clip)
        ]

    def scale_parameter(self, clip: ClipLike) -> AnimatedParameter | None:
        """Scale of the first PiP effect on the clip."""
        for effect in clip.effects:
            if self.classifier.is_pip_effect(effect):
                return effect.find_parameter(SCALE_PARAMETER, ParameterKind.SCALAR)
        return None

    def longest_line(self, clip: ClipLike) -> int | None:
        if self.estimator is None:
            return None
        return self.estimator.longest_line_length(caption_text(clip))

    def bounds_for(self, clip: ClipLike) -> ScaleBounds:
        default = self.generator.spec.default_bounds
        if self.estimator is None:
            return default
        return self.bounds_policy.bounds_for(self.longest_line(clip), default)

    def _end_frame(self, clip: ClipLike) -> int:
        return self.time_base.to_frames(clip.start + clip.length)

    # === Operations ===

    def animate(self, selected_only: bool = False) -> CaptionReport:
        """Write pop-in / pop-out curves on every caption."""
        report = CaptionReport("Animate captions")
        all_captions = self.caption_clips()
        text_starts = Counter(self.time_base.to_frames(c.start) for c in all_captions)
        audio_ends = {
            self._end_frame(clip) for _, clip in self.project.iter_clips(ClipKind.AUDIO)
        }

        targets = self.caption_clips(selected_only) if selected_only else all_captions
        for clip, scale in self._with_scale(targets, report):
            end_frame = self._end_frame(clip)
            own_start = 1 if self.time_base.to_frames(clip.start) == end_frame else 0
            followed_by_text = text_starts[end_frame] - own_start > 0
            ends_with_audio = end_frame in audio_ends

            self.generator.generate(
                scale,
                clip.length,
                self.bounds_for(clip),
                followed_by_text=followed_by_text,
                ends_with_audio=ends_with_audio,
            )
            if followed_by_text or ends_with_audio:
                report.suppressed += 1
                logger.debug(
                    f"{clip.name}: pop-out suppressed "
                    f"(text follows={followed_by_text}, audio ends={ends_with_audio})"
                )
            report.processed += 1
            report.clips.append(clip.name)

        self.progress.complete("Done")
        logger.info(report.summary())
        return report

    def clear(self, selected_only: bool = False) -> CaptionReport:
        """Reset every caption's scale to a static 1.0."""
        report = CaptionReport("Clear caption animation")
        for clip, scale in self._with_scale(self.caption_clips(selected_only), report):
            self.generator.reverse(scale)
            report.processed += 1
            report.clips.append(clip.name)

        self.progress.complete("Done")
        logger.info(report.summary())
        return report

    def fit_to_full_width(self, selected_only: bool = False) -> CaptionReport:
        """Set a static scale that makes each caption's longest line span the frame."""
        report = CaptionReport("Fit captions to full width")
        estimator = self.estimator or PlainTextWidthEstimator()
        for clip, scale in self._with_scale(self.caption_clips(selected_only), report):
            longest = estimator.longest_line_length(caption_text(clip))
            target_scale = self.bounds_policy.full_width_scale(longest)
            if target_scale is None:
                logger.debug(f"{clip.name}: no text to measure")
                report.skipped += 1
                continue

            scale.is_animated = False
            scale.set_value_at_time(ZERO, target_scale)
            logger.debug(f"{clip.name}: longest line {longest} -> scale {target_scale:.3f}")
            report.processed += 1
            report.clips.append(clip.name)

        self.progress.complete("Done")
        logger.info(report.summary())
        return report

    def _with_scale(self, clips: list[ClipLike], report: CaptionReport) -> Iterable[tuple]:
        """Yield (clip, scale) pairs, counting clips without a scale as skipped."""
        self.progress.set_max(len(clips))
        for clip in clips:
            self.progress.set_status(f"Caption {clip.name}")
            scale = self.scale_parameter(clip)
            if scale is None:
                logger.debug(f"{clip.name}: no PiP scale parameter, skipped")
                report.skipped += 1
            else:
                yield clip, scale
            self.progress.increment()


def animate_captions(project: Project, config=None, selected_only: bool = False, **kwargs):
    """Convenience wrapper: CaptionAnimator(...).animate()."""
    animator = (
        CaptionAnimator.from_config(project, config, **kwargs)
        if config is not None
        else CaptionAnimator(project, **kwargs)
    )
    return animator.animate(selected_only)


def clear_caption_animation(project: Project, config=None, selected_only: bool = False, **kwargs):
    """Convenience wrapper: CaptionAnimator(...).clear()."""
    animator = (
        CaptionAnimator.from_config(project, config, **kwargs)
        if config is not None
        else CaptionAnimator(project, **kwargs)
    )
    return animator.clear(selected_only)


def fit_captions_to_full_width(
    project: Project, config=None, selected_only: bool = False, **kwargs
):
    """Convenience wrapper: CaptionAnimator(...).fit_to_full_width()."""
    animator = (
        CaptionAnimator.from_config(project, config, **kwargs)
        if config is not None
        else CaptionAnimator(project, **kwargs)
    )
    return animator.fit_to_full_width(selected_only)
