"""
Keyframe Transfer Engine
------------------------
Copies tracked corner curves from tracking-source effects onto the corner-pin
parameters of Picture-in-Picture effects on other clips.

For every source keyframe the engine:
1. maps the clip-local frame to an absolute timeline frame
   (keyframe frame + source clip start frame),
2. skips it unless the destination clip is active at that frame (inclusive
   window on both ends),
3. writes the value, normalized from pixels to [0, 1] by the source's
   reference corner, at the frame relative to the destination clip start.

Processing order is fixed and observable (later writes to the same frame
win): sources, then destinations, then corners, then keyframes, each in the
order given.

Usage:
    engine = TransferEngine(TimeBase(30.0), progress=LoggingProgress())
    result = engine.transfer(sources, targets)
    print(result.summary())
"""

import logging
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field

from ..core import constants
from ..core.exceptions import (
    MissingParameterError,
    NoTargetError,
    NoTrackingSourceError,
    safe_cleanup,
)
from ..host.protocols import AnimatedParameter, EffectLike, ParameterKind, Point2D
from ..timing import ZERO, ClipWindow, TimeBase
from ..utils.cancellation import CancellationToken
from ..utils.progress import NullProgress, ProgressSink
from .transaction import CurveTransaction

logger = logging.getLogger(__name__)


def as_point(value) -> Point2D:
    if isinstance(value, Point2D):
        return value
    x, y = value
    return Point2D(float(x), float(y))


@dataclass(frozen=True)
class NormalizationScale:
    """Per-axis factor from pixel coordinates to unit coordinates."""

    sx: float = 1.0
    sy: float = 1.0

    @classmethod
    def from_reference(cls, reference: Point2D) -> "NormalizationScale":
        """
        Scale from a (width, height) sample in pixels.

        A zero component leaves that axis unscaled.
        """
        sx = 1.0 / reference.x if reference.x != 0.0 else 1.0
        sy = 1.0 / reference.y if reference.y != 0.0 else 1.0
        return cls(sx, sy)

    def apply(self, point: Point2D) -> Point2D:
        return point.scaled(self.sx, self.sy)


@dataclass
class TransferSource:
    """Tracking-source effect and the window of the clip it sits on."""

    effect: EffectLike
    window: ClipWindow
    name: str = ""


@dataclass
class TransferTarget:
    """Corner-pin (PiP) effect and the window of the clip it sits on."""

    effect: EffectLike
    window: ClipWindow
    name: str = ""


@dataclass(frozen=True)
class TransferTask:
    """One source corner curve copied onto one destination corner curve."""

    source_corner: str
    destination_corner: str
    source_curve: AnimatedParameter
    source_window: ClipWindow
    destination_curve: AnimatedParameter | None
    destination_window: ClipWindow
    scale: NormalizationScale


@dataclass
class TransferResult:
    """
    Outcome of a transfer run.

    Attributes:
        sources: Number of tracking sources
        targets: Number of destination effects
        frames_copied: Keyframes written
        steps: Keyframes examined (= progress increments)
        estimated_steps: Pre-computed progress total
        free_form_switched: Destinations switched to free-form mode
        skipped_corners: (target, corner) pairs missing on the destination
    """

    sources: int
    targets: int
    frames_copied: int = 0
    steps: int = 0
    estimated_steps: int = 0
    free_form_switched: int = 0
    skipped_corners: list[tuple[str, str]] = field(default_factory=list)

    def summary(self) -> str:
        return (
            f"PiP targets: {self.targets}\n"
            f"Tracking sources: {self.sources}\n"
            f"Frames copied: {self.frames_copied}"
        )


class TransferEngine:
    """
    Copies corner curves from many sources onto many destinations.

    Args:
        time_base: Project time base (frame rate + rounding)
        corner_map: (source corner, destination corner) pairs in processing order
        reference_corner: Source parameter holding (width, height) in pixels
        mode_parameter: Choice parameter on the destination selecting the pin mode
        free_form_choice: Index of the free-form option of `mode_parameter`
        progress: Progress sink
        cancel_token: Checked before every examined keyframe
        transactional: Restore every touched destination parameter on failure
    """

    def __init__(
        self,
        time_base: TimeBase,
        corner_map: Sequence[tuple[str, str]] = constants.CORNER_MAP,
        reference_corner: str = constants.REFERENCE_CORNER,
        mode_parameter: str = constants.MODE_PARAMETER,
        free_form_choice: int = constants.FREE_FORM_CHOICE_INDEX,
        progress: ProgressSink | None = None,
        cancel_token: CancellationToken | None = None,
        transactional: bool = False,
    ):
        self.time_base = time_base
        self.corner_map = tuple(corner_map)
        self.reference_corner = reference_corner
        self.mode_parameter = mode_parameter
        self.free_form_choice = free_form_choice
        self.progress = progress or NullProgress()
        self.cancel_token = cancel_token
        self.transactional = transactional

    @classmethod
    def from_config(cls, time_base: TimeBase, config, **kwargs) -> "TransferEngine":
        """Factory method aus der [Transfer] Section; kwargs override."""
        section = "Transfer"
        options = {
            "reference_corner": config.get(section, "reference_corner", constants.REFERENCE_CORNER),
            "mode_parameter": config.get(section, "mode_parameter", constants.MODE_PARAMETER),
            "free_form_choice": config.get_int(
                section, "free_form_choice", constants.FREE_FORM_CHOICE_INDEX
            ),
            "transactional": config.get_bool(section, "transactional", False),
        }
        options.update({k: v for k, v in kwargs.items() if v is not None})
        return cls(time_base, **options)

    # === Setup ===

    def _corner(self, effect: EffectLike, name: str) -> AnimatedParameter | None:
        return effect.find_parameter(name, ParameterKind.VECTOR2)

    def estimate_total_steps(
        self, sources: Sequence[TransferSource], targets: Sequence[TransferTarget]
    ) -> int:
        """
        Progress total: keyframes per source corner times max(1, targets).

        Equals the number of keyframes the transfer examines.
        """
        total = 0
        for source in sources:
            for source_corner, _ in self.corner_map:
                parameter = self._corner(source.effect, source_corner)
                if parameter is not None:
                    total += len(parameter.keyframes) * max(1, len(targets))
        return total

    def normalization_for(self, source: TransferSource) -> NormalizationScale:
        """
        Normalization read from the source's reference corner.

        Sampled at the first keyframe if animated, else the static value.
        Missing or unreadable reference -> identity scale.
        """
        reference = self._corner(source.effect, self.reference_corner)
        if reference is None:
            logger.warning(
                f"{source.name or source.effect.name}: no '{self.reference_corner}', "
                "keeping pixel coordinates"
            )
            return NormalizationScale()
        try:
            keyframes = reference.keyframes
            time = keyframes[0].time if keyframes else ZERO
            return NormalizationScale.from_reference(as_point(reference.get_value_at_time(time)))
        except (TypeError, ValueError) as e:
            logger.warning(f"Reference corner unreadable ({e}), keeping pixel coordinates")
            return NormalizationScale()

    def ensure_free_form(
        self, targets: Iterable[TransferTarget], transaction: CurveTransaction | None = None
    ) -> int:
        """
        Switch each destination's mode parameter to free form.

        Destinations without the parameter, or with fewer options, are left
        alone.

        Returns:
            Number of destinations switched
        """
        switched = 0
        for target in targets:
            mode = target.effect.find_parameter(self.mode_parameter, ParameterKind.CHOICE)
            if mode is None:
                continue
            choices = list(getattr(mode, "choices", ()) or ())
            if len(choices) <= self.free_form_choice:
                continue
            if transaction is not None:
                transaction.track(mode)
            mode.set_value_at_time(ZERO, choices[self.free_form_choice])
            switched += 1
        return switched

    # === Transfer ===

    def transfer(
        self, sources: Sequence[TransferSource], targets: Sequence[TransferTarget]
    ) -> TransferResult:
        """
        Copy every source corner curve onto every destination.

        Raises:
            NoTrackingSourceError: If `sources` is empty
            NoTargetError: If `targets` is empty
            MissingParameterError: If a source lacks one of the corners
            OperationCancelledError: If the cancel token fires
        """
        if not sources:
            raise NoTrackingSourceError()
        if not targets:
            raise NoTargetError()

        result = TransferResult(sources=len(sources), targets=len(targets))
        transaction = CurveTransaction(self.transactional, "Tracking transfer")
        progress = self.progress

        try:
            with transaction:
                result.free_form_switched = self.ensure_free_form(targets, transaction)
                result.estimated_steps = self.estimate_total_steps(sources, targets)

                progress.set_status("Preparing…")
                progress.set_max(result.estimated_steps if result.estimated_steps > 0 else 1)

                for source_index, source in enumerate(sources, start=1):
                    scale = self.normalization_for(source)
                    for target_index, target in enumerate(targets, start=1):
                        progress.set_status(
                            f"Processing source {source_index}/{len(sources)} • "
                            f"event {target_index}/{len(targets)}…"
                        )
                        for task in self._tasks(source, target, scale):
                            self._apply(task, target, result, transaction)

            progress.complete("Done")
        except Exception:
            self._report_failure()
            raise

        logger.info(
            f"Transfer fertig: {result.frames_copied} Keyframes kopiert "
            f"({result.steps} geprüft, {result.sources} Quellen, {result.targets} Ziele)"
        )
        return result

    def _tasks(
        self, source: TransferSource, target: TransferTarget, scale: NormalizationScale
    ) -> Iterable[TransferTask]:
        for source_corner, destination_corner in self.corner_map:
            source_curve = self._corner(source.effect, source_corner)
            if source_curve is None:
                raise MissingParameterError(source_corner, source.name or source.effect.name)
            yield TransferTask(
                source_corner=source_corner,
                destination_corner=destination_corner,
                source_curve=source_curve,
                source_window=source.window,
                destination_curve=self._corner(target.effect, destination_corner),
                destination_window=target.window,
                scale=scale,
            )

    def _apply(
        self,
        task: TransferTask,
        target: TransferTarget,
        result: TransferResult,
        transaction: CurveTransaction,
    ) -> None:
        keyframes = task.source_curve.keyframes
        destination = task.destination_curve

        if destination is None:
            # Keep the progress total consistent with the estimate
            logger.debug(f"{target.name or target.effect.name}: no '{task.destination_corner}'")
            result.skipped_corners.append((target.name, task.destination_corner))
            for _ in keyframes:
                self._step(result)
            return

        absolute_frames = (
            self.time_base.to_frames_array([kf.time.milliseconds for kf in keyframes])
            + task.source_window.start_frame
        )

        for keyframe, absolute in zip(keyframes, absolute_frames.tolist()):
            if self.cancel_token is not None:
                self.cancel_token.raise_if_cancelled()

            if task.destination_window.contains(absolute):
                point = as_point(task.source_curve.get_value_at_time(keyframe.time))
                transaction.track(destination)
                if not destination.is_animated:
                    destination.is_animated = True
                local = task.destination_window.to_local(absolute)
                destination.set_value_at_time(
                    self.time_base.frame_to_timecode(local), task.scale.apply(point)
                )
                result.frames_copied += 1

            self._step(result)

    def _step(self, result: TransferResult) -> None:
        result.steps += 1
        self.progress.increment()

    @safe_cleanup
    def _report_failure(self) -> None:
        self.progress.set_status("Error")
        self.progress.complete("Error")
