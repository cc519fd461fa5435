"""
Copies the PiP location of the earliest selected caption to the others.
"""

import logging
from dataclasses import dataclass

from ..core import constants
from ..core.exceptions import NoTargetError
from ..host.classifier import NameClassifier
from ..host.memory import Project
from ..host.protocols import (
    AnimatedParameter,
    ClipClassifier,
    ClipKind,
    ClipLike,
    EffectLike,
    ParameterKind,
    Point2D,
)
from ..timing import ZERO

logger = logging.getLogger(__name__)


@dataclass
class LocationHandle:
    """Location of one PiP effect: a 2D parameter or an X/Y scalar pair."""

    clip: ClipLike
    location: AnimatedParameter | None = None
    x: AnimatedParameter | None = None
    y: AnimatedParameter | None = None

    @classmethod
    def find(cls, clip: ClipLike, effect: EffectLike) -> "LocationHandle | None":
        location = effect.find_parameter(constants.LOCATION_PARAMETER, ParameterKind.VECTOR2)
        if location is not None:
            return cls(clip, location=location)

        x = _first_scalar(effect, [pair[0] for pair in constants.LOCATION_AXIS_FALLBACKS])
        y = _first_scalar(effect, [pair[1] for pair in constants.LOCATION_AXIS_FALLBACKS])
        if x is None or y is None:
            return None
        return cls(clip, x=x, y=y)

    def read(self) -> Point2D:
        if self.location is not None:
            x, y = self.location.get_value_at_time(ZERO)
            return Point2D(float(x), float(y))
        return Point2D(
            float(self.x.get_value_at_time(ZERO)),
            float(self.y.get_value_at_time(ZERO)),
        )

    def apply(self, point: Point2D) -> None:
        """Set `point` as static location, dropping any animation."""
        if self.location is not None:
            self.location.is_animated = False
            self.location.set_value_at_time(ZERO, point)
            return
        for parameter, value in ((self.x, point.x), (self.y, point.y)):
            parameter.is_animated = False
            parameter.set_value_at_time(ZERO, value)


def _first_scalar(effect: EffectLike, names: list[str]) -> AnimatedParameter | None:
    for name in names:
        parameter = effect.find_parameter(name, ParameterKind.SCALAR)
        if parameter is not None:
            return parameter
    return None


def collect_locations(project: Project, classifier: ClipClassifier) -> list[LocationHandle]:
    """Location handles of the selected captions, in track/clip order."""
    handles = []
    for _, clip in project.iter_clips(ClipKind.VIDEO, selected_only=True):
        if not classifier.is_text_clip(clip):
            continue
        pip = next((e for e in clip.effects if classifier.is_pip_effect(e)), None)
        if pip is None:
            continue
        handle = LocationHandle.find(clip, pip)
        if handle is not None:
            handles.append(handle)
    return handles


def sync_text_location(project: Project, classifier: ClipClassifier | None = None) -> int:
    """
    Copy the earliest selected caption's PiP location to all selected captions.

    The location is written as a static value. On equal start times the
    first clip in track order wins.

    Returns:
        Number of captions the location was applied to

    Raises:
        NoTargetError: No selected caption has a readable location, or
            nothing could be applied
    """
    classifier = classifier or NameClassifier()
    handles = collect_locations(project, classifier)
    if not handles:
        raise NoTargetError("No selected text events with Picture in Picture 'Location' found.")

    earliest = min(handles, key=lambda h: h.clip.start)
    reference = earliest.read()
    logger.debug(f"Reference location from {earliest.clip.name}: ({reference.x}, {reference.y})")

    applied = 0
    for handle in handles:
        try:
            handle.apply(reference)
        except (TypeError, ValueError) as e:
            logger.warning(f"{handle.clip.name}: location not applied ({e})")
            continue
        applied += 1

    if applied == 0:
        raise NoTargetError("Location could not be applied to any selected events.")

    logger.info(f"Location applied to {applied} selected event(s).")
    return applied
