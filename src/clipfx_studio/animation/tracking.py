"""
Tracking data driver.

Collects tracking sources and Picture-in-Picture destinations among the
selected video clips of a project and runs the TransferEngine on them.
"""

import logging

from ..core.config import Config
from ..core.exceptions import AmbiguousSourceError
from ..host.classifier import NameClassifier
from ..host.memory import Project
from ..host.protocols import ClipClassifier, ClipKind
from ..timing import TimeBase
from ..utils.cancellation import CancellationToken
from ..utils.progress import ProgressSink
from .transfer import TransferEngine, TransferResult, TransferSource, TransferTarget

logger = logging.getLogger(__name__)


def collect_tracking_clips(
    project: Project, classifier: ClipClassifier, time_base: TimeBase
) -> tuple[list[TransferSource], list[TransferTarget]]:
    """
    Sources and destinations among the selected video clips.

    A clip contributes its first tracking-source effect as a source and its
    last PiP effect as a destination; one clip may be both. Order follows
    tracks, then clips.
    """
    sources: list[TransferSource] = []
    targets: list[TransferTarget] = []

    for track, clip in project.iter_clips(ClipKind.VIDEO, selected_only=True):
        window = time_base.window(clip.start, clip.length)
        label = f"{track.name}/{clip.name}"

        tracking = next((e for e in clip.effects if classifier.is_tracking_source(e)), None)
        if tracking is not None:
            sources.append(TransferSource(tracking, window, label))

        pips = [e for e in clip.effects if classifier.is_pip_effect(e)]
        if pips:
            targets.append(TransferTarget(pips[-1], window, label))

    logger.debug(f"Tracking: {len(sources)} Quellen, {len(targets)} Ziele gefunden")
    return sources, targets


def apply_tracking_data(
    project: Project,
    config: Config | None = None,
    classifier: ClipClassifier | None = None,
    progress: ProgressSink | None = None,
    cancel_token: CancellationToken | None = None,
    single_source: bool = False,
    transactional: bool | None = None,
) -> TransferResult:
    """
    Copy tracked corners onto the corner pins of the selected PiP clips.

    Args:
        project: Host project
        config: Configuration ([Timing], [Transfer], [Classifier]); defaults if None
        classifier: Overrides the configured classifier
        progress: Progress sink
        cancel_token: Cancels between keyframes
        single_source: Require exactly one tracking source
        transactional: Overrides [Transfer] transactional

    Raises:
        NoTrackingSourceError, NoTargetError: Nothing to copy from or to
        AmbiguousSourceError: `single_source` with more than one source
    """
    config = config or Config(config_file=None)
    time_base = TimeBase.from_config(project.frame_rate, config)
    classifier = classifier or NameClassifier.from_config(config)

    sources, targets = collect_tracking_clips(project, classifier, time_base)
    if single_source and len(sources) > 1:
        raise AmbiguousSourceError(len(sources))

    engine = TransferEngine.from_config(
        time_base,
        config,
        progress=progress,
        cancel_token=cancel_token,
        transactional=transactional,
    )
    result = engine.transfer(sources, targets)
    logger.info(result.summary().replace("\n", ", "))
    return result
