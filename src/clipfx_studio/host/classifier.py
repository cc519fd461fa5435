"""
Name/UID based clip and effect classification.

Default ClipClassifier for hosts that identify plug-ins by display name and
unique ID. All comparisons are case-insensitive. PiP effects match a known UID
exactly or contain a known name; text generators and tracking sources match
on substrings of either.
"""

from collections.abc import Iterable

from ..core import constants
from .protocols import ClipKind, ClipLike, EffectLike


def _lowered(values: Iterable[str]) -> tuple[str, ...]:
    return tuple(v.lower() for v in values if v)


def _contains_any(text: str | None, needles: tuple[str, ...]) -> bool:
    haystack = (text or "").lower()
    return any(needle in haystack for needle in needles)


class NameClassifier:
    """ClipClassifier matching plug-in names and unique IDs."""

    def __init__(
        self,
        text_generator_names: Iterable[str] = constants.TEXT_GENERATOR_NAMES,
        text_generator_uids: Iterable[str] = constants.TEXT_GENERATOR_UIDS,
        pip_names: Iterable[str] = constants.PIP_NAMES,
        pip_uids: Iterable[str] = constants.PIP_UIDS,
        tracking_names: Iterable[str] = constants.TRACKING_NAMES,
        tracking_uids: Iterable[str] = constants.TRACKING_UIDS,
    ):
        self.text_generator_names = _lowered(text_generator_names)
        self.text_generator_uids = _lowered(text_generator_uids)
        self.pip_names = _lowered(pip_names)
        self.pip_uids = _lowered(pip_uids)
        self.tracking_names = _lowered(tracking_names)
        self.tracking_uids = _lowered(tracking_uids)

    @classmethod
    def from_config(cls, config) -> "NameClassifier":
        """Build from the [Classifier] section."""
        section = "Classifier"
        return cls(
            text_generator_names=config.get_list(
                section, "text_generator_names", constants.TEXT_GENERATOR_NAMES
            ),
            text_generator_uids=config.get_list(
                section, "text_generator_uids", constants.TEXT_GENERATOR_UIDS
            ),
            pip_names=config.get_list(section, "pip_names", constants.PIP_NAMES),
            pip_uids=config.get_list(section, "pip_uids", constants.PIP_UIDS),
            tracking_names=config.get_list(section, "tracking_names", constants.TRACKING_NAMES),
            tracking_uids=config.get_list(section, "tracking_uids", constants.TRACKING_UIDS),
        )

    def is_text_clip(self, clip: ClipLike) -> bool:
        generator = clip.generator
        if clip.kind is not ClipKind.VIDEO or generator is None:
            return False
        return _contains_any(generator.plugin_uid, self.text_generator_uids) or _contains_any(
            generator.name, self.text_generator_names
        )

    def is_pip_effect(self, effect: EffectLike) -> bool:
        uid = (effect.plugin_uid or "").lower()
        if uid and uid in self.pip_uids:
            return True
        return _contains_any(effect.name, self.pip_names)

    def is_tracking_source(self, effect: EffectLike) -> bool:
        return _contains_any(effect.plugin_uid, self.tracking_uids) or _contains_any(
            effect.name, self.tracking_names
        )
