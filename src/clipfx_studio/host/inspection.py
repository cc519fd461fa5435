"""
Parameter dump for effects, used to discover parameter names on a clip.

One line per parameter: ``index | kind | animated/static | name = value``.
"""

import logging
from typing import Any

from ..core.constants import PARAMETER_DUMP_LIMIT
from ..timing import ZERO
from .protocols import AnimatedParameter, ClipLike, EffectLike, ParameterKind, Point2D

logger = logging.getLogger(__name__)


def format_value(parameter: AnimatedParameter) -> str:
    """Static (or time zero) value of a parameter as text."""
    try:
        value: Any = parameter.get_value_at_time(ZERO)
    except (TypeError, ValueError, LookupError) as e:
        logger.debug(f"Parameter {parameter.name!r} unreadable: {e}")
        return "(unreadable)"

    kind = parameter.kind
    if kind is ParameterKind.VECTOR2:
        point = value if isinstance(value, Point2D) else Point2D(*value)
        return f"{point.x}, {point.y}"
    if kind is ParameterKind.SCALAR:
        return str(value)
    if kind is ParameterKind.BOOLEAN:
        return str(bool(value))
    if kind is ParameterKind.STRING:
        return value or ""
    if kind is ParameterKind.CHOICE:
        return str(value)
    raise ValueError(f"Unhandled parameter kind: {kind!r}")


def describe_effect(effect: EffectLike, limit: int = PARAMETER_DUMP_LIMIT) -> str:
    """
    Multi-line parameter dump of one effect.

    Args:
        effect: Effect to describe
        limit: Maximum length before the dump is truncated

    Returns:
        Dump text, ending with "... (truncated)" if it exceeded `limit`
    """
    lines = [effect.name or "(unknown FX)", "Parameter dump"]
    for index, parameter in enumerate(effect.parameters.values()):
        state = "animated" if parameter.is_animated else "static"
        lines.append(
            f"{index:03d} | {parameter.kind.value} | {state} | "
            f"{parameter.name} = {format_value(parameter)}"
        )

    dump = "\n".join(lines)
    if len(dump) > limit:
        return dump[:limit] + "\n... (truncated)"
    return dump


def describe_clip(clip: ClipLike, limit: int = PARAMETER_DUMP_LIMIT) -> list[str]:
    """One dump per effect on the clip, in applied order."""
    return [describe_effect(effect, limit) for effect in clip.effects]
