"""
Caption width estimation.

Measures the longest line of a caption so the pop animation (and the
full-width fit) can be scaled to the text. Converting rich text to plain text
is the host's job: pass a decoder callable if the generator stores markup.
Decoding is best-effort; a failing decoder means "no estimate".
"""

import logging
from collections.abc import Callable
from typing import Protocol, runtime_checkable

from ..core.constants import TEXT_PARAMETER
from ..core.exceptions import handle_errors
from ..host.protocols import ClipLike, ParameterKind
from ..timing import ZERO

logger = logging.getLogger(__name__)


@runtime_checkable
class TextWidthEstimator(Protocol):
    """Longest-line metric of a caption text."""

    def longest_line_length(self, text: str | None) -> int | None:
        """Characters in the longest line, or None if unknown."""
        ...


def longest_line(text: str) -> int:
    """Length of the longest line; CRLF and CR count as line breaks."""
    normalized = text.replace("\r\n", "\n").replace("\r", "\n")
    return max((len(line) for line in normalized.split("\n")), default=0)


class PlainTextWidthEstimator:
    """
    TextWidthEstimator for plain text, optionally behind a decoder.

    Args:
        decoder: Converts the stored text (e.g. rich text) to plain text
    """

    def __init__(self, decoder: Callable[[str], str] | None = None):
        self.decoder = decoder

    @handle_errors(default_return=None, log_level=logging.WARNING)
    def decode(self, text: str) -> str | None:
        if self.decoder is None:
            return text
        return self.decoder(text)

    def longest_line_length(self, text: str | None) -> int | None:
        if not text:
            return None
        plain = self.decode(text)
        if not plain:
            return None
        length = longest_line(plain)
        return length if length > 0 else None


def caption_text(clip: ClipLike, parameter_name: str = TEXT_PARAMETER) -> str | None:
    """Raw text stored in the clip generator's text parameter, if readable."""
    generator = clip.generator
    if generator is None:
        return None
    parameter = generator.find_parameter(parameter_name, ParameterKind.STRING)
    if parameter is None:
        return None
    try:
        return parameter.get_value_at_time(ZERO)
    except (TypeError, ValueError, LookupError) as e:
        logger.warning(f"Text of clip {clip.name!r} unreadable: {e}")
        return None
