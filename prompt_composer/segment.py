"""
Segment model for prompt output.

A module's output is an ordered list of segments. Each segment is one of:
styled text, a fill directive that expands to the remaining line width,
or a line terminator.
"""
from abc import ABC, abstractmethod
from dataclasses import dataclass
from itertools import cycle
from typing import Optional

from rich.cells import cell_len
from rich.color import ColorSystem
from rich.style import Style

from .constants import LINE_TERMINATOR


@dataclass(frozen=True)
class StyledString:
    """A finished run of text with its style.

    `str()` returns the ANSI rendering; `plain` the visible text.
    """
    text: str
    style: Optional[Style] = None

    @property
    def plain(self) -> str:
        return self.text

    @property
    def cell_len(self) -> int:
        return cell_len(self.text)

    def __str__(self) -> str:
        if self.style is None:
            return self.text
        return self.style.render(self.text, color_system=ColorSystem.TRUECOLOR)


class Segment(ABC):
    """Base class for all segment kinds."""

    @property
    @abstractmethod
    def value(self) -> str:
        """Rendered value used for emptiness checks and diagnostics."""
        ...

    def raw_text(self) -> str:
        """Underlying text content (empty for fills and line terminators)."""
        return ""

    def display_width(self) -> int:
        """Number of terminal cells the segment occupies before fill resolution."""
        return 0

    @abstractmethod
    def render(self, fill_width: Optional[int] = None) -> StyledString:
        """Render the segment to a finished styled string.

        Args:
            fill_width: Width to expand fill segments to. Ignored by
                other segment kinds.

        Returns:
            The StyledString for this segment.
        """
        ...

    @staticmethod
    def from_text(text: str, style: Optional[Style] = None) -> list['Segment']:
        """Split text into text segments separated by line terminators.

        Args:
            text: Text that may contain newlines
            style: Style applied to every text segment

        Returns:
            List of segments; never empty
        """
        segments: list[Segment] = []
        for line in text.split(LINE_TERMINATOR):
            if segments:
                segments.append(LineTerminator())
            segments.append(TextSegment(line, style))
        return segments

    @staticmethod
    def fill(symbol: str, style: Optional[Style] = None) -> 'FillSegment':
        """Create a fill segment repeating `symbol`."""
        return FillSegment(symbol, style)


@dataclass(frozen=True)
class TextSegment(Segment):
    """A run of styled display text."""
    text: str
    style: Optional[Style] = None

    @property
    def value(self) -> str:
        return self.text

    def raw_text(self) -> str:
        return self.text

    def display_width(self) -> int:
        return cell_len(self.text)

    def render(self, fill_width: Optional[int] = None) -> StyledString:
        return StyledString(self.text, self.style)


_ZERO_WIDTH_JOINER = "\u200d"


def _clusters(text: str) -> list[str]:
    """
    Split text into user-perceived characters.

    Zero-width characters (combining marks, variation selectors, joiners)
    stay with the character before them, and a character following a
    zero-width joiner continues the same cluster.
    """
    clusters: list[str] = []
    for char in text:
        joined = bool(clusters) and clusters[-1].endswith(_ZERO_WIDTH_JOINER)
        if clusters and (joined or cell_len(char) == 0):
            clusters[-1] += char
        else:
            clusters.append(char)
    return clusters


@dataclass(frozen=True)
class FillSegment(Segment):
    """Expands to consume the remaining horizontal space of its line."""
    symbol: str
    style: Optional[Style] = None

    @property
    def value(self) -> str:
        return self.symbol

    def render(self, fill_width: Optional[int] = None) -> StyledString:
        """Repeat the symbol to exactly `fill_width` cells.

        Multi-character symbols are cycled one character cluster at a time;
        a cluster that would overflow the width ends the fill early. No
        width means an empty fill.
        """
        if not fill_width or cell_len(self.symbol) == 0:
            return StyledString("", self.style)

        clusters: list[str] = []
        used = 0
        for cluster in cycle(_clusters(self.symbol)):
            used += cell_len(cluster)
            if used > fill_width:
                break
            clusters.append(cluster)
        return StyledString("".join(clusters), self.style)


@dataclass(frozen=True)
class LineTerminator(Segment):
    """Marks the end of the current display line."""

    @property
    def value(self) -> str:
        return LINE_TERMINATOR

    def render(self, fill_width: Optional[int] = None) -> StyledString:
        return StyledString(LINE_TERMINATOR)
