"""
Line composition for segment sequences.

Groups segments into display lines and resolves fill segments against an
optional terminal width.
"""
from typing import Optional, Sequence

from .segment import FillSegment, LineTerminator, Segment, StyledString


def compose_line(
    segments: Sequence[Segment],
    start: int = 0,
    width: Optional[int] = None,
) -> tuple[list[StyledString], int]:
    """
    Compose a single logical line starting at `start`.

    Free space on the line (`width` minus the width used by text) is split
    evenly between its fills with integer division. The remainder is
    dropped. Without a width, or without free space, fills render empty;
    overflowing text is never clipped.

    Args:
        segments: The full segment sequence
        start: Index of the first segment of the line
        width: Optional target width in terminal cells

    Returns:
        Tuple of (resolved line, index of the first unconsumed segment).
        A consumed line terminator is the last element of the line.
    """
    used = 0
    current: list[StyledString] = []
    chunks: list[tuple[list[StyledString], FillSegment]] = []

    index = start
    while index < len(segments):
        segment = segments[index]
        index += 1

        if isinstance(segment, FillSegment):
            chunks.append((current, segment))
            current = []
            continue

        used += segment.display_width()
        current.append(segment.render())

        if isinstance(segment, LineTerminator):
            break

    if not chunks:
        return current, index

    fill_width = 0
    if width is not None and width > used:
        fill_width = (width - used) // len(chunks)

    line: list[StyledString] = []
    for chunk, fill in chunks:
        line.extend(chunk)
        line.append(fill.render(fill_width))
    line.extend(current)
    return line, index


def compose_lines(segments: Sequence[Segment], width: Optional[int] = None) -> list[StyledString]:
    """
    Compose every line of a segment sequence.

    Args:
        segments: Segments to compose
        width: Optional target width applied to each line independently

    Returns:
        Finished styled strings for all lines, in order
    """
    result: list[StyledString] = []
    index = 0
    while index < len(segments):
        line, index = compose_line(segments, index, width)
        result.extend(line)
    return result


def merge_adjacent(strings: Sequence[StyledString]) -> list[StyledString]:
    """
    Join neighbouring strings that share a style.

    Visible output is unchanged; only redundant escape codes between
    equally styled runs are dropped.
    """
    merged: list[StyledString] = []
    for styled in strings:
        if merged and merged[-1].style == styled.style:
            merged[-1] = StyledString(merged[-1].text + styled.text, styled.style)
        else:
            merged.append(styled)
    return merged
