"""
Property-based tests for line composition and fill distribution.
"""

import allure
from hypothesis import given, settings, strategies as st

from prompt_composer.composer import compose_line, compose_lines, merge_adjacent
from prompt_composer.segment import FillSegment, LineTerminator, StyledString, TextSegment


ascii_text = st.text(alphabet="abcdefghijklmnopqrstuvwxyz ._/", max_size=20)


def plain(strings: list[StyledString]) -> str:
    return "".join(s.plain for s in strings)


@allure.feature("Line Composer")
@allure.story("Even fill distribution")
@allure.severity(allure.severity_level.CRITICAL)
@settings(max_examples=100)
@given(before=ascii_text, middle=ascii_text, after=ascii_text)
def test_two_fills_split_free_space_evenly(before: str, middle: str, after: str):
    """With ten free cells, each of two fills gets exactly five."""
    segments = [
        TextSegment(before),
        FillSegment("-"),
        TextSegment(middle),
        FillSegment("="),
        TextSegment(after),
    ]
    used = len(before) + len(middle) + len(after)

    line = compose_lines(segments, used + 10)

    assert [s.plain for s in line] == [before, "-" * 5, middle, "=" * 5, after]


@allure.feature("Line Composer")
@allure.story("No room for fills")
@allure.severity(allure.severity_level.CRITICAL)
@settings(max_examples=100)
@given(before=ascii_text, middle=ascii_text, after=ascii_text, data=st.data())
def test_fills_collapse_without_room(before: str, middle: str, after: str, data):
    """When the width is at most the used width, every fill is empty."""
    used = len(before) + len(middle) + len(after)
    width = data.draw(st.integers(min_value=0, max_value=used))
    segments = [
        TextSegment(before),
        FillSegment("-"),
        TextSegment(middle),
        FillSegment("="),
        TextSegment(after),
    ]

    line = compose_lines(segments, width)

    assert [s.plain for s in line] == [before, "", middle, "", after]


@allure.feature("Line Composer")
@allure.story("Remainder is dropped")
@allure.severity(allure.severity_level.CRITICAL)
@settings(max_examples=100)
@given(text=ascii_text)
def test_fill_remainder_is_dropped(text: str):
    """Three fills sharing ten free cells get three each; one cell is lost."""
    segments = [
        FillSegment("-"),
        TextSegment(text),
        FillSegment("-"),
        FillSegment("-"),
    ]

    line = compose_lines(segments, len(text) + 10)
    fills = [line[0].plain, line[2].plain, line[3].plain]

    assert fills == ["---"] * 3
    assert sum(len(f) for f in fills) == 9
    assert len(plain(line)) == len(text) + 9


@allure.feature("Line Composer")
@allure.story("Width is ignored without fills")
@allure.severity(allure.severity_level.NORMAL)
@settings(max_examples=100)
@given(
    texts=st.lists(ascii_text, max_size=6),
    width=st.one_of(st.none(), st.integers(min_value=0, max_value=200)),
)
def test_width_has_no_effect_without_fills(texts: list[str], width):
    segments = [TextSegment(t) for t in texts]

    assert plain(compose_lines(segments, width)) == "".join(texts)
    assert plain(compose_lines(segments, width)) == plain(compose_lines(segments, None))


@allure.feature("Line Composer")
@allure.story("Fills are empty without a width")
@allure.severity(allure.severity_level.NORMAL)
def test_fills_empty_without_width():
    segments = [TextSegment("a"), FillSegment("-"), TextSegment("b")]

    assert [s.plain for s in compose_lines(segments)] == ["a", "", "b"]


@allure.feature("Line Composer")
@allure.story("Overflow is not clipped")
@allure.severity(allure.severity_level.NORMAL)
def test_overflow_is_not_clipped():
    segments = [TextSegment("a very long line"), FillSegment("-"), TextSegment("end")]

    assert plain(compose_lines(segments, 5)) == "a very long lineend"


@allure.feature("Line Composer")
@allure.story("End-to-end fill example")
@allure.severity(allure.severity_level.CRITICAL)
def test_fill_example_line():
    segments = [TextSegment("git"), FillSegment("-"), TextSegment("branch")]

    assert plain(compose_lines(segments, 20)) == "git" + "-" * 11 + "branch"


@allure.feature("Line Composer")
@allure.story("Wide characters count as two cells")
@allure.severity(allure.severity_level.NORMAL)
def test_wide_characters_reduce_fill():
    segments = [TextSegment("日本"), FillSegment("-")]

    assert plain(compose_lines(segments, 10)) == "日本" + "-" * 6


@allure.feature("Line Composer")
@allure.story("Lines are resolved independently")
@allure.severity(allure.severity_level.CRITICAL)
def test_each_line_resolves_its_own_fills():
    segments = [
        TextSegment("a"),
        FillSegment("-"),
        TextSegment("b"),
        LineTerminator(),
        TextSegment("long"),
        FillSegment("."),
        TextSegment("d"),
    ]

    assert plain(compose_lines(segments, 8)) == "a------b\nlong...d"


@allure.feature("Line Composer")
@allure.story("One line per call")
@allure.severity(allure.severity_level.NORMAL)
def test_compose_line_stops_after_terminator():
    segments = [TextSegment("a"), LineTerminator(), TextSegment("b")]

    first, index = compose_line(segments, 0, None)
    assert plain(first) == "a\n"
    assert index == 2

    second, index = compose_line(segments, index, None)
    assert plain(second) == "b"
    assert index == 3


@allure.feature("Line Composer")
@allure.story("Segment order is preserved")
@allure.severity(allure.severity_level.CRITICAL)
@settings(max_examples=100)
@given(texts=st.lists(ascii_text, min_size=1, max_size=8))
def test_segment_order_preserved_without_width(texts: list[str]):
    segments = []
    for text in texts:
        segments.append(TextSegment(text))
        segments.append(FillSegment("-"))

    assert plain(compose_lines(segments)) == "".join(texts)


@allure.feature("Line Composer")
@allure.story("Merging keeps visible output")
@allure.severity(allure.severity_level.NORMAL)
@settings(max_examples=100)
@given(texts=st.lists(ascii_text, min_size=1, max_size=8))
def test_merge_adjacent_keeps_plain_text(texts: list[str]):
    strings = [StyledString(t) for t in texts]

    merged = merge_adjacent(strings)

    assert plain(merged) == "".join(texts)
    assert len(merged) == 1
