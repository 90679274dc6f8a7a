"""
Format string templating.

Turns a module's format string plus variable values into a segment list.

Syntax:
    $name, ${name}    variable
    [inner](style)    render `inner` with `style`; the style may use $variables
    (inner)           conditional, kept only if a variable inside is non-empty
    \\x               escape one of [ ] ( ) $ \\

Example:
    segments = (
        StringFormatter("[$symbol$context]($style) in ")
        .map_meta(lambda name: "☸ " if name == "symbol" else None)
        .map_style(lambda name: "cyan bold" if name == "style" else None)
        .map(lambda name: "minikube" if name == "context" else None)
        .parse()
    )
"""
from dataclasses import dataclass, field
from typing import Callable, Optional, Union

from rich.errors import StyleSyntaxError
from rich.style import Style

from .segment import Segment

ESCAPABLE = "[]()$\\"
VARIABLE_CHARS = frozenset("abcdefghijklmnopqrstuvwxyzABCDEFGHIJKLMNOPQRSTUVWXYZ0123456789_")


class FormatError(Exception):
    """Raised when a format string or one of its styles cannot be parsed."""

    def __init__(self, message: str, position: Optional[int] = None):
        self.position = position
        if position is not None:
            message = f"{message} (position {position})"
        super().__init__(message)


@dataclass
class TextElement:
    text: str


@dataclass
class VariableElement:
    name: str


@dataclass
class TextGroup:
    elements: list['Element']
    style: list[Union[TextElement, VariableElement]] = field(default_factory=list)


@dataclass
class Conditional:
    elements: list['Element']


Element = Union[TextElement, VariableElement, TextGroup, Conditional]


class _Parser:
    """Recursive descent parser for format strings."""

    def __init__(self, source: str) -> None:
        self._source = source
        self._pos = 0

    def parse(self) -> list[Element]:
        elements = self._parse_elements(closing=None)
        if self._pos < len(self._source):
            raise FormatError(f"Unexpected '{self._source[self._pos]}'", self._pos)
        return elements

    def _peek(self) -> Optional[str]:
        if self._pos < len(self._source):
            return self._source[self._pos]
        return None

    def _expect(self, char: str) -> None:
        if self._peek() != char:
            found = self._peek()
            raise FormatError(
                f"Expected '{char}' but found {repr(found) if found else 'end of string'}",
                self._pos,
            )
        self._pos += 1

    def _parse_elements(self, closing: Optional[str]) -> list[Element]:
        elements: list[Element] = []
        text: list[str] = []

        def flush() -> None:
            if text:
                elements.append(TextElement("".join(text)))
                text.clear()

        while self._peek() is not None:
            char = self._source[self._pos]
            if char == closing:
                break
            if char == "\\":
                text.append(self._parse_escape())
            elif char == "$":
                flush()
                elements.append(self._parse_variable())
            elif char == "[":
                flush()
                elements.append(self._parse_text_group())
            elif char == "(":
                flush()
                self._pos += 1
                inner = self._parse_elements(closing=")")
                self._expect(")")
                elements.append(Conditional(inner))
            elif char in "])":
                raise FormatError(f"Unexpected '{char}'", self._pos)
            else:
                text.append(char)
                self._pos += 1

        flush()
        return elements

    def _parse_escape(self) -> str:
        start = self._pos
        self._pos += 1
        char = self._peek()
        if char is None or char not in ESCAPABLE:
            raise FormatError("Invalid escape sequence", start)
        self._pos += 1
        return char

    def _parse_variable(self) -> VariableElement:
        start = self._pos
        self._pos += 1
        braced = self._peek() == "{"
        if braced:
            self._pos += 1

        name_start = self._pos
        while self._peek() is not None and self._source[self._pos] in VARIABLE_CHARS:
            self._pos += 1
        name = self._source[name_start:self._pos]
        if not name:
            raise FormatError("Missing variable name after '$'", start)

        if braced:
            self._expect("}")
        return VariableElement(name)

    def _parse_text_group(self) -> TextGroup:
        self._pos += 1
        inner = self._parse_elements(closing="]")
        self._expect("]")
        self._expect("(")

        style: list[Union[TextElement, VariableElement]] = []
        text: list[str] = []
        while self._peek() not in (None, ")"):
            char = self._source[self._pos]
            if char == "$":
                if text:
                    style.append(TextElement("".join(text)))
                    text.clear()
                style.append(self._parse_variable())
            else:
                text.append(char)
                self._pos += 1
        if text:
            style.append(TextElement("".join(text)))
        self._expect(")")
        return TextGroup(inner, style)


def parse_format(source: str) -> list[Element]:
    """
    Parse a format string into elements.

    Args:
        source: The format string

    Returns:
        List of parsed elements

    Raises:
        FormatError: If the string is malformed
    """
    return _Parser(source).parse()


def _collect_variables(elements: list[Element], names: list[str]) -> None:
    for element in elements:
        if isinstance(element, VariableElement):
            if element.name not in names:
                names.append(element.name)
        elif isinstance(element, (TextGroup, Conditional)):
            _collect_variables(element.elements, names)


def _collect_style_variables(elements: list[Element], names: list[str]) -> None:
    for element in elements:
        if isinstance(element, TextGroup):
            for part in element.style:
                if isinstance(part, VariableElement) and part.name not in names:
                    names.append(part.name)
            _collect_style_variables(element.elements, names)
        elif isinstance(element, Conditional):
            _collect_style_variables(element.elements, names)


@dataclass
class _Meta:
    """A variable whose value is itself a format string."""
    elements: list[Element]


VariableValue = Union[str, list[Segment], _Meta]


class StringFormatter:
    """
    Resolves a parsed format string into segments.

    Mappers receive a variable name and return a value, or None when they
    do not know the variable. A variable keeps the first value it was given.
    Variables that stay unmapped render as nothing.
    """

    def __init__(self, format_str: str) -> None:
        """
        Parse `format_str`.

        Raises:
            FormatError: If the format string is malformed
        """
        self._format = format_str
        self._elements = parse_format(format_str)
        self._variables: dict[str, Optional[VariableValue]] = {
            name: None for name in self.get_variables()
        }
        self._style_variables: dict[str, Optional[str]] = {
            name: None for name in self.get_style_variables()
        }

    def get_variables(self) -> list[str]:
        """Names of all variables referenced by the format string."""
        names: list[str] = []
        _collect_variables(self._elements, names)
        return names

    def get_style_variables(self) -> list[str]:
        """Names of all variables referenced inside style strings."""
        names: list[str] = []
        _collect_style_variables(self._elements, names)
        return names

    def _unmapped(self) -> list[str]:
        return [name for name, value in self._variables.items() if value is None]

    def map_meta(self, mapper: Callable[[str], Optional[str]]) -> 'StringFormatter':
        """
        Map variables to sub-format strings (e.g. a configurable symbol).

        Variables and style variables used by the sub-formats become
        available to the other mappers. Meta variables referenced from a
        sub-format render nothing.

        Raises:
            FormatError: If a sub-format is malformed
        """
        for name in self._unmapped():
            value = mapper(name)
            if value is None:
                continue
            elements = parse_format(value)
            self._variables[name] = _Meta(elements)

            nested: list[str] = []
            _collect_variables(elements, nested)
            for nested_name in nested:
                self._variables.setdefault(nested_name, None)
            nested_styles: list[str] = []
            _collect_style_variables(elements, nested_styles)
            for nested_name in nested_styles:
                self._style_variables.setdefault(nested_name, None)
        return self

    def map_style(self, mapper: Callable[[str], Optional[str]]) -> 'StringFormatter':
        """Map style variables to style strings."""
        for name, value in self._style_variables.items():
            if value is None:
                self._style_variables[name] = mapper(name)
        return self

    def map(self, mapper: Callable[[str], Optional[str]]) -> 'StringFormatter':
        """Map variables to plain text."""
        for name in self._unmapped():
            value = mapper(name)
            if value is not None:
                self._variables[name] = str(value)
        return self

    def map_variables_to_segments(
        self, mapper: Callable[[str], Optional[list[Segment]]]
    ) -> 'StringFormatter':
        """Map variables to pre-built segment lists that keep their own styles."""
        for name in self._unmapped():
            value = mapper(name)
            if value is not None:
                self._variables[name] = list(value)
        return self

    def parse(self, default_style: Optional[Style] = None) -> list[Segment]:
        """
        Render the format string into segments.

        Args:
            default_style: Style for text outside any text group

        Returns:
            The rendered segments

        Raises:
            FormatError: If a style string cannot be parsed
        """
        return self._render(self._elements, default_style)

    def _render(
        self, elements: list[Element], style: Optional[Style], in_meta: bool = False
    ) -> list[Segment]:
        segments: list[Segment] = []
        for element in elements:
            if isinstance(element, TextElement):
                segments.extend(Segment.from_text(element.text, style))
            elif isinstance(element, VariableElement):
                segments.extend(self._render_variable(element.name, style, in_meta))
            elif isinstance(element, TextGroup):
                segments.extend(self._render(element.elements, self._resolve_style(element), in_meta))
            elif self._should_show(element.elements, in_meta):
                segments.extend(self._render(element.elements, style, in_meta))
        return segments

    def _render_variable(self, name: str, style: Optional[Style], in_meta: bool = False) -> list[Segment]:
        value = self._variables.get(name)
        if value is None:
            return []
        if isinstance(value, _Meta):
            # Meta values are resolved one level deep only, so a sub-format
            # naming a meta variable (even itself) renders nothing
            if in_meta:
                return []
            return self._render(value.elements, style, in_meta=True)
        if isinstance(value, list):
            return value
        return Segment.from_text(value, style)

    def _resolve_style(self, group: TextGroup) -> Style:
        parts: list[str] = []
        for part in group.style:
            if isinstance(part, TextElement):
                parts.append(part.text)
            else:
                parts.append(self._style_variables.get(part.name) or "")
        definition = " ".join("".join(parts).split())
        try:
            return Style.parse(definition)
        except StyleSyntaxError as e:
            raise FormatError(f"Invalid style '{definition}': {e}") from e

    def _should_show(self, elements: list[Element], in_meta: bool = False) -> bool:
        names: list[str] = []
        _collect_variables(elements, names)
        for name in names:
            value = self._variables.get(name)
            if value is None:
                continue
            if isinstance(value, _Meta):
                if not in_meta and self._should_show(value.elements, in_meta=True):
                    return True
            elif isinstance(value, list):
                if any(segment.value for segment in value):
                    return True
            elif value:
                return True
        return False

    def __repr__(self) -> str:
        return f"StringFormatter({self._format!r})"
