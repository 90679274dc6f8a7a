"""
Module container for prompt output.

A module holds the segments produced for one integration (e.g. the
kubernetes module shows the current cluster context) together with its
name, description, config section and the time it took to compute.
"""
from datetime import timedelta
from typing import Any, Mapping, Optional

from .composer import compose_lines, merge_adjacent
from .segment import Segment
from .shell import Shell, needs_wrapping, wrap_colorseq_for_shell


class Module:
    """
    A named, ordered collection of segments.

    Example:
        module = Module("kubernetes", "The current Kubernetes context")
        module.set_segments(Segment.from_text("minikube"))
        print(module)
    """

    def __init__(
        self,
        name: str,
        description: str,
        config: Optional[Mapping[str, Any]] = None,
    ) -> None:
        """
        Create a module with no segments.

        Args:
            name: Identifier used in configuration and logging
            description: Human readable description
            config: The module's configuration section, if any
        """
        self.config = config
        self._name = name
        self._description = description
        self.segments: list[Segment] = []
        self.duration = timedelta()

    @property
    def name(self) -> str:
        return self._name

    @property
    def description(self) -> str:
        return self._description

    def set_segments(self, segments: list[Segment]) -> None:
        """Replace the module's segments."""
        self.segments = list(segments)

    def is_empty(self) -> bool:
        """Whether every segment renders to an empty value.

        Values are not trimmed: spaces and line breaks change the final
        output, so they count as content.
        """
        return all(segment.value == "" for segment in self.segments)

    def segment_values(self) -> list[str]:
        """Get the value of each segment."""
        return [segment.value for segment in self.segments]

    def ansi_strings(self) -> list[str]:
        """Render for a generic shell with no width constraint."""
        return self.ansi_strings_for_shell(Shell.UNKNOWN, None)

    def ansi_strings_for_shell(self, shell: Shell, width: Optional[int] = None) -> list[str]:
        """
        Render the module's segments for a shell.

        Args:
            shell: Target shell; bash, zsh and tcsh get escape markers
            width: Optional terminal width used to resolve fill segments

        Returns:
            Finished ANSI strings, ready to be concatenated. Neighbouring
            runs with the same style are merged.
        """
        lines = merge_adjacent(compose_lines(self.segments, width))
        strings = [str(styled) for styled in lines]
        if needs_wrapping(shell):
            return [wrap_colorseq_for_shell(s, shell) for s in strings]
        return strings

    def __str__(self) -> str:
        return "".join(self.ansi_strings())

    def __repr__(self) -> str:
        return f"Module(name={self._name!r}, segments={len(self.segments)})"
