"""
Module detectors.

Each detector inspects the context and returns a populated Module, or None
when it has nothing to show.
"""
import logging
from typing import TYPE_CHECKING, Callable, Final, Optional

from ..module import Module
from . import character, cmd_duration, directory, fill, kubernetes, line_break

if TYPE_CHECKING:
    from ..context import Context

logger = logging.getLogger(__name__)

# Kept in alphabetical order
ALL_MODULES: Final[tuple[str, ...]] = (
    "character",
    "cmd_duration",
    "directory",
    "fill",
    "kubernetes",
    "line_break",
)

DESCRIPTIONS: Final[dict[str, str]] = {
    "character": "A character (usually an arrow) beside where the text is entered in your terminal",
    "cmd_duration": "How long the last command took to execute",
    "directory": "The current working directory",
    "fill": "Fills the remaining space on the line with a pad string",
    "kubernetes": "The current Kubernetes context name and, if set, the namespace",
    "line_break": "Separates the prompt into two lines",
}

_DETECTORS: Final[dict[str, Callable[['Context'], Optional[Module]]]] = {
    "character": character.module,
    "cmd_duration": cmd_duration.module,
    "directory": directory.module,
    "fill": fill.module,
    "kubernetes": kubernetes.module,
    "line_break": line_break.module,
}


def handle(name: str, context: 'Context') -> Optional[Module]:
    """
    Run the detector for a module.

    Args:
        name: Module name
        context: Current rendering context

    Returns:
        The populated Module, or None if the module is unknown or has
        nothing to show
    """
    detector = _DETECTORS.get(name)
    if detector is None:
        logger.warning(f"Unknown module: {name}")
        return None
    return detector(context)


__all__ = ["ALL_MODULES", "DESCRIPTIONS", "handle"]
