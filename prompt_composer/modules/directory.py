"""
Directory module: the current working directory, shortened.
"""
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING, Optional

from ..config import ModuleConfig
from ..formatter import FormatError, StringFormatter
from ..module import Module

if TYPE_CHECKING:
    from ..context import Context

logger = logging.getLogger(__name__)


@dataclass
class DirectoryConfig(ModuleConfig):
    """Options for the directory module."""
    truncation_length: int = 3
    truncation_symbol: str = ""
    home_symbol: str = "~"
    format: str = "[$path]($style) "
    style: str = "cyan bold"


def contract_path(path: Path, home: Optional[Path], home_symbol: str) -> str:
    """
    Replace the home directory prefix of `path` with `home_symbol`.

    Args:
        path: Absolute path to display
        home: The user's home directory, if known
        home_symbol: Replacement for the home prefix

    Returns:
        The path as a forward-slash string
    """
    if home is not None:
        try:
            relative = path.relative_to(home)
        except ValueError:
            relative = None
        if relative is not None:
            if relative == Path("."):
                return home_symbol
            return f"{home_symbol}/{relative.as_posix()}"
    return path.as_posix()


def truncate(dir_string: str, length: int, symbol: str = "") -> str:
    """
    Keep only the last `length` components of a path string.

    A length of zero or less disables truncation.
    """
    if length <= 0:
        return dir_string

    components = [c for c in dir_string.split("/") if c]
    if len(components) <= length:
        return dir_string
    return symbol + "/".join(components[-length:])


def module(context: 'Context') -> Optional[Module]:
    """Build the directory module."""
    module = context.new_module("directory")
    config = DirectoryConfig.try_load(module.config)
    if config.disabled:
        return None

    contracted = contract_path(context.current_dir, context.get_home(), config.home_symbol)
    display = truncate(contracted, config.truncation_length, config.truncation_symbol)

    try:
        segments = (
            StringFormatter(config.format)
            .map_style(lambda variable: config.style if variable == "style" else None)
            .map(lambda variable: display if variable == "path" else None)
            .parse()
        )
    except FormatError as e:
        logger.warning(f"Error in module `directory`:\n{e}")
        return None

    module.set_segments(segments)
    return module
