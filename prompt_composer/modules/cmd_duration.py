"""
Command duration module: shows how long the last command ran.
"""
import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Optional

from ..config import ModuleConfig
from ..formatter import FormatError, StringFormatter
from ..module import Module
from ..utils import format_duration

if TYPE_CHECKING:
    from ..context import Context

logger = logging.getLogger(__name__)


@dataclass
class CmdDurationConfig(ModuleConfig):
    """Options for the cmd_duration module."""
    min_time: int = 2_000
    format: str = "took [$duration]($style) "
    style: str = "yellow bold"
    show_milliseconds: bool = False


def module(context: 'Context') -> Optional[Module]:
    """Build the cmd_duration module."""
    module = context.new_module("cmd_duration")
    config = CmdDurationConfig.try_load(module.config)
    if config.disabled:
        return None

    elapsed = context.cmd_duration_ms
    if elapsed is None or elapsed < config.min_time:
        return None

    duration = format_duration(elapsed, config.show_milliseconds)
    try:
        segments = (
            StringFormatter(config.format)
            .map_style(lambda variable: config.style if variable == "style" else None)
            .map(lambda variable: duration if variable == "duration" else None)
            .parse()
        )
    except FormatError as e:
        logger.warning(f"Error in module `cmd_duration`:\n{e}")
        return None

    module.set_segments(segments)
    return module
