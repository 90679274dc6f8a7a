"""
Fill module: pads the rest of the line with a repeated symbol.
"""
import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Optional

from rich.errors import StyleSyntaxError
from rich.style import Style

from ..config import ModuleConfig
from ..module import Module
from ..segment import Segment

if TYPE_CHECKING:
    from ..context import Context

logger = logging.getLogger(__name__)


@dataclass
class FillConfig(ModuleConfig):
    """Options for the fill module."""
    symbol: str = "."
    style: str = "bold black"


def module(context: 'Context') -> Optional[Module]:
    """Build the fill module."""
    module = context.new_module("fill")
    config = FillConfig.try_load(module.config)
    if config.disabled:
        return None

    try:
        style = Style.parse(config.style)
    except StyleSyntaxError as e:
        logger.warning(f"Error in module `fill`: invalid style '{config.style}': {e}")
        return None

    module.set_segments([Segment.fill(config.symbol, style)])
    return module
