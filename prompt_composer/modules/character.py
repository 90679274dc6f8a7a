"""
Character module: the prompt symbol, colored by the last exit status.
"""
import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Optional

from ..config import ModuleConfig
from ..formatter import FormatError, StringFormatter
from ..module import Module

if TYPE_CHECKING:
    from ..context import Context

logger = logging.getLogger(__name__)


@dataclass
class CharacterConfig(ModuleConfig):
    """Options for the character module."""
    format: str = "$symbol "
    success_symbol: str = "[❯](bold green)"
    error_symbol: str = "[❯](bold red)"


def module(context: 'Context') -> Optional[Module]:
    """Build the character module."""
    module = context.new_module("character")
    config = CharacterConfig.try_load(module.config)
    if config.disabled:
        return None

    failed = context.status_code not in (None, 0)
    symbol = config.error_symbol if failed else config.success_symbol

    try:
        segments = (
            StringFormatter(config.format)
            .map_meta(lambda variable: symbol if variable == "symbol" else None)
            .parse()
        )
    except FormatError as e:
        logger.warning(f"Error in module `character`:\n{e}")
        return None

    module.set_segments(segments)
    return module
