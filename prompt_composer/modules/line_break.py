"""
Line break module.
"""
from dataclasses import dataclass
from typing import TYPE_CHECKING, Optional

from ..config import ModuleConfig
from ..constants import LINE_TERMINATOR
from ..module import Module
from ..segment import Segment

if TYPE_CHECKING:
    from ..context import Context


@dataclass
class LineBreakConfig(ModuleConfig):
    pass


def module(context: 'Context') -> Optional[Module]:
    """Build the line_break module."""
    module = context.new_module("line_break")
    if LineBreakConfig.try_load(module.config).disabled:
        return None

    module.set_segments(Segment.from_text(LINE_TERMINATOR))
    return module
