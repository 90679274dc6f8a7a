"""
prompt_composer - Compose styled shell prompts from status modules.
"""
from .constants import APP_NAME, APP_VERSION, APP_DESCRIPTION
from .module import Module
from .segment import FillSegment, LineTerminator, Segment, StyledString, TextSegment
from .shell import Shell

__version__ = APP_VERSION
__all__ = [
    'APP_NAME',
    'APP_VERSION',
    'APP_DESCRIPTION',
    'FillSegment',
    'LineTerminator',
    'Module',
    'Segment',
    'Shell',
    'StyledString',
    'TextSegment',
]
