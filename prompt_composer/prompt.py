"""
Prompt orchestration.

Expands the root format string, runs the module detectors it references
and renders the combined segments for the target shell and width.
"""
import logging
import re
import time
from datetime import timedelta
from typing import Optional

from rich.console import Console
from rich.table import Table
from rich.text import Text

from .constants import LINE_TERMINATOR, PROMPT_ORDER
from .context import Context
from .formatter import FormatError, StringFormatter
from .module import Module
from .modules import ALL_MODULES, DESCRIPTIONS, handle
from .segment import LineTerminator, Segment
from .utils import format_timing

logger = logging.getLogger(__name__)

FALLBACK_PROMPT = "> "

# Escapes are matched first so an escaped `\$all` is left alone
_ALL_VARIABLE = re.compile(r"\\.|(\$all(?!\w)|\$\{all\})", re.DOTALL)


def expand_all(format_str: str) -> str:
    """
    Replace `$all` with every module of the default order that the format
    string does not already reference.

    Raises:
        FormatError: If the format string is malformed
    """
    if not any(match.group(1) for match in _ALL_VARIABLE.finditer(format_str)):
        return format_str

    referenced = set(StringFormatter(format_str).get_variables())
    remaining = "".join(f"${{{name}}}" for name in PROMPT_ORDER if name not in referenced)
    return _ALL_VARIABLE.sub(lambda match: remaining if match.group(1) else match.group(0), format_str)


def compute_module(name: str, context: Context) -> Optional[Module]:
    """
    Run a module's detector and record how long it took.

    Args:
        name: Module name
        context: Current rendering context

    Returns:
        The module, or None if it has nothing to show
    """
    start = time.perf_counter()
    module = handle(name, context)
    if module is not None:
        module.duration = timedelta(seconds=time.perf_counter() - start)
        logger.debug(f"Computed module {name} in {format_timing(module.duration)}")
    return module


def _module_names(context: Context) -> list[str]:
    names = StringFormatter(expand_all(context.config.format)).get_variables()
    unknown = [name for name in names if name not in ALL_MODULES]
    for name in unknown:
        logger.warning(f"Unknown module '{name}' in prompt format")
    return [name for name in names if name in ALL_MODULES]


def compute_modules(context: Context) -> list[Module]:
    """
    Compute every non-empty module referenced by the root format.

    Raises:
        FormatError: If the root format is malformed
    """
    modules: list[Module] = []
    for name in _module_names(context):
        module = compute_module(name, context)
        if module is not None and not module.is_empty():
            modules.append(module)
    return modules


def get_prompt(context: Context) -> str:
    """
    Render the full prompt.

    Fill segments are resolved across the whole line, so a `$fill` between
    two modules right-aligns everything after it.

    Args:
        context: Current rendering context

    Returns:
        The prompt, ready to be assigned to the shell's prompt variable.
        An invalid root format yields a minimal fallback prompt.
    """
    def map_module(name: str) -> Optional[list[Segment]]:
        if name not in ALL_MODULES:
            logger.warning(f"Unknown module '{name}' in prompt format")
            return None
        module = compute_module(name, context)
        if module is None or module.is_empty():
            return None
        return module.segments

    try:
        segments = (
            StringFormatter(expand_all(context.config.format))
            .map_variables_to_segments(map_module)
            .parse()
        )
    except FormatError as e:
        logger.error(f"Invalid prompt format: {e}")
        return FALLBACK_PROMPT

    if context.config.add_newline:
        segments = [LineTerminator(), *segments]

    root = Module("prompt", "The complete prompt", None)
    root.set_segments(segments)
    return "".join(root.ansi_strings_for_shell(context.shell, context.width))


def get_module(name: str, context: Context) -> Optional[str]:
    """
    Render a single module.

    Args:
        name: Module name
        context: Current rendering context

    Returns:
        The rendered module ("" when it has nothing to show), or None if
        the module does not exist
    """
    if name not in ALL_MODULES:
        logger.warning(f"Unknown module: {name}")
        return None

    module = compute_module(name, context)
    if module is None:
        return ""
    return "".join(module.ansi_strings_for_shell(context.shell, context.width))


def _plain_value(module: Module) -> str:
    return "".join(module.segment_values()).replace(LINE_TERMINATOR, "\\n")


def render_timings(modules: list[Module], console: Console) -> None:
    """Print a table of module computation times, slowest first."""
    table = Table(title="Module timings", border_style="dim")
    table.add_column("Module", style="bold")
    table.add_column("Time", justify="right", style="yellow")
    table.add_column("Output", overflow="fold")

    total = timedelta()
    for module in sorted(modules, key=lambda m: m.duration, reverse=True):
        total += module.duration
        table.add_row(module.name, format_timing(module.duration), _plain_value(module))

    console.print(table)
    console.print(f"Total: {format_timing(total)}", style="dim")


def render_explain(modules: list[Module], console: Console) -> None:
    """Print each module's rendered output next to its description."""
    table = Table(title="Prompt modules", border_style="dim")
    table.add_column("Output")
    table.add_column("Description", style="dim")

    for module in modules:
        table.add_row(Text.from_ansi(str(module).replace(LINE_TERMINATOR, "\\n")), module.description)

    console.print(table)


def render_module_list(console: Console) -> None:
    """Print every supported module with its description."""
    table = Table(title="Supported modules", border_style="dim")
    table.add_column("Module", style="bold cyan")
    table.add_column("Description")

    for name in ALL_MODULES:
        table.add_row(name, DESCRIPTIONS[name])

    console.print(table)
