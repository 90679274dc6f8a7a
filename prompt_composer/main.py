"""
Main entry point for prompt_composer.
"""
import argparse
import logging
import os
import sys
from pathlib import Path
from typing import Optional

from rich.console import Console

from .config import ConfigError, load_config
from .constants import APP_DESCRIPTION, APP_NAME, APP_VERSION, LOG_ENV_VAR, SHELL_ENV_VAR
from .context import Context
from .formatter import FormatError
from .shell import Shell


def setup_logging() -> None:
    """Send log records to stderr, at the level named by the environment."""
    level_name = os.environ.get(LOG_ENV_VAR, "WARNING").strip().upper()
    level = getattr(logging, level_name, logging.WARNING)
    if not isinstance(level, int):
        level = logging.WARNING

    logging.basicConfig(
        level=level,
        format="[%(levelname)s] %(name)s: %(message)s",
        stream=sys.stderr,
    )


def _positive_int(value: str) -> int:
    number = int(value)
    if number <= 0:
        raise argparse.ArgumentTypeError(f"expected a positive integer, got {value}")
    return number


def parse_args(argv: Optional[list[str]] = None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        prog=APP_NAME,
        description=APP_DESCRIPTION
    )

    parser.add_argument(
        "-v", "--version",
        action="version",
        version=f"{APP_NAME} {APP_VERSION}"
    )

    common = argparse.ArgumentParser(add_help=False)
    common.add_argument(
        "--shell",
        type=str,
        help=f"Shell to render for (bash, zsh, tcsh, fish, ...); defaults to ${SHELL_ENV_VAR}"
    )
    common.add_argument(
        "-w", "--terminal-width",
        type=_positive_int,
        help="Terminal width in columns (detected when omitted)"
    )
    common.add_argument(
        "-s", "--status",
        type=int,
        help="Exit status of the previous command"
    )
    common.add_argument(
        "-d", "--cmd-duration",
        type=int,
        help="Execution time of the previous command, in milliseconds"
    )
    common.add_argument(
        "-p", "--path",
        type=str,
        help="Directory to render the prompt for"
    )
    common.add_argument(
        "--config",
        type=str,
        help="Path to config file"
    )

    subparsers = parser.add_subparsers(dest="command")
    subparsers.add_parser("prompt", parents=[common], help="Print the full prompt")
    module_parser = subparsers.add_parser("module", parents=[common], help="Print a single module")
    module_parser.add_argument("name", help="Name of the module")
    subparsers.add_parser("timings", parents=[common], help="Show how long each module took")
    subparsers.add_parser("explain", parents=[common], help="Explain the modules in the prompt")
    subparsers.add_parser("modules", help="List supported modules")

    return parser.parse_args(argv)


def build_context(args: argparse.Namespace) -> Context:
    """
    Create the rendering context from parsed arguments.

    Raises:
        ConfigError: If the config file cannot be loaded
    """
    config = load_config(Path(args.config).expanduser() if args.config else None)
    shell = Shell.from_name(args.shell or os.environ.get(SHELL_ENV_VAR))
    width = args.terminal_width or Console().width
    current_dir = Path(args.path).expanduser().resolve() if args.path else Path.cwd()

    return Context(
        config=config,
        shell=shell,
        width=width,
        current_dir=current_dir,
        status_code=args.status,
        cmd_duration_ms=args.cmd_duration,
    )


def main(argv: Optional[list[str]] = None) -> int:
    """Main entry point."""
    from .prompt import (
        compute_modules,
        get_module,
        get_prompt,
        render_explain,
        render_module_list,
        render_timings,
    )

    setup_logging()
    args = parse_args(argv)
    console = Console()

    if args.command is None:
        print(f"Usage: {APP_NAME} {{prompt,module,timings,explain,modules}} [options]")
        return 1

    if args.command == "modules":
        render_module_list(console)
        return 0

    try:
        context = build_context(args)
    except ConfigError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    if args.command == "prompt":
        sys.stdout.write(get_prompt(context))
        return 0

    if args.command == "module":
        output = get_module(args.name, context)
        if output is None:
            print(f"Error: unknown module '{args.name}'", file=sys.stderr)
            return 1
        sys.stdout.write(output)
        return 0

    try:
        modules = compute_modules(context)
    except FormatError as e:
        print(f"Error: invalid prompt format: {e}", file=sys.stderr)
        return 1

    if args.command == "timings":
        render_timings(modules, console)
    else:
        render_explain(modules, console)
    return 0


if __name__ == "__main__":
    sys.exit(main())
