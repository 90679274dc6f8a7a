"""
Constants and configuration defaults for prompt_composer.
"""
from pathlib import Path
from typing import Final

APP_NAME: Final[str] = "prompt_composer"
APP_VERSION: Final[str] = "1.0.0"
APP_DESCRIPTION: Final[str] = "Compose styled shell prompts from status modules"

CONFIG_ENV_VAR: Final[str] = "PROMPT_COMPOSER_CONFIG"
LOG_ENV_VAR: Final[str] = "PROMPT_COMPOSER_LOG"
SHELL_ENV_VAR: Final[str] = "PROMPT_COMPOSER_SHELL"

CONFIG_FILE: Final[Path] = Path.home() / ".config" / "prompt_composer.json"

DEFAULT_FORMAT: Final[str] = "$all"
LINE_TERMINATOR: Final[str] = "\n"

# Order used when the root format contains `$all`
PROMPT_ORDER: Final[tuple[str, ...]] = (
    "directory",
    "kubernetes",
    "cmd_duration",
    "line_break",
    "character",
)
