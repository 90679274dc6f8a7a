"""
Configuration management for prompt_composer.
Handles loading the JSON configuration file and per-module config sections.
"""
import json
import logging
import os
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any, Mapping, Optional, TypeVar

from .constants import CONFIG_ENV_VAR, CONFIG_FILE, DEFAULT_FORMAT

logger = logging.getLogger(__name__)

T = TypeVar('T', bound='ModuleConfig')


class ConfigError(Exception):
    """Raised when configuration parsing or validation fails."""

    def __init__(
        self,
        message: str,
        line: Optional[int] = None,
        column: Optional[int] = None,
    ):
        self.line = line
        self.column = column

        if line is not None and column is not None:
            full_message = f"{message} (line {line}, column {column})"
        elif line is not None:
            full_message = f"{message} (line {line})"
        else:
            full_message = message

        super().__init__(full_message)


@dataclass
class ModuleConfig:
    """
    Base class for module configuration sections.

    Subclasses declare their options as dataclass fields with defaults.
    """
    disabled: bool = False

    @classmethod
    def try_load(cls: type[T], section: Optional[Mapping[str, Any]]) -> T:
        """
        Build a config from a raw section, keeping defaults for bad values.

        Unknown keys and values whose type does not match the default are
        logged and ignored.

        Args:
            section: The module's section from the config file, if any

        Returns:
            A config instance
        """
        config = cls()
        if not section:
            return config

        known = {f.name: f for f in fields(cls)}
        for key, value in section.items():
            if key not in known:
                logger.warning(f"Unknown key '{key}' in config for {cls.__name__}")
                continue
            default = getattr(config, key)
            if not _matches_type(default, value):
                logger.warning(
                    f"Invalid value for '{key}' in {cls.__name__}: "
                    f"expected {type(default).__name__}, got {type(value).__name__}"
                )
                continue
            setattr(config, key, value)
        return config


def _matches_type(default: Any, value: Any) -> bool:
    if isinstance(default, bool):
        return isinstance(value, bool)
    if isinstance(default, int):
        return isinstance(value, int) and not isinstance(value, bool)
    if isinstance(default, dict):
        return isinstance(value, dict) and all(isinstance(v, str) for v in value.values())
    return isinstance(value, type(default))


@dataclass
class RootConfig:
    """Top level configuration."""
    format: str = DEFAULT_FORMAT
    add_newline: bool = True
    modules: dict[str, dict[str, Any]] = field(default_factory=dict)

    def module_section(self, name: str) -> Optional[dict[str, Any]]:
        """Get the raw config section for a module, or None."""
        return self.modules.get(name)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> 'RootConfig':
        """
        Create a RootConfig from a parsed config file.

        Top level keys other than `format` and `add_newline` whose value
        is an object are module sections.

        Raises:
            ConfigError: If a top level option has the wrong type
        """
        config = cls()
        if 'format' in data:
            if not isinstance(data['format'], str):
                raise ConfigError("'format' must be a string")
            config.format = data['format']
        if 'add_newline' in data:
            if not isinstance(data['add_newline'], bool):
                raise ConfigError("'add_newline' must be a boolean")
            config.add_newline = data['add_newline']

        for key, value in data.items():
            if key in ('format', 'add_newline'):
                continue
            if isinstance(value, dict):
                config.modules[key] = value
            else:
                logger.warning(f"Ignoring unknown top level option '{key}'")
        return config


def config_path() -> Path:
    """Path of the config file, honoring the environment override."""
    override = os.environ.get(CONFIG_ENV_VAR)
    if override:
        return Path(override).expanduser()
    return CONFIG_FILE


def load_config(path: Optional[Path] = None) -> RootConfig:
    """
    Load configuration from a JSON file.

    Args:
        path: Config file path (defaults to `config_path()`)

    Returns:
        The loaded configuration, or defaults if the file does not exist

    Raises:
        ConfigError: If the file is not valid JSON or has invalid options
    """
    path = path or config_path()
    if not path.exists():
        logger.debug(f"No config file at {path}, using defaults")
        return RootConfig()

    try:
        content = path.read_text(encoding='utf-8')
    except OSError as e:
        raise ConfigError(f"Unable to read config file {path}: {e}") from e

    try:
        data = json.loads(content)
    except json.JSONDecodeError as e:
        raise ConfigError(f"Invalid JSON in {path}: {e.msg}", line=e.lineno, column=e.colno) from e

    if not isinstance(data, dict):
        raise ConfigError(f"Config file {path} must contain a JSON object")

    return RootConfig.from_dict(data)
