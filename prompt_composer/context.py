"""
Rendering context shared by all module detectors.
"""
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Mapping, Optional

from .config import RootConfig
from .module import Module
from .shell import Shell


@dataclass
class Context:
    """
    Everything a detector may look at while producing its segments.

    The environment is a plain mapping so tests can supply their own
    instead of touching `os.environ`.
    """
    config: RootConfig = field(default_factory=RootConfig)
    shell: Shell = Shell.UNKNOWN
    width: Optional[int] = None
    current_dir: Path = field(default_factory=Path.cwd)
    env: Mapping[str, str] = field(default_factory=lambda: dict(os.environ))
    status_code: Optional[int] = None
    cmd_duration_ms: Optional[int] = None

    def get_env(self, key: str) -> Optional[str]:
        """Get an environment variable, treating empty values as unset."""
        value = self.env.get(key)
        return value or None

    def get_home(self) -> Optional[Path]:
        """Get the user's home directory, preferring $HOME from the context env."""
        home = self.get_env("HOME")
        if home:
            return Path(home)
        try:
            return Path.home()
        except RuntimeError:
            return None

    def module_config(self, name: str) -> Optional[Mapping[str, Any]]:
        """Get the config section for a module, if one exists."""
        return self.config.module_section(name)

    def new_module(self, name: str) -> Module:
        """
        Create an empty module with its description and config section.

        Args:
            name: Module name from the registry

        Returns:
            A Module with no segments
        """
        from .modules import DESCRIPTIONS

        return Module(name, DESCRIPTIONS.get(name, "<no description>"), self.module_config(name))
