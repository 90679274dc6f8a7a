"""
Kubernetes module.

Shows the current context from the kubeconfig file(s) and, when set, the
namespace of that context. Disabled unless enabled in the config.
"""
import logging
import os
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING, Any, Optional

import yaml

from ..config import ModuleConfig
from ..formatter import FormatError, StringFormatter
from ..module import Module

if TYPE_CHECKING:
    from ..context import Context

logger = logging.getLogger(__name__)

_REPLACEMENT_REF = re.compile(r"\$\$|\$\{(\w+)\}|\$(\w+)")


@dataclass
class KubernetesConfig(ModuleConfig):
    """Options for the kubernetes module."""
    symbol: str = "☸ "
    format: str = "[$symbol$context( \\($namespace\\))]($style) in "
    style: str = "cyan bold"
    disabled: bool = True
    context_aliases: dict[str, str] = field(default_factory=dict)


def _load_kubeconfig(path: Path) -> Optional[dict[str, Any]]:
    """Load the first YAML document of a kubeconfig file."""
    try:
        contents = path.read_text(encoding="utf-8")
        document = next(iter(yaml.safe_load_all(contents)), None)
    except (OSError, UnicodeDecodeError, yaml.YAMLError) as e:
        logger.debug(f"Unable to read kubeconfig {path}: {e}")
        return None

    if not isinstance(document, dict):
        return None
    return document


def get_kube_context(path: Path) -> Optional[str]:
    """
    Get the current context from a kubeconfig file.

    Args:
        path: Path to a kubeconfig file

    Returns:
        The current context name, or None if missing or empty
    """
    document = _load_kubeconfig(path)
    if document is None:
        return None

    current = document.get("current-context")
    if not isinstance(current, str) or not current:
        return None
    return current


def get_kube_ns(path: Path, current_ctx: str) -> Optional[str]:
    """
    Get the namespace configured for a context.

    Args:
        path: Path to a kubeconfig file
        current_ctx: Name of the context to look up

    Returns:
        The namespace, or None if the context has none
    """
    document = _load_kubeconfig(path)
    if document is None:
        return None

    contexts = document.get("contexts")
    if not isinstance(contexts, list):
        return None

    for entry in contexts:
        if not isinstance(entry, dict) or entry.get("name") != current_ctx:
            continue
        context = entry.get("context")
        if not isinstance(context, dict):
            return None
        namespace = context.get("namespace")
        if isinstance(namespace, str) and namespace:
            return namespace
        return None
    return None


def _expand_replacement(match: re.Match, replacement: str) -> str:
    """
    Expand `$1`, `$name` and `${name}` references against a match.

    A reference to a group that does not exist or did not participate in
    the match expands to an empty string. `$$` is a literal dollar.
    """
    def substitute(ref: re.Match) -> str:
        name = ref.group(1) or ref.group(2)
        if name is None:
            return "$"
        key = int(name) if name.isdigit() else name
        try:
            return match.group(key) or ""
        except IndexError:
            return ""

    return _REPLACEMENT_REF.sub(substitute, replacement)


def get_kube_context_name(config: KubernetesConfig, kube_ctx: str) -> str:
    """
    Apply `context_aliases` to a context name.

    An exact key match wins. Otherwise each key is tried as a regular
    expression that must match the whole name, and its value is expanded
    with the captured groups.

    Args:
        config: Module config holding the aliases
        kube_ctx: The raw context name

    Returns:
        The display name for the context
    """
    if kube_ctx in config.context_aliases:
        return config.context_aliases[kube_ctx]

    for pattern, replacement in config.context_aliases.items():
        try:
            match = re.fullmatch(pattern, kube_ctx)
            if match is None:
                continue
            return _expand_replacement(match, replacement)
        except re.error as e:
            logger.debug(f"Skipping context alias '{pattern}': {e}")
    return kube_ctx


def module(context: 'Context') -> Optional[Module]:
    """Build the kubernetes module."""
    module = context.new_module("kubernetes")
    config = KubernetesConfig.try_load(module.config)

    # Disabled by default, so this is checked after loading the config
    if config.disabled:
        return None

    kube_cfg = context.get_env("KUBECONFIG")
    if kube_cfg is None:
        home = context.get_home()
        if home is None:
            return None
        kube_cfg = str(home / ".kube" / "config")

    paths = [Path(p) for p in kube_cfg.split(os.pathsep) if p]

    kube_ctx = next((ctx for ctx in map(get_kube_context, paths) if ctx), None)
    if kube_ctx is None:
        return None

    kube_ns = next((ns for ns in (get_kube_ns(p, kube_ctx) for p in paths) if ns), None)
    display_ctx = get_kube_context_name(config, kube_ctx)

    def map_variable(variable: str) -> Optional[str]:
        if variable == "context":
            return display_ctx
        if variable == "namespace":
            return kube_ns
        return None

    try:
        segments = (
            StringFormatter(config.format)
            .map_meta(lambda variable: config.symbol if variable == "symbol" else None)
            .map_style(lambda variable: config.style if variable == "style" else None)
            .map(map_variable)
            .parse()
        )
    except FormatError as e:
        logger.warning(f"Error in module `kubernetes`:\n{e}")
        return None

    module.set_segments(segments)
    return module
