"""
Shared fixtures for module tests.
"""

from pathlib import Path
from typing import Any, Optional

import pytest
from rich.color import ColorSystem
from rich.style import Style

from prompt_composer.config import RootConfig
from prompt_composer.context import Context
from prompt_composer.modules import handle


@pytest.fixture
def paint():
    """Render text the way a styled module run is rendered."""

    def _paint(style: str, text: str) -> str:
        return Style.parse(style).render(text, color_system=ColorSystem.TRUECOLOR)

    return _paint


@pytest.fixture
def make_context(tmp_path):
    """Build a context isolated from the real environment and home directory."""

    def _make(
        modules: Optional[dict[str, dict[str, Any]]] = None,
        env: Optional[dict[str, str]] = None,
        current_dir: Optional[Path] = None,
        **kwargs,
    ) -> Context:
        return Context(
            config=RootConfig(modules=modules or {}),
            env={"HOME": str(tmp_path), **(env or {})},
            current_dir=current_dir or tmp_path,
            **kwargs,
        )

    return _make


@pytest.fixture
def render_module(make_context):
    """Render a single module, returning None when it has nothing to show."""

    def _render(name: str, **kwargs) -> Optional[str]:
        module = handle(name, make_context(**kwargs))
        if module is None or module.is_empty():
            return None
        return str(module)

    return _render
