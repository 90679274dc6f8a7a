"""
Tests for the directory, character, cmd_duration, fill and line_break modules.
"""

from datetime import timedelta
from pathlib import Path

import allure
import pytest
from hypothesis import given, settings, strategies as st

from prompt_composer.modules import ALL_MODULES, DESCRIPTIONS, handle
from prompt_composer.modules.directory import contract_path, truncate
from prompt_composer.shell import Shell
from prompt_composer.utils import format_duration, format_timing


@allure.feature("Directory Module")
@allure.story("Home directory")
@allure.severity(allure.severity_level.CRITICAL)
def test_directory_at_home(render_module, paint):
    assert render_module("directory") == paint("cyan bold", "~") + " "


@allure.feature("Directory Module")
@allure.story("Truncation below home")
@allure.severity(allure.severity_level.CRITICAL)
def test_directory_truncated_below_home(tmp_path, render_module, paint):
    deep = tmp_path / "a" / "b" / "c" / "d"

    assert render_module("directory", current_dir=deep) == paint("cyan bold", "b/c/d") + " "
    assert render_module("directory", current_dir=tmp_path / "a") == paint("cyan bold", "~/a") + " "


@allure.feature("Directory Module")
@allure.story("Options")
@allure.severity(allure.severity_level.NORMAL)
def test_directory_options(tmp_path, render_module, paint):
    section = {"truncation_length": 2, "truncation_symbol": "…/", "style": "blue", "home_symbol": "H"}

    actual = render_module("directory", modules={"directory": section}, current_dir=tmp_path / "a" / "b" / "c")

    assert actual == paint("blue", "…/b/c") + " "


@allure.feature("Directory Module")
@allure.story("Home contraction")
@allure.severity(allure.severity_level.NORMAL)
@pytest.mark.parametrize(
    "path, home, expected",
    [
        ("/home/user", "/home/user", "~"),
        ("/home/user/src/app", "/home/user", "~/src/app"),
        ("/home/username", "/home/user", "/home/username"),
        ("/usr/local", "/home/user", "/usr/local"),
        ("/usr/local", None, "/usr/local"),
    ],
)
def test_contract_path(path, home, expected):
    assert contract_path(Path(path), Path(home) if home else None, "~") == expected


@allure.feature("Directory Module")
@allure.story("Truncation")
@allure.severity(allure.severity_level.NORMAL)
@pytest.mark.parametrize(
    "dir_string, length, symbol, expected",
    [
        ("/usr/local/lib/python3", 3, "", "local/lib/python3"),
        ("/usr/local", 3, "", "/usr/local"),
        ("/", 3, "", "/"),
        ("~/a/b/c", 2, "…/", "…/b/c"),
        ("~/a/b/c", 0, "", "~/a/b/c"),
    ],
)
def test_truncate(dir_string, length, symbol, expected):
    assert truncate(dir_string, length, symbol) == expected


@allure.feature("Directory Module")
@allure.story("Truncation keeps the last components")
@allure.severity(allure.severity_level.NORMAL)
@settings(max_examples=100)
@given(
    parts=st.lists(st.text(alphabet="abcxyz_-.", min_size=1, max_size=8), min_size=1, max_size=10),
    length=st.integers(min_value=1, max_value=12),
)
def test_truncate_keeps_at_most_length_components(parts, length):
    result = truncate("/" + "/".join(parts), length)

    kept = [c for c in result.split("/") if c]
    assert kept == parts[-length:]


@allure.feature("Character Module")
@allure.story("Symbol follows exit status")
@allure.severity(allure.severity_level.CRITICAL)
@pytest.mark.parametrize(
    "status, style",
    [(None, "bold green"), (0, "bold green"), (1, "bold red"), (130, "bold red"), (-1, "bold red")],
)
def test_character_symbol(render_module, paint, status, style):
    assert render_module("character", status_code=status) == paint(style, "❯") + " "


@allure.feature("Character Module")
@allure.story("Custom symbols")
@allure.severity(allure.severity_level.NORMAL)
def test_character_custom_symbol(render_module, paint):
    section = {"success_symbol": "[➜](bold blue)", "format": "$symbol"}

    assert render_module("character", modules={"character": section}) == paint("bold blue", "➜")


@allure.feature("Command Duration Module")
@allure.story("Threshold")
@allure.severity(allure.severity_level.CRITICAL)
@pytest.mark.parametrize("elapsed", [None, 0, 1_999])
def test_cmd_duration_hidden_below_min_time(render_module, elapsed):
    assert render_module("cmd_duration", cmd_duration_ms=elapsed) is None


@allure.feature("Command Duration Module")
@allure.story("Rendering")
@allure.severity(allure.severity_level.CRITICAL)
def test_cmd_duration_shown(render_module, paint):
    assert render_module("cmd_duration", cmd_duration_ms=2_000) == "took " + paint("yellow bold", "2s") + " "


@allure.feature("Command Duration Module")
@allure.story("Milliseconds")
@allure.severity(allure.severity_level.NORMAL)
def test_cmd_duration_with_milliseconds(render_module, paint):
    section = {"show_milliseconds": True, "min_time": 0}

    actual = render_module("cmd_duration", modules={"cmd_duration": section}, cmd_duration_ms=3_723_004)

    assert actual == "took " + paint("yellow bold", "1h 2m 3s 4ms") + " "


@allure.feature("Fill Module")
@allure.story("Fill expands to width")
@allure.severity(allure.severity_level.CRITICAL)
def test_fill_module(make_context, paint):
    module = handle("fill", make_context())

    assert not module.is_empty()
    assert str(module) == ""
    assert module.ansi_strings_for_shell(Shell.UNKNOWN, 5) == [paint("bold black", ".....")]


@allure.feature("Fill Module")
@allure.story("Invalid style")
@allure.severity(allure.severity_level.NORMAL)
def test_fill_invalid_style(make_context, caplog):
    module = handle("fill", make_context(modules={"fill": {"style": "notacolor123"}}))

    assert module is None
    assert "fill" in caplog.text


@allure.feature("Line Break Module")
@allure.story("Renders a newline")
@allure.severity(allure.severity_level.NORMAL)
def test_line_break(render_module):
    assert render_module("line_break") == "\n"
    assert render_module("line_break", modules={"line_break": {"disabled": True}}) is None


@allure.feature("Module Registry")
@allure.story("Every module is described")
@allure.severity(allure.severity_level.NORMAL)
def test_registry_is_consistent(make_context, caplog):
    assert list(ALL_MODULES) == sorted(ALL_MODULES)
    assert set(DESCRIPTIONS) == set(ALL_MODULES)
    assert handle("nope", make_context()) is None
    assert "Unknown module: nope" in caplog.text


@allure.feature("Module Registry")
@allure.story("Disabled modules")
@allure.severity(allure.severity_level.NORMAL)
@pytest.mark.parametrize("name", ["character", "cmd_duration", "directory", "fill", "line_break"])
def test_disabled_modules_return_none(make_context, name):
    context = make_context(modules={name: {"disabled": True}}, cmd_duration_ms=10_000)

    assert handle(name, context) is None


@allure.feature("Utilities")
@allure.story("Duration formatting")
@allure.severity(allure.severity_level.NORMAL)
@pytest.mark.parametrize(
    "millis, show_ms, expected",
    [
        (0, False, "0s"),
        (0, True, "0ms"),
        (2_000, False, "2s"),
        (61_000, False, "1m 1s"),
        (3_600_000, False, "1h 0m 0s"),
        (90_061_001, True, "1d 1h 1m 1s 1ms"),
        (1_500, True, "1s 500ms"),
    ],
)
def test_format_duration(millis, show_ms, expected):
    assert format_duration(millis, show_ms) == expected


@allure.feature("Utilities")
@allure.story("Timing formatting")
@allure.severity(allure.severity_level.MINOR)
def test_format_timing():
    assert format_timing(timedelta(microseconds=500)) == "500µs"
    assert format_timing(timedelta(microseconds=1_250)) == "1.25ms"


@allure.feature("Character Module")
@allure.story("Symbol referencing itself")
@allure.severity(allure.severity_level.CRITICAL)
def test_character_self_referencing_symbol(render_module):
    section = {"success_symbol": "[$symbol](green)"}

    assert render_module("character", modules={"character": section}) == " "
