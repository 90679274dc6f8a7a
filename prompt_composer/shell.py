"""
Shell identities and escape-sequence wrapping.

Line editors of some shells count every byte of a prompt as visible unless
escape sequences are wrapped in shell-specific markers. Without them the
cursor position is miscalculated after colored output.
"""
from enum import Enum
from typing import Optional

ESCAPE_BEGIN = "\x1b"
ESCAPE_END = "m"

BASH_BEGIN = "\\["
BASH_END = "\\]"
ZSH_BEGIN = "%{"
ZSH_END = "%}"
TCSH_BEGIN = "%{"
TCSH_END = "%}"


class Shell(Enum):
    """Shells a prompt can be rendered for."""
    BASH = "bash"
    FISH = "fish"
    ION = "ion"
    POWERSHELL = "powershell"
    ZSH = "zsh"
    ELVISH = "elvish"
    TCSH = "tcsh"
    NU = "nu"
    XONSH = "xonsh"
    UNKNOWN = "unknown"

    @classmethod
    def from_name(cls, name: Optional[str]) -> 'Shell':
        """
        Look up a shell by name.

        Args:
            name: Shell identifier, case insensitive (e.g. 'bash', 'ZSH')

        Returns:
            Matching Shell, or Shell.UNKNOWN
        """
        if not name:
            return cls.UNKNOWN
        try:
            return cls(name.strip().lower())
        except ValueError:
            return cls.UNKNOWN


_MARKERS: dict[Shell, tuple[str, str]] = {
    Shell.BASH: (BASH_BEGIN, BASH_END),
    Shell.ZSH: (ZSH_BEGIN, ZSH_END),
    Shell.TCSH: (TCSH_BEGIN, TCSH_END),
}


def needs_wrapping(shell: Shell) -> bool:
    """Whether the shell requires markers around escape sequences."""
    return shell in _MARKERS


def wrap_seq_for_shell(text: str, shell: Shell, escape_begin: str, escape_end: str) -> str:
    """
    Surround every escape sequence in `text` with the shell's markers.

    A sequence starts at `escape_begin` and ends at the next `escape_end`.
    Sequences cannot nest, so a single flag tracks whether we are inside one.

    Args:
        text: Finished ANSI string
        shell: Target shell
        escape_begin: Character opening an escape sequence
        escape_end: Character closing an escape sequence

    Returns:
        The wrapped string, or `text` unchanged for shells without markers
    """
    markers = _MARKERS.get(shell)
    if markers is None:
        return text
    begin, end = markers

    escaped = False
    parts: list[str] = []
    for char in text:
        if char == escape_begin and not escaped:
            escaped = True
            parts.append(begin + char)
        elif char == escape_end and escaped:
            escaped = False
            parts.append(char + end)
        else:
            parts.append(char)
    return "".join(parts)


def wrap_colorseq_for_shell(text: str, shell: Shell) -> str:
    """Wrap SGR color sequences (`ESC ... m`) for the given shell."""
    return wrap_seq_for_shell(text, shell, ESCAPE_BEGIN, ESCAPE_END)


def strip_shell_markers(text: str, shell: Shell) -> str:
    """
    Remove markers previously inserted by `wrap_colorseq_for_shell`.

    Only markers directly around an escape sequence are removed, so visible
    text that happens to contain marker characters is preserved.
    """
    markers = _MARKERS.get(shell)
    if markers is None:
        return text
    begin, end = markers

    escaped = False
    parts: list[str] = []
    i = 0
    while i < len(text):
        if not escaped and text.startswith(begin + ESCAPE_BEGIN, i):
            escaped = True
            parts.append(ESCAPE_BEGIN)
            i += len(begin) + 1
        elif escaped and text.startswith(ESCAPE_END + end, i):
            escaped = False
            parts.append(ESCAPE_END)
            i += len(end) + 1
        else:
            parts.append(text[i])
            i += 1
    return "".join(parts)
