"""Rich Console factory and theme for depresolve output.

Creates Console instances that render to a StringIO buffer, preserving
the ``format_result() -> str`` contract. In non-TTY environments
(tests, pipes) Rich automatically disables color codes.
"""

from __future__ import annotations

from io import StringIO

from rich.console import Console
from rich.theme import Theme

DEP_THEME = Theme(
    {
        "dep.ok": "bold green",
        "dep.error": "bold red",
        "dep.warning": "bold yellow",
        "dep.op": "bold cyan",
        "dep.key": "dim",
        "dep.type": "bold blue",
        "dep.field": "magenta",
        "dep.flag.on": "green",
        "dep.flag.off": "dim",
    }
)


def create_console(*, no_color: bool = False, width: int | None = None) -> Console:
    """Create a Console that renders to a StringIO buffer.

    Args:
        no_color: Disable ANSI escape codes (used in tests).
        width: Override terminal width (useful for consistent test output).
    """
    return Console(
        file=StringIO(),
        theme=DEP_THEME,
        no_color=no_color,
        highlight=False,
        width=width or 120,
    )


def get_output(console: Console) -> str:
    """Extract rendered text from a StringIO-backed Console."""
    assert isinstance(console.file, StringIO)
    return console.file.getvalue()


def flag(value: bool) -> str:
    """Markup for a yes/no table cell."""
    return "[dep.flag.on]yes[/dep.flag.on]" if value else "[dep.flag.off]no[/dep.flag.off]"
