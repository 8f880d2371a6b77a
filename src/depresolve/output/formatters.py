"""Output mode selection.

The CLI renders ServiceResult for humans (Rich tables) or machines
(``--json``); ``--quiet`` reduces output to a status line.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from depresolve.services.result import ServiceResult


@dataclass(frozen=True)
class OutputSettings:
    json_output: bool = False
    quiet: bool = False
    verbose: bool = False


def format_result(result: ServiceResult, *, settings: OutputSettings | None = None) -> str:
    """Format a ServiceResult according to *settings*."""
    settings = settings or OutputSettings()
    if settings.json_output:
        return result.model_dump_json(indent=2)
    if settings.quiet:
        from depresolve.output.renderers import render_quiet

        return render_quiet(result)

    from depresolve.output.renderers import render_result

    return render_result(result, verbose=settings.verbose)
