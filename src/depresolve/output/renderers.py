"""Operation-specific Rich renderers for ServiceResult.

Each renderer writes to a Rich Console (backed by StringIO). Renderers
are dispatched by ``result.op`` in :func:`render_result`; unknown ops
fall through to a generic key-value renderer.
"""

from __future__ import annotations

import json
from collections.abc import Callable
from typing import TYPE_CHECKING, Any

from rich.table import Table
from rich.text import Text

from depresolve.output.console import create_console, flag, get_output

if TYPE_CHECKING:
    from rich.console import Console

    from depresolve.services.result import ServiceResult


# ── Public API ────────────────────────────────────────────────────────


def render_result(result: ServiceResult, *, verbose: bool = False) -> str:
    """Render a ServiceResult to a styled string via Rich.

    Returns plain text (no ANSI) when Rich detects no terminal, which is
    the case inside Click's CliRunner and piped output.
    """
    console = create_console()

    if result.ok:
        renderer = _OP_RENDERERS.get(result.op, _render_generic)
        renderer(result, console, verbose=verbose)
    else:
        _render_error(result, console, verbose=verbose)

    return get_output(console).rstrip("\n")


def render_quiet(result: ServiceResult) -> str:
    """Render minimal output for ``--quiet`` mode."""
    if not result.ok:
        msg = result.error.message if result.error else "Unknown error"
        return f"ERROR: {result.op} — {msg}"
    return f"OK: {result.op}"


# ── Helpers ───────────────────────────────────────────────────────────


def _status_line(console: Console, result: ServiceResult) -> None:
    label = Text("OK", style="dep.ok")
    op = Text(f"  {result.op}", style="dep.op")
    console.print(label, op, end="")
    console.print()


def _compact(value: Any) -> str:
    if isinstance(value, (dict, list)):
        return json.dumps(value, separators=(",", ":"), sort_keys=True)
    return str(value)


def _render_meta(console: Console, result: ServiceResult) -> None:
    """Print the telemetry span tree (verbose only)."""
    if not result.meta:
        return
    console.print()
    console.print(Text("  meta:", style="dim"))
    telemetry = result.meta.get("telemetry")
    if telemetry:
        _render_span(console, telemetry, indent=4)


def _render_span(console: Console, span_data: dict[str, Any], indent: int) -> None:
    prefix = " " * indent
    duration = span_data.get("duration_ms", 0.0)
    style = "yellow" if duration > 100 else "dim"
    line = f"{prefix}[{style}]{duration:>8.2f}ms[/{style}]  {span_data.get('name', '?')}"
    annotations = span_data.get("annotations")
    if annotations:
        line += "  (" + ", ".join(f"{k}={v}" for k, v in annotations.items()) + ")"
    console.print(line)
    for child in span_data.get("children", []):
        _render_span(console, child, indent + 4)


def _render_warnings(console: Console, result: ServiceResult) -> None:
    for warning in result.warnings:
        console.print(f"  [dep.warning]warning[/dep.warning] {warning}")


# ── Error renderer ────────────────────────────────────────────────────


def _render_error(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    err = result.error
    msg = err.message if err else "Unknown error"
    console.print(Text("ERROR", style="dep.error"), Text(f"  {result.op}", style="dep.op"), Text(" — "), msg)

    if verbose and err and err.detail:
        console.print(Text("  detail:", style="dim"))
        for k, v in err.detail.items():
            console.print(f"    {k}: {_compact(v)}")


# ── Graph renderers ───────────────────────────────────────────────────


def _render_graph_show(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    _status_line(console, result)
    data = result.data

    types = Table(show_header=True, show_lines=False, pad_edge=False, expand=False)
    types.add_column("Type", style="dep.type", no_wrap=True)
    types.add_column("Loader")
    types.add_column("Initializer")
    types.add_column("Trigger fields", style="dep.field")
    for item in data.get("types", []):
        types.add_row(
            str(item["type"]),
            flag(item["loader"]),
            flag(item["initializer"]),
            ", ".join(item["trigger_fields"]),
        )
    console.print(types)

    relations = Table(show_header=True, show_lines=False, pad_edge=False, expand=False)
    relations.add_column("Parent", style="dep.type", no_wrap=True)
    relations.add_column("Field", style="dep.field")
    relations.add_column("Child", style="dep.type", no_wrap=True)
    relations.add_column("Filter")
    relations.add_column("List")
    for rel in data.get("relations", []):
        relations.add_row(
            str(rel["parent"]),
            str(rel["destination"]),
            str(rel["child"]),
            ", ".join(f"{k}={v}" for k, v in rel["filter"].items()),
            flag(rel["is_list"]),
        )
    console.print()
    console.print(relations)
    console.print(f"\n{data.get('type_count', 0)} types, {data.get('relation_count', 0)} relations")
    _render_warnings(console, result)
    if verbose:
        _render_meta(console, result)


def _render_graph_cycles(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    _status_line(console, result)
    cycles = result.data.get("cycles", [])
    if not cycles:
        console.print("  no cycles")
    for cycle in cycles:
        console.print("  " + " -> ".join(f"[dep.type]{name}[/dep.type]" for name in [*cycle, cycle[0]]))
    _render_warnings(console, result)
    if verbose:
        _render_meta(console, result)


def _render_graph_plan(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    _status_line(console, result)
    console.print(Text(f"  root: {result.data.get('root', '?')}", style="dep.key"))
    table = Table(show_header=True, show_lines=False, pad_edge=False, expand=False)
    table.add_column("Type", style="dep.type", no_wrap=True)
    table.add_column("Loader")
    table.add_column("Initializer")
    table.add_column("Fields")
    for step in result.data.get("steps", []):
        table.add_row(
            str(step["type"]),
            flag(step["loader"]),
            flag(step["initializer"]),
            _compact(step["fields"]),
        )
    console.print(table)
    if verbose:
        _render_meta(console, result)


def _render_generic(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    _status_line(console, result)
    for key, value in result.data.items():
        console.print(Text(f"  {key}: ", style="dep.key"), Text(_compact(value)), end="")
        console.print()
    _render_warnings(console, result)
    if verbose:
        _render_meta(console, result)


_OP_RENDERERS: dict[str, Callable[..., None]] = {
    "graph_show": _render_graph_show,
    "graph_cycles": _render_graph_cycles,
    "graph_plan": _render_graph_plan,
}
