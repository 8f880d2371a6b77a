"""Command group: inspect the dependency graph of a registry."""

from __future__ import annotations

import json
from typing import TYPE_CHECKING

import click

from depresolve.commands._base import examples_option
from depresolve.services.graph import DependencyGraphService

if TYPE_CHECKING:
    from depresolve.commands._context import AppContext

_GRAPH_EXAMPLES = """\
  depresolve --registry myapp.deps:registry graph show
  depresolve --registry myapp.deps:registry graph cycles
  depresolve --registry myapp.deps:registry graph plan Company --fields '{"owner": {"name": true}}'
  depresolve --json graph show"""


@click.group()
@examples_option(_GRAPH_EXAMPLES)
@click.pass_obj
def graph(app: AppContext) -> None:
    """Inspect declared types, relations and request plans."""


@graph.command()
@examples_option(
    """\
  depresolve --registry myapp.deps:registry graph show
  depresolve --json graph show"""
)
@click.pass_obj
def show(app: AppContext) -> None:
    """List registered types and their relations."""
    app.emit(DependencyGraphService(app.registry, app.settings.resolver).describe())


@graph.command()
@examples_option(
    """\
  depresolve graph cycles
  depresolve --json graph cycles"""
)
@click.pass_obj
def cycles(app: AppContext) -> None:
    """List cycles between types."""
    app.emit(DependencyGraphService(app.registry, app.settings.resolver).cycles())


@graph.command()
@examples_option(
    """\
  depresolve graph plan Company --fields '{"owner": {"name": true}}'
  depresolve --json graph plan User --fields '{"company": {"employees": {"name": true}}}'"""
)
@click.argument("type_name")
@click.option(
    "--fields",
    "fields_json",
    default="{}",
    help="Request field tree as JSON.",
)
@click.pass_obj
def plan(app: AppContext, type_name: str, fields_json: str) -> None:
    """Show which types and merged fields a request would load."""
    try:
        fields = json.loads(fields_json)
    except json.JSONDecodeError as exc:
        raise click.BadParameter(f"not valid JSON: {exc}", param_hint="--fields") from exc
    if not isinstance(fields, dict):
        raise click.BadParameter("must be a JSON object", param_hint="--fields")
    app.emit(DependencyGraphService(app.registry, app.settings.resolver).plan(type_name, fields))
