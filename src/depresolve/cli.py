"""Root CLI group for depresolve with global flags and command registration."""

from __future__ import annotations

import click

from depresolve import __version__
from depresolve.commands import register_commands
from depresolve.commands._context import AppContext
from depresolve.config.settings import DepSettings


@click.group(invoke_without_command=True)
@click.version_option(version=__version__, prog_name="depresolve")
@click.option("--json", "json_output", is_flag=True, help="Structured JSON output.")
@click.option("-q", "--quiet", is_flag=True, help="Minimal output.")
@click.option("-v", "--verbose", is_flag=True, help="Debug logging and telemetry spans.")
@click.option("--log-json", is_flag=True, help="Structured JSON log output to stderr.")
@click.option("-c", "--config", "config_path", default=None, help="Override config file path.")
@click.option("-r", "--registry", "registry_path", default=None, help="Registry import path (module:attribute).")
@click.pass_context
def cli(
    ctx: click.Context,
    json_output: bool,
    quiet: bool,
    verbose: bool,
    log_json: bool,
    config_path: str | None,
    registry_path: str | None,
) -> None:
    """depresolve — inspect declared entity dependencies."""
    ctx.ensure_object(dict)
    settings = DepSettings.from_cli(
        config_path=config_path,
        json_output=json_output,
        quiet=quiet,
        verbose=verbose,
        log_json=log_json,
    )
    ctx.obj = AppContext(settings, registry_path)
    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


register_commands(cli)
