"""AppContext — shared Click context for all commands.

Created once by the root CLI group and flows to subcommands via
``@click.pass_obj``. Imports the registry lazily so ``--help`` never
imports application code, and centralizes result emission.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from depresolve.errors import RegistryLookupError
from depresolve.output.formatters import OutputSettings, format_result

if TYPE_CHECKING:
    from depresolve.config.settings import DepSettings
    from depresolve.infrastructure.registry import DependencyRegistry
    from depresolve.services.result import ServiceResult


class AppContext:
    """Settings plus the registry the commands inspect."""

    def __init__(self, settings: DepSettings, registry_path: str | None = None) -> None:
        self.settings = settings
        self.registry_path = registry_path or settings.resolver.registry
        self._registry: DependencyRegistry | None = None

        from depresolve.config.logging import configure_logging

        configure_logging(verbose=settings.verbose, log_json=settings.log_json)

        if settings.verbose:
            from depresolve.services.telemetry import enable_telemetry

            enable_telemetry()

    @property
    def registry(self) -> DependencyRegistry:
        """The registry named by ``--registry`` or ``[resolver] registry``."""
        if self._registry is None:
            if not self.registry_path:
                msg = "No registry given: pass --registry or set [resolver] registry in depresolve.toml"
                raise click.UsageError(msg)

            from depresolve.infrastructure.registry import import_registry

            try:
                self._registry = import_registry(self.registry_path)
            except RegistryLookupError as exc:
                raise click.ClickException(str(exc)) from exc
        return self._registry

    def emit(self, result: ServiceResult) -> None:
        """Format and output a ServiceResult with correct exit semantics.

        * Success: writes to stdout. Warnings go to stderr outside JSON mode.
        * Failure: writes to stderr, exits with code 1.
        """
        settings = OutputSettings(
            json_output=self.settings.json_output,
            quiet=self.settings.quiet,
            verbose=self.settings.verbose,
        )
        output = format_result(result, settings=settings)
        if result.ok:
            click.echo(output)
            if settings.quiet and not settings.json_output:
                for warning in result.warnings:
                    click.echo(f"WARNING: {warning}", err=True)
        else:
            click.echo(output, err=True)
            raise SystemExit(1)
