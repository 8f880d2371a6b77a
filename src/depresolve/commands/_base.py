"""Shared Click option for the ``graph`` commands.

``--help`` stays short; ``--examples`` prints usage examples and exits.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import TypeVar

import click

F = TypeVar("F", bound=Callable[..., object])


def examples_option(examples: str) -> Callable[[F], F]:
    """Decorate a command or group with an eager ``--examples`` flag."""

    def show(ctx: click.Context, _param: click.Parameter, value: bool) -> None:
        if value:
            click.echo(f"Examples for '{ctx.command_path}':\n\n{examples}")
            ctx.exit(0)

    return click.option(
        "--examples",
        is_flag=True,
        expose_value=False,
        is_eager=True,
        callback=show,
        help="Show usage examples.",
    )
