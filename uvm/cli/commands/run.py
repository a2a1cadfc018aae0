from __future__ import annotations

import typer

from uvm.cli.commands._helpers import unwrap_or_exit
from uvm.cli.context import build_context
from uvm.core.errors import ErrorCode

RUN_CONTEXT_SETTINGS = {
    "allow_extra_args": True,
    "ignore_unknown_options": True,
    "allow_interspersed_args": False,
}


def run(
    ctx: typer.Context,
    profile: str | None = typer.Argument(None, help="Profile from uvm.toml.", show_default=False),
) -> None:
    """Run uv with PROFILE's args followed by the remaining arguments.

    uv is downloaded first if it is not installed.

    Example: uvm run default add numpy
    """
    if profile is None:
        typer.echo("error: `uvm run` expects the profile as argument", err=True)
        raise typer.Exit(code=int(ErrorCode.USER_ERROR))

    args = list(ctx.args)
    cli = build_context()
    status = unwrap_or_exit(cli.service().install_and_run(profile, args), cli)
    if status != 0:
        invoked = " ".join([profile, *args])
        cli.console.error(f"`uvm run {invoked}` exited with {status}")
        raise typer.Exit(code=status)
