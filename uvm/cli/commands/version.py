from __future__ import annotations

import typer

from uvm.cli.context import build_context
from uvm.core.result import Ok


def version() -> None:
    """Show the pinned and installed uv versions."""
    ctx = build_context()
    locator = ctx.service().locator

    match locator.bin_version():
        case Ok(reported):
            installed = reported
        case _:
            installed = "not installed"

    typer.echo(f"pinned:    {ctx.config.version}")
    typer.echo(f"installed: {installed}")
    typer.echo(f"path:      {locator.bin_path}")
