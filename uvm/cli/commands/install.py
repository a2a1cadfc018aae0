from __future__ import annotations

import typer

from uvm.cli.commands._helpers import unwrap_or_exit
from uvm.cli.context import build_context


def install(
    if_missing: bool = typer.Option(
        False,
        "--if-missing",
        help="Skip when the pinned version is already installed.",
    ),
) -> None:
    """Install the pinned uv into the project."""
    ctx = build_context()
    service = ctx.service()
    if if_missing:
        unwrap_or_exit(service.install_if_missing(), ctx)
    else:
        unwrap_or_exit(service.install(), ctx)
