from __future__ import annotations

import os
from pathlib import Path

import typer

from uvm import __version__
from uvm.cli.commands.install import install
from uvm.cli.commands.run import RUN_CONTEXT_SETTINGS, run
from uvm.cli.commands.version import version
from uvm.cli.context import CONFIG_ENV, VERBOSE_ENV
from uvm.core.errors import ErrorCode


app = typer.Typer(
    add_completion=False,
    no_args_is_help=True,
    rich_markup_mode="rich",
)


app.command()(install)
app.command(context_settings=RUN_CONTEXT_SETTINGS)(run)
app.command()(version)


def _show_version(value: bool) -> None:
    if value:
        typer.echo(__version__)
        raise typer.Exit(code=0)


@app.callback()
def _main(  # pyright: ignore[reportUnusedFunction]
    show_version: bool = typer.Option(
        False,
        "--version",
        callback=_show_version,
        is_eager=True,
        help="Show uvm version and exit.",
    ),
    config: Path | None = typer.Option(
        None,
        "--config",
        help="Config file (default: nearest uvm.toml or pyproject.toml with [tool.uvm])",
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show download details."),
) -> None:
    if config is not None:
        path = config.expanduser()
        if not path.is_file():
            typer.echo(f"error: --config '{path}' does not exist", err=True)
            raise typer.Exit(code=int(ErrorCode.USER_ERROR))
        os.environ[CONFIG_ENV] = str(path.resolve())

    if verbose:
        os.environ[VERBOSE_ENV] = "1"


def main() -> None:
    app()
