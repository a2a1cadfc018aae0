"""Shared helpers for CLI commands."""

from __future__ import annotations

from typing import TYPE_CHECKING, TypeVar

import typer

from uvm.core.result import Err, Ok, Result
from uvm.output.errors import print_uv_error, uv_error_exit_code

if TYPE_CHECKING:
    from uvm.cli.context import CLIContext
    from uvm.services.errors import UvError

T = TypeVar("T")


def unwrap_or_exit(result: Result[T, UvError], ctx: CLIContext) -> T:
    """Return the Ok value, or print the error and exit with its code."""
    if isinstance(result, Err):
        print_uv_error(result.error, ctx.console)
        raise typer.Exit(code=uv_error_exit_code(result.error))
    assert isinstance(result, Ok)
    return result.value
