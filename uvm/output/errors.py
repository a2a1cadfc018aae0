"""Error presentation and exit code mapping."""

from __future__ import annotations

from typing import TYPE_CHECKING

from uvm.core.config import ConfigError
from uvm.core.errors import ErrorCode
from uvm.output.console import Style
from uvm.platform.process import ProcessError
from uvm.services.errors import (
    MissingExecutable,
    NoArguments,
    UnknownProfile,
    UnmanagedExecutable,
    UnsupportedPlatform,
    UvError,
)
from uvm.tools.http import HttpError
from uvm.tools.installer import InstallError

if TYPE_CHECKING:
    from uvm.output.console import ConsoleProtocol

__all__ = ["print_uv_error", "uv_error_exit_code"]


def print_uv_error(error: UvError | ConfigError, console: ConsoleProtocol) -> None:
    """Print an error with its hint, if any."""
    match error:
        case UnknownProfile(name=name, available=available):
            console.error(f"no configuration found for profile {name!r}")
            if available:
                console.print(f"Available: {', '.join(available)}", Style.DIM)
            console.print("hint: add a [profiles.<name>] table to uvm.toml", Style.DIM)
        case NoArguments(profile=profile):
            console.error(f"profile {profile!r} has no args and none were given")
        case UnsupportedPlatform(platform=platform):
            console.error(f"uv has no prebuilt release for {platform}")
            console.print("hint: set `path` in uvm.toml to an installed uv", Style.DIM)
        case MissingExecutable(path=path):
            console.error(f"uv not found at configured path {path}")
            console.print("hint: install uv there, or remove `path` to let uvm manage it", Style.DIM)
        case UnmanagedExecutable(path=path):
            console.error(f"uv at {path} is configured explicitly; uvm does not replace it")
            console.print("hint: remove `path` from the config to use a managed install", Style.DIM)
        case InstallError(message=message, hint=hint):
            console.error(message)
            if hint:
                console.print(f"hint: {hint}", Style.DIM)
        case HttpError() | ProcessError() | ConfigError():
            console.error(str(error))


def uv_error_exit_code(error: UvError | ConfigError) -> int:
    match error:
        case (
            UnknownProfile()
            | NoArguments()
            | MissingExecutable()
            | UnmanagedExecutable()
            | ConfigError()
        ):
            return int(ErrorCode.USER_ERROR)
        case UnsupportedPlatform() | ProcessError():
            return int(ErrorCode.ENV_ERROR)
        case HttpError():
            return int(ErrorCode.NETWORK_ERROR)
        case InstallError():
            return int(ErrorCode.IO_ERROR)
