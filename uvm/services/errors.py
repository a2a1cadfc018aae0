from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from uvm.platform.process import ProcessError
from uvm.tools.http import HttpError
from uvm.tools.installer import InstallError


@dataclass(frozen=True, slots=True)
class UnknownProfile:
    name: str
    available: tuple[str, ...]


@dataclass(frozen=True, slots=True)
class NoArguments:
    profile: str


@dataclass(frozen=True, slots=True)
class UnsupportedPlatform:
    platform: str


@dataclass(frozen=True, slots=True)
class MissingExecutable:
    """The configured ``path`` does not exist. uvm never installs there."""

    path: Path


@dataclass(frozen=True, slots=True)
class UnmanagedExecutable:
    """``install`` was asked to replace an explicitly configured binary."""

    path: Path


UvError = (
    UnknownProfile
    | NoArguments
    | UnsupportedPlatform
    | MissingExecutable
    | UnmanagedExecutable
    | InstallError
    | HttpError
    | ProcessError
)
