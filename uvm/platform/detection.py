"""Platform and architecture detection.

Detects the host OS, CPU architecture and (on Linux) the C library, and
turns them into the target triple used in uv release asset names, e.g.
``x86_64-unknown-linux-gnu`` or ``aarch64-apple-darwin``. Detection is
cached; tests build ``PlatformInfo`` directly instead.
"""

from __future__ import annotations

import os as _os
import platform as _platform
import sys as _sys
from dataclasses import dataclass
from enum import Enum, auto
from functools import lru_cache
from pathlib import Path

__all__ = [
    "Platform",
    "Arch",
    "Libc",
    "PlatformInfo",
    "detect",
    "detect_arch",
    "detect_libc",
    "detect_platform",
]


class Platform(Enum):
    """Operating system platform."""

    LINUX = auto()
    MACOS = auto()
    WINDOWS = auto()
    UNKNOWN = auto()

    def __str__(self) -> str:
        return self.name.lower()

    @property
    def is_unix(self) -> bool:
        return self in (Platform.LINUX, Platform.MACOS)

    @property
    def exe_suffix(self) -> str:
        return ".exe" if self == Platform.WINDOWS else ""

    def exe_name(self, name: str) -> str:
        """Get executable name with platform-appropriate suffix.

        Example: exe_name("uv") -> "uv.exe" on Windows, "uv" elsewhere.
        """
        return f"{name}{self.exe_suffix}"


class Arch(Enum):
    """CPU architecture."""

    X64 = auto()
    ARM64 = auto()
    UNKNOWN = auto()

    def __str__(self) -> str:
        return self.name.lower()

    @property
    def triple_prefix(self) -> str | None:
        return {
            Arch.X64: "x86_64",
            Arch.ARM64: "aarch64",
        }.get(self)


class Libc(Enum):
    """C library flavour (Linux only)."""

    GNU = auto()
    MUSL = auto()

    def __str__(self) -> str:
        return self.name.lower()


@dataclass(frozen=True, slots=True)
class PlatformInfo:
    """Immutable host description. Use ``detect()`` to get one."""

    platform: Platform
    arch: Arch
    libc: Libc = Libc.GNU

    @property
    def is_windows(self) -> bool:
        return self.platform == Platform.WINDOWS

    @property
    def is_unix(self) -> bool:
        return self.platform.is_unix

    @property
    def archive_ext(self) -> str:
        """Release archive extension (uv ships zips for Windows)."""
        return "zip" if self.is_windows else "tar.gz"

    @property
    def target(self) -> str | None:
        """Target triple for release assets, or None if unsupported."""
        prefix = self.arch.triple_prefix
        if prefix is None:
            return None
        match self.platform:
            case Platform.LINUX:
                return f"{prefix}-unknown-linux-{self.libc}"
            case Platform.MACOS:
                return f"{prefix}-apple-darwin"
            case Platform.WINDOWS:
                return f"{prefix}-pc-windows-msvc"
            case _:
                return None

    def __str__(self) -> str:
        return self.target or f"{self.platform}-{self.arch}"


@lru_cache(maxsize=1)
def detect_platform() -> Platform:
    """Detect the current operating system (cached)."""
    system = _sys.platform.lower()
    if system.startswith("linux"):
        return Platform.LINUX
    if system.startswith("darwin"):
        return Platform.MACOS
    if system.startswith(("win32", "cygwin", "msys")):
        return Platform.WINDOWS
    return Platform.UNKNOWN


@lru_cache(maxsize=1)
def detect_arch() -> Arch:
    """Detect the current CPU architecture (cached)."""
    # NOTE: platform.machine() may query WMI on Windows (slow/hangs).
    if detect_platform() == Platform.WINDOWS:
        env_arch = (
            _os.environ.get("PROCESSOR_ARCHITEW6432")
            or _os.environ.get("PROCESSOR_ARCHITECTURE")
            or ""
        )
        machine = env_arch.lower()
    else:
        machine = _platform.machine().lower()
    if machine in ("x86_64", "amd64"):
        return Arch.X64
    if machine in ("aarch64", "arm64"):
        return Arch.ARM64
    return Arch.UNKNOWN


@lru_cache(maxsize=1)
def detect_libc() -> Libc:
    """Detect glibc vs musl on Linux (cached). GNU everywhere else."""
    if detect_platform() != Platform.LINUX:
        return Libc.GNU

    lib, _ = _platform.libc_ver()
    if lib == "glibc":
        return Libc.GNU
    if any(Path("/lib").glob("ld-musl-*.so.1")):
        return Libc.MUSL
    return Libc.GNU


@lru_cache(maxsize=1)
def detect() -> PlatformInfo:
    """Detect complete platform information (cached)."""
    return PlatformInfo(
        platform=detect_platform(),
        arch=detect_arch(),
        libc=detect_libc(),
    )
