"""Locating the managed uv binary and probing its version."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from uvm.core.config import Config
from uvm.core.result import Err, Ok, Result
from uvm.platform.detection import Platform
from uvm.platform.process import run
from uvm.tools.release import TOOL_NAME

__all__ = ["UvLocator", "VersionNotFound", "parse_version"]


@dataclass(frozen=True, slots=True)
class VersionNotFound:
    """The binary is missing, or ``--version`` did not succeed.

    The two cases are deliberately not distinguished.
    """

    path: Path

    def __str__(self) -> str:
        return f"no working uv executable at {self.path}"


def parse_version(text: str) -> str:
    """Reduce ``uv --version`` output to the bare version.

    "uv 0.4.2 (c1a3d7b 2024-08-29)" -> "0.4.2"; text that is already a bare
    version is returned stripped.
    """
    parts = text.split()
    if len(parts) >= 2 and parts[0] == TOOL_NAME:
        return parts[1]
    return text.strip()


class UvLocator:
    """Where the managed binary lives, and what version it is.

    Usage:
        locator = UvLocator(config, platform)
        match locator.bin_version():
            case Ok(version):
                print(version)
            case Err(_):
                print("not installed")
    """

    def __init__(self, config: Config, platform: Platform) -> None:
        self._config = config
        self._platform = platform

    @property
    def bin_path(self) -> Path:
        """Path to the executable. It may not exist yet.

        The configured ``path`` wins; otherwise
        ``<root>/<install_dir>/uv[.exe]``.
        """
        if self._config.path is not None:
            return self._config.path
        return self._config.root / self._config.install_dir / self._platform.exe_name(TOOL_NAME)

    def exists(self) -> bool:
        return self.bin_path.is_file()

    def bin_version(self) -> Result[str, VersionNotFound]:
        """Run ``uv --version`` and return its trimmed stdout."""
        path = self.bin_path
        if not path.is_file():
            return Err(VersionNotFound(path=path))

        result = run([str(path), "--version"])
        if isinstance(result, Err):
            return Err(VersionNotFound(path=path))
        return Ok(result.value.strip())

    def installed_version(self) -> str | None:
        """Bare installed version (see ``parse_version``), or None."""
        result = self.bin_version()
        if isinstance(result, Err):
            return None
        return parse_version(result.value)

    def is_current(self) -> bool:
        """True if the installed version equals the pinned one."""
        return self.installed_version() == self._config.version
