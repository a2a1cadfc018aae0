"""uv release assets on GitHub.

Assets follow:
    https://github.com/astral-sh/uv/releases/download/{version}/uv-{target}.tar.gz

and unpack to a single top-level directory holding the binary:
    uv-{target}/uv
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import PurePosixPath

from uvm.platform.detection import Platform, PlatformInfo

__all__ = ["RELEASE_BASE_URL", "RELEASE_REPO", "TOOL_NAME", "UvRelease"]

RELEASE_BASE_URL = "https://github.com"
RELEASE_REPO = "astral-sh/uv"
TOOL_NAME = "uv"


@dataclass(frozen=True, slots=True)
class UvRelease:
    """One release asset: a version built for one target."""

    version: str
    target: str
    platform: Platform = Platform.LINUX
    archive_ext: str = "tar.gz"
    base_url: str = RELEASE_BASE_URL
    repo: str = RELEASE_REPO

    @classmethod
    def for_host(cls, version: str, info: PlatformInfo) -> UvRelease | None:
        """Release for the given host, or None if uv has no build for it."""
        target = info.target
        if target is None:
            return None
        return cls(
            version=version,
            target=target,
            platform=info.platform,
            archive_ext=info.archive_ext,
        )

    @property
    def archive_dir(self) -> str:
        return f"{TOOL_NAME}-{self.target}"

    @property
    def asset_name(self) -> str:
        return f"{self.archive_dir}.{self.archive_ext}"

    @property
    def url(self) -> str:
        return f"{self.base_url}/{self.repo}/releases/download/{self.version}/{self.asset_name}"

    @property
    def binary_member(self) -> PurePosixPath:
        """Path of the executable inside the unpacked archive."""
        return PurePosixPath(self.archive_dir) / self.platform.exe_name(TOOL_NAME)
