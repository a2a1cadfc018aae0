"""Download, unpack and install the uv binary.

Installation steps:
1. Recreate the scratch directory (stale files from earlier runs are removed)
2. Fetch the release archive for the pinned version and host target
3. Extract it (tar.gz, or zip on Windows) into the scratch directory
4. Copy ``uv-<target>/uv`` to the destination and mark it executable

Nothing is rolled back on failure; a failed install may leave no binary or
an older one at the destination. There is no locking either: concurrent
installs share the scratch directory and the last writer wins.
"""

from __future__ import annotations

import io
import shutil
import stat
import tarfile
import zipfile
from dataclasses import dataclass
from pathlib import Path, PurePosixPath
from typing import TYPE_CHECKING

from uvm.core.result import Err, Ok, Result
from uvm.platform.paths import CACHE_DIR_ENV
from uvm.tools.http import HttpError

if TYPE_CHECKING:
    from uvm.output.console import ConsoleProtocol
    from uvm.tools.http import HttpClient
    from uvm.tools.release import UvRelease

__all__ = ["BIN_MODE", "Installer", "InstallError"]

BIN_MODE = 0o755


@dataclass(frozen=True, slots=True)
class InstallError:
    """Installation error details.

    Attributes:
        message: Human-readable error message
        hint: Suggested remediation, if any
    """

    message: str
    hint: str | None = None

    def __str__(self) -> str:
        return self.message


def _safe_relative_path(member_name: str) -> Path | None:
    """Return a sanitized relative extraction path, or None if unsafe."""
    normalized = member_name.replace("\\", "/")
    if normalized.startswith("/"):
        return None

    parts = PurePosixPath(normalized).parts
    if not parts:
        return None
    if any(part in {"", ".", ".."} for part in parts):
        return None
    if parts[0].endswith(":"):
        return None

    return Path(*parts)


def _is_within_root(root: Path, target: Path) -> bool:
    try:
        return target.resolve().is_relative_to(root.resolve())
    except OSError:
        return False


def extract_tar_gz(data: bytes, dest: Path) -> int:
    """Extract regular files from a gzip tarball held in memory.

    Links, devices and entries escaping ``dest`` are skipped.

    Returns:
        Number of files written

    Raises:
        tarfile.TarError: On a corrupt archive
        OSError: On write failures
    """
    count = 0
    with tarfile.open(fileobj=io.BytesIO(data), mode="r:gz") as tar:
        for member in tar.getmembers():
            if not member.isreg():
                continue

            rel_path = _safe_relative_path(member.name)
            if rel_path is None:
                continue

            full_path = dest / rel_path
            if not _is_within_root(dest, full_path):
                continue

            src = tar.extractfile(member)
            if src is None:
                continue

            full_path.parent.mkdir(parents=True, exist_ok=True)
            with src, open(full_path, "wb") as out:
                shutil.copyfileobj(src, out)
            count += 1
    return count


def extract_zip(data: bytes, dest: Path) -> int:
    """Extract regular files from a zip archive held in memory.

    Raises:
        zipfile.BadZipFile: On a corrupt archive
        OSError: On write failures
    """
    count = 0
    with zipfile.ZipFile(io.BytesIO(data)) as zf:
        for info in zf.infolist():
            if info.is_dir():
                continue

            file_type_bits = (info.external_attr >> 16) & 0o170000
            if file_type_bits == stat.S_IFLNK:
                continue

            rel_path = _safe_relative_path(info.filename)
            if rel_path is None:
                continue

            full_path = dest / rel_path
            if not _is_within_root(dest, full_path):
                continue

            full_path.parent.mkdir(parents=True, exist_ok=True)
            with zf.open(info) as src, open(full_path, "wb") as out:
                shutil.copyfileobj(src, out)
            count += 1
    return count


class Installer:
    """Installs one uv release to a destination path.

    Usage:
        installer = Installer(http, scratch_dir=install_scratch_dir())
        result = installer.install(release, locator.bin_path)
    """

    def __init__(
        self,
        http: HttpClient,
        *,
        scratch_dir: Path,
        console: ConsoleProtocol | None = None,
    ) -> None:
        self._http = http
        self._scratch_dir = scratch_dir
        self._console = console

    @property
    def scratch_dir(self) -> Path:
        return self._scratch_dir

    def _debug(self, message: str) -> None:
        if self._console is not None:
            self._console.debug(message)

    def _fresh_scratch_dir(self) -> Result[Path, InstallError]:
        path = self._scratch_dir
        try:
            if path.exists():
                shutil.rmtree(path)
            path.mkdir(parents=True)
        except OSError as e:
            return Err(
                InstallError(
                    message=f"could not install uv: cannot prepare {path}: {e}",
                    hint=(
                        f"Set {CACHE_DIR_ENV} (or XDG_CACHE_HOME) to a writable "
                        "directory to use as cache"
                    ),
                )
            )
        return Ok(path)

    def _unpack(self, release: UvRelease, data: bytes, dest: Path) -> Result[int, InstallError]:
        try:
            if release.archive_ext == "zip":
                count = extract_zip(data, dest)
            else:
                count = extract_tar_gz(data, dest)
        except (tarfile.TarError, zipfile.BadZipFile, EOFError, OSError) as e:
            return Err(InstallError(message=f"couldn't unpack archive {release.asset_name}: {e}"))
        return Ok(count)

    def install(
        self, release: UvRelease, dest: Path
    ) -> Result[Path, InstallError | HttpError]:
        """Install ``release`` so that ``dest`` is an executable uv.

        Returns:
            Ok(dest), or Err with the first failure
        """
        scratch = self._fresh_scratch_dir()
        if isinstance(scratch, Err):
            return scratch
        tmp_dir = scratch.value

        self._debug(f"Downloading uv from {release.url}")
        body = self._http.get(release.url)
        if isinstance(body, Err):
            return body

        unpacked = self._unpack(release, body.value, tmp_dir)
        if isinstance(unpacked, Err):
            return unpacked
        self._debug(f"Extracted {unpacked.value} file(s) into {tmp_dir}")

        src = tmp_dir / Path(release.binary_member)
        if not src.is_file():
            return Err(
                InstallError(message=f"archive {release.asset_name} has no {release.binary_member}")
            )

        try:
            dest.parent.mkdir(parents=True, exist_ok=True)
            shutil.copyfile(src, dest)
            dest.chmod(BIN_MODE)
        except OSError as e:
            return Err(InstallError(message=f"could not install uv to {dest}: {e}"))

        return Ok(dest)
