"""Install-and-run service for the managed uv binary.

This is the composition layer behind the CLI commands: it wires the
locator, installer and process runner together for one ``Config``.
``install_and_run`` checks for the binary and then runs it as two separate
steps; concurrent invocations may both install.
"""

from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path

from uvm.core.config import Config, Profile
from uvm.core.result import Err, Ok, Result
from uvm.output.console import ConsoleProtocol
from uvm.platform.detection import PlatformInfo
from uvm.platform.paths import install_scratch_dir
from uvm.platform.process import LineSink, StreamOptions, stdout_sink, stream
from uvm.services.errors import (
    MissingExecutable,
    NoArguments,
    UnknownProfile,
    UnmanagedExecutable,
    UnsupportedPlatform,
    UvError,
)
from uvm.tools.http import HttpClient
from uvm.tools.installer import Installer
from uvm.tools.locator import UvLocator
from uvm.tools.release import UvRelease

__all__ = ["UvService"]


class UvService:
    """Installs the pinned uv for one project and runs it by profile.

    When the config names an explicit ``path``, that binary is used as is:
    it is never downloaded or replaced.

    Usage:
        service = UvService(config=config, platform=detect(), http=http, console=console)
        match service.install_and_run("default", ["sync"]):
            case Ok(status):
                sys.exit(status)
            case Err(error):
                print_uv_error(error, console)
    """

    def __init__(
        self,
        *,
        config: Config,
        platform: PlatformInfo,
        http: HttpClient,
        console: ConsoleProtocol,
        scratch_dir: Path | None = None,
    ) -> None:
        self._config = config
        self._platform = platform
        self._console = console
        self._locator = UvLocator(config, platform.platform)
        self._installer = Installer(
            http,
            scratch_dir=scratch_dir or install_scratch_dir(),
            console=console,
        )

    @property
    def locator(self) -> UvLocator:
        return self._locator

    @property
    def bin_path(self) -> Path:
        return self._locator.bin_path

    def release(self) -> Result[UvRelease, UnsupportedPlatform]:
        release = UvRelease.for_host(self._config.version, self._platform)
        if release is None:
            return Err(UnsupportedPlatform(platform=str(self._platform)))
        return Ok(release)

    def install(self) -> Result[Path, UvError]:
        """Download the pinned release and install it at ``bin_path``."""
        if self._config.path is not None:
            return Err(UnmanagedExecutable(path=self._config.path))

        release = self.release()
        if isinstance(release, Err):
            return release

        self._console.info(f"Installing uv {release.value.version} ({release.value.target})")
        result = self._installer.install(release.value, self.bin_path)
        if isinstance(result, Ok):
            self._console.success(f"uv {release.value.version} installed at {result.value}")
        return result

    def install_if_missing(self) -> Result[Path, UvError]:
        """Install unless the pinned version is already in place."""
        if self._config.path is not None:
            if not self._locator.exists():
                return Err(MissingExecutable(path=self._config.path))
            self.check_version()
            return Ok(self._config.path)

        if self._locator.is_current():
            self._console.debug(f"uv {self._config.version} already installed at {self.bin_path}")
            return Ok(self.bin_path)
        return self.install()

    def check_version(self) -> None:
        """Warn when the installed uv differs from the pinned version."""
        installed = self._locator.installed_version()
        if installed is None or installed == self._config.version:
            return
        if self._config.path is not None:
            remedy = f"Replace {self._config.path} or update the version in your config."
        else:
            remedy = "Run `uvm install` or update the version in your config."
        self._console.warning(
            f"Outdated uv version. Expected {self._config.version}, got {installed}. {remedy}"
        )

    def resolve_profile(self, name: str) -> Result[Profile, UnknownProfile]:
        profile = self._config.profile(name)
        if profile is None:
            return Err(UnknownProfile(name=name, available=self._config.profile_names))
        return Ok(profile)

    def run(
        self,
        profile: str,
        args: Sequence[str],
        *,
        into: LineSink | None = stdout_sink,
    ) -> Result[int, UvError]:
        """Run uv with the profile's base args followed by ``args``.

        Returns:
            Ok(exit_status) of uv, whatever its value, or Err if the
            profile is unknown, there is nothing to run, or uv could not
            be started
        """
        resolved = self.resolve_profile(profile)
        if isinstance(resolved, Err):
            return resolved
        selected = resolved.value

        argv = [*selected.args, *args]
        if not argv:
            return Err(NoArguments(profile=profile))

        options = StreamOptions(cwd=selected.cd, env=selected.env, into=into)
        self._console.debug(f"Running {self.bin_path} {' '.join(argv)}")
        return stream(self.bin_path, argv, options)

    def install_and_run(
        self,
        profile: str,
        args: Sequence[str],
        *,
        into: LineSink | None = stdout_sink,
    ) -> Result[int, UvError]:
        """Install uv if the managed binary is absent, then ``run``.

        An explicitly configured ``path`` that does not exist is an error;
        nothing is downloaded for it.
        """
        resolved = self.resolve_profile(profile)
        if isinstance(resolved, Err):
            return resolved

        if not self._locator.exists():
            if self._config.path is not None:
                return Err(MissingExecutable(path=self._config.path))
            installed = self.install()
            if isinstance(installed, Err):
                return installed
        else:
            self.check_version()

        return self.run(profile, args, into=into)
