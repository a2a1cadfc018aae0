"""Tests for uvm.output.errors module."""

from __future__ import annotations

from pathlib import Path

import pytest

from uvm.core.config import ConfigError
from uvm.output.console import MockConsole
from uvm.output.errors import print_uv_error, uv_error_exit_code
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


class TestExitCodes:
    @pytest.mark.parametrize(
        ("error", "code"),
        [
            (UnknownProfile(name="x", available=()), 1),
            (NoArguments(profile="default"), 1),
            (MissingExecutable(path=Path("/opt/uv")), 1),
            (UnmanagedExecutable(path=Path("/opt/uv")), 1),
            (ConfigError("bad"), 1),
            (UnsupportedPlatform(platform="unknown-x64"), 2),
            (ProcessError(command=("uv",), returncode=-1, stdout="", stderr="denied"), 2),
            (HttpError(url="https://x", status=404, message="Not Found"), 4),
            (InstallError(message="disk full"), 5),
        ],
    )
    def test_mapping(self, error: UvError | ConfigError, code: int) -> None:
        assert uv_error_exit_code(error) == code


class TestPrintUvError:
    def test_unknown_profile_lists_available(self) -> None:
        console = MockConsole()

        print_uv_error(UnknownProfile(name="lint", available=("ci", "default")), console)

        assert console.has_error()
        assert console.find("Available: ci, default")

    def test_missing_executable_hint(self) -> None:
        console = MockConsole()

        print_uv_error(MissingExecutable(path=Path("/opt/uv")), console)

        assert console.messages[0] == f"error: uv not found at configured path {Path('/opt/uv')}"
        assert console.messages[1].startswith("hint: install uv there")

    def test_install_error_hint(self) -> None:
        console = MockConsole()

        print_uv_error(InstallError(message="cannot prepare", hint="Set UVM_CACHE_DIR"), console)

        assert console.messages == ["error: cannot prepare", "hint: Set UVM_CACHE_DIR"]

    def test_http_error_message(self) -> None:
        console = MockConsole()
        error = HttpError(url="https://x/uv.tar.gz", status=0, message="timed out")

        print_uv_error(error, console)

        assert console.messages == ["error: couldn't fetch https://x/uv.tar.gz: timed out"]

    def test_config_error_includes_path(self) -> None:
        console = MockConsole()

        print_uv_error(ConfigError("Invalid config: bad", path=Path("uvm.toml")), console)

        assert console.messages == ["error: Invalid config: bad (uvm.toml)"]
