"""Tests for uvm.platform.detection module."""

from __future__ import annotations

from collections.abc import Iterator
from types import SimpleNamespace

import pytest

from uvm.platform import detection
from uvm.platform.detection import Arch, Libc, Platform, PlatformInfo

_CACHED = (
    detection.detect_platform,
    detection.detect_arch,
    detection.detect_libc,
    detection.detect,
)


@pytest.fixture(autouse=True)
def clear_detection_caches() -> Iterator[None]:
    for fn in _CACHED:
        fn.cache_clear()
    yield
    for fn in _CACHED:
        fn.cache_clear()


def _host(monkeypatch: pytest.MonkeyPatch, system: str, machine: str = "", libc: str = "") -> None:
    monkeypatch.setattr(detection, "_sys", SimpleNamespace(platform=system))
    monkeypatch.setattr(
        detection,
        "_platform",
        SimpleNamespace(machine=lambda: machine, libc_ver=lambda: (libc, "")),
    )


class TestTarget:
    """Target triples for release assets."""

    @pytest.mark.parametrize(
        ("info", "expected"),
        [
            (PlatformInfo(Platform.LINUX, Arch.X64), "x86_64-unknown-linux-gnu"),
            (PlatformInfo(Platform.LINUX, Arch.ARM64, Libc.MUSL), "aarch64-unknown-linux-musl"),
            (PlatformInfo(Platform.MACOS, Arch.X64), "x86_64-apple-darwin"),
            (PlatformInfo(Platform.MACOS, Arch.ARM64), "aarch64-apple-darwin"),
            (PlatformInfo(Platform.WINDOWS, Arch.X64), "x86_64-pc-windows-msvc"),
        ],
    )
    def test_supported(self, info: PlatformInfo, expected: str) -> None:
        assert info.target == expected
        assert str(info) == expected

    def test_unknown_platform(self) -> None:
        info = PlatformInfo(Platform.UNKNOWN, Arch.X64)
        assert info.target is None
        assert str(info) == "unknown-x64"

    def test_unknown_arch(self) -> None:
        assert PlatformInfo(Platform.LINUX, Arch.UNKNOWN).target is None


class TestPlatformInfo:
    def test_archive_ext(self) -> None:
        assert PlatformInfo(Platform.WINDOWS, Arch.X64).archive_ext == "zip"
        assert PlatformInfo(Platform.LINUX, Arch.X64).archive_ext == "tar.gz"
        assert PlatformInfo(Platform.MACOS, Arch.ARM64).archive_ext == "tar.gz"

    def test_exe_name(self) -> None:
        assert Platform.WINDOWS.exe_name("uv") == "uv.exe"
        assert Platform.LINUX.exe_name("uv") == "uv"

    def test_is_unix(self) -> None:
        assert PlatformInfo(Platform.MACOS, Arch.ARM64).is_unix
        assert not PlatformInfo(Platform.WINDOWS, Arch.X64).is_unix
        assert PlatformInfo(Platform.WINDOWS, Arch.X64).is_windows


class TestDetect:
    """Host detection, with sys/platform patched."""

    def test_linux(self, monkeypatch: pytest.MonkeyPatch) -> None:
        _host(monkeypatch, "linux", "x86_64", "glibc")

        assert detection.detect() == PlatformInfo(Platform.LINUX, Arch.X64, Libc.GNU)

    def test_macos_arm(self, monkeypatch: pytest.MonkeyPatch) -> None:
        _host(monkeypatch, "darwin", "arm64")

        assert detection.detect() == PlatformInfo(Platform.MACOS, Arch.ARM64)

    def test_windows_reads_env(self, monkeypatch: pytest.MonkeyPatch) -> None:
        _host(monkeypatch, "win32")
        monkeypatch.delenv("PROCESSOR_ARCHITEW6432", raising=False)
        monkeypatch.setenv("PROCESSOR_ARCHITECTURE", "AMD64")

        assert detection.detect_arch() == Arch.X64

    def test_unknown_machine(self, monkeypatch: pytest.MonkeyPatch) -> None:
        _host(monkeypatch, "linux", "riscv64")

        assert detection.detect_arch() == Arch.UNKNOWN

    def test_libc_is_gnu_off_linux(self, monkeypatch: pytest.MonkeyPatch) -> None:
        _host(monkeypatch, "darwin")

        assert detection.detect_libc() == Libc.GNU
