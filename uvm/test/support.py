"""Test helpers: a stub uv binary packed like a real release archive."""

from __future__ import annotations

import io
import sys
import tarfile

import pytest

from uvm.platform.detection import Arch, Libc, Platform, PlatformInfo

PINNED = "0.4.2"
LINUX_X64 = PlatformInfo(platform=Platform.LINUX, arch=Arch.X64, libc=Libc.GNU)

posix_only = pytest.mark.skipif(sys.platform == "win32", reason="stub uv is a POSIX sh script")


def stub_uv_script(version: str) -> bytes:
    """A shell script that behaves enough like uv for the tests."""
    return (
        "#!/bin/sh\n"
        f'if [ "$1" = "--version" ]; then echo "{version}"; exit 0; fi\n'
        'echo "uv-stub $*"\n'
        'echo "cwd=$(pwd)"\n'
        'echo "var=${UVM_TEST_VAR:-}"\n'
        'echo "to-stderr" >&2\n'
        'exit "${UV_STUB_EXIT:-0}"\n'
    ).encode()


def release_archive(members: dict[str, bytes]) -> bytes:
    """Build an in-memory .tar.gz with the given members (mode 0644)."""
    buf = io.BytesIO()
    with tarfile.open(fileobj=buf, mode="w:gz") as tar:
        for name, content in members.items():
            info = tarfile.TarInfo(name=name)
            info.size = len(content)
            info.mode = 0o644
            tar.addfile(info, io.BytesIO(content))
    return buf.getvalue()
