from __future__ import annotations

from collections.abc import Callable
from pathlib import Path

import pytest

from uvm.core.config import Config
from uvm.output.console import MockConsole
from uvm.services.uv import UvService
from uvm.test.support import LINUX_X64, PINNED, release_archive, stub_uv_script
from uvm.tools.http import MockHttpClient
from uvm.tools.release import UvRelease


@pytest.fixture
def release() -> UvRelease:
    found = UvRelease.for_host(PINNED, LINUX_X64)
    assert found is not None
    return found


@pytest.fixture
def make_archive(release: UvRelease) -> Callable[[str], bytes]:
    def _make(version: str = PINNED) -> bytes:
        return release_archive({str(release.binary_member): stub_uv_script(version)})

    return _make


@pytest.fixture
def http(release: UvRelease, make_archive: Callable[[str], bytes]) -> MockHttpClient:
    client = MockHttpClient()
    client.set_response(release.url, make_archive(PINNED))
    return client


@pytest.fixture
def config(tmp_path: Path) -> Config:
    root = tmp_path / "project"
    root.mkdir()
    return Config(root=root)


@pytest.fixture
def console() -> MockConsole:
    return MockConsole()


@pytest.fixture
def service(
    config: Config, http: MockHttpClient, console: MockConsole, tmp_path: Path
) -> UvService:
    return UvService(
        config=config,
        platform=LINUX_X64,
        http=http,
        console=console,
        scratch_dir=tmp_path / "scratch",
    )
