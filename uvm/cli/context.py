from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

import typer

from uvm.core.config import Config, load_project_config
from uvm.core.result import Err
from uvm.output.console import ConsoleProtocol, RichConsole
from uvm.output.errors import print_uv_error, uv_error_exit_code
from uvm.platform.detection import PlatformInfo, detect
from uvm.services.uv import UvService
from uvm.tools.http import HttpClient, RealHttpClient

CONFIG_ENV = "UVM_CONFIG"
VERBOSE_ENV = "UVM_VERBOSE"


@dataclass(frozen=True, slots=True)
class CLIContext:
    config: Config
    platform: PlatformInfo
    console: ConsoleProtocol
    http: HttpClient

    def service(self) -> UvService:
        return UvService(
            config=self.config,
            platform=self.platform,
            http=self.http,
            console=self.console,
        )


def build_context() -> CLIContext:
    console = RichConsole(verbose=os.environ.get(VERBOSE_ENV) == "1")

    explicit = os.environ.get(CONFIG_ENV)
    config_result = load_project_config(Path(explicit) if explicit else None)
    if isinstance(config_result, Err):
        print_uv_error(config_result.error, console)
        raise typer.Exit(code=uv_error_exit_code(config_result.error))

    config = config_result.value
    return CLIContext(
        config=config,
        platform=detect(),
        console=console,
        http=RealHttpClient(cacertfile=config.cacertfile),
    )
