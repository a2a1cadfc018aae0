"""Platform abstraction layer."""

from .detection import (
    Arch,
    Libc,
    Platform,
    PlatformInfo,
    detect,
)
from .paths import (
    cache_dir,
    install_scratch_dir,
)
from .process import (
    ProcessError,
    StreamOptions,
    run,
    stream,
)

__all__ = [
    # detection
    "Arch",
    "Libc",
    "Platform",
    "PlatformInfo",
    "detect",
    # paths
    "cache_dir",
    "install_scratch_dir",
    # process
    "ProcessError",
    "StreamOptions",
    "run",
    "stream",
]
