"""Cache and scratch directory locations.

The installer extracts release archives into a scratch directory under
the cache base. The base is chosen, in order, from:

- ``UVM_CACHE_DIR``
- ``XDG_CACHE_HOME/uvm``
- the system temp directory (``tempfile.gettempdir()/uvm``)
"""

from __future__ import annotations

import os
import tempfile
from pathlib import Path

__all__ = [
    "CACHE_DIR_ENV",
    "cache_dir",
    "install_scratch_dir",
]

APP_NAME = "uvm"
CACHE_DIR_ENV = "UVM_CACHE_DIR"


def cache_dir() -> Path:
    """Get the cache base directory (not created)."""
    explicit = os.environ.get(CACHE_DIR_ENV)
    if explicit:
        return Path(explicit).expanduser()

    xdg_cache = os.environ.get("XDG_CACHE_HOME")
    if xdg_cache:
        return Path(xdg_cache).expanduser() / APP_NAME

    return Path(tempfile.gettempdir()) / APP_NAME


def install_scratch_dir() -> Path:
    """Fixed scratch directory used for archive extraction.

    The name is shared by every install, so two concurrent installs on the
    same machine will collide here.
    """
    return cache_dir() / "install"
