"""Managing the uv binary.

- Release asset naming (release.py)
- HTTP client with TLS and proxy support (http.py)
- Locating the binary and probing its version (locator.py)
- Download and installation (installer.py)
"""

from uvm.tools.http import (
    HttpClient,
    HttpError,
    MockHttpClient,
    RealHttpClient,
)
from uvm.tools.installer import Installer, InstallError
from uvm.tools.locator import UvLocator, VersionNotFound, parse_version
from uvm.tools.release import UvRelease

__all__ = [
    # HTTP
    "HttpClient",
    "HttpError",
    "MockHttpClient",
    "RealHttpClient",
    # Install
    "Installer",
    "InstallError",
    # Locate
    "UvLocator",
    "VersionNotFound",
    "parse_version",
    # Release
    "UvRelease",
]
