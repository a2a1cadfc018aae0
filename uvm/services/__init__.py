from uvm.services.errors import (
    MissingExecutable,
    NoArguments,
    UnknownProfile,
    UnmanagedExecutable,
    UnsupportedPlatform,
    UvError,
)
from uvm.services.uv import UvService

__all__ = [
    "MissingExecutable",
    "NoArguments",
    "UnknownProfile",
    "UnmanagedExecutable",
    "UnsupportedPlatform",
    "UvError",
    "UvService",
]
