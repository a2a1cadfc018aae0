"""Exit codes used by the ``uvm`` CLI.

Values are process exit codes and must stay stable:
- 0: Success
- 1: User error (bad arguments, unknown profile, invalid config)
- 2: Environment error (unsupported platform)
- 4: Network error (download failed, proxy refused)
- 5: I/O error (temp directory, extraction, copy)

A failing uv child process exits with its own status instead.
"""

from enum import IntEnum

__all__ = ["ErrorCode"]


class ErrorCode(IntEnum):
    OK = 0
    USER_ERROR = 1
    ENV_ERROR = 2
    NETWORK_ERROR = 4
    IO_ERROR = 5
