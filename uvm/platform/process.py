"""Subprocess execution.

This is the only module that spawns processes. Two entry points:

- ``run``: capture stdout of a short command (used for ``uv --version``)
  and return it as a Result.
- ``stream``: run a command to completion while forwarding its output
  line by line, and return its exit status.

Both block until the child exits. There is no timeout and no cancellation.
If the line sink raises, the child is killed and reaped before ``stream``
returns (OSError) or re-raises (anything else).
"""

from __future__ import annotations

import os
import subprocess
import sys
from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass, field
from pathlib import Path

from uvm.core.result import Err, Ok, Result

__all__ = ["LineSink", "ProcessError", "StreamOptions", "run", "stream", "stdout_sink"]

LineSink = Callable[[str], None]


@dataclass(frozen=True, slots=True)
class ProcessError:
    """Error from a failed subprocess execution.

    Attributes:
        command: The command that was executed.
        returncode: Exit code of the process (-1 if it never started).
        stdout: Standard output (may be empty).
        stderr: Standard error, or the OS error for spawn failures.
    """

    command: tuple[str, ...]
    returncode: int
    stdout: str
    stderr: str

    @property
    def message(self) -> str:
        return str(self)

    def __str__(self) -> str:
        cmd_str = " ".join(self.command[:3])
        if len(self.command) > 3:
            cmd_str += " ..."
        if self.returncode == -1:
            return f"{cmd_str} could not be started: {self.stderr}"
        if self.stderr.strip():
            return f"{cmd_str} failed (exit {self.returncode}): {self.stderr.strip()}"
        return f"{cmd_str} failed (exit {self.returncode})"


def stdout_sink(line: str) -> None:
    """Write a line to the parent's stdout immediately."""
    sys.stdout.write(line)
    sys.stdout.flush()


@dataclass(frozen=True, slots=True)
class StreamOptions:
    """How a streamed command is run.

    Attributes:
        cwd: Working directory (None: the caller's current directory)
        env: Variables overlaid on ``os.environ`` (never replaces it)
        into: Receives each output line as it arrives; None inherits the
            parent's stdio instead of piping
        stderr_to_stdout: Merge the child's stderr into its stdout
        arg0: Value for the child's ``argv[0]`` (the executable is unchanged)
    """

    cwd: Path | None = None
    env: Mapping[str, str] = field(default_factory=dict)
    into: LineSink | None = stdout_sink
    stderr_to_stdout: bool = True
    arg0: str | None = None


def run(
    cmd: list[str],
    cwd: Path | None = None,
    env: dict[str, str] | None = None,
) -> Result[str, ProcessError]:
    """Execute a command and return its stdout or an error.

    Args:
        cmd: Command and arguments to execute.
        cwd: Working directory for the command.
        env: Full environment (uses current env if None).

    Returns:
        Ok(stdout) on exit 0, Err(ProcessError) otherwise.
    """
    try:
        proc = subprocess.run(
            cmd,
            cwd=str(cwd) if cwd is not None else None,
            env=env,
            capture_output=True,
            text=True,
            check=False,
        )
    except OSError as e:
        return Err(
            ProcessError(
                command=tuple(cmd),
                returncode=-1,
                stdout="",
                stderr=str(e),
            )
        )

    if proc.returncode != 0:
        return Err(
            ProcessError(
                command=tuple(cmd),
                returncode=proc.returncode,
                stdout=proc.stdout,
                stderr=proc.stderr,
            )
        )

    return Ok(proc.stdout)


def stream(
    executable: Path,
    args: Sequence[str],
    options: StreamOptions | None = None,
) -> Result[int, ProcessError]:
    """Run ``executable`` with ``args``, forwarding output as it is produced.

    Args:
        executable: Binary to run.
        args: Arguments after argv[0]; must not be empty.
        options: Working directory, env overlay and output handling.

    Returns:
        Ok(exit_status) once the child exits (any status, including
        non-zero), or Err(ProcessError) if it could not be started or its
        output could not be forwarded.

    Raises:
        ValueError: If ``args`` is empty. Nothing is spawned.
    """
    if not args:
        raise ValueError("stream() requires a non-empty argument list")

    opts = options or StreamOptions()
    argv = [opts.arg0 or str(executable), *args]
    env = {**os.environ, **opts.env}
    cwd = str(opts.cwd) if opts.cwd is not None else None
    stderr = subprocess.STDOUT if opts.stderr_to_stdout else None

    try:
        if opts.into is None:
            proc = subprocess.Popen(
                argv,
                executable=str(executable),
                cwd=cwd,
                env=env,
                stderr=stderr,
            )
            return Ok(proc.wait())

        proc = subprocess.Popen(
            argv,
            executable=str(executable),
            cwd=cwd,
            env=env,
            stdout=subprocess.PIPE,
            stderr=stderr,
            text=True,
            errors="replace",
            bufsize=1,
        )
    except OSError as e:
        return Err(
            ProcessError(
                command=tuple(argv),
                returncode=-1,
                stdout="",
                stderr=str(e),
            )
        )

    assert proc.stdout is not None
    try:
        with proc.stdout as out:
            for line in out:
                opts.into(line)
    except OSError as e:
        # Sink failed, e.g. the reader of our stdout went away.
        _kill(proc)
        return Err(
            ProcessError(
                command=tuple(argv),
                returncode=proc.returncode,
                stdout="",
                stderr=f"output could not be forwarded: {e}",
            )
        )
    except BaseException:
        _kill(proc)
        raise
    return Ok(proc.wait())


def _kill(proc: subprocess.Popen[str]) -> None:
    proc.kill()
    proc.wait()
