"""Tests for uvm.platform.process module."""

from __future__ import annotations

import os
import sys
from pathlib import Path

import pytest

from uvm.core.result import Err, Ok
from uvm.platform.process import ProcessError, StreamOptions, run, stream
from uvm.test.support import posix_only

PYTHON = Path(sys.executable)

# Prints its pid, then keeps writing until killed.
CHATTY_CHILD = (
    "import os, time\n"
    "print(os.getpid(), flush=True)\n"
    "while True:\n"
    "    print('tick', flush=True)\n"
    "    time.sleep(0.05)\n"
)


def _collect(**kwargs: object) -> tuple[list[str], StreamOptions]:
    lines: list[str] = []
    return lines, StreamOptions(into=lines.append, **kwargs)  # type: ignore[arg-type]


class TestRun:
    """Tests for run (captured output)."""

    def test_success(self) -> None:
        result = run([sys.executable, "-c", "print('hello')"])

        assert isinstance(result, Ok)
        assert result.value.strip() == "hello"

    def test_failure(self) -> None:
        result = run([sys.executable, "-c", "import sys; sys.stderr.write('bad'); sys.exit(3)"])

        assert isinstance(result, Err)
        assert result.error.returncode == 3
        assert result.error.stderr == "bad"
        assert "failed (exit 3)" in str(result.error)

    def test_not_found(self, tmp_path: Path) -> None:
        result = run([str(tmp_path / "no-such-binary")])

        assert isinstance(result, Err)
        assert result.error.returncode == -1
        assert "could not be started" in str(result.error)


class TestStream:
    """Tests for stream (line-forwarded output)."""

    def test_empty_args_raise(self, tmp_path: Path) -> None:
        """Nothing is spawned for an empty argument list."""
        with pytest.raises(ValueError):
            stream(tmp_path / "never-run", [])

    def test_forwards_lines_in_order(self) -> None:
        lines, options = _collect()
        code = "import sys\nfor i in range(3):\n    print(i, flush=True)\nsys.exit(0)"

        result = stream(PYTHON, ["-c", code], options)

        assert result == Ok(0)
        assert lines == ["0\n", "1\n", "2\n"]

    def test_merges_stderr(self) -> None:
        lines, options = _collect()
        code = "import sys; print('out', flush=True); sys.stderr.write('err\\n')"

        stream(PYTHON, ["-c", code], options)

        assert lines == ["out\n", "err\n"]

    def test_separate_stderr(self, capfd: pytest.CaptureFixture[str]) -> None:
        lines, options = _collect(stderr_to_stdout=False)
        code = "import sys; print('out', flush=True); sys.stderr.write('err\\n')"

        stream(PYTHON, ["-c", code], options)

        assert lines == ["out\n"]
        assert "err" in capfd.readouterr().err

    def test_nonzero_status_is_ok(self) -> None:
        _, options = _collect()

        result = stream(PYTHON, ["-c", "raise SystemExit(7)"], options)

        assert result == Ok(7)

    def test_env_overlays_parent(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("UVM_PARENT_VAR", "parent")
        lines, options = _collect(env={"UVM_CHILD_VAR": "child"})
        code = "import os; print(os.environ['UVM_PARENT_VAR'], os.environ['UVM_CHILD_VAR'])"

        stream(PYTHON, ["-c", code], options)

        assert lines == ["parent child\n"]

    def test_cwd(self, tmp_path: Path) -> None:
        lines, options = _collect(cwd=tmp_path)

        stream(PYTHON, ["-c", "import os; print(os.getcwd())"], options)

        assert Path(lines[0].strip()).resolve() == tmp_path.resolve()

    def test_arg0(self) -> None:
        """argv[0] is replaced while the same executable runs."""
        arg0 = str(PYTHON.with_name("uvm-arg0"))
        lines, options = _collect(arg0=arg0)

        stream(PYTHON, ["-c", "import sys; print(sys.orig_argv[0])"], options)

        assert lines == [f"{arg0}\n"]

    def test_inherit_stdio(self, capfd: pytest.CaptureFixture[str]) -> None:
        """With no sink the child writes straight to our stdout."""
        result = stream(PYTHON, ["-c", "print('direct')"], StreamOptions(into=None))

        assert result == Ok(0)
        assert "direct" in capfd.readouterr().out

    def test_cannot_start(self, tmp_path: Path) -> None:
        result = stream(tmp_path / "missing", ["--version"])

        assert isinstance(result, Err)
        assert isinstance(result.error, ProcessError)
        assert result.error.returncode == -1


class TestProcessError:
    def test_long_command_is_shortened(self) -> None:
        error = ProcessError(
            command=("uv", "pip", "install", "x", "y"), returncode=1, stdout="", stderr=""
        )

        assert str(error) == "uv pip install ... failed (exit 1)"
        assert error.message == str(error)


@posix_only
class TestStreamSinkFailure:
    """A failing sink never leaves the child running or unreaped."""

    def _assert_reaped(self, pid: int) -> None:
        # Only an already-reaped child makes waitpid fail.
        with pytest.raises(ChildProcessError):
            os.waitpid(pid, os.WNOHANG)

    def test_broken_pipe_becomes_error(self) -> None:
        pids: list[int] = []

        def sink(line: str) -> None:
            if not pids:
                pids.append(int(line))
                return
            raise BrokenPipeError("reader went away")

        result = stream(PYTHON, ["-c", CHATTY_CHILD], StreamOptions(into=sink))

        assert isinstance(result, Err)
        assert "reader went away" in result.error.stderr
        assert result.error.returncode != 0
        self._assert_reaped(pids[0])

    def test_interrupt_kills_child_and_propagates(self) -> None:
        pids: list[int] = []

        def sink(line: str) -> None:
            if not pids:
                pids.append(int(line))
                return
            raise KeyboardInterrupt

        with pytest.raises(KeyboardInterrupt):
            stream(PYTHON, ["-c", CHATTY_CHILD], StreamOptions(into=sink))

        self._assert_reaped(pids[0])
