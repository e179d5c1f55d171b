"""Tests for spawning and stopping the server process."""

import os
import sys
from pathlib import Path

import pytest

from seleniumctl.errors import ProcessSpawnError
from seleniumctl.models import LaunchSpec, TrackedProcess
from seleniumctl.process_control import (
    await_exit,
    launch,
    track_process,
    validate_tracked,
)


def _python(code: str) -> LaunchSpec:
    return LaunchSpec(tokens=(sys.executable, "-c", code))


def test_missing_executable() -> None:
    spec = LaunchSpec(tokens=("seleniumctl-no-such-java", "-jar", "x.jar"))
    with pytest.raises(ProcessSpawnError, match="seleniumctl-no-such-java"):
        launch(spec, os.environ)


def test_await_exit_returns_code() -> None:
    handle = launch(_python("raise SystemExit(3)"), os.environ)
    assert await_exit(handle) == 3
    assert not handle.is_alive()
    assert handle.returncode == 3


def test_passes_environment() -> None:
    code = "import os, sys; sys.exit(0 if os.environ.get('SELENIUMCTL_T') == 'x' else 1)"
    handle = launch(_python(code), {**os.environ, "SELENIUMCTL_T": "x"})
    assert await_exit(handle) == 0


def test_output_goes_to_log(tmp_path: Path) -> None:
    log_path = tmp_path / "server.log"
    with log_path.open("ab") as log:
        handle = launch(_python("print('hello from server')"), os.environ, log=log)
        await_exit(handle)
    assert "hello from server" in log_path.read_text()


def test_stop_terminates_process() -> None:
    handle = launch(_python("import time; time.sleep(60)"), os.environ)
    assert handle.is_alive()
    assert handle.tracked.pid == handle.pid

    handle.stop(sigterm_timeout=5.0, sigkill_timeout=2.0)

    assert not handle.is_alive()


def test_stop_after_exit_is_noop() -> None:
    handle = launch(_python("pass"), os.environ)
    await_exit(handle)
    assert handle.stop() == 0


class TestTracking:
    def test_track_current_process(self) -> None:
        tp = track_process(os.getpid())
        assert tp is not None
        assert tp.pid == os.getpid()
        assert validate_tracked(tp) is not None

    def test_pid_reuse_is_rejected(self) -> None:
        tp = track_process(os.getpid())
        assert tp is not None
        stale = TrackedProcess(pid=tp.pid, create_time=tp.create_time - 100, pgid=tp.pgid)
        assert validate_tracked(stale) is None

    def test_incomplete_tracking(self) -> None:
        assert validate_tracked(TrackedProcess(pid=os.getpid())) is None
