"""Spawning, tracking and stopping the server process.

Design goals:
- Only stop processes we started (tracked by pid + create_time).
- Prefer graceful shutdown (SIGTERM first), escalate deterministically.
- Verify the process group is gone (the java launcher may fork).
- Work on POSIX + Windows (best-effort graceful on Windows).
"""

from __future__ import annotations

import os
import signal
import subprocess
import time
from collections.abc import Mapping
from typing import IO, Any

import psutil

from seleniumctl.errors import ProcessSpawnError
from seleniumctl.logging import LogComponent, get_logger
from seleniumctl.models import LaunchSpec, TrackedProcess

logger = get_logger(LogComponent.PROCESS_CONTROL)


def _get_pgid_safe(pid: int) -> int | None:
    # Windows doesn't have pgid.
    if os.name == "nt":
        return None
    try:
        return os.getpgid(pid)
    except OSError:
        return None


def track_process(pid: int) -> TrackedProcess | None:
    """Create a TrackedProcess for a running PID, recording create_time and pgid."""
    try:
        proc = psutil.Process(pid)
        return TrackedProcess(
            pid=pid,
            create_time=float(proc.create_time()),
            pgid=_get_pgid_safe(pid),
        )
    except psutil.Error:
        return None


def validate_tracked(tp: TrackedProcess) -> psutil.Process | None:
    """Return a psutil.Process only if PID matches create_time (prevents PID reuse bugs)."""
    if tp.pid is None or tp.create_time is None:
        return None
    try:
        proc = psutil.Process(tp.pid)
        if abs(float(proc.create_time()) - float(tp.create_time)) > 0.001:
            return None
        return proc
    except psutil.Error:
        return None


def _list_pgid_members(pgid: int) -> list[int]:
    """Return live PIDs in a process group (POSIX only)."""
    if os.name == "nt":
        return []
    pids: list[int] = []
    for proc in psutil.process_iter(["pid", "status"]):
        try:
            if proc.info["status"] == psutil.STATUS_ZOMBIE:
                continue
            pid = int(proc.pid)
            if _get_pgid_safe(pid) == pgid:
                pids.append(pid)
        except psutil.Error:
            continue
    return pids


def _wait_for_pgid_empty(pgid: int, timeout: float, poll: float = 0.1) -> bool:
    deadline = time.time() + timeout
    while time.time() < deadline:
        if not _list_pgid_members(pgid):
            return True
        time.sleep(poll)
    return not _list_pgid_members(pgid)


def _terminate_tree(root: psutil.Process, timeout: float) -> None:
    """Terminate a process tree, then kill whatever survives timeout."""
    try:
        children = root.children(recursive=True)
    except psutil.Error:
        children = []

    # Children first, so the root can exit cleanly.
    for proc in [*children, root]:
        try:
            proc.terminate()
        except psutil.NoSuchProcess:
            pass

    _, alive = psutil.wait_procs([*children, root], timeout=timeout)
    for proc in alive:
        try:
            proc.kill()
        except psutil.NoSuchProcess:
            pass
    if alive:
        psutil.wait_procs(alive, timeout=max(0.5, timeout / 2))


def stop_tracked_process(
    tp: TrackedProcess,
    *,
    name: str,
    sigterm_timeout: float = 5.0,
    sigkill_timeout: float = 2.0,
) -> None:
    """Stop a tracked process and its children.

    Behavior:
    - POSIX: signal the process group (SIGTERM -> SIGKILL).
    - Windows: best-effort CTRL_BREAK_EVENT, then terminate/kill process tree.
    """
    proc = validate_tracked(tp)
    if os.name == "nt":
        if proc is None or tp.pid is None:
            return
        logger.debug(f"Stopping {name} pid={tp.pid}")
        try:
            os.kill(tp.pid, signal.CTRL_BREAK_EVENT)  # type: ignore[attr-defined]
        except OSError:
            pass
        time.sleep(0.1)
        _terminate_tree(proc, timeout=sigterm_timeout + sigkill_timeout)
        return

    pgid = tp.pgid
    if pgid is None:
        if proc is not None:
            logger.debug(f"Stopping {name} pid={tp.pid}")
            _terminate_tree(proc, timeout=sigterm_timeout)
        return

    logger.debug(f"Stopping {name} pgid={pgid}")
    for sig, timeout in (
        (signal.SIGTERM, sigterm_timeout),
        (signal.SIGKILL, sigkill_timeout),
    ):
        try:
            os.killpg(pgid, sig)
        except ProcessLookupError:
            return
        if _wait_for_pgid_empty(pgid, timeout):
            return
        logger.warning(f"{name} did not exit after {sig.name}")


class ProcessHandle:
    """A live server process owned by the supervisor."""

    def __init__(self, popen: subprocess.Popen[bytes], tracked: TrackedProcess | None):
        self.popen: subprocess.Popen[bytes] = popen
        self.tracked: TrackedProcess = tracked or TrackedProcess(pid=popen.pid)

    @property
    def pid(self) -> int:
        return self.popen.pid

    @property
    def returncode(self) -> int | None:
        return self.popen.poll()

    def is_alive(self) -> bool:
        return self.popen.poll() is None

    def wait(self, timeout: float | None = None) -> int:
        return self.popen.wait(timeout=timeout)

    def stop(self, **timeouts: float) -> int | None:
        """Stop the process (and its group) and reap it."""
        if not self.is_alive():
            return self.popen.returncode
        if self.tracked.create_time is not None:
            stop_tracked_process(self.tracked, name="selenium-server", **timeouts)
        else:
            self.popen.terminate()
            try:
                self.popen.wait(timeout=timeouts.get("sigterm_timeout", 5.0))
            except subprocess.TimeoutExpired:
                self.popen.kill()
        try:
            return self.popen.wait(timeout=1.0)
        except subprocess.TimeoutExpired:
            # Still alive after SIGKILL escalation: let the caller's port check decide.
            return None


def launch(
    spec: LaunchSpec,
    env: Mapping[str, str],
    *,
    log: IO[bytes] | None = None,
) -> ProcessHandle:
    """Spawn the server process and return immediately.

    Args:
        spec: Command tokens to execute
        env: Complete environment for the child
        log: Open binary file for the child's stdout/stderr; discarded when None

    Raises:
        ProcessSpawnError: If the executable is missing or the OS refuses to start it
    """
    popen_kwargs: dict[str, Any] = {}
    if os.name == "nt":
        popen_kwargs["creationflags"] = subprocess.CREATE_NEW_PROCESS_GROUP  # type: ignore[attr-defined]
    else:
        popen_kwargs["start_new_session"] = True

    output = log if log is not None else subprocess.DEVNULL
    try:
        popen = subprocess.Popen(
            list(spec.tokens),
            env=dict(env),
            stdin=subprocess.DEVNULL,
            stdout=output,
            stderr=output,
            **popen_kwargs,
        )
    except OSError as exc:
        raise ProcessSpawnError(f"Could not start {spec.tokens[0]!r}: {exc}") from exc

    logger.info(f"Started {' '.join(spec.tokens)} (pid={popen.pid})")
    return ProcessHandle(popen, track_process(popen.pid))


def await_exit(handle: ProcessHandle) -> int:
    """Block until the server process exits and return its exit code."""
    code = handle.wait()
    logger.info(f"Server process pid={handle.pid} exited with code {code}")
    return code
