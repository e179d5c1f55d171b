"""The Selenium server controller."""

from __future__ import annotations

import os
import threading
from pathlib import Path
from typing import IO, Any

from seleniumctl import process_control
from seleniumctl.catalog import VersionCatalog
from seleniumctl.constants import (
    DEFAULT_HOST,
    DEFAULT_PORT,
    DEFAULT_TIMEOUT,
    LATEST,
)
from seleniumctl.errors import ConfigError, ReadinessTimeoutError, ServerError
from seleniumctl.fetcher import download as download_artifact
from seleniumctl.http_client import normalize_proxy_env
from seleniumctl.logging import LogComponent, get_logger
from seleniumctl.models import LaunchSpec, ServerConfig, ServerState
from seleniumctl.probe import ProbeFactory, ReadinessProbe, SocketPoller

logger = get_logger(LogComponent.SERVER)


class Server:
    """Launches a Selenium standalone server jar and tracks its lifecycle.

    Example:
        server = Server.get("latest", background=True)
        server.start()
        ...
        server.stop()

    Concurrent start() calls on one instance are serialized by an internal lock.
    stop() does not take that lock, so another thread can stop a server whose
    foreground start() is blocked waiting for the process to exit.
    """

    def __init__(
        self,
        jar: Path | str,
        *,
        port: int = DEFAULT_PORT,
        timeout: float = DEFAULT_TIMEOUT,
        background: bool = False,
        log: Path | str | None = None,
        host: str = DEFAULT_HOST,
        probe_factory: ProbeFactory = SocketPoller,
    ):
        """Create a controller for jar.

        Raises:
            ConfigError: If jar is not an existing file (nothing is spawned)
        """
        if not Path(jar).is_file():
            raise ConfigError(jar)

        self.config: ServerConfig = ServerConfig(
            artifact_path=Path(jar),
            port=port,
            timeout=timeout,
            background=background,
            log=Path(log) if log is not None else None,
        )
        self.host: str = host
        self.probe_factory: ProbeFactory = probe_factory
        self.process: process_control.ProcessHandle | None = None
        self._state: ServerState = ServerState.IDLE
        self._log_file: IO[bytes] | None = None
        self._lock = threading.Lock()

    def __repr__(self) -> str:
        return (
            f"Server(jar={str(self.config.artifact_path)!r}, port={self.port}, "
            f"state={self._state.value})"
        )

    # === Configuration ===

    @property
    def jar(self) -> Path:
        return self.config.artifact_path

    @property
    def port(self) -> int:
        return self.config.port

    @port.setter
    def port(self, value: int) -> None:
        self.config.port = value

    @property
    def timeout(self) -> float:
        return self.config.timeout

    @timeout.setter
    def timeout(self, value: float) -> None:
        self.config.timeout = value

    @property
    def background(self) -> bool:
        return self.config.background

    @background.setter
    def background(self, value: bool) -> None:
        self.config.background = value

    @property
    def log(self) -> Path | None:
        return self.config.log

    @log.setter
    def log(self, value: Path | str | None) -> None:
        self.config.log = Path(value) if value is not None else None

    @property
    def extra_args(self) -> list[str]:
        return list(self.config.extra_args)

    def append_args(self, *args: str) -> Server:
        """Append arguments passed to the server after the fixed flags."""
        self.config.extra_args = [*self.config.extra_args, *map(str, args)]
        return self

    def __lshift__(self, args: str | list[str] | tuple[str, ...]) -> Server:
        if isinstance(args, str):
            return self.append_args(args)
        return self.append_args(*args)

    @property
    def state(self) -> ServerState:
        return self._state

    @property
    def webdriver_url(self) -> str:
        return f"http://{self.host}:{self.port}/wd/hub"

    def _transition(self, state: ServerState) -> None:
        logger.debug(f"{self._state.value} -> {state.value}")
        self._state = state

    def probe(self) -> ReadinessProbe:
        """Readiness probe for the configured host, port and timeout."""
        return self.probe_factory(self.host, self.port, self.timeout)

    # === Lifecycle ===

    def start(self) -> None:
        """Launch the server and wait until it accepts connections.

        In foreground mode (background=False) this then blocks until the server
        process exits.

        Raises:
            ServerError: If the server is already running
            ProcessSpawnError: If java cannot be started
            OSError: If the log file cannot be opened
            ReadinessTimeoutError: If the port is not reachable within timeout.
                The process is left running; call stop() to clean it up.
        """
        with self._lock:
            self._check_can_start()
            self._transition(ServerState.STARTING)

            spec = LaunchSpec.from_config(self.config)
            env = normalize_proxy_env(os.environ)
            try:
                self._open_log()
                self.process = process_control.launch(spec, env, log=self._log_file)
            except Exception:
                self._close_log()
                self._transition(ServerState.FAILED)
                raise

            if not self.probe().connected():
                self._transition(ServerState.FAILED)
                detail = ""
                if not self.process.is_alive():
                    detail = f" (process exited with code {self.process.returncode})"
                else:
                    logger.warning(
                        f"Server pid={self.process.pid} is still running; call stop() to terminate it"
                    )
                raise ReadinessTimeoutError(
                    f"Timed out waiting for Selenium server at {self.host}:{self.port} "
                    f"after {self.timeout}s{detail}"
                )

            self._transition(ServerState.RUNNING)
            logger.info(f"Selenium server ready at {self.webdriver_url}")

            if not self.background:
                process_control.await_exit(self.process)
                self._close_log()
                self._transition(ServerState.STOPPED)

    def _check_can_start(self) -> None:
        if self._state in (ServerState.STARTING, ServerState.RUNNING):
            raise ServerError(f"Server is already {self._state.value}")
        if (
            self._state == ServerState.FAILED
            and self.process is not None
            and self.process.is_alive()
        ):
            raise ServerError(
                f"A previous start left pid={self.process.pid} running; call stop() first"
            )

    def stop(self) -> None:
        """Terminate the server process and wait for its port to close.

        Raises:
            ServerError: If the port still accepts connections after timeout
        """
        if self.process is None:
            logger.debug("No server process to stop")
            return

        self._transition(ServerState.STOPPING)
        code = self.process.stop()
        logger.info(f"Stopped server pid={self.process.pid} (exit code {code})")
        self._close_log()

        if not self.probe().closed():
            self._transition(ServerState.FAILED)
            raise ServerError(
                f"Unable to shut down Selenium server on {self.host}:{self.port}"
            )
        self.process = None
        self._transition(ServerState.STOPPED)

    def _open_log(self) -> None:
        if self.log is not None:
            self.log.parent.mkdir(parents=True, exist_ok=True)
            self._log_file = self.log.open("ab")

    def _close_log(self) -> None:
        if self._log_file is not None:
            self._log_file.close()
            self._log_file = None

    # === Release store ===

    @staticmethod
    def latest() -> str:
        """Newest standalone server version in the release bucket."""
        return VersionCatalog().latest()

    @staticmethod
    def download(version: str = LATEST) -> Path:
        """Download the jar for version (or "latest") unless already present."""
        return download_artifact(version)

    @classmethod
    def get(cls, version: str = LATEST, **options: Any) -> Server:
        """Download version if needed and return a Server for it."""
        return cls(cls.download(version), **options)
