"""TCP readiness and shutdown polling."""

from __future__ import annotations

import socket
import time
from typing import Protocol

from seleniumctl.constants import CONNECT_TIMEOUT, POLL_INTERVAL
from seleniumctl.logging import LogComponent, get_logger

logger = get_logger(LogComponent.PROBE)


class ReadinessProbe(Protocol):
    """Reports whether a server is accepting connections."""

    def connected(self) -> bool: ...

    def closed(self) -> bool: ...


class ProbeFactory(Protocol):
    def __call__(self, host: str, port: int, timeout: float) -> ReadinessProbe: ...


class SocketPoller:
    """Polls host:port with plain TCP connects until a state is reached or timeout elapses."""

    def __init__(
        self,
        host: str,
        port: int,
        timeout: float,
        interval: float = POLL_INTERVAL,
    ):
        self.host: str = host
        self.port: int = port
        self.timeout: float = timeout
        self.interval: float = interval

    def connected(self) -> bool:
        """Return True as soon as a connect succeeds, False once timeout elapses."""
        return self._wait_for(listening=True)

    def closed(self) -> bool:
        """Return True as soon as a connect is refused, False once timeout elapses."""
        return self._wait_for(listening=False)

    def _wait_for(self, *, listening: bool) -> bool:
        deadline = time.monotonic() + self.timeout
        while True:
            if self.is_listening() == listening:
                return True
            remaining = deadline - time.monotonic()
            if remaining <= 0:
                logger.debug(
                    f"{self.host}:{self.port} still "
                    f"{'closed' if listening else 'open'} after {self.timeout}s"
                )
                return False
            time.sleep(min(self.interval, remaining))

    def is_listening(self) -> bool:
        """Single connect attempt."""
        try:
            with socket.create_connection(
                (self.host, self.port),
                timeout=min(CONNECT_TIMEOUT, self.timeout),
            ):
                return True
        except OSError:
            return False


def await_connected(host: str, port: int, timeout: float) -> bool:
    """Wait until host:port accepts connections. Returns False on timeout."""
    return SocketPoller(host, port, timeout).connected()


def await_closed(host: str, port: int, timeout: float) -> bool:
    """Wait until host:port refuses connections. Returns False on timeout."""
    return SocketPoller(host, port, timeout).closed()

