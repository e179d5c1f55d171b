"""Tests for TCP readiness polling."""

import socket
import time
from collections.abc import Iterator
from unittest.mock import patch

import pytest

from seleniumctl.probe import SocketPoller, await_closed, await_connected


@pytest.fixture
def listening_port() -> Iterator[int]:
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as sock:
        sock.bind(("127.0.0.1", 0))
        sock.listen()
        yield sock.getsockname()[1]


@pytest.fixture
def free_port() -> int:
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as sock:
        sock.bind(("127.0.0.1", 0))
        return sock.getsockname()[1]


class TestSocketPoller:
    def test_connected(self, listening_port: int) -> None:
        assert SocketPoller("127.0.0.1", listening_port, timeout=2).connected()

    def test_closed(self, free_port: int) -> None:
        assert SocketPoller("127.0.0.1", free_port, timeout=2).closed()

    def test_connected_times_out(self, free_port: int) -> None:
        poller = SocketPoller("127.0.0.1", free_port, timeout=0.5, interval=0.1)
        start = time.monotonic()
        assert poller.connected() is False
        assert time.monotonic() - start < 2.0

    def test_closed_times_out(self, listening_port: int) -> None:
        poller = SocketPoller("127.0.0.1", listening_port, timeout=0.5, interval=0.1)
        assert poller.closed() is False

    def test_sleeps_between_attempts(self) -> None:
        poller = SocketPoller("127.0.0.1", 4444, timeout=30, interval=0.25)
        with (
            patch.object(SocketPoller, "is_listening", side_effect=[False, False, True]),
            patch("seleniumctl.probe.time.sleep") as sleep,
        ):
            assert poller.connected() is True
        assert sleep.call_count == 2
        sleep.assert_called_with(0.25)

    def test_first_attempt_success_does_not_sleep(self) -> None:
        poller = SocketPoller("127.0.0.1", 4444, timeout=30)
        with (
            patch.object(SocketPoller, "is_listening", return_value=False),
            patch("seleniumctl.probe.time.sleep") as sleep,
        ):
            assert poller.closed() is True
        sleep.assert_not_called()


def test_await_helpers(listening_port: int, free_port: int) -> None:
    assert await_connected("127.0.0.1", listening_port, timeout=2)
    assert await_closed("127.0.0.1", free_port, timeout=2)
