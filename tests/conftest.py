from collections.abc import Callable
from pathlib import Path

import httpx
import pytest

LISTING_XML = (
    "<?xml version='1.0' encoding='UTF-8'?>"
    "<ListBucketResult xmlns='http://doc.s3.amazonaws.com/2006-03-01'>"
    "<Name>selenium-release</Name>"
    "<Contents><Key>2.39/selenium-server-2.39.0.zip</Key></Contents>"
    "<Contents><Key>2.39/selenium-server-standalone-2.39.0.jar</Key></Contents>"
    "<Contents><Key>2.42/selenium-server-standalone-2.42.2.jar</Key></Contents>"
    "<Contents><Key>2.9/selenium-server-standalone-2.9.0.jar</Key></Contents>"
    "</ListBucketResult>"
)


class RecordingTransport(httpx.MockTransport):
    """MockTransport that remembers every request it served."""

    def __init__(self, handler: Callable[[httpx.Request], httpx.Response]):
        self.requests: list[httpx.Request] = []

        def record(request: httpx.Request) -> httpx.Response:
            self.requests.append(request)
            return handler(request)

        super().__init__(record)


@pytest.fixture
def jar(tmp_path: Path) -> Path:
    path = tmp_path / "selenium-server-test.jar"
    path.write_bytes(b"not really a jar")
    return path


@pytest.fixture
def in_tmp(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    monkeypatch.chdir(tmp_path)
    return tmp_path
