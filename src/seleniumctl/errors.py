"""Error taxonomy for seleniumctl.

Nothing here is retried internally. Each error propagates to the caller as soon
as it is raised.
"""

from __future__ import annotations

import errno
from pathlib import Path


class SeleniumCtlError(Exception):
    """Base class for all seleniumctl errors."""


class ConfigError(SeleniumCtlError, FileNotFoundError):
    """The configured server jar does not exist."""

    def __init__(self, path: Path | str):
        super().__init__(errno.ENOENT, "Server jar not found", str(path))


class CatalogError(SeleniumCtlError):
    """The version listing is unreachable, unparsable or has no matching entry."""


class DownloadError(SeleniumCtlError):
    """Fetching the server jar failed."""


class ProcessSpawnError(SeleniumCtlError):
    """The server process could not be started."""


class ServerError(SeleniumCtlError):
    """The server did not reach the expected state."""


class ReadinessTimeoutError(ServerError):
    """The server did not accept connections within the configured timeout."""
