"""Download, launch and supervise the Selenium standalone server."""

from seleniumctl.catalog import VersionCatalog
from seleniumctl.errors import (
    CatalogError,
    ConfigError,
    DownloadError,
    ProcessSpawnError,
    ReadinessTimeoutError,
    SeleniumCtlError,
    ServerError,
)
from seleniumctl.fetcher import ArtifactFetcher, download
from seleniumctl.models import ServerConfig, ServerState, VersionDescriptor
from seleniumctl.server import Server

__version__ = "0.1.0"

__all__ = [
    "ArtifactFetcher",
    "CatalogError",
    "ConfigError",
    "DownloadError",
    "ProcessSpawnError",
    "ReadinessTimeoutError",
    "SeleniumCtlError",
    "Server",
    "ServerConfig",
    "ServerError",
    "ServerState",
    "VersionCatalog",
    "VersionDescriptor",
    "download",
]
