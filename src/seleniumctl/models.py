"""Centralized Pydantic models and enums for seleniumctl."""

from __future__ import annotations

from enum import Enum
from pathlib import Path
from typing import ClassVar

import httpx
from pydantic import BaseModel, ConfigDict, Field

from seleniumctl.constants import (
    ARTIFACT_PREFIX,
    ARTIFACT_SUFFIX,
    DEFAULT_PORT,
    DEFAULT_TIMEOUT,
    JAVA_EXECUTABLE,
)


def artifact_file_name(version: str) -> str:
    """Return the jar file name for a version (also the download cache key)."""
    return f"{ARTIFACT_PREFIX}{version}{ARTIFACT_SUFFIX}"


# === Enums ===


class ServerState(str, Enum):
    """Lifecycle of a managed server process."""

    IDLE = "idle"
    STARTING = "starting"
    RUNNING = "running"
    STOPPING = "stopping"
    STOPPED = "stopped"
    FAILED = "failed"


# === Process Models ===


class TrackedProcess(BaseModel):
    """A process we started and are allowed to manage.

    create_time protects against PID reuse. pgid enables POSIX process-group shutdown
    even if the java launcher has already handed off to a child.
    """

    pid: int | None = None
    create_time: float | None = None
    pgid: int | None = None

    model_config: ClassVar[ConfigDict] = ConfigDict(frozen=True)


# === Configuration Models ===


class ServerConfig(BaseModel):
    """Mutable configuration for one server. Changes apply on the next start."""

    artifact_path: Path
    port: int = Field(default=DEFAULT_PORT, ge=1, le=65535)
    timeout: float = Field(default=DEFAULT_TIMEOUT, gt=0)
    background: bool = False
    log: Path | None = None
    extra_args: list[str] = Field(default_factory=list)

    model_config: ClassVar[ConfigDict] = ConfigDict(validate_assignment=True)


class LaunchSpec(BaseModel):
    """Command tokens for a single start, in launch order."""

    tokens: tuple[str, ...]

    model_config: ClassVar[ConfigDict] = ConfigDict(frozen=True)

    @classmethod
    def from_config(cls, config: ServerConfig) -> LaunchSpec:
        return cls(
            tokens=(
                JAVA_EXECUTABLE,
                "-jar",
                str(config.artifact_path),
                "-port",
                str(config.port),
                *config.extra_args,
            )
        )


class VersionDescriptor(BaseModel):
    """A requested version resolved against the remote store."""

    requested: str
    resolved_version: str
    object_key: str
    local_file_name: str

    model_config: ClassVar[ConfigDict] = ConfigDict(frozen=True)


class ProxySettings(BaseModel):
    """Outbound HTTP proxy used for listing and download requests."""

    url: str | None = None

    model_config: ClassVar[ConfigDict] = ConfigDict(frozen=True)

    @property
    def address(self) -> str | None:
        """Host part of the proxy URL."""
        if self.url is None:
            return None
        return httpx.URL(self.url).host
