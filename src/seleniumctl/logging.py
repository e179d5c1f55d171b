"""Component loggers for seleniumctl and their console formatting."""

from __future__ import annotations

import logging
from enum import Enum

from seleniumctl.utils import PrefixedLogHandler

ROOT_LOGGER_NAME = "seleniumctl"


class LogComponent(str, Enum):
    """Where a log originated."""

    CATALOG = "catalog"
    FETCHER = "fetcher"
    PROBE = "probe"
    PROCESS_CONTROL = "process"
    SERVER = "server"
    CLI = "cli"


_configured = False


def configure_logging(*, verbose: bool = False) -> None:
    """Route all component loggers to the rich console."""
    global _configured

    root = logging.getLogger(ROOT_LOGGER_NAME)
    root.setLevel(logging.DEBUG if verbose else logging.INFO)
    root.handlers.clear()
    handler = PrefixedLogHandler()
    handler.setFormatter(logging.Formatter("%(message)s"))
    root.addHandler(handler)
    root.propagate = False

    _configured = True


def get_logger(component: LogComponent) -> logging.Logger:
    """Get the logger for a component (do not call logging.getLogger directly)."""
    logger = logging.getLogger(f"{ROOT_LOGGER_NAME}.{component.value}")
    if not _configured:
        # Library use: stay silent unless the application configures logging.
        root = logging.getLogger(ROOT_LOGGER_NAME)
        if not root.handlers:
            root.addHandler(logging.NullHandler())
    return logger
