"""
Logging setup for the SendMe API.

Every line has the shape:
    2026-01-06T14:05:52Z [api] WARNING dispatch: Unauthenticated request to POST /reviews

The component before the colon is the last segment of the emitting ``sendme``
or ``api`` logger; uvicorn and other third-party lines carry no component.

Environment Variables:
    LOG_LEVEL: "DEBUG", "INFO" (default), "WARNING" or "ERROR"
               - DEBUG: route registration, per-request dispatch and probe access logs
"""

from __future__ import annotations

import logging
import os
import sys
from collections.abc import Iterable
from datetime import UTC, datetime

COMPONENT_LOGGERS = ("sendme", "api")

# Core endpoints polled by load balancers; see api/main.py
PROBE_PATHS = ("/health", "/api/config")


class GatewayFormatter(logging.Formatter):
    """Formatter producing ``<UTC timestamp> [source] LEVEL component: message``."""

    def __init__(self, source: str = "api"):
        self.source = source
        super().__init__()

    @staticmethod
    def component(record: logging.LogRecord) -> str | None:
        root, _, rest = record.name.partition(".")
        if root not in COMPONENT_LOGGERS:
            return None
        return (rest or root).rsplit(".", 1)[-1]

    def format(self, record: logging.LogRecord) -> str:
        timestamp = datetime.fromtimestamp(record.created, UTC).strftime("%Y-%m-%dT%H:%M:%SZ")
        message = record.getMessage()

        component = self.component(record)
        if component:
            message = f"{component}: {message}"
        if record.exc_info:
            message = f"{message}\n{self.formatException(record.exc_info)}"

        return f"{timestamp} [{self.source}] {record.levelname} {message}"


class ProbeAccessFilter(logging.Filter):
    """Drop successful uvicorn access lines for probe endpoints."""

    def __init__(self, paths: Iterable[str] = PROBE_PATHS):
        super().__init__()
        self.paths = frozenset(paths)

    def filter(self, record: logging.LogRecord) -> bool:
        if record.name != "uvicorn.access":
            return True

        # uvicorn.access args: (client_addr, method, full_path, http_version, status_code)
        args = record.args
        if not isinstance(args, tuple) or len(args) < 5:
            return True
        path = str(args[2]).split("?", 1)[0]
        return not (path in self.paths and args[4] == 200)


def resolve_level(level: int | None = None) -> int:
    """Explicit level, else LOG_LEVEL, else INFO."""
    if level is not None:
        return level
    named = logging.getLevelName(os.getenv("LOG_LEVEL", "INFO").upper())
    return named if isinstance(named, int) else logging.INFO


def configure_logging(
    source: str = "api",
    level: int | None = None,
    probe_paths: Iterable[str] = PROBE_PATHS,
) -> logging.Logger:
    """Configure the root logger and reroute uvicorn through it.

    Args:
        source: Identifier shown in brackets
        level: Explicit logging level; overrides LOG_LEVEL
        probe_paths: Paths whose access logs are dropped above DEBUG

    Returns:
        Configured root logger
    """
    level = resolve_level(level)

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    root_logger.handlers.clear()

    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(level)
    handler.setFormatter(GatewayFormatter(source=source))
    if level > logging.DEBUG:
        handler.addFilter(ProbeAccessFilter(probe_paths))
    root_logger.addHandler(handler)

    for uvicorn_logger_name in ("uvicorn", "uvicorn.error", "uvicorn.access"):
        uvicorn_logger = logging.getLogger(uvicorn_logger_name)
        uvicorn_logger.handlers.clear()
        uvicorn_logger.addHandler(handler)
        uvicorn_logger.setLevel(level)
        uvicorn_logger.propagate = False

    logging.getLogger("httpx").setLevel(logging.WARNING)

    return root_logger
