"""
=============================================================================
LOGGING GATE
=============================================================================

Writes one access-log line per request and always lets the request
through.

=============================================================================
LOG FORMATS
=============================================================================

    TEXT (default):
    ┌─────────────────────────────────────────────────────────────────────┐
    │ 127.0.0.1 [18/Oct/2026:17:30:02 +0000] "GET /api/hello?name=Ada" 0  │
    │ ───────── ────────────────────────────  ──────────────────────── ─  │
    │ client    timestamp                     method and target     body  │
    └─────────────────────────────────────────────────────────────────────┘

    JSON (for log aggregators):
    ┌─────────────────────────────────────────────────────────────────────┐
    │ {"timestamp": "...", "method": "GET", "path": "/api/hello",         │
    │  "query": "name=Ada", "client_ip": "127.0.0.1", "body_length": 0}   │
    └─────────────────────────────────────────────────────────────────────┘

The gate runs BEFORE dispatch, so the log line records what was asked
for, not the status that was answered. Register it first so requests
stopped by later gates are still logged.

Output goes to the "httpgate.access" logger, separate from the
operational "httpgate.*" module loggers:

    logging.getLogger("httpgate.access").addHandler(file_handler)

=============================================================================
"""

from dataclasses import asdict, dataclass
from typing import Iterable, Optional
import json
import logging
import time

from .base import Middleware
from ..http.request import HTTPRequest
from ..http.response import HTTPResponse


logger = logging.getLogger("httpgate.access")


@dataclass
class RequestLog:
    """One access-log entry."""

    timestamp: str
    method: str
    path: str
    query: str
    client_ip: str
    body_length: int

    def to_dict(self) -> dict:
        return asdict(self)

    def to_text(self) -> str:
        target = f"{self.path}?{self.query}" if self.query else self.path
        return (
            f'{self.client_ip or "-"} [{self.timestamp}] '
            f'"{self.method} {target}" {self.body_length}'
        )


class LoggingMiddleware(Middleware):
    """
    Access-log gate.

    Usage:
        chain.register(LoggingMiddleware())                      # text
        chain.register(LoggingMiddleware(log_format="json"))     # JSON
        chain.register(LoggingMiddleware(skip_paths=["/favicon.ico"]))
    """

    def __init__(
        self,
        log_format: str = "text",
        log_level: int = logging.INFO,
        skip_paths: Optional[Iterable[str]] = None,
    ):
        """
        Args:
            log_format: "text" or "json".
            log_level: Level the access lines are logged at.
            skip_paths: Exact paths that are not logged.
        """
        if log_format not in ("text", "json"):
            raise ValueError(f"Unknown log format: {log_format!r}")
        self.log_format = log_format
        self.log_level = log_level
        self.skip_paths = set(skip_paths or [])

    def __call__(self, request: HTTPRequest, response: HTTPResponse) -> bool:
        if request.path in self.skip_paths:
            return True

        entry = RequestLog(
            timestamp=time.strftime("%d/%b/%Y:%H:%M:%S %z"),
            method=request.method.value,
            path=request.path,
            query=request.query_string,
            client_ip=request.client_address[0],
            body_length=request.body_length,
        )

        if self.log_format == "json":
            logger.log(self.log_level, json.dumps(entry.to_dict()))
        else:
            logger.log(self.log_level, entry.to_text())

        return True
