"""
=============================================================================
SERVER CONFIGURATION
=============================================================================

All tunable settings of the server in one typed object.

=============================================================================
CONFIGURATION SOURCES
=============================================================================

    ┌─────────────────────────────────────────────────────────────────────┐
    │                    CONFIGURATION HIERARCHY                          │
    ├─────────────────────────────────────────────────────────────────────┤
    │                                                                      │
    │   Priority (highest to lowest):                                     │
    │                                                                      │
    │   1. Command-line arguments                                         │
    │      └── python -m httpgate --port 3000                            │
    │                                                                      │
    │   2. Environment variables                                          │
    │      └── HTTPGATE_PORT=3000 python -m httpgate                     │
    │                                                                      │
    │   3. Defaults                                                        │
    │      └── ServerConfig()                                             │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

=============================================================================
"""

from dataclasses import dataclass
from typing import Optional, Tuple
import logging
import os


ENV_PREFIX = "HTTPGATE_"

LOG_FORMATS = ("text", "json")


@dataclass
class ServerConfig:
    """
    Configuration for the server.

    =========================================================================
    CONFIGURATION GROUPS
    =========================================================================

    NETWORK SETTINGS
    - host, port, backlog, timeout

    HTTP SETTINGS
    - max_request_size, strict_parsing, strict_params

    THREADING SETTINGS
    - workers, queue_size

    AUTH
    - protected_prefixes, auth_marker

    LOGGING
    - log_level, log_format

    =========================================================================
    """

    # ─────────────────────────────────────────────────────────────────────
    # NETWORK SETTINGS
    # ─────────────────────────────────────────────────────────────────────

    host: str = "127.0.0.1"
    """
    The IP address to bind to.

    - "127.0.0.1" - Localhost only
    - "0.0.0.0" - All network interfaces
    """

    port: int = 8080
    """The port number to listen on."""

    backlog: int = 10
    """Maximum number of connections waiting to be accepted."""

    timeout: Optional[float] = 30.0
    """
    Per-connection socket timeout in seconds.

    A client that connects and never sends anything is dropped after
    this long. None blocks forever.
    """

    # ─────────────────────────────────────────────────────────────────────
    # HTTP SETTINGS
    # ─────────────────────────────────────────────────────────────────────

    max_request_size: int = 4096
    """
    Largest request, in bytes, read from one connection.

    A request is read with a single receive. Anything larger is answered
    with 400 rather than silently cut off.
    """

    strict_parsing: bool = False
    """Answer 400 to requests without a method and target."""

    strict_params: bool = False
    """
    Placeholders match exactly one path segment.

    By default "/api/users/:id" also matches "/api/users/2/extra" and
    even "/api/usersX".
    """

    # ─────────────────────────────────────────────────────────────────────
    # THREAD POOL SETTINGS
    # ─────────────────────────────────────────────────────────────────────

    workers: int = 4
    """Number of worker threads serving connections."""

    queue_size: int = 64
    """
    Connections waiting for a free worker.

    When full, new connections are answered with 500 and closed.
    """

    # ─────────────────────────────────────────────────────────────────────
    # AUTH
    # ─────────────────────────────────────────────────────────────────────

    protected_prefixes: Tuple[str, ...] = ("/admin",)
    """Path prefixes that require the auth marker."""

    auth_marker: str = "Authorization:"
    """Text that must appear in the header blob of protected requests."""

    # ─────────────────────────────────────────────────────────────────────
    # LOGGING
    # ─────────────────────────────────────────────────────────────────────

    log_level: str = "INFO"
    """Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)."""

    log_format: str = "text"
    """Access log format: 'text' or 'json'."""

    @classmethod
    def from_env(cls, environ: Optional[dict] = None) -> "ServerConfig":
        """
        Create configuration from environment variables.

        =====================================================================
        ENVIRONMENT VARIABLES
        =====================================================================

        HTTPGATE_HOST              Server host (default: 127.0.0.1)
        HTTPGATE_PORT              Server port (default: 8080)
        HTTPGATE_WORKERS           Worker threads (default: 4)
        HTTPGATE_TIMEOUT           Socket timeout in seconds (default: 30)
        HTTPGATE_MAX_REQUEST_SIZE  Request size limit (default: 4096)
        HTTPGATE_LOG_LEVEL         Logging level (default: INFO)
        HTTPGATE_LOG_FORMAT        text or json (default: text)

        =====================================================================

        Args:
            environ: Mapping to read instead of os.environ.
        """
        env = os.environ if environ is None else environ

        def get(name: str, default: str) -> str:
            return env.get(ENV_PREFIX + name, default)

        return cls(
            host=get("HOST", "127.0.0.1"),
            port=int(get("PORT", "8080")),
            workers=int(get("WORKERS", "4")),
            timeout=float(get("TIMEOUT", "30")),
            max_request_size=int(get("MAX_REQUEST_SIZE", "4096")),
            log_level=get("LOG_LEVEL", "INFO").upper(),
            log_format=get("LOG_FORMAT", "text").lower(),
        )

    def validate(self) -> None:
        """
        Validate configuration values.

        Called at start-up so a bad value fails immediately rather than
        on the first request.

        Raises:
            ValueError: A setting is out of range.
        """
        if not 0 < self.port < 65536:
            raise ValueError(f"Invalid port: {self.port}. Must be 1-65535.")
        if self.backlog < 1:
            raise ValueError("backlog must be >= 1")
        if self.workers < 1:
            raise ValueError("workers must be >= 1")
        if self.queue_size < 1:
            raise ValueError("queue_size must be >= 1")
        if self.max_request_size < 64:
            raise ValueError("max_request_size must be >= 64")
        if self.timeout is not None and self.timeout <= 0:
            raise ValueError("timeout must be > 0")
        if not isinstance(logging.getLevelName(self.log_level.upper()), int):
            raise ValueError(f"Unknown log level: {self.log_level}")
        if self.log_format not in LOG_FORMATS:
            raise ValueError(f"log_format must be one of {', '.join(LOG_FORMATS)}")


# =============================================================================
# MODULE SUMMARY
# =============================================================================
#
# 1. Typed configuration with documented defaults
# 2. HTTPGATE_* environment overrides
# 3. validate() at start-up (fail-fast)
#
# The CLI in __main__.py layers command-line flags on top of from_env().
# =============================================================================
