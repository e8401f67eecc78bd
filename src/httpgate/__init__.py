"""
=============================================================================
HTTPGATE
=============================================================================

A small threaded HTTP/1.1 server with an ordered middleware chain and a
first-match route table.

    ┌─────────────────────────────────────────────────────────────────────┐
    │                                                                      │
    │   bytes ─► RequestParser ─► HTTPRequest                              │
    │                                 │                                    │
    │                                 ▼                                    │
    │                         MiddlewareChain ── stop ──┐                  │
    │                                 │ continue        │                  │
    │                                 ▼                 │                  │
    │                         RouteRegistry ─► handler  │                  │
    │                                 │                 │                  │
    │                                 ▼                 ▼                  │
    │                            HTTPResponse ─► to_bytes() ─► bytes       │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

Quick start:

    from httpgate import HTTPServer

    server = HTTPServer()

    @server.get("/api/users/:id")
    def get_user(request, response):
        response.set_json(200, {"id": int(request.path_params["id"])})

    server.run()

Or run the demo API:

    python -m httpgate --port 8080

=============================================================================
"""

from .config import ServerConfig
from .dispatcher import Dispatcher
from .server import HTTPServer
from .app import create_app
from .http import (
    HTTPMethod,
    HTTPStatus,
    HTTPRequest,
    HTTPResponse,
    RequestParser,
    RouteRegistry,
    parse_request,
)
from .middleware import (
    Middleware,
    MiddlewareChain,
    LoggingMiddleware,
    AuthMiddleware,
)

__version__ = "1.0.0"

__all__ = [
    "ServerConfig",
    "Dispatcher",
    "HTTPServer",
    "create_app",
    "HTTPMethod",
    "HTTPStatus",
    "HTTPRequest",
    "HTTPResponse",
    "RequestParser",
    "RouteRegistry",
    "parse_request",
    "Middleware",
    "MiddlewareChain",
    "LoggingMiddleware",
    "AuthMiddleware",
    "__version__",
]
