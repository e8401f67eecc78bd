"""
=============================================================================
HTTP PROTOCOL LAYER
=============================================================================

Everything between raw bytes and a handler call, minus the sockets.

    ┌─────────────────────────────────────────────────────────────────────┐
    │ REQUEST PARSER (request.py)                                         │
    │ ─────────────────────────────────────────────────────────────────── │
    │ b"GET /api/hello?name=Ada HTTP/1.1\r\n\r\n"                         │
    │   → HTTPRequest(method=GET, path="/api/hello",                      │
    │                 query_string="name=Ada", ...)                       │
    └─────────────────────────────────────────────────────────────────────┘

    ┌─────────────────────────────────────────────────────────────────────┐
    │ PATH MATCHER (matcher.py)                                           │
    │ ─────────────────────────────────────────────────────────────────── │
    │ "/api/users/:id" vs "/api/users/2" → True, {"id": "2"}              │
    └─────────────────────────────────────────────────────────────────────┘

    ┌─────────────────────────────────────────────────────────────────────┐
    │ ROUTE REGISTRY (registry.py)                                        │
    │ ─────────────────────────────────────────────────────────────────── │
    │ Ordered (method, pattern, handler) table, first match wins,         │
    │ 404 fallback handler                                                │
    └─────────────────────────────────────────────────────────────────────┘

    ┌─────────────────────────────────────────────────────────────────────┐
    │ RESPONSE (response.py, status_codes.py)                             │
    │ ─────────────────────────────────────────────────────────────────── │
    │ HTTPResponse().set_json(201, {"id": 4}).to_bytes()                  │
    │   → b"HTTP/1.1 201 Created\r\nContent-Type: ...\r\n\r\n{...}"       │
    └─────────────────────────────────────────────────────────────────────┘

=============================================================================
"""

from .methods import HTTPMethod
from .status_codes import HTTPStatus, reason_phrase
from .request import (
    HTTPRequest,
    RequestParser,
    HTTPParseError,
    RequestTooLargeError,
    parse_request,
)
from .response import (
    HTTPResponse,
    error_body,
    error_response,
    internal_error,
)
from .matcher import PathPattern, path_matches
from .registry import (
    Handler,
    Route,
    RouteRegistry,
    RegistrationClosedError,
    not_found_handler,
)

__all__ = [
    # Methods and status codes
    "HTTPMethod",
    "HTTPStatus",
    "reason_phrase",

    # Request parsing
    "HTTPRequest",
    "RequestParser",
    "HTTPParseError",
    "RequestTooLargeError",
    "parse_request",

    # Responses
    "HTTPResponse",
    "error_body",
    "error_response",
    "internal_error",

    # Matching and routing
    "PathPattern",
    "path_matches",
    "Handler",
    "Route",
    "RouteRegistry",
    "RegistrationClosedError",
    "not_found_handler",
]
