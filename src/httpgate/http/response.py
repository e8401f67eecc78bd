"""
=============================================================================
HTTP RESPONSE
=============================================================================

The response object every gate and handler writes into, and its wire
serialization.

=============================================================================
RESPONSE LIFECYCLE
=============================================================================

    ┌─────────────────────────────────────────────────────────────────────┐
    │                                                                      │
    │   Dispatcher            Gates / Handler           Connection driver │
    │       │                       │                           │          │
    │   HTTPResponse()  ───►   set_json(201, ...)  ───►   to_bytes()       │
    │   200 text/plain ""       (mutated in place)         sendall()       │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

One response object lives for one request. It starts at the defaults
(200, text/plain, empty body), is mutated by whoever finalizes it, and is
serialized exactly once.

=============================================================================
WIRE FORMAT
=============================================================================

    HTTP/1.1 201 Created\r\n
    Content-Type: application/json\r\n
    Content-Length: 9\r\n             ◄── byte length, computed at
    Connection: close\r\n                 serialization time
    \r\n
    {"id": 4}

The header set is fixed. Every response closes the connection; there is
no keep-alive.

Content-Length counts BYTES, not characters: "héllo" is 5 characters
but 6 bytes in UTF-8. body_length is derived from the encoded body on
every access, so it can never go stale.

=============================================================================
"""

from dataclasses import dataclass
from typing import Any
import json

from .status_codes import HTTPStatus, reason_phrase


HTTP_VERSION = "HTTP/1.1"

TEXT_PLAIN = "text/plain"
TEXT_HTML = "text/html"
APPLICATION_JSON = "application/json"


def error_body(message: str) -> str:
    """
    Build the JSON body shared by every error response.

        >>> error_body("Route not found")
        '{"error": "Route not found"}'
    """
    return json.dumps({"error": message})


@dataclass
class HTTPResponse:
    """
    Mutable HTTP response.

    Use the setters rather than assigning fields one by one; each setter
    writes status, content type and body together so a response is never
    left half-updated.

    Example:
        response = HTTPResponse()
        response.set_json(HTTPStatus.CREATED, {"id": 4})
        response.to_bytes()
    """

    status: int = HTTPStatus.OK
    content_type: str = TEXT_PLAIN
    body: str = ""

    @property
    def body_length(self) -> int:
        """Byte length of the UTF-8 encoded body."""
        return len(self.body.encode("utf-8"))

    @property
    def status_text(self) -> str:
        """Reason phrase for the current status ("Unknown" if unlisted)."""
        return reason_phrase(self.status)

    @property
    def status_line(self) -> str:
        """
        The first line of the serialized response.

        Example: "HTTP/1.1 404 Not Found"
        """
        return f"{HTTP_VERSION} {int(self.status)} {self.status_text}"

    # =========================================================================
    # SETTERS
    # =========================================================================

    def set_body(self, status: int, content_type: str, content: str) -> "HTTPResponse":
        """
        Set status, content type and body in one step.

        This is the primitive every other setter goes through.

        Args:
            status: HTTP status code.
            content_type: MIME type for the Content-Type header.
            content: Body text.

        Returns:
            Self for method chaining.
        """
        self.status = status
        self.content_type = content_type
        self.body = content
        return self

    def set_json(self, status: int, data: Any) -> "HTTPResponse":
        """
        Set a JSON body.

        Strings are taken as already-encoded JSON and used verbatim;
        anything else is serialized with json.dumps.
        """
        content = data if isinstance(data, str) else json.dumps(data)
        return self.set_body(status, APPLICATION_JSON, content)

    def set_text(self, status: int, text: str) -> "HTTPResponse":
        """Set a text/plain body."""
        return self.set_body(status, TEXT_PLAIN, text)

    def set_html(self, status: int, html: str) -> "HTTPResponse":
        """Set a text/html body."""
        return self.set_body(status, TEXT_HTML, html)

    def set_error(self, status: int, message: str) -> "HTTPResponse":
        """Set a JSON error body: {"error": message}."""
        return self.set_json(status, error_body(message))

    # =========================================================================
    # SERIALIZATION
    # =========================================================================

    def to_bytes(self) -> bytes:
        """
        Serialize the response for the socket.

        Content-Length is computed from the encoded body right here, so
        the header always matches the bytes that follow it.
        """
        payload = self.body.encode("utf-8")
        head = (
            f"{self.status_line}\r\n"
            f"Content-Type: {self.content_type}\r\n"
            f"Content-Length: {len(payload)}\r\n"
            f"Connection: close\r\n"
            f"\r\n"
        )
        return head.encode("utf-8") + payload


# =============================================================================
# CONVENIENCE CONSTRUCTORS
# =============================================================================
#
# Handlers normally mutate the response they are given. These build a
# finished response from scratch, for places that have none to mutate
# (the connection driver answering a parse failure, the dispatcher's
# internal-error guard).
#
# =============================================================================

def error_response(status: int, message: str) -> HTTPResponse:
    """Create a response carrying a JSON error body."""
    return HTTPResponse().set_error(status, message)


def internal_error(message: str = "Internal Server Error") -> HTTPResponse:
    """500 with {"error": message}. Keep the message generic."""
    return error_response(HTTPStatus.INTERNAL_SERVER_ERROR, message)
