"""
=============================================================================
HTTP REQUEST PARSER
=============================================================================

Turns the raw bytes of one HTTP request into an immutable HTTPRequest.

The parser is deliberately shallow. It tokenizes the request line, splits
off the query string and finds the body, and that is all: headers are NOT
split into name/value pairs, and the body is NOT measured against
Content-Length. Gates that care about a header search the raw blob.

=============================================================================
WHAT GETS EXTRACTED
=============================================================================

    ┌─────────────────────────────────────────────────────────────────────┐
    │                                                                      │
    │   POST /api/users?notify=1 HTTP/1.1\r\n     ◄── request line        │
    │   ──┬─ ────────────┬─────── ────┬────                               │
    │     │              │            └── version (ignored)               │
    │     │              └── target                                        │
    │     │                   ├── path          "/api/users"              │
    │     │                   └── query_string  "notify=1"                │
    │     └── method      HTTPMethod.POST                                  │
    │                                                                      │
    │   Host: localhost:8080\r\n                                           │
    │   Content-Type: application/json\r\n                                 │
    │   \r\n                                       ◄── first CRLF CRLF     │
    │   {"name": "Ada"}                            ◄── body (verbatim)     │
    │                                                                      │
    │   headers = the ENTIRE decoded input above (request line included)  │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

=============================================================================
MALFORMED INPUT
=============================================================================

By default the parser never rejects a request for its shape:

    b""                     → method UNSUPPORTED, path ""
    b"GET\r\n\r\n"          → method GET,         path ""
    b"BREW /pot HTTP/1.1"   → method UNSUPPORTED, path "/pot"

Such requests match no route and end in a 404 from the fallback handler.
With ``strict=True`` a missing method or target raises HTTPParseError
(400) instead.

=============================================================================
SIZE LIMIT
=============================================================================

Input larger than ``max_request_size`` is rejected with
RequestTooLargeError. Nothing is ever truncated silently: a request is
either parsed whole or refused.

=============================================================================
"""

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple
from urllib.parse import parse_qs

from .methods import HTTPMethod


HEADER_TERMINATOR = b"\r\n\r\n"


class HTTPParseError(Exception):
    """
    Raised when a request cannot be turned into an HTTPRequest.

    Carries the HTTP status code the connection driver should answer with.
    """

    def __init__(self, message: str, status_code: int = 400):
        super().__init__(message)
        self.status_code = status_code


class RequestTooLargeError(HTTPParseError):
    """Raised when the raw request exceeds the configured size limit."""

    def __init__(self, size: int, limit: int):
        super().__init__(f"Request too large: {size} bytes (limit {limit})")
        self.size = size
        self.limit = limit


@dataclass(frozen=True)
class HTTPRequest:
    """
    A parsed HTTP request.

    =========================================================================
    FIELDS
    =========================================================================

        method:         HTTPMethod (UNSUPPORTED for unknown tokens)

        path:           Target before the first "?". Never contains "?".

        query_string:   Raw text after the first "?", not URL-decoded.
                        Empty string when the target has no "?".

        headers:        The whole decoded request as one string. Header
                        lookups are substring searches on this blob.

        body:           Everything after the first CRLF CRLF, verbatim.

        path_params:    Value captured by a route placeholder, filled in
                        by the dispatcher: "/api/users/:id" with
                        "/api/users/7" → {"id": "7"}

        client_address: (ip, port) of the peer, for logging.

    =========================================================================
    IMMUTABILITY
    =========================================================================

    The dataclass is frozen. Middleware reads the request but cannot
    change it; the dispatcher attaches path_params by building a copy
    with dataclasses.replace().

    =========================================================================
    """

    method: HTTPMethod = HTTPMethod.UNSUPPORTED
    path: str = ""
    query_string: str = ""
    headers: str = ""
    body: str = ""

    path_params: Dict[str, str] = field(default_factory=dict)
    client_address: Tuple[str, int] = ("", 0)

    @property
    def body_length(self) -> int:
        """Length of the body in bytes (UTF-8), 0 when there is no body."""
        return len(self.body.encode("utf-8"))

    @property
    def target(self) -> str:
        """Path and query string re-joined, as they appeared on the wire."""
        if self.query_string:
            return f"{self.path}?{self.query_string}"
        return self.path

    @property
    def query_params(self) -> Dict[str, List[str]]:
        """
        Query string decoded into a dict of lists.

            "a=1&a=2&b=3" → {"a": ["1", "2"], "b": ["3"]}
        """
        return parse_qs(self.query_string, keep_blank_values=True)

    def get_query(self, name: str, default: Optional[str] = None) -> Optional[str]:
        """
        First value of a query parameter, or ``default``.

        Example:
            # GET /api/hello?name=Ada
            request.get_query("name")            # "Ada"
            request.get_query("lang", "en")      # "en"
        """
        values = self.query_params.get(name)
        return values[0] if values else default

    def has_header(self, marker: str) -> bool:
        """
        Check whether ``marker`` occurs anywhere in the raw header blob.

        This is a plain substring search, e.g. ``"Authorization:"``. It is
        case-sensitive and does not look at header boundaries.
        """
        return marker in self.headers


class RequestParser:
    """
    Parses raw request bytes into HTTPRequest objects.

    ==========================================================================
    PARSING STEPS
    ==========================================================================

        raw bytes
            │
            ├── 1. size check ──────────► RequestTooLargeError
            │
            ├── 2. decode (UTF-8, replace undecodable bytes)
            │
            ├── 3. first line → [method token, target, (version)]
            │         │
            │         └── strict and < 2 tokens ──► HTTPParseError
            │
            ├── 4. target.partition("?") → path, query_string
            │
            ├── 5. bytes after first CRLF CRLF → body
            │
            └── 6. HTTPRequest(...)

    ==========================================================================
    """

    def __init__(self, max_request_size: int = 4096, strict: bool = False):
        """
        Args:
            max_request_size: Largest accepted request in bytes.
            strict: Reject requests without a method and target instead
                    of mapping them to UNSUPPORTED / empty path.
        """
        self.max_request_size = max_request_size
        self.strict = strict

    def parse(
        self,
        data: bytes,
        client_address: Tuple[str, int] = ("", 0),
    ) -> HTTPRequest:
        """
        Parse one raw request.

        Args:
            data: Bytes read from the connection.
            client_address: Peer (ip, port).

        Returns:
            The parsed HTTPRequest.

        Raises:
            RequestTooLargeError: ``data`` is over the size limit.
            HTTPParseError: Strict mode only, request line is incomplete.
        """
        if len(data) > self.max_request_size:
            raise RequestTooLargeError(len(data), self.max_request_size)

        text = data.decode("utf-8", errors="replace")

        method_token, target = self._split_request_line(text)
        if self.strict and (not method_token or not target):
            raise HTTPParseError("Malformed request line")

        path, _, query_string = target.partition("?")

        return HTTPRequest(
            method=HTTPMethod.from_token(method_token),
            path=path,
            query_string=query_string,
            headers=text,
            body=self._extract_body(data),
            client_address=client_address,
        )

    @staticmethod
    def _split_request_line(text: str) -> Tuple[str, str]:
        """
        Return the first two whitespace-separated tokens of the first line.

        Missing tokens come back as empty strings.
        """
        first_line = text.split("\n", 1)[0]
        tokens = first_line.split()
        method_token = tokens[0] if tokens else ""
        target = tokens[1] if len(tokens) > 1 else ""
        return method_token, target

    @staticmethod
    def _extract_body(data: bytes) -> str:
        # The separator is located in the raw bytes so a multi-byte body
        # is sliced exactly where the client put it.
        separator = data.find(HEADER_TERMINATOR)
        if separator == -1:
            return ""
        return data[separator + len(HEADER_TERMINATOR):].decode("utf-8", errors="replace")


def parse_request(data: bytes, client_address: Tuple[str, int] = ("", 0)) -> HTTPRequest:
    """
    Parse a request with a default RequestParser.

    Convenience wrapper for tests and one-off use:

        request = parse_request(b"GET /api/hello?name=Ada HTTP/1.1\\r\\n\\r\\n")
        request.path          # "/api/hello"
        request.query_string  # "name=Ada"
    """
    return RequestParser().parse(data, client_address)
