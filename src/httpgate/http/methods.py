"""
=============================================================================
HTTP METHODS
=============================================================================

The pipeline recognizes exactly four request methods. Every other token
that appears in the method position of a request line (HEAD, PATCH,
OPTIONS, lowercase "get", garbage) collapses to UNSUPPORTED.

    ┌────────────────────────────────────────────────────────────────────┐
    │                       METHOD TOKEN MAPPING                         │
    ├──────────────┬─────────────────────────────────────────────────────┤
    │  "GET"       │  HTTPMethod.GET                                     │
    │  "POST"      │  HTTPMethod.POST                                    │
    │  "PUT"       │  HTTPMethod.PUT                                     │
    │  "DELETE"    │  HTTPMethod.DELETE                                  │
    │  anything    │  HTTPMethod.UNSUPPORTED                             │
    └──────────────┴─────────────────────────────────────────────────────┘

UNSUPPORTED is not an error. No route can be registered for it, so the
router falls through to the not-found handler and the client sees 404.

=============================================================================
"""

from enum import Enum


class HTTPMethod(Enum):
    """Request methods understood by the router."""

    GET = "GET"
    POST = "POST"
    PUT = "PUT"
    DELETE = "DELETE"
    UNSUPPORTED = "UNSUPPORTED"

    @classmethod
    def from_token(cls, token: str) -> "HTTPMethod":
        """
        Map a raw method token to an HTTPMethod.

        Matching is exact and case-sensitive, as RFC 7230 requires for
        method names. Unknown tokens map to UNSUPPORTED.

        Example:
            >>> HTTPMethod.from_token("GET")
            <HTTPMethod.GET: 'GET'>
            >>> HTTPMethod.from_token("get")
            <HTTPMethod.UNSUPPORTED: 'UNSUPPORTED'>
        """
        try:
            return cls(token)
        except ValueError:
            return cls.UNSUPPORTED

    def __str__(self) -> str:
        return self.value
