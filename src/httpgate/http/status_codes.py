"""
=============================================================================
HTTP STATUS CODES
=============================================================================

Status codes used by the pipeline and the reason phrases written on the
status line.

=============================================================================
REASON PHRASE TABLE
=============================================================================

The status line carries a human-readable phrase after the code:

    HTTP/1.1 404 Not Found
             ─┬─ ────┬────
              │      └── reason phrase (looked up here)
              └───────── status code

Only a fixed set of phrases is known. Any other code is still written
with its number, but the phrase becomes "Unknown":

    ┌────────┬──────────────────────────┐
    │  Code  │  Phrase                  │
    ├────────┼──────────────────────────┤
    │  200   │  OK                      │
    │  201   │  Created                 │
    │  204   │  No Content              │
    │  400   │  Bad Request             │
    │  404   │  Not Found               │
    │  405   │  Method Not Allowed      │
    │  500   │  Internal Server Error   │
    │  other │  Unknown                 │
    └────────┴──────────────────────────┘

Note that 401 (used by the auth gate) is NOT in the table: clients read
the numeric code, and the phrase is informational only (RFC 7230 §3.1.2
says clients SHOULD ignore it).

=============================================================================
"""

from enum import IntEnum
from typing import Dict


class HTTPStatus(IntEnum):
    """
    Status codes produced by the pipeline.

    IntEnum, so members compare equal to plain integers:

        >>> HTTPStatus.NOT_FOUND == 404
        True
        >>> HTTPStatus.NOT_FOUND.phrase
        'Not Found'
    """

    OK = 200
    CREATED = 201
    NO_CONTENT = 204
    BAD_REQUEST = 400
    UNAUTHORIZED = 401              # Auth gate rejection
    NOT_FOUND = 404
    METHOD_NOT_ALLOWED = 405
    INTERNAL_SERVER_ERROR = 500

    @property
    def phrase(self) -> str:
        """Reason phrase for the status line."""
        return reason_phrase(self.value)


REASON_PHRASES: Dict[int, str] = {
    200: "OK",
    201: "Created",
    204: "No Content",
    400: "Bad Request",
    404: "Not Found",
    405: "Method Not Allowed",
    500: "Internal Server Error",
}

UNKNOWN_PHRASE = "Unknown"


def reason_phrase(code: int) -> str:
    """Return the reason phrase for ``code``, or "Unknown"."""
    return REASON_PHRASES.get(int(code), UNKNOWN_PHRASE)
