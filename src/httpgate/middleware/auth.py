"""
=============================================================================
AUTH GATE
=============================================================================

Keeps unauthenticated requests away from protected path prefixes.

    ┌─────────────────────────────────────────────────────────────────────┐
    │                                                                      │
    │   path starts with a protected prefix?                              │
    │        │                                                             │
    │        ├── no  ──────────────────────────────────────► continue     │
    │        │                                                             │
    │        └── yes ─► "Authorization:" in header blob?                  │
    │                        │                                             │
    │                        ├── yes ──────────────────────► continue     │
    │                        │                                             │
    │                        └── no ─► 401 {"error": "Unauthorized"}      │
    │                                  STOP                                │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

This checks PRESENCE only. The credential itself is never validated:
"Authorization: anything" gets through. Real token verification belongs
in a gate of its own registered after this one.

Prefix matching is plain startswith(), so "/admin" also protects
"/administrator" and "/admin-tools".

=============================================================================
"""

from typing import Iterable, Tuple
import logging

from .base import Middleware
from ..http.request import HTTPRequest
from ..http.response import HTTPResponse
from ..http.status_codes import HTTPStatus


logger = logging.getLogger(__name__)


DEFAULT_PROTECTED_PREFIXES: Tuple[str, ...] = ("/admin",)
DEFAULT_AUTH_MARKER = "Authorization:"


class AuthMiddleware(Middleware):
    """
    Requires an authorization marker for protected paths.

    Usage:
        chain.register(AuthMiddleware())
        chain.register(AuthMiddleware(protected_prefixes=["/admin", "/internal"]))
    """

    def __init__(
        self,
        protected_prefixes: Iterable[str] = DEFAULT_PROTECTED_PREFIXES,
        marker: str = DEFAULT_AUTH_MARKER,
    ):
        self.protected_prefixes = tuple(protected_prefixes)
        self.marker = marker

    def is_protected(self, path: str) -> bool:
        return any(path.startswith(prefix) for prefix in self.protected_prefixes)

    def __call__(self, request: HTTPRequest, response: HTTPResponse) -> bool:
        if not self.is_protected(request.path):
            return True

        if request.has_header(self.marker):
            return True

        logger.warning(f"Rejected unauthenticated {request.method} {request.path}")
        response.set_error(HTTPStatus.UNAUTHORIZED, "Unauthorized")
        return False
