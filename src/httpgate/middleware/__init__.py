"""
=============================================================================
MIDDLEWARE
=============================================================================

Gates that run, in registration order, before a request is dispatched.

    ┌─────────────────────────────────────────────────────────────────────┐
    │   Incoming Request                                                   │
    │        │                                                             │
    │        ▼                                                             │
    │   ┌──────────────────┐                                              │
    │   │ LoggingMiddleware│ ──► access log line, always continues        │
    │   └────────┬─────────┘                                              │
    │            ▼                                                         │
    │   ┌──────────────────┐                                              │
    │   │ AuthMiddleware   │ ──► 401 and STOP on protected paths          │
    │   └────────┬─────────┘     without an Authorization header          │
    │            ▼                                                         │
    │   Route handler                                                      │
    └─────────────────────────────────────────────────────────────────────┘

Any callable ``gate(request, response) -> bool`` can join the chain;
subclass Middleware when the gate needs configuration.

=============================================================================
"""

from .base import (
    Gate,
    Middleware,
    MiddlewareChain,
    FunctionMiddleware,
    function_middleware,
)
from .logging import LoggingMiddleware
from .auth import AuthMiddleware

__all__ = [
    # Chain and base classes
    "Gate",
    "Middleware",
    "MiddlewareChain",
    "FunctionMiddleware",
    "function_middleware",

    # Built-in gates
    "LoggingMiddleware",
    "AuthMiddleware",
]
