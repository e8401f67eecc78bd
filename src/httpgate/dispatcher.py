"""
=============================================================================
DISPATCHER
=============================================================================

Turns one parsed request into one finished response.

    ┌─────────────────────────────────────────────────────────────────────┐
    │                        handle(request)                               │
    ├─────────────────────────────────────────────────────────────────────┤
    │                                                                      │
    │   response = HTTPResponse()          200 text/plain ""              │
    │        │                                                             │
    │        ▼                                                             │
    │   chain.run(request, response) ── False ──► return response         │
    │        │ True                                (a gate finalized it)   │
    │        ▼                                                             │
    │   registry.match(request)                                            │
    │        │                                                             │
    │        ├── route   → handler(request + path_params, response)       │
    │        └── None    → fallback(request, response)   404              │
    │        │                                                             │
    │        ▼                                                             │
    │   return response                                                    │
    │                                                                      │
    │   Any exception on the way → fresh 500 {"error": ...}               │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

A Dispatcher owns its registry and chain; there are no module-level
route tables. Build one at start-up, register everything, freeze() it,
then call handle() from as many threads as you like: after freeze() the
only shared state is read-only, and every call works on its own request
and response.

=============================================================================
"""

from dataclasses import replace
from typing import Callable, Optional, Union
import logging

from .http.methods import HTTPMethod
from .http.registry import Handler, Route, RouteRegistry
from .http.request import HTTPRequest
from .http.response import HTTPResponse, internal_error
from .middleware.base import Gate, MiddlewareChain


logger = logging.getLogger(__name__)


class Dispatcher:
    """
    Middleware chain + route registry + internal-error guard.

    Usage:
        dispatcher = Dispatcher()
        dispatcher.use(AuthMiddleware())

        @dispatcher.get("/api/users/:id")
        def get_user(request, response):
            response.set_json(200, {"id": int(request.path_params["id"])})

        dispatcher.freeze()
        response = dispatcher.handle(parse_request(raw))
    """

    def __init__(
        self,
        registry: Optional[RouteRegistry] = None,
        chain: Optional[MiddlewareChain] = None,
    ):
        self._registry = registry if registry is not None else RouteRegistry()
        self._chain = chain if chain is not None else MiddlewareChain()

    @property
    def registry(self) -> RouteRegistry:
        return self._registry

    @property
    def chain(self) -> MiddlewareChain:
        return self._chain

    # =========================================================================
    # REGISTRATION
    # =========================================================================

    def use(self, gate: Gate) -> "Dispatcher":
        """Append a gate to the middleware chain."""
        self._chain.register(gate)
        return self

    def add_route(
        self,
        method: Union[HTTPMethod, str],
        pattern: str,
        handler: Handler,
        name: Optional[str] = None,
    ) -> Route:
        return self._registry.register(method, pattern, handler, name)

    def route(self, pattern: str, method: Union[HTTPMethod, str] = HTTPMethod.GET, name: Optional[str] = None):
        return self._registry.route(pattern, method, name)

    def get(self, pattern: str, name: Optional[str] = None) -> Callable[[Handler], Handler]:
        return self._registry.get(pattern, name)

    def post(self, pattern: str, name: Optional[str] = None) -> Callable[[Handler], Handler]:
        return self._registry.post(pattern, name)

    def put(self, pattern: str, name: Optional[str] = None) -> Callable[[Handler], Handler]:
        return self._registry.put(pattern, name)

    def delete(self, pattern: str, name: Optional[str] = None) -> Callable[[Handler], Handler]:
        return self._registry.delete(pattern, name)

    def freeze(self) -> None:
        """Close registration on both the chain and the registry."""
        self._chain.freeze()
        self._registry.freeze()

    @property
    def frozen(self) -> bool:
        return self._chain.frozen and self._registry.frozen

    # =========================================================================
    # DISPATCH
    # =========================================================================

    def handle(self, request: HTTPRequest) -> HTTPResponse:
        """
        Run the full pipeline for one request.

        Never raises: an exception from a gate or handler is logged and
        answered with 500.
        """
        response = HTTPResponse()

        try:
            if not self._chain.run(request, response):
                return response
            return self._dispatch(request, response)
        except Exception as e:
            logger.exception(f"Unhandled error for {request.method} {request.path}: {e}")
            return internal_error()

    def _dispatch(self, request: HTTPRequest, response: HTTPResponse) -> HTTPResponse:
        route = self._registry.match(request)

        if route is None:
            handler = self._registry.fallback
        else:
            handler = route.handler
            params = route.pattern.params(request.path)
            if params:
                request = replace(request, path_params=params)

        result = handler(request, response)

        # Handlers may also build and return a response of their own.
        if isinstance(result, HTTPResponse):
            return result
        return response


# =============================================================================
# MODULE SUMMARY
# =============================================================================
#
# Dispatcher.handle() is the whole request pipeline minus the sockets:
#
#   gates (stop early?) → first matching route or fallback → handler
#
# It always returns a response. Status codes it can produce on its own:
#   404  no route (fallback handler)
#   500  a gate or handler raised
# Everything else comes from gates and handlers.
# =============================================================================
