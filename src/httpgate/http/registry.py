"""
=============================================================================
ROUTE REGISTRY
=============================================================================

Ordered table of (method, pattern, handler) entries with first-match-wins
lookup.

=============================================================================
LOOKUP
=============================================================================

    ┌─────────────────────────────────────────────────────────────────────┐
    │                         ROUTE LOOKUP                                │
    ├─────────────────────────────────────────────────────────────────────┤
    │                                                                      │
    │   Request: GET /api/users/2                                          │
    │                                                                      │
    │   Registered routes (scanned top to bottom):                        │
    │   ┌────────────────────────────────────────────────────────────┐    │
    │   │ GET    /                 → home           ✗ path            │    │
    │   │ GET    /api/users        → list_users     ✗ path            │    │
    │   │ POST   /api/users        → create_user    ✗ method          │    │
    │   │ GET    /api/users/:id    → get_user       ✓ FIRST MATCH     │    │
    │   │ DELETE /api/users/:id    → delete_user    (not reached)     │    │
    │   └────────────────────────────────────────────────────────────┘    │
    │                                                                      │
    │   No match at all → fallback handler → 404 {"error": ...}           │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

Registration order IS the priority order. Literal routes that share a
prefix with a placeholder route must be registered first:

    registry.get("/api/users")(list_users)       # first
    registry.get("/api/users/:id")(get_user)     # second

=============================================================================
HANDLERS
=============================================================================

A handler is anything callable as ``handler(request, response)``. It
finalizes the response by mutating it:

    def get_user(request, response):
        response.set_json(200, {"id": request.path_params["id"]})

=============================================================================
REGISTRATION WINDOW
=============================================================================

Routes are registered during start-up. freeze() closes the table; the
server calls it before accepting the first connection, after which the
table is read-only and safe to share between worker threads.

=============================================================================
"""

from dataclasses import dataclass
from typing import Any, Callable, Iterator, List, Optional, Union
import logging

from .matcher import PathPattern
from .methods import HTTPMethod
from .request import HTTPRequest
from .response import HTTPResponse
from .status_codes import HTTPStatus


logger = logging.getLogger(__name__)


# Handler: mutates the response it is given. Returning a new HTTPResponse
# instead is also accepted by the dispatcher.
Handler = Callable[[HTTPRequest, HTTPResponse], Any]


class RegistrationClosedError(RuntimeError):
    """Raised when routes or gates are added after freeze()."""


def not_found_handler(request: HTTPRequest, response: HTTPResponse) -> None:
    """Fallback for requests no route matches."""
    response.set_error(HTTPStatus.NOT_FOUND, "Route not found")


@dataclass(frozen=True)
class Route:
    """
    A registered route.

        Route(
            method=HTTPMethod.GET,
            pattern=PathPattern("/api/users/:id", ...),
            handler=get_user,
            name="get_user",
        )
    """

    method: HTTPMethod
    pattern: PathPattern
    handler: Handler
    name: Optional[str] = None

    def matches(self, request: HTTPRequest) -> bool:
        return self.method is request.method and self.pattern.matches(request.path)


class RouteRegistry:
    """
    Ordered route table.

    Usage:
        registry = RouteRegistry()

        @registry.get("/api/users/:id")
        def get_user(request, response):
            response.set_json(200, {"id": request.path_params["id"]})

        registry.freeze()
        handler = registry.find(request)
    """

    def __init__(self, fallback: Handler = not_found_handler, strict_params: bool = False):
        """
        Args:
            fallback: Handler used when no route matches.
            strict_params: Placeholders match exactly one path segment
                           instead of any suffix of the prefix.
        """
        self._routes: List[Route] = []
        self._fallback = fallback
        self._strict_params = strict_params
        self._frozen = False

    # =========================================================================
    # REGISTRATION
    # =========================================================================

    def register(
        self,
        method: Union[HTTPMethod, str],
        pattern: str,
        handler: Handler,
        name: Optional[str] = None,
    ) -> Route:
        """
        Append a route to the table.

        Args:
            method: HTTPMethod or its name ("GET").
            pattern: Literal path or path ending in one placeholder.
            handler: Callable taking (request, response).
            name: Optional label, used in the route listing.

        Returns:
            The registered Route.

        Raises:
            RegistrationClosedError: The registry has been frozen.
            ValueError: Unknown method or invalid pattern.
        """
        self._check_open()

        route_method = method if isinstance(method, HTTPMethod) else HTTPMethod.from_token(method.upper())
        if route_method is HTTPMethod.UNSUPPORTED:
            raise ValueError(f"Cannot register a route for method {method!r}")

        route = Route(
            method=route_method,
            pattern=PathPattern.compile(pattern, strict=self._strict_params),
            handler=handler,
            name=name or getattr(handler, "__name__", None),
        )
        self._routes.append(route)
        logger.debug(f"Registered route {route.method} {route.pattern}")
        return route

    def set_fallback(self, handler: Handler) -> None:
        """Replace the handler used when no route matches."""
        self._check_open()
        self._fallback = handler

    def freeze(self) -> None:
        """Close registration. Further register() calls raise."""
        self._frozen = True

    @property
    def frozen(self) -> bool:
        return self._frozen

    def _check_open(self) -> None:
        if self._frozen:
            raise RegistrationClosedError("Route registry is frozen; register routes before serving")

    # =========================================================================
    # DECORATORS
    # =========================================================================
    #
    #     @registry.get("/api/time")
    #     def current_time(request, response): ...
    #
    # is the same as registry.register("GET", "/api/time", current_time).
    # The handler is returned unchanged so decorators can be stacked.
    #
    # =========================================================================

    def route(
        self,
        pattern: str,
        method: Union[HTTPMethod, str] = HTTPMethod.GET,
        name: Optional[str] = None,
    ) -> Callable[[Handler], Handler]:
        """Decorator registering a handler for ``method`` and ``pattern``."""
        def decorator(handler: Handler) -> Handler:
            self.register(method, pattern, handler, name)
            return handler
        return decorator

    def get(self, pattern: str, name: Optional[str] = None) -> Callable[[Handler], Handler]:
        """Register a GET route."""
        return self.route(pattern, HTTPMethod.GET, name)

    def post(self, pattern: str, name: Optional[str] = None) -> Callable[[Handler], Handler]:
        """Register a POST route."""
        return self.route(pattern, HTTPMethod.POST, name)

    def put(self, pattern: str, name: Optional[str] = None) -> Callable[[Handler], Handler]:
        """Register a PUT route."""
        return self.route(pattern, HTTPMethod.PUT, name)

    def delete(self, pattern: str, name: Optional[str] = None) -> Callable[[Handler], Handler]:
        """Register a DELETE route."""
        return self.route(pattern, HTTPMethod.DELETE, name)

    # =========================================================================
    # LOOKUP
    # =========================================================================

    def match(self, request: HTTPRequest) -> Optional[Route]:
        """
        Return the first route matching the request's method and path.

        Linear scan in registration order. O(R) per request, which is
        fine for the handful of routes a service like this carries.
        """
        for route in self._routes:
            if route.matches(request):
                return route
        return None

    def find(self, request: HTTPRequest) -> Handler:
        """Return the handler for ``request``, or the fallback handler."""
        route = self.match(request)
        return route.handler if route else self._fallback

    @property
    def fallback(self) -> Handler:
        return self._fallback

    # =========================================================================
    # INTROSPECTION
    # =========================================================================

    def routes(self) -> List[Route]:
        """All routes in registration order."""
        return list(self._routes)

    def describe(self) -> List[str]:
        """
        One line per route, for start-up logging.

            GET      /api/users/:id  (get_user)
        """
        return [
            f"{route.method.value:8} {route.pattern}  ({route.name})"
            for route in self._routes
        ]

    def __len__(self) -> int:
        return len(self._routes)

    def __iter__(self) -> Iterator[Route]:
        return iter(self._routes)
