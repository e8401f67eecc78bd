"""
=============================================================================
DEMO APPLICATION
=============================================================================

Builds the server run by ``python -m httpgate``.

    Gates (in order):
        1. LoggingMiddleware    access log
        2. AuthMiddleware       401 for /admin without Authorization

    Routes (in order, first match wins):
        GET     /
        GET     /api/hello
        GET     /api/time
        GET     /api/users
        POST    /api/users
        GET     /api/users/:id
        DELETE  /api/users/:id
        GET     /admin

"/api/users" must stay ahead of "/api/users/:id". With lax placeholder
matching the placeholder route only needs the "/api/users" prefix, so
it would also claim GET /api/users if it came first.

=============================================================================
"""

from typing import Optional

from .config import ServerConfig
from .handlers import demo
from .middleware import AuthMiddleware, LoggingMiddleware
from .server import HTTPServer


def register_demo_routes(server: HTTPServer) -> None:
    """Register the sample API on ``server``."""
    server.get("/")(demo.home)
    server.get("/api/hello")(demo.hello)
    server.get("/api/time")(demo.current_time)
    server.get("/api/users")(demo.list_users)
    server.post("/api/users")(demo.create_user)
    server.get("/api/users/:id")(demo.get_user)
    server.delete("/api/users/:id")(demo.delete_user)
    server.get("/admin")(demo.admin)


def create_app(config: Optional[ServerConfig] = None) -> HTTPServer:
    """
    Create the demo server.

    Args:
        config: Server configuration. Defaults to ServerConfig().

    Returns:
        An HTTPServer with gates and routes registered, ready to run().

    Example:
        app = create_app(ServerConfig(port=3000))
        app.run()
    """
    server = HTTPServer(config)

    server.use(LoggingMiddleware(log_format=server.config.log_format))
    server.use(AuthMiddleware(
        protected_prefixes=server.config.protected_prefixes,
        marker=server.config.auth_marker,
    ))

    register_demo_routes(server)
    return server
