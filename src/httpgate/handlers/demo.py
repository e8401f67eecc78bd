"""
=============================================================================
DEMO HANDLERS
=============================================================================

The sample API served by ``python -m httpgate``.

    ┌──────────┬──────────────────┬─────────────────────────────────────────┐
    │ Method   │ Path             │ Response                                │
    ├──────────┼──────────────────┼─────────────────────────────────────────┤
    │ GET      │ /                │ HTML page listing the endpoints         │
    │ GET      │ /api/hello       │ {"message": "Hello, NAME!", ...}        │
    │ GET      │ /api/time        │ {"current_time": ..., ...}              │
    │ GET      │ /api/users       │ fixed list of three users               │
    │ POST     │ /api/users       │ 201, a canned "created" user            │
    │ GET      │ /api/users/:id   │ user 1-3, else 404                      │
    │ DELETE   │ /api/users/:id   │ {"message": "User N deleted", ...}      │
    │ GET      │ /admin           │ needs an Authorization header           │
    └──────────┴──────────────────┴─────────────────────────────────────────┘

Nothing is stored. POST and DELETE answer as if they had succeeded.

Every handler has the same shape: ``handler(request, response)``,
mutating the response.

=============================================================================
"""

from typing import Optional
import logging
import re
import time

from ..http.request import HTTPRequest
from ..http.response import HTTPResponse
from ..http.status_codes import HTTPStatus


logger = logging.getLogger(__name__)


USERS = [
    {"id": 1, "name": "Alice", "email": "alice@example.com"},
    {"id": 2, "name": "Bob", "email": "bob@example.com"},
    {"id": 3, "name": "Charlie", "email": "charlie@example.com"},
]

KNOWN_USER_IDS = range(1, 4)

HOME_PAGE = (
    "<!DOCTYPE html>"
    "<html><head><title>httpgate</title></head>"
    "<body>"
    "<h1>Welcome to httpgate!</h1>"
    "<p>Available endpoints:</p>"
    "<ul>"
    "<li>GET / - This page</li>"
    "<li>GET /api/hello - Hello JSON</li>"
    "<li>GET /api/time - Current time</li>"
    "<li>GET /api/users - List users</li>"
    "<li>POST /api/users - Create user</li>"
    "<li>GET /api/users/123 - Get specific user</li>"
    "<li>DELETE /api/users/123 - Delete user</li>"
    "<li>GET /admin - Protected route (requires auth)</li>"
    "</ul>"
    "</body></html>"
)

_LEADING_INT = re.compile(r"\s*([+-]?\d+)")


def parse_user_id(value: Optional[str]) -> int:
    """
    Read the integer at the start of a path parameter.

    Trailing text is ignored and a value without leading digits is 0:

        >>> parse_user_id("2")
        2
        >>> parse_user_id("2/extra")
        2
        >>> parse_user_id("abc")
        0
    """
    match = _LEADING_INT.match(value or "")
    return int(match.group(1)) if match else 0


def home(request: HTTPRequest, response: HTTPResponse) -> None:
    response.set_html(HTTPStatus.OK, HOME_PAGE)


def hello(request: HTTPRequest, response: HTTPResponse) -> None:
    """Greet ``?name=`` (default "Guest")."""
    name = request.get_query("name") or "Guest"
    response.set_json(HTTPStatus.OK, {
        "message": f"Hello, {name}!",
        "timestamp": int(time.time()),
    })


def current_time(request: HTTPRequest, response: HTTPResponse) -> None:
    now = time.time()
    response.set_json(HTTPStatus.OK, {
        "current_time": time.ctime(now),
        "unix_timestamp": int(now),
    })


def list_users(request: HTTPRequest, response: HTTPResponse) -> None:
    response.set_json(HTTPStatus.OK, {"users": USERS, "count": len(USERS)})


def create_user(request: HTTPRequest, response: HTTPResponse) -> None:
    # The body is only logged; nothing is persisted.
    logger.info(f"Received POST body: {request.body}")
    response.set_json(HTTPStatus.CREATED, {
        "id": 4,
        "name": "New User",
        "email": "newuser@example.com",
        "created": True,
    })


def get_user(request: HTTPRequest, response: HTTPResponse) -> None:
    user_id = parse_user_id(request.path_params.get("id"))

    if user_id not in KNOWN_USER_IDS:
        response.set_error(HTTPStatus.NOT_FOUND, "User not found")
        return

    response.set_json(HTTPStatus.OK, {
        "id": user_id,
        "name": f"User {user_id}",
        "email": f"user{user_id}@example.com",
    })


def delete_user(request: HTTPRequest, response: HTTPResponse) -> None:
    user_id = parse_user_id(request.path_params.get("id"))
    response.set_json(HTTPStatus.OK, {
        "message": f"User {user_id} deleted",
        "success": True,
    })


def admin(request: HTTPRequest, response: HTTPResponse) -> None:
    response.set_json(HTTPStatus.OK, {"message": "Welcome to admin panel"})
