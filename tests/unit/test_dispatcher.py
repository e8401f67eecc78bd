"""
Unit tests for the dispatcher.
"""

import json
import pytest

from httpgate.dispatcher import Dispatcher
from httpgate.http.registry import RegistrationClosedError, RouteRegistry
from httpgate.http.request import parse_request
from httpgate.http.response import HTTPResponse
from httpgate.middleware import AuthMiddleware


def echo_id(request, response):
    response.set_json(200, {"id": int(request.path_params["id"])})


class TestDispatcher:
    """Tests for Dispatcher.handle()."""

    def test_literal_route(self):
        dispatcher = Dispatcher()

        @dispatcher.get("/api/hello")
        def hello(request, response):
            response.set_text(200, "hi")

        response = dispatcher.handle(parse_request(b"GET /api/hello HTTP/1.1\r\n\r\n"))

        assert response.status == 200
        assert response.body == "hi"

    def test_path_param_echo(self):
        """Test GET /api/users/2 against an id-echoing handler."""
        dispatcher = Dispatcher()
        dispatcher.get("/api/users/:id")(echo_id)

        response = dispatcher.handle(parse_request(b"GET /api/users/2 HTTP/1.1\r\n\r\n"))

        assert response.status == 200
        assert '"id": 2' in response.body

    def test_params_not_leaked_to_literal_routes(self):
        dispatcher = Dispatcher()
        seen = {}

        @dispatcher.get("/plain")
        def plain(request, response):
            seen.update(request.path_params)

        dispatcher.handle(parse_request(b"GET /plain HTTP/1.1\r\n\r\n"))
        assert seen == {}

    def test_route_miss(self):
        dispatcher = Dispatcher()
        dispatcher.get("/a")(echo_id)

        response = dispatcher.handle(parse_request(b"GET /b HTTP/1.1\r\n\r\n"))

        assert response.status == 404
        assert json.loads(response.body) == {"error": "Route not found"}

    def test_method_miss_is_404(self):
        dispatcher = Dispatcher()
        dispatcher.get("/a")(echo_id)

        response = dispatcher.handle(parse_request(b"POST /a HTTP/1.1\r\n\r\n"))
        assert response.status == 404

    def test_unsupported_method_is_404(self):
        dispatcher = Dispatcher()
        dispatcher.get("/a")(echo_id)

        response = dispatcher.handle(parse_request(b"PATCH /a HTTP/1.1\r\n\r\n"))
        assert response.status == 404

    def test_handler_may_return_response(self):
        dispatcher = Dispatcher()

        @dispatcher.post("/items")
        def create(request, response):
            return HTTPResponse().set_json(201, {"id": 4})

        response = dispatcher.handle(parse_request(b"POST /items HTTP/1.1\r\n\r\n"))

        assert response.status == 201
        assert response.body == '{"id": 4}'

    def test_untouched_response_keeps_defaults(self):
        dispatcher = Dispatcher()

        @dispatcher.delete("/noop")
        def noop(request, response):
            pass

        response = dispatcher.handle(parse_request(b"DELETE /noop HTTP/1.1\r\n\r\n"))

        assert response.status == 200
        assert response.content_type == "text/plain"
        assert response.body == ""


class TestGuards:
    """Tests for short-circuits and the internal-error guard."""

    def test_auth_gate_blocks_handler(self):
        """Test that a 401 from the auth gate means the handler never runs."""
        calls = []
        dispatcher = Dispatcher()
        dispatcher.use(AuthMiddleware())

        @dispatcher.get("/admin")
        def admin(request, response):
            calls.append(request.path)
            response.set_json(200, {"message": "Welcome to admin panel"})

        response = dispatcher.handle(parse_request(b"GET /admin HTTP/1.1\r\nHost: x\r\n\r\n"))

        assert response.status == 401
        assert json.loads(response.body) == {"error": "Unauthorized"}
        assert calls == []

    def test_auth_gate_allows_marker(self, sample_admin_request: bytes):
        calls = []
        dispatcher = Dispatcher()
        dispatcher.use(AuthMiddleware())

        @dispatcher.get("/admin")
        def admin(request, response):
            calls.append(request.path)
            response.set_json(200, {"message": "Welcome to admin panel"})

        response = dispatcher.handle(parse_request(sample_admin_request))

        assert response.status == 200
        assert calls == ["/admin"]

    def test_gate_order_is_respected(self):
        seen = []

        def stop(request, response):
            response.set_error(400, "stop")
            return False

        def record(request, response):
            seen.append("record")
            return True

        request = parse_request(b"GET / HTTP/1.1\r\n\r\n")

        Dispatcher().use(stop).use(record).handle(request)
        assert seen == []

        Dispatcher().use(record).use(stop).handle(request)
        assert seen == ["record"]

    def test_handler_exception_becomes_500(self):
        dispatcher = Dispatcher()

        @dispatcher.get("/boom")
        def boom(request, response):
            response.set_text(200, "partial")
            raise RuntimeError("kaboom")

        response = dispatcher.handle(parse_request(b"GET /boom HTTP/1.1\r\n\r\n"))

        assert response.status == 500
        assert json.loads(response.body) == {"error": "Internal Server Error"}

    def test_gate_exception_becomes_500(self):
        def broken(request, response):
            raise KeyError("missing")

        dispatcher = Dispatcher().use(broken)
        response = dispatcher.handle(parse_request(b"GET / HTTP/1.1\r\n\r\n"))

        assert response.status == 500


class TestDispatcherRegistration:
    """Tests for registration and freezing."""

    def test_uses_given_registry(self):
        registry = RouteRegistry(strict_params=True)
        dispatcher = Dispatcher(registry=registry)
        dispatcher.get("/api/users/:id")(echo_id)

        assert dispatcher.registry is registry
        response = dispatcher.handle(parse_request(b"GET /api/users/2/x HTTP/1.1\r\n\r\n"))
        assert response.status == 404

    def test_add_route(self):
        dispatcher = Dispatcher()
        dispatcher.add_route("PUT", "/x", echo_id)

        assert len(dispatcher.registry) == 1

    def test_freeze_closes_both(self):
        dispatcher = Dispatcher()
        dispatcher.freeze()

        assert dispatcher.frozen
        with pytest.raises(RegistrationClosedError):
            dispatcher.use(lambda request, response: True)
        with pytest.raises(RegistrationClosedError):
            dispatcher.get("/late")(echo_id)
