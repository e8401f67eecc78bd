"""
Integration tests: real sockets against the demo application.
"""

import json
import socket
import threading

import pytest


def split_response(raw: bytes):
    head, _, body = raw.partition(b"\r\n\r\n")
    lines = head.decode().split("\r\n")
    headers = dict(line.split(": ", 1) for line in lines[1:])
    return lines[0], headers, body


class TestServerRoundTrip:
    """Full request/response cycles over TCP."""

    def test_get_user(self, test_server):
        status, headers, body = split_response(
            test_server.request(b"GET /api/users/2 HTTP/1.1\r\nHost: test\r\n\r\n")
        )

        assert status == "HTTP/1.1 200 OK"
        assert headers["Content-Type"] == "application/json"
        assert headers["Connection"] == "close"
        assert int(headers["Content-Length"]) == len(body)
        assert b'"id": 2' in body

    def test_hello_query(self, test_server):
        _, _, body = split_response(
            test_server.request(b"GET /api/hello?name=Ada HTTP/1.1\r\n\r\n")
        )
        assert json.loads(body)["message"] == "Hello, Ada!"

    def test_create_user(self, test_server, sample_post_request: bytes):
        status, _, body = split_response(test_server.request(sample_post_request))

        assert status == "HTTP/1.1 201 Created"
        assert json.loads(body)["id"] == 4

    def test_admin_unauthorized(self, test_server):
        status, _, body = split_response(test_server.request(b"GET /admin HTTP/1.1\r\n\r\n"))

        assert status == "HTTP/1.1 401 Unknown"
        assert json.loads(body) == {"error": "Unauthorized"}

    def test_admin_authorized(self, test_server, sample_admin_request: bytes):
        status, _, body = split_response(test_server.request(sample_admin_request))

        assert status == "HTTP/1.1 200 OK"
        assert json.loads(body) == {"message": "Welcome to admin panel"}

    def test_not_found(self, test_server):
        status, _, body = split_response(test_server.request(b"GET /missing HTTP/1.1\r\n\r\n"))

        assert status == "HTTP/1.1 404 Not Found"
        assert json.loads(body) == {"error": "Route not found"}

    def test_handler_error(self, test_server):
        status, _, body = split_response(test_server.request(b"GET /boom HTTP/1.1\r\n\r\n"))

        assert status == "HTTP/1.1 500 Internal Server Error"
        assert json.loads(body) == {"error": "Internal Server Error"}

    def test_empty_connection_is_closed(self, test_server):
        with socket.create_connection(("127.0.0.1", test_server.port), timeout=5.0) as s:
            s.shutdown(socket.SHUT_WR)
            assert s.recv(1024) == b""

    def test_server_survives_many_requests(self, test_server):
        for _ in range(10):
            status, _, _ = split_response(test_server.request(b"GET /api/time HTTP/1.1\r\n\r\n"))
            assert status == "HTTP/1.1 200 OK"

    def test_stop_releases_port(self, test_server):
        port = test_server.port
        test_server.stop()

        assert not test_server.server.is_running
        with pytest.raises(OSError):
            socket.create_connection(("127.0.0.1", port), timeout=1.0).close()

    def test_unserializable_body_becomes_500(self, test_server):
        status, headers, body = split_response(
            test_server.request(b"GET /raw-bytes HTTP/1.1\r\n\r\n")
        )

        assert status == "HTTP/1.1 500 Internal Server Error"
        assert int(headers["Content-Length"]) == len(body)
        assert json.loads(body) == {"error": "Internal Server Error"}


def recv_all(sock: socket.socket) -> bytes:
    chunks = []
    while True:
        chunk = sock.recv(4096)
        if not chunk:
            return b"".join(chunks)
        chunks.append(chunk)


def padded_request(size: int) -> bytes:
    """A GET of exactly ``size`` bytes, padded with a filler header."""
    head = b"GET /api/time HTTP/1.1\r\nX-Pad: "
    tail = b"\r\n\r\n"
    return head + b"a" * (size - len(head) - len(tail)) + tail


class TestServerLimits:
    """Request size limit and load shedding over TCP."""

    def test_request_at_size_limit_is_served(self, server_factory):
        test_srv = server_factory(max_request_size=1024)
        test_srv.start()

        request = padded_request(1024)
        assert len(request) == 1024

        status, _, _ = split_response(test_srv.request(request))
        assert status == "HTTP/1.1 200 OK"

    def test_oversized_request_rejected(self, server_factory):
        test_srv = server_factory(max_request_size=1024)
        test_srv.start()

        request = padded_request(1025)
        assert len(request) == 1025

        status, _, body = split_response(test_srv.request(request))

        assert status == "HTTP/1.1 400 Bad Request"
        assert json.loads(body) == {"error": "Request too large"}

    def test_full_queue_answers_overloaded(self, server_factory):
        test_srv = server_factory(workers=1, queue_size=1)
        entered = threading.Event()
        release = threading.Event()

        @test_srv.server.get("/block")
        def block(request, response):
            entered.set()
            release.wait(10.0)
            response.set_text(200, "done")

        test_srv.start()
        address = ("127.0.0.1", test_srv.port)

        busy = socket.create_connection(address, timeout=10.0)
        waiting = None
        try:
            busy.sendall(b"GET /block HTTP/1.1\r\n\r\n")
            assert entered.wait(5.0)

            # The only worker is blocked, so this one fills the queue...
            waiting = socket.create_connection(address, timeout=10.0)
            waiting.sendall(b"GET /api/time HTTP/1.1\r\n\r\n")

            # ...and this one is turned away.
            status, _, body = split_response(
                test_srv.request(b"GET /api/time HTTP/1.1\r\n\r\n")
            )
            assert status == "HTTP/1.1 500 Internal Server Error"
            assert json.loads(body) == {"error": "Server overloaded"}
        finally:
            release.set()

        try:
            status, _, body = split_response(recv_all(busy))
            assert status == "HTTP/1.1 200 OK"
            assert body == b"done"

            status, _, _ = split_response(recv_all(waiting))
            assert status == "HTTP/1.1 200 OK"
        finally:
            busy.close()
            waiting.close()
