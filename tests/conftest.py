"""
pytest configuration and fixtures.
"""

import socket
import threading
from typing import Callable, Generator
import pytest

# Add src to path for imports
import sys
from pathlib import Path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from httpgate import HTTPServer, ServerConfig, create_app


@pytest.fixture
def sample_get_request() -> bytes:
    """Sample HTTP GET request with a query string."""
    return (
        b"GET /api/hello?name=Ada&lang=en HTTP/1.1\r\n"
        b"Host: localhost:8080\r\n"
        b"User-Agent: pytest\r\n"
        b"Accept: application/json\r\n"
        b"\r\n"
    )


@pytest.fixture
def sample_post_request() -> bytes:
    """Sample HTTP POST request with JSON body."""
    body = b'{"name": "John", "email": "john@example.com"}'
    return (
        b"POST /api/users HTTP/1.1\r\n"
        b"Host: localhost:8080\r\n"
        b"Content-Type: application/json\r\n"
        + f"Content-Length: {len(body)}\r\n".encode()
        + b"\r\n"
    ) + body


@pytest.fixture
def sample_admin_request() -> bytes:
    """GET /admin carrying an Authorization header."""
    return (
        b"GET /admin HTTP/1.1\r\n"
        b"Host: localhost:8080\r\n"
        b"Authorization: Bearer token\r\n"
        b"\r\n"
    )


@pytest.fixture
def config() -> ServerConfig:
    """Default test server configuration."""
    return ServerConfig(
        host="127.0.0.1",
        port=8080,
        workers=2,
        timeout=5.0,
        log_level="WARNING",
    )


@pytest.fixture
def free_port() -> int:
    """Get a free port for testing."""
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as s:
        s.bind(("127.0.0.1", 0))
        return s.getsockname()[1]


def send_raw(port: int, data: bytes, timeout: float = 5.0) -> bytes:
    """Send raw bytes to a local server and read until it closes the connection."""
    with socket.create_connection(("127.0.0.1", port), timeout=timeout) as s:
        if data:
            s.sendall(data)
        chunks = []
        while True:
            chunk = s.recv(4096)
            if not chunk:
                break
            chunks.append(chunk)
    return b"".join(chunks)


class TestServer:
    """Test server helper that runs in a background thread."""

    __test__ = False

    def __init__(self, server: HTTPServer):
        self.server = server
        self._thread: threading.Thread = None

    @property
    def port(self) -> int:
        return self.server.config.port

    def start(self):
        """Start server in background thread."""
        self._thread = threading.Thread(target=self.server.run, daemon=True)
        self._thread.start()

        if not self.server.wait_until_ready(timeout=5.0):
            raise RuntimeError("Server failed to start")

    def stop(self):
        """Stop the server."""
        self.server.shutdown()

        if self._thread and self._thread.is_alive():
            self._thread.join(timeout=5.0)

    def request(self, data: bytes) -> bytes:
        return send_raw(self.port, data)


@pytest.fixture
def server_factory(free_port: int) -> Generator[Callable[..., TestServer], None, None]:
    """
    Build the demo application with config overrides.

    The returned TestServer is not started, so routes can still be added
    to ``.server``. Every server built here is stopped after the test.
    """
    built = []

    def factory(**overrides) -> TestServer:
        options = dict(
            host="127.0.0.1",
            port=free_port,
            workers=2,
            timeout=5.0,
            log_level="WARNING",
        )
        options.update(overrides)
        test_srv = TestServer(create_app(ServerConfig(**options)))
        built.append(test_srv)
        return test_srv

    yield factory

    for test_srv in built:
        test_srv.stop()


@pytest.fixture
def test_server(server_factory) -> TestServer:
    """The demo application listening on a free port."""
    test_srv = server_factory()
    server = test_srv.server

    @server.get("/boom")
    def boom(request, response):
        raise RuntimeError("handler exploded")

    @server.get("/raw-bytes")
    def raw_bytes(request, response):
        # bytes where text is expected: fails only when serialized
        response.set_body(200, "text/plain", b"raw")

    test_srv.start()
    return test_srv
