"""
=============================================================================
HTTP SERVER
=============================================================================

The connection driver: wires sockets, worker threads, the request parser
and the dispatcher together.

=============================================================================
REQUEST FLOW
=============================================================================

    ┌─────────────────────────────────────────────────────────────────────┐
    │                                                                      │
    │   SocketServer accept()                                              │
    │        │                                                             │
    │        ▼                                                             │
    │   _handle_connection(conn) ──► ThreadPool.submit()                  │
    │        │                            │                                │
    │        │ queue full                 ▼  (worker thread)               │
    │        ▼                       _process_connection(conn)            │
    │   500 "Server overloaded"           │                                │
    │                                     ├── conn.read_request()          │
    │                                     ├── parser.parse()   ─► 400      │
    │                                     ├── dispatcher.handle()          │
    │                                     ├── response.to_bytes()  ─► 500  │
    │                                     ├── conn.send_response()         │
    │                                     └── conn.close()                 │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

One request per connection. Every response carries "Connection: close".

Routes and gates are registered before run(). run() freezes the
dispatcher, so from the first accepted connection on, the route table
and middleware chain are read-only and shared safely by all workers.

=============================================================================
"""

from typing import Optional
import logging

from .config import ServerConfig
from .core import Connection, SocketServer, ThreadPool
from .dispatcher import Dispatcher
from .http.request import HTTPParseError, RequestParser, RequestTooLargeError
from .http.response import HTTPResponse, error_response, internal_error
from .http.registry import RouteRegistry
from .middleware.base import Gate


logger = logging.getLogger(__name__)


class HTTPServer:
    """
    Threaded HTTP/1.1 server, one request per connection.

    =========================================================================
    USAGE
    =========================================================================

        server = HTTPServer(ServerConfig(port=3000))

        server.use(LoggingMiddleware())

        @server.get("/api/users/:id")
        def get_user(request, response):
            response.set_json(200, {"id": int(request.path_params["id"])})

        server.run()   # blocks until SIGINT / SIGTERM

    =========================================================================
    """

    def __init__(
        self,
        config: Optional[ServerConfig] = None,
        dispatcher: Optional[Dispatcher] = None,
    ):
        """
        Args:
            config: Server configuration. Defaults to ServerConfig().
            dispatcher: Pre-built dispatcher. A new one honouring
                        ``config.strict_params`` is created otherwise.
        """
        self.config = config or ServerConfig()
        self.config.validate()

        self.dispatcher = dispatcher or Dispatcher(
            registry=RouteRegistry(strict_params=self.config.strict_params),
        )

        self._socket_server = SocketServer(self.config)
        self._thread_pool = ThreadPool(
            workers=self.config.workers,
            queue_size=self.config.queue_size,
        )
        self._parser = RequestParser(
            max_request_size=self.config.max_request_size,
            strict=self.config.strict_parsing,
        )
        self._running = False

    # =========================================================================
    # REGISTRATION
    # =========================================================================

    def use(self, gate: Gate) -> "HTTPServer":
        """
        Add a middleware gate.

        Gates run in the order added. Put logging first so requests
        rejected by later gates are still logged.
        """
        self.dispatcher.use(gate)
        return self

    def route(self, pattern: str, method: str = "GET", name: Optional[str] = None):
        return self.dispatcher.route(pattern, method, name)

    def get(self, pattern: str, name: Optional[str] = None):
        return self.dispatcher.get(pattern, name)

    def post(self, pattern: str, name: Optional[str] = None):
        return self.dispatcher.post(pattern, name)

    def put(self, pattern: str, name: Optional[str] = None):
        return self.dispatcher.put(pattern, name)

    def delete(self, pattern: str, name: Optional[str] = None):
        return self.dispatcher.delete(pattern, name)

    # =========================================================================
    # LIFECYCLE
    # =========================================================================

    @property
    def is_running(self) -> bool:
        return self._running

    @property
    def address(self):
        """(host, port) the server is bound to."""
        return self._socket_server.address

    def wait_until_ready(self, timeout: Optional[float] = None) -> bool:
        """Block until the listening socket is up (for tests and embedding)."""
        return self._socket_server.wait_until_ready(timeout)

    def run(self, host: Optional[str] = None, port: Optional[int] = None):
        """
        Serve until shut down (blocking).

        Args:
            host: Override config host.
            port: Override config port.
        """
        if host:
            self.config.host = host
        if port:
            self.config.port = port

        self._setup_logging()

        self.dispatcher.freeze()
        self._log_routes()

        self._thread_pool.start()
        self._running = True
        logger.info(
            f"Starting HTTP server on {self.config.host}:{self.config.port} "
            f"with {self.config.workers} workers"
        )

        try:
            self._socket_server.start(self._handle_connection)
        except KeyboardInterrupt:
            logger.info("Received keyboard interrupt")
        finally:
            self._shutdown()

    def shutdown(self):
        """Ask a running server to stop. run() returns once in-flight requests finish."""
        self._socket_server.shutdown()

    def _setup_logging(self):
        level = getattr(logging, self.config.log_level.upper(), logging.INFO)
        logging.basicConfig(
            level=level,
            format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
        logging.getLogger("httpgate").setLevel(level)

    def _log_routes(self):
        logger.info(f"{len(self.dispatcher.registry)} routes, {len(self.dispatcher.chain)} gates")
        for line in self.dispatcher.registry.describe():
            logger.info(f"  {line}")

    def _shutdown(self):
        logger.info("Shutting down server...")
        self._running = False
        self._thread_pool.shutdown()
        logger.info("Server stopped")

    # =========================================================================
    # CONNECTION HANDLING
    # =========================================================================

    def _handle_connection(self, conn: Connection):
        """Hand a fresh connection to the pool (runs on the accept thread)."""
        if self._thread_pool.submit(self._process_connection, args=(conn,)):
            return

        logger.warning(f"[{conn.id}] Thread pool full, rejecting connection")
        with conn:
            conn.send_response(internal_error("Server overloaded").to_bytes())

    def _process_connection(self, conn: Connection):
        """Serve one request on ``conn`` (runs on a worker thread)."""
        with conn:
            try:
                raw_request = conn.read_request()
            except TimeoutError:
                logger.debug(f"[{conn.id}] No request within {self.config.timeout}s")
                return

            if not raw_request:
                logger.debug(f"[{conn.id}] Client closed without sending a request")
                return

            response = self.handle_raw(raw_request, conn.address)
            conn.send_response(self._serialize(response, conn))

    def _serialize(self, response: HTTPResponse, conn: Connection) -> bytes:
        """Response bytes; a body that cannot be encoded becomes a 500."""
        try:
            return response.to_bytes()
        except Exception as e:
            logger.exception(f"[{conn.id}] Could not serialize response: {e}")
            return internal_error().to_bytes()

    def handle_raw(self, raw_request: bytes, client_address=("", 0)) -> HTTPResponse:
        """
        Parse and dispatch raw request bytes.

        Parse failures become JSON error responses; everything after
        parsing is guarded by the dispatcher.
        """
        try:
            request = self._parser.parse(raw_request, client_address)
        except RequestTooLargeError as e:
            logger.warning(f"Rejected request from {client_address[0]}: {e}")
            return error_response(e.status_code, "Request too large")
        except HTTPParseError as e:
            logger.warning(f"Rejected request from {client_address[0]}: {e}")
            return error_response(e.status_code, "Bad Request")

        return self.dispatcher.handle(request)
