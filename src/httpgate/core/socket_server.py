"""
=============================================================================
SOCKET SERVER
=============================================================================

TCP listener: bind, listen, accept, hand each connection to a callback.

    ┌─────────────────────────────────────────────────────────────────────┐
    │                                                                      │
    │    start(callback)                                                   │
    │        ├──► _create_socket()   SO_REUSEADDR, 1s accept timeout      │
    │        ├──► bind() / listen(backlog)                                 │
    │        ├──► _setup_signals()   SIGTERM/SIGINT → shutdown()          │
    │        └──► _accept_loop()     blocks until shutdown()              │
    │                 └──► callback(Connection(...))                       │
    │                                                                      │
    │    shutdown()  → loop exits within one accept timeout               │
    │    _cleanup()  → restore signal handlers, close listening socket    │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

The listening socket has a 1 second timeout so the accept loop wakes up
regularly and notices a shutdown request.

Signal handlers can only be installed from the main thread. When the
server runs in a background thread (as in the tests), signals are left
alone and shutdown() must be called explicitly.

=============================================================================
"""

from typing import Callable, Optional, Tuple
import logging
import signal
import socket
import threading

from ..config import ServerConfig
from .connection import Connection


logger = logging.getLogger(__name__)


ACCEPT_TIMEOUT = 1.0


class SocketServer:
    """
    Low-level TCP server.

    Usage:
        def handle_connection(conn: Connection):
            ...

        server = SocketServer(config)
        server.start(handle_connection)  # Blocks until shutdown
    """

    def __init__(self, config: ServerConfig):
        """
        Args:
            config: Server configuration (host, port, backlog, timeout,
                    max_request_size).

        The socket is created in start(), not here.
        """
        self.config = config
        self._socket: Optional[socket.socket] = None
        self._running = False
        self._ready = threading.Event()
        self._original_handlers: dict = {}

    @property
    def is_running(self) -> bool:
        return self._running

    @property
    def address(self) -> Tuple[str, int]:
        """The bound (host, port), or the configured one before start()."""
        if self._socket is not None:
            return self._socket.getsockname()[:2]
        return (self.config.host, self.config.port)

    def wait_until_ready(self, timeout: Optional[float] = None) -> bool:
        """
        Block until the socket is listening.

        Returns:
            True once listening, False on timeout.
        """
        return self._ready.wait(timeout)

    def _create_socket(self) -> socket.socket:
        sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
        # Allow an immediate restart while old connections sit in TIME_WAIT.
        sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
        sock.settimeout(ACCEPT_TIMEOUT)
        return sock

    def _setup_signals(self):
        """Route SIGTERM and SIGINT to shutdown(). Main thread only."""
        if threading.current_thread() is not threading.main_thread():
            logger.debug("Not on the main thread, signal handlers not installed")
            return

        def shutdown_handler(signum, frame):
            logger.info(f"Received {signal.Signals(signum).name}, initiating shutdown...")
            self.shutdown()

        for sig in (signal.SIGTERM, signal.SIGINT):
            self._original_handlers[sig] = signal.signal(sig, shutdown_handler)

    def _restore_signals(self):
        for sig, handler in self._original_handlers.items():
            signal.signal(sig, handler)
        self._original_handlers.clear()

    def start(self, connection_handler: Callable[[Connection], None]):
        """
        Bind, listen and accept until shutdown() is called.

        Args:
            connection_handler: Called with every accepted Connection.
                                It must not block for long; the server
                                hands the connection to its thread pool.

        Raises:
            OSError: The address could not be bound.
        """
        self._socket = self._create_socket()

        try:
            self._socket.bind((self.config.host, self.config.port))
        except OSError as e:
            logger.error(f"Failed to bind to {self.config.host}:{self.config.port}: {e}")
            self._socket.close()
            self._socket = None
            raise

        self._socket.listen(self.config.backlog)
        self._running = True
        self._setup_signals()

        host, port = self.address
        logger.info(f"Server listening on {host}:{port}")
        self._ready.set()

        try:
            self._accept_loop(connection_handler)
        finally:
            self._cleanup()

    def _accept_loop(self, connection_handler: Callable[[Connection], None]):
        while self._running:
            try:
                client_socket, client_address = self._socket.accept()
            except socket.timeout:
                continue
            except OSError as e:
                if self._running:
                    logger.error(f"Accept error: {e}")
                break

            logger.debug(f"Accepted connection from {client_address[0]}:{client_address[1]}")
            conn = Connection(
                socket=client_socket,
                address=client_address,
                timeout=self.config.timeout,
                max_request_size=self.config.max_request_size,
            )
            connection_handler(conn)

    def shutdown(self):
        """Stop the accept loop. Safe to call more than once and from any thread."""
        if self._running:
            logger.info("Shutting down socket server...")
        self._running = False

    def _cleanup(self):
        self._restore_signals()

        if self._socket:
            try:
                self._socket.close()
            except OSError:
                pass
            self._socket = None

        self._ready.clear()
        logger.info("Socket server stopped")
