"""
=============================================================================
CONNECTION
=============================================================================

One accepted client socket, served exactly once.

    ┌─────────────────────────────────────────────────────────────────────┐
    │                    CONNECTION LIFECYCLE                              │
    ├─────────────────────────────────────────────────────────────────────┤
    │                                                                      │
    │   NEW ──► READING ──► PROCESSING ──► WRITING ──► CLOSING ──► CLOSED │
    │              │                                                       │
    │              └── client sent nothing ────────────────────► CLOSED   │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

One request, one response, then close. There is no keep-alive.

=============================================================================
SINGLE READ
=============================================================================

The request is taken from ONE recv() call of at most
``max_request_size + 1`` bytes. Reading one byte past the limit is how
an oversized request is told apart from one that fits exactly.

A request that TCP splits across several segments is only partly seen.
This is a known limitation: there is no reassembly and no
Content-Length driven body reading.

=============================================================================
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Tuple
import logging
import socket
import time
import uuid


logger = logging.getLogger(__name__)


DRAIN_TIMEOUT = 0.5


class ConnectionState(Enum):
    NEW = "new"
    READING = "reading"
    PROCESSING = "processing"
    WRITING = "writing"
    CLOSING = "closing"
    CLOSED = "closed"


@dataclass
class Connection:
    """
    A client connection.

    Attributes:
        socket: The client socket.
        address: Client's (ip, port) tuple.
        id: Short identifier used in log messages.
        state: Current lifecycle state.
        created_at: When the connection was accepted.
        timeout: Socket timeout in seconds (None blocks forever).
        max_request_size: Largest request accepted, in bytes.

    Usage:
        with Connection(client_socket, address) as conn:
            data = conn.read_request()
            conn.send_response(response.to_bytes())
    """

    socket: socket.socket
    address: Tuple[str, int]
    id: str = field(default_factory=lambda: str(uuid.uuid4())[:8])
    state: ConnectionState = ConnectionState.NEW
    created_at: float = field(default_factory=time.time)

    timeout: Optional[float] = 30.0
    max_request_size: int = 4096

    def __post_init__(self):
        self.socket.settimeout(self.timeout)

    @property
    def age(self) -> float:
        """Seconds since the connection was accepted."""
        return time.time() - self.created_at

    def read_request(self) -> bytes:
        """
        Read the request with a single recv().

        Returns:
            The raw bytes received; b"" if the client closed without
            sending anything.

        Raises:
            TimeoutError: Nothing arrived within ``timeout`` seconds.
        """
        self.state = ConnectionState.READING

        try:
            data = self.socket.recv(self.max_request_size + 1)
        except socket.timeout:
            raise TimeoutError("Request read timeout")
        except (ConnectionResetError, BrokenPipeError):
            data = b""

        self.state = ConnectionState.PROCESSING
        return data

    def send_response(self, data: bytes) -> bool:
        """
        Send the complete response.

        Uses sendall() so a large body is never half-written.

        Returns:
            True if sent, False if the client went away.
        """
        self.state = ConnectionState.WRITING

        try:
            self.socket.sendall(data)
            return True
        except OSError as e:
            logger.warning(f"[{self.id}] Send failed: {e}")
            return False

    def close(self):
        """
        Close the connection.

        shutdown(SHUT_WR) sends FIN first so the client sees the end of
        the response. Unread input is then drained: closing a socket
        with data still in its receive buffer makes the kernel send RST,
        and the client may lose the response.

        The drain stops after DRAIN_TIMEOUT seconds in total, however
        slowly the client keeps sending.
        """
        if self.state == ConnectionState.CLOSED:
            return

        self.state = ConnectionState.CLOSING

        try:
            self.socket.shutdown(socket.SHUT_WR)
        except OSError:
            pass  # already disconnected

        self._drain(time.monotonic() + DRAIN_TIMEOUT)

        try:
            self.socket.close()
        except OSError:
            pass

        self.state = ConnectionState.CLOSED
        logger.debug(f"[{self.id}] Connection closed after {self.age:.3f}s")

    def _drain(self, deadline: float):
        try:
            while True:
                remaining = deadline - time.monotonic()
                if remaining <= 0:
                    logger.debug(f"[{self.id}] Client still sending, closing anyway")
                    return
                self.socket.settimeout(remaining)
                if not self.socket.recv(1024):
                    return
        except OSError:
            pass

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False
