"""
=============================================================================
CORE NETWORKING
=============================================================================

Sockets and threads. Nothing in here knows about HTTP.

    SocketServer   bind, listen, accept loop, signal handling
    Connection     one client socket: single read, send, close
    ThreadPool     fixed workers pulling connections off a bounded queue

=============================================================================
"""

from .connection import Connection, ConnectionState
from .socket_server import SocketServer
from .thread_pool import ThreadPool, Task, Worker, WorkerState

__all__ = [
    "Connection",
    "ConnectionState",
    "SocketServer",
    "ThreadPool",
    "Task",
    "Worker",
    "WorkerState",
]
