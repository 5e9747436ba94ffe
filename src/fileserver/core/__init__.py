"""
=============================================================================
CORE NETWORKING COMPONENTS
=============================================================================

The transport layer of the server: sockets and threads, no HTTP.

    ┌─────────────────────────────────────────────────────────────────────┐
    │                                                                      │
    │   SocketServer     bind / listen / accept loop                       │
    │        │                                                             │
    │        │  Connection(socket, address)                                │
    │        ▼                                                             │
    │   WorkerGroup      one Worker thread per connection                  │
    │        │                                                             │
    │        ▼                                                             │
    │   Connection       read_line() / send_response() / close()           │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

=============================================================================
"""

from .socket_server import SocketServer
from .connection import Connection, ConnectionState
from .workers import Worker, WorkerGroup

__all__ = [
    "SocketServer",     # Accepts connections
    "Connection",       # Client socket wrapper
    "ConnectionState",  # Pipeline state of a connection
    "Worker",           # Thread running one connection
    "WorkerGroup",      # Spawns and joins workers
]
