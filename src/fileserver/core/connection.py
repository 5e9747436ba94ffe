"""
=============================================================================
CLIENT CONNECTION
=============================================================================

Wraps an accepted client socket with the three operations the server
needs: read one line, send one response, close.

=============================================================================
ONE REQUEST PER CONNECTION
=============================================================================

There is no keep-alive. Every connection goes through the same straight
line and is closed at the end, whatever happened:

    ┌─────────────────────────────────────────────────────────────────┐
    │                    Connection Lifetime                           │
    ├─────────────────────────────────────────────────────────────────┤
    │                                                                  │
    │   TCP Connect                                                    │
    │       │                                                          │
    │       ├── read first line                                        │
    │       ├── send response                                          │
    │       │                                                          │
    │   TCP Close                                                      │
    │                                                                  │
    └─────────────────────────────────────────────────────────────────┘

=============================================================================
CONNECTION STATE MACHINE
=============================================================================

    AWAIT_LINE ──► PARSED ──► RESOLVED ──► LOADED ──► RESPONDED ──► CLOSED
        │             │           │           │            ▲
        └─────────────┴───────────┴───────────┴────────────┘
                  (error response, straight to RESPONDED)

    A failed read skips straight to CLOSED: there is nobody to respond to.

The state is bookkeeping for logs and tests. Nothing branches on it
except close(), which uses CLOSED to stay idempotent.

=============================================================================
"""

import socket
import time
import logging
from enum import Enum
from dataclasses import dataclass, field
from typing import Optional
import uuid

from ..http.errors import ErrorKind, HTTPError


logger = logging.getLogger(__name__)

# A client that keeps streaming after its response doesn't get to hold us
_MAX_DRAIN_BYTES = 64 * 1024
_MAX_DRAIN_SECONDS = 2.0


class ConnectionState(Enum):
    """Where a connection is in the request pipeline."""
    AWAIT_LINE = "await_line"  # Accepted, waiting for the request line
    PARSED = "parsed"          # Request line parsed into an HTTPRequest
    RESOLVED = "resolved"      # Resource resolved to a path under the root
    LOADED = "loaded"          # File content (or redirect) loaded
    RESPONDED = "responded"    # Response written (or the write failed)
    CLOSED = "closed"          # Socket released


@dataclass
class Connection:
    """
    Represents a client connection.

    Attributes:
        socket: The client socket.
        address: Client's (ip, port) tuple.
        id: Short unique identifier for log correlation.
        state: Current pipeline state.
        created_at: Timestamp when the connection was accepted.
    """

    # Required parameters
    socket: socket.socket
    address: tuple

    # Generated/default parameters
    id: str = field(default_factory=lambda: str(uuid.uuid4())[:8])
    state: ConnectionState = ConnectionState.AWAIT_LINE
    created_at: float = field(default_factory=time.time)

    # Configuration (passed from ServerConfig)
    buffer_size: int = 8192
    read_timeout: Optional[float] = None
    max_line_size: int = 8192

    def __post_init__(self):
        # None puts the socket in blocking mode: no read deadline
        self.socket.settimeout(self.read_timeout)

    @property
    def client_ip(self) -> str:
        return self.address[0] if self.address else ""

    @property
    def age(self) -> float:
        """Seconds since the connection was accepted."""
        return time.time() - self.created_at

    # =========================================================================
    # READING
    # =========================================================================

    def read_line(self) -> Optional[str]:
        """
        Read the request line from the socket.

        Reads until the first LF (or EOF) and returns that line, including
        its terminator. Bytes after the LF are left unread. The line is
        decoded as UTF-8; undecodable bytes become U+FFFD and will simply
        fail to resolve.

        Returns:
            The line, or None if the client sent nothing before closing,
            the read timed out, or the socket failed.

        Raises:
            HTTPError(BAD_REQUEST): If no LF arrives within max_line_size bytes.
        """
        self.state = ConnectionState.AWAIT_LINE
        buffer = b""

        while b"\n" not in buffer:
            chunk = self._recv()
            if chunk is None:
                return None
            if not chunk:
                break  # EOF: whatever we have is the line

            buffer += chunk

            if len(buffer) > self.max_line_size and b"\n" not in buffer[:self.max_line_size]:
                raise HTTPError(
                    ErrorKind.BAD_REQUEST,
                    f"Request line exceeds {self.max_line_size} bytes",
                )

        if not buffer:
            return None

        line = buffer.split(b"\n", 1)[0] + b"\n"
        return line.decode("utf-8", errors="replace")

    def _recv(self) -> Optional[bytes]:
        """
        Receive data from the socket.

        Returns:
            Received bytes, b"" on orderly EOF, or None if the read failed.
        """
        try:
            return self.socket.recv(self.buffer_size)
        except socket.timeout:
            logger.warning(f"[{self.id}] Timed out waiting for request line")
            return None
        except OSError as e:
            # ConnectionResetError and friends: client went away
            logger.warning(f"[{self.id}] Read failed: {e}")
            return None

    # =========================================================================
    # WRITING
    # =========================================================================

    def send_response(self, data: bytes) -> bool:
        """
        Send the complete response.

        sendall() keeps writing until every byte is out or the socket fails.

        Returns:
            True if sent, False if the connection was lost.
        """
        try:
            self.socket.sendall(data)
            return True
        except OSError as e:
            logger.warning(f"[{self.id}] Send failed: {e}")
            return False
        finally:
            self.state = ConnectionState.RESPONDED

    # =========================================================================
    # CLOSING
    # =========================================================================

    def close(self):
        """
        Close the connection gracefully.

        1. shutdown(SHUT_WR): send FIN so the client sees EOF after the body.
        2. Drain: read and discard whatever the client still sends (usually
           the header lines we never parsed). Closing with unread data in
           the receive buffer makes the kernel send RST, and a client that
           gets RST may throw away a response it has not read yet.
           Bounded by _MAX_DRAIN_BYTES and _MAX_DRAIN_SECONDS, so a client
           trickling bytes can't keep the worker here.
        3. close(): release the file descriptor.
        """
        if self.state == ConnectionState.CLOSED:
            return

        try:
            self.socket.shutdown(socket.SHUT_WR)
        except OSError:
            pass  # Already disconnected

        try:
            deadline = time.monotonic() + _MAX_DRAIN_SECONDS
            drained = 0
            while drained < _MAX_DRAIN_BYTES:
                remaining = deadline - time.monotonic()
                if remaining <= 0:
                    break
                self.socket.settimeout(min(0.5, remaining))
                data = self.socket.recv(1024)
                if not data:
                    break
                drained += len(data)
        except OSError:
            pass  # socket.timeout included; we're closing anyway

        try:
            self.socket.close()
        except OSError:
            pass

        self.state = ConnectionState.CLOSED
        logger.debug(f"[{self.id}] Connection closed after {self.age:.3f}s")

    def __enter__(self):
        """
        Context manager entry.

            with conn:
                line = conn.read_line()
                conn.send_response(data)
            # Connection closed here, even if the body raised
        """
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False
