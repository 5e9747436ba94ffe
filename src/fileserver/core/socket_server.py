"""
=============================================================================
LOW-LEVEL TCP SOCKET SERVER
=============================================================================

Listens on the configured address and hands every accepted connection to
a callback. It knows nothing about HTTP.

=============================================================================
SOCKET LIFECYCLE (Server Side)
=============================================================================

    1. socket()    Create a socket file descriptor
    2. bind()      Associate the socket with an IP:PORT
    3. listen()    Mark socket as "listening"; the OS queues up to
                   `backlog` connections that we haven't accepted yet
    4. accept()    Take one connection off that queue
                   └─ Returns a NEW socket just for that client
                   └─ Original socket keeps listening
    5. close()     Release the listening socket

                    ┌───────────────────────┐
                    │   Listening Socket    │ ◄── Created once at startup
                    └───────────┬───────────┘
                                │ accept()
            ┌───────────────────┼───────────────────┐
            ▼                   ▼                   ▼
      ┌───────────┐       ┌───────────┐       ┌───────────┐
      │ Client A  │       │ Client B  │       │ Client C  │
      │  socket   │       │  socket   │       │  socket   │
      └───────────┘       └───────────┘       └───────────┘
       Worker-0            Worker-1            Worker-2

=============================================================================
THE ACCEPT LOOP MUST NOT BLOCK ON CLIENTS
=============================================================================

The accept loop is the only sequential point in the server. It accepts,
wraps the socket in a Connection, calls the handler callback, and goes
straight back to accept(). The callback is expected to hand the
connection to another thread and return; reading the request line here
would let one slow client stall every other client.

=============================================================================
SIGNAL HANDLING FOR GRACEFUL SHUTDOWN
=============================================================================

SIGINT (Ctrl+C) and SIGTERM (docker stop, systemd) both trigger
shutdown(): the accept loop exits within one poll interval, and the
server then waits for in-flight connections.

Python only allows installing signal handlers from the main thread. When
the server runs on another thread (tests, embedding), we skip them and
rely on shutdown() being called directly.

=============================================================================
"""

import socket
import signal
import logging
import threading
from typing import Optional, Callable, Tuple

from ..config import ServerConfig
from .connection import Connection


logger = logging.getLogger(__name__)

# How often accept() wakes up to check whether we're shutting down
ACCEPT_POLL_INTERVAL = 1.0


class SocketServer:
    """
    Low-level TCP socket server.

    Usage:
        def handle_connection(conn: Connection):
            workers.spawn(process, conn)   # hand off, don't block

        server = SocketServer(config)
        server.start(handle_connection)    # Blocks until shutdown()
    """

    def __init__(self, config: ServerConfig):
        """
        Initialize the socket server.

        Args:
            config: Server configuration (host, port, backlog, buffer sizes).

        Note: The socket is created lazily in start().
        """
        self.config = config

        self._socket: Optional[socket.socket] = None
        self._running = False
        self._bound_address: Optional[Tuple[str, int]] = None

        # Set once the socket is listening; cleared again on cleanup
        self._ready_event = threading.Event()

        self._original_handlers: dict = {}

    @property
    def is_running(self) -> bool:
        return self._running

    @property
    def address(self) -> Tuple[str, int]:
        """
        The address we're listening on.

        After start() this is the real bound address, so a config port
        of 0 reports the port the OS picked.
        """
        return self._bound_address or (self.config.host, self.config.port)

    def _create_socket(self) -> socket.socket:
        """
        Create and configure the listening socket.

        SO_REUSEADDR: restart without waiting out TIME_WAIT on the port.
        The 1s timeout turns accept() into a poll so shutdown() is noticed.
        """
        sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
        sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
        sock.settimeout(ACCEPT_POLL_INTERVAL)
        return sock

    def _setup_signals(self):
        """Install SIGTERM/SIGINT handlers that call shutdown()."""
        if threading.current_thread() is not threading.main_thread():
            logger.debug("Not on the main thread; skipping signal handlers")
            return

        def shutdown_handler(signum, frame):
            signal_name = signal.Signals(signum).name
            logger.info(f"Received {signal_name}, initiating shutdown...")
            self.shutdown()

        # Saved so an embedding application gets its handlers back
        self._original_handlers[signal.SIGTERM] = signal.signal(signal.SIGTERM, shutdown_handler)
        self._original_handlers[signal.SIGINT] = signal.signal(signal.SIGINT, shutdown_handler)

    def _restore_signals(self):
        """Restore original signal handlers."""
        for sig, handler in self._original_handlers.items():
            signal.signal(sig, handler)
        self._original_handlers.clear()

    def start(self, connection_handler: Callable[[Connection], None]):
        """
        Bind, listen and run the accept loop.

        This method BLOCKS until shutdown() is called.

        Args:
            connection_handler: Called with each new Connection. Must not
                                block; it should hand the connection off.

        Raises:
            OSError: If the address cannot be bound.
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
        self._bound_address = self._socket.getsockname()[:2]

        self._running = True
        self._setup_signals()

        host, port = self._bound_address
        logger.info(f"Server listening on {host}:{port}")
        self._ready_event.set()

        try:
            self._accept_loop(connection_handler)
        finally:
            self._cleanup()

    def _accept_loop(self, connection_handler: Callable[[Connection], None]):
        """Accept connections until shutdown() clears _running."""
        while self._running:
            try:
                client_socket, client_address = self._socket.accept()
            except socket.timeout:
                continue  # Poll interval elapsed; re-check _running
            except OSError as e:
                if self._running:
                    logger.error(f"Accept error: {e}")
                break

            logger.debug(f"Accepted connection from {client_address[0]}:{client_address[1]}")

            try:
                conn = Connection(
                    socket=client_socket,
                    address=client_address,
                    buffer_size=self.config.buffer_size,
                    read_timeout=self.config.read_timeout,
                    max_line_size=self.config.max_line_size,
                )
            except OSError as e:
                # Client reset between accept() and settimeout()
                logger.warning(f"Dropping connection from {client_address[0]}: {e}")
                client_socket.close()
                continue

            try:
                connection_handler(conn)
            except Exception:
                # The handler failed to hand the connection off; don't let
                # that take down the loop
                logger.exception(f"[{conn.id}] Connection handoff failed")
                conn.close()

    def shutdown(self):
        """
        Stop the accept loop.

        Safe to call from any thread, a signal handler, or more than once.
        The loop exits within ACCEPT_POLL_INTERVAL seconds.
        """
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

        self._running = False
        self._ready_event.clear()
        logger.info("Socket server stopped")

    def wait_until_ready(self, timeout: Optional[float] = None) -> bool:
        """
        Wait for the socket to start listening.

        Returns:
            True once listening, False on timeout.
        """
        return self._ready_event.wait(timeout)
