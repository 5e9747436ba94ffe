"""
=============================================================================
FILE SERVER
=============================================================================

Ties the pieces together: the socket server accepts, a worker thread runs
the request pipeline for each connection, and the static file handler
does the HTTP work.

=============================================================================
REQUEST FLOW
=============================================================================

    ┌─────────────────────────────────────────────────────────────────────┐
    │                                                                      │
    │   SocketServer.accept()                   (main thread)              │
    │        │                                                             │
    │        └──► FileServer._handle_connection(conn)                      │
    │                  │                                                   │
    │                  └──► WorkerGroup.spawn() ─────────┐                 │
    │                                                    │ (worker thread) │
    │   FileServer._process_connection(conn) ◄───────────┘                 │
    │        │                                                             │
    │        ├──► conn.read_line()            AWAIT_LINE                   │
    │        ├──► parse_request_line()        → PARSED                     │
    │        ├──► StaticFileHandler.resolve() → RESOLVED                   │
    │        ├──► StaticFileHandler.load()    → LOADED                     │
    │        ├──► StaticFileHandler.respond()                              │
    │        │                                                             │
    │        │    any HTTPError ──► error_response(kind)                   │
    │        │                                                             │
    │        ├──► conn.send_response()        → RESPONDED                  │
    │        └──► conn.close()                → CLOSED                     │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

=============================================================================
ERROR HANDLING
=============================================================================

_process_connection is the only place an HTTPError is caught. Whatever
fails, the client gets a complete response with a plain-text body. The
exceptions:

    - The client closed (or timed out) before sending a line: nobody to
      answer, the connection is just closed.
    - The final write fails: logged, connection closed.

A bug anywhere in the pipeline (an exception that isn't HTTPError) is
logged with its traceback and answered with 500.

=============================================================================
"""

import logging
import time
from typing import Optional, Tuple

from .access_log import AccessLogger
from .config import ServerConfig
from .core import SocketServer, Connection, ConnectionState, WorkerGroup
from .handlers import StaticFileHandler
from .http import (
    ErrorKind, HTTPError, HTTPRequest, HTTPResponse,
    error_response, parse_request_line,
)


logger = logging.getLogger(__name__)

# How long shutdown waits for in-flight connections
SHUTDOWN_TIMEOUT = 5.0


class FileServer:
    """
    Static file server: one request per connection, one thread per
    connection.

    Usage:
        server = FileServer(ServerConfig(root="./public", port=8080))
        server.run()    # Blocks until Ctrl+C / SIGTERM / shutdown()
    """

    def __init__(self, config: Optional[ServerConfig] = None):
        """
        Initialize the server.

        Args:
            config: Server configuration. Uses defaults if not provided.

        Raises:
            ValueError: If the configuration is invalid (e.g. the root
                        directory doesn't exist).
        """
        self.config = config or ServerConfig()
        self.config.validate()

        self._socket_server = SocketServer(self.config)
        self._workers = WorkerGroup()
        self._static = StaticFileHandler(self.config.root, self.config.index_file)
        self._access_log = AccessLogger(log_format=self.config.log_format)

        self._running = False

    @property
    def address(self) -> Tuple[str, int]:
        """The (host, port) the server is listening on."""
        return self._socket_server.address

    @property
    def root(self):
        """The canonical served root."""
        return self._static.root_dir

    @property
    def is_running(self) -> bool:
        return self._running

    # =========================================================================
    # SERVER LIFECYCLE
    # =========================================================================

    def run(self):
        """
        Start the server (blocking).

        Returns once shutdown() has been called (or a signal received) and
        in-flight connections have finished or SHUTDOWN_TIMEOUT expired.
        """
        self._setup_logging()
        self._workers = WorkerGroup()
        self._running = True

        logger.info(f"Serving {self.root} (index: {self.config.index_file})")

        try:
            self._socket_server.start(self._handle_connection)
        except KeyboardInterrupt:
            logger.info("Received keyboard interrupt")
        finally:
            self._shutdown()

    def shutdown(self):
        """Ask the server to stop. Safe to call from any thread."""
        self._socket_server.shutdown()

    def wait_until_ready(self, timeout: Optional[float] = None) -> bool:
        """Block until the server is accepting connections."""
        return self._socket_server.wait_until_ready(timeout)

    def _setup_logging(self):
        """Configure logging based on config."""
        level = getattr(logging, self.config.log_level.upper(), logging.INFO)

        logging.basicConfig(
            level=level,
            format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )

        logging.getLogger("fileserver").setLevel(level)

    def _shutdown(self):
        logger.info("Shutting down server...")
        self._running = False

        self._workers.join(timeout=SHUTDOWN_TIMEOUT)

        logger.info(f"Server stopped ({self._workers.stats})")

    # =========================================================================
    # CONNECTION HANDLING
    # =========================================================================

    def _handle_connection(self, conn: Connection):
        """
        Hand a freshly accepted connection to its own worker thread.

        Runs on the accept loop, so it must not do any I/O except in the
        failure case below.
        """
        if not self._workers.spawn(self._process_connection, conn):
            logger.warning(f"[{conn.id}] No worker available, rejecting connection")
            with conn:
                conn.send_response(error_response(ErrorKind.INTERNAL_SERVER_ERROR).to_bytes())

    def _process_connection(self, conn: Connection):
        """
        Run the request pipeline for one connection (worker thread).

        Args:
            conn: The client connection. Always closed on return.
        """
        start_time = time.time()
        request: Optional[HTTPRequest] = None

        with conn:
            try:
                line = conn.read_line()
                if line is None:
                    logger.debug(f"[{conn.id}] Client sent no request line")
                    return
                request = self._handle_line(conn, line)
                response = self._handle_request(conn, request)
            except HTTPError as e:
                logger.debug(f"[{conn.id}] {int(e.status)} {e}")
                response = error_response(e.kind)
            except Exception as e:
                logger.exception(f"[{conn.id}] Handler error: {e}")
                response = error_response(ErrorKind.INTERNAL_SERVER_ERROR)

            logger.debug(f"[{conn.id}] Response:\n{response.describe()}")
            conn.send_response(response.to_bytes())

            duration_ms = (time.time() - start_time) * 1000
            self._access_log.log(conn.id, conn.client_ip, request, response, duration_ms)

    def _handle_line(self, conn: Connection, line: str) -> HTTPRequest:
        request = parse_request_line(line)
        conn.state = ConnectionState.PARSED
        logger.debug(f"[{conn.id}] Request: {request}")
        return request

    def _handle_request(self, conn: Connection, request: HTTPRequest) -> HTTPResponse:
        path = self._static.resolve(request)
        conn.state = ConnectionState.RESOLVED

        content = self._static.load(path)
        conn.state = ConnectionState.LOADED
        logger.debug(f"[{conn.id}] MIME at path: {content.content_type}")

        return self._static.respond(request, content)

