"""
=============================================================================
SERVER CONFIGURATION
=============================================================================

Centralized configuration for the file server.

=============================================================================
CONFIGURATION SOURCES
=============================================================================

    ┌─────────────────────────────────────────────────────────────────────┐
    │                    CONFIGURATION HIERARCHY                          │
    ├─────────────────────────────────────────────────────────────────────┤
    │                                                                      │
    │   Priority (highest to lowest):                                     │
    │                                                                      │
    │   1. Command-line arguments                                         │
    │      └── python -m fileserver --root ./public                       │
    │                                                                      │
    │   2. Environment variables                                          │
    │      └── FILESERVER_ROOT=./public python -m fileserver              │
    │                                                                      │
    │   3. Default values (in this dataclass)                             │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

=============================================================================
WHY FROZEN?
=============================================================================

The config is built once at startup and then read from every connection
thread at the same time. A frozen dataclass can't be changed after
construction, so threads can share it without locks. Use
dataclasses.replace() to derive a modified copy:

    config = ServerConfig.from_env()
    config = replace(config, port=8080)

The served root in particular is only ever a value passed to the resolver.
The server never calls os.chdir().

=============================================================================
"""

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional


LOG_FORMATS = ("text", "json")


@dataclass(frozen=True)
class ServerConfig:
    """
    Configuration for the file server.

    =========================================================================
    CONFIGURATION GROUPS
    =========================================================================

    NETWORK SETTINGS
    - host, port, backlog, buffer_size, read_timeout

    SERVING
    - root, index_file, max_line_size

    LOGGING
    - log_level, log_format

    =========================================================================
    """

    # ─────────────────────────────────────────────────────────────────────
    # NETWORK SETTINGS
    # ─────────────────────────────────────────────────────────────────────

    host: str = "127.0.0.1"
    """
    The IP address to bind to.
    - "127.0.0.1" - Localhost only (development)
    - "0.0.0.0" - All network interfaces (containers)
    """

    port: int = 6969
    """
    The port number to listen on. 0 lets the OS pick a free port; the
    chosen port is available from FileServer.address once listening.
    """

    backlog: int = 128
    """
    Maximum number of queued connections waiting for accept().
    """

    buffer_size: int = 8192
    """
    How many bytes to ask recv() for at a time while reading the request line.
    """

    read_timeout: Optional[float] = None
    """
    Seconds to wait for the request line.
    None = no deadline: a client that connects and never sends a line
    holds its worker thread until it disconnects. Set this when serving
    untrusted networks.
    """

    # ─────────────────────────────────────────────────────────────────────
    # SERVING
    # ─────────────────────────────────────────────────────────────────────

    root: str = "www"
    """
    Directory to serve. Nothing outside it is ever sent.
    """

    index_file: str = "index.html"
    """
    Default document served for directory requests.
    """

    max_line_size: int = 8192
    """
    Longest request line we accept, in bytes. Longer lines get 400.
    """

    # ─────────────────────────────────────────────────────────────────────
    # LOGGING
    # ─────────────────────────────────────────────────────────────────────

    log_level: str = "INFO"
    """
    Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL).
    DEBUG traces every parsed request, resolved path and response.
    """

    log_format: str = "text"
    """
    Access log format: 'text' (one Apache-style line) or 'json'.
    """

    @classmethod
    def from_env(cls) -> "ServerConfig":
        """
        Create configuration from environment variables.

        =====================================================================
        ENVIRONMENT VARIABLES
        =====================================================================

        FILESERVER_HOST          Bind address      (default: 127.0.0.1)
        FILESERVER_PORT          Port              (default: 6969)
        FILESERVER_ROOT          Served directory  (default: www)
        FILESERVER_INDEX         Default document  (default: index.html)
        FILESERVER_READ_TIMEOUT  Seconds, or unset for no deadline
        FILESERVER_LOG_LEVEL     Logging level     (default: INFO)
        FILESERVER_LOG_FORMAT    text | json       (default: text)

        =====================================================================
        """
        read_timeout = os.getenv("FILESERVER_READ_TIMEOUT")
        return cls(
            host=os.getenv("FILESERVER_HOST", cls.host),
            port=int(os.getenv("FILESERVER_PORT", str(cls.port))),
            root=os.getenv("FILESERVER_ROOT", cls.root),
            index_file=os.getenv("FILESERVER_INDEX", cls.index_file),
            read_timeout=float(read_timeout) if read_timeout else None,
            log_level=os.getenv("FILESERVER_LOG_LEVEL", cls.log_level),
            log_format=os.getenv("FILESERVER_LOG_FORMAT", cls.log_format),
        )

    def validate(self) -> None:
        """
        Validate configuration values.

        Called by FileServer at construction so a typo in the root path
        fails at startup rather than as a 404 on every request.

        Raises:
            ValueError: Describing the first invalid value found.
        """
        if not 0 <= self.port < 65536:
            raise ValueError(f"Invalid port: {self.port}. Must be 0-65535.")

        if not Path(self.root).is_dir():
            raise ValueError(f"Served root is not a directory: {self.root}")

        if not self.index_file or "/" in self.index_file or self.index_file in (".", ".."):
            raise ValueError(f"index_file must be a plain file name, got {self.index_file!r}")

        if self.backlog < 1:
            raise ValueError("backlog must be >= 1")

        if self.buffer_size < 1:
            raise ValueError("buffer_size must be >= 1")

        if self.max_line_size < 16:
            raise ValueError("max_line_size must be >= 16")

        if self.read_timeout is not None and self.read_timeout <= 0:
            raise ValueError("read_timeout must be > 0")

        if not isinstance(logging.getLevelName(self.log_level.upper()), int):
            raise ValueError(f"Unknown log level: {self.log_level}")

        if self.log_format not in LOG_FORMATS:
            raise ValueError(f"log_format must be one of {LOG_FORMATS}")
