"""
=============================================================================
FILESERVER - Minimal Static HTTP File Server
=============================================================================

Serves the files under one directory over HTTP, built on raw Python
sockets. Each connection carries exactly one request and gets exactly one
response, then the server closes it.

=============================================================================
PROJECT OVERVIEW
=============================================================================

    ┌─────────────────────────────────────────────────────────────────────┐
    │                    FILESERVER ARCHITECTURE                          │
    ├─────────────────────────────────────────────────────────────────────┤
    │                                                                      │
    │   1. TRANSPORT (core/)                                              │
    │      - TCP listening socket and accept loop                         │
    │      - One worker thread per connection                             │
    │      - Line-oriented reads, single response write                   │
    │                                                                      │
    │   2. HTTP (http/)                                                   │
    │      - Request line parsing (method, resource, version)             │
    │      - Path resolution confined to the served root                  │
    │      - File loading, media type detection                           │
    │      - Response serialization with Content-Length                   │
    │                                                                      │
    │   3. SERVING (handlers/, server.py)                                 │
    │      - Static file handler: resolve → load → respond               │
    │      - Error taxonomy mapped to 400/404/500 responses              │
    │      - Access log per connection                                    │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

=============================================================================
PACKAGE STRUCTURE
=============================================================================

    fileserver/
    ├── __init__.py          # This file - package exports
    ├── __main__.py          # CLI entry point (python -m fileserver)
    ├── server.py            # FileServer: ties everything together
    ├── config.py            # ServerConfig dataclass
    ├── access_log.py        # Per-connection access log entries
    ├── core/                # Sockets and threads, no HTTP
    │   ├── socket_server.py # Bind / listen / accept loop
    │   ├── connection.py    # Client socket wrapper + state
    │   └── workers.py       # Thread-per-connection workers
    ├── http/                # HTTP protocol components
    │   ├── request.py       # Request line parsing
    │   ├── resolver.py      # Resource → path inside the root
    │   ├── loader.py        # Path → bytes + media type
    │   ├── response.py      # Response building and serialization
    │   ├── errors.py        # ErrorKind / HTTPError
    │   ├── status_codes.py  # HTTP status enum
    │   └── mime_types.py    # Media type detection
    └── handlers/
        └── static.py        # Static file serving

=============================================================================
QUICK START
=============================================================================

    from fileserver import FileServer, ServerConfig

    server = FileServer(ServerConfig(root="./public", port=8080))
    server.run()            # Blocks until Ctrl+C

    # Or from the shell:
    #   python -m fileserver --root ./public --port 8080

=============================================================================
"""

__version__ = "1.0.0"

from .server import FileServer
from .config import ServerConfig

__all__ = ["FileServer", "ServerConfig", "__version__"]
