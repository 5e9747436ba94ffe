"""
pytest configuration and fixtures.
"""

import socket
import threading
from pathlib import Path
from typing import Generator, Optional
import pytest

# Add src to path for imports
import sys
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from fileserver import FileServer, ServerConfig


@pytest.fixture
def www(tmp_path: Path) -> Path:
    """
    A small served root:

        www/
        ├── index.html        "hello"
        ├── style.css
        ├── data.bin          non-UTF-8 bytes
        ├── README            no extension
        ├── docs/
        │   └── index.html
        └── empty/            no index
    """
    root = tmp_path / "www"
    root.mkdir()
    (root / "index.html").write_text("hello")
    (root / "style.css").write_text("body { color: red; }")
    (root / "data.bin").write_bytes(b"\x89PNG\x00\xff\xfe")
    (root / "README").write_text("read me")
    (root / "docs").mkdir()
    (root / "docs" / "index.html").write_text("<h1>docs</h1>")
    (root / "empty").mkdir()
    return root


@pytest.fixture
def config(www: Path) -> ServerConfig:
    """Test server configuration serving the www fixture."""
    return ServerConfig(
        host="127.0.0.1",
        port=0,  # Let OS pick a free port
        root=str(www),
        read_timeout=5.0,
        log_level="WARNING",
    )


@pytest.fixture
def free_port() -> int:
    """Get a free port for testing."""
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as s:
        s.bind(('127.0.0.1', 0))
        return s.getsockname()[1]


class TestServer:
    """Test server helper that runs in a background thread."""

    __test__ = False  # Not a test class, despite the name

    def __init__(self, server: FileServer):
        self.server = server
        self._thread: Optional[threading.Thread] = None

    @property
    def port(self) -> int:
        return self.server.address[1]

    def start(self):
        """Start server in background thread."""
        self._thread = threading.Thread(target=self.server.run, daemon=True)
        self._thread.start()

        if not self.server.wait_until_ready(timeout=5.0):
            raise RuntimeError("Server failed to start")

    def stop(self):
        """Stop the server."""
        self.server.shutdown()

        if self._thread and self._thread.is_alive():
            self._thread.join(timeout=10.0)

    def request(self, raw: bytes, timeout: float = 5.0) -> bytes:
        """Send raw bytes and read until the server closes the connection."""
        with socket.create_connection(("127.0.0.1", self.port), timeout=timeout) as s:
            s.sendall(raw)
            return recv_all(s)

    def get(self, resource: str) -> bytes:
        return self.request(f"GET {resource} HTTP/1.1\r\nHost: localhost\r\n\r\n".encode())

    def fetch(self, resource: str):
        """GET resource and return (status line, headers, body)."""
        return split_response(self.get(resource))

    def send(self, raw: bytes):
        """Send raw bytes and return (status line, headers, body)."""
        return split_response(self.request(raw))


def recv_all(sock: socket.socket) -> bytes:
    """Read from sock until EOF."""
    chunks = []
    while True:
        data = sock.recv(4096)
        if not data:
            break
        chunks.append(data)
    return b"".join(chunks)


def split_response(raw: bytes):
    """Split a raw response into (status line, headers dict, body)."""
    head, _, body = raw.partition(b"\r\n\r\n")
    lines = head.decode("latin-1").split("\r\n")
    headers = {}
    for line in lines[1:]:
        name, _, value = line.partition(":")
        headers[name.strip()] = value.strip()
    return lines[0], headers, body


@pytest.fixture
def test_server(config: ServerConfig) -> Generator[TestServer, None, None]:
    """Create a running file server over the www fixture."""
    test_srv = TestServer(FileServer(config))
    test_srv.start()

    yield test_srv

    test_srv.stop()
