"""
=============================================================================
CONTENT LOADER
=============================================================================

Given a path the resolver has already confined to the served root, decide
what the response is and load the bytes for it.

=============================================================================
DECISION TABLE
=============================================================================

Evaluated top to bottom; the first matching row wins.

    ┌──────────────────────────────────────────┬───────────────────────────┐
    │ Condition                                │ Outcome                   │
    ├──────────────────────────────────────────┼───────────────────────────┤
    │ stat() fails                             │ 404 Not Found             │
    │ directory, <dir>/<index> is a file       │ 301, empty body           │
    │ directory, no index                      │ 404 Not Found             │
    │ regular file, parent dir not readable    │ 500 Internal Server Error │
    │ regular file, read to completion         │ 200, body = file bytes    │
    │ stat() fine but open()/read() fails      │ 500 Internal Server Error │
    │ anything else (FIFO, socket, device)     │ 500 Internal Server Error │
    └──────────────────────────────────────────┴───────────────────────────┘

Special files are never opened: opening a FIFO blocks until a writer
shows up, which would pin the connection thread indefinitely.

=============================================================================
NO PARTIAL SUCCESS
=============================================================================

The file is read with a single read() to EOF inside one try block. If the
read fails halfway, the bytes we already have are thrown away and the
outcome is a 500. A client either gets the whole file or an error, never
a 200 with a truncated body.

=============================================================================
"""

import logging
import os
import stat
from dataclasses import dataclass
from pathlib import Path

from .errors import ErrorKind, HTTPError
from .mime_types import get_content_type
from .status_codes import HTTPStatus


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LoadedContent:
    """
    A successful load: either a file's bytes (200) or a redirect (301).

    Attributes:
        status: OK or MOVED_PERMANENTLY.
        body: File contents; empty for redirects.
        content_type: Content-Type header value guessed from the path.
        path: The path that was loaded.
    """
    status: HTTPStatus
    body: bytes
    content_type: str
    path: Path

    @property
    def content_length(self) -> int:
        return len(self.body)

    @property
    def is_redirect(self) -> bool:
        return self.status == HTTPStatus.MOVED_PERMANENTLY


class ContentLoader:
    """
    Applies the decision table above to a resolved path.

    Stateless apart from the index file name; safe to share between
    connection threads.
    """

    def __init__(self, index_file: str = "index.html"):
        self.index_file = index_file

    def load(self, path: Path) -> LoadedContent:
        """
        Load the content at path.

        Args:
            path: A canonical path inside the served root.

        Returns:
            LoadedContent for a 200 or 301 outcome.

        Raises:
            HTTPError(NOT_FOUND): Missing path, or directory without index.
            HTTPError(INTERNAL_SERVER_ERROR): Readable metadata but the
                file cannot be opened or read, its directory denies read
                access, or it is not a regular file.
        """
        content_type = get_content_type(path)

        # ─────────────────────────────────────────────────────────────────
        # METADATA
        # ─────────────────────────────────────────────────────────────────
        try:
            st = path.stat()
        except OSError as e:
            raise HTTPError(ErrorKind.NOT_FOUND, f"Cannot stat {path}: {e}")

        # ─────────────────────────────────────────────────────────────────
        # DIRECTORIES
        # ─────────────────────────────────────────────────────────────────
        if stat.S_ISDIR(st.st_mode):
            if (path / self.index_file).is_file():
                return LoadedContent(HTTPStatus.MOVED_PERMANENTLY, b"", content_type, path)
            raise HTTPError(ErrorKind.NOT_FOUND, f"No {self.index_file} in {path}")

        if not stat.S_ISREG(st.st_mode):
            raise HTTPError(ErrorKind.INTERNAL_SERVER_ERROR, f"Not a regular file: {path}")

        # The parent must be readable, not just traversable
        if not os.access(path.parent, os.R_OK):
            raise HTTPError(
                ErrorKind.INTERNAL_SERVER_ERROR,
                f"Parent directory of {path} denies read access",
            )

        # ─────────────────────────────────────────────────────────────────
        # REGULAR FILES
        # ─────────────────────────────────────────────────────────────────
        try:
            with open(path, "rb") as f:
                body = f.read()
        except OSError as e:
            logger.error(f"Error reading file {path}: {e}")
            raise HTTPError(ErrorKind.INTERNAL_SERVER_ERROR, f"Cannot read {path}: {e}")

        logger.debug(f"Loaded {len(body)} bytes from {path} as {content_type}")
        return LoadedContent(HTTPStatus.OK, body, content_type, path)
