"""
=============================================================================
PATH RESOLVER
=============================================================================

Maps the resource string from a request line to a file under the served
root. This module is the server's only security boundary: if it returns a
path, that path is inside the root.

=============================================================================
PATH TRAVERSAL
=============================================================================

The resource comes straight from the client. Used naively it reads
anything the server process can read:

    GET /../../../etc/passwd HTTP/1.1
    GET //etc/passwd HTTP/1.1              ◄── root anchor
    GET /%2e%2e/%2e%2e/etc/passwd HTTP/1.1 ◄── percent-encoded ..
    GET /link-to-etc/passwd HTTP/1.1       ◄── symlink inside the root

The first three are syntactic and are removed before the path touches
the disk. The fourth looks innocent as a string and can only be caught
after the filesystem has told us where the path really goes.

=============================================================================
RESOLUTION STEPS
=============================================================================

    resource: "/docs/../img/"
        │
        │ 1. strip ?query / #fragment, percent-decode
        ▼
    "/docs/../img/"
        │
        │ 2. trailing "/" → append default document
        ▼
    "/docs/../img/index.html"
        │
        │ 3. drop "..", "/" and "." components
        ▼
    ("docs", "img", "index.html")
        │
        │ 4. join to the canonical root, canonicalize (strict)
        ▼
    /srv/www/docs/img/index.html       ◄── symlinks resolved here
        │
        │ 5. containment check against the canonical root
        ▼
    Path, or HTTPError(NOT_FOUND)

Dropping ".." in step 3 means "/docs/../img/" is served from docs/img/,
not from img/. That is deliberate: a resource can only ever walk DOWN
from the root.

=============================================================================
WHY EVERY FAILURE IS A 404
=============================================================================

Missing file, a file used as a directory, permission denied, symlink
loop, escape attempt: the client sees the same 404 for all of them.
Distinguishing them would let a client map out the filesystem by probing
(e.g. "403 means it exists").

=============================================================================
"""

import logging
from pathlib import Path, PurePosixPath
from typing import Union
from urllib.parse import unquote

from .errors import ErrorKind, HTTPError


logger = logging.getLogger(__name__)


# Relative components that must never reach the filesystem
_PARENT_PARTS = {"..", "."}


class PathResolver:
    """
    Resolves request resources to canonical paths inside a served root.

    The root is canonicalized once, at construction, and never changes.
    Resolvers hold no other state, so one instance is shared by every
    connection thread without locking.

    Usage:
        resolver = PathResolver("/srv/www")
        path = resolver.resolve("/css/site.css")   # Path("/srv/www/css/site.css")
        resolver.resolve("/../etc/passwd")         # raises HTTPError(NOT_FOUND)
    """

    def __init__(self, root: Union[str, Path], index_file: str = "index.html"):
        """
        Args:
            root: The served root directory. Must exist.
            index_file: Default document appended to directory requests.

        Raises:
            ValueError: If root is not an existing directory.
        """
        self.root = Path(root).resolve()
        self.index_file = index_file

        if not self.root.is_dir():
            raise ValueError(f"Served root is not a directory: {root}")

    def resolve(self, resource: str) -> Path:
        """
        Resolve a resource to a canonical path inside the root.

        Args:
            resource: The raw resource string from the request line.

        Returns:
            Canonical path of an existing filesystem entry under the root
            (the root itself included).

        Raises:
            HTTPError(NOT_FOUND): If the path does not exist, cannot be
                canonicalized, or canonicalizes outside the root.
        """
        parts = self.sanitize(resource)
        candidate = self.root.joinpath(*parts)

        # ─────────────────────────────────────────────────────────────────
        # CANONICALIZE
        # ─────────────────────────────────────────────────────────────────
        # strict=True: every component must exist. OSError covers missing
        # entries, ENOTDIR and EACCES; RuntimeError is a symlink loop on
        # older interpreters; ValueError is an embedded NUL byte.
        try:
            canonical = candidate.resolve(strict=True)
        except (OSError, RuntimeError, ValueError) as e:
            raise HTTPError(ErrorKind.NOT_FOUND, f"Cannot resolve {candidate}: {e}")

        # ─────────────────────────────────────────────────────────────────
        # CONTAINMENT
        # ─────────────────────────────────────────────────────────────────
        # Only a symlink can get us here; the syntactic filter already
        # removed every "..".
        if not self.contains(canonical):
            logger.warning(f"Path traversal attempt: {resource!r} resolved outside root")
            raise HTTPError(ErrorKind.NOT_FOUND, f"{canonical} is outside {self.root}")

        return canonical

    def sanitize(self, resource: str) -> tuple[str, ...]:
        """
        Reduce a resource to path components that cannot leave the root.

        Purely syntactic; never touches the filesystem.

            >>> PathResolver("/tmp").sanitize("/a/../b/")
            ('a', 'b', 'index.html')
            >>> PathResolver("/tmp").sanitize("")
            ('index.html',)
        """
        path = resource.split("?", 1)[0].split("#", 1)[0]
        path = unquote(path)

        # An empty resource is the root directory
        if not path or path.endswith("/"):
            path += "/" + self.index_file

        # PurePosixPath keeps a leading "//" as its own anchor part
        return tuple(
            part for part in PurePosixPath(path).parts
            if part not in _PARENT_PARTS and not part.startswith("/")
        )

    def contains(self, path: Path) -> bool:
        """Check whether a canonical path is the root or lies beneath it."""
        try:
            path.relative_to(self.root)
        except ValueError:
            return False
        return True
