"""
=============================================================================
STATIC FILE HANDLER
=============================================================================

Serves files from the served root: resolve the requested resource, load
it, and build the response.

=============================================================================
HOW A DIRECTORY REQUEST PLAYS OUT
=============================================================================

    GET /docs HTTP/1.1          (docs/index.html exists)
        │
        └──► 301 Moved Permanently
             Location: /docs/
             (empty body)

    GET /docs/ HTTP/1.1
        │
        └──► resource ends in "/" → resolver appends index.html
             200 Success, body = docs/index.html

    GET /empty/ HTTP/1.1        (no empty/index.html)
        │
        └──► 404 Not Found

The 301 makes relative links inside index.html work: a browser resolves
"style.css" against "/docs/" to "/docs/style.css", but against "/docs"
to "/style.css".

=============================================================================
METHODS
=============================================================================

The handler does not look at request.method. HEAD, POST, or a method we
have never heard of all get the same response as GET.

=============================================================================
SECURITY
=============================================================================

All path safety lives in PathResolver. This handler never builds a
filesystem path from the request itself; it only hands the raw resource
to the resolver and loads what comes back.

=============================================================================
"""

import logging
from pathlib import Path
from typing import Union

from ..http.loader import ContentLoader, LoadedContent
from ..http.request import HTTPRequest
from ..http.resolver import PathResolver
from ..http.response import HTTPResponse, ResponseBuilder


logger = logging.getLogger(__name__)


class StaticFileHandler:
    """
    Handler for serving files out of a single root directory.

    The three steps are public so the connection handler can record
    progress between them; handle() runs all three for everyone else.

    Usage:
        static = StaticFileHandler("/srv/www")
        response = static.handle(parse_request_line("GET / HTTP/1.1"))
    """

    def __init__(self, root_dir: Union[str, Path], index_file: str = "index.html"):
        """
        Args:
            root_dir: Root directory to serve files from. Every response
                      body comes from inside this directory.
            index_file: Default document for directory requests.

        Raises:
            ValueError: If root_dir is not an existing directory.
        """
        self.resolver = PathResolver(root_dir, index_file)
        self.loader = ContentLoader(index_file)

    @property
    def root_dir(self) -> Path:
        return self.resolver.root

    def handle(self, request: HTTPRequest) -> HTTPResponse:
        """
        Produce the response for a request.

        Raises:
            HTTPError: If the resource cannot be resolved or loaded.
        """
        path = self.resolve(request)
        content = self.load(path)
        return self.respond(request, content)

    def resolve(self, request: HTTPRequest) -> Path:
        path = self.resolver.resolve(request.resource)
        logger.debug(f"Resolved {request.resource!r} to {path}")
        return path

    def load(self, path: Path) -> LoadedContent:
        return self.loader.load(path)

    def respond(self, request: HTTPRequest, content: LoadedContent) -> HTTPResponse:
        """
        Build the response for successfully loaded content.

        Args:
            request: The request being answered (for the redirect target).
            content: What the loader produced.

        Returns:
            200 with the file body, or 301 pointing at the directory form
            of the requested resource.
        """
        builder = ResponseBuilder().content_type(content.content_type)

        if content.is_redirect:
            return builder.redirect(self._directory_location(request.resource)).build()

        return builder.status(content.status).body(content.body).build()

    def _directory_location(self, resource: str) -> str:
        """Append "/" to the path part of a resource, keeping any query and
        dropping any fragment."""
        path, sep, query = resource.split("#", 1)[0].partition("?")
        return f"{path}/{sep}{query}"

