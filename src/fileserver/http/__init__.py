"""
=============================================================================
HTTP PROTOCOL COMPONENTS
=============================================================================

Everything between "a line of text arrived" and "these bytes go out":

    ┌─────────────────────────────────────────────────────────────────────┐
    │                      REQUEST → RESPONSE PIPELINE                     │
    ├─────────────────────────────────────────────────────────────────────┤
    │                                                                      │
    │   "GET /docs/ HTTP/1.1"                                              │
    │          │                                                           │
    │          ▼                                                           │
    │   request.py     parse_request_line()  → HTTPRequest                 │
    │          │                                                           │
    │          ▼                                                           │
    │   resolver.py    PathResolver.resolve() → Path (inside the root)     │
    │          │                                                           │
    │          ▼                                                           │
    │   loader.py      ContentLoader.load()  → LoadedContent (200 / 301)   │
    │          │                                                           │
    │          ▼                                                           │
    │   response.py    ResponseBuilder       → HTTPResponse → bytes        │
    │                                                                      │
    │   Any step may raise errors.HTTPError(kind) instead; the             │
    │   connection handler turns it into response.error_response(kind).    │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

None of these modules touch sockets. They can be tested with plain strings
and a temporary directory.

=============================================================================
"""

from .errors import ErrorKind, HTTPError
from .request import HTTPRequest, Method, parse_request_line
from .resolver import PathResolver
from .loader import ContentLoader, LoadedContent
from .response import HTTPResponse, ResponseBuilder, error_response
from .status_codes import HTTPStatus
from .mime_types import get_mime_type, get_content_type


__all__ = [
    # Errors
    "ErrorKind",
    "HTTPError",

    # Request parsing
    "HTTPRequest",
    "Method",
    "parse_request_line",

    # Resolution and loading
    "PathResolver",
    "ContentLoader",
    "LoadedContent",

    # Response building
    "HTTPResponse",
    "ResponseBuilder",
    "error_response",

    # Utilities
    "HTTPStatus",
    "get_mime_type",
    "get_content_type",
]
