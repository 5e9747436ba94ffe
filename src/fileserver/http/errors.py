"""
=============================================================================
ERROR TAXONOMY
=============================================================================

Every failure in the request pipeline is classified into one ErrorKind
before it leaves the component that detected it.

=============================================================================
WHERE ERRORS COME FROM
=============================================================================

    ┌──────────────────┬──────────────────────────────┬──────────────────┐
    │ Component        │ Failure                      │ ErrorKind        │
    ├──────────────────┼──────────────────────────────┼──────────────────┤
    │ Connection       │ Request line too long        │ BAD_REQUEST      │
    │ Parser           │ Fewer than three tokens      │ BAD_REQUEST      │
    │ Resolver         │ Path does not canonicalize   │ NOT_FOUND        │
    │ Resolver         │ Path escapes the served root │ NOT_FOUND        │
    │ Loader           │ stat() fails                 │ NOT_FOUND        │
    │ Loader           │ Directory without index      │ NOT_FOUND        │
    │ Loader           │ Not a regular file           │ INTERNAL_ERROR   │
    │ Loader           │ open()/read() fails          │ INTERNAL_ERROR   │
    └──────────────────┴──────────────────────────────┴──────────────────┘

=============================================================================
PROPAGATION
=============================================================================

Components raise HTTPError. Exactly one place catches it: the connection
handler in server.py, which turns the kind into a response through the
same ResponseBuilder used for successful responses:

    parse / resolve / load
            │
            │  raise HTTPError(ErrorKind.NOT_FOUND)
            ▼
    FileServer._process_connection
            │
            │  error_response(err.kind)
            ▼
    "HTTP/1.1 404 Not Found\r\n..."

Nothing else in the pipeline catches HTTPError, so a failure can never be
silently swallowed on its way to the client.

=============================================================================
"""

from enum import Enum

from .status_codes import HTTPStatus


class ErrorKind(Enum):
    """
    Outcome classes for a failed request.

    Each kind maps to exactly one status code. The last three are reserved
    for method and version enforcement; nothing raises them yet.
    """
    BAD_REQUEST = HTTPStatus.BAD_REQUEST
    NOT_FOUND = HTTPStatus.NOT_FOUND
    INTERNAL_SERVER_ERROR = HTTPStatus.INTERNAL_SERVER_ERROR

    IM_A_TEAPOT = HTTPStatus.IM_A_TEAPOT
    NOT_IMPLEMENTED = HTTPStatus.NOT_IMPLEMENTED
    HTTP_VERSION_NOT_SUPPORTED = HTTPStatus.HTTP_VERSION_NOT_SUPPORTED

    @property
    def status(self) -> HTTPStatus:
        """The status code sent for this kind."""
        return self.value

    @property
    def status_text(self) -> str:
        """The reason phrase sent for this kind (also used as the body)."""
        return self.value.phrase


class HTTPError(Exception):
    """
    Raised when a pipeline component cannot produce its result.

    Carries the ErrorKind the connection handler should answer with. The
    message is for logs only; it is never sent to the client, so it may
    mention real filesystem paths.
    """

    def __init__(self, kind: ErrorKind, message: str = ""):
        super().__init__(message or kind.status_text)
        self.kind = kind

    @property
    def status(self) -> HTTPStatus:
        return self.kind.status
