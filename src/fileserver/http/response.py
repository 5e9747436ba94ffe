"""
=============================================================================
HTTP RESPONSE BUILDER
=============================================================================

Builds HTTP/1.1 responses and serializes them to the exact bytes that go
on the wire.

=============================================================================
HTTP RESPONSE ANATOMY
=============================================================================

    ┌─────────────────────────────────────────────────────────────────────┐
    │                     HTTP RESPONSE STRUCTURE                         │
    ├─────────────────────────────────────────────────────────────────────┤
    │                                                                      │
    │    HTTP/1.1 200 Success\r\n               ◄── status line           │
    │    Content-Type: text/html; charset=utf-8\r\n  ◄── header lines     │
    │    Content-Length: 5\r\n                  ◄── always synthesized    │
    │    \r\n                                   ◄── end of headers        │
    │    hello                                  ◄── body (raw bytes)      │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

Nothing follows the body. The client knows where the body ends from
Content-Length, and because we close the connection after every response
it also sees EOF right after the last body byte.

=============================================================================
CONTENT-LENGTH IS NEVER TRUSTED FROM THE CALLER
=============================================================================

HTTPResponse has a content_length field, but to_bytes() ignores it and
counts the body itself. Any Content-Length header line a caller added is
dropped too. The header on the wire therefore always matches the bytes on
the wire, which is the one framing property a client cannot recover from
if we get it wrong.

=============================================================================
ONE BUILDER FOR SUCCESS AND FAILURE
=============================================================================

Error responses don't have a file to read. error_response() synthesizes a
plain-text body from the status text and sends it through the same
ResponseBuilder, so a 404 is framed exactly like a 200:

    HTTP/1.1 404 Not Found\r\n
    Content-Type: text/plain; charset=utf-8\r\n
    Content-Length: 9\r\n
    \r\n
    Not Found

=============================================================================
"""

from dataclasses import dataclass, field
from typing import Optional, Tuple, Union

from .errors import ErrorKind
from .status_codes import HTTPStatus


HTTP_VERSION = "HTTP/1.1"
PLAIN_TEXT = "text/plain; charset=utf-8"


@dataclass(frozen=True)
class HTTPResponse:
    """
    An HTTP response ready to be serialized.

    Immutable: built once per request by ResponseBuilder, serialized once
    by to_bytes(), then discarded.

    Attributes:
        status: Numeric status code.
        status_text: Reason phrase for the status line.
        headers: Header lines in send order, e.g. ("Content-Type: text/html",).
        body: Raw body bytes.
        content_length: Length recorded at build time. Informational only;
                        serialization always uses len(body).
        version: Protocol version for the status line.
    """

    status: HTTPStatus = HTTPStatus.OK
    status_text: str = ""
    headers: Tuple[str, ...] = ()
    body: bytes = b""
    content_length: int = 0
    version: str = HTTP_VERSION

    @property
    def status_line(self) -> str:
        """
        Format: HTTP-VERSION SP STATUS-CODE SP REASON-PHRASE
        Example: "HTTP/1.1 404 Not Found"
        """
        reason = self.status_text or HTTPStatus(self.status).phrase
        return f"{self.version} {int(self.status)} {reason}"

    def get_header(self, name: str) -> Optional[str]:
        """Value of the first header line called name (case-insensitive)."""
        for line in self.headers:
            key, _, value = line.partition(":")
            if key.strip().lower() == name.lower():
                return value.strip()
        return None

    def to_bytes(self) -> bytes:
        """
        Serialize the response to bytes for socket.sendall().

        Pure: reads only this response, writes nothing.

        Returns:
            Status line, header lines, synthesized Content-Length, blank
            line and body as one contiguous bytes object.
        """
        lines = [self.status_line]

        # Content-Length is ours to compute (see module docstring)
        lines.extend(
            line for line in self.headers
            if line.partition(":")[0].strip().lower() != "content-length"
        )
        lines.append(f"Content-Length: {len(self.body)}")

        # Status line and every header end in CRLF, then one empty line
        head = "\r\n".join(lines) + "\r\n\r\n"
        return head.encode("latin-1", errors="replace") + self.body

    def describe(self) -> str:
        """
        Human-readable rendering for debug logs.

        Text bodies are shown as-is; anything that isn't UTF-8 is shown as
        "Binary data" so logs never fill up with raw bytes.
        """
        try:
            body = self.body.decode("utf-8")
        except UnicodeDecodeError:
            body = "Binary data"
        headers = "\n".join(self.headers)
        return f"{self.status_line}\n{headers}\nContent-Length: {len(self.body)}\n\n{body}"


class ResponseBuilder:
    """
    Fluent builder for HTTPResponse.

    Each method returns self, so a response reads top to bottom:

        response = (ResponseBuilder()
            .status(HTTPStatus.OK)
            .content_type("text/html; charset=utf-8")
            .body(b"<h1>hi</h1>")
            .build())

    Header lines keep the order they were added in. Setting the same
    header twice replaces the earlier value in place.
    """

    def __init__(self, version: str = HTTP_VERSION):
        self._version = version
        self._status = HTTPStatus.OK
        self._headers: list[Tuple[str, str]] = []
        self._body: bytes = b""

    # =========================================================================
    # STATUS & HEADERS
    # =========================================================================

    def status(self, status: HTTPStatus) -> "ResponseBuilder":
        self._status = status
        return self

    def header(self, name: str, value: str) -> "ResponseBuilder":
        """
        Set a response header.

        Args:
            name: Header name as it should appear on the wire.
            value: Header value.
        """
        for i, (existing, _) in enumerate(self._headers):
            if existing.lower() == name.lower():
                self._headers[i] = (name, value)
                return self
        self._headers.append((name, value))
        return self

    def content_type(self, content_type: str) -> "ResponseBuilder":
        """Set the Content-Type header."""
        return self.header("Content-Type", content_type)

    # =========================================================================
    # BODY
    # =========================================================================

    def body(self, body: Union[str, bytes]) -> "ResponseBuilder":
        """Set the response body (strings are encoded as UTF-8)."""
        if isinstance(body, str):
            self._body = body.encode("utf-8")
        else:
            self._body = bytes(body)
        return self

    def text(self, text: str, content_type: str = PLAIN_TEXT) -> "ResponseBuilder":
        """Set a plain text body along with its Content-Type."""
        self.content_type(content_type)
        return self.body(text)

    def redirect(self, location: str) -> "ResponseBuilder":
        """
        Turn this into a 301 Moved Permanently with an empty body.

        We only ever redirect a directory to its trailing-slash form, and
        that mapping never changes, so the redirect is permanent.
        """
        self._status = HTTPStatus.MOVED_PERMANENTLY
        self._body = b""
        return self.header("Location", location)

    # =========================================================================
    # BUILD
    # =========================================================================

    def build(self) -> HTTPResponse:
        """Construct the HTTPResponse."""
        return HTTPResponse(
            status=self._status,
            status_text=self._status.phrase,
            headers=tuple(f"{name}: {value}" for name, value in self._headers),
            body=self._body,
            content_length=len(self._body),
            version=self._version,
        )


# =============================================================================
# CONVENIENCE FUNCTIONS
# =============================================================================

def error_response(kind: ErrorKind, version: str = HTTP_VERSION) -> HTTPResponse:
    """
    Create the response for a failed request.

    The body is the status text, so clients always get something readable:

        >>> error_response(ErrorKind.NOT_FOUND).body
        b'Not Found'

    Args:
        kind: What went wrong.
        version: Protocol version for the status line.

    Returns:
        HTTPResponse with the kind's status and a plain-text body.
    """
    return (ResponseBuilder(version)
        .status(kind.status)
        .text(kind.status_text)
        .build())

