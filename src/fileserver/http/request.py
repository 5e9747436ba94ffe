"""
=============================================================================
REQUEST LINE PARSER
=============================================================================

Turns the first line a client sends into an HTTPRequest.

=============================================================================
WHAT WE READ
=============================================================================

Only the request line. Headers, if the client sends any, are never read:

    GET /docs/index.html HTTP/1.1\r\n     ◄── parsed
    Host: localhost:6969\r\n              ◄── ignored
    User-Agent: curl/8.0\r\n              ◄── ignored
    \r\n

Reading a single line bounds what a malformed or hostile multi-line request
can do to us: whatever comes after the first line break is never looked at.

=============================================================================
TOKENIZING
=============================================================================

The line is split on single spaces and the first three pieces are kept:

    "GET /a.txt HTTP/1.1\r\n"
      │    │       │
      │    │       └── version   "HTTP/1.1"   (after strip)
      │    └────────── resource  "/a.txt"
      └─────────────── method    Method.GET

    "GET /a.txt HTTP/1.1 extra"   → extra tokens are dropped
    "GET\r\n"                     → BAD_REQUEST (only one token)

Each token is stripped of surrounding whitespace, which also removes the
trailing CR/LF from the version.

=============================================================================
UNKNOWN METHODS
=============================================================================

Method tokens are matched case-sensitively. Anything we don't recognize
becomes Method.UNKNOWN instead of an error. The server does not enforce
method semantics: GET, POST and BREW all get the file.

=============================================================================
"""

from dataclasses import dataclass
from enum import Enum

from .errors import ErrorKind, HTTPError


class Method(Enum):
    """HTTP request methods, plus a catch-all for tokens we don't know."""
    GET = "GET"
    POST = "POST"
    PUT = "PUT"
    HEAD = "HEAD"
    DELETE = "DELETE"
    PATCH = "PATCH"
    OPTIONS = "OPTIONS"
    CONNECT = "CONNECT"
    TRACE = "TRACE"
    UNKNOWN = "UNKNOWN"

    @classmethod
    def from_token(cls, token: str) -> "Method":
        """
        Map a method token to a Method.

        Case-sensitive: "get" is UNKNOWN, not GET.

            >>> Method.from_token("GET")
            <Method.GET: 'GET'>
            >>> Method.from_token("BREW")
            <Method.UNKNOWN: 'UNKNOWN'>
        """
        return _KNOWN_METHODS.get(token, cls.UNKNOWN)


_KNOWN_METHODS = {m.value: m for m in Method if m is not Method.UNKNOWN}


@dataclass(frozen=True)
class HTTPRequest:
    """
    A parsed request line.

    Frozen: created once per connection and never modified. The resource
    is the raw string the client sent; it is NOT safe to use as a path
    until PathResolver has processed it.
    """

    method: Method
    resource: str
    version: str

    @property
    def request_line(self) -> str:
        """Re-serialize as 'METHOD RESOURCE VERSION' (no line break)."""
        return f"{self.method.value} {self.resource} {self.version}"


def parse_request_line(line: str) -> HTTPRequest:
    """
    Parse an HTTP request line.

    Args:
        line: The first line received from the client, with or without
              its line terminator.

    Returns:
        The parsed HTTPRequest.

    Raises:
        HTTPError(BAD_REQUEST): If the line has fewer than three tokens.
    """
    tokens = [token.strip() for token in line.split(" ")[:3]]

    if len(tokens) < 3:
        raise HTTPError(ErrorKind.BAD_REQUEST, f"Malformed request line: {line!r}")

    method, resource, version = tokens
    return HTTPRequest(
        method=Method.from_token(method),
        resource=resource,
        version=version,
    )
