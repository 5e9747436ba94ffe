"""
=============================================================================
HTTP STATUS CODES
=============================================================================

The status codes this server can put on the wire, with their reason phrases.

=============================================================================
WHICH CODES DO WE ACTUALLY SEND?
=============================================================================

A static file server that handles one request line per connection has a
very small vocabulary:

    ┌────────┬────────────────────────────────────────────────────────────┐
    │  Code  │ When                                                       │
    ├────────┼────────────────────────────────────────────────────────────┤
    │  200   │ File found and read to completion                          │
    │  301   │ Directory requested without trailing slash, index exists   │
    │  400   │ Request line has fewer than three tokens (or is too long)  │
    │  404   │ Missing file, missing index, escape attempt                │
    │  500   │ File exists but could not be opened or read                │
    ├────────┼────────────────────────────────────────────────────────────┤
    │  418   │ Reserved                                                   │
    │  501   │ Reserved for method enforcement                            │
    │  505   │ Reserved for version enforcement                           │
    └────────┴────────────────────────────────────────────────────────────┘

The reserved codes are part of the error taxonomy (see errors.py) so that
method and version enforcement can be switched on later without touching
the response framing.

=============================================================================
"""

from enum import IntEnum


class HTTPStatus(IntEnum):
    """
    HTTP status codes and reason phrases.

    IntEnum, so members compare and format as plain integers:

        >>> HTTPStatus.NOT_FOUND == 404
        True
        >>> f"{HTTPStatus.NOT_FOUND}"
        '404'
        >>> HTTPStatus.NOT_FOUND.phrase
        'Not Found'
    """

    # 2xx Success
    OK = 200

    # 3xx Redirection
    MOVED_PERMANENTLY = 301     # Ask client to re-request the directory form

    # 4xx Client Errors
    BAD_REQUEST = 400           # Malformed request line
    NOT_FOUND = 404             # Anything that did not resolve to a file
    IM_A_TEAPOT = 418           # RFC 2324

    # 5xx Server Errors
    INTERNAL_SERVER_ERROR = 500
    NOT_IMPLEMENTED = 501
    HTTP_VERSION_NOT_SUPPORTED = 505

    def __str__(self) -> str:
        return str(int(self))

    @property
    def phrase(self) -> str:
        """
        Get the reason phrase for this status code.

            HTTP/1.1 404 Not Found
                     ─── ─────────
                      │      │
                      │      └── Reason phrase
                      └───────── Status code
        """
        return _STATUS_PHRASES.get(self, "Unknown")

    @property
    def is_success(self) -> bool:
        """Check if this is a 2xx status code."""
        return 200 <= self < 300

    @property
    def is_redirect(self) -> bool:
        """Check if this is a 3xx status code."""
        return 300 <= self < 400

    @property
    def is_error(self) -> bool:
        """Check if this is a 4xx or 5xx status code."""
        return self >= 400


# =============================================================================
# REASON PHRASES
# =============================================================================
#
# Reason phrases are informational (RFC 7230 section 3.1.2); clients key off
# the numeric code. 200 goes out as "Success".
#
# =============================================================================

_STATUS_PHRASES = {
    HTTPStatus.OK: "Success",
    HTTPStatus.MOVED_PERMANENTLY: "Moved Permanently",
    HTTPStatus.BAD_REQUEST: "Bad Request",
    HTTPStatus.NOT_FOUND: "Not Found",
    HTTPStatus.IM_A_TEAPOT: "I'm a teapot",
    HTTPStatus.INTERNAL_SERVER_ERROR: "Internal Server Error",
    HTTPStatus.NOT_IMPLEMENTED: "Not Implemented",
    HTTPStatus.HTTP_VERSION_NOT_SUPPORTED: "HTTP Version Not Supported",
}
