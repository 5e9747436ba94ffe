"""
=============================================================================
MIME TYPE DETECTION
=============================================================================

Maps a file path to the Content-Type header value we send with it.

=============================================================================
WHY CONTENT-TYPE MATTERS
=============================================================================

The browser decides what to do with a response body from Content-Type,
not from the URL:

    style.css  served as text/plain  → stylesheet is ignored
    app.js     served as text/plain  → script does not execute
    logo.png   served as text/html   → garbage rendered as a page

=============================================================================
WHERE THE MAPPING COMES FROM
=============================================================================

We don't maintain our own extension table. The standard library's
mimetypes module already knows the common extensions and, on most
systems, also reads /etc/mime.types. guess_type() is a pure lookup on the
file name; it never opens the file.

When nothing matches (no extension, unknown extension, or an encoding-only
match like .gz wrapping something unknown) we fall back to plain text.

=============================================================================
"""

import mimetypes
from pathlib import Path
from typing import Optional, Union


# Returned when the extension tells us nothing
DEFAULT_MIME_TYPE = "text/plain"

# MIME types that are text even though they are not text/*
_TEXT_APPLICATION_TYPES = {
    "application/json",
    "application/xml",
    "application/javascript",
    "application/x-javascript",
    "image/svg+xml",
}


def get_mime_type(path: Union[str, Path], default: Optional[str] = None) -> str:
    """
    Guess the MIME type of a file from its name.

    Examples:
        >>> get_mime_type("style.css")
        'text/css'

        >>> get_mime_type("/srv/www/logo.png")
        'image/png'

        >>> get_mime_type("README")
        'text/plain'
    """
    mime_type, _ = mimetypes.guess_type(str(path), strict=False)
    return mime_type or default or DEFAULT_MIME_TYPE


def is_text_type(mime_type: str) -> bool:
    """Check if a MIME type represents text content (and so takes a charset)."""
    return mime_type.startswith("text/") or mime_type in _TEXT_APPLICATION_TYPES


def get_content_type(path: Union[str, Path], charset: str = "utf-8") -> str:
    """
    Get the full Content-Type header value for a file.

    Text types get a charset parameter; binary types don't.

    Examples:
        >>> get_content_type("index.html")
        'text/html; charset=utf-8'

        >>> get_content_type("photo.jpg")
        'image/jpeg'
    """
    mime_type = get_mime_type(path)

    if is_text_type(mime_type):
        return f"{mime_type}; charset={charset}"

    return mime_type
