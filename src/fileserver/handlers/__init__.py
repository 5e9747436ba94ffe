"""
=============================================================================
REQUEST HANDLERS
=============================================================================

A handler turns a parsed HTTPRequest into an HTTPResponse, raising
HTTPError when it can't.

    StaticFileHandler
        - Serves files from one root directory
        - Directory requests fall back to the index document
        - Directory without trailing slash → 301 to the slash form

=============================================================================
"""

from .static import StaticFileHandler

__all__ = [
    "StaticFileHandler",
]
