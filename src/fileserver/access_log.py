"""
=============================================================================
ACCESS LOGGING
=============================================================================

One log entry per connection, written after the response has gone out
(or failed to).

=============================================================================
LOGGER
=============================================================================

Access entries go to their own logger, "fileserver.access", separate from
the diagnostic loggers (fileserver.server, fileserver.http.resolver, ...).
That lets a deployment route them independently:

    logging.getLogger("fileserver.access").addHandler(file_handler)
    logging.getLogger("fileserver.access").propagate = False

=============================================================================
FORMATS
=============================================================================

text (Apache-like, for humans and grep):

    127.0.0.1 - - [2026-10-19T08:15:02+00:00] "GET /index.html HTTP/1.1" 200 5 0.41ms

json (for log aggregators):

    {"connection_id": "3f2a9c1b", "client_ip": "127.0.0.1", "method": "GET",
     "resource": "/index.html", "version": "HTTP/1.1", "status_code": 200,
     "content_length": 5, "duration_ms": 0.41, "timestamp": "..."}

A connection that never produced a request line has no method or
resource; those fields are "-".

=============================================================================
"""

import json
import logging
from dataclasses import dataclass, asdict
from datetime import datetime, timezone
from typing import Optional

from .http.request import HTTPRequest
from .http.response import HTTPResponse


logger = logging.getLogger("fileserver.access")


@dataclass
class RequestLog:
    """Structured access log entry for one connection."""

    connection_id: str
    client_ip: str
    method: str
    resource: str
    version: str
    status_code: int
    content_length: int
    duration_ms: float
    timestamp: str

    def to_dict(self) -> dict:
        data = asdict(self)
        data["duration_ms"] = round(self.duration_ms, 2)
        return data

    def to_text(self) -> str:
        return (
            f'{self.client_ip} - - [{self.timestamp}] '
            f'"{self.method} {self.resource} {self.version}" {self.status_code} '
            f'{self.content_length} {self.duration_ms:.2f}ms'
        )


class AccessLogger:
    """
    Builds and emits RequestLog entries.

    Args:
        log_format: "text" or "json".
        log_level: Level access entries are logged at.
    """

    def __init__(self, log_format: str = "text", log_level: int = logging.INFO):
        self.log_format = log_format
        self.log_level = log_level

    def log(
        self,
        connection_id: str,
        client_ip: str,
        request: Optional[HTTPRequest],
        response: HTTPResponse,
        duration_ms: float,
    ) -> RequestLog:
        """Emit the entry for a finished connection and return it."""
        entry = RequestLog(
            connection_id=connection_id,
            client_ip=client_ip,
            method=request.method.value if request else "-",
            resource=request.resource if request else "-",
            version=request.version if request else "-",
            status_code=int(response.status),
            content_length=len(response.body),
            duration_ms=duration_ms,
            timestamp=datetime.now(timezone.utc).isoformat(timespec="seconds"),
        )

        if self.log_format == "json":
            logger.log(self.log_level, json.dumps(entry.to_dict()))
        else:
            logger.log(self.log_level, entry.to_text())

        return entry
