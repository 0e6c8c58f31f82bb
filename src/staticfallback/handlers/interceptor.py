"""
=============================================================================
RESPONSE INTERCEPTOR
=============================================================================

A ResponseWriter that sits between the file server and the real sink and
swallows "miss" responses (404 Not Found, 403 Forbidden).

=============================================================================
WHY INTERCEPT?
=============================================================================

A file server decides between success and failure at the moment it calls
write_header(). By then it may already have set headers (Content-Type,
X-Content-Type-Options, ...). If those went straight to the real sink, a
miss would leave debris behind and the next handler could not answer
cleanly.

So the interceptor keeps its own header collection and only decides what to
do when the status arrives:

    ┌─────────────────────────────────────────────────────────────────────┐
    │                 write_header(status)                                │
    ├─────────────────────────────────────────────────────────────────────┤
    │                                                                      │
    │   status 404 / 403            any other status                      │
    │   ────────────────            ────────────────                      │
    │   blocked = True              copy temp headers → real sink         │
    │   real sink untouched         real.write_header(status)             │
    │                                                                      │
    │   write(data)                 write(data)                           │
    │   → returns len(data)         → real.write(data)                    │
    │     nothing written                                                 │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

Blocked writes report success so the file server finishes normally; it
never learns its error page went nowhere.

=============================================================================
"""

import logging

from ..http.headers import Headers
from ..http.response import ResponseWriter
from ..http.status_codes import HTTPStatus


logger = logging.getLogger(__name__)

BLOCKED_STATUSES = frozenset({HTTPStatus.NOT_FOUND, HTTPStatus.FORBIDDEN})


class ResponseInterceptor(ResponseWriter):
    """
    Wrap `writer`, diverting 404/403 responses into a blocked state.

    Attributes:
        writer:          The real sink.
        header_written:  write_header() has run (first call wins).
        blocked:         The status was a miss; body writes are discarded.

    Example:
        interceptor = ResponseInterceptor(recorder)
        file_server.serve(request, interceptor)
        if interceptor.blocked:
            return next(request)
    """

    def __init__(self, writer: ResponseWriter):
        self.writer = writer
        self._headers = Headers()
        self.header_written = False
        self.blocked = False

    @property
    def headers(self) -> Headers:
        """The temporary headers, never the real sink's."""
        return self._headers

    def write_header(self, status: int) -> None:
        if self.header_written:
            return
        self.header_written = True

        if status in BLOCKED_STATUSES:
            self.blocked = True
            logger.debug(f"Blocked {int(status)} response")
            return

        for name, values in self._headers.lists():
            self.writer.headers.replace(name, values)
        self.writer.write_header(status)

    def write(self, data: bytes) -> int:
        if not self.header_written:
            self.write_header(HTTPStatus.OK)
        if self.blocked:
            return len(data)
        return self.writer.write(data)
