"""
=============================================================================
HTTP STATUS CODES (RFC 7231)
=============================================================================

Status codes the static middleware, its file server and the HTTP bridge
answer with. Anything else a fallback handler returns gets its reason
phrase from the standard library table.

=============================================================================
WHICH CODES MATTER FOR STATIC SERVING?
=============================================================================

    ┌─────────────────────────────────────────────────────────────────────┐
    │              FILE SERVER OUTCOMES                                   │
    ├─────────────────────────────────────────────────────────────────────┤
    │                                                                      │
    │   200 OK              File found, body follows                      │
    │   304 Not Modified    Client ETag still valid, no body              │
    │   403 Forbidden       Directory without index, permission denied    │
    │   404 Not Found       Nothing at that path                          │
    │   500 Internal Error  Unexpected I/O failure                        │
    │                                                                      │
    │   400 Bad Request     Malformed request, answered by the server     │
    │                                                                      │
    │   403 and 404 are "misses": the middleware swallows them and        │
    │   hands the request to the next handler instead.                    │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

=============================================================================
"""

from enum import IntEnum
from http.client import responses


class HTTPStatus(IntEnum):
    """
    HTTP status codes and reason phrases.

    Extends IntEnum, so members compare equal to plain integers:

        >>> HTTPStatus.NOT_FOUND == 404
        True
        >>> HTTPStatus.NOT_FOUND.phrase
        'Not Found'
    """

    OK = 200
    NOT_MODIFIED = 304          # Cached version is still valid
    BAD_REQUEST = 400
    FORBIDDEN = 403             # Miss: falls through to the next handler
    NOT_FOUND = 404             # Miss: falls through to the next handler
    INTERNAL_SERVER_ERROR = 500

    @property
    def phrase(self) -> str:
        """
        Get the reason phrase for this status code.

            HTTP/1.1 404 Not Found
                     ─── ─────────
                      │      └── Reason phrase
                      └───────── Status code
        """
        return _STATUS_PHRASES[self]


_STATUS_PHRASES = {
    HTTPStatus.OK: "OK",
    HTTPStatus.NOT_MODIFIED: "Not Modified",
    HTTPStatus.BAD_REQUEST: "Bad Request",
    HTTPStatus.FORBIDDEN: "Forbidden",
    HTTPStatus.NOT_FOUND: "Not Found",
    HTTPStatus.INTERNAL_SERVER_ERROR: "Internal Server Error",
}


def reason_phrase(code: int) -> str:
    """Reason phrase for any integer status, known to the enum or not."""
    try:
        return HTTPStatus(code).phrase
    except ValueError:
        return responses.get(code, "Unknown")
