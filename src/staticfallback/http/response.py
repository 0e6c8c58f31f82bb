"""
=============================================================================
HTTP RESPONSES AND RESPONSE WRITERS
=============================================================================

Two ways of producing a response live side by side in this package:

1. RETURNED responses (HTTPResponse)
   Middleware and final handlers return a finished HTTPResponse object.
   This is the contract of the pipeline in middleware/base.py.

2. STREAMED responses (ResponseWriter)
   The file server does not build an object. It talks to a "sink":

        writer.headers.set("Content-Type", "text/css")
        writer.write_header(200)          # status + headers are now final
        writer.write(b"body { ... }")     # zero or more body chunks

ResponseRecorder bridges the two: it is a ResponseWriter that remembers
everything written to it and can turn that into an HTTPResponse.

=============================================================================
WHY A WRITER INTERFACE?
=============================================================================

Anything that implements ResponseWriter can stand in for anything else
that does. The static middleware uses this to slip an interceptor between
the file server and the real sink:

    ┌─────────────┐   write_header/write   ┌─────────────┐         ┌──────────┐
    │ FileServer  │ ─────────────────────► │ Interceptor │ ──────► │ Recorder │
    └─────────────┘                        └─────────────┘         └──────────┘
                                            drops 404/403

The file server never knows which one it got.

=============================================================================
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Optional, Union
import logging

from .headers import Headers
from .status_codes import HTTPStatus, reason_phrase


logger = logging.getLogger(__name__)


class ResponseWriter(ABC):
    """
    Streaming response sink.

    =========================================================================
    THE WRITER CONTRACT
    =========================================================================

        headers          Mutable Headers; changes after write_header()
                         have no effect on what was sent.
        write_header(s)  Fix the status code and headers. Only the first
                         call counts.
        write(data)      Append body bytes, returning how many were
                         consumed. Calls write_header(200) first if the
                         caller never did.

    =========================================================================
    """

    @property
    @abstractmethod
    def headers(self) -> Headers:
        """Header collection for the response being written."""

    @abstractmethod
    def write_header(self, status: int) -> None:
        """Finalize status and headers."""

    @abstractmethod
    def write(self, data: bytes) -> int:
        """Write body bytes; return the number of bytes consumed."""


@dataclass
class HTTPResponse:
    """
    A finished response, as returned by middleware and handlers.

        Handler returns          to_bytes()              Socket sends
        HTTPResponse    ─────►   serializes    ─────►    raw bytes
    """

    status: int = HTTPStatus.OK
    headers: Headers = field(default_factory=Headers)
    body: bytes = b""
    version: str = "HTTP/1.1"

    @property
    def status_line(self) -> str:
        """Example: "HTTP/1.1 404 Not Found"."""
        return f"{self.version} {int(self.status)} {reason_phrase(self.status)}"

    @property
    def text(self) -> str:
        return self.body.decode("utf-8", errors="replace")

    def set_header(self, name: str, value: str) -> "HTTPResponse":
        self.headers.set(name, value)
        return self

    def set_content_type(self, content_type: str) -> "HTTPResponse":
        return self.set_header("Content-Type", content_type)

    def set_body(self, body: Union[str, bytes]) -> "HTTPResponse":
        """Set the body; strings are encoded as UTF-8."""
        self.body = body.encode("utf-8") if isinstance(body, str) else body
        return self

    def to_bytes(self, server_name: str = "static-fallback/1.0") -> bytes:
        """
        Serialize the response for the wire.

            HTTP/1.1 200 OK\\r\\n
            Content-Type: text/css\\r\\n
            Content-Length: 27\\r\\n        ← added if missing
            Date: Wed, 01 Jan 2026 ...\\r\\n ← added if missing
            Server: static-fallback/1.0\\r\\n ← added if missing
            \\r\\n
            body bytes

        Repeated headers produce one line per value.
        """
        headers = self.headers.copy()
        if "Content-Length" not in headers:
            headers.set("Content-Length", str(len(self.body)))
        if "Date" not in headers:
            headers.set("Date", format_http_date(datetime.now(timezone.utc)))
        if "Server" not in headers:
            headers.set("Server", server_name)

        lines = [self.status_line]
        lines.extend(f"{name}: {value}" for name, value in headers.items())
        lines.append("")
        return "\r\n".join(lines).encode("utf-8") + b"\r\n" + self.body


class ResponseRecorder(ResponseWriter):
    """
    In-memory ResponseWriter.

    Records the status, a snapshot of the headers taken when write_header()
    runs, and every body chunk. Used as the real sink behind the static
    middleware's interceptor, and handy in tests.

    Usage:
        recorder = ResponseRecorder()
        file_server.serve(request, recorder)
        recorder.status      # 200
        recorder.body        # b"..."
        recorder.to_response()
    """

    def __init__(self):
        self._headers = Headers()
        self._snapshot: Optional[Headers] = None
        self._body = bytearray()
        self.status: Optional[int] = None

    @property
    def headers(self) -> Headers:
        return self._headers

    @property
    def header_written(self) -> bool:
        return self.status is not None

    @property
    def written_headers(self) -> Headers:
        """Headers as they were when the status was written."""
        if self._snapshot is None:
            return self._headers.copy()
        return self._snapshot

    @property
    def body(self) -> bytes:
        return bytes(self._body)

    @property
    def text(self) -> str:
        return self._body.decode("utf-8", errors="replace")

    def write_header(self, status: int) -> None:
        if self.status is not None:
            logger.debug(f"Superfluous write_header({status}), already sent {self.status}")
            return
        self.status = status
        self._snapshot = self._headers.copy()

    def write(self, data: bytes) -> int:
        if self.status is None:
            self.write_header(HTTPStatus.OK)
        self._body.extend(data)
        return len(data)

    def to_response(self) -> HTTPResponse:
        """Freeze what was recorded into an HTTPResponse."""
        return HTTPResponse(
            status=_as_status(self.status if self.status is not None else HTTPStatus.OK),
            headers=self.written_headers.copy(),
            body=self.body,
        )


def _as_status(code: int) -> int:
    try:
        return HTTPStatus(code)
    except ValueError:
        return code


# =============================================================================
# UTILITY FUNCTIONS
# =============================================================================

def format_http_date(dt: datetime) -> str:
    """
    Format a datetime as an HTTP-date (RFC 7231).

    Format: Day, DD Mon YYYY HH:MM:SS GMT
    Example: Wed, 01 Jan 2026 12:00:00 GMT

    HTTP dates are always GMT, so aware datetimes are converted to UTC first.
    """
    if dt.tzinfo is not None:
        dt = dt.astimezone(timezone.utc)

    days = ["Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun"]
    months = ["Jan", "Feb", "Mar", "Apr", "May", "Jun",
              "Jul", "Aug", "Sep", "Oct", "Nov", "Dec"]

    return (
        f"{days[dt.weekday()]}, "
        f"{dt.day:02d} {months[dt.month - 1]} {dt.year} "
        f"{dt.hour:02d}:{dt.minute:02d}:{dt.second:02d} GMT"
    )


def text_response(body: str, status: int = HTTPStatus.OK) -> HTTPResponse:
    """Plain text response with a UTF-8 charset."""
    response = HTTPResponse(status=status).set_body(body)
    return response.set_content_type("text/plain; charset=utf-8")


def not_found(message: str = "Not Found") -> HTTPResponse:
    """404 Not Found, plain text."""
    return text_response(message, HTTPStatus.NOT_FOUND)


def internal_error(message: str = "Internal Server Error") -> HTTPResponse:
    """500 Internal Server Error. Keep the message generic in production."""
    return text_response(message, HTTPStatus.INTERNAL_SERVER_ERROR)


def bad_request(message: str = "Bad Request") -> HTTPResponse:
    """400 Bad Request, for requests the server cannot parse."""
    return text_response(message, HTTPStatus.BAD_REQUEST)
