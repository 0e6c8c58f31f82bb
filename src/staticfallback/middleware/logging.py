"""
=============================================================================
ACCESS LOGGING MIDDLEWARE
=============================================================================

One log line per request, emitted after the response is known, so a request
that fell through the static middleware is logged with the status the
fallback handler produced.

    127.0.0.1 - - [19/Oct/2026:10:00:00 +0000] "GET /static/app.js" 200 5120 0.41ms

=============================================================================
"""

from dataclasses import asdict, dataclass
from typing import Iterable, Optional
import json
import logging
import time
import uuid

from .base import Middleware, NextHandler
from ..http.request import HTTPRequest
from ..http.response import HTTPResponse


# Namespaced so access logs can be routed separately:
#   logging.getLogger("staticfallback.access").addHandler(file_handler)
logger = logging.getLogger("staticfallback.access")

LOG_FORMATS = ("text", "json")


@dataclass
class AccessRecord:
    """What gets logged about one request."""

    request_id: str
    method: str
    path: str
    query: str
    client: str
    user_agent: str
    status: int
    size: int
    elapsed_ms: float
    time: str

    @classmethod
    def of(
        cls,
        request: HTTPRequest,
        response: HTTPResponse,
        request_id: str,
        elapsed_ms: float,
    ) -> "AccessRecord":
        return cls(
            request_id=request_id,
            method=request.method,
            path=request.path,
            query=request.url.raw_query,
            client=request.client_address[0],
            user_agent=request.user_agent or "-",
            status=int(response.status),
            size=len(response.body),
            elapsed_ms=elapsed_ms,
            time=time.strftime("%d/%b/%Y:%H:%M:%S %z"),
        )

    def as_json(self) -> str:
        fields = asdict(self)
        fields["elapsed_ms"] = round(self.elapsed_ms, 2)
        return json.dumps(fields)

    def as_text(self) -> str:
        """Common Log Format, plus the elapsed time."""
        return (
            f'{self.client or "-"} - - [{self.time}] "{self.method} {self.path}" '
            f"{self.status} {self.size} {self.elapsed_ms:.2f}ms"
        )


class LoggingMiddleware(Middleware):
    """
    Access log for everything behind it in the pipeline.

    Add it first so the timing covers the static lookup and the fallback.

    Usage:
        pipeline.add(LoggingMiddleware())                    # text lines
        pipeline.add(LoggingMiddleware(log_format="json"))   # JSON lines
        pipeline.add(LoggingMiddleware(skip_paths=["/healthz"]))
    """

    def __init__(
        self,
        log_format: str = "text",
        include_request_id: bool = True,
        log_level: int = logging.INFO,
        skip_paths: Optional[Iterable[str]] = None,
    ):
        if log_format not in LOG_FORMATS:
            raise ValueError(f"log_format must be one of {LOG_FORMATS}, not {log_format!r}")
        self.log_format = log_format
        self.include_request_id = include_request_id
        self.log_level = log_level
        self.skip_paths = frozenset(skip_paths or ())

    def __call__(self, request: HTTPRequest, next: NextHandler) -> HTTPResponse:
        request_id = uuid.uuid4().hex[:8]
        started = time.perf_counter()

        try:
            response = next(request)
        except Exception as e:
            logger.error(
                f"{request.method} {request.path} raised {type(e).__name__}: {e} "
                f"after {(time.perf_counter() - started) * 1000:.2f}ms"
            )
            raise

        elapsed_ms = (time.perf_counter() - started) * 1000

        if self.include_request_id:
            response.headers.set("X-Request-ID", request_id)

        if request.path not in self.skip_paths:
            record = AccessRecord.of(request, response, request_id, elapsed_ms)
            line = record.as_json() if self.log_format == "json" else record.as_text()
            logger.log(self.log_level, line)

        return response
