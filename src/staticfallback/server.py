"""
=============================================================================
HTTP SERVER BRIDGE
=============================================================================

Runs a middleware pipeline behind the standard library's threaded HTTP
server, so the static middleware can be tried out without a framework:

    ┌──────────────────────┐      HTTPRequest      ┌─────────────────────┐
    │ ThreadingHTTPServer  │ ────────────────────► │ MiddlewarePipeline  │
    │ (one thread per      │                       │  Logging → Static → │
    │  connection)         │ ◄──────────────────── │  fallback handler   │
    └──────────────────────┘      HTTPResponse     └─────────────────────┘

Usage:
    server = StaticServer(ServerConfig(port=9999))
    server.use(LoggingMiddleware())
    server.use(StaticMiddleware(StaticOptions(directory=".")))
    server.run()

=============================================================================
"""

from http.server import BaseHTTPRequestHandler, ThreadingHTTPServer
from typing import Optional, Tuple, Type
import logging

from .config import ServerConfig, setup_logging
from .http.headers import Headers
from .http.request import HTTPRequest, URL
from .http.response import HTTPResponse, bad_request, internal_error, not_found
from .http.status_codes import reason_phrase
from .middleware.base import Middleware, MiddlewarePipeline, NextHandler


logger = logging.getLogger(__name__)


def default_fallback(request: HTTPRequest) -> HTTPResponse:
    """Final handler: nothing in the pipeline answered."""
    return not_found("404 page not found")


class StaticServer:
    """
    A middleware pipeline plus a blocking HTTP listener.

    The pipeline ends in `fallback`, which answers every request no
    middleware answered. Replace it to plug an application in:

        server.fallback = my_app
    """

    def __init__(self, config: Optional[ServerConfig] = None):
        self.config = config or ServerConfig()
        self.fallback: NextHandler = default_fallback
        self._middleware = MiddlewarePipeline()
        self._httpd: Optional[ThreadingHTTPServer] = None

    def use(self, middleware: Middleware) -> "StaticServer":
        """Add middleware (first added = outermost)."""
        self._middleware.add(middleware)
        return self

    @property
    def address(self) -> Optional[Tuple[str, int]]:
        """Bound (host, port) while running."""
        if self._httpd is None:
            return None
        host, port = self._httpd.server_address[:2]
        return host, port

    def handle(self, request: HTTPRequest) -> HTTPResponse:
        """Run one request through the pipeline. Never raises."""
        handler = self._middleware.wrap(self.fallback)
        try:
            return handler(request)
        except Exception:
            logger.exception(f"Unhandled error for {request.method} {request.path}")
            return internal_error()

    def bind(self, host: Optional[str] = None, port: Optional[int] = None) -> ThreadingHTTPServer:
        """Create the listening socket without serving yet."""
        self.config.validate()
        address = (host or self.config.host, self.config.port if port is None else port)
        self._httpd = ThreadingHTTPServer(address, _make_request_handler(self))
        self._httpd.daemon_threads = True
        return self._httpd

    def run(self, host: Optional[str] = None, port: Optional[int] = None) -> None:
        """Start the server (blocking until Ctrl+C or shutdown())."""
        setup_logging(self.config.log_level)
        httpd = self._httpd or self.bind(host, port)
        bound_host, bound_port = self.address
        logger.info(f"Serving on http://{bound_host}:{bound_port}")
        try:
            httpd.serve_forever()
        except KeyboardInterrupt:
            logger.info("Received keyboard interrupt")
        finally:
            httpd.server_close()
            self._httpd = None
            logger.info("Server stopped")

    def shutdown(self) -> None:
        """Stop serve_forever() from another thread."""
        if self._httpd is not None:
            self._httpd.shutdown()


def _make_request_handler(app: StaticServer) -> Type[BaseHTTPRequestHandler]:
    class RequestHandler(BaseHTTPRequestHandler):
        protocol_version = "HTTP/1.1"
        server_version = app.config.server_name
        sys_version = ""

        def version_string(self) -> str:
            return self.server_version

        def _dispatch(self) -> None:
            try:
                length = int(self.headers.get("Content-Length") or 0)
            except ValueError:
                length = -1
            if length < 0:
                logger.warning(
                    f"Bad Content-Length from {self.client_address[0]}: "
                    f"{self.headers.get('Content-Length')!r}"
                )
                # The body cannot be framed, so the connection cannot be reused
                self.close_connection = True
                self._send(bad_request("400 Bad Request"))
                return
            body = self.rfile.read(length) if length else b""

            headers = Headers()
            for name, value in self.headers.items():
                headers.add(name, value)

            request = HTTPRequest(
                method=self.command,
                url=URL.parse(self.path),
                version=self.request_version,
                headers=headers,
                body=body,
                client_address=(self.client_address[0], self.client_address[1]),
            )
            response = app.handle(request)
            self._send(response)

        def _send(self, response: HTTPResponse) -> None:
            status = int(response.status)
            self.send_response(status, reason_phrase(status))
            # send_response() already wrote Server and Date
            for name, value in response.headers.items():
                if name not in ("Server", "Date"):
                    self.send_header(name, value)
            if "Content-Length" not in response.headers:
                self.send_header("Content-Length", str(len(response.body)))
            self.end_headers()
            if self.command != "HEAD":
                self.wfile.write(response.body)

        do_GET = do_HEAD = do_POST = do_PUT = do_PATCH = do_DELETE = do_OPTIONS = _dispatch

        def log_message(self, format: str, *args) -> None:
            # Access lines come from LoggingMiddleware
            logger.debug(f"{self.address_string()} {format % args}")

    return RequestHandler
