"""
=============================================================================
HTTP REQUEST MODEL
=============================================================================

The request object handed down the middleware pipeline, its URL component,
and the cloning helper the static middleware relies on.

=============================================================================
REQUEST ANATOMY
=============================================================================

    GET /static/app.js?v=3 HTTP/1.1
    ─┬─ ─────────┬──────── ───┬────
     │           │            └── version
     │           └── target  ──►  URL(path="/static/app.js", query="v=3")
     └── method

The URL is its own mutable object. That matters as soon as a middleware
wants to rewrite the path for a downstream consumer without the upstream
caller seeing the change.

=============================================================================
SHALLOW COPY PITFALL
=============================================================================

    original ──► HTTPRequest ──► URL(path="/static/app.js")
                                  ▲
    copy.copy(original) ──────────┘     (same URL object!)

    copy.url.path = "/app.js"    →  original.url.path is now "/app.js" too

clone_request() copies the request AND gives the copy its own URL:

    original ──► HTTPRequest ──► URL(path="/static/app.js")
    clone    ──► HTTPRequest ──► URL(path="/static/app.js")   (new object)

=============================================================================
"""

from dataclasses import dataclass, field, replace
from typing import Dict, List, Optional
from urllib.parse import parse_qs, quote, unquote, urlsplit, urlunsplit

from .headers import Headers


@dataclass
class URL:
    """
    Parsed request target.

    `path` holds the percent-decoded path; `raw_query` keeps the query
    string exactly as received.
    """

    path: str = "/"
    raw_query: str = ""
    scheme: str = ""
    host: str = ""
    fragment: str = ""

    @classmethod
    def parse(cls, target: str) -> "URL":
        """
        Parse a request target ("/a/b?x=1") or an absolute URL.

        Example:
            >>> URL.parse("/static/a%20b.js?v=1").path
            '/static/a b.js'
        """
        parts = urlsplit(target)
        return cls(
            path=unquote(parts.path) or "/",
            raw_query=parts.query,
            scheme=parts.scheme,
            host=parts.netloc,
            fragment=parts.fragment,
        )

    @property
    def query_params(self) -> Dict[str, List[str]]:
        return parse_qs(self.raw_query, keep_blank_values=True)

    def request_uri(self) -> str:
        """Path and query as sent on the request line."""
        uri = quote(self.path)
        if self.raw_query:
            uri += "?" + self.raw_query
        return uri

    def __str__(self) -> str:
        return urlunsplit(
            (self.scheme, self.host, quote(self.path), self.raw_query, self.fragment)
        )


@dataclass
class HTTPRequest:
    """
    An inbound HTTP request.

    =========================================================================
    ATTRIBUTES
    =========================================================================

        method:         GET, HEAD, POST, ...
        url:            Parsed target (see URL). Rewritable per consumer.
        version:        "HTTP/1.1" or "HTTP/1.0"
        headers:        Case-insensitive Headers multimap
        body:           Raw request body
        client_address: (ip, port) of the peer, for logging

    =========================================================================
    """

    method: str
    url: URL = field(default_factory=URL)
    version: str = "HTTP/1.1"
    headers: Headers = field(default_factory=Headers)
    body: bytes = b""
    client_address: tuple[str, int] = ("", 0)

    @classmethod
    def new(
        cls,
        method: str,
        target: str,
        headers: Optional[Dict[str, str]] = None,
        body: bytes = b"",
    ) -> "HTTPRequest":
        """
        Build a request from a method and a target string.

        Example:
            request = HTTPRequest.new("GET", "/static/app.js")
        """
        return cls(
            method=method.upper(),
            url=URL.parse(target),
            headers=Headers(headers),
            body=body,
        )

    @property
    def path(self) -> str:
        """Request path without query string."""
        return self.url.path

    @property
    def query_params(self) -> Dict[str, List[str]]:
        return self.url.query_params

    @property
    def host(self) -> str:
        return self.headers.get("Host", "") or self.url.host

    @property
    def user_agent(self) -> str:
        return self.headers.get("User-Agent", "") or ""

    def get_header(self, name: str, default: str = "") -> str:
        """Case-insensitive header lookup."""
        value = self.headers.get(name)
        return default if value is None else value

    def get_query(self, name: str, default: Optional[str] = None) -> Optional[str]:
        """First value of a query parameter."""
        values = self.query_params.get(name, [])
        return values[0] if values else default


def clone_request(request: HTTPRequest) -> HTTPRequest:
    """
    Copy a request so its URL can be rewritten safely.

    Every field is copied by reference except `url`, which is rebuilt from
    the same field values. Rewriting `clone.url.path` leaves the original
    request untouched, so it can still be handed to a later handler.

    Example:
        clone = clone_request(request)
        clone.url.path = "/app.js"
        request.path   # still "/static/app.js"
    """
    return replace(request, url=replace(request.url))
