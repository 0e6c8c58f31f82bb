"""
=============================================================================
STATICFALLBACK - Static File Middleware With Fallthrough
=============================================================================

Serves static files for requests under a URL prefix, and passes every
request it cannot serve (missing file, forbidden path, wrong method, other
prefix) to the next handler, untouched.

=============================================================================
PACKAGE STRUCTURE
=============================================================================

    staticfallback/
    ├── __init__.py          # This file - package exports
    ├── __main__.py          # CLI entry point (python -m staticfallback)
    ├── config.py            # StaticOptions, ServerConfig, setup_logging
    ├── fs.py                # FileSystem interface + DirectoryFS
    ├── embedded.py          # In-memory embedded filesystem registry
    ├── server.py            # StaticServer bridge on http.server
    ├── http/                # Request, response, headers, status, MIME
    ├── handlers/            # FileServer, ResponseInterceptor, StaticMiddleware
    └── middleware/          # Pipeline + access logging

=============================================================================
QUICK START
=============================================================================

    from staticfallback import StaticServer, StaticMiddleware, StaticOptions

    server = StaticServer()
    server.use(StaticMiddleware(StaticOptions(prefix="static", directory="www")))
    server.fallback = my_app
    server.run()

=============================================================================
"""

__version__ = "1.0.0"

from .config import ServerConfig, StaticConfigError, StaticOptions, resolve_options, setup_logging
from .handlers import FileServer, ResponseInterceptor, StaticMiddleware, static_handler, trim_path_prefix
from .http import HTTPRequest, HTTPResponse, HTTPStatus, ResponseRecorder, ResponseWriter, clone_request
from .middleware import LoggingMiddleware, Middleware, MiddlewarePipeline, function_middleware
from .server import StaticServer

__all__ = [
    "__version__",
    # Configuration
    "StaticOptions",
    "ServerConfig",
    "StaticConfigError",
    "resolve_options",
    "setup_logging",
    # Static files
    "StaticMiddleware",
    "static_handler",
    "FileServer",
    "ResponseInterceptor",
    "trim_path_prefix",
    # HTTP
    "HTTPRequest",
    "HTTPResponse",
    "HTTPStatus",
    "ResponseWriter",
    "ResponseRecorder",
    "clone_request",
    # Pipeline
    "Middleware",
    "MiddlewarePipeline",
    "function_middleware",
    "LoggingMiddleware",
    # Server
    "StaticServer",
]
