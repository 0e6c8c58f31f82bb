"""
=============================================================================
MIDDLEWARE FRAMEWORK
=============================================================================

A minimal Chain of Responsibility pipeline. Each middleware receives the
request and the next handler, and either answers or passes the request on.

    LoggingMiddleware   access log line + X-Request-ID
    StaticMiddleware    (handlers/static.py) serves files, falls through
                        on misses

=============================================================================
"""

from .base import Middleware, MiddlewarePipeline, FunctionMiddleware, NextHandler, function_middleware
from .logging import LoggingMiddleware

__all__ = [
    # Base classes
    "Middleware",
    "MiddlewarePipeline",
    "FunctionMiddleware",
    "NextHandler",
    "function_middleware",

    # Built-in middleware
    "LoggingMiddleware",
]
