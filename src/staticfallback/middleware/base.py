"""
=============================================================================
MIDDLEWARE PROTOCOL AND PIPELINE
=============================================================================

A middleware is a callable taking the request and the rest of the chain.
It can answer on its own, or call `next(request)` and return (or adjust)
what comes back. That one choice is the whole fallback mechanism:

    ┌─────────────────────────────────────────────────────────────────────┐
    │                                                                      │
    │   Request ───────────────────────────────────────────────►          │
    │                                                                      │
    │   ┌──────────┐    ┌──────────┐    ┌──────────────────┐              │
    │   │ Logging  │───►│  Static  │───►│ Application /    │              │
    │   │    MW    │    │    MW    │    │ final handler    │              │
    │   └──────────┘    └────┬─────┘    └──────────────────┘              │
    │                        │                                             │
    │                  file found?                                         │
    │                  yes → answer, stop here                             │
    │                  no  → next(request)                                 │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

=============================================================================
"""

from abc import ABC, abstractmethod
from functools import partial
from typing import Callable, Iterator, List, Optional
import logging

from ..http.request import HTTPRequest
from ..http.response import HTTPResponse


logger = logging.getLogger(__name__)

# Anything that turns a request into a response: the final application, or
# a middleware already bound to the rest of the chain.
NextHandler = Callable[[HTTPRequest], HTTPResponse]

MiddlewareFunc = Callable[[HTTPRequest, NextHandler], HTTPResponse]


class Middleware(ABC):
    """
    One layer of the pipeline.

    Subclasses implement __call__(request, next). Returning without calling
    `next` ends the chain at this layer.
    """

    @abstractmethod
    def __call__(self, request: HTTPRequest, next: NextHandler) -> HTTPResponse:
        """Answer `request`, or delegate it to `next`."""

    @property
    def name(self) -> str:
        """Label used in debug logs."""
        return type(self).__name__


class MiddlewarePipeline:
    """
    An ordered list of middleware in front of a final handler.

        pipeline = MiddlewarePipeline()
        pipeline.add(LoggingMiddleware())              # outermost
        pipeline.add(StaticMiddleware(options))        # closest to app

        handler = pipeline.wrap(app)

        Request:   Logging → Static → app
        Response:  app → Static → Logging
    """

    def __init__(self):
        self._layers: List[Middleware] = []

    def add(self, middleware: Middleware) -> "MiddlewarePipeline":
        """Append one layer (inside every layer added before it)."""
        self._layers.append(middleware)
        logger.debug(f"Pipeline layer {len(self._layers)}: {middleware.name}")
        return self

    def use(self, *middleware: Middleware) -> "MiddlewarePipeline":
        for layer in middleware:
            self.add(layer)
        return self

    def wrap(self, handler: NextHandler) -> NextHandler:
        """
        Bind every layer to the one after it, innermost first, and return
        the outermost as a plain request -> response callable.
        """
        chain = handler
        for layer in reversed(self._layers):
            chain = partial(layer, next=chain)
        return chain

    def __len__(self) -> int:
        return len(self._layers)

    def __iter__(self) -> Iterator[Middleware]:
        return iter(self._layers)


class FunctionMiddleware(Middleware):
    """
    Adapter for a plain `(request, next) -> response` function.

        def tag(request, next):
            response = next(request)
            response.set_header("X-Tag", "1")
            return response

        pipeline.add(FunctionMiddleware(tag))
    """

    def __init__(self, func: MiddlewareFunc, name: Optional[str] = None):
        self.func = func
        self._label = name or getattr(func, "__name__", type(func).__name__)

    def __call__(self, request: HTTPRequest, next: NextHandler) -> HTTPResponse:
        return self.func(request, next)

    @property
    def name(self) -> str:
        return self._label


def function_middleware(func: MiddlewareFunc) -> FunctionMiddleware:
    """Decorator form of FunctionMiddleware."""
    return FunctionMiddleware(func)
