"""
=============================================================================
STATIC FILE MIDDLEWARE
=============================================================================

Serves files from a directory (or the embedded filesystem) for requests
under a URL prefix, and hands everything it cannot serve to the next
handler in the pipeline.

=============================================================================
REQUEST FLOW
=============================================================================

    GET /static/dir2/dir21/file212.js          prefix = "static"

    ┌─────────────────────────────────────────────────────────────────────┐
    │                                                                      │
    │   1. GET or HEAD?                 no  ──────────────► next(request) │
    │            │ yes                                                     │
    │   2. Starts with /static?         no  ──────────────► next(request) │
    │            │ yes                                                     │
    │   3. clone request, path = "//dir2/dir21/file212.js"                 │
    │            │                                                         │
    │   4. file_server.serve(clone, Interceptor(Recorder()))               │
    │            │                                                         │
    │   5. interceptor.blocked?         yes ──────────────► next(request) │
    │            │ no                       (the ORIGINAL request,         │
    │            ▼                           path still /static/...)       │
    │      return recorder.to_response()                                   │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

Step 3 clones because the original request must survive untouched. A
fallback handler that sees "/dir2/dir21/file212.notexist.js" instead of
"/static/dir2/dir21/file212.notexist.js" would route it wrong.

=============================================================================
"""

from typing import Mapping, Optional, Tuple
import logging

from .. import embedded
from ..config import StaticConfigError, StaticOptions, resolve_options
from ..fs import DirectoryFS
from ..http.request import HTTPRequest, clone_request
from ..http.response import HTTPResponse, ResponseRecorder
from ..middleware.base import Middleware, NextHandler
from .fileserver import FileServer
from .interceptor import ResponseInterceptor


logger = logging.getLogger(__name__)

SERVABLE_METHODS = ("GET", "HEAD")


def trim_path_prefix(prefix: str, path: str) -> Tuple[str, bool]:
    """
    Strip a URL prefix from a path.

    Both arguments get a leading "/" if they lack one. On a match the
    remainder comes back re-prefixed with "/" as is, so "/static/dir2"
    gives "//dir2" (FileServer cleans the path before lookup). Otherwise the
    path comes back unchanged.

    The comparison is a plain string prefix test, so "/staticfoo" matches
    the prefix "static" and becomes "/foo".

    Examples:
        >>> trim_path_prefix("static", "/static/dir2/file.js")
        ('//dir2/file.js', True)
        >>> trim_path_prefix("/static", "static")
        ('/', True)
        >>> trim_path_prefix("static", "/api/users")
        ('/api/users', False)
    """
    if not path.startswith("/"):
        path = "/" + path
    if not prefix.startswith("/"):
        prefix = "/" + prefix
    if path.startswith(prefix):
        return "/" + path[len(prefix):], True
    return path, False


def build_file_server(options: StaticOptions) -> FileServer:
    """
    Create the file server for a set of resolved options.

    Raises:
        StaticConfigError: `binfs` is set and the directory is not in the
            embedded filesystem.
    """
    if options.binfs:
        node = embedded.find(*options.directory.split("/"))
        if node is None:
            raise StaticConfigError(
                f"Directory not found in embedded filesystem: {options.directory!r}"
            )
        if not node.is_dir:
            raise StaticConfigError(
                f"Embedded path is a file, not a directory: {options.directory!r}"
            )
        filesystem = node.filesystem()
    else:
        filesystem = DirectoryFS(options.directory)
    return FileServer(filesystem, index=options.index)


class StaticMiddleware(Middleware):
    """
    Serve static files, falling through to the next handler on a miss.

    =========================================================================
    USAGE
    =========================================================================

        pipeline = MiddlewarePipeline()
        pipeline.add(StaticMiddleware(StaticOptions(
            prefix="static",
            directory="./public",
            index=True,
        )))
        handler = pipeline.wrap(app)

    Options are resolved and the file server is built once, here. A bad
    embedded directory fails now, not on the first request.

    =========================================================================
    """

    def __init__(
        self,
        options: Optional[StaticOptions] = None,
        *,
        environ: Optional[Mapping[str, str]] = None,
        file_server: Optional[FileServer] = None,
    ):
        self.options = resolve_options(options, environ)
        self.file_server = file_server or build_file_server(self.options)
        logger.debug(
            f"Static files: prefix={self.options.prefix or '/'!r} "
            f"root={self.file_server.filesystem!r} index={self.options.index}"
        )

    def __call__(self, request: HTTPRequest, next: NextHandler) -> HTTPResponse:
        if request.method not in SERVABLE_METHODS:
            return next(request)

        target = request
        if self.options.prefix:
            path, matched = trim_path_prefix(self.options.prefix, request.path)
            if not matched:
                return next(request)
            target = clone_request(request)
            target.url.path = path

        recorder = ResponseRecorder()
        interceptor = ResponseInterceptor(recorder)
        self.file_server.serve(target, interceptor)

        if interceptor.blocked:
            logger.debug(f"No static file for {request.method} {request.path}, falling through")
            return next(request)

        return recorder.to_response()


def static_handler(options: Optional[StaticOptions] = None, **kwargs) -> StaticMiddleware:
    """
    Create a static file middleware.

    Example:
        server.use(static_handler(StaticOptions(prefix="static", directory="www")))
    """
    return StaticMiddleware(options, **kwargs)
