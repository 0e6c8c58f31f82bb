"""
=============================================================================
REQUEST HANDLERS
=============================================================================

    fileserver.py    FileServer: writes a file (or an error) to a writer
    interceptor.py   ResponseInterceptor: hides 404/403 from the real sink
    static.py        StaticMiddleware: prefix stripping + fallback

=============================================================================
"""

from .fileserver import FileServer, clean_path, write_error
from .interceptor import ResponseInterceptor, BLOCKED_STATUSES
from .static import StaticMiddleware, static_handler, build_file_server, trim_path_prefix

__all__ = [
    "FileServer",
    "clean_path",
    "write_error",
    "ResponseInterceptor",
    "BLOCKED_STATUSES",
    "StaticMiddleware",
    "static_handler",
    "build_file_server",
    "trim_path_prefix",
]
