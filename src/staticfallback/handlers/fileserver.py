"""
=============================================================================
FILE SERVER
=============================================================================

Serves files from a FileSystem by writing through a ResponseWriter.

This is the piece the static middleware wraps. It knows nothing about
prefixes, pipelines or fallbacks: given a request and a writer it always
produces a complete response, success or error.

=============================================================================
FLOW
=============================================================================

    Request: GET /dir2/dir21/file212.js

    1. Clean the path            "/a/../b" → "/b", never above "/"
    2. stat() on the filesystem   missing → 404, denied → 403
    3. Directory?                 index on  → serve <dir>/index.html or 404
                                  index off → 403
    4. ETag matches If-None-Match → 304, no body
    5. Headers, write_header(200), body in chunks (none for HEAD)

Because the status is only decided at step 2 or 3, a wrapper that watches
write_header() learns about misses before a single body byte goes out.

=============================================================================
CACHING HEADERS
=============================================================================

    ETag: "1718445600-2048"        mtime-size fingerprint
    Last-Modified: Sat, 15 Jun 2024 10:00:00 GMT

    Request:  If-None-Match: "1718445600-2048"
    Response: 304 Not Modified  (client keeps its copy)

=============================================================================
"""

from datetime import datetime, timezone
from typing import Optional
import logging
import posixpath

from ..fs import FileInfo, FileSystem
from ..http.mime_types import get_content_type
from ..http.request import HTTPRequest
from ..http.response import ResponseWriter, format_http_date
from ..http.status_codes import HTTPStatus


logger = logging.getLogger(__name__)

DEFAULT_CHUNK_SIZE = 64 * 1024
INDEX_FILE = "index.html"


def clean_path(path: str) -> str:
    """
    Normalize a request path to an absolute, dot-free form.

        >>> clean_path("//dir2/./dir21/../dir21/file212.js")
        '/dir2/dir21/file212.js'
        >>> clean_path("/../../etc/passwd")
        '/etc/passwd'
    """
    cleaned = posixpath.normpath("/" + path.lstrip("/"))
    # normpath keeps a leading "//" (POSIX allows it to mean something)
    return "/" + cleaned.lstrip("/")


def write_error(writer: ResponseWriter, message: str, status: int) -> None:
    """Write a plain-text error response."""
    writer.headers.set("Content-Type", "text/plain; charset=utf-8")
    writer.headers.set("X-Content-Type-Options", "nosniff")
    writer.write_header(status)
    writer.write((message + "\n").encode("utf-8"))


class FileServer:
    """
    Serve files from a FileSystem.

    Usage:
        server = FileServer(DirectoryFS("./public"), index=True)
        recorder = ResponseRecorder()
        server.serve(HTTPRequest.new("GET", "/css/site.css"), recorder)
    """

    def __init__(
        self,
        filesystem: FileSystem,
        index: bool = False,
        chunk_size: int = DEFAULT_CHUNK_SIZE,
    ):
        self.filesystem = filesystem
        self.index = index
        self.chunk_size = chunk_size

    def serve(self, request: HTTPRequest, writer: ResponseWriter) -> None:
        """Write the response for `request` to `writer`."""
        path = clean_path(request.path)

        info = self._stat(path, writer)
        if info is None:
            return

        if info.is_dir:
            if not self.index:
                write_error(writer, "403 Forbidden", HTTPStatus.FORBIDDEN)
                return
            path = posixpath.join(path, INDEX_FILE)
            info = self._stat(path, writer)
            if info is None:
                return
            if info.is_dir:
                write_error(writer, "404 page not found", HTTPStatus.NOT_FOUND)
                return

        self._serve_file(request, writer, path, info)

    def _stat(self, path: str, writer: ResponseWriter) -> Optional[FileInfo]:
        """stat() that writes the error response itself and returns None."""
        try:
            return self.filesystem.stat(path)
        except (FileNotFoundError, NotADirectoryError):
            write_error(writer, "404 page not found", HTTPStatus.NOT_FOUND)
        except PermissionError:
            write_error(writer, "403 Forbidden", HTTPStatus.FORBIDDEN)
        except OSError as e:
            logger.error(f"Error reading {path} from {self.filesystem!r}: {e}")
            write_error(writer, "500 Internal Server Error", HTTPStatus.INTERNAL_SERVER_ERROR)
        return None

    def _serve_file(
        self,
        request: HTTPRequest,
        writer: ResponseWriter,
        path: str,
        info: FileInfo,
    ) -> None:
        etag = f'"{int(info.mtime)}-{info.size}"'
        modified = datetime.fromtimestamp(info.mtime, tz=timezone.utc)

        writer.headers.set("ETag", etag)
        writer.headers.set("Last-Modified", format_http_date(modified))

        if request.get_header("If-None-Match") == etag:
            writer.write_header(HTTPStatus.NOT_MODIFIED)
            return

        try:
            handle = self.filesystem.open(path)
        except PermissionError:
            writer.headers.delete("ETag")
            writer.headers.delete("Last-Modified")
            write_error(writer, "403 Forbidden", HTTPStatus.FORBIDDEN)
            return

        with handle:
            if "Content-Type" not in writer.headers:
                writer.headers.set("Content-Type", get_content_type(info.name))
            writer.headers.set("Content-Length", str(info.size))
            writer.write_header(HTTPStatus.OK)

            if request.method == "HEAD":
                return

            while True:
                chunk = handle.read(self.chunk_size)
                if not chunk:
                    break
                writer.write(chunk)

    def __repr__(self) -> str:
        return f"FileServer({self.filesystem!r}, index={self.index})"
