"""
=============================================================================
FILESYSTEMS
=============================================================================

The file server resolves request paths against a FileSystem, never against
the OS directly. Two implementations exist:

    DirectoryFS    files on disk under a root directory
    EmbeddedFS     files held in memory (see embedded.py)

Paths handed to a FileSystem are slash-separated and rooted at "/":
"/dir2/dir21/file212.js". Errors use the builtin OSError subclasses so the
file server can map them to status codes:

    FileNotFoundError / NotADirectoryError   →  404
    PermissionError                          →  403

=============================================================================
SECURITY: PATH TRAVERSAL
=============================================================================

    GET /static/../../../etc/passwd

DirectoryFS resolves the full path (following ".." and symlinks) and
checks it is still inside the root:

    full_path = (root / user_input).resolve()
    full_path.relative_to(root)     # raises ValueError if outside

A path that escapes is reported as PermissionError (403), which the static
middleware treats as a miss like any other.

=============================================================================
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path
from typing import BinaryIO, Union
import logging


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FileInfo:
    """What the file server needs to know about a path."""

    name: str
    size: int
    mtime: float
    is_dir: bool


class FileSystem(ABC):
    """Read-only file tree addressed by slash-separated paths."""

    @abstractmethod
    def stat(self, path: str) -> FileInfo:
        """Describe `path`; raise FileNotFoundError if it does not exist."""

    @abstractmethod
    def open(self, path: str) -> BinaryIO:
        """Open a regular file for binary reading."""


class DirectoryFS(FileSystem):
    """
    Files under a directory on disk.

    The directory does not have to exist yet. Until it does every lookup
    raises FileNotFoundError.
    """

    def __init__(self, root: Union[str, Path]):
        self.root = Path(root or ".").resolve()
        if not self.root.is_dir():
            logger.warning(f"Static root directory does not exist: {self.root}")

    def _resolve(self, path: str) -> Path:
        try:
            full_path = (self.root / path.lstrip("/")).resolve()
        except ValueError:
            # NUL byte in the name: no such file can exist
            raise FileNotFoundError(path) from None
        try:
            full_path.relative_to(self.root)
        except ValueError:
            logger.warning(f"Path traversal attempt: {path}")
            raise PermissionError(f"Path escapes root: {path}") from None
        return full_path

    def stat(self, path: str) -> FileInfo:
        full_path = self._resolve(path)
        st = full_path.stat()
        return FileInfo(
            name=full_path.name,
            size=st.st_size,
            mtime=st.st_mtime,
            is_dir=full_path.is_dir(),
        )

    def open(self, path: str) -> BinaryIO:
        return self._resolve(path).open("rb")

    def __repr__(self) -> str:
        return f"DirectoryFS({str(self.root)!r})"
