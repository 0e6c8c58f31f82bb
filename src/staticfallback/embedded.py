"""
=============================================================================
EMBEDDED FILESYSTEM
=============================================================================

A process-wide tree of in-memory assets. Assets are registered once at
startup (from package data, from a directory, or one by one) and looked up
by path segments afterwards:

    register("testdata/dir2/dir21/file212.js", b"...")

                  (root)
                    │
                 testdata
                 ┌──┴──┐
               dir1   dir2
                 │      │
          index.html  dir21
                        │
                  file212.js

    find("testdata")             →  EmbeddedNode("testdata")
    find("testdata", "missing")  →  None

A node found this way is turned into a FileSystem with node.filesystem(),
so the file server can serve from memory exactly as it serves from disk.

Registration happens before serving starts; lookups afterwards only read
the tree, so no locking is needed on the request path.

=============================================================================
"""

from dataclasses import dataclass, field
from importlib import resources
from io import BytesIO
from pathlib import Path
from typing import BinaryIO, Dict, Iterable, List, Optional, Union
import logging
import time

from .fs import FileInfo, FileSystem


logger = logging.getLogger(__name__)


def split_path(path: str) -> List[str]:
    """
    Split a slash-separated path into segments, dropping "" and ".".

        >>> split_path("/testdata//dir2/./dir21/")
        ['testdata', 'dir2', 'dir21']
    """
    return [segment for segment in path.split("/") if segment not in ("", ".")]


@dataclass
class EmbeddedNode:
    """
    A file (data is bytes) or a directory (data is None) in the tree.
    """

    name: str
    data: Optional[bytes] = None
    mtime: float = field(default_factory=time.time)
    children: Dict[str, "EmbeddedNode"] = field(default_factory=dict)

    @property
    def is_dir(self) -> bool:
        return self.data is None

    @property
    def size(self) -> int:
        return 0 if self.data is None else len(self.data)

    def find(self, *segments: str) -> Optional["EmbeddedNode"]:
        """Walk `segments` down from this node; None if any is missing."""
        node = self
        for segment in segments:
            if segment in ("", "."):
                continue
            if not node.is_dir:
                return None
            child = node.children.get(segment)
            if child is None:
                return None
            node = child
        return node

    def add(self, path: str, data: bytes, mtime: Optional[float] = None) -> "EmbeddedNode":
        """
        Register a file at `path` below this node, creating directories on
        the way. An existing file at that path is replaced.
        """
        segments = split_path(path)
        if not segments:
            raise ValueError("Cannot register a file at the embedded root")

        node = self
        for segment in segments[:-1]:
            child = node.children.get(segment)
            if child is None:
                child = node.children[segment] = EmbeddedNode(segment)
            elif not child.is_dir:
                raise NotADirectoryError(f"Embedded path {segment!r} is a file: {path}")
            node = child

        leaf = EmbeddedNode(
            segments[-1],
            data=bytes(data),
            mtime=time.time() if mtime is None else mtime,
        )
        existing = node.children.get(leaf.name)
        if existing is not None and existing.is_dir:
            raise IsADirectoryError(f"Embedded path is a directory: {path}")
        node.children[leaf.name] = leaf
        return leaf

    def walk(self, prefix: str = "") -> Iterable[str]:
        """Yield the path of every file below this node."""
        for name, child in sorted(self.children.items()):
            child_path = f"{prefix}/{name}" if prefix else name
            if child.is_dir:
                yield from child.walk(child_path)
            else:
                yield child_path

    def filesystem(self) -> "EmbeddedFS":
        return EmbeddedFS(self)


class EmbeddedFS(FileSystem):
    """FileSystem view of an EmbeddedNode subtree."""

    def __init__(self, root: EmbeddedNode):
        self.root = root

    def _lookup(self, path: str) -> EmbeddedNode:
        node = self.root
        for segment in split_path(path):
            if segment == "..":
                raise PermissionError(f"Path escapes root: {path}")
            if not node.is_dir:
                raise NotADirectoryError(path)
            child = node.children.get(segment)
            if child is None:
                raise FileNotFoundError(path)
            node = child
        return node

    def stat(self, path: str) -> FileInfo:
        node = self._lookup(path)
        return FileInfo(name=node.name, size=node.size, mtime=node.mtime, is_dir=node.is_dir)

    def open(self, path: str) -> BinaryIO:
        node = self._lookup(path)
        if node.is_dir:
            raise IsADirectoryError(path)
        return BytesIO(node.data)

    def __repr__(self) -> str:
        return f"EmbeddedFS({self.root.name or '/'!r})"


# =============================================================================
# PROCESS-WIDE REGISTRY
# =============================================================================

_ROOT = EmbeddedNode("")


def root() -> EmbeddedNode:
    return _ROOT


def find(*segments: str) -> Optional[EmbeddedNode]:
    """
    Look up a node in the registry.

    Example:
        node = find(*"testdata/dir2".split("/"))
        if node is None:
            ...  # not embedded
    """
    return _ROOT.find(*segments)


def register(path: str, data: bytes, mtime: Optional[float] = None) -> EmbeddedNode:
    """Register one file in the registry."""
    return _ROOT.add(path, data, mtime)


def embed_directory(directory: Union[str, Path], prefix: Optional[str] = None) -> int:
    """
    Register every file below a directory on disk.

    Files land under `prefix`, which defaults to the directory path as
    given (so embed_directory("testdata") is found with find("testdata")).
    Returns the number of files registered.
    """
    base = Path(directory)
    if not base.is_dir():
        raise NotADirectoryError(f"Not a directory: {directory}")
    target = str(directory) if prefix is None else prefix

    count = 0
    for file_path in sorted(p for p in base.rglob("*") if p.is_file()):
        relative = file_path.relative_to(base).as_posix()
        register(f"{target}/{relative}", file_path.read_bytes(), file_path.stat().st_mtime)
        count += 1
    logger.debug(f"Embedded {count} files from {base} under {target!r}")
    return count


def embed_package(package: str, subdir: str = "", prefix: Optional[str] = None) -> int:
    """
    Register package data shipped inside an installed package.

    Example:
        # mypkg/assets/app.js  →  find("assets", "app.js")
        embed_package("mypkg", "assets")
    """
    top = resources.files(package)
    for segment in split_path(subdir):
        top = top.joinpath(segment)
    target = subdir if prefix is None else prefix

    def _walk(node, relative: str) -> int:
        count = 0
        for entry in node.iterdir():
            entry_path = f"{relative}/{entry.name}" if relative else entry.name
            if entry.is_dir():
                count += _walk(entry, entry_path)
            elif entry.is_file():
                register(f"{target}/{entry_path}", entry.read_bytes())
                count += 1
        return count

    count = _walk(top, "")
    logger.debug(f"Embedded {count} files from package {package}:{subdir or '/'}")
    return count


def reset() -> None:
    """Drop every registered asset."""
    _ROOT.children.clear()
