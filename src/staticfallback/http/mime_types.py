"""
=============================================================================
MIME TYPE DETECTION
=============================================================================

Maps file extensions to Content-Type values for files served from disk or
from the embedded filesystem.

Lookup order:

    1. WEB_MIME_TYPES below  (front-end assets, stable across platforms)
    2. mimetypes.guess_type  (whatever the host OS knows about)
    3. application/octet-stream

The local table comes first because the platform registry disagrees
between systems (".js" has been "application/javascript",
"text/javascript" and "application/x-javascript" depending on the box).

=============================================================================
"""

import mimetypes
from pathlib import PurePosixPath
from typing import Optional, Union


WEB_MIME_TYPES = {
    # Documents and code
    ".html": "text/html",
    ".htm": "text/html",
    ".css": "text/css",
    ".js": "text/javascript",
    ".mjs": "text/javascript",
    ".json": "application/json",
    ".map": "application/json",      # Source maps
    ".xml": "application/xml",
    ".txt": "text/plain",
    ".md": "text/markdown",
    ".csv": "text/csv",
    ".wasm": "application/wasm",

    # Images
    ".png": "image/png",
    ".jpg": "image/jpeg",
    ".jpeg": "image/jpeg",
    ".gif": "image/gif",
    ".svg": "image/svg+xml",
    ".ico": "image/x-icon",
    ".webp": "image/webp",
    ".avif": "image/avif",

    # Fonts
    ".woff": "font/woff",
    ".woff2": "font/woff2",
    ".ttf": "font/ttf",
    ".otf": "font/otf",

    # Media
    ".mp4": "video/mp4",
    ".webm": "video/webm",
    ".mp3": "audio/mpeg",
    ".ogg": "audio/ogg",

    ".pdf": "application/pdf",
    ".zip": "application/zip",
}

DEFAULT_MIME_TYPE = "application/octet-stream"

# application/* and image/* types that are still text and take a charset
_TEXTUAL_TYPES = {
    "application/json",
    "application/xml",
    "application/javascript",
    "image/svg+xml",
}


def get_mime_type(path: Union[str, PurePosixPath], default: Optional[str] = None) -> str:
    """
    MIME type for a file name, from its extension.

    Examples:
        >>> get_mime_type("dir2/dir21/file212.js")
        'text/javascript'
        >>> get_mime_type("archive.unknownext")
        'application/octet-stream'
    """
    suffix = PurePosixPath(str(path)).suffix.lower()
    if suffix in WEB_MIME_TYPES:
        return WEB_MIME_TYPES[suffix]
    guessed, _ = mimetypes.guess_type(f"file{suffix}") if suffix else (None, None)
    return guessed or default or DEFAULT_MIME_TYPE


def is_text_type(mime_type: str) -> bool:
    """True for text/* and for textual application types such as JSON."""
    return mime_type.startswith("text/") or mime_type in _TEXTUAL_TYPES


def get_content_type(path: Union[str, PurePosixPath], charset: str = "utf-8") -> str:
    """
    Full Content-Type header value; text types carry a charset.

    Examples:
        >>> get_content_type("index.html")
        'text/html; charset=utf-8'
        >>> get_content_type("logo.png")
        'image/png'
    """
    mime_type = get_mime_type(path)
    if is_text_type(mime_type):
        return f"{mime_type}; charset={charset}"
    return mime_type
