"""
pytest configuration and fixtures.
"""

from pathlib import Path
from typing import Callable
import logging
import sys

import pytest

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from staticfallback import embedded
from staticfallback.http import HTTPRequest, HTTPResponse, text_response
from staticfallback.middleware import Middleware, MiddlewarePipeline


FILE212_JS = b"console.log('file212');\n"
DIR1_INDEX = b"<html><body>dir1 index</body></html>\n"


@pytest.fixture
def testdata(tmp_path: Path) -> Path:
    """
    A small web root:

        testdata/
        ├── dir1/index.html
        ├── dir2/dir21/file212.js
        └── empty/
    """
    root = tmp_path / "testdata"
    (root / "dir1").mkdir(parents=True)
    (root / "dir1" / "index.html").write_bytes(DIR1_INDEX)
    (root / "dir2" / "dir21").mkdir(parents=True)
    (root / "dir2" / "dir21" / "file212.js").write_bytes(FILE212_JS)
    (root / "empty").mkdir()
    return root


@pytest.fixture
def file212_js() -> bytes:
    """Content of testdata/dir2/dir21/file212.js."""
    return FILE212_JS


@pytest.fixture
def dir1_index() -> bytes:
    """Content of testdata/dir1/index.html."""
    return DIR1_INDEX


@pytest.fixture(autouse=True)
def clean_embedded():
    """Every test starts with an empty embedded registry."""
    embedded.reset()
    yield
    embedded.reset()


@pytest.fixture(autouse=True)
def reset_log_level():
    """setup_logging() changes the package logger; undo it after each test."""
    yield
    logging.getLogger("staticfallback").setLevel(logging.NOTSET)


def not_found_app(request: HTTPRequest) -> HTTPResponse:
    """Fallback handler that echoes the path it was given."""
    return text_response("NOT FOUND" + request.path)


@pytest.fixture
def run() -> Callable[..., HTTPResponse]:
    """
    Send one request through a middleware in front of not_found_app.

        response = run(StaticMiddleware(options), "GET", "/static/a.js")
    """
    def _run(middleware: Middleware, method: str, target: str, headers=None) -> HTTPResponse:
        handler = MiddlewarePipeline().add(middleware).wrap(not_found_app)
        return handler(HTTPRequest.new(method, target, headers))

    return _run
