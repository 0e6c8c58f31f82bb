"""
=============================================================================
HTTP PRIMITIVES
=============================================================================

The message types shared by the pipeline, the file server and the bridge:

    headers.py        Case-insensitive header multimap
    request.py        HTTPRequest, URL, clone_request
    response.py       HTTPResponse, ResponseWriter, ResponseRecorder
    status_codes.py   HTTPStatus enum with reason phrases
    mime_types.py     Extension → Content-Type

=============================================================================
"""

from .headers import Headers, canonical_header_name
from .request import HTTPRequest, URL, clone_request
from .response import (
    HTTPResponse,
    ResponseWriter,
    ResponseRecorder,
    format_http_date,
    text_response,
    not_found,
    bad_request,
    internal_error,
)
from .status_codes import HTTPStatus, reason_phrase
from .mime_types import get_mime_type, get_content_type

__all__ = [
    # Headers
    "Headers",
    "canonical_header_name",

    # Requests
    "HTTPRequest",
    "URL",
    "clone_request",

    # Responses
    "HTTPResponse",
    "ResponseWriter",
    "ResponseRecorder",
    "format_http_date",
    "text_response",
    "not_found",
    "bad_request",
    "internal_error",

    # Status codes
    "HTTPStatus",
    "reason_phrase",

    # MIME types
    "get_mime_type",
    "get_content_type",
]
