"""
Unit tests for HTTP responses, writers, headers and status codes.
"""

from datetime import datetime, timezone

import pytest

from staticfallback.http import (
    Headers,
    HTTPResponse,
    HTTPStatus,
    ResponseRecorder,
    canonical_header_name,
    format_http_date,
    get_content_type,
    get_mime_type,
    internal_error,
    not_found,
    reason_phrase,
    text_response,
)


class TestHTTPResponse:
    """Tests for HTTPResponse class."""

    def test_status_line(self):
        """Test status line generation."""
        response = HTTPResponse(status=HTTPStatus.OK)
        assert response.status_line == "HTTP/1.1 200 OK"

        response = HTTPResponse(status=HTTPStatus.NOT_FOUND)
        assert response.status_line == "HTTP/1.1 404 Not Found"

    def test_to_bytes_includes_headers(self):
        """Test that to_bytes includes all headers."""
        response = HTTPResponse(
            status=HTTPStatus.OK,
            headers=Headers({"X-Custom": "value"}),
            body=b"test",
        )

        result = response.to_bytes()

        assert b"HTTP/1.1 200 OK\r\n" in result
        assert b"X-Custom: value\r\n" in result
        assert b"Content-Length: 4\r\n" in result
        assert b"Server: static-fallback/1.0\r\n" in result
        assert b"\r\n\r\ntest" in result

    def test_to_bytes_repeats_multi_value_headers(self):
        response = HTTPResponse()
        response.headers.add("Vary", "Accept")
        response.headers.add("Vary", "Accept-Encoding")

        result = response.to_bytes()

        assert b"Vary: Accept\r\nVary: Accept-Encoding\r\n" in result

    def test_set_header_chaining(self):
        """Test method chaining for headers."""
        response = (HTTPResponse()
            .set_header("X-One", "1")
            .set_header("X-Two", "2"))

        assert response.headers.get("X-One") == "1"
        assert response.headers.get("X-Two") == "2"

    def test_helpers(self):
        assert text_response("hi").headers.get("Content-Type") == "text/plain; charset=utf-8"
        assert not_found().status == HTTPStatus.NOT_FOUND
        assert internal_error().status == HTTPStatus.INTERNAL_SERVER_ERROR
        assert text_response("héllo").text == "héllo"


class TestResponseRecorder:
    """Tests for the in-memory writer."""

    def test_records_status_headers_body(self):
        recorder = ResponseRecorder()
        recorder.headers.set("Content-Type", "text/css")
        recorder.write_header(201)
        recorder.write(b"a")
        recorder.write(b"b")

        assert recorder.status == 201
        assert recorder.body == b"ab"
        assert recorder.written_headers.get("Content-Type") == "text/css"

    def test_snapshot_taken_at_write_header(self):
        recorder = ResponseRecorder()
        recorder.write_header(200)
        recorder.headers.set("X-Late", "1")

        assert "X-Late" not in recorder.written_headers

    def test_write_implies_200(self):
        recorder = ResponseRecorder()

        assert recorder.write(b"abc") == 3
        assert recorder.status == 200

    def test_first_status_wins(self):
        recorder = ResponseRecorder()
        recorder.write_header(304)
        recorder.write_header(500)

        assert recorder.status == 304

    def test_to_response(self):
        recorder = ResponseRecorder()
        recorder.headers.set("Content-Type", "text/plain")
        recorder.write(b"body")

        response = recorder.to_response()

        assert response.status == HTTPStatus.OK
        assert isinstance(response.status, HTTPStatus)
        assert response.body == b"body"
        assert response.headers.get("Content-Type") == "text/plain"

    def test_to_response_unknown_status(self):
        recorder = ResponseRecorder()
        recorder.write_header(299)

        assert recorder.to_response().status == 299

    def test_to_response_without_writes(self):
        assert ResponseRecorder().to_response().status == HTTPStatus.OK


class TestHeaders:
    """Tests for the header multimap."""

    def test_case_insensitive(self):
        headers = Headers({"content-type": "text/html"})

        assert headers.get("Content-Type") == "text/html"
        assert "CONTENT-TYPE" in headers
        assert list(headers) == ["Content-Type"]

    def test_add_and_set(self):
        headers = Headers()
        headers.add("Vary", "Accept").add("vary", "Origin")

        assert headers.get_all("Vary") == ["Accept", "Origin"]
        assert headers.to_dict() == {"Vary": "Accept, Origin"}

        headers.set("Vary", "*")
        assert headers.get_all("Vary") == ["*"]

    def test_replace_copies_values(self):
        values = ["a", "b"]
        headers = Headers().replace("X-List", values)
        values.append("c")

        assert headers.get_all("X-List") == ["a", "b"]

    def test_copy_is_deep(self):
        original = Headers({"X-A": "1"})
        clone = original.copy()
        clone.add("X-A", "2")

        assert original.get_all("X-A") == ["1"]
        assert clone != original

    def test_delete_and_len(self):
        headers = Headers({"A": "1", "B": "2"})
        headers.delete("a")
        headers.delete("missing")

        assert len(headers) == 1
        assert headers.get("A") is None

    def test_items_one_per_value(self):
        headers = Headers()
        headers.add("Set-Cookie", "a=1")
        headers.add("Set-Cookie", "b=2")

        assert list(headers.items()) == [("Set-Cookie", "a=1"), ("Set-Cookie", "b=2")]

    @pytest.mark.parametrize("name,expected", [
        ("content-type", "Content-Type"),
        ("ETAG", "Etag"),
        ("x-content-type-options", "X-Content-Type-Options"),
    ])
    def test_canonical_name(self, name, expected):
        assert canonical_header_name(name) == expected


class TestStatusAndTypes:
    def test_reason_phrase(self):
        assert reason_phrase(404) == "Not Found"
        assert reason_phrase(299) == "Unknown"

    def test_reason_phrase_outside_enum(self):
        """Codes a fallback handler may return still get their phrase."""
        assert reason_phrase(201) == "Created"
        assert reason_phrase(302) == "Found"

    def test_phrase(self):
        assert HTTPStatus.BAD_REQUEST.phrase == "Bad Request"
        assert HTTPStatus.NOT_MODIFIED.phrase == "Not Modified"
        assert [int(s) for s in HTTPStatus] == [200, 304, 400, 403, 404, 500]

    @pytest.mark.parametrize("name,expected", [
        ("app.js", "text/javascript"),
        ("site.CSS", "text/css"),
        ("logo.svg", "image/svg+xml"),
        ("archive.unknownext", "application/octet-stream"),
    ])
    def test_mime_type(self, name, expected):
        assert get_mime_type(name) == expected

    def test_content_type_charset(self):
        assert get_content_type("index.html") == "text/html; charset=utf-8"
        assert get_content_type("data.json") == "application/json; charset=utf-8"
        assert get_content_type("logo.png") == "image/png"

    def test_format_http_date(self):
        dt = datetime(2026, 1, 1, 12, 0, 0, tzinfo=timezone.utc)

        assert format_http_date(dt) == "Thu, 01 Jan 2026 12:00:00 GMT"
