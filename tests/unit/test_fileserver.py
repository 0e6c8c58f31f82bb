"""
Unit tests for FileServer and its helpers.
"""

import os

import pytest

from staticfallback.fs import DirectoryFS, FileInfo, FileSystem
from staticfallback.handlers import FileServer, clean_path, write_error
from staticfallback.http import HTTPRequest, HTTPStatus, ResponseRecorder


def serve(server: FileServer, method: str, target: str, headers=None) -> ResponseRecorder:
    recorder = ResponseRecorder()
    server.serve(HTTPRequest.new(method, target, headers), recorder)
    return recorder


class TestCleanPath:
    """Tests for path normalization."""

    @pytest.mark.parametrize("path,expected", [
        ("/", "/"),
        ("", "/"),
        ("a/b", "/a/b"),
        ("//dir2//dir21/", "/dir2/dir21"),
        ("/dir2/./dir21/../dir21/file.js", "/dir2/dir21/file.js"),
        ("/../../etc/passwd", "/etc/passwd"),
    ])
    def test_clean_path(self, path, expected):
        assert clean_path(path) == expected


class TestWriteError:
    def test_plain_text_error(self):
        recorder = ResponseRecorder()
        write_error(recorder, "404 page not found", HTTPStatus.NOT_FOUND)

        assert recorder.status == 404
        assert recorder.text == "404 page not found\n"
        assert recorder.written_headers.get("Content-Type") == "text/plain; charset=utf-8"
        assert recorder.written_headers.get("X-Content-Type-Options") == "nosniff"


class TestFileServer:
    """Tests for serving from a directory on disk."""

    def test_serves_file(self, testdata):
        recorder = serve(FileServer(DirectoryFS(testdata)), "GET", "/dir2/dir21/file212.js")

        assert recorder.status == 200
        assert recorder.body == (testdata / "dir2" / "dir21" / "file212.js").read_bytes()
        assert recorder.written_headers.get("Content-Type") == "text/javascript; charset=utf-8"
        assert recorder.written_headers.get("ETag") is not None
        assert recorder.written_headers.get("Last-Modified").endswith(" GMT")

    def test_missing_file_is_404(self, testdata):
        recorder = serve(FileServer(DirectoryFS(testdata)), "GET", "/dir2/nope.js")

        assert recorder.status == 404

    def test_nul_byte_is_404(self, testdata):
        recorder = serve(FileServer(DirectoryFS(testdata)), "GET", "/dir2/a%00b.js")

        assert recorder.status == 404

    def test_file_as_directory_is_404(self, testdata):
        recorder = serve(FileServer(DirectoryFS(testdata)), "GET", "/dir2/dir21/file212.js/x")

        assert recorder.status == 404

    def test_directory_without_index_is_403(self, testdata):
        recorder = serve(FileServer(DirectoryFS(testdata)), "GET", "/dir1")

        assert recorder.status == 403

    def test_directory_with_index(self, testdata):
        recorder = serve(FileServer(DirectoryFS(testdata), index=True), "GET", "/dir1/")

        assert recorder.status == 200
        assert b"dir1 index" in recorder.body
        assert recorder.written_headers.get("Content-Type") == "text/html; charset=utf-8"

    def test_directory_with_missing_index_is_404(self, testdata):
        recorder = serve(FileServer(DirectoryFS(testdata), index=True), "GET", "/empty")

        assert recorder.status == 404

    def test_index_that_is_a_directory_is_404(self, testdata):
        (testdata / "empty" / "index.html").mkdir()
        recorder = serve(FileServer(DirectoryFS(testdata), index=True), "GET", "/empty")

        assert recorder.status == 404

    def test_head_writes_no_body(self, testdata):
        recorder = serve(FileServer(DirectoryFS(testdata)), "HEAD", "/dir2/dir21/file212.js")

        assert recorder.status == 200
        assert recorder.body == b""
        size = (testdata / "dir2" / "dir21" / "file212.js").stat().st_size
        assert recorder.written_headers.get("Content-Length") == str(size)

    def test_if_none_match_gives_304(self, testdata):
        server = FileServer(DirectoryFS(testdata))
        etag = serve(server, "GET", "/dir2/dir21/file212.js").written_headers.get("ETag")

        recorder = serve(server, "GET", "/dir2/dir21/file212.js", {"If-None-Match": etag})

        assert recorder.status == 304
        assert recorder.body == b""

    def test_stale_etag_serves_file(self, testdata):
        recorder = serve(
            FileServer(DirectoryFS(testdata)),
            "GET", "/dir2/dir21/file212.js",
            {"If-None-Match": '"0-0"'},
        )

        assert recorder.status == 200

    def test_dotdot_stays_inside_root(self, tmp_path, testdata):
        (tmp_path / "secret.txt").write_text("secret")
        recorder = serve(FileServer(DirectoryFS(testdata)), "GET", "/../secret.txt")

        assert recorder.status == 404

    def test_symlink_out_of_root_is_403(self, tmp_path, testdata):
        (tmp_path / "secret.txt").write_text("secret")
        try:
            os.symlink(tmp_path / "secret.txt", testdata / "link.txt")
        except (OSError, NotImplementedError):
            pytest.skip("symlinks not supported")

        recorder = serve(FileServer(DirectoryFS(testdata)), "GET", "/link.txt")

        assert recorder.status == 403

    def test_reads_in_chunks(self, testdata):
        data = bytes(range(256)) * 40
        (testdata / "blob.bin").write_bytes(data)

        class CountingRecorder(ResponseRecorder):
            writes = 0

            def write(self, chunk):
                CountingRecorder.writes += 1
                return super().write(chunk)

        recorder = CountingRecorder()
        FileServer(DirectoryFS(testdata), chunk_size=1024).serve(
            HTTPRequest.new("GET", "/blob.bin"), recorder
        )

        assert recorder.body == data
        assert CountingRecorder.writes == 10
        assert recorder.written_headers.get("Content-Type") == "application/octet-stream"

    def test_unreadable_root_is_500(self):
        class BrokenFS(FileSystem):
            def stat(self, path):
                raise OSError("disk on fire")

            def open(self, path):
                raise OSError("disk on fire")

        recorder = serve(FileServer(BrokenFS()), "GET", "/x")

        assert recorder.status == 500

    def test_open_permission_error_is_403(self):
        class LockedFS(FileSystem):
            def stat(self, path):
                return FileInfo(name="locked.txt", size=3, mtime=0.0, is_dir=False)

            def open(self, path):
                raise PermissionError(path)

        recorder = serve(FileServer(LockedFS()), "GET", "/locked.txt")

        assert recorder.status == 403
        assert "ETag" not in recorder.written_headers
