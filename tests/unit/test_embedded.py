"""
Unit tests for the embedded filesystem.
"""

import pytest

from staticfallback import embedded
from staticfallback.embedded import EmbeddedNode, EmbeddedFS, split_path


class TestEmbeddedNode:
    """Tests for the in-memory tree."""

    def test_add_creates_directories(self):
        root = EmbeddedNode("")
        root.add("testdata/dir2/dir21/file212.js", b"js")

        assert root.find("testdata").is_dir
        assert root.find("testdata", "dir2", "dir21").is_dir
        leaf = root.find("testdata", "dir2", "dir21", "file212.js")
        assert leaf.data == b"js"
        assert leaf.size == 2

    def test_find_missing(self):
        root = EmbeddedNode("")
        root.add("a/b.txt", b"")

        assert root.find("a", "c") is None
        assert root.find("a", "b.txt", "deeper") is None

    def test_find_skips_empty_segments(self):
        root = EmbeddedNode("")
        root.add("a/b.txt", b"x")

        assert root.find("", "a", ".", "b.txt") is root.find("a", "b.txt")
        assert root.find() is root

    def test_add_replaces_file(self):
        root = EmbeddedNode("")
        root.add("a.txt", b"old")
        root.add("a.txt", b"new")

        assert root.find("a.txt").data == b"new"

    def test_add_under_file_fails(self):
        root = EmbeddedNode("")
        root.add("a", b"file")

        with pytest.raises(NotADirectoryError):
            root.add("a/b.txt", b"")

    def test_add_over_directory_fails(self):
        root = EmbeddedNode("")
        root.add("a/b.txt", b"")

        with pytest.raises(IsADirectoryError):
            root.add("a", b"")

    def test_add_at_root_fails(self):
        with pytest.raises(ValueError):
            EmbeddedNode("").add("/", b"")

    def test_walk(self):
        root = EmbeddedNode("")
        root.add("b/2.txt", b"")
        root.add("a.txt", b"")
        root.add("b/1.txt", b"")

        assert list(root.walk()) == ["a.txt", "b/1.txt", "b/2.txt"]

    def test_split_path(self):
        assert split_path("/testdata//dir2/./dir21/") == ["testdata", "dir2", "dir21"]


class TestEmbeddedFS:
    """Tests for the FileSystem view."""

    @pytest.fixture
    def fs(self) -> EmbeddedFS:
        root = EmbeddedNode("")
        root.add("site/css/app.css", b"body{}", mtime=1700000000.0)
        return root.find("site").filesystem()

    def test_stat_file(self, fs):
        info = fs.stat("/css/app.css")

        assert info.name == "app.css"
        assert info.size == 6
        assert info.mtime == 1700000000.0
        assert info.is_dir is False

    def test_stat_directory(self, fs):
        assert fs.stat("/css").is_dir
        assert fs.stat("/").is_dir

    def test_open(self, fs):
        with fs.open("/css/app.css") as handle:
            assert handle.read() == b"body{}"

    def test_missing(self, fs):
        with pytest.raises(FileNotFoundError):
            fs.stat("/css/nope.css")

    def test_below_file(self, fs):
        with pytest.raises(NotADirectoryError):
            fs.stat("/css/app.css/x")

    def test_open_directory(self, fs):
        with pytest.raises(IsADirectoryError):
            fs.open("/css")

    def test_dotdot_rejected(self, fs):
        with pytest.raises(PermissionError):
            fs.stat("/../other")


class TestRegistry:
    """Tests for the process-wide registry."""

    def test_register_and_find(self):
        embedded.register("assets/app.js", b"x")

        assert embedded.find("assets", "app.js").data == b"x"
        assert embedded.find("assets", "missing.js") is None

    def test_reset(self):
        embedded.register("assets/app.js", b"x")
        embedded.reset()

        assert embedded.find("assets") is None
        assert embedded.root().children == {}

    def test_embed_directory(self, testdata):
        count = embedded.embed_directory(testdata, prefix="testdata")

        assert count == 2
        assert sorted(embedded.find("testdata").walk()) == [
            "dir1/index.html",
            "dir2/dir21/file212.js",
        ]
        node = embedded.find("testdata", "dir1", "index.html")
        assert node.data == (testdata / "dir1" / "index.html").read_bytes()

    def test_embed_directory_requires_directory(self, tmp_path):
        with pytest.raises(NotADirectoryError):
            embedded.embed_directory(tmp_path / "nope")

    def test_embed_package(self, tmp_path, monkeypatch):
        package = tmp_path / "assetpkg"
        (package / "public" / "css").mkdir(parents=True)
        (package / "__init__.py").write_text("")
        (package / "public" / "css" / "site.css").write_bytes(b"h1{}")
        (package / "public" / "robots.txt").write_bytes(b"User-agent: *")
        monkeypatch.syspath_prepend(str(tmp_path))

        count = embedded.embed_package("assetpkg", "public")

        assert count == 2
        assert embedded.find("public", "css", "site.css").data == b"h1{}"
        assert embedded.find("public", "robots.txt").data == b"User-agent: *"

    def test_embed_package_with_prefix(self, tmp_path, monkeypatch):
        package = tmp_path / "assetpkg2"
        (package / "static").mkdir(parents=True)
        (package / "__init__.py").write_text("")
        (package / "static" / "a.js").write_bytes(b"a")
        monkeypatch.syspath_prepend(str(tmp_path))

        embedded.embed_package("assetpkg2", "static", prefix="web/js")

        assert embedded.find("web", "js", "a.js").data == b"a"
