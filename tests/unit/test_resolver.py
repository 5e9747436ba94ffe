"""
Unit tests for resource-to-path resolution.
"""

import os
from pathlib import Path

import pytest

from fileserver.http.errors import ErrorKind, HTTPError
from fileserver.http.resolver import PathResolver


@pytest.fixture
def resolver(www: Path) -> PathResolver:
    return PathResolver(www)


def assert_not_found(resolver: PathResolver, resource: str):
    with pytest.raises(HTTPError) as exc_info:
        resolver.resolve(resource)
    assert exc_info.value.kind == ErrorKind.NOT_FOUND


class TestSanitize:
    """Tests for the syntactic filter (no filesystem access)."""

    def test_parent_components_dropped(self):
        resolver = PathResolver("/")
        assert resolver.sanitize("/a/../b/./c") == ("a", "b", "c")

    def test_trailing_slash_gets_index(self):
        resolver = PathResolver("/")
        assert resolver.sanitize("/docs/") == ("docs", "index.html")

    def test_empty_resource_is_root_index(self):
        resolver = PathResolver("/")
        assert resolver.sanitize("") == ("index.html",)
        assert resolver.sanitize("/") == ("index.html",)

    def test_query_and_fragment_stripped(self):
        resolver = PathResolver("/")
        assert resolver.sanitize("/a.html?x=../../etc#frag") == ("a.html",)

    def test_percent_decoded_before_filtering(self):
        resolver = PathResolver("/")
        assert resolver.sanitize("/%2e%2e/%2E%2E/etc/passwd") == ("etc", "passwd")
        assert resolver.sanitize("/my%20file.txt") == ("my file.txt",)

    def test_double_slash_anchor_dropped(self):
        resolver = PathResolver("/")
        assert resolver.sanitize("//etc/passwd") == ("etc", "passwd")

    def test_custom_index(self):
        resolver = PathResolver("/", index_file="default.htm")
        assert resolver.sanitize("/") == ("default.htm",)


class TestResolve:
    """Tests for PathResolver.resolve()."""

    def test_root_resolves_to_index(self, resolver: PathResolver, www: Path):
        """Test that "/" maps to the root index document."""
        assert resolver.resolve("/") == (www / "index.html").resolve()

    def test_empty_resource(self, resolver: PathResolver, www: Path):
        """Test that an empty resource is treated like "/"."""
        assert resolver.resolve("") == (www / "index.html").resolve()

    def test_plain_file(self, resolver: PathResolver, www: Path):
        assert resolver.resolve("/style.css") == (www / "style.css").resolve()

    def test_directory_without_slash(self, resolver: PathResolver, www: Path):
        """Test that "/docs" resolves to the directory itself."""
        assert resolver.resolve("/docs") == (www / "docs").resolve()

    def test_missing_file(self, resolver: PathResolver):
        assert_not_found(resolver, "/nope.html")

    def test_missing_index(self, resolver: PathResolver):
        """Test that a directory without index is not found when asked with "/"."""
        assert_not_found(resolver, "/empty/")

    def test_file_used_as_directory(self, resolver: PathResolver):
        assert_not_found(resolver, "/index.html/x")

    @pytest.mark.parametrize("resource", [
        "/../etc/passwd",
        "/../../../../etc/passwd",
        "/%2e%2e/%2e%2e/etc/passwd",
        "//etc/passwd",
        "/docs/../../etc/passwd",
    ])
    def test_traversal_stays_inside(self, resolver: PathResolver, www: Path, resource: str):
        """Test that traversal attempts never resolve outside the root."""
        try:
            path = resolver.resolve(resource)
        except HTTPError as e:
            assert e.kind == ErrorKind.NOT_FOUND
        else:
            assert resolver.contains(path)

    def test_dotdot_collapses_to_root(self, resolver: PathResolver, www: Path):
        """Test that "/../index.html" serves the root's own index."""
        assert resolver.resolve("/../index.html") == (www / "index.html").resolve()

    def test_nul_byte(self, resolver: PathResolver):
        assert_not_found(resolver, "/index.html%00.txt")

    def test_symlink_inside_root(self, resolver: PathResolver, www: Path):
        """Test that symlinks pointing inside the root are followed."""
        (www / "alias.css").symlink_to(www / "style.css")
        assert resolver.resolve("/alias.css") == (www / "style.css").resolve()

    def test_symlink_escape(self, resolver: PathResolver, www: Path, tmp_path: Path):
        """Test that a symlink pointing outside the root is refused."""
        secret = tmp_path / "secret.txt"
        secret.write_text("top secret")
        (www / "leak.txt").symlink_to(secret)

        assert_not_found(resolver, "/leak.txt")

    def test_symlinked_directory_escape(self, resolver: PathResolver, www: Path, tmp_path: Path):
        outside = tmp_path / "outside"
        outside.mkdir()
        (outside / "index.html").write_text("outside")
        (www / "out").symlink_to(outside, target_is_directory=True)

        assert_not_found(resolver, "/out/")

    def test_symlink_loop(self, resolver: PathResolver, www: Path):
        os.symlink("loop_b", www / "loop_a")
        os.symlink("loop_a", www / "loop_b")

        assert_not_found(resolver, "/loop_a")


class TestResolverConstruction:
    """Tests for resolver setup."""

    def test_root_canonicalized(self, www: Path):
        resolver = PathResolver(str(www / "docs" / ".."))
        assert resolver.root == www.resolve()

    def test_missing_root(self, tmp_path: Path):
        with pytest.raises(ValueError):
            PathResolver(tmp_path / "does-not-exist")

    def test_contains(self, resolver: PathResolver, www: Path, tmp_path: Path):
        assert resolver.contains(resolver.root)
        assert resolver.contains(resolver.root / "a" / "b")
        assert not resolver.contains(tmp_path.resolve())
