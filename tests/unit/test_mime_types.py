"""
Unit tests for media type detection.
"""

import pytest

from fileserver.http.mime_types import (
    DEFAULT_MIME_TYPE,
    get_content_type,
    get_mime_type,
    is_text_type,
)


class TestGetMimeType:

    @pytest.mark.parametrize("path,expected", [
        ("index.html", "text/html"),
        ("style.css", "text/css"),
        ("logo.png", "image/png"),
        ("photo.jpg", "image/jpeg"),
        ("/srv/www/data.json", "application/json"),
        ("archive.zip", "application/zip"),
    ])
    def test_known_extensions(self, path: str, expected: str):
        assert get_mime_type(path) == expected

    def test_no_extension(self):
        assert get_mime_type("README") == DEFAULT_MIME_TYPE

    def test_unknown_extension(self):
        assert get_mime_type("file.qqqzzz") == "text/plain"

    def test_custom_default(self):
        assert get_mime_type("README", default="application/octet-stream") == \
            "application/octet-stream"


class TestContentType:

    def test_text_gets_charset(self):
        assert get_content_type("index.html") == "text/html; charset=utf-8"
        assert get_content_type("data.json") == "application/json; charset=utf-8"

    def test_binary_has_no_charset(self):
        assert get_content_type("logo.png") == "image/png"

    def test_is_text_type(self):
        assert is_text_type("text/css")
        assert is_text_type("image/svg+xml")
        assert not is_text_type("image/png")
