"""
Unit tests for HTTP response building.
"""

import pytest

from fileserver.http.errors import ErrorKind
from fileserver.http.response import (
    HTTPResponse,
    ResponseBuilder,
    error_response,
)
from fileserver.http.status_codes import HTTPStatus


class TestHTTPResponse:
    """Tests for HTTPResponse class."""

    def test_status_line(self):
        """Test status line generation."""
        response = HTTPResponse(status=HTTPStatus.OK)
        assert response.status_line == "HTTP/1.1 200 Success"

        response = HTTPResponse(status=HTTPStatus.NOT_FOUND)
        assert response.status_line == "HTTP/1.1 404 Not Found"

    def test_status_text_overrides_phrase(self):
        """Test that an explicit status text is used verbatim."""
        response = HTTPResponse(status=HTTPStatus.OK, status_text="Fine")
        assert response.status_line == "HTTP/1.1 200 Fine"

    def test_to_bytes_layout(self):
        """Test the exact wire format."""
        response = HTTPResponse(
            status=HTTPStatus.OK,
            status_text="Success",
            headers=("Content-Type: text/plain",),
            body=b"hello",
        )

        assert response.to_bytes() == (
            b"HTTP/1.1 200 Success\r\n"
            b"Content-Type: text/plain\r\n"
            b"Content-Length: 5\r\n"
            b"\r\n"
            b"hello"
        )

    def test_nothing_after_body(self):
        """Test that the body is the last thing on the wire."""
        data = HTTPResponse(status=HTTPStatus.OK, body=b"abc").to_bytes()
        assert data.endswith(b"\r\n\r\nabc")

    def test_content_length_uses_body(self):
        """Test that a caller-supplied Content-Length is replaced."""
        response = HTTPResponse(
            status=HTTPStatus.OK,
            headers=("Content-Length: 999",),
            body=b"four",
            content_length=999,
        )
        data = response.to_bytes()

        assert b"Content-Length: 4\r\n" in data
        assert b"999" not in data

    def test_empty_body(self):
        """Test serialization of an empty body."""
        data = HTTPResponse(status=HTTPStatus.MOVED_PERMANENTLY).to_bytes()

        assert data.startswith(b"HTTP/1.1 301 Moved Permanently\r\n")
        assert data.endswith(b"Content-Length: 0\r\n\r\n")

    def test_binary_body_untouched(self):
        """Test that binary bodies go out byte for byte."""
        body = bytes(range(256))
        data = HTTPResponse(status=HTTPStatus.OK, body=body).to_bytes()

        assert data.endswith(body)
        assert b"Content-Length: 256\r\n" in data

    def test_get_header(self):
        """Test case-insensitive header lookup."""
        response = HTTPResponse(headers=("Content-Type: text/html",))

        assert response.get_header("content-type") == "text/html"
        assert response.get_header("Location") is None

    def test_describe_binary(self):
        """Test that non-UTF-8 bodies are summarized in debug output."""
        response = HTTPResponse(status=HTTPStatus.OK, body=b"\xff\xfe")
        assert "Binary data" in response.describe()


class TestResponseBuilder:
    """Tests for ResponseBuilder class."""

    def test_fluent_interface(self):
        """Test method chaining."""
        response = (ResponseBuilder()
            .status(HTTPStatus.OK)
            .content_type("text/html; charset=utf-8")
            .body("<h1>hi</h1>")
            .build())

        assert response.status == HTTPStatus.OK
        assert response.status_text == "Success"
        assert response.get_header("Content-Type") == "text/html; charset=utf-8"
        assert response.body == b"<h1>hi</h1>"
        assert response.content_length == 11

    def test_header_replaced_in_place(self):
        """Test that setting a header twice keeps one line."""
        response = (ResponseBuilder()
            .header("X-A", "1")
            .header("Content-Type", "text/plain")
            .header("x-a", "2")
            .build())

        assert response.headers == ("x-a: 2", "Content-Type: text/plain")

    def test_redirect(self):
        """Test 301 with Location and an empty body."""
        response = ResponseBuilder().body("ignored").redirect("/docs/").build()

        assert response.status == HTTPStatus.MOVED_PERMANENTLY
        assert response.get_header("Location") == "/docs/"
        assert response.body == b""

    def test_version(self):
        """Test a non-default protocol version."""
        data = ResponseBuilder("HTTP/1.0").body("x").build().to_bytes()
        assert data.startswith(b"HTTP/1.0 200 Success\r\n")


class TestConvenienceFunctions:
    """Tests for response helpers."""

    @pytest.mark.parametrize("kind,status,text", [
        (ErrorKind.BAD_REQUEST, 400, "Bad Request"),
        (ErrorKind.NOT_FOUND, 404, "Not Found"),
        (ErrorKind.INTERNAL_SERVER_ERROR, 500, "Internal Server Error"),
        (ErrorKind.IM_A_TEAPOT, 418, "I'm a teapot"),
        (ErrorKind.NOT_IMPLEMENTED, 501, "Not Implemented"),
        (ErrorKind.HTTP_VERSION_NOT_SUPPORTED, 505, "HTTP Version Not Supported"),
    ])
    def test_error_response(self, kind, status, text):
        """Test that error bodies are the status text."""
        response = error_response(kind)

        assert response.status == status
        assert response.status_text == text
        assert response.body == text.encode()
        assert response.get_header("Content-Type") == "text/plain; charset=utf-8"

    def test_error_response_wire_format(self):
        """Test the full bytes of a 404."""
        assert error_response(ErrorKind.NOT_FOUND).to_bytes() == (
            b"HTTP/1.1 404 Not Found\r\n"
            b"Content-Type: text/plain; charset=utf-8\r\n"
            b"Content-Length: 9\r\n"
            b"\r\n"
            b"Not Found"
        )


class TestHTTPStatus:
    """Tests for HTTPStatus."""

    def test_phrases(self):
        assert HTTPStatus.OK.phrase == "Success"
        assert HTTPStatus.MOVED_PERMANENTLY.phrase == "Moved Permanently"

    def test_str_is_number(self):
        assert str(HTTPStatus.NOT_FOUND) == "404"

    def test_classes(self):
        assert HTTPStatus.OK.is_success
        assert HTTPStatus.MOVED_PERMANENTLY.is_redirect
        assert HTTPStatus.BAD_REQUEST.is_error
        assert not HTTPStatus.OK.is_error
