"""Tests for the Starlette adapter and endpoint wrapper."""

import asyncio

import pytest
from starlette.applications import Starlette
from starlette.datastructures import UploadFile
from starlette.requests import Request as StarletteRequest
from starlette.responses import JSONResponse
from starlette.routing import Route
from starlette.testclient import TestClient

from reqview import Config, ContentTooLargeError, from_starlette, request_view


def make_request(method="GET", path="/", query_string=b"", headers=None, body=b""):
    """Build a starlette Request from a hand-made ASGI scope."""
    raw_headers = [(k.lower().encode("latin-1"), v.encode("latin-1")) for k, v in (headers or {}).items()]
    if body:
        raw_headers.append((b"content-length", str(len(body)).encode("latin-1")))
    scope = {
        "type": "http",
        "http_version": "1.1",
        "method": method,
        "scheme": "http",
        "path": path,
        "raw_path": path.encode("latin-1"),
        "root_path": "",
        "query_string": query_string,
        "headers": raw_headers,
        "server": ("testserver", 80),
        "client": ("127.0.0.1", 54321),
    }
    messages = [{"type": "http.request", "body": body, "more_body": False}]

    async def receive():
        if messages:
            return messages.pop(0)
        return {"type": "http.disconnect"}

    return StarletteRequest(scope, receive)


def snapshot(request, config=None):
    return asyncio.run(from_starlette(request, config))


class TestFromStarlette:
    """Tests for from_starlette."""

    def test_server_variables(self):
        """Test the scope becomes CGI-style server variables."""
        request = snapshot(
            make_request(
                "POST",
                "/users",
                b"active=1",
                headers={"X-Requested-With": "XMLHttpRequest", "Authorization": "Bearer abc123"},
            )
        )
        assert request.server("REQUEST_METHOD") == "POST"
        assert request.uri() == "/users?active=1"
        assert request.path() == "/users"
        assert request.server("SERVER_NAME") == "testserver"
        assert request.server("SERVER_PORT") == "80"
        assert request.server("REMOTE_ADDR") == "127.0.0.1"
        assert request.server("SERVER_PROTOCOL") == "HTTP/1.1"
        assert request.server("HTTP_X_REQUESTED_WITH") == "XMLHttpRequest"
        assert request.is_ajax()
        assert request.bearer_token() == "abc123"
        assert request.query("active") == "1"

    def test_json_body(self):
        """Test a JSON body is available through json() and input()."""
        body = b'{"title": "Hello", "count": 3}'
        request = snapshot(
            make_request("POST", "/", headers={"Content-Type": "application/json"}, body=body)
        )
        assert request.server("CONTENT_TYPE") == "application/json"
        assert request.header("Content-Length") == str(len(body))
        assert request.content() == body
        assert request.json() == {"title": "Hello", "count": 3}
        assert request.input("title") == "Hello"

    def test_urlencoded_form(self):
        """Test urlencoded fields become body fields, including _method."""
        request = snapshot(
            make_request(
                "POST",
                "/",
                b"name=query",
                headers={"Content-Type": "application/x-www-form-urlencoded"},
                body=b"name=Alice&_method=delete",
            )
        )
        assert request.request("name") == "Alice"
        assert request.query("name") == "query"
        assert request.input("name") == "Alice"
        assert request.all()["name"] == "Alice"
        assert request.method() == "DELETE"

    def test_multipart_upload(self):
        """Test multipart files are passed through as UploadFile objects."""
        boundary = "boundary123"
        body = (
            f"--{boundary}\r\n"
            'Content-Disposition: form-data; name="title"\r\n\r\n'
            "Report\r\n"
            f"--{boundary}\r\n"
            'Content-Disposition: form-data; name="doc"; filename="a.txt"\r\n'
            "Content-Type: text/plain\r\n\r\n"
            "hello\r\n"
            f"--{boundary}--\r\n"
        ).encode("latin-1")
        request = snapshot(
            make_request(
                "POST",
                "/upload",
                headers={"Content-Type": f"multipart/form-data; boundary={boundary}"},
                body=body,
            )
        )
        assert request.request("title") == "Report"
        upload = request.file("doc")
        assert isinstance(upload, UploadFile)
        assert upload.filename == "a.txt"
        assert list(request.files()) == ["doc"]

    def test_cookies(self):
        """Test cookies are copied from the starlette request."""
        request = snapshot(make_request(headers={"Cookie": "sid=abc; theme=dark"}))
        assert request.cookie("sid") == "abc"
        assert dict(request.cookies()) == {"sid": "abc", "theme": "dark"}

    def test_content_too_large(self):
        """Test the configured limit is enforced before parsing."""
        with pytest.raises(ContentTooLargeError):
            snapshot(make_request("POST", body=b"0123456789"), Config(max_content_length=4))


async def echo(view):
    return JSONResponse(
        {
            "method": view.method(),
            "path": view.path(),
            "input": view.all(),
            "token": view.bearer_token(),
        }
    )


@pytest.fixture
def client():
    app = Starlette(
        routes=[
            Route("/echo", request_view(echo), methods=["GET", "POST", "PUT"]),
            Route("/small", request_view(echo, Config(max_content_length=8)), methods=["POST"]),
        ]
    )
    return TestClient(app)


class TestRequestView:
    """Tests for the request_view endpoint wrapper."""

    def test_endpoint_receives_view(self, client):
        """Test the wrapped endpoint gets a reqview Request."""
        response = client.post(
            "/echo?page=1",
            json={"title": "Hello"},
            headers={"Authorization": "Bearer t0k", "X-HTTP-Method-Override": "put"},
        )
        assert response.status_code == 200
        assert response.json() == {
            "method": "PUT",
            "path": "/echo",
            "input": {"page": "1", "title": "Hello"},
            "token": "t0k",
        }

    def test_oversized_body_is_413(self, client):
        """Test ContentTooLargeError becomes a 413 response."""
        response = client.post("/small", content=b"0123456789")
        assert response.status_code == 413

    def test_multipart_upload_is_closed_after_endpoint(self):
        """Test uploads handed to the endpoint are closed once it returns."""
        seen = []

        async def keep(view):
            upload = view.file("doc")
            seen.append((upload, upload.file.closed))
            return JSONResponse({"name": upload.filename})

        app = Starlette(routes=[Route("/upload", request_view(keep), methods=["POST"])])
        response = TestClient(app).post("/upload", files={"doc": ("a.txt", b"hello", "text/plain")})
        assert response.status_code == 200
        assert response.json() == {"name": "a.txt"}
        upload, closed_during_call = seen[0]
        assert closed_during_call is False
        assert upload.file.closed


class TestChunkedBodyLimit:
    """Tests for the body limit on requests without Content-Length."""

    def test_stops_reading_once_limit_passed(self):
        """Test chunks past the limit are never pulled from the client."""
        scope = {
            "type": "http",
            "http_version": "1.1",
            "method": "POST",
            "path": "/",
            "query_string": b"",
            "headers": [(b"transfer-encoding", b"chunked")],
        }
        chunks = [b"01234", b"56789", b"abcde", b"fghij"]
        messages = [{"type": "http.request", "body": c, "more_body": True} for c in chunks]
        messages[-1]["more_body"] = False

        async def receive():
            return messages.pop(0)

        with pytest.raises(ContentTooLargeError) as exc_info:
            snapshot(StarletteRequest(scope, receive), Config(max_content_length=7))
        assert exc_info.value.size == 10
        assert len(messages) == 2

    def test_chunked_body_within_limit(self):
        """Test a chunked body under the limit is joined whole."""
        scope = {
            "type": "http",
            "http_version": "1.1",
            "method": "POST",
            "path": "/",
            "query_string": b"",
            "headers": [(b"content-type", b"application/x-www-form-urlencoded")],
        }
        messages = [
            {"type": "http.request", "body": b"name=Al", "more_body": True},
            {"type": "http.request", "body": b"ice", "more_body": False},
        ]

        async def receive():
            return messages.pop(0)

        request = snapshot(StarletteRequest(scope, receive), Config(max_content_length=64))
        assert request.content() == b"name=Alice"
        assert request.request("name") == "Alice"
