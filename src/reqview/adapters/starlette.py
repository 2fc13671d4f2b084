"""Starlette adapter: snapshot a starlette Request (ASGI scope + body) into a reqview Request."""
from __future__ import annotations

import logging
from typing import Any, Awaitable, Callable

from starlette.datastructures import UploadFile
from starlette.exceptions import HTTPException
from starlette.requests import Request as StarletteRequest
from starlette.responses import Response

from reqview.core.config import Config
from reqview.core.errors import ContentTooLargeError
from reqview.core.headers import server_key_for_header
from reqview.core.request import Request

logger = logging.getLogger(__name__)

FORM_MEDIA_TYPES = ("application/x-www-form-urlencoded", "multipart/form-data")


def _server_from_scope(request: StarletteRequest) -> dict[str, Any]:
    """CGI-style server variables from the ASGI scope."""
    scope = request.scope
    query_string = scope.get("query_string", b"").decode("latin-1")
    raw_path = scope.get("raw_path")
    path = raw_path.decode("latin-1") if raw_path else scope.get("path", "/")
    server: dict[str, Any] = {
        "REQUEST_METHOD": request.method,
        "REQUEST_URI": f"{path}?{query_string}" if query_string else path,
        "QUERY_STRING": query_string,
        "PATH_INFO": scope.get("path", "/"),
        "SCRIPT_NAME": scope.get("root_path", ""),
        "SERVER_PROTOCOL": f"HTTP/{scope.get('http_version', '1.1')}",
    }
    if scope.get("server"):
        host, port = scope["server"]
        server["SERVER_NAME"] = host
        server["SERVER_PORT"] = str(port)
    if request.client is not None:
        server["REMOTE_ADDR"] = request.client.host
        server["REMOTE_PORT"] = str(request.client.port)
    for name, value in request.headers.items():
        server[server_key_for_header(name)] = value
    return server


def _check_length(size: int, config: Config) -> None:
    limit = config.max_content_length
    if limit is not None and size > limit:
        raise ContentTooLargeError(limit, size)


async def _read_body(request: StarletteRequest, config: Config) -> bytes:
    """Read the body chunk by chunk, stopping as soon as it passes the limit."""
    chunks: list[bytes] = []
    size = 0
    async for chunk in request.stream():
        size += len(chunk)
        _check_length(size, config)
        chunks.append(chunk)
    return b"".join(chunks)


def _replay(content: bytes) -> Callable[[], Awaitable[dict[str, Any]]]:
    """ASGI receive callable that hands back an already read body."""
    messages = [{"type": "http.request", "body": content, "more_body": False}]

    async def receive() -> dict[str, Any]:
        if messages:
            return messages.pop(0)
        return {"type": "http.disconnect"}

    return receive


async def from_starlette(request: StarletteRequest, config: Config | None = None) -> Request:
    """
    Build Request from a starlette Request. Reads the whole body once, bounded by
    config.max_content_length; urlencoded and multipart bodies are parsed with form() (python-multipart).
    UploadFile objects in files() stay open; close them with close_uploads().
    """
    config = config or Config()
    declared = request.headers.get("content-length")
    if declared and declared.isdigit():
        _check_length(int(declared), config)

    content = await _read_body(request, config)

    body: dict[str, Any] = {}
    files: dict[str, Any] = {}
    media_type = request.headers.get("content-type", "").split(";", 1)[0].strip().lower()
    if content and media_type in FORM_MEDIA_TYPES:
        form = await StarletteRequest(request.scope, _replay(content)).form()
        for key, value in form.multi_items():
            if isinstance(value, UploadFile):
                files[key] = value
            else:
                body[key] = value

    server = _server_from_scope(request)
    logger.debug(
        f"ASGI snapshot: {server['REQUEST_METHOD']} {server['REQUEST_URI']} "
        f"({len(body)} body fields, {len(files)} files, {len(content)} bytes)"
    )
    return Request(
        dict(request.query_params),
        body,
        server,
        dict(request.cookies),
        files,
        content,
    )


async def close_uploads(view: Request) -> None:
    """Close the UploadFile objects (and their spooled temp files) held by a Request."""
    for upload in view.files().values():
        if isinstance(upload, UploadFile):
            await upload.close()


def request_view(
    endpoint: Callable[[Request], Awaitable[Response]], config: Config | None = None
) -> Callable[[StarletteRequest], Awaitable[Response]]:
    """
    Wrap `async def endpoint(view: reqview.Request)` as a Starlette endpoint.
    Oversized bodies -> 413; uploads are closed once the endpoint returns.
    """

    async def wrapper(request: StarletteRequest) -> Response:
        try:
            view = await from_starlette(request, config)
        except ContentTooLargeError as e:
            raise HTTPException(status_code=413, detail=str(e)) from e
        try:
            return await endpoint(view)
        finally:
            await close_uploads(view)

    wrapper.__name__ = getattr(endpoint, "__name__", "endpoint")
    wrapper.__doc__ = endpoint.__doc__
    return wrapper
