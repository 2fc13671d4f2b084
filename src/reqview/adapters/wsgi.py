"""WSGI adapter: snapshot a PEP 3333 environ into a Request."""
from __future__ import annotations

import logging
from http.cookies import CookieError, SimpleCookie
from typing import Any, Mapping
from urllib.parse import parse_qsl, quote

from reqview.core.config import Config
from reqview.core.errors import ContentTooLargeError
from reqview.core.request import Request

logger = logging.getLogger(__name__)

FORM_MEDIA_TYPE = "application/x-www-form-urlencoded"


def _request_uri(environ: Mapping[str, Any]) -> str:
    """REQUEST_URI as sent by the client; rebuilt from SCRIPT_NAME/PATH_INFO/QUERY_STRING if missing."""
    uri = environ.get("REQUEST_URI") or environ.get("RAW_URI")
    if uri:
        return uri
    path = environ.get("SCRIPT_NAME", "") + environ.get("PATH_INFO", "")
    uri = quote(path, encoding="latin-1") or "/"
    query = environ.get("QUERY_STRING", "")
    return f"{uri}?{query}" if query else uri


def _read_content(environ: Mapping[str, Any], config: Config) -> bytes:
    try:
        length = int(environ.get("CONTENT_LENGTH") or 0)
    except ValueError:
        length = 0
    if length <= 0:
        return b""
    limit = config.max_content_length
    if limit is not None and length > limit:
        raise ContentTooLargeError(limit, length)
    stream = environ.get("wsgi.input")
    if stream is None:
        return b""
    return stream.read(length)


def _parse_cookies(header: str) -> dict[str, str]:
    if not header:
        return {}
    jar: SimpleCookie = SimpleCookie()
    try:
        jar.load(header)
    except CookieError as e:
        logger.warning(f"Dropping malformed Cookie header: {e}")
        return {}
    return {name: morsel.value for name, morsel in jar.items()}


def from_wsgi(environ: Mapping[str, Any], config: Config | None = None) -> Request:
    """
    Build Request from a WSGI environ. Reads the body once (bounded by CONTENT_LENGTH).
    Urlencoded bodies become body fields; multipart is not parsed, so files is always empty.
    """
    config = config or Config()
    server = {k: v for k, v in environ.items() if isinstance(v, str)}
    server["REQUEST_URI"] = _request_uri(environ)

    query = dict(parse_qsl(environ.get("QUERY_STRING", ""), keep_blank_values=True))
    content = _read_content(environ, config)

    body: dict[str, str] = {}
    content_type = environ.get("CONTENT_TYPE", "")
    if content and content_type.split(";", 1)[0].strip().lower() == FORM_MEDIA_TYPE:
        body = dict(
            parse_qsl(
                content.decode(config.charset, errors="replace"),
                keep_blank_values=True,
                encoding=config.charset,
            )
        )

    cookies = _parse_cookies(environ.get("HTTP_COOKIE", ""))
    logger.debug(
        f"WSGI snapshot: {server.get('REQUEST_METHOD', 'GET')} {server['REQUEST_URI']} "
        f"({len(query)} query, {len(body)} body fields, {len(content)} bytes)"
    )
    return Request(query, body, server, cookies, {}, content)
