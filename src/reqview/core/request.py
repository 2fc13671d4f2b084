"""Read-only request object: one view over query, body fields, JSON body, headers, cookies and files."""
from __future__ import annotations

import json
import logging
from types import MappingProxyType
from typing import Any, Iterable, Mapping
from urllib.parse import urlsplit

from reqview.core.headers import parse_headers_from_server
from reqview.core.types import FileDescriptor, JsonValue

logger = logging.getLogger(__name__)

JSON_MEDIA_TYPE = "application/json"


def _reject_constant(name: str) -> Any:
    raise ValueError(f"{name} is not valid JSON")


def _frozen(data: Mapping[str, Any] | None) -> Mapping[str, Any]:
    return MappingProxyType(dict(data or {}))


class Request:
    """
    Request built from a snapshot of raw inputs; nothing mutates it after construction.
    Lookups: input() checks body, then query, then JSON body.
    all() layers query, body, JSON body, later layers overwriting earlier ones.
    """

    def __init__(
        self,
        query: Mapping[str, JsonValue] | None = None,
        body: Mapping[str, JsonValue] | None = None,
        server: Mapping[str, Any] | None = None,
        cookies: Mapping[str, str] | None = None,
        files: Mapping[str, FileDescriptor] | None = None,
        content: bytes | str | None = None,
    ) -> None:
        self._query = _frozen(query)
        self._body = _frozen(body)
        self._server = _frozen(server)
        self._cookies = _frozen(cookies)
        self._files = _frozen(files)
        self._content = content
        self._headers = MappingProxyType(parse_headers_from_server(self._server))

    def __repr__(self) -> str:
        return f"<Request {self.method()} {self.uri()}>"

    # Inputs

    def query(self, key: str, default: Any = None) -> Any:
        """Query string value by name."""
        value = self._query.get(key)
        return default if value is None else value

    def request(self, key: str, default: Any = None) -> Any:
        """Submitted body (form) field by name."""
        value = self._body.get(key)
        return default if value is None else value

    def input(self, key: str, default: Any = None) -> Any:
        """Value from body, query string or JSON body, in that order. Presence decides, not truthiness."""
        if key in self._body:
            return self._body[key]
        if key in self._query:
            return self._query[key]
        data = self.json()
        if isinstance(data, dict) and key in data:
            return data[key]
        return default

    def all(self) -> dict[str, Any]:
        """Merged inputs: query, then body, then JSON body; later sources overwrite earlier ones."""
        merged = dict(self._query)
        merged.update(self._body)
        data = self.json()
        if isinstance(data, dict):
            merged.update(data)
        return merged

    def only(self, keys: Iterable[str]) -> dict[str, Any]:
        """Subset of all() with the given keys. Missing keys are left out."""
        wanted = set(keys)
        return {k: v for k, v in self.all().items() if k in wanted}

    def except_(self, keys: Iterable[str]) -> dict[str, Any]:
        """all() without the given keys."""
        unwanted = set(keys)
        return {k: v for k, v in self.all().items() if k not in unwanted}

    @property
    def query_params(self) -> Mapping[str, JsonValue]:
        return self._query

    @property
    def form_params(self) -> Mapping[str, JsonValue]:
        return self._body

    # Server and headers

    def server(self, key: str, default: Any = None) -> Any:
        value = self._server.get(key)
        return default if value is None else value

    def header(self, key: str, default: Any = None) -> Any:
        """Header by name, case-insensitive."""
        value = self._headers.get(key.lower())
        return default if value is None else value

    def headers(self) -> Mapping[str, Any]:
        return self._headers

    def cookie(self, key: str, default: Any = None) -> Any:
        value = self._cookies.get(key)
        return default if value is None else value

    def cookies(self) -> Mapping[str, str]:
        return self._cookies

    # Method, URI, body

    def method(self) -> str:
        """Effective method: _method body field, else X-HTTP-Method-Override, else REQUEST_METHOD."""
        method = self.server("REQUEST_METHOD", "GET")
        override = self.request("_method")
        if override is None:
            override = self.header("x-http-method-override")
        if override:
            return str(override).upper()
        return str(method).upper()

    def uri(self) -> str:
        return self.server("REQUEST_URI", "/") or "/"

    def path(self) -> str:
        try:
            path = urlsplit(str(self.uri())).path
        except ValueError:
            return "/"
        return path or "/"

    def content(self) -> bytes | str | None:
        return self._content

    def json(self) -> JsonValue:
        """
        Decoded JSON body when the content type is application/json.
        None when the content type differs, the body is empty, or it is not valid JSON.
        """
        if not self.is_json():
            return None
        raw = self._content
        if raw is None or len(raw) == 0:
            return None
        try:
            return json.loads(raw, parse_constant=_reject_constant)
        except (ValueError, TypeError, RecursionError) as e:
            logger.debug(f"Ignoring undecodable JSON body: {e}")
            return None

    # Files

    def file(self, key: str) -> FileDescriptor | None:
        return self._files.get(key)

    def files(self) -> Mapping[str, FileDescriptor]:
        return self._files

    # Predicates

    def is_ajax(self) -> bool:
        """X-Requested-With is XMLHttpRequest (any case)."""
        return str(self.header("x-requested-with", "")).lower() == "xmlhttprequest"

    def is_json(self) -> bool:
        return JSON_MEDIA_TYPE in str(self.header("content-type", ""))

    def bearer_token(self) -> str | None:
        """Token from 'Authorization: Bearer <token>'; scheme matched case-insensitively."""
        auth = self.header("authorization")
        if not auth:
            return None
        auth = str(auth)
        if auth.lower().startswith("bearer "):
            return auth[7:]
        return None
