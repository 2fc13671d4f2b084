"""Header normalization from a flat CGI/WSGI-style server variable map."""
from __future__ import annotations

from typing import Any, Mapping

HEADER_PREFIX = "HTTP_"

# Entries commonly supplied without the HTTP_ prefix.
UNPREFIXED_HEADERS = {
    "CONTENT_TYPE": "content-type",
    "CONTENT_LENGTH": "content-length",
}


def normalize_header_name(name: str) -> str:
    """HTTP_X_REQUESTED_WITH -> x-requested-with (prefix already stripped or not)."""
    if name.startswith(HEADER_PREFIX):
        name = name[len(HEADER_PREFIX):]
    return name.lower().replace("_", "-")


def parse_headers_from_server(server: Mapping[str, Any]) -> dict[str, Any]:
    """
    Build lowercase, dash-separated header map from server variables.
    Takes every HTTP_* entry, then CONTENT_TYPE / CONTENT_LENGTH.
    On name collision the later entry wins.
    """
    headers: dict[str, Any] = {}
    for key, value in server.items():
        if isinstance(key, str) and key.startswith(HEADER_PREFIX):
            headers[normalize_header_name(key)] = value

    for key, name in UNPREFIXED_HEADERS.items():
        if server.get(key) is not None:
            headers[name] = server[key]
    return headers


def server_key_for_header(name: str) -> str:
    """Inverse of normalize_header_name: content-type -> CONTENT_TYPE, x-foo -> HTTP_X_FOO."""
    key = name.upper().replace("-", "_")
    if key in UNPREFIXED_HEADERS:
        return key
    return HEADER_PREFIX + key
