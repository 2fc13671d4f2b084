"""
reqview — one read-only view over an HTTP request's query, body, JSON body, headers, cookies and files.
Adapters snapshot WSGI environs or Starlette requests into a Request.
"""
from reqview.core import (
    Config,
    ConfigError,
    ContentTooLargeError,
    Request,
    ReqviewError,
    load_config_from_env,
)
from reqview.adapters import close_uploads, from_starlette, from_wsgi, request_view

__all__ = [
    "Request",
    "Config",
    "load_config_from_env",
    "ReqviewError",
    "ConfigError",
    "ContentTooLargeError",
    "from_wsgi",
    "from_starlette",
    "request_view",
    "close_uploads",
]
