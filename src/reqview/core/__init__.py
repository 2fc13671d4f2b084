from reqview.core.request import Request
from reqview.core.headers import parse_headers_from_server
from reqview.core.config import Config, load_config_from_env
from reqview.core.errors import ConfigError, ContentTooLargeError, ReqviewError

__all__ = [
    "Request",
    "parse_headers_from_server",
    "Config",
    "load_config_from_env",
    "ReqviewError",
    "ConfigError",
    "ContentTooLargeError",
]
