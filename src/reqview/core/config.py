"""Single config object for environment adapters: pass it to from_wsgi / from_starlette."""
from __future__ import annotations

import codecs
import dataclasses
import os
from dataclasses import dataclass
from typing import Any

from reqview.core.errors import ConfigError


@dataclass(frozen=True)
class Config:
    """
    Adapter config. charset decodes urlencoded bodies;
    max_content_length (bytes) bounds the body an adapter will read, None = no limit.
    """

    charset: str = "utf-8"
    max_content_length: int | None = None

    def __post_init__(self) -> None:
        try:
            codecs.lookup(self.charset)
        except LookupError as e:
            raise ConfigError(f"Unknown charset {self.charset!r}") from e
        if self.max_content_length is not None and self.max_content_length < 0:
            raise ConfigError(f"max_content_length must be >= 0, got {self.max_content_length}")

    @classmethod
    def load_from_env(cls, prefix: str = "REQVIEW_", **defaults: Any) -> dict[str, Any]:
        """Load from os.environ with prefix and defaults. Returns raw dict (values are strings)."""
        result = dict(defaults)
        for key, value in os.environ.items():
            if key.startswith(prefix):
                name = key[len(prefix):].lower()
                result[name] = value
        return result


def _coerce_length(value: Any) -> int | None:
    if value is None or value == "":
        return None
    try:
        length = int(value)
    except (TypeError, ValueError) as e:
        raise ConfigError(f"max_content_length must be an integer, got {value!r}") from e
    if length < 0:
        raise ConfigError(f"max_content_length must be >= 0, got {length}")
    return length


def load_config_from_env(prefix: str = "REQVIEW_", **defaults: Any) -> Config:
    """
    Build Config from env vars: REQVIEW_CHARSET, REQVIEW_MAX_CONTENT_LENGTH.
    Unknown keys are ignored; empty REQVIEW_MAX_CONTENT_LENGTH means no limit.
    """
    raw = Config.load_from_env(prefix, **defaults)
    known = {f.name for f in dataclasses.fields(Config)}
    values = {k: v for k, v in raw.items() if k in known}
    if "max_content_length" in values:
        values["max_content_length"] = _coerce_length(values["max_content_length"])
    if "charset" in values:
        values["charset"] = str(values["charset"]).strip() or Config.charset
    return Config(**values)
