"""Errors raised by configuration and environment adapters. Request accessors never raise."""
from __future__ import annotations


class ReqviewError(Exception):
    """Base class for reqview errors."""


class ConfigError(ReqviewError, ValueError):
    """An environment value cannot be coerced into a Config field."""


class ContentTooLargeError(ReqviewError):
    """Request body is larger than Config.max_content_length."""

    def __init__(self, limit: int, size: int) -> None:
        super().__init__(f"Request body of {size} bytes exceeds limit of {limit} bytes")
        self.limit = limit
        self.size = size
