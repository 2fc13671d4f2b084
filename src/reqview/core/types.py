"""Loosely typed transport values."""
from __future__ import annotations

from typing import Any, Mapping, Sequence, Union

# Query/body/header values arrive as loosely typed transport data.
JsonValue = Union[str, int, float, bool, None, Mapping[str, Any], Sequence[Any]]

# Uploaded file descriptor: opaque, passed through untouched.
FileDescriptor = Any
