"""Value transforms shared by the built-in schemas."""

from collections.abc import Mapping
from typing import Any


def upper(value: Any) -> str:
    return str(value).upper()


def query_string(value: Any) -> Any:
    """Render a query mapping as ``k1=v1&k2=v2``; other values pass through."""
    if not isinstance(value, Mapping):
        return value
    return "&".join(f"{key}={item}" for key, item in value.items())
