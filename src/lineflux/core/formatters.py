"""Value formatters producing wire-safe line protocol tokens.

Every formatter is pure and total over JSON-compatible input: unparseable
values come back as None instead of raising.
"""

import json
import math
import re
from collections.abc import Mapping, Sequence
from typing import Any
from urllib.parse import urlunsplit

from lineflux.core.models import EncoderConfig

CIRCULAR_REFERENCE = "...omitted (circular reference detected)..."

_NEWLINE_PATTERN = re.compile(r"\r\n|\n")


def _is_sequence(value: Any) -> bool:
    return isinstance(value, Sequence) and not isinstance(
        value, str | bytes | bytearray
    )


def _to_number(value: Any) -> int | float | None:
    """Coerce ints, finite floats and numeric strings; None otherwise."""
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return value if math.isfinite(value) else None
    if isinstance(value, str):
        text = value.strip()
        try:
            return int(text)
        except ValueError:
            pass
        try:
            number = float(text)
        except ValueError:
            return None
        return number if math.isfinite(number) else None
    return None


def _number_text(number: int | float) -> str:
    if isinstance(number, float) and number.is_integer():
        return str(int(number))
    return repr(number) if isinstance(number, float) else str(number)


def _decycle(value: Any, ancestors: tuple[int, ...]) -> Any:
    """Copy ``value`` into JSON-ready containers, replacing back-references."""
    if isinstance(value, Mapping) or _is_sequence(value):
        if id(value) in ancestors:
            return "[Circular]"
        chain = (*ancestors, id(value))
        if isinstance(value, Mapping):
            return {str(k): _decycle(v, chain) for k, v in value.items()}
        return [_decycle(item, chain) for item in value]
    return value


def _to_json(value: Any) -> str:
    return json.dumps(
        _decycle(value, ()), separators=(",", ":"), ensure_ascii=False, default=str
    )


def _text(value: Any, ancestors: tuple[int, ...] = ()) -> str:
    """Render a value the way it reads in a string field."""
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, int | float):
        return _number_text(value)
    if isinstance(value, Mapping):
        return _to_json(value)
    if _is_sequence(value):
        if id(value) in ancestors:
            return ""
        chain = (*ancestors, id(value))
        return ",".join("" if item is None else _text(item, chain) for item in value)
    return str(value)


def format_int(value: Any) -> str | None:
    """Format a value as an integer field (``42i``).

    Floats and numeric strings are truncated toward zero. Returns None for
    anything that does not parse as a number.
    """
    number = _to_number(value)
    if number is None:
        return None
    return f"{int(number)}i"


def format_float(value: Any) -> str | None:
    """Format a value as a bare numeric field, or None if unparseable."""
    number = _to_number(value)
    if number is None:
        return None
    return _number_text(number)


def format_typed(value: Any) -> str:
    """Format a value as an integer, float or string field, whichever parses."""
    number = _to_number(value)
    if number is None:
        return format_string(value)
    if isinstance(number, int) or number.is_integer():
        return f"{int(number)}i"
    return _number_text(number)


def format_timestamp(milliseconds: Any) -> str | None:
    """Convert a millisecond timestamp to the nanosecond wire token."""
    number = _to_number(milliseconds)
    if number is None:
        return None
    return f"{int(number)}000000"


def format_string(value: Any) -> str:
    """Format a value as a double-quoted string field.

    Mappings are serialized to JSON first, sequences are joined with ``,``.
    Embedded quotes and newlines are escaped.
    """
    text = _text(value).replace('"', '\\"')
    text = _NEWLINE_PATTERN.sub("\\\\n", text)
    return f'"{text}"'


def format_url(value: Any) -> str:
    """Format a URL string, or a mapping of URL parts, as a string field."""
    if isinstance(value, Mapping):
        netloc = value.get("host") or value.get("netloc")
        if not netloc and value.get("hostname"):
            port = value.get("port")
            netloc = f"{value['hostname']}:{port}" if port else value["hostname"]
        scheme = str(value.get("protocol") or value.get("scheme") or "").rstrip(":")
        value = urlunsplit(
            (
                scheme,
                netloc or "",
                value.get("pathname") or value.get("path") or "",
                str(value.get("search") or value.get("query") or "").lstrip("?"),
                str(value.get("hash") or value.get("fragment") or "").lstrip("#"),
            )
        )
    return format_string(value)


def format_measurement(name: str) -> str:
    """Escape commas and spaces in a measurement name."""
    return name.replace(",", "\\,").replace(" ", "\\ ")


def format_tag_kv(value: Any) -> str:
    """Escape commas, equals signs and spaces in a tag key or value."""
    return _text(value).replace(",", "\\,").replace("=", "\\=").replace(" ", "\\ ")


def flatten(
    data: Any,
    prefix: str = "data",
    _ancestors: tuple[int, ...] = (),
) -> dict[str, str]:
    """Flatten nested mappings into dotted keys mapped to formatted values.

    Args:
        data: Any value; only mappings are recursed into.
        prefix: Key for ``data`` itself, and the root of nested keys.

    Returns:
        Flat mapping of dotted key paths to wire tokens. None leaves are
        omitted; a mapping that references one of its ancestors is replaced
        by a circular reference marker.
    """
    if data is None:
        return {}
    if isinstance(data, Mapping):
        if id(data) in _ancestors:
            return {prefix: format_string(CIRCULAR_REFERENCE)}
        chain = (*_ancestors, id(data))
        result: dict[str, str] = {}
        for key, value in data.items():
            path = f"{prefix}.{key}" if prefix else str(key)
            result.update(flatten(value, path, chain))
        return result
    if _is_sequence(data):
        return {prefix: format_string(data)}
    if isinstance(data, int | float) and not isinstance(data, bool):
        number = _to_number(data)
        if number is None:
            return {prefix: format_string(data)}
        if isinstance(number, int) or number.is_integer():
            return {prefix: f"{int(number)}i"}
        return {prefix: _number_text(number)}
    return {prefix: format_string(data)}


def serialize(values: Mapping[str, Any]) -> str:
    """Join a mapping as ``key=value`` pairs separated by commas."""
    return ",".join(f"{key}={value}" for key, value in values.items())


def measurement_prefix(config: EncoderConfig | None = None) -> str:
    """Return the measurement prefix configured in ``config``.

    A string prefix is used verbatim. A sequence of segments is joined with
    the delimiter and gets a trailing delimiter.
    """
    if config is None:
        return ""
    prefix = config.prefix
    if isinstance(prefix, str):
        return prefix
    if _is_sequence(prefix):
        delimiter = config.prefix_delimiter
        if not isinstance(delimiter, str):
            delimiter = "/"
        return delimiter.join(str(segment) for segment in prefix) + delimiter
    return ""
