"""Encoders for telemetry events."""

from lineflux.core.encoding.line_protocol import (
    format,
    format_data,
    format_lines,
    format_schema,
    format_schema_chunk,
)

__all__ = [
    "format",
    "format_data",
    "format_lines",
    "format_schema",
    "format_schema_chunk",
]
