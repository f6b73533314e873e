"""lineflux - encode application telemetry events as line protocol.

Example:
    ```python
    from lineflux import EncoderConfig, format

    lines = format(event, EncoderConfig(prefix=["my", "service"]))
    ```
"""

from lineflux.adapters.logging import LineProtocolHandler
from lineflux.adapters.reporter import LineProtocolReporter, ReporterSettings
from lineflux.adapters.sinks import HttpSink, InMemorySink, UdpSink, create_sink
from lineflux.core.encoding.line_protocol import format, format_lines
from lineflux.core.events import error_event, log_event, request_event
from lineflux.core.formatters import (
    flatten,
    format_int,
    format_measurement,
    format_string,
    format_tag_kv,
    serialize,
)
from lineflux.core.models import (
    EncoderConfig,
    Event,
    FieldSpec,
    Schema,
    SplitLines,
    TagSpec,
)
from lineflux.core.ports import LineSinkPort
from lineflux.core.schemas import DEFAULT_SCHEMAS

__all__ = [
    "DEFAULT_SCHEMAS",
    "EncoderConfig",
    "Event",
    "FieldSpec",
    "HttpSink",
    "InMemorySink",
    "LineProtocolHandler",
    "LineProtocolReporter",
    "LineSinkPort",
    "ReporterSettings",
    "Schema",
    "SplitLines",
    "TagSpec",
    "UdpSink",
    "create_sink",
    "error_event",
    "flatten",
    "format",
    "format_int",
    "format_lines",
    "format_measurement",
    "format_string",
    "format_tag_kv",
    "log_event",
    "request_event",
    "serialize",
]
