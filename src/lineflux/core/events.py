"""Helper functions for building telemetry events.

Events are plain dicts so they can be handed straight to the encoder.
Timestamps are captured in milliseconds since the epoch.
"""

import os
import time
import traceback
from typing import Any


def _now_ms() -> int:
    return round(time.time() * 1000)


def serialize_exception(exc: BaseException) -> dict[str, Any]:
    """Convert an exception into the structured error object of error events.

    Args:
        exc: The exception to describe.

    Returns:
        Mapping with ``name``, ``message`` and ``stack``, plus ``data`` when
        the exception carries a ``data`` attribute.
    """
    error: dict[str, Any] = {
        "name": type(exc).__name__,
        "message": str(exc),
        "stack": "".join(
            traceback.format_exception(type(exc), exc, exc.__traceback__)
        ),
    }
    data = getattr(exc, "data", None)
    if data is not None:
        error["data"] = data
    return error


def log_event(
    data: Any,
    tags: list[str] | None = None,
    **extra: Any,
) -> dict[str, Any]:
    """Create a ``log`` event with automatic timestamp and pid.

    Args:
        data: Log payload, a message string or a structured mapping.
        tags: Optional tags (e.g. ``["info", "request"]``).
        **extra: Additional event attributes (``host``, ...).

    Returns:
        Event dict ready for encoding.
    """
    return {
        "event": "log",
        "timestamp": _now_ms(),
        "pid": os.getpid(),
        "tags": tags or [],
        "data": data,
        **extra,
    }


def error_event(
    exc: BaseException,
    tags: list[str] | None = None,
    **extra: Any,
) -> dict[str, Any]:
    """Create an ``error`` event describing ``exc``.

    Args:
        exc: The exception being reported.
        tags: Optional tags.
        **extra: Additional event attributes (``id``, ``url``, ``method``...).

    Returns:
        Event dict ready for encoding.
    """
    return {
        "event": "error",
        "timestamp": _now_ms(),
        "pid": os.getpid(),
        "tags": tags or [],
        "error": serialize_exception(exc),
        **extra,
    }


def request_event(
    data: Any,
    method: str,
    path: str,
    request_id: str | None = None,
    tags: list[str] | None = None,
    **extra: Any,
) -> dict[str, Any]:
    """Create a ``request`` event for a log emitted while serving a request."""
    event: dict[str, Any] = {
        "event": "request",
        "timestamp": _now_ms(),
        "pid": os.getpid(),
        "tags": tags or [],
        "data": data,
        "method": method,
        "path": path,
        **extra,
    }
    if request_id is not None:
        event["id"] = request_id
    return event
