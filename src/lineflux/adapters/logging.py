"""Python logging handler adapter for lineflux.

This adapter bridges Python's standard library logging module to a
LineProtocolReporter, turning log records into ``log`` events (or ``error``
events when a record carries exception info).
"""

import asyncio
import logging
from typing import Any

from lineflux.adapters.reporter import LineProtocolReporter
from lineflux.core.events import serialize_exception

logger = logging.getLogger(__name__)

# Records from lineflux's own loggers are never forwarded to the reporter
_OWN_LOGGER_PREFIX = "lineflux."

# Standard LogRecord attributes that should not be treated as extra fields
_STANDARD_LOGRECORD_ATTRS = frozenset(
    {
        "args",
        "asctime",
        "created",
        "exc_info",
        "exc_text",
        "filename",
        "funcName",
        "levelname",
        "levelno",
        "lineno",
        "message",
        "module",
        "msecs",
        "msg",
        "name",
        "pathname",
        "process",
        "processName",
        "relativeCreated",
        "stack_info",
        "taskName",
        "thread",
        "threadName",
    }
)


# Default attributes to extract from LogRecord
_DEFAULT_INCLUDE_ATTRS = ["module", "funcName", "lineno"]


class LineProtocolHandler(logging.Handler):
    """Logging handler that writes log records to a LineProtocolReporter.

    Example:
        ```python
        from lineflux import LineProtocolHandler, LineProtocolReporter

        reporter = LineProtocolReporter("udp://127.0.0.1:8089")
        logging.getLogger().addHandler(LineProtocolHandler(reporter))
        ```
    """

    def __init__(
        self,
        reporter: LineProtocolReporter,
        include_attrs: list[str] | None = None,
    ) -> None:
        """Initialize the handler with a reporter.

        Args:
            reporter: Reporter buffering the resulting events.
            include_attrs: LogRecord attributes copied into the event data.
                Defaults to ["module", "funcName", "lineno"].
        """
        super().__init__()
        self._reporter = reporter
        self._include_attrs = include_attrs or _DEFAULT_INCLUDE_ATTRS
        self._tasks: set[asyncio.Task[None]] = set()

    def to_event(self, record: logging.LogRecord) -> dict[str, Any]:
        """Convert a log record into an event mapping.

        Args:
            record: The log record to convert.

        Returns:
            A ``log`` event, or an ``error`` event when the record carries
            exception info.
        """
        attr_mapping: dict[str, str | int | float | bool] = {
            "module": record.name,
            "funcName": record.funcName or "",
            "lineno": record.lineno,
            "pathname": record.pathname,
        }
        data: dict[str, Any] = {"message": record.getMessage()}
        data.update(
            {key: attr_mapping[key] for key in self._include_attrs if key in attr_mapping}
        )

        # Add any extra attributes passed via logging call
        for key, value in record.__dict__.items():
            if key not in _STANDARD_LOGRECORD_ATTRS and isinstance(
                value, (str, int, float, bool)
            ):
                data[key] = value

        event: dict[str, Any] = {
            "event": "log",
            "timestamp": int(record.created * 1000),
            "pid": record.process,
            "tags": [record.levelname.lower(), record.name],
            "data": data,
        }

        if record.exc_info and record.exc_info[1] is not None:
            error = serialize_exception(record.exc_info[1])
            error.setdefault("data", data)
            event["event"] = "error"
            event["error"] = error
        return event

    def emit(self, record: logging.LogRecord) -> None:
        """Emit a log record to the reporter.

        Inside a running event loop the write is scheduled as a task on that
        loop; otherwise it runs to completion with ``asyncio.run``.

        Args:
            record: The log record to emit.
        """
        if record.name.startswith(_OWN_LOGGER_PREFIX):
            return
        try:
            event = self.to_event(record)
            try:
                loop = asyncio.get_running_loop()
            except RuntimeError:
                asyncio.run(self._reporter.write(event))
                return
            task = loop.create_task(self._reporter.write(event))
            self._tasks.add(task)
            task.add_done_callback(self._write_done)
        except Exception:
            self.handleError(record)

    def _write_done(self, task: "asyncio.Task[None]") -> None:
        self._tasks.discard(task)
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            logger.error("Failed to write log record", exc_info=exc)

    async def drain(self) -> None:
        """Wait for writes scheduled on the running loop to finish."""
        while self._tasks:
            await asyncio.gather(*self._tasks, return_exceptions=True)
