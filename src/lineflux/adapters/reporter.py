"""Batching reporter that encodes events and hands them to a sink."""

import asyncio
import dataclasses
import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from lineflux.adapters.sinks import create_sink
from lineflux.core.encoding.line_protocol import format_lines
from lineflux.core.models import EncoderConfig, Event, SchemaRegistry
from lineflux.core.ports import LineSinkPort

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ReporterSettings:
    """Batching and transport settings.

    Attributes:
        threshold: Number of buffered events that triggers a flush.
        timeout: HTTP request timeout in seconds.
        headers: Extra HTTP headers. ``content-type`` is always overridden.
        udp_type: ``udp4`` or ``udp6`` for UDP endpoints.
        error_threshold: Consecutive failed flushes tolerated before the
            buffered events are dropped and the error is raised. None
            drops failed batches without ever raising.
    """

    threshold: int = 20
    timeout: float = 60.0
    headers: Mapping[str, str] = field(default_factory=dict)
    udp_type: str = "udp4"
    error_threshold: int | None = 0

    def __post_init__(self) -> None:
        if self.threshold < 1:
            raise ValueError(f"threshold must be >= 1, got {self.threshold}")
        if self.error_threshold is not None and self.error_threshold < 0:
            raise ValueError(
                f"error_threshold must be >= 0 or None, got {self.error_threshold}"
            )


class LineProtocolReporter:
    """Buffers events and flushes them as line protocol batches.

    A flush happens when ``threshold`` events are buffered and on
    ``close()``. At most one send is in flight at a time. A failed send keeps
    the events buffered for up to ``error_threshold`` consecutive failures;
    after that they are dropped.

    Example:
        ```python
        reporter = LineProtocolReporter("udp://127.0.0.1:8089")
        async with reporter:
            await reporter.write(log_event("Things are good", ["info"]))
        ```
    """

    def __init__(
        self,
        sink: LineSinkPort | str,
        config: EncoderConfig | Mapping[str, Any] | None = None,
        settings: ReporterSettings | None = None,
        schemas: SchemaRegistry | None = None,
    ) -> None:
        """Initialize the reporter.

        Args:
            sink: A LineSinkPort, or an endpoint URL passed to create_sink.
            config: Encoder options. A missing ``host`` is filled with the
                machine hostname.
            settings: Batching and transport settings.
            schemas: Schema registry overriding the built-in one.
        """
        self._settings = settings or ReporterSettings()
        if isinstance(sink, str):
            sink = create_sink(
                sink,
                headers=self._settings.headers,
                timeout=self._settings.timeout,
                udp_type=self._settings.udp_type,
            )
        self._sink = sink
        if not isinstance(config, EncoderConfig):
            config = EncoderConfig.from_mapping(config)
        if config.host is None:
            config = dataclasses.replace(config, host=EncoderConfig.default_host())
        self.config = config
        self._schemas = schemas
        self._buffer: list[Event] = []
        self._lock: asyncio.Lock | None = None
        self._failure_count = 0

    def _get_lock(self) -> asyncio.Lock:
        """Get or create the send lock (lazy to avoid event loop issues)."""
        if self._lock is None:
            self._lock = asyncio.Lock()
        return self._lock

    @property
    def pending(self) -> int:
        """Number of buffered events not yet sent."""
        return len(self._buffer)

    async def write(self, event: Event) -> None:
        """Buffer an event, flushing once the threshold is reached."""
        self._buffer.append(event)
        if len(self._buffer) >= self._settings.threshold:
            await self.flush()

    async def flush(self) -> None:
        """Encode and send every buffered event.

        A failure below ``error_threshold`` is logged and the events stay
        buffered for the next flush. Once the threshold is reached the
        events are dropped and the error is raised, unless the threshold is
        None, in which case the error is only logged.

        Raises:
            Exception: Whatever the sink raised, once ``error_threshold``
                consecutive failures have been tolerated.
        """
        async with self._get_lock():
            if not self._buffer:
                return
            events = list(self._buffer)
            payload = format_lines(events, self.config, self._schemas)
            if payload:
                try:
                    await self._sink.send(payload)
                except Exception:
                    logger.exception("Failed to send %d buffered events", len(events))
                    error_threshold = self._settings.error_threshold
                    if (
                        error_threshold is not None
                        and self._failure_count < error_threshold
                    ):
                        self._failure_count += 1
                        return
                    del self._buffer[: len(events)]
                    self._failure_count = 0
                    if error_threshold is None:
                        return
                    raise
                logger.debug("Flushed %d events (%d bytes)", len(events), len(payload))
            del self._buffer[: len(events)]
            self._failure_count = 0

    async def close(self) -> None:
        """Flush whatever is left in the buffer."""
        await self.flush()

    async def __aenter__(self) -> "LineProtocolReporter":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.close()
