"""Port interfaces for line protocol sinks.

Sinks receive already-encoded, newline-joined line protocol text. The core
encoder depends on nothing here; reporters depend only on this protocol.
"""

from typing import Protocol, runtime_checkable


@runtime_checkable
class LineSinkPort(Protocol):
    """Port for delivering a batch of line protocol text.

    Examples: HttpSink, UdpSink, InMemorySink.
    """

    async def send(self, payload: str) -> None:
        """Deliver one flushed batch.

        Args:
            payload: Lines joined with ``\\n``, no trailing newline.
        """
        ...
