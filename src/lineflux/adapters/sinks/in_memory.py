"""In-memory sink capturing payloads."""


class InMemorySink:
    """In-memory implementation of LineSinkPort.

    Keeps every payload in a list. Suitable for testing and for wiring a
    reporter before a real endpoint is available.
    """

    def __init__(self) -> None:
        self.payloads: list[str] = []

    async def send(self, payload: str) -> None:
        """Record a payload."""
        self.payloads.append(payload)

    @property
    def lines(self) -> list[str]:
        """All received lines, across payloads."""
        return [line for payload in self.payloads for line in payload.split("\n")]
