"""HTTP sink posting line protocol batches with httpx."""

import logging
from collections.abc import Mapping

import httpx

logger = logging.getLogger(__name__)

CONTENT_TYPE = "text/plain"


class HttpSink:
    """HTTP implementation of LineSinkPort.

    Each batch is sent as one POST request. The content type is always
    ``text/plain``, whatever the configured headers say.

    Args:
        url: Write endpoint (e.g. ``http://localhost:8086/write?db=app``).
        headers: Extra request headers.
        timeout: Request timeout in seconds.
        transport: Optional httpx transport, used by tests.
    """

    def __init__(
        self,
        url: str,
        headers: Mapping[str, str] | None = None,
        timeout: float = 60.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.url = url
        self._headers = dict(headers or {})
        self._timeout = timeout
        self._transport = transport

    async def send(self, payload: str) -> None:
        """POST the payload, raising httpx.HTTPError on failure."""
        headers = httpx.Headers(self._headers)
        headers["content-type"] = CONTENT_TYPE
        async with httpx.AsyncClient(
            timeout=self._timeout, transport=self._transport
        ) as client:
            response = await client.post(
                self.url, content=payload.encode(), headers=headers
            )
            response.raise_for_status()
        logger.debug("Posted %d bytes to %s", len(payload), self.url)
