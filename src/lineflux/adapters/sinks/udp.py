"""UDP sink sending each batch as a single datagram."""

import asyncio
import logging
import socket

logger = logging.getLogger(__name__)

UDP_FAMILIES = {"udp4": socket.AF_INET, "udp6": socket.AF_INET6}


class UdpSink:
    """UDP implementation of LineSinkPort.

    Args:
        host: Destination host.
        port: Destination port.
        udp_type: ``udp4`` or ``udp6``.
    """

    def __init__(self, host: str, port: int, udp_type: str = "udp4") -> None:
        if udp_type not in UDP_FAMILIES:
            raise ValueError(f"udp_type must be one of {sorted(UDP_FAMILIES)}")
        self.host = host
        self.port = port
        self._family = UDP_FAMILIES[udp_type]

    async def send(self, payload: str) -> None:
        """Send the payload as one datagram."""
        loop = asyncio.get_running_loop()
        transport, _ = await loop.create_datagram_endpoint(
            asyncio.DatagramProtocol,
            remote_addr=(self.host, self.port),
            family=self._family,
        )
        try:
            transport.sendto(payload.encode())
        finally:
            transport.close()
        logger.debug("Sent %d bytes to udp://%s:%d", len(payload), self.host, self.port)
