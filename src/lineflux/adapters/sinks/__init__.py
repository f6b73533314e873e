"""Sink adapters implementing LineSinkPort."""

from collections.abc import Mapping
from urllib.parse import urlsplit

from lineflux.adapters.sinks.http import HttpSink
from lineflux.adapters.sinks.in_memory import InMemorySink
from lineflux.adapters.sinks.udp import UdpSink
from lineflux.core.ports import LineSinkPort


def create_sink(
    endpoint: str,
    headers: Mapping[str, str] | None = None,
    timeout: float = 60.0,
    udp_type: str = "udp4",
) -> LineSinkPort:
    """Create a sink for ``endpoint`` based on its URL scheme.

    Args:
        endpoint: ``http://``, ``https://`` or ``udp://host:port`` URL.
        headers: Extra HTTP headers (HTTP only).
        timeout: Request timeout in seconds (HTTP only).
        udp_type: ``udp4`` or ``udp6`` (UDP only).

    Raises:
        ValueError: For unsupported schemes or a UDP endpoint without a port.
    """
    parsed = urlsplit(endpoint)
    if parsed.scheme in ("http", "https"):
        return HttpSink(endpoint, headers=headers, timeout=timeout)
    if parsed.scheme == "udp":
        if parsed.hostname is None or parsed.port is None:
            raise ValueError(f"UDP endpoint needs a host and port: {endpoint}")
        return UdpSink(parsed.hostname, parsed.port, udp_type=udp_type)
    raise ValueError(
        f"Unsupported protocol {parsed.scheme!r}. "
        "Supported protocols are udp, http or https"
    )


__all__ = ["HttpSink", "InMemorySink", "UdpSink", "create_sink"]
