"""Shared test fixtures for all test modules."""

import copy
from typing import Any

import pytest

from lineflux.adapters.sinks.in_memory import InMemorySink

OPS_HOST = "myservice.awesome.com"

_OPS_EVENT: dict[str, Any] = {
    "event": "ops",
    "timestamp": 1485996802647,
    "host": OPS_HOST,
    "pid": 9876,
    "os": {
        "load": [3.05078125, 2.11279296875, 1.625],
        "mem": {"total": 6089818112, "free": 147881984},
        "uptime": 23489,
    },
    "proc": {
        "uptime": 22.878,
        "mem": {"rss": 64290816, "heapTotal": 47271936, "heapUsed": 26825384},
        "delay": 32.29,
    },
    "load": {
        "requests": {
            "8080": {"total": 94, "disconnects": 1, "statusCodes": {"200": 61}}
        },
        "concurrents": {"8080": 23},
        "responseTimes": {"8080": {"avg": 990, "max": 1234}},
        "sockets": {"http": {"total": 19}, "https": {"total": 49}},
    },
}


@pytest.fixture
def ops_event() -> dict[str, Any]:
    """Canonical ops snapshot with one reporting port (fresh copy per test)."""
    return copy.deepcopy(_OPS_EVENT)


@pytest.fixture
def log_event_data() -> dict[str, Any]:
    """Simple log event."""
    return {
        "event": "log",
        "host": "mytesthost",
        "timestamp": 1485996802647,
        "tags": ["info", "request"],
        "data": "Things are good",
        "pid": 1234,
    }


@pytest.fixture
def sink() -> InMemorySink:
    """Provide an empty in-memory sink."""
    return InMemorySink()
