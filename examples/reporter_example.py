"""Example: ship logs and ops snapshots to InfluxDB over UDP.

Run with:
    python examples/reporter_example.py udp://127.0.0.1:8089

Every log record on the root logger becomes a ``log`` line (or an
``error`` line when it carries an exception). An ops snapshot is written
once per second for five seconds.
"""

import asyncio
import logging
import os
import resource
import sys
import time

from lineflux import (
    EncoderConfig,
    LineProtocolHandler,
    LineProtocolReporter,
    ReporterSettings,
)


def ops_snapshot() -> dict[str, object]:
    """Build an ops event from the current process."""
    usage = resource.getrusage(resource.RUSAGE_SELF)
    return {
        "event": "ops",
        "timestamp": round(time.time() * 1000),
        "pid": os.getpid(),
        "os": {"load": list(os.getloadavg())},
        "proc": {"mem": {"rss": usage.ru_maxrss * 1024}, "uptime": time.process_time()},
        "load": {"requests": {}, "concurrents": {}, "responseTimes": {}},
    }


async def main(endpoint: str, handler: LineProtocolHandler) -> None:
    config = EncoderConfig(
        prefix=["example", "service"],
        metadata={"env": os.environ.get("APP_ENV", "dev")},
        host=EncoderConfig.default_host(),
    )
    reporter = LineProtocolReporter(
        endpoint, config=config, settings=ReporterSettings(threshold=5)
    )
    async with reporter:
        for tick in range(5):
            await reporter.write(ops_snapshot())
            logging.info("ops snapshot %d written", tick)
            await asyncio.sleep(1)
    await handler.drain()


if __name__ == "__main__":
    target = sys.argv[1] if len(sys.argv) > 1 else "udp://127.0.0.1:8089"
    log_reporter = LineProtocolReporter(target, settings=ReporterSettings(threshold=1))
    log_handler = LineProtocolHandler(log_reporter)
    logging.getLogger().addHandler(log_handler)
    logging.getLogger().setLevel(logging.INFO)
    logging.info("reporter example starting")
    asyncio.run(main(target, log_handler))
