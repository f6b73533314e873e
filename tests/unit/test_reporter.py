"""Tests for LineProtocolReporter."""

from typing import Any

import pytest

from lineflux.adapters.reporter import LineProtocolReporter, ReporterSettings
from lineflux.adapters.sinks import HttpSink, UdpSink
from lineflux.adapters.sinks.in_memory import InMemorySink

pytestmark = [pytest.mark.adapters, pytest.mark.tier(1)]


class FailingSink:
    """Sink that always raises."""

    async def send(self, payload: str) -> None:
        raise ConnectionError("endpoint down")


class TestReporterSettings:
    """Tests for ReporterSettings."""

    def test_defaults(self) -> None:
        settings = ReporterSettings()
        assert settings.threshold == 20
        assert settings.timeout == 60.0

    def test_threshold_must_be_positive(self) -> None:
        with pytest.raises(ValueError, match="threshold must be >= 1"):
            ReporterSettings(threshold=0)

    def test_error_threshold_defaults_to_zero(self) -> None:
        assert ReporterSettings().error_threshold == 0

    def test_negative_error_threshold_is_rejected(self) -> None:
        with pytest.raises(ValueError, match="error_threshold must be >= 0"):
            ReporterSettings(error_threshold=-1)


class TestLineProtocolReporter:
    """Tests for batching and flushing."""

    async def test_buffers_until_threshold(
        self, sink: InMemorySink, log_event_data: dict[str, Any]
    ) -> None:
        reporter = LineProtocolReporter(sink, settings=ReporterSettings(threshold=3))

        await reporter.write(log_event_data)
        await reporter.write(log_event_data)

        assert sink.payloads == []
        assert reporter.pending == 2

    async def test_flushes_at_threshold(
        self, sink: InMemorySink, log_event_data: dict[str, Any]
    ) -> None:
        reporter = LineProtocolReporter(sink, settings=ReporterSettings(threshold=2))

        await reporter.write(log_event_data)
        await reporter.write(log_event_data)

        assert len(sink.payloads) == 1
        assert len(sink.payloads[0].split("\n")) == 2
        assert reporter.pending == 0

    async def test_close_flushes_remaining_events(
        self, sink: InMemorySink, log_event_data: dict[str, Any]
    ) -> None:
        async with LineProtocolReporter(sink) as reporter:
            await reporter.write(log_event_data)

        assert sink.lines == [
            'log,host=mytesthost,pid=1234 data="Things are good",tags="info,request" '
            "1485996802647000000"
        ]

    async def test_ops_event_expands_to_several_lines(
        self, sink: InMemorySink, ops_event: dict[str, Any]
    ) -> None:
        reporter = LineProtocolReporter(sink, settings=ReporterSettings(threshold=2))

        await reporter.write(ops_event)
        await reporter.write(ops_event)

        assert len(sink.lines) == 10

    async def test_unknown_events_send_nothing(self, sink: InMemorySink) -> None:
        reporter = LineProtocolReporter(sink, settings=ReporterSettings(threshold=1))

        await reporter.write({"event": "nope", "timestamp": 1})

        assert sink.payloads == []
        assert reporter.pending == 0

    async def test_config_mapping_and_default_host(self, sink: InMemorySink) -> None:
        reporter = LineProtocolReporter(sink, config={"metadata": {"env": "prod"}})

        await reporter.write({"event": "log", "timestamp": 1, "data": "x"})
        await reporter.close()

        assert reporter.config.host == reporter.config.default_host()
        assert sink.lines[0].startswith(f"log,host={reporter.config.host},env=prod ")

    async def test_explicit_host_is_kept(self, sink: InMemorySink) -> None:
        reporter = LineProtocolReporter(sink, config={"host": "fixed"})
        assert reporter.config.host == "fixed"

    async def test_sink_failure_drops_batch_and_raises_by_default(
        self, log_event_data: dict[str, Any]
    ) -> None:
        reporter = LineProtocolReporter(
            FailingSink(), settings=ReporterSettings(threshold=1)
        )

        with pytest.raises(ConnectionError, match="endpoint down"):
            await reporter.write(log_event_data)

        assert reporter.pending == 0

    async def test_sink_failure_is_logged(
        self, log_event_data: dict[str, Any], caplog: pytest.LogCaptureFixture
    ) -> None:
        reporter = LineProtocolReporter(FailingSink())
        await reporter.write(log_event_data)

        with pytest.raises(ConnectionError):
            await reporter.flush()

        assert "Failed to send 1 buffered events" in caplog.text


class TestReporterEndpoints:
    """Tests for creating sinks from endpoint URLs."""

    def test_http_endpoint(self) -> None:
        reporter = LineProtocolReporter("http://localhost:8086/write?db=app")
        assert isinstance(reporter._sink, HttpSink)

    def test_udp_endpoint(self) -> None:
        reporter = LineProtocolReporter("udp://127.0.0.1:8089")
        assert isinstance(reporter._sink, UdpSink)

    def test_unsupported_endpoint(self) -> None:
        with pytest.raises(ValueError, match="Unsupported protocol"):
            LineProtocolReporter("ftp://example.com")


class FlakySink(InMemorySink):
    """Sink failing a given number of times before it starts accepting."""

    def __init__(self, failures: int) -> None:
        super().__init__()
        self.failures = failures

    async def send(self, payload: str) -> None:
        if self.failures:
            self.failures -= 1
            raise ConnectionError("endpoint down")
        await super().send(payload)


class TestReporterErrorThreshold:
    """Tests for tolerating and giving up on failed flushes."""

    async def test_failing_sink_does_not_grow_buffer(
        self, log_event_data: dict[str, Any]
    ) -> None:
        reporter = LineProtocolReporter(
            FailingSink(), settings=ReporterSettings(threshold=2)
        )

        for _ in range(50):
            try:
                await reporter.write(log_event_data)
            except ConnectionError:
                pass

        assert reporter.pending <= 2

    async def test_failures_below_threshold_keep_events(
        self, log_event_data: dict[str, Any]
    ) -> None:
        reporter = LineProtocolReporter(
            FailingSink(),
            settings=ReporterSettings(threshold=1, error_threshold=2),
        )

        await reporter.write(log_event_data)
        await reporter.write(log_event_data)

        assert reporter.pending == 2

        with pytest.raises(ConnectionError):
            await reporter.write(log_event_data)

        assert reporter.pending == 0

    async def test_recovered_sink_receives_kept_events(
        self, log_event_data: dict[str, Any]
    ) -> None:
        sink = FlakySink(failures=1)
        reporter = LineProtocolReporter(
            sink, settings=ReporterSettings(threshold=1, error_threshold=1)
        )

        await reporter.write(log_event_data)
        await reporter.write(log_event_data)

        assert len(sink.payloads) == 1
        assert len(sink.lines) == 2
        assert reporter.pending == 0

    async def test_success_resets_failure_count(
        self, log_event_data: dict[str, Any]
    ) -> None:
        sink = FlakySink(failures=1)
        reporter = LineProtocolReporter(
            sink, settings=ReporterSettings(threshold=1, error_threshold=1)
        )
        await reporter.write(log_event_data)
        await reporter.write(log_event_data)
        sink.failures = 1

        await reporter.write(log_event_data)

        assert reporter.pending == 1

    async def test_none_never_raises(
        self, log_event_data: dict[str, Any], caplog: pytest.LogCaptureFixture
    ) -> None:
        reporter = LineProtocolReporter(
            FailingSink(),
            settings=ReporterSettings(threshold=1, error_threshold=None),
        )

        for _ in range(5):
            await reporter.write(log_event_data)

        assert reporter.pending == 0
        assert caplog.text.count("Failed to send 1 buffered events") == 5
