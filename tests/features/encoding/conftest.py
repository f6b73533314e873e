"""BDD step definitions for line protocol encoding features."""

from dataclasses import dataclass, field
from typing import Any

import pytest
from pytest_bdd import given, parsers, then, when

from lineflux.core.encoding.line_protocol import format
from lineflux.core.models import EncoderConfig, SchemaRegistry
from lineflux.core.schemas import DEFAULT_SCHEMAS


@dataclass
class EncodingScenarioContext:
    """State shared between the steps of one scenario."""

    schemas: SchemaRegistry = field(default_factory=lambda: DEFAULT_SCHEMAS)
    event: dict[str, Any] = field(default_factory=dict)
    config: EncoderConfig = field(default_factory=EncoderConfig)
    lines: list[str] = field(default_factory=list)


@pytest.fixture
def ctx() -> EncodingScenarioContext:
    """Fresh scenario context for each test."""
    return EncodingScenarioContext()


# === Given ===
@given("the built-in schemas")
def step_builtin_schemas(ctx: EncodingScenarioContext) -> None:
    ctx.schemas = DEFAULT_SCHEMAS


@given(
    parsers.parse(
        'a log event from host "{host}" with pid {pid:d} saying "{message}"'
    )
)
def step_log_event(
    ctx: EncodingScenarioContext, host: str, pid: int, message: str
) -> None:
    ctx.event = {
        "event": "log",
        "host": host,
        "pid": pid,
        "timestamp": 1485996802647,
        "tags": ["info", "request"],
        "data": message,
    }


@given(parsers.parse('the measurement prefix "{segments}"'))
def step_prefix(ctx: EncodingScenarioContext, segments: str) -> None:
    ctx.config = EncoderConfig(prefix=segments.split(","))


@given(parsers.parse('an ops snapshot reporting on port "{port}"'))
def step_ops_one_port(
    ctx: EncodingScenarioContext, ops_event: dict[str, Any], port: str
) -> None:
    load = ops_event["load"]
    for key in ("requests", "concurrents", "responseTimes"):
        load[key] = {port: load[key]["8080"]}
    ctx.event = ops_event


@given("an ops snapshot reporting on no ports")
def step_ops_no_ports(ctx: EncodingScenarioContext, ops_event: dict[str, Any]) -> None:
    for key in ("requests", "concurrents", "responseTimes"):
        ops_event["load"][key] = {}
    ctx.event = ops_event


@given(parsers.parse('an event of type "{event_type}"'))
def step_event_of_type(ctx: EncodingScenarioContext, event_type: str) -> None:
    ctx.event = {"event": event_type, "timestamp": 1, "host": "h"}


# === When ===
@when("the event is encoded")
def step_encode(ctx: EncodingScenarioContext) -> None:
    ctx.lines = format(ctx.event, ctx.config, ctx.schemas)


# === Then ===
@then(parsers.parse("exactly {count:d} line is produced"))
@then(parsers.parse("exactly {count:d} lines are produced"))
def step_line_count(ctx: EncodingScenarioContext, count: int) -> None:
    assert len(ctx.lines) == count


@then(parsers.parse("line {number:d} is '{expected}'"))
def step_line_is(ctx: EncodingScenarioContext, number: int, expected: str) -> None:
    assert ctx.lines[number - 1] == expected


@then(parsers.parse('line {number:d} starts with "{expected}"'))
def step_line_starts_with(
    ctx: EncodingScenarioContext, number: int, expected: str
) -> None:
    assert ctx.lines[number - 1].startswith(expected)


@then(parsers.parse('the measurements are "{names}"'))
def step_measurements(ctx: EncodingScenarioContext, names: str) -> None:
    assert [line.split(",", 1)[0] for line in ctx.lines] == names.split(",")


@then(parsers.parse('every line is tagged with host "{host}" and pid {pid:d}'))
def step_host_pid_tags(ctx: EncodingScenarioContext, host: str, pid: int) -> None:
    for line in ctx.lines:
        assert f",host={host},pid={pid}" in line.split(" ", 1)[0]
