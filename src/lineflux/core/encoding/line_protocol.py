"""Schema-driven encoder from telemetry events to line protocol.

Line grammar::

    <measurement>,<tag>=<value>[,...] <field>=<value>[,...] <timestamp_ns>

The encoder is pure: it performs no I/O and never mutates its inputs.
"""

from collections.abc import Iterable, Mapping, Sequence
from typing import Any

from lineflux.core.formatters import (
    flatten,
    format_float,
    format_int,
    format_measurement,
    format_string,
    format_tag_kv,
    format_timestamp,
    format_typed,
    format_url,
    measurement_prefix,
    serialize,
)
from lineflux.core.models import (
    EncoderConfig,
    Event,
    FieldSpec,
    Schema,
    SchemaRegistry,
    TagSpec,
)
from lineflux.core.paths import reach, render_template
from lineflux.core.schemas import DEFAULT_SCHEMAS, resolve_schemas

Variables = Mapping[str, Any]

LOG_EVENT = "log"


def _resolve_value(
    event: Event, spec: FieldSpec | TagSpec, variables: Variables
) -> Any:
    """Look up a descriptor's value: event first, then variables, then default."""
    path = render_template(spec.value, variables)
    value = reach(event, path)
    if value is None:
        value = variables.get(path)
    if value is None:
        value = spec.default
    if value is not None and spec.transform is not None:
        value = spec.transform(value)
    return value


def _numeric_field(value: Any, spec: FieldSpec) -> str | None:
    formatter = format_int if spec.type == "int" else format_float
    token = formatter(value)
    if token is None and spec.default is not None:
        token = formatter(spec.default)
    return token


def format_data(
    event: Event,
    descriptors: Sequence[FieldSpec | TagSpec],
    variables: Variables | None = None,
    *,
    tag_mode: bool = False,
) -> dict[str, str]:
    """Resolve descriptors against an event into a flat key/token mapping.

    Args:
        event: The event being encoded.
        descriptors: Field or tag descriptors, in output order.
        variables: Template variables bound by split lines or iterators.
        tag_mode: Escape keys and values for tag syntax instead of
            dispatching on the field type.

    Returns:
        Mapping of keys to wire tokens. Descriptors that resolve to nothing
        contribute no key.
    """
    variables = variables or {}
    result: dict[str, str] = {}

    for spec in descriptors:
        if isinstance(spec, FieldSpec) and spec.type == "iterator" and not tag_mode:
            base = reach(event, render_template(spec.iterator_base, variables))
            if isinstance(base, Mapping):
                for item in base:
                    scope = {**variables, spec.item_key: item}
                    result.update(format_data(event, spec.fields, scope))
            continue

        key = render_template(spec.key, variables)
        value = _resolve_value(event, spec, variables)

        if tag_mode:
            if value is not None:
                result[format_tag_kv(key)] = format_tag_kv(value)
            continue

        match spec.type:
            case "int" | "float":
                token = _numeric_field(value, spec)
                if token is not None:
                    result[key] = token
            case "object":
                if spec.key_prefix is not None:
                    prefix = spec.key_prefix
                else:
                    prefix = key or render_template(spec.value, variables)
                result.update(flatten(value, prefix))
            case "url":
                if value is not None:
                    result[key] = format_url(value)
            case _:
                if value is not None:
                    result[key] = format_string(value)

    return result


def _custom_log_fields(event: Event, config: EncoderConfig) -> dict[str, str] | None:
    """Extract log fields configured by ``custom_log_field``/``custom_log_formatter``.

    Returns None when the event should use the regular log schema.
    """
    field_name = config.custom_log_field
    formatter = config.custom_log_formatter
    if not field_name and formatter is None:
        return None

    data = event.get("data")
    if field_name:
        source = data.get(field_name) if isinstance(data, Mapping) else None
    else:
        source = data
    extracted = formatter(source) if formatter is not None else source

    if not isinstance(extracted, Mapping) or not extracted:
        return None
    return {
        str(key): format_typed(value)
        for key, value in extracted.items()
        if value is not None
    }


def _base_tags(event: Event, config: EncoderConfig) -> dict[str, str]:
    tags: dict[str, str] = {}
    host = event.get("host") or config.host
    if host:
        tags["host"] = format_tag_kv(host)
    if event.get("pid") is not None:
        tags["pid"] = format_tag_kv(event["pid"])
    for key, value in (config.metadata or {}).items():
        if value is None or value == "":
            continue
        tags[format_tag_kv(key)] = format_tag_kv(value)
    return tags


def format_schema_chunk(
    event: Event,
    schema: Schema,
    config: EncoderConfig,
    variables: Variables | None = None,
    fields_override: Mapping[str, str] | None = None,
) -> str | None:
    """Encode one line for ``schema``, or None if it has no fields."""
    variables = variables or {}
    if fields_override is not None:
        fields = dict(fields_override)
    else:
        fields = format_data(event, schema.fields, variables)
    if not fields:
        return None

    tags = _base_tags(event, config)
    for key, value in format_data(
        event, schema.tags, variables, tag_mode=True
    ).items():
        tags.setdefault(key, value)
    for key, value in (config.default_tags or {}).items():
        if value is not None:
            tags.setdefault(format_tag_kv(key), format_tag_kv(value))
    for key, value in flatten(config.default_fields, "").items():
        fields.setdefault(key, value)

    measurement = format_measurement(measurement_prefix(config) + schema.metric)
    head = f"{measurement},{serialize(tags)}" if tags else measurement
    line = f"{head} {serialize(fields)}"

    timestamp = format_timestamp(event.get("timestamp"))
    if timestamp is not None:
        line = f"{line} {timestamp}"
    return line


def format_schema(
    event: Event,
    schema: Schema,
    config: EncoderConfig,
    variables: Variables | None = None,
    fields_override: Mapping[str, str] | None = None,
) -> list[str]:
    """Encode every line ``schema`` derives from ``event``.

    Split schemas yield one line per key of the split mapping; a missing or
    empty mapping yields no lines.
    """
    variables = variables or {}
    split = schema.split_lines
    if split is None:
        line = format_schema_chunk(event, schema, config, variables, fields_override)
        return [line] if line is not None else []

    base = reach(event, split.split_on)
    if not isinstance(base, Mapping):
        return []
    lines = []
    for key in base:
        scope = dict(variables)
        if split.split_key:
            scope[split.split_key] = key
        line = format_schema_chunk(event, schema, config, scope, fields_override)
        if line is not None:
            lines.append(line)
    return lines


def _event_name(event: Event, config: EncoderConfig) -> str | None:
    declared = event.get("event")
    event_name = config.event_name
    if isinstance(event_name, str) and event_name:
        return event_name
    if callable(event_name):
        return event_name(event) or declared
    return declared


def _as_config(config: EncoderConfig | Mapping[str, Any] | None) -> EncoderConfig:
    if isinstance(config, EncoderConfig):
        return config
    return EncoderConfig.from_mapping(config)


def format(
    event: Event,
    config: EncoderConfig | Mapping[str, Any] | None = None,
    schemas: SchemaRegistry | None = None,
) -> list[str]:
    """Encode an event into line protocol lines.

    Args:
        event: Event mapping with ``event`` and ``timestamp`` (milliseconds).
        config: Encoder options, as an EncoderConfig or a plain mapping.
        schemas: Registry to use instead of the built-in schemas.

    Returns:
        Lines in registry order. Events without a matching schema give [].

    Raises:
        TypeError: If a mapping config carries a non-callable
            ``custom_log_formatter``.
    """
    config = _as_config(config)
    if not isinstance(event, Mapping):
        return []
    registry = DEFAULT_SCHEMAS if schemas is None else schemas
    name = _event_name(event, config)

    fields_override = None
    if name == LOG_EVENT:
        fields_override = _custom_log_fields(event, config)

    lines: list[str] = []
    for schema in resolve_schemas(registry, name):
        lines.extend(format_schema(event, schema, config, None, fields_override))
    return lines


def format_lines(
    events: Iterable[Event],
    config: EncoderConfig | Mapping[str, Any] | None = None,
    schemas: SchemaRegistry | None = None,
) -> str:
    """Encode several events into one newline-joined payload.

    Returns:
        Payload text without a trailing newline. Empty string if no lines.
    """
    config = _as_config(config)
    lines: list[str] = []
    for event in events:
        lines.extend(format(event, config, schemas))
    return "\n".join(lines)
