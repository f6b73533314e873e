"""Core domain models for line protocol encoding."""

import socket
from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass, field
from typing import Any, Literal

Event = Mapping[str, Any]
"""A telemetry event: requires ``event`` and ``timestamp`` (milliseconds)."""

FieldType = Literal["string", "int", "float", "url", "object", "iterator"]


@dataclass(frozen=True)
class FieldSpec:
    """Descriptor for one field (or group of fields) of a measurement.

    Attributes:
        key: Field name template, may reference ``${var}`` template variables.
        value: Path template into the event (or template variables).
        type: How the resolved value is rendered on the wire.
        default: Value used when the path resolves to nothing or is unparseable.
        transform: Pure function applied to a resolved value.
        key_prefix: Prefix for flattened keys (``object`` type only).
        iterator_base: Path template to a mapping to enumerate (``iterator``).
        item_key: Template variable bound to each enumerated key (``iterator``).
        fields: Nested descriptors evaluated per enumerated key (``iterator``).
    """

    key: str = ""
    value: str = ""
    type: FieldType = "string"
    default: Any = None
    transform: Callable[[Any], Any] | None = None
    key_prefix: str | None = None
    iterator_base: str = ""
    item_key: str = ""
    fields: tuple["FieldSpec", ...] = ()


@dataclass(frozen=True)
class TagSpec:
    """Descriptor for one tag of a measurement."""

    key: str
    value: str
    default: Any = None
    transform: Callable[[Any], Any] | None = None


@dataclass(frozen=True)
class SplitLines:
    """Emit one line per key of the mapping found at ``split_on``.

    Attributes:
        split_on: Path to the mapping whose keys drive the split.
        split_key: Template variable bound to the current key, if any.
    """

    split_on: str
    split_key: str | None = None


@dataclass(frozen=True)
class Schema:
    """Declarative description of one measurement derived from an event."""

    metric: str
    fields: tuple[FieldSpec, ...]
    tags: tuple[TagSpec, ...] = ()
    split_lines: SplitLines | None = None


SchemaRegistry = Mapping[str, Schema | Sequence[Schema]]

_CAMEL_CASE_KEYS = {
    "prefixDelimiter": "prefix_delimiter",
    "defaultTags": "default_tags",
    "defaultFields": "default_fields",
    "eventName": "event_name",
    "customLogField": "custom_log_field",
    "customLogFormatter": "custom_log_formatter",
}


@dataclass(frozen=True)
class EncoderConfig:
    """Options controlling how events are encoded.

    Attributes:
        metadata: Extra static tags. None and empty-string values are dropped.
        prefix: Measurement prefix, a string or a sequence of segments.
        prefix_delimiter: Joins sequence prefixes (default "/").
        default_tags: Tags added to every line unless already present.
        default_fields: Fields (flattened) added unless already present.
        event_name: Fixed event type name, or a callable deriving it.
        custom_log_field: Key of ``data`` to emit as fields for log events.
        custom_log_formatter: Callable extracting the log fields from ``data``.
        host: Host tag used when an event carries no ``host``.
    """

    metadata: Mapping[str, Any] | None = None
    prefix: str | Sequence[str] | None = None
    prefix_delimiter: str = "/"
    default_tags: Mapping[str, Any] | None = None
    default_fields: Mapping[str, Any] | None = None
    event_name: str | Callable[[Event], str | None] | None = None
    custom_log_field: str | None = None
    custom_log_formatter: Callable[[Any], Any] | None = None
    host: str | None = None
    extra: Mapping[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if self.custom_log_formatter is not None and not callable(
            self.custom_log_formatter
        ):
            raise TypeError("custom_log_formatter must be callable")

    @staticmethod
    def default_host() -> str:
        """Return the machine hostname, for resolving ``host`` once at startup."""
        return socket.gethostname()

    @classmethod
    def from_mapping(cls, options: Mapping[str, Any] | None) -> "EncoderConfig":
        """Build a config from a plain mapping.

        Accepts both snake_case and camelCase option names. Unknown options
        are kept in ``extra``.

        Raises:
            TypeError: If ``custom_log_formatter`` is not callable.
        """
        known = {f for f in cls.__dataclass_fields__ if f != "extra"}
        kwargs: dict[str, Any] = {}
        extra: dict[str, Any] = {}
        for key, value in (options or {}).items():
            name = _CAMEL_CASE_KEYS.get(key, key)
            if name in known:
                kwargs[name] = value
            else:
                extra[key] = value
        if kwargs.get("prefix_delimiter") is None:
            kwargs.pop("prefix_delimiter", None)
        return cls(**kwargs, extra=extra)
