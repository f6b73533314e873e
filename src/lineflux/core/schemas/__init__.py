"""Built-in schemas and schema registry lookup."""

from types import MappingProxyType

from lineflux.core.models import Schema, SchemaRegistry
from lineflux.core.schemas.error import ERROR
from lineflux.core.schemas.log import LOG
from lineflux.core.schemas.ops import OPS_SCHEMAS
from lineflux.core.schemas.request import REQUEST
from lineflux.core.schemas.response import RESPONSE

DEFAULT_SCHEMAS: SchemaRegistry = MappingProxyType(
    {
        "error": ERROR,
        "log": LOG,
        "ops": OPS_SCHEMAS,
        "request": REQUEST,
        "response": RESPONSE,
    }
)


def resolve_schemas(registry: SchemaRegistry, name: str | None) -> tuple[Schema, ...]:
    """Return the schemas registered for ``name``, always as a tuple.

    Unknown names, None and non-string names resolve to an empty tuple.
    """
    if not isinstance(name, str):
        return ()
    entry = registry.get(name)
    if entry is None:
        return ()
    if isinstance(entry, Schema):
        return (entry,)
    return tuple(entry)


__all__ = [
    "DEFAULT_SCHEMAS",
    "ERROR",
    "LOG",
    "OPS_SCHEMAS",
    "REQUEST",
    "RESPONSE",
    "resolve_schemas",
]
