"""Schema for ``error`` events.

The structured error (``name``, ``message``, ``stack``, optional ``data``)
is flattened into ``error.*`` fields.
"""

from lineflux.core.models import FieldSpec, Schema
from lineflux.core.schemas.transforms import upper

ERROR = Schema(
    metric="error",
    fields=(
        FieldSpec(key="error.name", type="string", value="error.name"),
        FieldSpec(key="error.message", type="string", value="error.message"),
        FieldSpec(key="error.stack", type="string", value="error.stack"),
        FieldSpec(
            key="error.statusCode", type="string", value="error.output.statusCode"
        ),
        FieldSpec(type="object", value="error.data", key_prefix="error"),
        FieldSpec(key="id", type="string", value="id"),
        FieldSpec(key="url", type="url", value="url"),
        FieldSpec(key="method", type="string", value="method", transform=upper),
        FieldSpec(key="tags", type="string", value="tags"),
    ),
)
