"""Schema for ``log`` events."""

from lineflux.core.models import FieldSpec, Schema

LOG = Schema(
    metric="log",
    fields=(
        FieldSpec(type="object", value="data"),
        FieldSpec(key="tags", type="string", value="tags"),
    ),
)
