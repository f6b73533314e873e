"""Schema for ``request`` events (logs emitted while handling a request)."""

from lineflux.core.models import FieldSpec, Schema
from lineflux.core.schemas.transforms import upper

REQUEST = Schema(
    metric="request",
    fields=(
        FieldSpec(type="object", value="data"),
        FieldSpec(key="id", type="string", value="id"),
        FieldSpec(key="method", type="string", value="method", transform=upper),
        FieldSpec(key="path", type="string", value="path"),
        FieldSpec(key="tags", type="string", value="tags"),
    ),
)
