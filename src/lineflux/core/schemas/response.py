"""Schema for ``response`` events."""

from lineflux.core.models import FieldSpec, Schema
from lineflux.core.schemas.transforms import query_string, upper

RESPONSE = Schema(
    metric="response",
    fields=(
        FieldSpec(key="httpVersion", type="string", value="httpVersion"),
        FieldSpec(key="id", type="string", value="id"),
        FieldSpec(key="instance", type="string", value="instance"),
        FieldSpec(key="labels", type="string", value="labels"),
        FieldSpec(key="method", type="string", value="method", transform=upper),
        FieldSpec(key="path", type="string", value="path"),
        FieldSpec(key="query", type="string", value="query", transform=query_string),
        FieldSpec(key="referer", type="string", value="source.referer"),
        FieldSpec(key="remoteAddress", type="string", value="source.remoteAddress"),
        FieldSpec(key="responseTime", type="int", value="responseTime"),
        FieldSpec(key="statusCode", type="int", value="statusCode"),
        FieldSpec(key="userAgent", type="string", value="source.userAgent"),
    ),
)
