"""Schemas for ``ops`` events (periodic operational snapshots).

One snapshot yields the base ``ops`` line plus per-port request,
concurrency and latency lines and one socket line. Sub-measurements whose
source data is absent produce no line.
"""

from lineflux.core.models import FieldSpec, Schema, SplitLines, TagSpec

OPS = Schema(
    metric="ops",
    fields=(
        FieldSpec(key="os.cpu1m", type="float", value="os.load[0]"),
        FieldSpec(key="os.cpu5m", type="float", value="os.load[1]"),
        FieldSpec(key="os.cpu15m", type="float", value="os.load[2]"),
        FieldSpec(key="os.freemem", type="int", value="os.mem.free"),
        FieldSpec(key="os.totalmem", type="int", value="os.mem.total"),
        FieldSpec(key="os.uptime", type="int", value="os.uptime"),
        FieldSpec(key="proc.delay", type="float", value="proc.delay"),
        FieldSpec(key="proc.heapTotal", type="int", value="proc.mem.heapTotal"),
        FieldSpec(key="proc.heapUsed", type="int", value="proc.mem.heapUsed"),
        FieldSpec(key="proc.rss", type="int", value="proc.mem.rss"),
        FieldSpec(key="proc.uptime", type="float", value="proc.uptime"),
    ),
)

_PORT_TAG = (TagSpec(key="port", value="port"),)

OPS_REQUESTS = Schema(
    metric="ops_requests",
    split_lines=SplitLines(split_on="load.requests", split_key="port"),
    tags=_PORT_TAG,
    fields=(
        FieldSpec(
            key="requestsTotal", type="float", value="load.requests.${port}.total"
        ),
        FieldSpec(
            key="requestsDisconnects",
            type="float",
            value="load.requests.${port}.disconnects",
        ),
        FieldSpec(
            type="iterator",
            iterator_base="load.requests.${port}.statusCodes",
            item_key="code",
            fields=(
                FieldSpec(
                    key="requests${code}",
                    type="float",
                    value="load.requests.${port}.statusCodes.${code}",
                ),
            ),
        ),
    ),
)

OPS_CONCURRENTS = Schema(
    metric="ops_concurrents",
    split_lines=SplitLines(split_on="load.concurrents", split_key="port"),
    tags=_PORT_TAG,
    fields=(
        FieldSpec(key="concurrents", type="float", value="load.concurrents.${port}"),
    ),
)

# Non-numeric avg/max are reported as 0.
OPS_RESPONSE_TIMES = Schema(
    metric="ops_responseTimes",
    split_lines=SplitLines(split_on="load.responseTimes", split_key="port"),
    tags=_PORT_TAG,
    fields=(
        FieldSpec(
            key="avg", type="float", value="load.responseTimes.${port}.avg", default=0
        ),
        FieldSpec(
            key="max", type="float", value="load.responseTimes.${port}.max", default=0
        ),
    ),
)

OPS_SOCKETS = Schema(
    metric="ops_sockets",
    fields=(
        FieldSpec(
            type="iterator",
            iterator_base="load.sockets",
            item_key="protocol",
            fields=(
                FieldSpec(
                    key="${protocol}Total",
                    type="float",
                    value="load.sockets.${protocol}.total",
                ),
            ),
        ),
    ),
)

OPS_SCHEMAS = (OPS, OPS_REQUESTS, OPS_CONCURRENTS, OPS_RESPONSE_TIMES, OPS_SOCKETS)
