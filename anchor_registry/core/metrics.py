"""Service metrics using the Prometheus client library.

Every metric the service exposes is defined here, in one inventory.
Other modules import the specific metric they own and update it at the
point of action.

HTTP metrics
-------------
Populated by MetricsMiddleware for every request except /metrics itself:
a counter by method/endpoint/status, a latency histogram, and an
in-flight gauge.

Registry metrics
-----------------
Populated by the OperationSequencer, which is the single admission point
for mutations.  Each admitted operation lands in exactly one outcome
bucket: "ok" or the rejection code (e.g. "ALREADY_REVOKED").  Dashboards
can then separate authorization failures from duplicate submissions
without parsing logs.

The duration histogram is per operation and uses tighter buckets than
the HTTP one: a registry transition is an in-memory dict update, so
anything above a few milliseconds means lock contention in the sequencer.
"""

from __future__ import annotations

from prometheus_client import Counter, Gauge, Histogram

# ---------------------------------------------------------------------------
# HTTP metrics (populated by the MetricsMiddleware)
# ---------------------------------------------------------------------------

REQUEST_COUNT = Counter(
    "http_requests_total",
    "Total HTTP requests by method, endpoint, and status code",
    ["method", "endpoint", "status_code"],
)

REQUEST_DURATION = Histogram(
    "http_request_duration_seconds",
    "HTTP request duration in seconds",
    ["method", "endpoint"],
    buckets=[0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0],
)

ACTIVE_REQUESTS = Gauge(
    "http_active_requests",
    "Number of HTTP requests currently being processed",
)

# ---------------------------------------------------------------------------
# Registry metrics
# ---------------------------------------------------------------------------

REGISTRY_OPERATIONS = Counter(
    "registry_operations_total",
    "Registry mutations admitted by the sequencer, by operation and outcome",
    ["operation", "outcome"],  # outcome: "ok" or a RegistryError code
)

REGISTRY_OPERATION_DURATION = Histogram(
    "registry_operation_duration_seconds",
    "Time spent applying one registry mutation (lock wait excluded)",
    ["operation"],
    buckets=[0.0001, 0.00025, 0.0005, 0.001, 0.0025, 0.005, 0.01, 0.05],
)

REGISTRY_NOTIFICATIONS = Counter(
    "registry_notifications_total",
    "Notifications appended to the registry log, by kind",
    ["kind"],
)

REGISTRY_ANCHORS = Gauge(
    "registry_anchors",
    "Credential anchors currently held by the process-wide registry",
)
