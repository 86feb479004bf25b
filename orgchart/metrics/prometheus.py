# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Prometheus metrics — single source of truth for all metric objects.
Imported by services and middleware. Never instantiated in controllers.
"""

from prometheus_client import Counter, Gauge, Histogram

# ── HTTP Metrics (used by middleware) ──
REQUEST_COUNT = Counter(
    "orgchart_requests_total",
    "Total HTTP requests to org chart service",
    ["method", "endpoint", "status"],
)
REQUEST_LATENCY = Histogram(
    "orgchart_request_duration_seconds",
    "Request latency in seconds",
    ["method", "endpoint"],
)
HTTP_ERRORS = Counter(
    "orgchart_http_errors_total",
    "Total HTTP error responses",
    ["method", "endpoint", "status"],
)

# ── Business Metrics (updated by service layer only) ──
NOTIFICATIONS_SENT = Counter(
    "orgchart_notifications_sent_total",
    "Total notifications sent",
    ["channel"],
)
MEMBERS_CREATED = Counter(
    "orgchart_members_created_total",
    "Total members created",
    ["role"],
)
REPARENTS_TOTAL = Counter(
    "orgchart_reparents_total",
    "Total reparent requests by outcome",
    ["outcome"],
)
REPARENT_REJECTIONS = Counter(
    "orgchart_reparent_rejections_total",
    "Total rejected reparent requests",
    ["reason"],
)
TREE_BUILDS = Counter(
    "orgchart_tree_builds_total",
    "Total org tree derivations",
)
MEMBERS_GAUGE = Gauge(
    "orgchart_members",
    "Number of members in the store",
)
UNASSIGNED_MEMBERS = Gauge(
    "orgchart_unassigned_members",
    "Members not reachable from the org chart root at the last build",
)
