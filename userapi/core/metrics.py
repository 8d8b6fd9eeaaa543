"""Prometheus metrics for userapi.

All metrics are declared here so there is one inventory of what the
service measures.  Modules import the metric they own and increment or
observe it at the point of action.

  http_requests_total            Counter   MetricsMiddleware
  http_request_duration_seconds  Histogram MetricsMiddleware
  http_active_requests           Gauge     MetricsMiddleware
  user_operations_total          Counter   UserService

Counters only go up, so dashboards read them through rate():

  rate(user_operations_total{operation="create", outcome="rejected"}[5m])

gives the rate of creates refused by validation.
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
    # In-memory handlers answer in well under 10ms; the upper buckets
    # only fill when the host itself is struggling.
    buckets=[0.001, 0.0025, 0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0],
)

ACTIVE_REQUESTS = Gauge(
    "http_active_requests",
    "Number of HTTP requests currently being processed",
)

# ---------------------------------------------------------------------------
# Domain metrics
# ---------------------------------------------------------------------------

USER_OPERATIONS = Counter(
    "user_operations_total",
    "User service operations by outcome",
    # operation: create|get|list|delete
    # outcome:   ok|rejected|not_found|error
    ["operation", "outcome"],
)
