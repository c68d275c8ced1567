"""Prometheus metrics for outgoing requests."""

from prometheus_client import Counter, Histogram


def create_counter(
    name: str,
    description: str,
    labels: list[str] | None = None,
) -> Counter:
    """Create a Prometheus counter metric.

    Args:
        name: Metric name (e.g., 'fluent_http_requests_total')
        description: Human-readable description
        labels: List of label names for the metric
    """
    return Counter(name, description, labels or [])


def create_histogram(
    name: str,
    description: str,
    labels: list[str] | None = None,
    buckets: tuple[float, ...] | None = None,
) -> Histogram:
    """Create a Prometheus histogram metric.

    Args:
        name: Metric name (e.g., 'fluent_http_request_duration_seconds')
        description: Human-readable description
        labels: List of label names for the metric
        buckets: Custom bucket boundaries (defaults to Prometheus defaults)
    """
    if buckets is None:
        buckets = (0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0, 30.0, 60.0)
    return Histogram(name, description, labels or [], buckets=buckets)


REQUEST_COUNT = create_counter(
    "fluent_http_requests_total",
    "Total outgoing HTTP requests issued by terminal calls",
    ["method", "status_code"],
)

REQUEST_LATENCY = create_histogram(
    "fluent_http_request_duration_seconds",
    "Outgoing HTTP request latency in seconds, including body read",
    ["method"],
)


def record_request(method: str, status_code: int | str, duration: float) -> None:
    """Record one completed or failed terminal call.

    Transport failures are recorded with status_code "error".
    """
    REQUEST_COUNT.labels(method=method, status_code=str(status_code)).inc()
    REQUEST_LATENCY.labels(method=method).observe(duration)
