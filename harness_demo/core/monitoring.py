# ================================
# FILE: harness_demo/core/monitoring.py
# ================================

import logging

from prometheus_client import Counter, Gauge, Histogram

logger = logging.getLogger(__name__)

REQUEST_COUNT = Counter(
    "harness_demo_requests_total",
    "Total HTTP requests processed by the Harness Demo App.",
    ("method", "path", "status"),
)
REQUEST_LATENCY = Histogram(
    "harness_demo_request_duration_seconds",
    "Latency of HTTP requests processed by the Harness Demo App.",
    ("method", "path"),
)
REQUESTS_IN_PROGRESS = Gauge(
    "harness_demo_requests_in_progress",
    "HTTP requests currently being handled.",
)


class RequestMonitor:
    """Feeds request outcomes into the Prometheus collectors"""

    def record_request_start(self):
        """Record start of a request"""
        REQUESTS_IN_PROGRESS.inc()

    def record_request_end(self, method: str, path: str, status: int, processing_time: float):
        """Record end of a request"""
        REQUESTS_IN_PROGRESS.dec()
        REQUEST_COUNT.labels(method=method, path=path, status=str(status)).inc()
        REQUEST_LATENCY.labels(method=method, path=path).observe(processing_time)


# Global monitor instance
request_monitor = RequestMonitor()
