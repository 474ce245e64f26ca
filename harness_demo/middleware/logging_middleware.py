# ================================
# FILE: harness_demo/middleware/logging_middleware.py
# ================================

import logging
import time
from typing import Optional

from starlette.types import ASGIApp, Receive, Scope, Send

from harness_demo.core.logging_config import ACCESS_LOGGER_NAME
from harness_demo.core.monitoring import RequestMonitor, request_monitor
from harness_demo.middleware.capture import ResponseCapture

access_logger = logging.getLogger(ACCESS_LOGGER_NAME)

# Metric labels for requests no API route claimed; keeps label cardinality fixed
MOUNT_PREFIXES = ("/static",)
UNMATCHED_ROUTE = "<unmatched>"


def _remote_address(scope: Scope) -> str:
    client = scope.get("client")
    if not client:
        return ""
    host, port = client
    if ":" in host:
        host = f"[{host}]"
    return f"{host}:{port}"


def _route_template(scope: Scope) -> str:
    route = scope.get("route")
    if route is not None and getattr(route, "path_format", None):
        return route.path_format
    path = scope["path"]
    for prefix in MOUNT_PREFIXES:
        if path == prefix or path.startswith(prefix + "/"):
            return prefix
    return UNMATCHED_ROUTE


class RequestLoggingMiddleware:
    """Time each request and emit one structured access record when it completes"""

    def __init__(
        self,
        app: ASGIApp,
        logger: Optional[logging.Logger] = None,
        monitor: Optional[RequestMonitor] = None,
    ) -> None:
        self.app = app
        self.logger = logger or access_logger
        self.monitor = monitor or request_monitor

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        method = scope["method"]
        path = scope["path"]
        start_time = time.perf_counter()
        capture = ResponseCapture(send)
        self.monitor.record_request_start()
        try:
            await self.app(scope, receive, capture)
        finally:
            processing_time = time.perf_counter() - start_time
            # Nothing was sent before the inner app raised
            status = capture.status if capture.status is not None else 500

            self.logger.info(
                "request",
                extra={
                    "method": method,
                    "path": path,
                    "status": status,
                    "bytes": capture.size,
                    "remote": _remote_address(scope),
                    "dur_ms": int(processing_time * 1000),
                },
            )
            self.monitor.record_request_end(method, _route_template(scope), status, processing_time)
