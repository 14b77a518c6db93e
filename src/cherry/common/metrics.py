"""Prometheus metrics for the webhook service."""

import time

from prometheus_client import Counter, Histogram, generate_latest
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response
from starlette.types import ASGIApp

# === Counters ===

HTTP_REQUESTS_TOTAL = Counter(
    "cherry_http_requests_total",
    "Total HTTP requests",
    ["method", "endpoint", "status"],
)

WEBHOOK_EVENTS_TOTAL = Counter(
    "cherry_webhook_events_total",
    "Todoist webhook events processed",
    ["event", "outcome"],  # outcome: processed, unhandled
)

SIGNATURE_CHECKS_TOTAL = Counter(
    "cherry_signature_checks_total",
    "Webhook signature checks",
    ["result"],  # result: valid, invalid, missing, skipped
)

# === Histograms ===

HTTP_REQUEST_LATENCY = Histogram(
    "cherry_http_request_latency_seconds",
    "HTTP request latency in seconds",
    ["method", "endpoint"],
    buckets=[0.005, 0.01, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5],
)


# === Helper Functions ===


def record_http_request(
    method: str,
    endpoint: str,
    status: int,
    latency: float,
) -> None:
    """Record an HTTP request."""
    HTTP_REQUESTS_TOTAL.labels(
        method=method,
        endpoint=endpoint,
        status=str(status),
    ).inc()
    HTTP_REQUEST_LATENCY.labels(
        method=method,
        endpoint=endpoint,
    ).observe(latency)


def record_webhook_event(event: str, outcome: str) -> None:
    """Record a processed webhook event."""
    WEBHOOK_EVENTS_TOTAL.labels(event=event, outcome=outcome).inc()


def record_signature_check(result: str) -> None:
    """Record a signature check result."""
    SIGNATURE_CHECKS_TOTAL.labels(result=result).inc()


# === HTTP Endpoint ===


class MetricsMiddleware(BaseHTTPMiddleware):
    """HTTP request metrics middleware."""

    def __init__(self, app: ASGIApp, exclude_paths: list[str] | None = None) -> None:
        super().__init__(app)
        self._exclude_paths = set(exclude_paths or [])

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        if request.url.path in self._exclude_paths:
            return await call_next(request)

        start = time.perf_counter()
        try:
            response = await call_next(request)
        except Exception:
            record_http_request(
                method=request.method,
                endpoint=request.url.path,
                status=500,
                latency=time.perf_counter() - start,
            )
            raise

        record_http_request(
            method=request.method,
            endpoint=request.url.path,
            status=response.status_code,
            latency=time.perf_counter() - start,
        )
        return response


async def metrics_endpoint(_request: Request) -> Response:
    """Prometheus metrics in text exposition format."""
    return Response(
        generate_latest(),
        media_type="text/plain; version=0.0.4; charset=utf-8",
    )
