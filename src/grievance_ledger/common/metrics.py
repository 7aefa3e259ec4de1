"""
Prometheus metrics.

Purpose:
- /metrics export for the status API
- shared counters and histograms for the worker stages
"""

from __future__ import annotations

import time
from collections.abc import Iterator
from contextlib import contextmanager

from fastapi import FastAPI, Request
from fastapi.responses import Response
from prometheus_client import CONTENT_TYPE_LATEST, Counter, Gauge, Histogram, generate_latest

# =============================================================================
# COUNTERS AND HISTOGRAMS
# =============================================================================

REQUESTS_TOTAL = Counter(
    "grievance_requests_total",
    "Total HTTP requests",
    ["service", "route", "method", "status"],
)

HTTP_REQUEST_LATENCY_MS = Histogram(
    "grievance_http_request_latency_ms",
    "HTTP request latency (ms)",
    ["service", "route", "method"],
    buckets=(5, 10, 25, 50, 100, 250, 500, 1000, 2500, 5000, 10000),
)

# Per-stage latency inside a task: pin, ledger
PIPELINE_STAGE_LATENCY_MS = Histogram(
    "grievance_pipeline_stage_latency_ms",
    "Pipeline stage latency (ms)",
    ["service", "stage"],
    buckets=(5, 10, 25, 50, 100, 250, 500, 1000, 2500, 5000, 10000, 30000, 60000),
)

# result=success|duplicate|retry|failed
QUEUE_TASKS_TOTAL = Counter(
    "grievance_queue_tasks_total",
    "Processed queue tasks",
    ["service", "queue", "result"],
)

# result=included|rejected|transient
LEDGER_SUBMISSIONS_TOTAL = Counter(
    "grievance_ledger_submissions_total",
    "Ledger write submissions",
    ["fn", "result"],
)

# result=pinned|cached|error
CONTENT_PINS_TOTAL = Counter(
    "grievance_content_pins_total",
    "Content pin operations",
    ["kind", "result"],
)

QUEUE_DEPTH = Gauge(
    "grievance_queue_depth",
    "Current queue length",
    ["queue"],
)

METRICS_COLLECTION_ERRORS_TOTAL = Counter(
    "grievance_metrics_collection_errors_total",
    "Errors while collecting service metrics",
    ["source"],
)


@contextmanager
def track_stage_latency(service: str, stage: str) -> Iterator[None]:
    started = time.perf_counter()
    try:
        yield
    finally:
        elapsed_ms = (time.perf_counter() - started) * 1000
        PIPELINE_STAGE_LATENCY_MS.labels(service=service, stage=stage).observe(elapsed_ms)


def refresh_queue_metrics() -> None:
    try:
        from grievance_ledger.queue.dispatcher import queue_depths
        from grievance_ledger.queue.redis import redis_client

        for queue, depth in queue_depths(redis_client()).items():
            QUEUE_DEPTH.labels(queue=queue).set(depth)
    except Exception:
        METRICS_COLLECTION_ERRORS_TOTAL.labels(source="queue_metrics").inc()


# =============================================================================
# ENDPOINT /metrics
# =============================================================================
def setup_metrics_endpoint(app: FastAPI, *, service: str = "api-gateway") -> None:
    """
    Registers the /metrics endpoint and the HTTP metrics middleware.
    """

    @app.middleware("http")
    async def http_metrics(request: Request, call_next):
        route = request.url.path
        method = request.method
        started = time.perf_counter()

        response = await call_next(request)
        elapsed_ms = (time.perf_counter() - started) * 1000
        status_code = str(response.status_code)

        REQUESTS_TOTAL.labels(
            service=service,
            route=route,
            method=method,
            status=status_code,
        ).inc()
        HTTP_REQUEST_LATENCY_MS.labels(
            service=service,
            route=route,
            method=method,
        ).observe(elapsed_ms)
        return response

    @app.get("/metrics")
    def metrics() -> Response:
        refresh_queue_metrics()
        return Response(generate_latest(), media_type=CONTENT_TYPE_LATEST)
