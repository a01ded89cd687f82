"""Prometheus metrics instrumentation."""

from __future__ import annotations

from fastapi import Response
from prometheus_client import (
    CONTENT_TYPE_LATEST,
    CollectorRegistry,
    Counter,
    Gauge,
    Histogram,
    generate_latest,
)

REGISTRY = CollectorRegistry()

REQUEST_COUNT = Counter(
    "faqa_requests_total",
    "Total HTTP requests",
    labelnames=("endpoint", "method", "status"),
    registry=REGISTRY,
)

REQUEST_LATENCY = Histogram(
    "faqa_request_latency_seconds",
    "Latency of HTTP requests",
    labelnames=("endpoint", "method"),
    registry=REGISTRY,
)

CRAWL_JOBS = Counter(
    "faqa_crawl_jobs_total",
    "Crawl jobs by terminal status",
    labelnames=("status",),
    registry=REGISTRY,
)

PAGES_INDEXED = Counter(
    "faqa_pages_indexed_total",
    "Pages stored as documents",
    registry=REGISTRY,
)

PERSIST_FAILURES = Counter(
    "faqa_conversation_persist_failures_total",
    "Best-effort conversation writes that failed",
    registry=REGISTRY,
)

DOCUMENT_COUNT = Gauge(
    "faqa_documents",
    "Number of documents stored in the knowledge base",
    registry=REGISTRY,
)


def metrics_response() -> Response:
    """Return Prometheus metrics as an HTTP response."""
    payload = generate_latest(REGISTRY)
    return Response(content=payload, media_type=CONTENT_TYPE_LATEST)


__all__ = [
    "REGISTRY",
    "REQUEST_COUNT",
    "REQUEST_LATENCY",
    "CRAWL_JOBS",
    "PAGES_INDEXED",
    "PERSIST_FAILURES",
    "DOCUMENT_COUNT",
    "metrics_response",
]
