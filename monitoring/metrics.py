"""
Core metrics for the Blog Generator service.

This module defines Prometheus metrics for tracking:
- Request latency and counts
- Error rates per error code
- Upstream LLM API latency
"""

import time
from contextlib import contextmanager
from typing import Iterator

from prometheus_client import Counter, Histogram

# HTTP traffic
REQUEST_COUNT = Counter(
    'http_requests_total',
    'HTTP requests served, by route and status',
    ['method', 'endpoint', 'status']
)

REQUEST_LATENCY = Histogram(
    'http_request_duration_seconds',
    'Wall-clock time from request arrival to response, in seconds',
    ['method', 'endpoint'],
    buckets=[0.1, 0.5, 1.0, 2.0, 5.0, 10.0, 30.0, 60.0, 120.0, float("inf")]
)

# Failures
ERROR_COUNT = Counter(
    'error_total',
    'Domain errors by code and the component that raised them',
    ['type', 'location']  # type: error code, e.g. 'MODEL_LOADING'; location: component
)

# Upstream model
LLM_REQUEST_TIME = Histogram(
    'llm_request_duration_seconds',
    'Upstream chat-completion call duration in seconds',
    ['model'],
    buckets=[0.5, 1.0, 2.0, 5.0, 10.0, 30.0, 60.0, 120.0, float("inf")]
)


def record_request(method: str, endpoint: str, status: int, duration: float) -> None:
    """Count a finished HTTP request and observe its duration."""
    REQUEST_COUNT.labels(method=method, endpoint=endpoint, status=str(status)).inc()
    REQUEST_LATENCY.labels(method=method, endpoint=endpoint).observe(duration)


def record_error(error_type: str, location: str) -> None:
    ERROR_COUNT.labels(type=error_type, location=location).inc()


@contextmanager
def track_latency(metric: Histogram, **labels: str) -> Iterator[None]:
    """
    Observe the wall-clock time of the enclosed block on `metric`.

    Example:
        with track_latency(LLM_REQUEST_TIME, model=model_id):
            client.chat.completions.create(...)
    """
    start_time = time.perf_counter()
    try:
        yield
    finally:
        duration = time.perf_counter() - start_time
        if labels:
            metric.labels(**labels).observe(duration)
        else:
            metric.observe(duration)
