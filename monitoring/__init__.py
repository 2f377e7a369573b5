"""
Monitoring package initializer.

This package exposes Prometheus metrics and helper functions for tracking HTTP traffic,
domain errors and upstream LLM latency.
"""

from .metrics import (
    REQUEST_COUNT,
    REQUEST_LATENCY,
    ERROR_COUNT,
    LLM_REQUEST_TIME,
    record_error,
    record_request,
    track_latency,
)

__all__ = [
    'REQUEST_COUNT',
    'REQUEST_LATENCY',
    'ERROR_COUNT',
    'LLM_REQUEST_TIME',
    'record_error',
    'record_request',
    'track_latency',
]
