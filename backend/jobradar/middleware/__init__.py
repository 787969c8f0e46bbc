"""
Middleware Package

Contains FastAPI middleware for Prometheus metrics collection and the
pipeline counters recorded by discovery and ingestion.
"""

from jobradar.middleware.metrics import (
    PrometheusMiddleware,
    setup_metrics,
    REQUEST_LATENCY,
    REQUEST_COUNT,
    COMPANIES_PROCESSED,
    JOBS_INGESTED,
    LLM_FAILURES,
    EMBEDDING_LATENCY,
)

__all__ = [
    "PrometheusMiddleware",
    "setup_metrics",
    "REQUEST_LATENCY",
    "REQUEST_COUNT",
    "COMPANIES_PROCESSED",
    "JOBS_INGESTED",
    "LLM_FAILURES",
    "EMBEDDING_LATENCY",
]
