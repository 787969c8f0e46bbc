"""
Prometheus Metrics Middleware

Provides request metrics plus pipeline counters:
- HTTP request latency and count by endpoint and status
- Companies processed by the discovery batch, by outcome
- Jobs ingested, by source and whether they were new
- Language model failures, by operation
- Embedding generation latency

Usage:
    from jobradar.middleware.metrics import setup_metrics

    app = FastAPI()
    setup_metrics(app)

Metrics Endpoint:
    GET /metrics - Prometheus-format metrics
"""

import time
import logging
from typing import Callable

from fastapi import FastAPI, Request, Response
from fastapi.responses import PlainTextResponse
from prometheus_client import (
    Counter,
    Histogram,
    CONTENT_TYPE_LATEST,
    generate_latest,
    REGISTRY,
)
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.routing import Match

logger = logging.getLogger(__name__)

# ==================== Prometheus Metrics ====================

REQUEST_LATENCY = Histogram(
    "http_request_duration_seconds",
    "HTTP request latency in seconds",
    ["method", "endpoint", "status"],
    buckets=[0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0]
)

REQUEST_COUNT = Counter(
    "http_requests_total",
    "Total HTTP requests",
    ["method", "endpoint", "status"]
)

COMPANIES_PROCESSED = Counter(
    "companies_processed_total",
    "Companies processed by discovery batches",
    ["outcome"]  # success, no_jobs, no_career_page, error
)

JOBS_INGESTED = Counter(
    "jobs_ingested_total",
    "Jobs returned by ingestion",
    ["source", "is_new"]
)

LLM_FAILURES = Counter(
    "llm_failures_total",
    "Language model calls that failed or returned unusable output",
    ["operation"]
)

EMBEDDING_LATENCY = Histogram(
    "embedding_generation_seconds",
    "Time to generate embeddings",
    buckets=[0.1, 0.25, 0.5, 1.0, 2.0, 5.0]
)


class PrometheusMiddleware(BaseHTTPMiddleware):
    """Records latency and count for every request except /metrics itself."""

    async def dispatch(
        self,
        request: Request,
        call_next: Callable
    ) -> Response:
        endpoint = self._get_endpoint(request)
        method = request.method

        if endpoint == "/metrics":
            return await call_next(request)

        start_time = time.perf_counter()
        status = "500"
        try:
            response = await call_next(request)
            status = str(response.status_code)
        except Exception as e:
            logger.error(f"Request error: {e}")
            raise
        finally:
            duration = time.perf_counter() - start_time
            REQUEST_LATENCY.labels(method=method, endpoint=endpoint, status=status).observe(duration)
            REQUEST_COUNT.labels(method=method, endpoint=endpoint, status=status).inc()

        return response

    def _get_endpoint(self, request: Request) -> str:
        # Route pattern (/jobs/{job_id}) keeps label cardinality bounded.
        # Included-router entries carry no path of their own.
        for route in request.app.routes:
            path = getattr(route, "path", None)
            if path is None:
                continue
            match, _ = route.matches(request.scope)
            if match == Match.FULL:
                return path
        return request.url.path


def metrics_endpoint(request: Request) -> Response:
    return PlainTextResponse(
        content=generate_latest(REGISTRY),
        media_type=CONTENT_TYPE_LATEST
    )


def setup_metrics(app: FastAPI) -> None:
    app.add_middleware(PrometheusMiddleware)
    app.add_route("/metrics", metrics_endpoint, methods=["GET"])
    logger.info("Prometheus metrics configured")


# ==================== Helper Functions ====================

def record_company_outcome(outcome: str) -> None:
    COMPANIES_PROCESSED.labels(outcome=outcome).inc()


def record_job_ingested(source: str, is_new: bool) -> None:
    JOBS_INGESTED.labels(source=source, is_new=str(is_new).lower()).inc()


def record_llm_failure(operation: str) -> None:
    LLM_FAILURES.labels(operation=operation).inc()


def record_embedding_latency(duration: float) -> None:
    EMBEDDING_LATENCY.observe(duration)
