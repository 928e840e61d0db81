"""Prometheus metrics definitions and helpers."""

from __future__ import annotations

from prometheus_client import Counter, Histogram

REQUEST_COUNT = Counter(
    "http_requests_total",
    "Total HTTP requests processed",
    ("method", "route", "status"),
)

REQUEST_LATENCY = Histogram(
    "http_request_duration_seconds",
    "HTTP request duration in seconds",
    ("method", "route"),
    buckets=(
        0.05,
        0.1,
        0.25,
        0.5,
        1.0,
        2.5,
        5.0,
        10.0,
        20.0,
        40.0,
    ),
)

ERROR_COUNTER = Counter(
    "app_internal_errors_total",
    "Number of requests ending in internal server error responses",
    ("method", "route"),
)

FETCH_ATTEMPTS = Counter(
    "image_fetch_attempts_total",
    "Image retrieval attempts per transport strategy",
    ("strategy", "outcome"),
)

UPSTREAM_CALLS = Counter(
    "upstream_model_calls_total",
    "Calls to the generative model service",
    ("operation", "outcome"),
)

AUDIO_RESPONSE_BYTES = Histogram(
    "audio_response_bytes",
    "Size of WAV bodies returned by the speech endpoints",
    ("route",),
    buckets=(16_000, 64_000, 256_000, 512_000, 1_000_000, 2_000_000, 4_000_000),
)


def observe_request(
    method: str,
    route: str,
    status_code: int,
    duration_seconds: float,
) -> None:
    """Record metrics for a completed HTTP request."""

    safe_route = route or "unknown"
    safe_method = method or "UNKNOWN"
    status_label = str(status_code)
    observed_duration = duration_seconds if duration_seconds >= 0 else 0

    REQUEST_COUNT.labels(
        method=safe_method,
        route=safe_route,
        status=status_label,
    ).inc()
    REQUEST_LATENCY.labels(
        method=safe_method,
        route=safe_route,
    ).observe(observed_duration)

    if status_code >= 500:
        ERROR_COUNTER.labels(
            method=safe_method,
            route=safe_route,
        ).inc()


def observe_audio_response(route: str, size_bytes: int) -> None:
    """Record the size of one rendered audio response."""

    AUDIO_RESPONSE_BYTES.labels(route=route or "unknown").observe(max(0, size_bytes))


def record_fetch_attempt(strategy: str, succeeded: bool) -> None:
    """Count one transport attempt made by the resource fetcher."""

    FETCH_ATTEMPTS.labels(
        strategy=strategy,
        outcome="success" if succeeded else "failure",
    ).inc()


def record_upstream_call(operation: str, succeeded: bool) -> None:
    """Count one generateContent call (analysis or speech)."""

    UPSTREAM_CALLS.labels(
        operation=operation,
        outcome="success" if succeeded else "failure",
    ).inc()
