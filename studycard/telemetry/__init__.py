"""Telemetry helpers and metrics."""

from .metrics import (
    AUDIO_RESPONSE_BYTES,
    ERROR_COUNTER,
    FETCH_ATTEMPTS,
    REQUEST_COUNT,
    REQUEST_LATENCY,
    UPSTREAM_CALLS,
    observe_audio_response,
    observe_request,
    record_fetch_attempt,
    record_upstream_call,
)

__all__ = [
    "AUDIO_RESPONSE_BYTES",
    "ERROR_COUNTER",
    "FETCH_ATTEMPTS",
    "REQUEST_COUNT",
    "REQUEST_LATENCY",
    "UPSTREAM_CALLS",
    "observe_audio_response",
    "observe_request",
    "record_fetch_attempt",
    "record_upstream_call",
]
