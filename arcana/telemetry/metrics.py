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
        0.005,
        0.01,
        0.025,
        0.05,
        0.1,
        0.25,
        0.5,
        1.0,
        2.5,
        5.0,
        10.0,
    ),
)

ERROR_COUNTER = Counter(
    "app_internal_errors_total",
    "Number of requests ending in internal server error responses",
    ("method", "route"),
)

READING_REQUESTS = Counter(
    "arcana_reading_requests_total",
    "Reading panel requests by outcome",
    ("outcome",),
)

ORACLE_ATTEMPTS = Counter(
    "arcana_oracle_attempts_total",
    "Remote oracle call attempts by capability and result",
    ("capability", "result"),
)

SPEECH_OUTCOMES = Counter(
    "arcana_speech_outcomes_total",
    "Narration outcomes for generated readings",
    ("outcome",),
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


def record_reading_request(outcome: str) -> None:
    """Count a reading request: ``generated``, ``fallback``, ``shown`` or ``discarded``."""

    READING_REQUESTS.labels(outcome=outcome).inc()


def record_oracle_attempt(capability: str, result: str) -> None:
    ORACLE_ATTEMPTS.labels(capability=capability, result=result).inc()


def record_speech_outcome(outcome: str) -> None:
    SPEECH_OUTCOMES.labels(outcome=outcome).inc()
