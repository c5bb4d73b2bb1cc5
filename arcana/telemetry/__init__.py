"""Telemetry helpers and metrics."""

from .metrics import (
    ERROR_COUNTER,
    ORACLE_ATTEMPTS,
    READING_REQUESTS,
    REQUEST_COUNT,
    REQUEST_LATENCY,
    SPEECH_OUTCOMES,
    observe_request,
    record_oracle_attempt,
    record_reading_request,
    record_speech_outcome,
)

__all__ = [
    "ERROR_COUNTER",
    "ORACLE_ATTEMPTS",
    "READING_REQUESTS",
    "REQUEST_COUNT",
    "REQUEST_LATENCY",
    "SPEECH_OUTCOMES",
    "observe_request",
    "record_oracle_attempt",
    "record_reading_request",
    "record_speech_outcome",
]
