"""
Prometheus metrics for the registration path.
Exposed at the /metrics endpoint.
"""

from prometheus_client import Counter, Histogram, generate_latest, CONTENT_TYPE_LATEST
from fastapi import Response

registration_attempts = Counter(
    'registration_attempts_total',
    'Total event registration attempts',
    ['status']  # success, full, duplicate, conflict
)

registration_latency = Histogram(
    'registration_latency_seconds',
    'Time spent admitting a registration',
    buckets=[0.001, 0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0]
)

registration_retries = Counter(
    'registration_retries_total',
    'Admission retries caused by a concurrent change to the event row'
)

event_operations = Counter(
    'event_operations_total',
    'Event write operations',
    ['operation']  # create, update, delete
)


def metrics_endpoint() -> Response:
    return Response(
        content=generate_latest(),
        media_type=CONTENT_TYPE_LATEST
    )


def record_registration_attempt(status: str):
    """Status: success, full, duplicate, conflict"""
    registration_attempts.labels(status=status).inc()


def record_registration_retry():
    registration_retries.inc()


def record_event_operation(operation: str):
    event_operations.labels(operation=operation).inc()
