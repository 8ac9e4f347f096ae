"""
Prometheus metrics for the study room service.

Service operations are recorded by the @measure_operation decorator; the
booking engine, lock scope and weekly reset record their own domain counters.
"""

from typing import Optional, cast

from prometheus_client import (
    CONTENT_TYPE_LATEST,
    CollectorRegistry,
    Counter,
    Histogram,
    generate_latest,
)

# Create a custom registry to avoid conflicts with default metrics
REGISTRY = CollectorRegistry()

service_operation_duration_seconds = Histogram(
    "studyroom_service_operation_duration_seconds",
    "Service operation duration in seconds",
    ["service", "operation"],
    registry=REGISTRY,
    buckets=(0.001, 0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5),
)

service_operations_total = Counter(
    "studyroom_service_operations_total",
    "Total number of service operations",
    ["service", "operation", "status"],
    registry=REGISTRY,
)

errors_total = Counter(
    "studyroom_errors_total",
    "Total number of errors",
    ["service", "operation", "error_type"],
    registry=REGISTRY,
)

booking_outcomes_total = Counter(
    "studyroom_booking_outcomes_total",
    "Booking attempts by outcome code",
    ["outcome"],  # created | SLOT_TAKEN | QUOTA_EXCEEDED | ...
    registry=REGISTRY,
)

booking_lock_total = Counter(
    "studyroom_booking_lock_total",
    "Booking lock operations",
    ["operation", "status"],
    registry=REGISTRY,
)

reservations_deleted_total = Counter(
    "studyroom_reservations_deleted_total",
    "Reservations removed, by reason",
    ["reason"],  # user | purge | weekly_reset
    registry=REGISTRY,
)

weekly_reset_runs_total = Counter(
    "studyroom_weekly_reset_runs_total",
    "Weekly full-reset executions",
    ["status"],  # success | error
    registry=REGISTRY,
)



class PrometheusMetrics:
    """Thin recording facade over the module-level collectors."""

    @staticmethod
    def record_service_operation(
        service: str,
        operation: str,
        duration: float,
        status: str = "success",
        error_type: Optional[str] = None,
    ) -> None:
        service_operation_duration_seconds.labels(service=service, operation=operation).observe(
            duration
        )
        service_operations_total.labels(service=service, operation=operation, status=status).inc()
        if error_type:
            errors_total.labels(service=service, operation=operation, error_type=error_type).inc()

    @staticmethod
    def record_booking_outcome(outcome: str) -> None:
        """``outcome`` is "created" or the rejecting error code."""
        booking_outcomes_total.labels(outcome=outcome).inc()

    @staticmethod
    def record_booking_lock(operation: str, status: str) -> None:
        booking_lock_total.labels(operation=operation, status=status).inc()

    @staticmethod
    def record_reservations_deleted(reason: str, count: int) -> None:
        if count > 0:
            reservations_deleted_total.labels(reason=reason).inc(count)

    @staticmethod
    def record_weekly_reset(status: str) -> None:
        weekly_reset_runs_total.labels(status=status).inc()

    @staticmethod
    def get_metrics() -> bytes:
        """Current values of every collector in Prometheus text format."""
        return cast(bytes, generate_latest(REGISTRY))

    @staticmethod
    def get_content_type() -> str:
        return cast(str, CONTENT_TYPE_LATEST)


prometheus_metrics = PrometheusMetrics()
