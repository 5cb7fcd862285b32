"""Prometheus metrics for record activity, interest accrual and recovery"""

from prometheus_client import Counter, Histogram, Gauge

# Record metrics
record_change_counter = Counter(
    "collections_record_changes_total",
    "Records created, updated or deleted",
    ["entity", "action"],  # debtor | instrument | payment | process_stage
)

domain_error_counter = Counter(
    "collections_domain_errors_total",
    "Requests rejected with a domain error",
    ["kind"],
)

# Interest metrics
interest_recalculation_counter = Counter(
    "collections_interest_recalculations_total",
    "Interest recalculation requests",
    ["outcome"],  # accrued | not_due
)

# Portfolio health
recovery_percentage_gauge = Gauge(
    "collections_recovery_percentage",
    "Recovery percentage at the last statistics snapshot",
)

pending_debt_gauge = Gauge(
    "collections_pending_debt",
    "Pending debt (principal plus accrued interest) at the last statistics snapshot",
)

# Service health
request_duration_histogram = Histogram(
    "http_request_duration_seconds",
    "HTTP request latency",
    ["method", "endpoint", "status"],
)


def record_change(entity: str, action: str, changed: int = 1) -> None:
    """Count record changes; zero-count updates and deletes are not counted"""
    if changed:
        record_change_counter.labels(entity=entity, action=action).inc(changed)


def record_interest_recalculation(changed: int) -> None:
    interest_recalculation_counter.labels(outcome="accrued" if changed else "not_due").inc()


def record_statistics(recovery_percentage: float, pending_debt: float) -> None:
    recovery_percentage_gauge.set(recovery_percentage)
    pending_debt_gauge.set(pending_debt)
