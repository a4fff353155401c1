"""Prometheus metrics for goal activity, penalties, and ledger transfer performance"""

from prometheus_client import Counter, Histogram

# Goal lifecycle metrics
goals_created_counter = Counter(
    "savings_goals_created_total",
    "Savings goals created",
)

withdrawal_counter = Counter(
    "savings_withdrawals_total",
    "Goals terminated by withdrawal",
    ["kind"],  # matured | emergency
)

penalty_collected_counter = Counter(
    "savings_penalty_collected_units_total",
    "Emergency penalties paid to the admin, in smallest token units",
)

domain_error_counter = Counter(
    "savings_domain_errors_total",
    "Savings operations rejected with a domain error",
    ["error"],
)

# Ledger metrics
transfer_latency_histogram = Histogram(
    "ledger_transfer_latency_seconds",
    "Ledger transfer response time",
    buckets=[0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0],
)

transfer_failure_counter = Counter(
    "ledger_transfer_failures_total",
    "Failed ledger transfer attempts",
)

# Service health
request_duration_histogram = Histogram(
    "http_request_duration_seconds",
    "HTTP request latency",
    ["method", "endpoint", "status"],
)


def record_withdrawal(kind: str, penalty: int = 0) -> None:
    """Record a terminal transition and any penalty it produced"""
    withdrawal_counter.labels(kind=kind).inc()
    if penalty > 0:
        penalty_collected_counter.inc(penalty)
