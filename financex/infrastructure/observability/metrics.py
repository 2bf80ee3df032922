"""Prometheus metrics for projections, debt ledger activity and request latency"""

from prometheus_client import Counter, Histogram

# Projection metrics
projection_counter = Counter(
    "financex_projection_total",
    "Month-end projections computed",
    ["outcome"],  # positive | negative
)

# Ledger metrics
debt_payment_counter = Counter(
    "financex_debt_payment_total",
    "Debt payments applied or retracted",
    ["action", "outcome"],  # apply | retract; applied | debt_not_found | payment_not_found
)

# Service health
request_duration_histogram = Histogram(
    "http_request_duration_seconds",
    "HTTP request latency",
    ["method", "endpoint", "status"],
)


def record_projection(is_positive: bool) -> None:
    """Record projection outcome for monitoring how many users trend negative"""
    projection_counter.labels(outcome="positive" if is_positive else "negative").inc()


def record_ledger_change(action: str, outcome: str) -> None:
    debt_payment_counter.labels(action=action, outcome=outcome).inc()
