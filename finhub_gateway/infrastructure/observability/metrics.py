"""Prometheus metrics for analytics traffic, scores and store health"""

from prometheus_client import Counter, Histogram

# Analytics metrics
analytics_counter = Counter(
    "finhub_analytics_total",
    "Completed analytics computations",
    ["operation"],  # metrics | health_score | cashflow | bank_comparison | ...
)

personality_counter = Counter(
    "finhub_personality_total",
    "Money personalities assigned",
    ["personality"],  # Planner | Spender | Minimalist | Balancer
)

credit_score_histogram = Histogram(
    "finhub_credit_score",
    "Distribution of issued credit scores",
    buckets=[350, 400, 450, 500, 550, 600, 650, 700, 750, 800, 850],
)

# Store metrics
store_failures_counter = Counter(
    "finhub_store_failures_total",
    "Failed transaction/account store queries",
)

analytics_timeouts_counter = Counter(
    "finhub_analytics_timeouts_total",
    "Analytics requests that exceeded the request timeout",
)

# Service health
request_duration_histogram = Histogram(
    "http_request_duration_seconds",
    "HTTP request latency",
    ["method", "endpoint", "status"],
)


def record_analytics(operation: str) -> None:
    analytics_counter.labels(operation=operation).inc()


def record_insight(personality: str, credit_score: int) -> None:
    """Record classification outcome for monitoring score drift"""
    personality_counter.labels(personality=personality).inc()
    credit_score_histogram.observe(credit_score)
