"""Prometheus metrics for monitoring quotes, validation outcomes and plan-creation flows"""

from prometheus_client import Counter, Histogram

# Quote metrics
quote_counter = Counter(
    "pension_quote_total",
    "Total deposit quotes computed",
)

deposit_bucket_counter = Counter(
    "pension_deposit_bucket",
    "Quoted deposits by bucket",
    ["bucket"],  # $0, $0-$1k, $1k-$10k, $10k-$100k, $100k+
)

validation_counter = Counter(
    "pension_validation_total",
    "Plan validation outcomes",
    ["outcome"],  # ok | violated rule id
)

# Transaction flow metrics
flow_transition_counter = Counter(
    "pension_flow_transition_total",
    "Transaction flow state transitions",
    ["from_step", "to_step"],
)

# Webhook metrics
webhook_latency_histogram = Histogram(
    "webhook_latency_seconds",
    "Plan event webhook response time",
    buckets=[0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0],
)

webhook_failure_counter = Counter(
    "webhook_failures_total",
    "Failed webhook deliveries",
)

# Chain API metrics
chain_fetch_failures_counter = Counter(
    "chain_fetch_failures_total",
    "Failed chain state API calls",
)

# Service health
request_duration_histogram = Histogram(
    "http_request_duration_seconds",
    "HTTP request latency",
    ["method", "endpoint", "status"],
)

MINOR_PER_USDC = 1_000_000


def record_quote(required_deposit_minor: int) -> None:
    """Record quote metrics for monitoring deposit size distribution"""
    quote_counter.inc()

    if required_deposit_minor == 0:
        bucket = "$0"
    elif required_deposit_minor <= 1_000 * MINOR_PER_USDC:
        bucket = "$0-$1k"
    elif required_deposit_minor <= 10_000 * MINOR_PER_USDC:
        bucket = "$1k-$10k"
    elif required_deposit_minor <= 100_000 * MINOR_PER_USDC:
        bucket = "$10k-$100k"
    else:
        bucket = "$100k+"

    deposit_bucket_counter.labels(bucket=bucket).inc()


def record_validation(violated_rule: str | None) -> None:
    validation_counter.labels(outcome=violated_rule or "ok").inc()


def record_flow_transition(from_step: str, to_step: str) -> None:
    flow_transition_counter.labels(from_step=from_step, to_step=to_step).inc()
