"""Prometheus metrics for fee quotes, risk assessments, and request latency"""

from typing import Optional

from prometheus_client import Counter, Histogram

# Fee metrics
fee_quote_counter = Counter(
    "backoffice_fee_quotes_total",
    "Fee quotes computed",
    ["corridor"],  # domestic | international
)

fee_clamped_counter = Counter(
    "backoffice_fee_clamped_total",
    "Fee quotes clamped to a schedule bound",
    ["bound"],  # minimum | maximum
)

# Risk metrics
risk_assessment_counter = Counter(
    "backoffice_risk_assessments_total",
    "Merchant risk assessments computed",
    ["level"],  # low | medium | high | critical
)

# Rejected input
invalid_request_counter = Counter(
    "backoffice_invalid_requests_total",
    "Requests rejected by domain validation",
    ["operation"],
)

# Service health
request_duration_histogram = Histogram(
    "http_request_duration_seconds",
    "HTTP request latency",
    ["method", "endpoint", "status"],
)


def record_fee_quote(corridor: str, clamped_to: Optional[str]) -> None:
    """Record a fee quote and, if it hit a bound, which one"""
    fee_quote_counter.labels(corridor=corridor).inc()
    if clamped_to is not None:
        fee_clamped_counter.labels(bound=clamped_to).inc()


def record_risk_assessment(level: str) -> None:
    """Record an assessment for monitoring the portfolio's risk distribution"""
    risk_assessment_counter.labels(level=level).inc()
