"""Prometheus metrics for monitoring schedule calculations, promotion usage and the rates API"""

from prometheus_client import Counter, Histogram

from moto_finance.domain.models import ScheduleResult

# Schedule metrics
schedule_counter = Counter(
    "moto_finance_schedule_total",
    "Amortization schedules computed",
    ["mode"],  # fixed_installment | interest_free | degraded
)

financed_amount_bucket_counter = Counter(
    "moto_finance_financed_amount_total",
    "Financed principal by bucket",
    ["bucket"],  # 0, 0-1M, 1M-5M, 5M+
)

# Promotion metrics
promotion_compatibility_counter = Counter(
    "moto_finance_promotion_compatibility_total",
    "Promotion compatibility checks",
    ["outcome"],  # compatible | incompatible
)

quote_counter = Counter(
    "moto_finance_quotes_total",
    "Financing quotes persisted",
)

# Exchange rate API metrics
exchange_rate_latency_histogram = Histogram(
    "exchange_rate_latency_seconds",
    "Exchange rate API response time",
    buckets=[0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0],
)

exchange_rate_failures_counter = Counter(
    "exchange_rate_failures_total",
    "Failed exchange rate lookups",
)

# Service health
request_duration_histogram = Histogram(
    "http_request_duration_seconds",
    "HTTP request latency",
    ["method", "endpoint", "status"],
)


def calculation_mode(result: ScheduleResult) -> str:
    """Classify a schedule result for metrics and logs"""
    if result.warning:
        return "degraded"
    if result.total_interest == 0:
        return "interest_free"
    return "fixed_installment"


def record_schedule(result: ScheduleResult, principal: float) -> None:
    """Record schedule metrics for monitoring calculation modes and financed amounts"""
    schedule_counter.labels(mode=calculation_mode(result)).inc()

    # Bucket principal for distribution analysis
    if principal <= 0:
        bucket = "0"
    elif principal <= 1_000_000:
        bucket = "0-1M"
    elif principal <= 5_000_000:
        bucket = "1M-5M"
    else:
        bucket = "5M+"

    financed_amount_bucket_counter.labels(bucket=bucket).inc()


def record_compatibility(compatible: bool) -> None:
    outcome = "compatible" if compatible else "incompatible"
    promotion_compatibility_counter.labels(outcome=outcome).inc()
