"""Prometheus metrics for report volume, ledger failures and request latency"""

from prometheus_client import Counter, Histogram

# Report metrics
report_counter = Counter(
    "vendor_metrics_report_total",
    "Total reports computed",
    ["report", "outcome"],  # outcome: success | rejected | failed
)

report_rows_histogram = Histogram(
    "vendor_metrics_report_rows",
    "Rows returned per report",
    ["report"],
    buckets=[0, 10, 50, 100, 500, 1_000, 5_000, 10_000, 50_000],
)

# Ledger store metrics
ledger_read_failures_counter = Counter(
    "ledger_read_failures_total",
    "Failed ledger store reads",
)

# Service health
request_duration_histogram = Histogram(
    "http_request_duration_seconds",
    "HTTP request latency",
    ["method", "endpoint", "status"],
)


def record_report(report: str, row_count: int) -> None:
    """Record a successfully computed report and its size"""
    report_counter.labels(report=report, outcome="success").inc()
    report_rows_histogram.labels(report=report).observe(row_count)


def record_report_failure(report: str, rejected: bool) -> None:
    """Rejected = validation/authorization; failed = ledger or unexpected error"""
    report_counter.labels(report=report, outcome="rejected" if rejected else "failed").inc()
