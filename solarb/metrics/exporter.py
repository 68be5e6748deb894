"""Prometheus metrics collectors and helpers.

This module exposes counters and gauges for tracking discovered
opportunities and submissions as well as a helper for starting the metrics
HTTP server.
"""

from prometheus_client import Counter, Gauge, Histogram, start_http_server

# Metric collectors
OPPORTUNITIES_TOTAL = Counter(
    "opportunities_total", "Profitable cycles handed to submission"
)
DUPLICATES_TOTAL = Counter(
    "duplicate_opportunities_total", "Profitable cycles skipped as already sent"
)
QUOTE_ERRORS_TOTAL = Counter(
    "quote_errors_total", "Branches abandoned on quote failures", ["pool"]
)
SUBMISSIONS_TOTAL = Counter(
    "submissions_total", "Transactions simulated or sent", ["mode", "result"]
)
SUBMISSION_ERRORS_TOTAL = Counter(
    "submission_errors_total", "Failures while signing or sending", ["stage"]
)
POOLS_EXCLUDED_TOTAL = Counter(
    "pools_excluded_total", "Pools excluded from a pass after refresh failures"
)
LAST_PROFIT = Gauge(
    "last_profit_scaled", "Scaled profit of the most recent opportunity"
)
SEARCH_PASS_LATENCY = Histogram(
    "search_pass_seconds", "Duration of one search pass in seconds"
)


def start_metrics_server(port: int) -> None:
    """Start the Prometheus metrics server on the provided ``port``.

    Parameters
    ----------
    port:
        TCP port to bind the HTTP server to.
    """

    # Be tolerant of env-sourced strings like "9109".
    start_http_server(int(port))
