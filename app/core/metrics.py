"""
Prometheus metrics for the vote API.

HTTP request metrics come from prometheus-fastapi-instrumentator (mounted in
app.main); the counters here cover the odds provider and database writes.
"""
from prometheus_client import Counter

# External API Metrics
odds_api_requests_success_total = Counter(
    "odds_api_requests_success_total",
    "Total successful Odds API requests"
)

odds_api_requests_failure_total = Counter(
    "odds_api_requests_failure_total",
    "Total failed Odds API requests",
    ["error_type"]
)

# Write Metrics
votes_submitted_total = Counter(
    "votes_submitted_total",
    "Total votes recorded"
)

game_results_upserted_total = Counter(
    "game_results_upserted_total",
    "Total game result upserts"
)

persistence_errors_total = Counter(
    "persistence_errors_total",
    "Total database failures surfaced to callers",
    ["operation"]
)


def record_odds_api_success() -> None:
    odds_api_requests_success_total.inc()


def record_odds_api_failure(error_type: str) -> None:
    """Record a failed Odds API call (e.g. "http_401", "transport", "missing_key")."""
    odds_api_requests_failure_total.labels(error_type=error_type).inc()


def record_persistence_error(operation: str) -> None:
    persistence_errors_total.labels(operation=operation).inc()
