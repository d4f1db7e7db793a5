"""Monitoring configuration for the drill application."""
from prometheus_client import Counter, Histogram, start_http_server

# Session metrics
sessions_started = Counter(
    "vocamarathon_sessions_started_total",
    "Total number of marathon sessions started",
)

sessions_completed = Counter(
    "vocamarathon_sessions_completed_total",
    "Total number of marathon sessions driven to full mastery",
)

sessions_abandoned = Counter(
    "vocamarathon_sessions_abandoned_total",
    "Total number of marathon sessions left before completion",
)

empty_pools = Counter(
    "vocamarathon_empty_pools_total",
    "Total number of session starts refused because the pool was empty",
)

session_attempts = Histogram(
    "vocamarathon_session_attempts",
    "Number of submitted answers per completed session",
    buckets=[5, 10, 25, 50, 100, 250, 500],
)

# Answer metrics
answers = Counter(
    "vocamarathon_answers_total",
    "Total number of submitted answers",
    ["outcome"],
)

typo_acceptances = Counter(
    "vocamarathon_typo_acceptances_total",
    "Total number of answers accepted within the typo tolerance",
)

# Error metrics
history_write_errors = Counter(
    "vocamarathon_history_write_errors_total",
    "Total number of failed session history writes",
)


def start_monitoring(port: int = 9090) -> None:
    """Start the Prometheus metrics server."""
    start_http_server(port)
