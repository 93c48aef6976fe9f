"""
Prometheus Metrics

Session engine observability.
Exposes metrics at /metrics endpoint for Prometheus scraping.

ARCHITECTURE: Metrics are decoupled from business logic.
Only increment/observe; never block on metrics operations.
"""

from prometheus_client import (
    Counter,
    Histogram,
    Gauge,
    Info,
    generate_latest,
    CONTENT_TYPE_LATEST,
    REGISTRY,
)
from fastapi import APIRouter, Response

from companion import __version__
from companion.config.logging_config import get_logger

logger = get_logger(__name__)

# =============================================================================
# SESSION METRICS
# =============================================================================

SESSIONS_STARTED_TOTAL = Counter(
    "companion_sessions_started_total",
    "Total number of sessions started",
)

SESSIONS_COMPLETED_TOTAL = Counter(
    "companion_sessions_completed_total",
    "Total number of sessions completed",
    ["trend"],  # improved, declined, neutral
)

SESSION_DURATION = Histogram(
    "companion_session_duration_seconds",
    "Duration of completed sessions",
    ["trend"],
    buckets=[60, 300, 600, 1200, 1800, 3600, 7200],  # 1m to 2h
)

ACTIVE_SESSIONS = Gauge(
    "companion_active_sessions",
    "Number of currently active sessions",
)

RECOMMENDED_DAYS = Histogram(
    "companion_next_session_recommended_days",
    "Days until the recommended next session",
    buckets=[1, 2, 3, 5, 7, 10, 14, 21, 32],
)

# =============================================================================
# TURN METRICS
# =============================================================================

TURNS_TOTAL = Counter(
    "companion_turns_total",
    "Turns processed by response kind",
    ["kind"],  # safety, intervention, informational
)

CATALOG_FALLBACKS_TOTAL = Counter(
    "companion_catalog_fallbacks_total",
    "Turns answered with a generic message because the catalog had no entries",
)

# =============================================================================
# SAFETY METRICS
# =============================================================================

SAFETY_SCREENINGS_TOTAL = Counter(
    "companion_safety_screenings_total",
    "Safety screenings by tier",
    ["tier"],  # none, warning, emergency
)

RESOURCES_PROVIDED = Counter(
    "companion_crisis_resources_provided_total",
    "Crisis resources surfaced to users",
    ["country_code"],
)

# =============================================================================
# API METRICS
# =============================================================================

HTTP_REQUESTS_TOTAL = Counter(
    "companion_http_requests_total",
    "Total HTTP requests",
    ["method", "endpoint", "status_code"],
)

HTTP_REQUEST_DURATION = Histogram(
    "companion_http_request_duration_seconds",
    "HTTP request duration",
    ["method", "endpoint"],
    buckets=[0.01, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0],
)

# =============================================================================
# SYSTEM INFO
# =============================================================================

SYSTEM_INFO = Info(
    "companion_system",
    "Session engine information",
)

SYSTEM_INFO.info({
    "version": __version__,
    "environment": "development",  # Updated at runtime
})


# =============================================================================
# HELPER FUNCTIONS
# =============================================================================

def track_session_started() -> None:
    """Record a session entering ACTIVE."""
    SESSIONS_STARTED_TOTAL.inc()
    ACTIVE_SESSIONS.inc()


def track_session_completed(
    trend: str,
    duration_seconds: float,
    recommended_days: int,
) -> None:
    """Record session completion metrics."""
    SESSIONS_COMPLETED_TOTAL.labels(trend=trend).inc()
    SESSION_DURATION.labels(trend=trend).observe(duration_seconds)
    RECOMMENDED_DAYS.observe(recommended_days)
    ACTIVE_SESSIONS.dec()


def track_turn(kind: str) -> None:
    """Record a processed turn by response kind."""
    TURNS_TOTAL.labels(kind=kind).inc()


def track_catalog_fallback() -> None:
    """Record a generic fallback response."""
    CATALOG_FALLBACKS_TOTAL.inc()


def track_safety_screening(tier: str) -> None:
    """Record safety screening tier."""
    SAFETY_SCREENINGS_TOTAL.labels(tier=tier).inc()


def track_resources_provided(country_code: str) -> None:
    """Record crisis resources surfaced for a jurisdiction."""
    RESOURCES_PROVIDED.labels(country_code=country_code).inc()


def track_http_request(
    method: str,
    endpoint: str,
    status_code: int,
    duration_seconds: float,
) -> None:
    """Record HTTP request metrics."""
    HTTP_REQUESTS_TOTAL.labels(
        method=method, endpoint=endpoint, status_code=str(status_code)
    ).inc()
    HTTP_REQUEST_DURATION.labels(method=method, endpoint=endpoint).observe(duration_seconds)


# =============================================================================
# METRICS ENDPOINT
# =============================================================================

metrics_router = APIRouter(tags=["metrics"])


@metrics_router.get("/metrics")
async def metrics() -> Response:
    """
    Prometheus metrics endpoint.

    Returns metrics in Prometheus text format for scraping.
    """
    return Response(
        content=generate_latest(REGISTRY),
        media_type=CONTENT_TYPE_LATEST,
    )


def update_system_info(environment: str, version: str = __version__) -> None:
    """Update system info metric with current environment."""
    SYSTEM_INFO.info({
        "version": version,
        "environment": environment,
    })
