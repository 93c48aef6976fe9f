"""Metrics infrastructure package."""

from companion.infrastructure.metrics.prometheus_metrics import (
    # Session metrics
    SESSIONS_STARTED_TOTAL,
    SESSIONS_COMPLETED_TOTAL,
    SESSION_DURATION,
    ACTIVE_SESSIONS,
    RECOMMENDED_DAYS,
    # Turn metrics
    TURNS_TOTAL,
    CATALOG_FALLBACKS_TOTAL,
    # Safety metrics
    SAFETY_SCREENINGS_TOTAL,
    RESOURCES_PROVIDED,
    # API metrics
    HTTP_REQUESTS_TOTAL,
    HTTP_REQUEST_DURATION,
    # Helpers
    track_session_started,
    track_session_completed,
    track_turn,
    track_catalog_fallback,
    track_safety_screening,
    track_resources_provided,
    track_http_request,
    update_system_info,
    # Router
    metrics_router,
)

__all__ = [
    "SESSIONS_STARTED_TOTAL",
    "SESSIONS_COMPLETED_TOTAL",
    "SESSION_DURATION",
    "ACTIVE_SESSIONS",
    "RECOMMENDED_DAYS",
    "TURNS_TOTAL",
    "CATALOG_FALLBACKS_TOTAL",
    "SAFETY_SCREENINGS_TOTAL",
    "RESOURCES_PROVIDED",
    "HTTP_REQUESTS_TOTAL",
    "HTTP_REQUEST_DURATION",
    "track_session_started",
    "track_session_completed",
    "track_turn",
    "track_catalog_fallback",
    "track_safety_screening",
    "track_resources_provided",
    "track_http_request",
    "update_system_info",
    "metrics_router",
]
