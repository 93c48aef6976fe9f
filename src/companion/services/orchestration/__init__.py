"""Orchestration services package - session lifecycle."""

from companion.services.orchestration.session_orchestrator import SessionOrchestrator
from companion.services.orchestration.session_summarizer import (
    SessionSummarizer,
    compute_urgency,
    recommend_days,
    recommend_focus,
    recommend_next_session,
)
from companion.services.orchestration.companion_service import CompanionService

__all__ = [
    "SessionOrchestrator",
    "SessionSummarizer",
    "compute_urgency",
    "recommend_days",
    "recommend_focus",
    "recommend_next_session",
    "CompanionService",
]
