"""
Session Endpoints

Handles guided session lifecycle and turns.
Main interaction point for user conversations.
"""

from typing import Any, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, status
from pydantic import BaseModel, Field

from companion.api.dependencies import get_companion_service
from companion.config.logging_config import get_logger
from companion.domain.models.user import UserProfile
from companion.services.orchestration.companion_service import CompanionService

logger = get_logger(__name__)
router = APIRouter()


# Request/Response Models

class StartSessionRequest(BaseModel):
    """Request to start a new session."""

    profile: dict[str, Any] = Field(
        default_factory=dict,
        description="User profile (validated field by field)",
    )
    check_in: Optional[dict[str, float]] = Field(
        default=None,
        description="Self-reported scores for today (anxiety, depression, anger, joy)",
    )


class StartSessionResponse(BaseModel):
    """Response for session start."""

    session_id: UUID
    greeting: str
    focus_areas: list[str]
    suggested_activities: list[dict[str, Any]]
    baseline: dict[str, Any]


class SubmitTurnRequest(BaseModel):
    """Request to submit a turn in a session."""

    text: str = Field(..., max_length=4000, description="User message")


class TurnResponseModel(BaseModel):
    """Tagged turn response."""

    kind: str
    payload: dict[str, Any]

    model_config = {
        "json_schema_extra": {
            "example": {
                "kind": "intervention",
                "payload": {
                    "introduction": "It sounds like work has been on your mind...",
                    "intervention_id": "breathing-exercise",
                    "title": "Box Breathing",
                    "duration": "5 min",
                    "content": "Breathe in slowly for a count of four...",
                    "follow_up": "How does your body feel now?",
                    "focus_areas": ["anxiety-management"],
                },
            }
        }
    }


class SessionSummaryResponse(BaseModel):
    """End-of-session summary."""

    summary: dict[str, Any]
    home_activity: dict[str, Any]
    next_session: dict[str, Any]


class SessionStatusResponse(BaseModel):
    """Session status information."""

    session_id: UUID
    phase: str
    turn_count: int
    started_at: Optional[str] = None
    ended_at: Optional[str] = None
    current_state: Optional[dict[str, Any]] = None


@router.post(
    "",
    response_model=StartSessionResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Start a new session",
)
async def start_session(
    request: StartSessionRequest,
    service: CompanionService = Depends(get_companion_service),
) -> StartSessionResponse:
    """
    Start a guided session for a user profile.

    Assesses the emotional baseline, chooses initial focus areas
    and returns a greeting with suggested activities.
    """
    profile = UserProfile.from_dict(request.profile)
    start = await service.start_session(profile, request.check_in)

    return StartSessionResponse(**start.to_dict())


@router.post(
    "/{session_id}/turns",
    response_model=TurnResponseModel,
    summary="Submit a turn and receive the response",
)
async def submit_turn(
    session_id: UUID,
    request: SubmitTurnRequest,
    service: CompanionService = Depends(get_companion_service),
) -> TurnResponseModel:
    """
    Submit a message in an active session.

    Every message is screened for crisis indicators first. Flagged
    messages receive a safety response with crisis resources.
    """
    response = await service.submit_turn(session_id, request.text)
    return TurnResponseModel(**response.to_dict())


@router.post(
    "/{session_id}/end",
    response_model=SessionSummaryResponse,
    summary="End a session and get its summary",
)
async def end_session(
    session_id: UUID,
    service: CompanionService = Depends(get_companion_service),
) -> SessionSummaryResponse:
    """End an active session."""
    summary = await service.end_session(session_id)
    return SessionSummaryResponse(**summary.to_dict())


@router.get(
    "/{session_id}",
    response_model=SessionStatusResponse,
    summary="Get session status",
)
async def get_session_status(
    session_id: UUID,
    service: CompanionService = Depends(get_companion_service),
) -> SessionStatusResponse:
    """Get the current status of a session."""
    return SessionStatusResponse(**service.session_status(session_id))
