"""Domain models package."""

from companion.domain.models.user import UserProfile, ProfileUpdate, THERAPEUTIC_GOALS
from companion.domain.models.emotional_state import (
    EmotionalState,
    EmotionalChange,
    EmotionalJourney,
)
from companion.domain.models.safety import SafetyAssessment, CrisisResource
from companion.domain.models.intervention import (
    Intervention,
    InterventionCatalog,
    HomeActivity,
    GENERAL_WELLBEING,
)
from companion.domain.models.responses import (
    SafetyResponse,
    InterventionResponse,
    InformationalResponse,
    TurnResponse,
    SessionStart,
)
from companion.domain.models.session import (
    SessionTurn,
    SessionRecord,
    SessionSummary,
    NextSessionRecommendation,
)

__all__ = [
    # User models
    "UserProfile",
    "ProfileUpdate",
    "THERAPEUTIC_GOALS",
    # Emotional state
    "EmotionalState",
    "EmotionalChange",
    "EmotionalJourney",
    # Safety
    "SafetyAssessment",
    "CrisisResource",
    # Interventions
    "Intervention",
    "InterventionCatalog",
    "HomeActivity",
    "GENERAL_WELLBEING",
    # Turn responses
    "SafetyResponse",
    "InterventionResponse",
    "InformationalResponse",
    "TurnResponse",
    "SessionStart",
    # Session
    "SessionTurn",
    "SessionRecord",
    "SessionSummary",
    "NextSessionRecommendation",
]
