"""Domain enums package."""

from companion.domain.enums.safety_tier import SafetyTier, RiskCategory
from companion.domain.enums.session_phase import SessionPhase
from companion.domain.enums.emotion import EmotionDimension, JourneyTrend

__all__ = [
    "SafetyTier",
    "RiskCategory",
    "SessionPhase",
    "EmotionDimension",
    "JourneyTrend",
]
