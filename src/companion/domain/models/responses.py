"""
Turn Response Models

Discriminated results returned for each submitted turn. The `kind`
field tags the variant; each variant carries only its own fields.

- safety: crisis screening flagged the turn
- intervention: a therapeutic activity was selected
- informational: generic supportive message (no catalogued activity)
"""

from dataclasses import dataclass
from typing import Literal, Optional, Union
from uuid import UUID

from companion.domain.enums.safety_tier import RiskCategory, SafetyTier
from companion.domain.models.emotional_state import EmotionalState
from companion.domain.models.intervention import Intervention
from companion.domain.models.safety import CrisisResource


@dataclass(frozen=True)
class SafetyResponse:
    """
    Response for a turn flagged by crisis screening.

    Emergency responses carry `instructions`; warning responses
    carry `continue_prompt`.
    """

    tier: SafetyTier
    category: Optional[RiskCategory]
    message: str
    resources: tuple[CrisisResource, ...]
    instructions: Optional[str] = None
    continue_prompt: Optional[str] = None
    kind: Literal["safety"] = "safety"

    @property
    def text(self) -> str:
        return self.message

    def to_dict(self) -> dict:
        payload = {
            "tier": self.tier.label,
            "category": self.category.value if self.category else None,
            "message": self.message,
            "resources": [r.to_dict() for r in self.resources],
        }
        if self.instructions is not None:
            payload["instructions"] = self.instructions
        if self.continue_prompt is not None:
            payload["continue_prompt"] = self.continue_prompt
        return {"kind": self.kind, "payload": payload}


@dataclass(frozen=True)
class InterventionResponse:
    """Response offering a therapeutic intervention."""

    introduction: str
    intervention: Intervention
    focus_areas: tuple[str, ...]
    kind: Literal["intervention"] = "intervention"

    @property
    def text(self) -> str:
        return self.introduction

    def to_dict(self) -> dict:
        return {
            "kind": self.kind,
            "payload": {
                "introduction": self.introduction,
                "intervention_id": self.intervention.id,
                "title": self.intervention.title,
                "duration": self.intervention.duration,
                "content": self.intervention.content,
                "follow_up": self.intervention.follow_up,
                "focus_areas": list(self.focus_areas),
            },
        }


@dataclass(frozen=True)
class InformationalResponse:
    """Generic supportive message when no activity can be offered."""

    message: str
    focus_areas: tuple[str, ...] = ()
    kind: Literal["informational"] = "informational"

    @property
    def text(self) -> str:
        return self.message

    def to_dict(self) -> dict:
        return {
            "kind": self.kind,
            "payload": {
                "message": self.message,
                "focus_areas": list(self.focus_areas),
            },
        }


TurnResponse = Union[SafetyResponse, InterventionResponse, InformationalResponse]


@dataclass(frozen=True)
class SessionStart:
    """Result of starting a session."""

    session_id: UUID
    greeting: str
    focus_areas: tuple[str, ...]
    suggested_activities: tuple[Intervention, ...]
    baseline: EmotionalState

    def to_dict(self) -> dict:
        return {
            "session_id": str(self.session_id),
            "greeting": self.greeting,
            "focus_areas": list(self.focus_areas),
            "suggested_activities": [a.to_suggestion() for a in self.suggested_activities],
            "baseline": self.baseline.to_dict(),
        }
