"""
Session Domain Model

Represents one guided self-help session: the ordered turns, the
emotional snapshot at each turn, and the summary produced when the
session ends.

A record is created at session start and sealed (read-only) once the
session ends. Sealed records are never reopened.

PRIVACY: Turn text may contain sensitive information and should be
encrypted at rest by whichever collaborator persists records.
"""

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Optional
from uuid import UUID, uuid4

from companion.domain.models.emotional_state import (
    EmotionalJourney,
    EmotionalState,
    utc_now,
)
from companion.domain.models.intervention import HomeActivity
from companion.domain.models.responses import SafetyResponse, TurnResponse


@dataclass(frozen=True)
class SessionTurn:
    """
    One user-input / agent-response exchange.

    Attributes:
        user_text: What the user submitted
        response: What the engine produced
        state: Emotional snapshot at this point of the session
        focus_areas: Focus areas assigned (empty for safety turns)
        intervention_id: Intervention offered, if any
        themes: Stressor themes mentioned in the text
        timestamp: When the turn completed
    """

    user_text: str
    response: TurnResponse
    state: EmotionalState
    focus_areas: tuple[str, ...] = ()
    intervention_id: Optional[str] = None
    themes: tuple[str, ...] = ()
    timestamp: datetime = field(default_factory=utc_now)

    @property
    def is_safety_turn(self) -> bool:
        return isinstance(self.response, SafetyResponse)

    def to_dict(self) -> dict:
        """Serialize turn (user text excluded)."""
        return {
            "kind": self.response.kind,
            "state": self.state.to_dict(),
            "focus_areas": list(self.focus_areas),
            "intervention_id": self.intervention_id,
            "themes": list(self.themes),
            "timestamp": self.timestamp.isoformat(),
        }


@dataclass(frozen=True)
class NextSessionRecommendation:
    """When to meet again and what to focus on."""

    recommended_date: date
    recommended_days: int
    recommended_focus: str
    urgency: float

    def to_dict(self) -> dict:
        return {
            "recommended_date": self.recommended_date.isoformat(),
            "recommended_days": self.recommended_days,
            "recommended_focus": self.recommended_focus,
            "urgency": round(self.urgency, 3),
        }


@dataclass(frozen=True)
class SessionSummary:
    """
    End-of-session summary.

    Derived from the sealed record; never edited independently.

    Attributes:
        main_themes: Distinct focus areas used, in first-use order
        key_insights: Observations from emotional changes and interventions
        emotional_journey: Overall trend plus significant changes
        home_activity: Activity to practice before next session
        next_session: Next-session recommendation
        stressors_discussed: Stressor themes mentioned during the session
        effectiveness_observations: Intervention ID -> overall delta after it
        turn_count: Total turns recorded
        safety_turn_count: Turns answered with a safety response
    """

    main_themes: tuple[str, ...]
    key_insights: tuple[str, ...]
    emotional_journey: EmotionalJourney
    home_activity: HomeActivity
    next_session: NextSessionRecommendation
    stressors_discussed: tuple[str, ...] = ()
    effectiveness_observations: dict[str, float] = field(default_factory=dict)
    turn_count: int = 0
    safety_turn_count: int = 0

    def to_dict(self) -> dict:
        return {
            "summary": {
                "main_themes": list(self.main_themes),
                "key_insights": list(self.key_insights),
                "emotional_journey": self.emotional_journey.to_dict(),
                "stressors_discussed": list(self.stressors_discussed),
                "effectiveness_observations": {
                    k: round(v, 3) for k, v in self.effectiveness_observations.items()
                },
                "turn_count": self.turn_count,
                "safety_turn_count": self.safety_turn_count,
            },
            "home_activity": self.home_activity.to_dict(),
            "next_session": self.next_session.to_dict(),
        }


class SealedSessionError(RuntimeError):
    """Raised when writing to a sealed session record."""


@dataclass
class SessionRecord:
    """
    Session entity.

    Attributes:
        id: Unique session identifier
        user_id: Associated user ID
        baseline: Emotional baseline at session start
        started_at: Session start time
        ended_at: Session end time (once sealed)
        turns: Ordered turns
        summary: Summary (once sealed)
    """

    baseline: EmotionalState
    user_id: Optional[UUID] = None
    id: UUID = field(default_factory=uuid4)
    started_at: datetime = field(default_factory=utc_now)
    ended_at: Optional[datetime] = None
    turns: list[SessionTurn] = field(default_factory=list)
    summary: Optional[SessionSummary] = None

    @property
    def is_sealed(self) -> bool:
        return self.ended_at is not None

    def add_turn(self, turn: SessionTurn) -> SessionTurn:
        """
        Append a turn.

        Raises:
            SealedSessionError: If the record is sealed
        """
        if self.is_sealed:
            raise SealedSessionError(f"Session {self.id} is sealed")
        self.turns.append(turn)
        return turn

    def seal(self, summary: SessionSummary, ended_at: Optional[datetime] = None) -> None:
        """Attach the summary and make the record read-only."""
        if self.is_sealed:
            raise SealedSessionError(f"Session {self.id} is already sealed")
        self.summary = summary
        self.ended_at = ended_at or utc_now()

    def focus_history(self) -> list[str]:
        """Focus areas assigned across turns, in order (with repeats)."""
        return [area for turn in self.turns for area in turn.focus_areas]

    def intervention_history(self) -> list[str]:
        """Intervention IDs offered across turns, in order."""
        return [turn.intervention_id for turn in self.turns if turn.intervention_id]

    @property
    def turn_count(self) -> int:
        return len(self.turns)

    @property
    def duration_seconds(self) -> int:
        end = self.ended_at or utc_now()
        return int((end - self.started_at).total_seconds())

    def to_dict(self) -> dict:
        """Serialize session to dictionary."""
        return {
            "id": str(self.id),
            "user_id": str(self.user_id) if self.user_id else None,
            "started_at": self.started_at.isoformat(),
            "ended_at": self.ended_at.isoformat() if self.ended_at else None,
            "turn_count": self.turn_count,
            "baseline": self.baseline.to_dict(),
            "turns": [turn.to_dict() for turn in self.turns],
            "duration_seconds": self.duration_seconds,
        }
