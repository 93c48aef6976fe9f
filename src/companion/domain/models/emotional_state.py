"""
Emotional State Domain Model

Numeric emotional snapshots recorded across a session.

Each snapshot holds four component dimensions (anxiety, depression,
anger, joy) and an overall score, all on a 1-10 scale. Snapshots are
immutable; the tracker appends a new one instead of editing in place.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Mapping, Optional

from companion.domain.enums.emotion import EmotionDimension, JourneyTrend


SCORE_MIN: float = 1.0
SCORE_MAX: float = 10.0
NEUTRAL_SCORE: float = 5.0


def utc_now() -> datetime:
    """Timezone-aware current UTC time."""
    return datetime.now(timezone.utc)


def clamp_score(value: float) -> float:
    """Clamp a score into the 1-10 range."""
    return max(SCORE_MIN, min(SCORE_MAX, float(value)))


@dataclass(frozen=True)
class EmotionalState:
    """
    Immutable emotional snapshot.

    Attributes:
        overall: Overall wellbeing score (1-10)
        anxiety: Anxiety level (1-10)
        depression: Low mood level (1-10)
        anger: Anger level (1-10)
        joy: Joy level (1-10)
        timestamp: When the snapshot was recorded
    """

    overall: float = NEUTRAL_SCORE
    anxiety: float = NEUTRAL_SCORE
    depression: float = NEUTRAL_SCORE
    anger: float = NEUTRAL_SCORE
    joy: float = NEUTRAL_SCORE
    timestamp: datetime = field(default_factory=utc_now)

    def __post_init__(self) -> None:
        """Validate every score is within range."""
        for name in ("overall", *EmotionDimension.components()):
            value = getattr(self, str(name))
            if not SCORE_MIN <= value <= SCORE_MAX:
                raise ValueError(f"{name} must be {SCORE_MIN}-{SCORE_MAX}, got {value}")

    @classmethod
    def from_components(
        cls,
        components: Mapping[EmotionDimension, float],
        timestamp: Optional[datetime] = None,
    ) -> "EmotionalState":
        """
        Build a snapshot whose overall score is the mean of the components.

        Missing components default to the neutral score. Values are clamped.
        """
        values = {
            dim: clamp_score(components.get(dim, NEUTRAL_SCORE))
            for dim in EmotionDimension.components()
        }
        overall = clamp_score(sum(values.values()) / len(values))
        return cls(
            overall=overall,
            anxiety=values[EmotionDimension.ANXIETY],
            depression=values[EmotionDimension.DEPRESSION],
            anger=values[EmotionDimension.ANGER],
            joy=values[EmotionDimension.JOY],
            timestamp=timestamp or utc_now(),
        )

    def get(self, dimension: EmotionDimension) -> float:
        """Get the score for one component dimension."""
        return getattr(self, dimension.value)

    def components(self) -> dict[EmotionDimension, float]:
        """Component scores keyed by dimension."""
        return {dim: self.get(dim) for dim in EmotionDimension.components()}

    def to_dict(self) -> dict:
        """Serialize to dictionary."""
        return {
            "overall": round(self.overall, 3),
            "anxiety": round(self.anxiety, 3),
            "depression": round(self.depression, 3),
            "anger": round(self.anger, 3),
            "joy": round(self.joy, 3),
            "timestamp": self.timestamp.isoformat(),
        }


@dataclass(frozen=True)
class EmotionalChange:
    """A significant change in one dimension across a session."""

    dimension: EmotionDimension
    direction: str  # increased, decreased
    magnitude: float

    def to_dict(self) -> dict:
        return {
            "dimension": self.dimension.value,
            "direction": self.direction,
            "magnitude": round(self.magnitude, 3),
        }


@dataclass(frozen=True)
class EmotionalJourney:
    """
    Trend of the overall score plus significant per-dimension changes.

    Changes are ordered anxiety, depression, anger, joy.
    """

    trend: JourneyTrend = JourneyTrend.NEUTRAL
    changes: tuple[EmotionalChange, ...] = ()

    def to_dict(self) -> dict:
        return {
            "trend": self.trend.value,
            "changes": [change.to_dict() for change in self.changes],
        }
