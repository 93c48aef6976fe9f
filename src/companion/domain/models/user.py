"""
User Profile Domain Model

Long-lived preferences and goals that personalize sessions.

The engine only reads profiles. Changes go through
UserProfile.merged(), a pure merge validated field by field.
"""

from dataclasses import dataclass, field, replace
from typing import Any, Mapping, Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic import ValidationError as PydanticValidationError
from pydantic.alias_generators import to_camel

from companion.domain.enums.emotion import EmotionDimension
from companion.domain.errors import ValidationError


THERAPEUTIC_GOALS: tuple[str, ...] = (
    "anxiety-management",
    "mood-improvement",
    "stress-reduction",
    "relationship-skills",
    "self-esteem",
    "sleep-improvement",
    "work-life-balance",
)
"""Known therapeutic goal tags, in display order."""

ACTIVITY_TYPES: frozenset[str] = frozenset({
    "exercise",
    "meditation",
    "journaling",
    "reading",
})

ACTIVITY_DURATIONS: tuple[str, ...] = ("5 min", "10 min", "15 min", "20 min", "30 min")

MIN_SESSION_FREQUENCY: int = 1
MAX_SESSION_FREQUENCY: int = 30


@dataclass(frozen=True)
class UserProfile:
    """
    User therapy profile.

    Attributes:
        id: User identifier
        display_name: Name used in greetings
        therapeutic_goals: Ordered goal tags (from THERAPEUTIC_GOALS)
        current_stressors: Free-form stressor tags (e.g. "work")
        session_frequency: Preferred days between sessions (1-30)
        preferred_duration: Preferred activity duration
        preferred_activity_type: Preferred home activity type
        intervention_effectiveness: Intervention ID -> score (0.0-1.0)
        emotional_baseline: Self-reported dimension scores (1-10)
    """

    id: UUID = field(default_factory=uuid4)
    display_name: Optional[str] = None
    therapeutic_goals: tuple[str, ...] = ()
    current_stressors: tuple[str, ...] = ()
    session_frequency: int = 7
    preferred_duration: str = "10 min"
    preferred_activity_type: str = "exercise"
    intervention_effectiveness: Mapping[str, float] = field(default_factory=dict)
    emotional_baseline: Mapping[str, float] = field(default_factory=dict)

    @property
    def first_goal(self) -> Optional[str]:
        """First therapeutic goal, if any."""
        return self.therapeutic_goals[0] if self.therapeutic_goals else None

    def effectiveness_of(self, intervention_id: str, default: float = 0.5) -> float:
        """Effectiveness score for an intervention, or the default weight."""
        return self.intervention_effectiveness.get(intervention_id, default)

    def merged(self, patch: Mapping[str, Any]) -> "UserProfile":
        """
        Return a new profile with the patch applied.

        Args:
            patch: Partial update (snake_case or camelCase keys)

        Returns:
            Updated profile (self is unchanged)

        Raises:
            ValidationError: If any field is invalid or unknown
        """
        update = ProfileUpdate.parse_patch(patch)
        changes = {
            key: value
            for key, value in update.model_dump(exclude_unset=True).items()
            if value is not None or key == "display_name"
        }

        for key in ("therapeutic_goals", "current_stressors"):
            if key in changes:
                changes[key] = tuple(changes[key])

        return replace(self, **changes)

    def to_dict(self) -> dict:
        """Serialize profile to dictionary."""
        return {
            "id": str(self.id),
            "display_name": self.display_name,
            "therapeutic_goals": list(self.therapeutic_goals),
            "current_stressors": list(self.current_stressors),
            "session_frequency": self.session_frequency,
            "preferred_duration": self.preferred_duration,
            "preferred_activity_type": self.preferred_activity_type,
            "intervention_effectiveness": dict(self.intervention_effectiveness),
            "emotional_baseline": dict(self.emotional_baseline),
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "UserProfile":
        """
        Create a validated profile from a dictionary.

        Raises:
            ValidationError: If any field is invalid
        """
        fields = {k: v for k, v in data.items() if k != "id"}
        try:
            user_id = UUID(str(data["id"])) if data.get("id") else uuid4()
        except ValueError:
            raise ValidationError({"id": "must be a valid UUID"}) from None
        base = cls(id=user_id)
        return base.merged(fields) if fields else base


class ProfileUpdate(BaseModel):
    """
    Partial profile update.

    Only fields present in the patch are applied. Unknown fields
    are rejected.
    """

    model_config = ConfigDict(
        extra="forbid",
        alias_generator=to_camel,
        populate_by_name=True,
    )

    display_name: Optional[str] = Field(default=None, max_length=100)
    therapeutic_goals: Optional[list[str]] = None
    current_stressors: Optional[list[str]] = None
    session_frequency: Optional[int] = Field(
        default=None,
        ge=MIN_SESSION_FREQUENCY,
        le=MAX_SESSION_FREQUENCY,
    )
    preferred_duration: Optional[str] = None
    preferred_activity_type: Optional[str] = None
    intervention_effectiveness: Optional[dict[str, float]] = None
    emotional_baseline: Optional[dict[str, float]] = None

    @field_validator("therapeutic_goals")
    @classmethod
    def validate_goals(cls, v: Optional[list[str]]) -> Optional[list[str]]:
        if v is None:
            return v
        unknown = [goal for goal in v if goal not in THERAPEUTIC_GOALS]
        if unknown:
            raise ValueError(f"unknown goal tags: {', '.join(unknown)}")
        # Ordered set semantics
        return list(dict.fromkeys(v))

    @field_validator("current_stressors")
    @classmethod
    def validate_stressors(cls, v: Optional[list[str]]) -> Optional[list[str]]:
        if v is None:
            return v
        cleaned = [s.strip().lower() for s in v if s and s.strip()]
        return list(dict.fromkeys(cleaned))

    @field_validator("preferred_duration")
    @classmethod
    def validate_duration(cls, v: Optional[str]) -> Optional[str]:
        if v is not None and v not in ACTIVITY_DURATIONS:
            raise ValueError(f"must be one of: {', '.join(ACTIVITY_DURATIONS)}")
        return v

    @field_validator("preferred_activity_type")
    @classmethod
    def validate_activity_type(cls, v: Optional[str]) -> Optional[str]:
        if v is not None and v not in ACTIVITY_TYPES:
            raise ValueError(f"must be one of: {', '.join(sorted(ACTIVITY_TYPES))}")
        return v

    @field_validator("intervention_effectiveness")
    @classmethod
    def validate_effectiveness(cls, v: Optional[dict[str, float]]) -> Optional[dict[str, float]]:
        if v is None:
            return v
        for intervention_id, score in v.items():
            if not 0.0 <= score <= 1.0:
                raise ValueError(f"{intervention_id} score must be 0.0-1.0, got {score}")
        return v

    @field_validator("emotional_baseline")
    @classmethod
    def validate_baseline(cls, v: Optional[dict[str, float]]) -> Optional[dict[str, float]]:
        if v is None:
            return v
        known = {dim.value for dim in EmotionDimension.components()}
        for dimension, score in v.items():
            if dimension not in known:
                raise ValueError(f"unknown dimension: {dimension}")
            if not 1.0 <= score <= 10.0:
                raise ValueError(f"{dimension} must be 1-10, got {score}")
        return v

    @classmethod
    def parse_patch(cls, patch: Mapping[str, Any]) -> "ProfileUpdate":
        """
        Validate a raw patch.

        Raises:
            ValidationError: Field name -> message for every invalid field
        """
        try:
            return cls.model_validate(dict(patch))
        except PydanticValidationError as e:
            field_names = {
                info.alias: name for name, info in cls.model_fields.items() if info.alias
            }
            errors: dict[str, str] = {}
            for error in e.errors():
                key = str(error["loc"][0]) if error["loc"] else "profile"
                errors.setdefault(field_names.get(key, key), error["msg"])
            raise ValidationError(errors) from e
