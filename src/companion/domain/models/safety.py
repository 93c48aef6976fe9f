"""
Safety Domain Models

Per-turn safety classification and the crisis resources surfaced
alongside safety responses.

PRIVACY: A SafetyAssessment lives only for the turn that produced it.
The matched phrase is kept for audit logging and is never returned
to the caller.
"""

from dataclasses import dataclass, field
from typing import Optional

from companion.domain.enums.safety_tier import RiskCategory, SafetyTier


@dataclass(frozen=True)
class SafetyAssessment:
    """
    Result of screening one utterance.

    Attributes:
        tier: Risk tier (none, warning, emergency)
        category: Matched risk category, if any
        matched_phrase: Phrase that triggered the tier (audit only)
    """

    tier: SafetyTier = SafetyTier.NONE
    category: Optional[RiskCategory] = None
    matched_phrase: Optional[str] = None

    @property
    def is_flagged(self) -> bool:
        """Whether the turn needs a safety response."""
        return self.tier > SafetyTier.NONE

    def to_dict(self) -> dict:
        return {
            "tier": self.tier.label,
            "category": self.category.value if self.category else None,
        }


@dataclass(frozen=True)
class CrisisResource:
    """
    A single crisis support resource.

    Attributes:
        name: Resource name (e.g., "988 Suicide & Crisis Lifeline")
        resource_type: Type (hotline, text, website, chat)
        contact: Contact information (phone, URL, etc.)
        description: Brief description
        available_24_7: Whether available 24/7
        languages: Supported languages
    """

    name: str
    resource_type: str
    contact: str
    description: str = ""
    available_24_7: bool = True
    languages: tuple[str, ...] = field(default_factory=lambda: ("en",))

    @property
    def availability(self) -> str:
        return "24/7" if self.available_24_7 else "limited hours"

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "type": self.resource_type,
            "contact": self.contact,
            "description": self.description,
            "available": self.availability,
        }

    def format_for_user(self) -> str:
        """Format resource for display to user."""
        return f"• **{self.name}**: {self.contact} ({self.availability})"
