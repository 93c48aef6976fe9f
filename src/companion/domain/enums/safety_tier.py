"""
Safety Tier and Risk Category Enumerations

Classification levels produced by crisis screening.

SAFETY-CRITICAL: Tier ordering is relied upon by callers that
compare tiers (EMERGENCY outranks WARNING outranks NONE).
"""

from enum import IntEnum, StrEnum


class SafetyTier(IntEnum):
    """
    Safety-risk classification for a single utterance.

    Higher values indicate a more urgent response.
    """

    NONE = 0
    """No crisis indicators. Normal turn processing proceeds."""

    WARNING = 1
    """
    Self-harm indicators.
    - Supportive message with crisis resources
    - User chooses whether to continue or shift to coping strategies
    """

    EMERGENCY = 2
    """
    Suicidal-ideation indicators.
    - Urgent message with 24/7 crisis resources
    - Explicit instruction to contact a resource immediately

    SAFETY_NOTE: The session is not terminated automatically.
    """

    @property
    def label(self) -> str:
        """Lower-case wire label (none, warning, emergency)."""
        return self.name.lower()


class RiskCategory(StrEnum):
    """Category of risk matched by the screener."""

    SUICIDE = "suicide"
    """Suicidal ideation."""

    SELF_HARM = "self-harm"
    """Non-suicidal self-injury."""
