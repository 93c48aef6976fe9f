"""
Emotion Enumerations

Tracked emotional dimensions and journey trend labels.
"""

from enum import StrEnum


class EmotionDimension(StrEnum):
    """
    Emotional dimensions tracked on a 1-10 scale.

    Declaration order of the four component dimensions is the
    fixed order used when reporting significant changes.
    """

    ANXIETY = "anxiety"
    DEPRESSION = "depression"
    ANGER = "anger"
    JOY = "joy"

    @classmethod
    def components(cls) -> tuple["EmotionDimension", ...]:
        """The four dimensions whose mean is the overall score."""
        return (cls.ANXIETY, cls.DEPRESSION, cls.ANGER, cls.JOY)


class JourneyTrend(StrEnum):
    """Direction of the overall score across a session."""

    IMPROVED = "improved"
    DECLINED = "declined"
    NEUTRAL = "neutral"
