"""
Safety Responses

Builds the user-facing response for a flagged turn. One pure
function per tier; the dispatcher returns None for tier NONE so
normal turn processing proceeds.

SAFETY_NOTE: A safety response never ends the session. The caller
surfaces it and the user decides whether to continue.
"""

from typing import Iterable, Optional

from companion.domain.enums.safety_tier import SafetyTier
from companion.domain.models.responses import SafetyResponse
from companion.domain.models.safety import CrisisResource, SafetyAssessment


EMERGENCY_MESSAGE: str = (
    "I'm concerned about what you've shared. It sounds like you're going "
    "through a really difficult time, and it's important that you talk to "
    "a qualified professional right away."
)

EMERGENCY_INSTRUCTIONS: str = (
    "Please reach out to one of these resources immediately. They're "
    "available 24/7 and are trained to help with exactly what you're "
    "experiencing. If you are in immediate danger, call your local "
    "emergency number."
)

WARNING_MESSAGE: str = (
    "I'm concerned about what you've shared. While we can continue our "
    "conversation, I also want to make sure you have access to additional "
    "support if needed."
)

WARNING_CONTINUE_PROMPT: str = (
    "Would you like to continue our conversation, or would it be helpful "
    "to focus on strategies for managing these difficult feelings?"
)


def emergency_response(
    assessment: SafetyAssessment,
    resources: Iterable[CrisisResource],
) -> SafetyResponse:
    """Urgent response with 24/7 resources and an instruction to reach out now."""
    return SafetyResponse(
        tier=SafetyTier.EMERGENCY,
        category=assessment.category,
        message=EMERGENCY_MESSAGE,
        resources=tuple(resources),
        instructions=EMERGENCY_INSTRUCTIONS,
    )


def warning_response(
    assessment: SafetyAssessment,
    resources: Iterable[CrisisResource],
) -> SafetyResponse:
    """Supportive response with resources and a continue-or-shift prompt."""
    return SafetyResponse(
        tier=SafetyTier.WARNING,
        category=assessment.category,
        message=WARNING_MESSAGE,
        resources=tuple(resources),
        continue_prompt=WARNING_CONTINUE_PROMPT,
    )


def build_safety_response(
    assessment: SafetyAssessment,
    resources: Iterable[CrisisResource],
) -> Optional[SafetyResponse]:
    """
    Build the response for an assessment.

    Returns:
        SafetyResponse for WARNING/EMERGENCY, None for NONE
    """
    if assessment.tier == SafetyTier.EMERGENCY:
        return emergency_response(assessment, resources)
    if assessment.tier == SafetyTier.WARNING:
        return warning_response(assessment, resources)
    return None
