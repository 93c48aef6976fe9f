"""Safety services package - crisis screening and resources."""

from companion.services.safety.safety_screener import (
    SafetyScreener,
    CrisisPhraseSet,
    normalize_text,
)
from companion.services.safety.crisis_resources import (
    CrisisResourceResolver,
    JurisdictionResources,
)
from companion.services.safety.safety_responses import (
    build_safety_response,
    emergency_response,
    warning_response,
)

__all__ = [
    # Screening
    "SafetyScreener",
    "CrisisPhraseSet",
    "normalize_text",
    # Resources
    "CrisisResourceResolver",
    "JurisdictionResources",
    # Responses
    "build_safety_response",
    "emergency_response",
    "warning_response",
]
