"""
Engine Errors

Typed errors reported to callers of the session engine.

None of these are retried by the engine; retry policy belongs to
the caller. CatalogExhausted is the only error recovered locally
(the orchestrator degrades to a generic supportive message).
"""

from typing import Any, Iterable, Mapping, Optional


class CompanionError(Exception):
    """
    Base class for all engine errors.

    Attributes:
        kind: Stable machine-readable error kind
        message: Human-readable description
    """

    kind: str = "companion_error"

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def to_dict(self) -> dict[str, Any]:
        """Serialize for API error bodies."""
        return {"error": self.kind, "message": self.message}


class InvalidTransition(CompanionError):
    """Operation attempted in the wrong session phase."""

    kind = "invalid_transition"

    def __init__(self, operation: str, phase: str) -> None:
        super().__init__(f"Cannot {operation} while session is {phase}")
        self.operation = operation
        self.phase = phase

    def to_dict(self) -> dict[str, Any]:
        return {
            **super().to_dict(),
            "operation": self.operation,
            "phase": self.phase,
        }


class ValidationError(CompanionError, ValueError):
    """
    Malformed profile update or out-of-range preference.

    Attributes:
        errors: Field name -> validation message
    """

    kind = "validation_error"

    def __init__(self, errors: Mapping[str, str]) -> None:
        fields = ", ".join(sorted(errors))
        super().__init__(f"Invalid value for: {fields}")
        self.errors = dict(errors)

    def to_dict(self) -> dict[str, Any]:
        return {**super().to_dict(), "fields": self.errors}


class CatalogExhausted(CompanionError):
    """No intervention is catalogued for any requested focus area."""

    kind = "catalog_exhausted"

    def __init__(self, focus_areas: Iterable[str]) -> None:
        self.focus_areas = tuple(focus_areas)
        super().__init__(
            f"No interventions catalogued for: {', '.join(self.focus_areas) or '(none)'}"
        )


class UnknownSession(CompanionError):
    """Operation on a session ID the engine does not know."""

    kind = "unknown_session"

    def __init__(self, session_id: Optional[object]) -> None:
        super().__init__(f"Session {session_id} not found")
        self.session_id = session_id
