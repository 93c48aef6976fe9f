"""
Session Phase Enumeration

Lifecycle phases of the session state machine:

    IDLE -> STARTING -> ACTIVE -> ENDING -> COMPLETE

COMPLETE is terminal until a new session is explicitly started,
which moves the machine back to STARTING with a fresh record.
"""

from enum import StrEnum


class SessionPhase(StrEnum):
    """Session state machine phases."""

    IDLE = "idle"
    """No session has been started yet."""

    STARTING = "starting"
    """Baseline assessment and greeting in progress (transient)."""

    ACTIVE = "active"
    """Session accepting turns."""

    ENDING = "ending"
    """Summary being computed (transient)."""

    COMPLETE = "complete"
    """Session ended and sealed."""
