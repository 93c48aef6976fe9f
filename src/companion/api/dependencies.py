"""
API Dependencies

FastAPI dependency providers.
"""

from fastapi import Request

from companion.services.orchestration.companion_service import CompanionService


def get_companion_service(request: Request) -> CompanionService:
    """
    Get the application's session service.

    Raises:
        RuntimeError: If the application has not finished starting
    """
    service = getattr(request.app.state, "companion_service", None)
    if service is None:
        raise RuntimeError("Companion service not initialized")
    return service
