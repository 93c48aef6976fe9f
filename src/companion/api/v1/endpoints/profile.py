"""
Profile Endpoints

Validated partial profile updates. Storage belongs to the caller:
the current profile is sent along with the patch.
"""

from typing import Any

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field

from companion.api.dependencies import get_companion_service
from companion.domain.models.user import UserProfile
from companion.services.orchestration.companion_service import CompanionService

router = APIRouter()


class UpdateProfileRequest(BaseModel):
    """Current profile plus the patch to apply."""

    profile: dict[str, Any] = Field(default_factory=dict)
    patch: dict[str, Any] = Field(..., description="Fields to change")


@router.post(
    "",
    response_model=dict[str, Any],
    summary="Apply a profile update",
)
async def update_profile(
    request: UpdateProfileRequest,
    service: CompanionService = Depends(get_companion_service),
) -> dict[str, Any]:
    """
    Merge a patch into a profile.

    Every field is validated; unknown fields are rejected.
    """
    profile = UserProfile.from_dict(request.profile)
    return service.update_profile(profile, request.patch).to_dict()
