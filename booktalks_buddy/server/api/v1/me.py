"""
API endpoints for the signed-in user: profile and computed entitlements.
"""

from __future__ import annotations

from fastapi import APIRouter

from booktalks_buddy.core.models.io.subscriptions import EntitlementsRead
from booktalks_buddy.core.models.io.users import ProfileUpdate, UserRead
from booktalks_buddy.server.services.deps import AccountServiceDep, CurrentUserDep

router = APIRouter(tags=["me"])


@router.get("", response_model=UserRead, summary="Get Profile", description="The caller's profile.")
async def get_profile(user: CurrentUserDep, service: AccountServiceDep) -> UserRead:
    return UserRead.model_validate(await service.get_profile(user.id))


@router.patch(
    "",
    response_model=UserRead,
    summary="Update Profile",
    description="Change username, display name, bio or avatar.",
    responses={400: {"description": "Invalid field"}, 409: {"description": "Username already taken"}},
)
async def update_profile(payload: ProfileUpdate, user: CurrentUserDep, service: AccountServiceDep) -> UserRead:
    """
    Update the caller's profile.

    - **username**: 3..30 letters, digits, underscores or hyphens; unique.
    - **display_name**: At most 50 characters.
    - **bio**: At most 500 characters.
    """
    return UserRead.model_validate(await service.update_profile(user.id, payload))


@router.get(
    "/entitlements",
    response_model=EntitlementsRead,
    summary="Get Entitlements",
    description="The caller's entitlements, validated subscription status and highest role context.",
)
async def get_entitlements(user: CurrentUserDep, service: AccountServiceDep) -> EntitlementsRead:
    return await service.get_entitlements(user.id)
