"""
Shared plumbing for request-scoped services.

Services receive the request's ``AsyncSession`` and the entitlement
calculator. Permission checks read the caller's entitlements lazily through
the calculator, so each request computes them at most once per cache TTL.
"""

from __future__ import annotations

import logging
from typing import List, Optional, Type, TypeVar

from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from booktalks_buddy.core.database.entities.clubs import BookClub, ClubMember
from booktalks_buddy.core.errors import NotFoundError, PermissionDeniedError, ValidationError
from booktalks_buddy.core.validation import ValidationResult
from booktalks_buddy.entitlements import EntitlementCalculator

logger = logging.getLogger(__name__)

EntityT = TypeVar("EntityT")


class BaseService:
    """Base class of the domain services."""

    def __init__(self, session: AsyncSession, calculator: EntitlementCalculator):
        self.session = session
        self.calculator = calculator

    async def entitlements(self, user_id: str) -> List[str]:
        return await self.calculator.get_entitlements(user_id)

    async def get_or_404(self, model: Type[EntityT], entity_id: str, message: Optional[str] = None) -> EntityT:
        entity = await self.session.get(model, entity_id)
        if entity is None:
            raise NotFoundError(message or f"{model.__name__} not found")
        return entity

    async def get_club(self, club_id: str) -> BookClub:
        club = await self.session.get(BookClub, club_id)
        if club is None or club.is_deleted:
            raise NotFoundError("Club not found")
        return club

    async def get_membership(self, club_id: str, user_id: str) -> Optional[ClubMember]:
        result = await self.session.execute(
            select(ClubMember).where(ClubMember.club_id == club_id).where(ClubMember.user_id == user_id)
        )
        return result.scalars().first()

    async def is_member(self, club_id: str, user_id: str) -> bool:
        """Active member of the club; a pending join request does not count."""
        membership = await self.get_membership(club_id, user_id)
        return membership is not None and membership.role != "pending"

    async def club_member_ids(self, club_id: str, exclude: Optional[str] = None) -> List[str]:
        """Ids of the club's members, pending requests excluded."""
        statement = select(ClubMember.user_id).where(ClubMember.club_id == club_id).where(ClubMember.role != "pending")
        if exclude:
            statement = statement.where(ClubMember.user_id != exclude)
        result = await self.session.execute(statement)
        return list(result.scalars().all())

    async def require_member(self, club: BookClub, user_id: str) -> None:
        if not await self.is_member(club.id, user_id):
            raise PermissionDeniedError("You must be a member of this club")

    @staticmethod
    def require(granted: bool, message: str) -> None:
        if not granted:
            raise PermissionDeniedError(message)

    @staticmethod
    def checked(result: ValidationResult, field: str) -> str:
        """Sanitized value of a passing validation; raises a field-level error otherwise."""
        if not result.is_valid:
            raise ValidationError(result.error or "Invalid value", field=field)
        return result.sanitized_value or ""
