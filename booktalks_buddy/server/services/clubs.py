"""
Service for book clubs and their memberships.

Rows of ``club_members`` double as join requests: a request to a private club
is stored with ``role='pending'`` until a club manager approves it (the role
becomes ``member``) or rejects it (the row is deleted).
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional, Tuple

from sqlalchemy import func
from sqlalchemy.exc import IntegrityError
from sqlmodel import select

from booktalks_buddy.core.database.base import utc_now
from booktalks_buddy.core.database.entities.books import Book
from booktalks_buddy.core.database.entities.clubs import BookClub, ClubJoinQuestion, ClubMember, ClubModerator
from booktalks_buddy.core.database.entities.users import User
from booktalks_buddy.core.errors import ConflictError, NotFoundError, PermissionDeniedError, ValidationError
from booktalks_buddy.core.models.io.clubs import (
    ClubCreate,
    ClubUpdate,
    JoinAnswer,
    JoinAnswersRead,
    JoinResult,
    PendingRequestRead,
    StoredAnswer,
)
from booktalks_buddy.core.validation import validate_optional_text, validate_required_text
from booktalks_buddy.entitlements import can_manage_club, has_entitlement

from .base import BaseService
from .notifications import NotificationService

logger = logging.getLogger(__name__)

MAX_ANSWER_LENGTH = 500

JOINED_MESSAGE = "Successfully joined the club!"
PENDING_MESSAGE = "Join request submitted successfully. Awaiting approval."
DUPLICATE_REQUEST_MESSAGE = "You have already requested to join this club"


def validate_join_answers(
    questions: List[ClubJoinQuestion], answers: List[JoinAnswer]
) -> Tuple[List[Dict[str, Any]], Dict[str, str]]:
    """
    Check submitted answers against a club's questions.

    Args:
        questions: The club's join questions.
        answers: Answers submitted by the prospective member.

    Returns:
        The stored answer entries and a mapping of field to error message.
        An empty error mapping means the answers are acceptable.
    """
    by_id = {question.id: question for question in questions}
    errors: Dict[str, str] = {}
    stored: List[Dict[str, Any]] = []
    answered: Dict[str, str] = {}

    for answer in answers:
        question = by_id.get(answer.question_id)
        if question is None:
            errors[answer.question_id] = "Question does not belong to this club"
            continue
        result = validate_optional_text(answer.answer, MAX_ANSWER_LENGTH, "Answer")
        if not result.is_valid:
            errors[question.id] = result.error or "Invalid answer"
            continue
        answered[question.id] = result.sanitized_value or ""

    for question in sorted(questions, key=lambda q: q.display_order):
        text = answered.get(question.id, "")
        if question.is_required and question.id not in errors:
            required = validate_required_text(text, MAX_ANSWER_LENGTH, "Answer")
            if not required.is_valid:
                errors[question.id] = f"Answer to '{question.question_text}' is required"
                continue
        if question.id in answered:
            stored.append(
                {
                    "question_id": question.id,
                    "question_text": question.question_text,
                    "answer": text,
                    "is_required": question.is_required,
                }
            )
    return stored, errors


class ClubService(BaseService):
    """Club lifecycle, membership and join requests."""

    @property
    def notifications(self) -> NotificationService:
        return NotificationService(self.session)

    async def _require_manager(self, club: BookClub, user_id: str) -> None:
        ents = await self.entitlements(user_id)
        self.require(can_manage_club(ents, club.id, club.store_id), "You cannot manage this club")

    async def member_count(self, club_id: str) -> int:
        result = await self.session.execute(
            select(func.count())
            .select_from(ClubMember)
            .where(ClubMember.club_id == club_id)
            .where(ClubMember.role != "pending")
        )
        return int(result.scalar_one())

    async def create_club(self, user_id: str, payload: ClubCreate) -> BookClub:
        """Create a club led by ``user_id``, subject to the club creation limit."""
        if not await self.calculator.can_create_club(user_id):
            raise PermissionDeniedError("You have reached the number of clubs your membership allows you to create")

        name = self.checked(validate_required_text(payload.name, 100, "Club name"), "name")
        description = self.checked(validate_optional_text(payload.description, 1000, "Description"), "description")

        club = BookClub(
            name=name,
            description=description or None,
            privacy=payload.privacy.value,
            lead_user_id=user_id,
            store_id=payload.store_id,
            join_questions_enabled=payload.join_questions_enabled,
            progress_tracking_enabled=payload.progress_tracking_enabled,
            is_premium=payload.is_premium,
        )
        self.session.add(club)
        await self.session.flush()
        self.session.add(ClubMember(user_id=user_id, club_id=club.id, role="lead"))
        await self.session.commit()
        await self.session.refresh(club)
        await self.calculator.invalidate(user_id)
        logger.info(f"User {user_id} created club {club.id}")
        return club

    async def list_public_clubs(self, search: Optional[str] = None, limit: int = 50, offset: int = 0) -> List[BookClub]:
        statement = (
            select(BookClub)
            .where(BookClub.is_deleted == False)  # noqa: E712
            .where(BookClub.privacy == "public")
        )
        if search:
            statement = statement.where(BookClub.name.ilike(f"%{search}%"))
        statement = statement.order_by(BookClub.created_at.desc()).offset(offset).limit(limit)
        result = await self.session.execute(statement)
        return list(result.scalars().all())

    async def list_user_clubs(self, user_id: str) -> List[BookClub]:
        """Clubs the user belongs to (pending requests excluded)."""
        statement = (
            select(BookClub)
            .join(ClubMember, ClubMember.club_id == BookClub.id)
            .where(ClubMember.user_id == user_id)
            .where(ClubMember.role != "pending")
            .where(BookClub.is_deleted == False)  # noqa: E712
            .order_by(ClubMember.joined_at.desc())
        )
        result = await self.session.execute(statement)
        return list(result.scalars().all())

    async def get_visible_club(self, club_id: str, user_id: Optional[str]) -> BookClub:
        """A private club is only visible to its members and managers."""
        club = await self.get_club(club_id)
        if club.privacy == "private":
            if user_id is None:
                raise NotFoundError("Club not found")
            if not await self.is_member(club_id, user_id):
                ents = await self.entitlements(user_id)
                if not can_manage_club(ents, club.id, club.store_id):
                    raise NotFoundError("Club not found")
        return club

    async def update_club(self, club_id: str, user_id: str, payload: ClubUpdate) -> BookClub:
        club = await self.get_club(club_id)
        await self._require_manager(club, user_id)

        changes = payload.model_dump(exclude_unset=True)
        if "name" in changes:
            changes["name"] = self.checked(validate_required_text(changes["name"], 100, "Club name"), "name")
        if "description" in changes:
            text = self.checked(validate_optional_text(changes["description"], 1000, "Description"), "description")
            changes["description"] = text or None
        if "privacy" in changes and changes["privacy"] is not None:
            changes["privacy"] = changes["privacy"].value
        for key, value in changes.items():
            setattr(club, key, value)
        await self.session.commit()
        await self.session.refresh(club)
        logger.info(f"Club {club_id} updated by {user_id}: {sorted(changes)}")
        return club

    async def delete_club(self, club_id: str, user_id: str) -> None:
        """Soft delete; the lead loses the club's lead entitlements."""
        club = await self.get_club(club_id)
        await self._require_manager(club, user_id)
        club.is_deleted = True
        await self.session.commit()
        await self.calculator.invalidate(club.lead_user_id, user_id)
        logger.info(f"Club {club_id} deleted by {user_id}")

    async def set_current_book(self, club_id: str, user_id: str, book_id: str) -> BookClub:
        club = await self.get_club(club_id)
        await self._require_manager(club, user_id)
        await self.get_or_404(Book, book_id, "Book not found")
        club.current_book_id = book_id
        await self.session.commit()
        await self.session.refresh(club)
        logger.info(f"Club {club_id} current book set to {book_id}")
        return club

    async def _club_questions(self, club_id: str) -> List[ClubJoinQuestion]:
        result = await self.session.execute(
            select(ClubJoinQuestion)
            .where(ClubJoinQuestion.club_id == club_id)
            .order_by(ClubJoinQuestion.display_order)
        )
        return list(result.scalars().all())

    async def join_club(self, club_id: str, user_id: str, answers: Optional[List[JoinAnswer]] = None) -> JoinResult:
        """
        Join a club, or request to join a private one.

        Args:
            club_id: Club to join
            user_id: Prospective member
            answers: Answers to the club's join questions

        Returns:
            JoinResult with ``role='member'`` for public clubs and ``role='pending'``
            for clubs requiring approval.

        Raises:
            PermissionDeniedError: Membership limit reached or premium club without a premium tier
            ConflictError: The user is already a member or has a pending request
            ValidationError: Answers fail validation
        """
        club = await self.get_club(club_id)
        ents = await self.entitlements(user_id)
        if club.is_premium and not has_entitlement(ents, "CAN_ACCESS_PREMIUM_CONTENT"):
            raise PermissionDeniedError("This club is available to premium members only")
        if not await self.calculator.can_join_club(user_id, ents):
            raise PermissionDeniedError("You have reached the number of clubs your membership allows you to join")
        if await self.get_membership(club_id, user_id) is not None:
            raise ConflictError(DUPLICATE_REQUEST_MESSAGE)

        join_answers: Optional[Dict[str, Any]] = None
        answers = answers or []
        if club.join_questions_enabled:
            questions = await self._club_questions(club_id)
            stored, errors = validate_join_answers(questions, answers)
            if errors:
                field, message = next(iter(errors.items()))
                raise ValidationError(message, field=f"answers.{field}", context={"errors": errors})
            if stored:
                join_answers = {"answers": stored, "submitted_at": utc_now().isoformat()}

        role = "pending" if club.requires_approval else "member"
        membership = ClubMember(user_id=user_id, club_id=club_id, role=role, join_answers=join_answers)
        self.session.add(membership)

        if role == "pending":
            self.notifications.notify(
                club.lead_user_id,
                type="join_request",
                title="New join request",
                message="Someone asked to join your club",
                data={"club_id": club_id, "user_id": user_id},
                category="club",
            )
        try:
            await self.session.commit()
        except IntegrityError as e:
            await self.session.rollback()
            raise ConflictError(DUPLICATE_REQUEST_MESSAGE) from e
        await self.session.refresh(membership)
        await self.calculator.invalidate(user_id)

        logger.info(f"User {user_id} joined club {club_id} as {role}")
        return JoinResult(
            success=True,
            message=PENDING_MESSAGE if role == "pending" else JOINED_MESSAGE,
            role=role,
            membership_id=membership.id,
        )

    async def leave_club(self, club_id: str, user_id: str) -> None:
        club = await self.get_club(club_id)
        if club.lead_user_id == user_id:
            raise ValidationError("The club lead cannot leave the club", field="user_id")
        membership = await self.get_membership(club_id, user_id)
        if membership is None:
            raise NotFoundError("You are not a member of this club")
        await self.session.delete(membership)
        await self._drop_moderator(club_id, user_id)
        await self.session.commit()
        await self.calculator.invalidate(user_id)
        logger.info(f"User {user_id} left club {club_id}")

    async def list_members(self, club_id: str, user_id: str) -> List[ClubMember]:
        club = await self.get_club(club_id)
        if not await self.is_member(club_id, user_id):
            await self._require_manager(club, user_id)
        result = await self.session.execute(
            select(ClubMember)
            .where(ClubMember.club_id == club_id)
            .where(ClubMember.role != "pending")
            .order_by(ClubMember.joined_at)
        )
        return list(result.scalars().all())

    async def remove_member(self, club_id: str, manager_id: str, member_id: str) -> None:
        club = await self.get_club(club_id)
        await self._require_manager(club, manager_id)
        if member_id == club.lead_user_id:
            raise ValidationError("The club lead cannot be removed", field="user_id")
        membership = await self.get_membership(club_id, member_id)
        if membership is None:
            raise NotFoundError("Member not found")
        await self.session.delete(membership)
        await self._drop_moderator(club_id, member_id)
        self.notifications.notify(
            member_id,
            type="club_removed",
            title="Removed from club",
            message=f"You were removed from {club.name}",
            data={"club_id": club_id},
            category="club",
        )
        await self.session.commit()
        await self.calculator.invalidate(member_id)
        logger.info(f"User {member_id} removed from club {club_id} by {manager_id}")

    async def list_pending_requests(self, club_id: str, manager_id: str) -> List[PendingRequestRead]:
        """Pending join requests, newest first."""
        club = await self.get_club(club_id)
        await self._require_manager(club, manager_id)
        result = await self.session.execute(
            select(ClubMember, User)
            .join(User, User.id == ClubMember.user_id)
            .where(ClubMember.club_id == club_id)
            .where(ClubMember.role == "pending")
            .order_by(ClubMember.joined_at.desc())
        )
        requests = []
        for membership, user in result.all():
            answers = (membership.join_answers or {}).get("answers") or []
            requests.append(
                PendingRequestRead(
                    user_id=membership.user_id,
                    club_id=club_id,
                    username=user.username,
                    display_name=user.display_name,
                    requested_at=membership.joined_at,
                    has_answers=bool(answers),
                )
            )
        return requests

    async def _pending_request(self, club_id: str, user_id: str) -> ClubMember:
        membership = await self.get_membership(club_id, user_id)
        if membership is None or membership.role != "pending":
            raise NotFoundError("Join request not found")
        return membership

    async def get_join_answers(self, club_id: str, manager_id: str, user_id: str) -> JoinAnswersRead:
        club = await self.get_club(club_id)
        await self._require_manager(club, manager_id)
        membership = await self._pending_request(club_id, user_id)
        stored = membership.join_answers or {}
        return JoinAnswersRead(
            user_id=user_id,
            club_id=club_id,
            answers=[StoredAnswer(**answer) for answer in stored.get("answers") or []],
            submitted_at=stored.get("submitted_at"),
        )

    async def approve_request(self, club_id: str, manager_id: str, user_id: str) -> ClubMember:
        club = await self.get_club(club_id)
        await self._require_manager(club, manager_id)
        membership = await self._pending_request(club_id, user_id)
        membership.role = "member"
        membership.joined_at = utc_now()
        self.notifications.notify(
            user_id,
            type="join_request_approved",
            title="Join request approved",
            message=f"Welcome to {club.name}!",
            data={"club_id": club_id},
            category="club",
        )
        await self.session.commit()
        await self.session.refresh(membership)
        await self.calculator.invalidate(user_id)
        logger.info(f"Join request of {user_id} to club {club_id} approved by {manager_id}")
        return membership

    async def reject_request(self, club_id: str, manager_id: str, user_id: str) -> None:
        club = await self.get_club(club_id)
        await self._require_manager(club, manager_id)
        membership = await self._pending_request(club_id, user_id)
        await self.session.delete(membership)
        self.notifications.notify(
            user_id,
            type="join_request_rejected",
            title="Join request declined",
            message=f"Your request to join {club.name} was declined",
            data={"club_id": club_id},
            category="club",
        )
        await self.session.commit()
        logger.info(f"Join request of {user_id} to club {club_id} rejected by {manager_id}")

    async def list_moderators(self, club_id: str) -> List[ClubModerator]:
        await self.get_club(club_id)
        result = await self.session.execute(select(ClubModerator).where(ClubModerator.club_id == club_id))
        return list(result.scalars().all())

    async def assign_moderator(self, club_id: str, manager_id: str, user_id: str) -> ClubModerator:
        club = await self.get_club(club_id)
        await self._require_manager(club, manager_id)
        membership = await self.get_membership(club_id, user_id)
        if membership is None or membership.role == "pending":
            raise ValidationError("Only club members can become moderators", field="user_id")
        existing = await self.session.execute(
            select(ClubModerator).where(ClubModerator.club_id == club_id).where(ClubModerator.user_id == user_id)
        )
        if existing.scalars().first() is not None:
            raise ConflictError("User is already a moderator of this club")

        moderator = ClubModerator(club_id=club_id, user_id=user_id, assigned_by=manager_id)
        self.session.add(moderator)
        if membership.role == "member":
            membership.role = "moderator"
        await self.session.commit()
        await self.session.refresh(moderator)
        await self.calculator.invalidate(user_id)
        logger.info(f"User {user_id} is now a moderator of club {club_id}")
        return moderator

    async def _drop_moderator(self, club_id: str, user_id: str) -> bool:
        result = await self.session.execute(
            select(ClubModerator).where(ClubModerator.club_id == club_id).where(ClubModerator.user_id == user_id)
        )
        moderator = result.scalars().first()
        if moderator is None:
            return False
        await self.session.delete(moderator)
        return True

    async def remove_moderator(self, club_id: str, manager_id: str, user_id: str) -> None:
        club = await self.get_club(club_id)
        await self._require_manager(club, manager_id)
        if not await self._drop_moderator(club_id, user_id):
            raise NotFoundError("Moderator not found")
        membership = await self.get_membership(club_id, user_id)
        if membership is not None and membership.role == "moderator":
            membership.role = "member"
        await self.session.commit()
        await self.calculator.invalidate(user_id)
        logger.info(f"User {user_id} is no longer a moderator of club {club_id}")
