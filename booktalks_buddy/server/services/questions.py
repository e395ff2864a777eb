"""
Service for club join request questions.

A club asks at most five questions. ``display_order`` is unique within the
club and always between 1 and 5.
"""

from __future__ import annotations

import logging
from typing import List, Optional

from sqlalchemy import func
from sqlmodel import select

from booktalks_buddy.core.database.entities.clubs import BookClub, ClubJoinQuestion
from booktalks_buddy.core.errors import ConflictError, NotFoundError, ValidationError
from booktalks_buddy.core.models.io.questions import QuestionCreate, QuestionOrder, QuestionUpdate
from booktalks_buddy.core.validation import validate_required_text
from booktalks_buddy.entitlements import can_manage_club

from .base import BaseService

logger = logging.getLogger(__name__)

MAX_QUESTIONS = 5
MAX_QUESTION_LENGTH = 200
MIN_ORDER = 1
MAX_ORDER = 5


def check_display_order(value: int) -> int:
    if not MIN_ORDER <= value <= MAX_ORDER:
        raise ValidationError(f"display_order must be between {MIN_ORDER} and {MAX_ORDER}", field="display_order")
    return value


class QuestionService(BaseService):
    """CRUD for the questions a club asks prospective members."""

    async def _managed_club(self, club_id: str, user_id: str) -> BookClub:
        club = await self.get_club(club_id)
        ents = await self.entitlements(user_id)
        self.require(can_manage_club(ents, club.id, club.store_id), "Only club leads can manage join questions")
        return club

    async def _question(self, club_id: str, question_id: str) -> ClubJoinQuestion:
        question = await self.session.get(ClubJoinQuestion, question_id)
        if question is None or question.club_id != club_id:
            raise NotFoundError("Question not found")
        return question

    async def _order_taken(self, club_id: str, display_order: int, exclude_id: Optional[str] = None) -> bool:
        statement = (
            select(ClubJoinQuestion.id)
            .where(ClubJoinQuestion.club_id == club_id)
            .where(ClubJoinQuestion.display_order == display_order)
        )
        if exclude_id:
            statement = statement.where(ClubJoinQuestion.id != exclude_id)
        result = await self.session.execute(statement)
        return result.scalars().first() is not None

    async def list_questions(self, club_id: str, user_id: Optional[str]) -> List[ClubJoinQuestion]:
        """Questions of a club, ordered by ``display_order``.

        Public clubs expose their questions to everyone; a private club's
        questions are visible to anyone who may see its join form (signed-in users).
        """
        club = await self.get_club(club_id)
        if club.privacy == "private" and user_id is None:
            raise NotFoundError("Club not found")
        result = await self.session.execute(
            select(ClubJoinQuestion)
            .where(ClubJoinQuestion.club_id == club_id)
            .order_by(ClubJoinQuestion.display_order)
        )
        return list(result.scalars().all())

    async def create_question(self, club_id: str, user_id: str, payload: QuestionCreate) -> ClubJoinQuestion:
        await self._managed_club(club_id, user_id)
        text = self.checked(
            validate_required_text(payload.question_text, MAX_QUESTION_LENGTH, "Question text"), "question_text"
        )
        order = check_display_order(payload.display_order)

        count = await self.session.execute(
            select(func.count()).select_from(ClubJoinQuestion).where(ClubJoinQuestion.club_id == club_id)
        )
        if int(count.scalar_one()) >= MAX_QUESTIONS:
            raise ValidationError(f"A club can have at most {MAX_QUESTIONS} questions", field="question_text")
        if await self._order_taken(club_id, order):
            raise ConflictError(f"A question already uses display order {order}")

        question = ClubJoinQuestion(
            club_id=club_id, question_text=text, is_required=payload.is_required, display_order=order
        )
        self.session.add(question)
        await self.session.commit()
        await self.session.refresh(question)
        logger.info(f"Created join question {question.id} for club {club_id}")
        return question

    async def update_question(
        self, club_id: str, question_id: str, user_id: str, payload: QuestionUpdate
    ) -> ClubJoinQuestion:
        await self._managed_club(club_id, user_id)
        question = await self._question(club_id, question_id)
        if payload.question_text is not None:
            question.question_text = self.checked(
                validate_required_text(payload.question_text, MAX_QUESTION_LENGTH, "Question text"), "question_text"
            )
        if payload.is_required is not None:
            question.is_required = payload.is_required
        if payload.display_order is not None:
            order = check_display_order(payload.display_order)
            if await self._order_taken(club_id, order, exclude_id=question_id):
                raise ConflictError(f"A question already uses display order {order}")
            question.display_order = order
        await self.session.commit()
        await self.session.refresh(question)
        logger.info(f"Updated join question {question_id}")
        return question

    async def delete_question(self, club_id: str, question_id: str, user_id: str) -> None:
        await self._managed_club(club_id, user_id)
        question = await self._question(club_id, question_id)
        await self.session.delete(question)
        await self.session.commit()
        logger.info(f"Deleted join question {question_id}")

    async def reorder_questions(self, club_id: str, user_id: str, orders: List[QuestionOrder]) -> List[ClubJoinQuestion]:
        """Apply new display orders; the final orders must be unique within 1..5."""
        await self._managed_club(club_id, user_id)
        existing = {q.id: q for q in await self.list_questions(club_id, user_id)}

        target = {qid: q.display_order for qid, q in existing.items()}
        for item in orders:
            if item.id not in existing:
                raise NotFoundError(f"Question {item.id} not found")
            target[item.id] = check_display_order(item.display_order)
        if len(set(target.values())) != len(target):
            raise ValidationError("Display orders must be unique", field="display_order")

        # Park moved rows outside 1..5 first; (club_id, display_order) is unique
        moved = [qid for qid in target if existing[qid].display_order != target[qid]]
        for offset, qid in enumerate(moved, start=1):
            existing[qid].display_order = -offset
        await self.session.flush()
        for qid in moved:
            existing[qid].display_order = target[qid]
        await self.session.commit()
        logger.info(f"Reordered {len(moved)} join questions in club {club_id}")
        return sorted(existing.values(), key=lambda q: q.display_order)

    async def toggle_questions(self, club_id: str, user_id: str, enabled: bool) -> BookClub:
        club = await self._managed_club(club_id, user_id)
        club.join_questions_enabled = enabled
        await self.session.commit()
        await self.session.refresh(club)
        logger.info(f"Join questions {'enabled' if enabled else 'disabled'} for club {club_id}")
        return club
