"""
API endpoints for club join request questions.

Club leads define up to five questions shown to prospective members of
their club. Path identifiers are checked before any lookup.
"""

from __future__ import annotations

from typing import Annotated, List

from fastapi import APIRouter, Depends, status

from booktalks_buddy.core.errors import ValidationError
from booktalks_buddy.core.models.io.clubs import ClubRead
from booktalks_buddy.core.models.io.questions import (
    QuestionCreate,
    QuestionRead,
    QuestionReorder,
    QuestionsToggle,
    QuestionUpdate,
)
from booktalks_buddy.core.validation import validate_uuid
from booktalks_buddy.server.services.deps import CurrentUserDep, OptionalUserDep, QuestionServiceDep

router = APIRouter(tags=["join-questions"])


def checked_club_id(club_id: str) -> str:
    result = validate_uuid(club_id, "club ID")
    if not result.is_valid:
        raise ValidationError(result.error or "Invalid club ID format", field="club_id")
    return club_id


ClubIdDep = Annotated[str, Depends(checked_club_id)]


@router.get(
    "/{club_id}/questions",
    response_model=List[QuestionRead],
    summary="List Join Questions",
    description="List a club's join questions in display order.",
    response_description="The club's questions.",
    responses={400: {"description": "Malformed club ID"}, 404: {"description": "Club not found"}},
)
async def list_questions(club_id: ClubIdDep, user: OptionalUserDep, service: QuestionServiceDep) -> List[QuestionRead]:
    """
    List join questions.

    Questions of public clubs are readable by anyone; private clubs require a signed-in caller.
    """
    questions = await service.list_questions(club_id, user.id if user else None)
    return [QuestionRead.model_validate(q) for q in questions]


@router.post(
    "/{club_id}/questions",
    response_model=QuestionRead,
    status_code=status.HTTP_201_CREATED,
    summary="Create Join Question",
    description="Add a join question. A club can have at most five.",
    response_description="The created question.",
    responses={
        400: {"description": "Invalid text or display order, or question limit reached"},
        403: {"description": "Not a club manager"},
        409: {"description": "Display order already in use"},
    },
)
async def create_question(
    club_id: ClubIdDep, payload: QuestionCreate, user: CurrentUserDep, service: QuestionServiceDep
) -> QuestionRead:
    """
    Create a join question.

    - **question_text**: 1..200 characters after sanitizing.
    - **is_required**: Whether prospective members must answer it.
    - **display_order**: Position 1..5, unique within the club.
    """
    question = await service.create_question(club_id, user.id, payload)
    return QuestionRead.model_validate(question)


@router.patch(
    "/{club_id}/questions/{question_id}",
    response_model=QuestionRead,
    summary="Update Join Question",
    description="Change the text, required flag or display order of a question.",
    response_description="The updated question.",
    responses={404: {"description": "Question not found"}, 409: {"description": "Display order already in use"}},
)
async def update_question(
    club_id: ClubIdDep, question_id: str, payload: QuestionUpdate, user: CurrentUserDep, service: QuestionServiceDep
) -> QuestionRead:
    question = await service.update_question(club_id, question_id, user.id, payload)
    return QuestionRead.model_validate(question)


@router.delete(
    "/{club_id}/questions/{question_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete Join Question",
    description="Remove a join question.",
    responses={404: {"description": "Question not found"}},
)
async def delete_question(club_id: ClubIdDep, question_id: str, user: CurrentUserDep, service: QuestionServiceDep) -> None:
    await service.delete_question(club_id, question_id, user.id)


@router.put(
    "/{club_id}/questions/reorder",
    response_model=List[QuestionRead],
    summary="Reorder Join Questions",
    description="Assign new display orders to several questions at once.",
    response_description="All questions in their new order.",
    responses={400: {"description": "Orders out of range or not unique"}},
)
async def reorder_questions(
    club_id: ClubIdDep, payload: QuestionReorder, user: CurrentUserDep, service: QuestionServiceDep
) -> List[QuestionRead]:
    questions = await service.reorder_questions(club_id, user.id, payload.questions)
    return [QuestionRead.model_validate(q) for q in questions]


@router.put(
    "/{club_id}/questions-enabled",
    response_model=ClubRead,
    summary="Toggle Join Questions",
    description="Turn join questions on or off for the club.",
    response_description="The updated club.",
)
async def toggle_questions(
    club_id: ClubIdDep, payload: QuestionsToggle, user: CurrentUserDep, service: QuestionServiceDep
) -> ClubRead:
    club = await service.toggle_questions(club_id, user.id, payload.enabled)
    return ClubRead.model_validate(club)
