"""
API endpoints for content reports and moderation actions.

Any signed-in user can file a report. Reports are handled by club
moderators and leads, store administrators, or the platform owner,
depending on where the reported content lives.
"""

from __future__ import annotations

from typing import List, Optional

from fastapi import APIRouter, Query, status

from booktalks_buddy.core.models.domain import ModerationActionStatus, ReportStatus
from booktalks_buddy.core.models.io.moderation import (
    ActionRevoke,
    ModerationActionCreate,
    ModerationActionRead,
    ReportCreate,
    ReportRead,
    ReportStats,
    ReportUpdate,
)
from booktalks_buddy.server.services.deps import CurrentUserDep, ModerationServiceDep

router = APIRouter(tags=["moderation"])


@router.post(
    "/reports",
    response_model=ReportRead,
    status_code=status.HTTP_201_CREATED,
    summary="File Report",
    description="Report a post, topic, user, club or event.",
    response_description="The report with its computed severity and priority.",
    responses={400: {"description": "Missing target or description"}},
)
async def create_report(payload: ReportCreate, user: CurrentUserDep, service: ModerationServiceDep) -> ReportRead:
    """
    File a report.

    - **target_type** / **target_id**: What is reported.
    - **reason**: Drives the base severity; hate speech is critical, spam is low.
    - **repeat_offender** / **multiple_reports**: Each raises the severity one level.
    - **club_id** / **store_id**: Where the content lives, which decides who handles it.
    """
    return ReportRead.model_validate(await service.create_report(user.id, payload))


@router.get(
    "/reports",
    response_model=List[ReportRead],
    summary="List Reports",
    description="Reports of a club or store, or all reports for the platform owner. Highest priority first.",
    responses={403: {"description": "Caller cannot handle these reports"}},
)
async def list_reports(
    user: CurrentUserDep,
    service: ModerationServiceDep,
    club_id: Optional[str] = None,
    store_id: Optional[str] = None,
    status_filter: Optional[ReportStatus] = Query(default=None, alias="status"),
    limit: int = Query(default=50, ge=1, le=100),
    offset: int = Query(default=0, ge=0),
) -> List[ReportRead]:
    reports = await service.list_reports(user.id, club_id, store_id, status_filter, limit, offset)
    return [ReportRead.model_validate(r) for r in reports]


@router.get(
    "/reports/stats",
    response_model=ReportStats,
    summary="Report Statistics",
    description="Report counts by status, severity and reason, plus mean resolution time.",
)
async def report_stats(
    user: CurrentUserDep,
    service: ModerationServiceDep,
    club_id: Optional[str] = None,
    store_id: Optional[str] = None,
) -> ReportStats:
    return await service.get_stats(user.id, club_id, store_id)


@router.get(
    "/reports/{report_id}",
    response_model=ReportRead,
    summary="Get Report",
    description="A report, visible to its reporter and to whoever can handle it.",
    responses={404: {"description": "Report not found"}},
)
async def get_report(report_id: str, user: CurrentUserDep, service: ModerationServiceDep) -> ReportRead:
    return ReportRead.model_validate(await service.get_report(report_id, user.id))


@router.patch(
    "/reports/{report_id}",
    response_model=ReportRead,
    summary="Update Report",
    description="Move a report through review. Resolved and dismissed reports are final.",
    responses={409: {"description": "Report already closed"}},
)
async def update_report(
    report_id: str, payload: ReportUpdate, user: CurrentUserDep, service: ModerationServiceDep
) -> ReportRead:
    return ReportRead.model_validate(await service.update_report(report_id, user.id, payload))


@router.post(
    "/actions",
    response_model=ModerationActionRead,
    status_code=status.HTTP_201_CREATED,
    summary="Take Action",
    description="Record a moderation action such as a warning, content removal or suspension.",
    responses={403: {"description": "Caller cannot moderate this context"}},
)
async def create_action(
    payload: ModerationActionCreate, user: CurrentUserDep, service: ModerationServiceDep
) -> ModerationActionRead:
    """
    Take a moderation action.

    - **action_type**: warning, content_removal, temporary_suspension and so on.
    - **duration_hours**: Optional length; the action expires after it.
    - **related_report_id**: The report that prompted the action, if any.
    """
    return ModerationActionRead.model_validate(await service.create_action(user.id, payload))


@router.get(
    "/actions",
    response_model=List[ModerationActionRead],
    summary="List Actions",
    description="Moderation actions of a club, or all actions for the platform owner.",
)
async def list_actions(
    user: CurrentUserDep,
    service: ModerationServiceDep,
    club_id: Optional[str] = None,
    target_user_id: Optional[str] = None,
    status_filter: Optional[ModerationActionStatus] = Query(default=None, alias="status"),
) -> List[ModerationActionRead]:
    actions = await service.list_actions(user.id, club_id, target_user_id, status_filter)
    return [ModerationActionRead.model_validate(a) for a in actions]


@router.post(
    "/actions/{action_id}/revoke",
    response_model=ModerationActionRead,
    summary="Revoke Action",
    description="Revoke an active moderation action.",
    responses={409: {"description": "Action is not active"}},
)
async def revoke_action(
    action_id: str, payload: ActionRevoke, user: CurrentUserDep, service: ModerationServiceDep
) -> ModerationActionRead:
    return ModerationActionRead.model_validate(await service.revoke_action(action_id, user.id, payload.reason))
