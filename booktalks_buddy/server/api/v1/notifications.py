"""
API endpoints for in-app notifications.

Users read and manage their own notifications. Creation endpoints are meant
for store administrators and the platform owner broadcasting announcements.
"""

from __future__ import annotations

from typing import List, Optional

from fastapi import APIRouter, Query, status
from pydantic import BaseModel, Field

from booktalks_buddy.core.errors import PermissionDeniedError
from booktalks_buddy.core.models.domain import NotificationPriority
from booktalks_buddy.core.models.io.notifications import (
    MarkAllReadResult,
    NotificationCreate,
    NotificationRead,
    UnreadCount,
)
from booktalks_buddy.entitlements import EntitlementCalculator, has_entitlement
from booktalks_buddy.server.services.deps import CalculatorDep, CurrentUserDep, NotificationServiceDep

router = APIRouter(tags=["notifications"])


class BulkNotificationCreate(BaseModel):
    user_ids: List[str] = Field(..., min_length=1, max_length=1000)
    notification: NotificationCreate


class BulkNotificationResult(BaseModel):
    created: int


async def _require_broadcaster(user_id: str, calculator: EntitlementCalculator) -> None:
    entitlements = await calculator.get_entitlements(user_id)
    if not has_entitlement(entitlements, "CAN_MANAGE_STORE_EVENTS"):
        raise PermissionDeniedError("Only store administrators can send notifications")


@router.get(
    "",
    response_model=List[NotificationRead],
    summary="List Notifications",
    description="The caller's notifications, newest first. Expired notifications are omitted.",
)
async def list_notifications(
    user: CurrentUserDep,
    service: NotificationServiceDep,
    is_read: Optional[bool] = None,
    type: Optional[str] = None,
    category: Optional[str] = None,
    priority: Optional[NotificationPriority] = None,
    limit: int = Query(default=50, ge=1, le=100),
    offset: int = Query(default=0, ge=0),
) -> List[NotificationRead]:
    notifications = await service.list_for_user(
        user.id,
        is_read=is_read,
        type=type,
        category=category,
        priority=priority.value if priority else None,
        limit=limit,
        offset=offset,
    )
    return [NotificationRead.model_validate(n) for n in notifications]


@router.get(
    "/unread-count",
    response_model=UnreadCount,
    summary="Unread Count",
    description="Number of unread, unexpired notifications.",
)
async def unread_count(user: CurrentUserDep, service: NotificationServiceDep) -> UnreadCount:
    return UnreadCount(count=await service.unread_count(user.id))


@router.post(
    "/read-all",
    response_model=MarkAllReadResult,
    summary="Mark All Read",
    description="Mark every unread notification of the caller as read.",
)
async def mark_all_read(user: CurrentUserDep, service: NotificationServiceDep) -> MarkAllReadResult:
    return MarkAllReadResult(updated=await service.mark_all_read(user.id))


@router.post(
    "/{notification_id}/read",
    response_model=NotificationRead,
    summary="Mark Read",
    description="Mark one notification as read.",
    responses={404: {"description": "Notification not found"}},
)
async def mark_read(notification_id: str, user: CurrentUserDep, service: NotificationServiceDep) -> NotificationRead:
    return NotificationRead.model_validate(await service.mark_read(notification_id, user.id))


@router.delete(
    "/{notification_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete Notification",
    responses={404: {"description": "Notification not found"}},
)
async def delete_notification(notification_id: str, user: CurrentUserDep, service: NotificationServiceDep) -> None:
    await service.delete(notification_id, user.id)


@router.post(
    "",
    response_model=NotificationRead,
    status_code=status.HTTP_201_CREATED,
    summary="Send Notification",
    description="Send a notification to one user.",
    responses={403: {"description": "Caller may not send notifications"}},
)
async def create_notification(
    payload: NotificationCreate, user: CurrentUserDep, calculator: CalculatorDep, service: NotificationServiceDep
) -> NotificationRead:
    await _require_broadcaster(user.id, calculator)
    return NotificationRead.model_validate(await service.create(payload))


@router.post(
    "/bulk",
    response_model=BulkNotificationResult,
    status_code=status.HTTP_201_CREATED,
    summary="Send Notifications",
    description="Send the same notification to several users. Duplicate ids receive one copy.",
    responses={403: {"description": "Caller may not send notifications"}},
)
async def create_bulk_notifications(
    payload: BulkNotificationCreate, user: CurrentUserDep, calculator: CalculatorDep, service: NotificationServiceDep
) -> BulkNotificationResult:
    await _require_broadcaster(user.id, calculator)
    created = await service.create_bulk(payload.user_ids, payload.notification)
    return BulkNotificationResult(created=created)
