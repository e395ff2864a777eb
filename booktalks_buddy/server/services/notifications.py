"""
Service for in-app notifications.

Other services call ``notify``/``notify_many`` to queue notifications inside
their own unit of work; the rows are committed together with the change that
produced them.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Iterable, List, Optional

from sqlalchemy import func, or_, update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from booktalks_buddy.core.database.base import utc_now
from booktalks_buddy.core.database.entities.notifications import Notification
from booktalks_buddy.core.errors import NotFoundError
from booktalks_buddy.core.models.io.notifications import NotificationCreate

logger = logging.getLogger(__name__)


class NotificationService:
    """Creates and serves notifications for one database session."""

    def __init__(self, session: AsyncSession):
        self.session = session

    def notify(
        self,
        user_id: str,
        type: str,
        title: str,
        message: str,
        data: Optional[Dict[str, Any]] = None,
        priority: str = "normal",
        category: str = "general",
    ) -> Notification:
        """Queue a notification on the session without committing."""
        notification = Notification(
            user_id=user_id,
            type=type,
            title=title,
            message=message,
            data=data,
            priority=priority,
            category=category,
        )
        self.session.add(notification)
        return notification

    def notify_many(self, user_ids: Iterable[str], **kwargs: Any) -> List[Notification]:
        """Queue the same notification for several users, skipping duplicates."""
        return [self.notify(user_id, **kwargs) for user_id in dict.fromkeys(user_ids)]

    async def create(self, payload: NotificationCreate) -> Notification:
        notification = Notification(**payload.model_dump())
        self.session.add(notification)
        await self.session.commit()
        await self.session.refresh(notification)
        logger.info(f"Created notification {notification.id} ({notification.type}) for {notification.user_id}")
        return notification

    async def create_bulk(self, user_ids: List[str], payload: NotificationCreate) -> int:
        data = payload.model_dump(exclude={"user_id"})
        rows = [Notification(user_id=user_id, **data) for user_id in dict.fromkeys(user_ids)]
        self.session.add_all(rows)
        await self.session.commit()
        logger.info(f"Created {len(rows)} '{payload.type}' notifications")
        return len(rows)

    def _visible(self, user_id: str):
        now = utc_now()
        return (
            select(Notification)
            .where(Notification.user_id == user_id)
            .where(or_(Notification.expires_at.is_(None), Notification.expires_at > now))
        )

    async def list_for_user(
        self,
        user_id: str,
        is_read: Optional[bool] = None,
        type: Optional[str] = None,
        category: Optional[str] = None,
        priority: Optional[str] = None,
        limit: int = 50,
        offset: int = 0,
    ) -> List[Notification]:
        """
        List a user's notifications, newest first. Expired notifications are hidden.

        Args:
            user_id: Recipient
            is_read: Only read or only unread notifications
            type: Notification type filter
            category: Category filter
            priority: Priority filter
            limit: Page size
            offset: Rows to skip
        """
        statement = self._visible(user_id)
        if is_read is not None:
            statement = statement.where(Notification.is_read == is_read)
        if type:
            statement = statement.where(Notification.type == type)
        if category:
            statement = statement.where(Notification.category == category)
        if priority:
            statement = statement.where(Notification.priority == priority)
        statement = statement.order_by(Notification.created_at.desc()).offset(offset).limit(limit)
        result = await self.session.execute(statement)
        return list(result.scalars().all())

    async def unread_count(self, user_id: str) -> int:
        now = utc_now()
        result = await self.session.execute(
            select(func.count())
            .select_from(Notification)
            .where(Notification.user_id == user_id)
            .where(Notification.is_read == False)  # noqa: E712
            .where(or_(Notification.expires_at.is_(None), Notification.expires_at > now))
        )
        return int(result.scalar_one())

    async def _owned(self, notification_id: str, user_id: str) -> Notification:
        notification = await self.session.get(Notification, notification_id)
        # Another user's notification is reported as missing
        if notification is None or notification.user_id != user_id:
            raise NotFoundError("Notification not found")
        return notification

    async def mark_read(self, notification_id: str, user_id: str) -> Notification:
        notification = await self._owned(notification_id, user_id)
        if not notification.is_read:
            notification.is_read = True
            notification.read_at = utc_now()
            await self.session.commit()
            await self.session.refresh(notification)
        return notification

    async def mark_all_read(self, user_id: str) -> int:
        result = await self.session.execute(
            update(Notification)
            .where(Notification.user_id == user_id)
            .where(Notification.is_read == False)  # noqa: E712
            .values(is_read=True, read_at=utc_now())
        )
        await self.session.commit()
        logger.info(f"Marked {result.rowcount} notifications read for {user_id}")
        return int(result.rowcount or 0)

    async def delete(self, notification_id: str, user_id: str) -> None:
        notification = await self._owned(notification_id, user_id)
        await self.session.delete(notification)
        await self.session.commit()
        logger.info(f"Deleted notification {notification_id}")
