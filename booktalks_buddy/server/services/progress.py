"""
Service for member reading progress.

One row per ``(club, user, book)``. Entries marked private are returned only
to their owner; everyone else sees them as absent.
"""

from __future__ import annotations

import logging
from typing import List, Optional

from sqlmodel import select

from booktalks_buddy.core.database.base import utc_now
from booktalks_buddy.core.database.entities.clubs import BookClub
from booktalks_buddy.core.database.entities.progress import MemberReadingProgress
from booktalks_buddy.core.errors import NotFoundError, ValidationError
from booktalks_buddy.core.models.io.progress import ProgressStats, ProgressUpdate
from booktalks_buddy.core.validation import validate_optional_text
from booktalks_buddy.entitlements import can_manage_club

from .base import BaseService

logger = logging.getLogger(__name__)


def apply_progress(entry: MemberReadingProgress, payload: ProgressUpdate) -> None:
    """
    Copy reported progress onto ``entry`` following the status rules.

    - ``not_started`` clears every progress field and both timestamps
    - ``reading`` takes the reported values; chapter/page progress derives the percentage
    - ``finished`` completes the book: 100 percent, or current equal to total
    """
    now = utc_now()
    status = payload.status.value
    progress_type = payload.progress_type.value if payload.progress_type else None

    if status == "not_started":
        entry.progress_type = None
        entry.current_progress = None
        entry.total_progress = None
        entry.progress_percentage = None
        entry.started_at = None
        entry.finished_at = None
    elif status == "reading":
        if progress_type == "percentage" or progress_type is None:
            if payload.progress_percentage is None:
                raise ValidationError("progress_percentage is required", field="progress_percentage")
            entry.progress_type = "percentage"
            entry.progress_percentage = payload.progress_percentage
            entry.current_progress = None
            entry.total_progress = None
        else:
            current, total = payload.current_progress, payload.total_progress
            if current is None or current < 1:
                raise ValidationError("current_progress must be at least 1", field="current_progress")
            if total is None or total < current:
                raise ValidationError("total_progress must be at least current_progress", field="total_progress")
            entry.progress_type = progress_type
            entry.current_progress = current
            entry.total_progress = total
            entry.progress_percentage = round(current / total * 100, 2)
        entry.started_at = entry.started_at or now
        entry.finished_at = None
    else:
        entry.progress_type = progress_type or entry.progress_type or "percentage"
        if entry.progress_type == "percentage":
            entry.current_progress = None
            entry.total_progress = None
        else:
            total = payload.total_progress or entry.total_progress
            entry.total_progress = total
            entry.current_progress = total
        entry.progress_percentage = 100.0
        entry.started_at = entry.started_at or now
        entry.finished_at = now

    entry.status = status


class ProgressService(BaseService):
    """Reading progress of club members."""

    async def _tracked_club(self, club_id: str) -> BookClub:
        club = await self.get_club(club_id)
        if not club.progress_tracking_enabled:
            raise ValidationError("Progress tracking is not enabled for this club", field="club_id")
        return club

    def _book_filter(self, statement, book_id: Optional[str]):
        if book_id is None:
            return statement.where(MemberReadingProgress.book_id.is_(None))
        return statement.where(MemberReadingProgress.book_id == book_id)

    async def _entry(self, club_id: str, user_id: str, book_id: Optional[str]) -> Optional[MemberReadingProgress]:
        statement = (
            select(MemberReadingProgress)
            .where(MemberReadingProgress.club_id == club_id)
            .where(MemberReadingProgress.user_id == user_id)
        )
        result = await self.session.execute(self._book_filter(statement, book_id))
        return result.scalars().first()

    async def upsert_progress(self, club_id: str, user_id: str, payload: ProgressUpdate) -> MemberReadingProgress:
        """Create or update the caller's progress for the club's book."""
        club = await self._tracked_club(club_id)
        await self.require_member(club, user_id)
        notes = self.checked(validate_optional_text(payload.notes, 500, "Notes"), "notes")

        book_id = payload.book_id or club.current_book_id
        entry = await self._entry(club_id, user_id, book_id)
        created = entry is None
        if entry is None:
            entry = MemberReadingProgress(club_id=club_id, user_id=user_id, book_id=book_id)

        apply_progress(entry, payload)
        entry.notes = notes or None
        entry.is_private = payload.is_private
        entry.last_updated = utc_now()

        self.session.add(entry)
        await self.session.commit()
        await self.session.refresh(entry)
        logger.info(f"{'Created' if created else 'Updated'} progress of {user_id} in club {club_id}: {entry.status}")
        return entry

    async def get_own_progress(
        self, club_id: str, user_id: str, book_id: Optional[str] = None
    ) -> Optional[MemberReadingProgress]:
        club = await self.get_club(club_id)
        return await self._entry(club_id, user_id, book_id or club.current_book_id)

    async def get_member_progress(
        self, club_id: str, requester_id: str, member_id: str, book_id: Optional[str] = None
    ) -> Optional[MemberReadingProgress]:
        """Another member's progress; a private entry reads as None unless the requester owns it."""
        club = await self.get_club(club_id)
        await self.require_member(club, requester_id)
        entry = await self._entry(club_id, member_id, book_id or club.current_book_id)
        if entry is None:
            return None
        if entry.is_private and entry.user_id != requester_id:
            logger.debug(f"Hiding private progress of {member_id} from {requester_id}")
            return None
        return entry

    async def list_club_progress(
        self, club_id: str, requester_id: str, book_id: Optional[str] = None
    ) -> List[MemberReadingProgress]:
        """Progress of every member for the club's book, without other users' private entries."""
        club = await self.get_club(club_id)
        await self.require_member(club, requester_id)
        statement = select(MemberReadingProgress).where(MemberReadingProgress.club_id == club_id)
        statement = self._book_filter(statement, book_id or club.current_book_id)
        result = await self.session.execute(statement.order_by(MemberReadingProgress.last_updated.desc()))
        return [e for e in result.scalars().all() if not e.is_private or e.user_id == requester_id]

    async def get_stats(
        self, club_id: str, book_id: Optional[str] = None, requester_id: Optional[str] = None
    ) -> ProgressStats:
        """
        Reading stats for the club's book.

        Members without a progress entry count as not started. Private entries
        count towards the totals without being exposed.
        """
        club = await self.get_club(club_id)
        if requester_id is not None:
            await self.require_member(club, requester_id)
        member_ids = set(await self.club_member_ids(club_id))
        statement = select(MemberReadingProgress).where(MemberReadingProgress.club_id == club_id)
        result = await self.session.execute(self._book_filter(statement, book_id or club.current_book_id))
        entries = [e for e in result.scalars().all() if e.user_id in member_ids]

        reading = sum(1 for e in entries if e.status == "reading")
        finished = sum(1 for e in entries if e.status == "finished")
        total = len(member_ids)
        return ProgressStats(
            total_members=total,
            not_started_count=total - reading - finished,
            reading_count=reading,
            finished_count=finished,
            completion_percentage=round(finished / total * 100, 2) if total else 0.0,
        )

    async def delete_progress(self, club_id: str, user_id: str, book_id: Optional[str] = None) -> None:
        club = await self.get_club(club_id)
        entry = await self._entry(club_id, user_id, book_id or club.current_book_id)
        if entry is None:
            raise NotFoundError("No reading progress recorded")
        await self.session.delete(entry)
        await self.session.commit()
        logger.info(f"Deleted progress of {user_id} in club {club_id}")

    async def toggle_tracking(self, club_id: str, user_id: str, enabled: bool) -> BookClub:
        club = await self.get_club(club_id)
        ents = await self.entitlements(user_id)
        self.require(can_manage_club(ents, club.id, club.store_id), "Only club leads can change progress tracking")
        club.progress_tracking_enabled = enabled
        await self.session.commit()
        await self.session.refresh(club)
        logger.info(f"Progress tracking {'enabled' if enabled else 'disabled'} for club {club_id}")
        return club
