"""
Service for user reports and moderation actions.

Severity is derived from the report reason and escalated by the reporter's
flags; priority follows severity. Club reports are handled by the club's
moderators, every other report by the store administrators or the
platform owner.
"""

from __future__ import annotations

import logging
from collections import Counter
from datetime import timedelta
from typing import List, Optional

from sqlmodel import select

from booktalks_buddy.core.database.base import utc_now
from booktalks_buddy.core.database.entities.moderation import ModerationAction, Report
from booktalks_buddy.core.errors import ConflictError
from booktalks_buddy.core.models.domain import (
    ModerationActionStatus,
    ReportReason,
    ReportStatus,
    Severity,
)
from booktalks_buddy.core.models.io.moderation import (
    ModerationActionCreate,
    ReportCreate,
    ReportStats,
    ReportUpdate,
)
from booktalks_buddy.core.validation import validate_required_text
from booktalks_buddy.entitlements import can_moderate_club, is_platform_owner, is_store_admin

from .base import BaseService

logger = logging.getLogger(__name__)

SEVERITY_ORDER = [Severity.low, Severity.medium, Severity.high, Severity.critical]

REASON_SEVERITY = {
    ReportReason.hate_speech: Severity.critical,
    ReportReason.harassment: Severity.high,
    ReportReason.inappropriate_content: Severity.medium,
    ReportReason.misinformation: Severity.medium,
    ReportReason.copyright_violation: Severity.medium,
    ReportReason.spam: Severity.low,
    ReportReason.off_topic: Severity.low,
    ReportReason.other: Severity.low,
}

SEVERITY_PRIORITY = {Severity.critical: 1, Severity.high: 2, Severity.medium: 3, Severity.low: 4}

CLOSED_STATUSES = (ReportStatus.resolved, ReportStatus.dismissed)


def escalate(severity: Severity, levels: int = 1) -> Severity:
    index = min(SEVERITY_ORDER.index(severity) + levels, len(SEVERITY_ORDER) - 1)
    return SEVERITY_ORDER[index]


def report_severity(reason: ReportReason, repeat_offender: bool = False, multiple_reports: bool = False) -> Severity:
    """Base severity of ``reason``, one level higher per raised flag, capped at critical."""
    return escalate(REASON_SEVERITY[reason], int(repeat_offender) + int(multiple_reports))


def report_priority(severity: Severity) -> int:
    return SEVERITY_PRIORITY[severity]


class ModerationService(BaseService):
    """Reports, their resolution, and moderator actions."""

    async def _can_handle(self, user_id: str, club_id: Optional[str], store_id: Optional[str]) -> bool:
        ents = await self.entitlements(user_id)
        if is_platform_owner(ents):
            return True
        if club_id:
            club = await self.get_club(club_id)
            return can_moderate_club(ents, club.id, club.store_id)
        return is_store_admin(ents, store_id)

    async def _moderator_role(self, user_id: str, club_id: Optional[str], store_id: Optional[str]) -> str:
        ents = await self.entitlements(user_id)
        if is_platform_owner(ents):
            return "platform_owner"
        if is_store_admin(ents, store_id):
            return "store_admin"
        return "club_moderator" if club_id else "store_admin"

    async def create_report(self, reporter_id: str, payload: ReportCreate) -> Report:
        """File a report. Any signed-in user may report."""
        severity = report_severity(payload.reason, payload.repeat_offender, payload.multiple_reports)
        store_id = payload.store_id
        if payload.club_id:
            club = await self.get_club(payload.club_id)
            store_id = store_id or club.store_id

        report = Report(
            reporter_id=reporter_id,
            target_type=payload.target_type.value,
            target_id=payload.target_id,
            target_user_id=payload.target_user_id,
            reason=payload.reason.value,
            description=self.checked(validate_required_text(payload.description, 2000, "Description"), "description"),
            severity=severity.value,
            priority=report_priority(severity),
            club_id=payload.club_id,
            store_id=store_id,
        )
        self.session.add(report)
        await self.session.commit()
        await self.session.refresh(report)
        logger.info(f"Report {report.id} filed by {reporter_id}: {report.reason} ({report.severity})")
        return report

    async def list_reports(
        self,
        user_id: str,
        club_id: Optional[str] = None,
        store_id: Optional[str] = None,
        status: Optional[ReportStatus] = None,
        limit: int = 50,
        offset: int = 0,
    ) -> List[Report]:
        """Reports the caller may handle, highest priority first."""
        if not club_id and not store_id:
            ents = await self.entitlements(user_id)
            self.require(is_platform_owner(ents), "Only the platform owner can list all reports")
        else:
            self.require(await self._can_handle(user_id, club_id, store_id), "You cannot review these reports")

        statement = select(Report)
        if club_id:
            statement = statement.where(Report.club_id == club_id)
        elif store_id:
            statement = statement.where(Report.store_id == store_id).where(Report.club_id == None)  # noqa: E711
        if status is not None:
            statement = statement.where(Report.status == status.value)
        statement = statement.order_by(Report.priority, Report.created_at.desc()).offset(offset).limit(limit)
        result = await self.session.execute(statement)
        return list(result.scalars().all())

    async def get_report(self, report_id: str, user_id: str) -> Report:
        report = await self.get_or_404(Report, report_id, "Report not found")
        if report.reporter_id != user_id:
            self.require(
                await self._can_handle(user_id, report.club_id, report.store_id), "You cannot view this report"
            )
        return report

    async def update_report(self, report_id: str, user_id: str, payload: ReportUpdate) -> Report:
        """Move a report through review; closing it stamps the resolver."""
        report = await self.get_or_404(Report, report_id, "Report not found")
        self.require(await self._can_handle(user_id, report.club_id, report.store_id), "You cannot handle this report")
        if report.status in {s.value for s in CLOSED_STATUSES}:
            raise ConflictError("This report is already closed")

        report.status = payload.status.value
        if payload.resolution_action is not None:
            report.resolution_action = payload.resolution_action.value
        if payload.resolution_notes is not None:
            report.resolution_notes = payload.resolution_notes
        if payload.status in CLOSED_STATUSES:
            report.resolved_by = user_id
            report.resolved_at = utc_now()
        await self.session.commit()
        await self.session.refresh(report)
        logger.info(f"Report {report_id} set to {report.status} by {user_id}")
        return report

    async def create_action(self, moderator_id: str, payload: ModerationActionCreate) -> ModerationAction:
        """Record a moderator action; temporary actions expire ``duration_hours`` from now."""
        if not payload.club_id and not payload.store_id:
            ents = await self.entitlements(moderator_id)
            self.require(is_platform_owner(ents), "Only the platform owner can take platform-wide actions")
        else:
            self.require(
                await self._can_handle(moderator_id, payload.club_id, payload.store_id),
                "You cannot moderate here",
            )
        if payload.related_report_id:
            await self.get_or_404(Report, payload.related_report_id, "Report not found")

        now = utc_now()
        action = ModerationAction(
            action_type=payload.action_type.value,
            target_type=payload.target_type.value,
            target_id=payload.target_id,
            target_user_id=payload.target_user_id,
            moderator_id=moderator_id,
            moderator_role=await self._moderator_role(moderator_id, payload.club_id, payload.store_id),
            reason=self.checked(validate_required_text(payload.reason, 2000, "Reason"), "reason"),
            severity=payload.severity.value,
            duration_hours=payload.duration_hours,
            expires_at=now + timedelta(hours=payload.duration_hours) if payload.duration_hours else None,
            club_id=payload.club_id,
            store_id=payload.store_id,
            related_report_id=payload.related_report_id,
            created_at=now,
        )
        self.session.add(action)
        await self.session.commit()
        await self.session.refresh(action)
        logger.info(f"Moderation action {action.id} ({action.action_type}) by {moderator_id} on {action.target_id}")
        return action

    async def list_actions(
        self,
        user_id: str,
        club_id: Optional[str] = None,
        target_user_id: Optional[str] = None,
        status: Optional[ModerationActionStatus] = None,
    ) -> List[ModerationAction]:
        """Actions visible to the caller; lapsed temporary actions are reported as expired."""
        if club_id:
            self.require(await self._can_handle(user_id, club_id, None), "You cannot review these actions")
        else:
            ents = await self.entitlements(user_id)
            self.require(is_platform_owner(ents), "Only the platform owner can list all actions")

        statement = select(ModerationAction)
        if club_id:
            statement = statement.where(ModerationAction.club_id == club_id)
        if target_user_id:
            statement = statement.where(ModerationAction.target_user_id == target_user_id)
        result = await self.session.execute(statement.order_by(ModerationAction.created_at.desc()))
        actions = list(result.scalars().all())

        now = utc_now()
        expired = [
            a for a in actions if a.status == ModerationActionStatus.active.value and a.expires_at and a.expires_at <= now
        ]
        for action in expired:
            action.status = ModerationActionStatus.expired.value
        if expired:
            await self.session.commit()
            logger.debug(f"Marked {len(expired)} moderation actions expired")

        if status is not None:
            actions = [a for a in actions if a.status == status.value]
        return actions

    async def revoke_action(self, action_id: str, user_id: str, reason: str) -> ModerationAction:
        action = await self.get_or_404(ModerationAction, action_id, "Moderation action not found")
        self.require(await self._can_handle(user_id, action.club_id, action.store_id), "You cannot revoke this action")
        if action.status != ModerationActionStatus.active.value:
            raise ConflictError(f"Only active actions can be revoked (status: {action.status})")
        action.status = ModerationActionStatus.revoked.value
        action.revoked_by = user_id
        action.revoked_at = utc_now()
        action.revoked_reason = self.checked(validate_required_text(reason, 1000, "Reason"), "reason")
        await self.session.commit()
        await self.session.refresh(action)
        logger.info(f"Moderation action {action_id} revoked by {user_id}")
        return action

    async def get_stats(self, user_id: str, club_id: Optional[str] = None, store_id: Optional[str] = None) -> ReportStats:
        reports = await self.list_reports(user_id, club_id=club_id, store_id=store_id, limit=10_000)
        durations = [
            (r.resolved_at - r.created_at).total_seconds() / 3600
            for r in reports
            if r.status == ReportStatus.resolved.value and r.resolved_at is not None
        ]
        return ReportStats(
            total=len(reports),
            by_status=dict(Counter(r.status for r in reports)),
            by_severity=dict(Counter(r.severity for r in reports)),
            by_reason=dict(Counter(r.reason for r in reports)),
            avg_resolution_hours=round(sum(durations) / len(durations), 2) if durations else None,
        )

