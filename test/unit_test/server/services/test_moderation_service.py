"""
Unit tests for the report and moderation action workflow.
"""

from datetime import timedelta

import pytest

from booktalks_buddy.core.database.base import utc_now
from booktalks_buddy.core.errors import ConflictError, PermissionDeniedError
from booktalks_buddy.core.models.domain import (
    ModerationActionStatus,
    ModerationActionType,
    ModerationTargetType,
    ReportReason,
    ReportStatus,
    ReportTargetType,
    ResolutionAction,
)
from booktalks_buddy.core.models.io.moderation import ModerationActionCreate, ReportCreate, ReportUpdate
from booktalks_buddy.server.services.moderation import ModerationService


@pytest.fixture
def service(session, calculator):
    return ModerationService(session, calculator)


@pytest.fixture
async def club(seed):
    await seed.user("lead-1")
    await seed.user("mod-1")
    club = await seed.club("lead-1")
    await seed.member(club.id, "mod-1")
    await seed.moderator(club.id, "mod-1")
    return club


def _report(club_id: str, reason: ReportReason = ReportReason.spam, **fields) -> ReportCreate:
    return ReportCreate(
        target_type=ReportTargetType.discussion_post,
        target_id="post-1",
        target_user_id="troll-1",
        reason=reason,
        description="Posting links everywhere",
        club_id=club_id,
        **fields,
    )


def _action(club_id: str, **fields) -> ModerationActionCreate:
    return ModerationActionCreate(
        action_type=ModerationActionType.user_suspension,
        target_type=ModerationTargetType.user,
        target_id="troll-1",
        target_user_id="troll-1",
        reason="Repeated spam",
        club_id=club_id,
        **fields,
    )


class TestReports:
    @pytest.mark.asyncio
    async def test_report_gets_severity_and_priority(self, service, club):
        report = await service.create_report("reader-1", _report(club.id, ReportReason.harassment, repeat_offender=True))

        assert report.severity == "critical"
        assert report.priority == 1
        assert report.status == "pending"

    def test_target_id_required_except_for_behaviour(self):
        with pytest.raises(ValueError):
            ReportCreate(target_type=ReportTargetType.event, reason=ReportReason.spam, description="x")

        report = ReportCreate(target_type=ReportTargetType.user_behavior, reason=ReportReason.spam, description="x")
        assert report.target_id is None

    @pytest.mark.asyncio
    async def test_club_moderator_lists_by_priority(self, service, club):
        await service.create_report("reader-1", _report(club.id, ReportReason.spam))
        await service.create_report("reader-2", _report(club.id, ReportReason.hate_speech))

        reports = await service.list_reports("mod-1", club_id=club.id)

        assert [r.reason for r in reports] == ["hate_speech", "spam"]

    @pytest.mark.asyncio
    async def test_regular_member_cannot_list(self, service, club):
        with pytest.raises(PermissionDeniedError):
            await service.list_reports("reader-1", club_id=club.id)

    @pytest.mark.asyncio
    async def test_platform_wide_list_needs_platform_owner(self, service, club, seed):
        await service.create_report("reader-1", _report(club.id))
        await seed.user("owner")
        await seed.platform_owner("owner")

        with pytest.raises(PermissionDeniedError):
            await service.list_reports("lead-1")
        assert len(await service.list_reports("owner")) == 1

    @pytest.mark.asyncio
    async def test_reporter_can_view_own_report(self, service, club):
        report = await service.create_report("reader-1", _report(club.id))

        assert (await service.get_report(report.id, "reader-1")).id == report.id
        with pytest.raises(PermissionDeniedError):
            await service.get_report(report.id, "reader-2")

    @pytest.mark.asyncio
    async def test_resolving_stamps_resolver_and_closes(self, service, club):
        report = await service.create_report("reader-1", _report(club.id))

        resolved = await service.update_report(
            report.id,
            "mod-1",
            ReportUpdate(status=ReportStatus.resolved, resolution_action=ResolutionAction.content_removed),
        )

        assert resolved.resolved_by == "mod-1"
        assert resolved.resolved_at is not None
        assert resolved.resolution_action == "content_removed"
        with pytest.raises(ConflictError):
            await service.update_report(report.id, "mod-1", ReportUpdate(status=ReportStatus.under_review))

    @pytest.mark.asyncio
    async def test_stats(self, service, club):
        first = await service.create_report("reader-1", _report(club.id, ReportReason.spam))
        await service.create_report("reader-2", _report(club.id, ReportReason.harassment))
        await service.update_report(first.id, "lead-1", ReportUpdate(status=ReportStatus.resolved))

        stats = await service.get_stats("lead-1", club_id=club.id)

        assert stats.total == 2
        assert stats.by_status == {"resolved": 1, "pending": 1}
        assert stats.by_severity == {"low": 1, "high": 1}
        assert stats.avg_resolution_hours is not None


class TestModerationActions:
    @pytest.mark.asyncio
    async def test_club_moderator_records_temporary_action(self, service, club):
        action = await service.create_action("mod-1", _action(club.id, duration_hours=24))

        assert action.moderator_role == "club_moderator"
        assert action.status == "active"
        assert action.expires_at is not None

    @pytest.mark.asyncio
    async def test_outsider_cannot_act(self, service, club):
        with pytest.raises(PermissionDeniedError):
            await service.create_action("reader-1", _action(club.id))

    @pytest.mark.asyncio
    async def test_lapsed_actions_reported_as_expired(self, service, club, session):
        action = await service.create_action("mod-1", _action(club.id, duration_hours=1))
        action.expires_at = utc_now() - timedelta(minutes=5)
        await session.commit()

        actions = await service.list_actions("lead-1", club_id=club.id)
        active = await service.list_actions("lead-1", club_id=club.id, status=ModerationActionStatus.active)

        assert actions[0].status == "expired"
        assert active == []

    @pytest.mark.asyncio
    async def test_revoke_only_active_actions(self, service, club):
        action = await service.create_action("mod-1", _action(club.id))

        revoked = await service.revoke_action(action.id, "lead-1", "Appeal accepted")

        assert revoked.status == "revoked"
        assert revoked.revoked_by == "lead-1"
        with pytest.raises(ConflictError):
            await service.revoke_action(action.id, "lead-1", "Again")
