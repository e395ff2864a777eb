"""Report and moderation action schemas."""

from __future__ import annotations

from datetime import datetime
from typing import Dict, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator

from booktalks_buddy.core.models.domain import (
    ModerationActionStatus,
    ModerationActionType,
    ModerationTargetType,
    ReportReason,
    ReportStatus,
    ReportTargetType,
    ResolutionAction,
    Severity,
)


class ReportCreate(BaseModel):
    """
    A user report.

    ``repeat_offender`` and ``multiple_reports`` each raise the computed
    severity by one level.
    """

    target_type: ReportTargetType
    target_id: Optional[str] = Field(default=None, description="Required unless target_type is user_behavior")
    target_user_id: Optional[str] = None
    reason: ReportReason
    description: str = Field(..., min_length=1, max_length=2000)
    club_id: Optional[str] = None
    store_id: Optional[str] = None
    repeat_offender: bool = False
    multiple_reports: bool = False

    @model_validator(mode="after")
    def check_target(self) -> "ReportCreate":
        if self.target_type != ReportTargetType.user_behavior and not self.target_id:
            raise ValueError("target_id is required for this target_type")
        return self


class ReportRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    reporter_id: str
    target_type: ReportTargetType
    target_id: Optional[str] = None
    target_user_id: Optional[str] = None
    reason: ReportReason
    description: str
    severity: Severity
    priority: int
    club_id: Optional[str] = None
    store_id: Optional[str] = None
    status: ReportStatus
    resolved_by: Optional[str] = None
    resolved_at: Optional[datetime] = None
    resolution_action: Optional[ResolutionAction] = None
    resolution_notes: Optional[str] = None
    created_at: datetime
    updated_at: datetime


class ReportUpdate(BaseModel):
    status: ReportStatus
    resolution_action: Optional[ResolutionAction] = None
    resolution_notes: Optional[str] = Field(default=None, max_length=2000)


class ModerationActionCreate(BaseModel):
    action_type: ModerationActionType
    target_type: ModerationTargetType
    target_id: str
    target_user_id: Optional[str] = None
    reason: str = Field(..., min_length=1, max_length=2000)
    severity: Severity = Severity.medium
    duration_hours: Optional[int] = Field(default=None, ge=1, description="Temporary action length")
    club_id: Optional[str] = None
    store_id: Optional[str] = None
    related_report_id: Optional[str] = None


class ModerationActionRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    action_type: ModerationActionType
    target_type: ModerationTargetType
    target_id: str
    target_user_id: Optional[str] = None
    moderator_id: str
    moderator_role: str
    reason: str
    severity: Severity
    duration_hours: Optional[int] = None
    expires_at: Optional[datetime] = None
    club_id: Optional[str] = None
    store_id: Optional[str] = None
    related_report_id: Optional[str] = None
    status: ModerationActionStatus
    revoked_by: Optional[str] = None
    revoked_at: Optional[datetime] = None
    revoked_reason: Optional[str] = None
    created_at: datetime


class ActionRevoke(BaseModel):
    reason: str = Field(..., min_length=1, max_length=1000)


class ReportStats(BaseModel):
    total: int
    by_status: Dict[str, int]
    by_severity: Dict[str, int]
    by_reason: Dict[str, int]
    avg_resolution_hours: Optional[float] = Field(default=None, description="Mean time to resolve, resolved reports only")
