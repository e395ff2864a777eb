"""Domain-level enums."""

from .enums import (
    ClubPrivacy,
    ClubRole,
    ModerationActionStatus,
    ModerationActionType,
    ModerationTargetType,
    NominationStatus,
    NotificationPriority,
    ProgressStatus,
    ProgressType,
    ReadingListStatus,
    ReportReason,
    ReportStatus,
    ReportTargetType,
    ResolutionAction,
    RSVPStatus,
    Severity,
    StoreRole,
)

__all__ = [
    "ClubPrivacy",
    "ClubRole",
    "ModerationActionStatus",
    "ModerationActionType",
    "ModerationTargetType",
    "NominationStatus",
    "NotificationPriority",
    "ProgressStatus",
    "ProgressType",
    "RSVPStatus",
    "ReadingListStatus",
    "ReportReason",
    "ReportStatus",
    "ReportTargetType",
    "ResolutionAction",
    "Severity",
    "StoreRole",
]
