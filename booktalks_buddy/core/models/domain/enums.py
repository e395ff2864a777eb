"""Domain enums shared by entities, services and API schemas."""

from __future__ import annotations

from enum import Enum


class ClubPrivacy(str, Enum):
    """Who may join a club without approval."""

    public = "public"  # Joining is immediate.
    private = "private"  # Join requests wait for a club manager.


class ClubRole(str, Enum):
    """Role of a row in ``club_members``."""

    pending = "pending"  # Join request awaiting approval; not yet a member.
    member = "member"
    moderator = "moderator"
    lead = "lead"


class StoreRole(str, Enum):
    """Role of a store administrator."""

    owner = "owner"
    manager = "manager"


class ProgressStatus(str, Enum):
    not_started = "not_started"
    reading = "reading"
    finished = "finished"


class ProgressType(str, Enum):
    percentage = "percentage"
    chapter = "chapter"
    page = "page"


class RSVPStatus(str, Enum):
    going = "going"
    maybe = "maybe"
    not_going = "not_going"


class NominationStatus(str, Enum):
    active = "active"
    selected = "selected"  # Became the club's current book.
    archived = "archived"


class ReadingListStatus(str, Enum):
    want_to_read = "want_to_read"
    currently_reading = "currently_reading"
    completed = "completed"


class NotificationPriority(str, Enum):
    low = "low"
    normal = "normal"
    high = "high"
    urgent = "urgent"


class Severity(str, Enum):
    """Severity of a report or moderation action."""

    low = "low"
    medium = "medium"
    high = "high"
    critical = "critical"


class ReportTargetType(str, Enum):
    discussion_post = "discussion_post"
    discussion_topic = "discussion_topic"
    user_profile = "user_profile"
    book_club = "book_club"
    event = "event"
    user_behavior = "user_behavior"  # The only target without a target_id.


class ReportReason(str, Enum):
    spam = "spam"
    harassment = "harassment"
    inappropriate_content = "inappropriate_content"
    hate_speech = "hate_speech"
    misinformation = "misinformation"
    copyright_violation = "copyright_violation"
    off_topic = "off_topic"
    other = "other"


class ReportStatus(str, Enum):
    pending = "pending"
    under_review = "under_review"
    resolved = "resolved"
    dismissed = "dismissed"
    escalated = "escalated"


class ResolutionAction(str, Enum):
    no_action = "no_action"
    warning_issued = "warning_issued"
    content_removed = "content_removed"
    user_suspended = "user_suspended"
    user_banned = "user_banned"
    escalated_to_higher_authority = "escalated_to_higher_authority"
    referred_to_platform = "referred_to_platform"


class ModerationActionType(str, Enum):
    warning = "warning"
    content_removal = "content_removal"
    user_suspension = "user_suspension"
    user_ban = "user_ban"
    content_lock = "content_lock"
    topic_lock = "topic_lock"
    club_restriction = "club_restriction"
    escalation = "escalation"


class ModerationTargetType(str, Enum):
    user = "user"
    discussion_post = "discussion_post"
    discussion_topic = "discussion_topic"
    book_club = "book_club"
    event = "event"


class ModerationActionStatus(str, Enum):
    active = "active"
    expired = "expired"
    revoked = "revoked"
