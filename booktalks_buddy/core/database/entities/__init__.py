"""
Database entity models.

Each module groups the tables of one business domain:

- users: accounts and platform settings
- subscriptions: paid membership periods
- stores: stores, store administrators and carousel items
- clubs: clubs, memberships/join requests, moderators and join questions
- books: shared catalog, personal library, reading lists and collections
- discussions: topics and threaded posts
- events: events and RSVPs
- nominations: book nominations and likes
- progress: per-member reading progress
- notifications: in-app notifications
- moderation: reports and moderation actions
"""

from . import (
    books,
    clubs,
    discussions,
    events,
    moderation,
    nominations,
    notifications,
    progress,
    stores,
    subscriptions,
    users,
)

__all__ = [
    "books",
    "clubs",
    "discussions",
    "events",
    "moderation",
    "nominations",
    "notifications",
    "progress",
    "stores",
    "subscriptions",
    "users",
]
