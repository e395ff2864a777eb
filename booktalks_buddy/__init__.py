"""BookTalks Buddy.

API service behind the BookTalks Buddy book club application: clubs and
memberships, discussions, events and RSVPs, nominations, reading lists,
notifications, moderation, store administration and entitlement-based
access control.

High-level architecture
-----------------------

- ``booktalks_buddy.core``: logging, monitoring, the error taxonomy, form
  validation and the async database layer (SQLModel entities).
- ``booktalks_buddy.subscriptions``: membership tiers and fail-secure
  subscription validation.
- ``booktalks_buddy.entitlements``: named permission flags computed from
  tiers and roles, plus the permission checks built on them.
- ``booktalks_buddy.analytics``: month bucketing and club health metrics.
- ``booktalks_buddy.server``: the FastAPI application, its services and
  versioned routers.
"""
