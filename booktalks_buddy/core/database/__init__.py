"""
Database layer for BookTalks Buddy.

Structure:
- entities/: SQLModel table models organized by business domain
- repositories/: Generic data access helpers shared by the services
- session.py: Global engine and session factory management
- utils.py: Engine and session factory helpers
"""

from .base import Base, new_id, utc_now
from .session import (
    async_session_maker,
    engine,
    get_session,
    init_db,
)
from .utils import (
    create_all,
    create_engine,
    create_sessionmaker,
)

__all__ = [
    "Base",
    "async_session_maker",
    "create_all",
    "create_engine",
    "create_sessionmaker",
    "engine",
    "get_session",
    "init_db",
    "new_id",
    "utc_now",
]
