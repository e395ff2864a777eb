"""
Unit tests for FastAPI application lifespan management.

Startup initializes the database; shutdown closes the shared book search client.
A failing database must not prevent the server from starting.
"""

from unittest.mock import AsyncMock, patch

import pytest
from fastapi import FastAPI

from booktalks_buddy.server.main import lifespan

pytestmark = pytest.mark.asyncio


class TestLifespan:
    async def test_startup_and_shutdown(self):
        with (
            patch("booktalks_buddy.server.main.init_db", new_callable=AsyncMock) as mock_init,
            patch("booktalks_buddy.server.main.close_book_search_client", new_callable=AsyncMock) as mock_close,
        ):
            async with lifespan(FastAPI()):
                mock_init.assert_awaited_once()
                mock_close.assert_not_awaited()

            mock_close.assert_awaited_once()

    async def test_database_failure_is_logged(self):
        with (
            patch("booktalks_buddy.server.main.init_db", new=AsyncMock(side_effect=RuntimeError("db down"))),
            patch("booktalks_buddy.server.main.close_book_search_client", new_callable=AsyncMock) as mock_close,
            patch("booktalks_buddy.server.main.logger") as mock_logger,
        ):
            async with lifespan(FastAPI()):
                pass

        mock_logger.error.assert_called_once()
        assert "db down" in mock_logger.error.call_args[0][0]
        mock_close.assert_awaited_once()


class TestInitDb:
    async def test_skips_table_creation_when_disabled(self):
        from booktalks_buddy.core.database import session as session_module

        with (
            patch.object(session_module.settings, "create_tables_on_startup", False),
            patch.object(session_module, "create_all", new_callable=AsyncMock) as mock_create_all,
        ):
            await session_module.init_db()

        mock_create_all.assert_not_awaited()

    async def test_creates_tables_when_enabled(self):
        from booktalks_buddy.core.database import session as session_module

        with (
            patch.object(session_module.settings, "create_tables_on_startup", True),
            patch.object(session_module, "create_all", new_callable=AsyncMock) as mock_create_all,
        ):
            await session_module.init_db()

        mock_create_all.assert_awaited_once_with(session_module.engine)
