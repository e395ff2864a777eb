import pytest

from booktalks_buddy.core.database.utils import create_engine, normalize_database_url


class TestNormalizeDatabaseUrl:
    @pytest.mark.parametrize(
        "url,expected",
        [
            ("postgres://u:p@db:5432/app", "postgresql+asyncpg://u:p@db:5432/app"),
            ("postgresql://u:p@db/app", "postgresql+asyncpg://u:p@db/app"),
            ("postgresql+psycopg2://u:p@db/app", "postgresql+asyncpg://u:p@db/app"),
            ("postgresql+asyncpg://u:p@db/app", "postgresql+asyncpg://u:p@db/app"),
            ("sqlite+aiosqlite:///:memory:", "sqlite+aiosqlite:///:memory:"),
        ],
    )
    def test_normalize(self, url, expected):
        assert normalize_database_url(url) == expected


async def test_create_engine_for_sqlite():
    engine = create_engine("sqlite+aiosqlite:///:memory:")
    try:
        assert engine.dialect.name == "sqlite"
    finally:
        await engine.dispose()
