"""Health, readiness and version endpoints."""

import pytest
from httpx import AsyncClient

from booktalks_buddy.server.core import constant


class TestHealthEndpoints:
    @pytest.mark.asyncio
    async def test_health(self, client: AsyncClient):
        response = await client.get("/api/v1/health")

        assert response.status_code == 200
        assert response.json() == {"status": "ok"}

    @pytest.mark.asyncio
    async def test_readiness_checks_database(self, client: AsyncClient):
        response = await client.get("/api/v1/health/ready")

        assert response.status_code == 200
        assert response.json() == {"status": "ok", "database": "ok"}

    @pytest.mark.asyncio
    async def test_version(self, client: AsyncClient):
        response = await client.get("/api/v1/version")

        assert response.status_code == 200
        assert response.json() == {
            "name": constant.PROJECT_NAME,
            "version": constant.VERSION,
            "schema_version": constant.SCHEMA_VERSION,
        }

    @pytest.mark.asyncio
    async def test_process_time_header_is_added(self, client: AsyncClient):
        response = await client.get("/api/v1/health")

        assert "x-process-time" in response.headers
