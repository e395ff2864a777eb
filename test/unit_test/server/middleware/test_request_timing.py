"""
Unit tests for Logfire middleware.

Covers timing headers, request reporting, slow request warnings and
failure logging.
"""

from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from fastapi import Request
from starlette.responses import Response

from booktalks_buddy.server.middleware.logfire_middleware import LogfireMiddleware

MIDDLEWARE_MODULE = "booktalks_buddy.server.middleware.logfire_middleware"


@pytest.fixture
def mock_request():
    request = AsyncMock(spec=Request)
    request.method = "GET"
    request.url.path = "/api/v1/clubs"
    return request


@pytest.fixture
def middleware():
    return LogfireMiddleware(app=AsyncMock())


def _clock(*readings: float) -> MagicMock:
    fake_time = MagicMock()
    fake_time.perf_counter.side_effect = list(readings)
    return fake_time


class TestLogfireMiddlewareDispatch:
    """LogfireMiddleware.dispatch behaviour."""

    @pytest.mark.asyncio
    async def test_reports_successful_request(self, middleware, mock_request):
        async def call_next(request):
            return Response(content="ok", status_code=200)

        with patch(f"{MIDDLEWARE_MODULE}.log_api_request") as mock_log:
            response = await middleware.dispatch(mock_request, call_next)

        assert response.status_code == 200
        mock_log.assert_called_once()
        kwargs = mock_log.call_args[1]
        assert kwargs["method"] == "GET"
        assert kwargs["path"] == "/api/v1/clubs"
        assert kwargs["status_code"] == 200
        assert kwargs["duration_ms"] >= 0

    @pytest.mark.asyncio
    async def test_adds_process_time_header(self, middleware, mock_request):
        async def call_next(request):
            return Response(status_code=204)

        with patch(f"{MIDDLEWARE_MODULE}.time", _clock(10.0, 10.25)), patch(f"{MIDDLEWARE_MODULE}.log_api_request"):
            response = await middleware.dispatch(mock_request, call_next)

        assert response.headers["X-Process-Time"] == "250.00"

    @pytest.mark.asyncio
    async def test_warns_about_slow_request(self, middleware, mock_request):
        async def call_next(request):
            return Response(status_code=200)

        with (
            patch(f"{MIDDLEWARE_MODULE}.time", _clock(0.0, 1.5)),
            patch(f"{MIDDLEWARE_MODULE}.log_api_request"),
            patch(f"{MIDDLEWARE_MODULE}.logger") as mock_logger,
        ):
            await middleware.dispatch(mock_request, call_next)

        mock_logger.warning.assert_called_once()
        assert "Slow API request" in mock_logger.warning.call_args[0][0]
        assert mock_logger.warning.call_args[1]["extra"]["duration_ms"] == 1500.0

    @pytest.mark.asyncio
    async def test_fast_request_does_not_warn(self, middleware, mock_request):
        async def call_next(request):
            return Response(status_code=200)

        with (
            patch(f"{MIDDLEWARE_MODULE}.time", _clock(0.0, 0.01)),
            patch(f"{MIDDLEWARE_MODULE}.log_api_request"),
            patch(f"{MIDDLEWARE_MODULE}.logger") as mock_logger,
        ):
            await middleware.dispatch(mock_request, call_next)

        mock_logger.warning.assert_not_called()

    @pytest.mark.asyncio
    async def test_failure_is_logged_and_reraised(self, middleware, mock_request):
        async def call_next(request):
            raise RuntimeError("handler crashed")

        with (
            patch(f"{MIDDLEWARE_MODULE}.log_api_request") as mock_log,
            patch(f"{MIDDLEWARE_MODULE}.logger") as mock_logger,
        ):
            with pytest.raises(RuntimeError, match="handler crashed"):
                await middleware.dispatch(mock_request, call_next)

        mock_logger.error.assert_called_once()
        assert mock_log.call_args[1]["status_code"] == 500
