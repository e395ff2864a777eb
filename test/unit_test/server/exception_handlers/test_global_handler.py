"""
Unit tests for server exception handlers.

Service errors map onto their status codes; everything else becomes a 500
with an error id.
"""

import json
from unittest.mock import Mock, patch

import pytest
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from booktalks_buddy.core.errors import (
    USER_MESSAGES,
    AppError,
    ConflictError,
    ErrorType,
    NotFoundError,
    PermissionDeniedError,
    ValidationError,
)
from booktalks_buddy.server.exception_handlers import setup_exception_handlers
from booktalks_buddy.server.exception_handlers.global_handler import (
    app_error_handler,
    global_exception_handler,
)

HANDLER_MODULE = "booktalks_buddy.server.exception_handlers.global_handler"


@pytest.fixture
def mock_request():
    request = Mock(spec=Request)
    request.method = "POST"
    request.url.path = "/api/v1/clubs"
    request.query_params = {"page": "2"}
    request.client = Mock()
    request.client.host = "127.0.0.1"
    return request


def _body(response: JSONResponse) -> dict:
    return json.loads(response.body.decode())


class TestAppErrorHandler:
    """Translation of classified service errors."""

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        ("error", "status_code"),
        [
            (ValidationError("Name is required", field="name"), 400),
            (PermissionDeniedError(), 403),
            (NotFoundError("Club not found"), 404),
            (ConflictError("Already a member"), 409),
            (AppError("Upstream down", ErrorType.network), 503),
        ],
    )
    async def test_status_code_follows_error_type(self, mock_request, error, status_code):
        with patch(f"{HANDLER_MODULE}.logger"), patch(f"{HANDLER_MODULE}.log_error"):
            response = await app_error_handler(mock_request, error)

        assert response.status_code == status_code
        assert _body(response)["error_type"] == error.error_type.value

    @pytest.mark.asyncio
    async def test_validation_body_carries_field(self, mock_request):
        with patch(f"{HANDLER_MODULE}.logger"):
            response = await app_error_handler(mock_request, ValidationError("Name is required", field="name"))

        assert _body(response) == {"error": "Name is required", "error_type": "validation", "field": "name"}

    @pytest.mark.asyncio
    async def test_low_severity_logged_at_info(self, mock_request):
        with patch(f"{HANDLER_MODULE}.logger") as mock_logger, patch(f"{HANDLER_MODULE}.log_error") as mock_log_error:
            await app_error_handler(mock_request, NotFoundError())

        mock_logger.info.assert_called_once()
        mock_logger.warning.assert_not_called()
        mock_log_error.assert_not_called()

    @pytest.mark.asyncio
    async def test_high_severity_logged_as_warning_and_reported(self, mock_request):
        with patch(f"{HANDLER_MODULE}.logger") as mock_logger, patch(f"{HANDLER_MODULE}.log_error") as mock_log_error:
            await app_error_handler(mock_request, PermissionDeniedError("Only the club lead can do that"))

        mock_logger.warning.assert_called_once()
        assert mock_logger.warning.call_args[1]["extra"]["status_code"] == 403
        mock_log_error.assert_called_once()
        assert mock_log_error.call_args[0][0] == "permission"


class TestGlobalExceptionHandler:
    """Fallback for unclassified exceptions."""

    @pytest.mark.asyncio
    async def test_returns_500_with_error_id(self, mock_request):
        with patch(f"{HANDLER_MODULE}.logger"), patch(f"{HANDLER_MODULE}.log_error"):
            response = await global_exception_handler(mock_request, RuntimeError("boom"))

        body = _body(response)
        assert response.status_code == 500
        assert body["error"] == USER_MESSAGES[ErrorType.server]
        assert body["error_type"] == "server"
        assert len(body["error_id"]) == 12

    @pytest.mark.asyncio
    async def test_logs_request_context(self, mock_request):
        with patch(f"{HANDLER_MODULE}.logger") as mock_logger, patch(f"{HANDLER_MODULE}.log_error"):
            response = await global_exception_handler(mock_request, ValueError("bad value"))

        mock_logger.error.assert_called_once()
        message = mock_logger.error.call_args[0][0]
        extra = mock_logger.error.call_args[1]["extra"]
        assert "Unhandled exception" in message
        assert extra["error_id"] == _body(response)["error_id"]
        assert extra["error_type"] == "ValueError"
        assert extra["query_params"] == {"page": "2"}
        assert extra["client"] == "127.0.0.1"
        assert "ValueError: bad value" in extra["traceback"]

    @pytest.mark.asyncio
    async def test_missing_client_is_reported_as_unknown(self, mock_request):
        mock_request.client = None

        with patch(f"{HANDLER_MODULE}.logger") as mock_logger, patch(f"{HANDLER_MODULE}.log_error"):
            await global_exception_handler(mock_request, RuntimeError("boom"))

        assert mock_logger.error.call_args[1]["extra"]["client"] == "unknown"


class TestSetupExceptionHandlers:
    def test_registers_both_handlers(self):
        app = FastAPI()

        setup_exception_handlers(app)

        assert app.exception_handlers[AppError] is app_error_handler
        assert app.exception_handlers[Exception] is global_exception_handler
