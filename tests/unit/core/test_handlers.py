"""
Unit tests for exception handlers.

Tests cover:
- Domain exceptions mapped to status codes and error codes
- Validation error handler formatting
- General exception handler (debug vs production)
- Rate limit handler response format
"""

import json
from unittest.mock import MagicMock, patch

import pytest
from fastapi import Request
from fastapi.exceptions import RequestValidationError
from slowapi.errors import RateLimitExceeded

from src.core.handlers import (
    app_exception_handler,
    general_exception_handler,
    rate_limit_handler,
    validation_exception_handler,
)
from src.exceptions import (
    BusinessRuleError,
    DuplicateEmailError,
    DuplicateNameError,
    HasDependentsError,
    InactiveUserError,
    InsufficientPermissionsError,
    InvalidCredentialsError,
    InvalidReferenceError,
    InvalidTokenError,
    NotFoundError,
)


@pytest.fixture
def mock_request() -> MagicMock:
    """Create a mock request with request_id in state."""
    request = MagicMock(spec=Request)
    request.state.request_id = "req-42"
    request.client.host = "127.0.0.1"
    request.url.path = "/api/contas"
    return request


def _body(response) -> dict:
    return json.loads(response.body)


class TestAppExceptionHandler:
    """Tests for app_exception_handler."""

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        ("exc", "status_code", "error_code"),
        [
            (InvalidCredentialsError(), 401, "INVALID_CREDENTIALS"),
            (InvalidTokenError(), 401, "INVALID_TOKEN"),
            (InactiveUserError(), 403, "INACTIVE_USER"),
            (InsufficientPermissionsError(), 403, "INSUFFICIENT_PERMISSIONS"),
            (NotFoundError("Account"), 404, "NOT_FOUND"),
            (DuplicateNameError("Card", "Travel"), 400, "DUPLICATE_NAME"),
            (DuplicateEmailError(), 400, "DUPLICATE_EMAIL"),
            (HasDependentsError("blocked"), 400, "HAS_DEPENDENTS"),
            (InvalidReferenceError("Card", 7), 400, "INVALID_REFERENCE"),
            (BusinessRuleError("bad period"), 400, "BUSINESS_RULE_VIOLATION"),
        ],
    )
    async def test_maps_domain_errors(
        self, mock_request: MagicMock, exc, status_code: int, error_code: str
    ) -> None:
        response = await app_exception_handler(mock_request, exc)

        assert response.status_code == status_code
        assert _body(response)["error"]["code"] == error_code

    @pytest.mark.asyncio
    async def test_not_found_names_the_resource(self, mock_request: MagicMock) -> None:
        response = await app_exception_handler(mock_request, NotFoundError("Account"))

        body = _body(response)
        assert body["error"]["message"] == "Account not found"
        assert body["meta"]["request_id"] == "req-42"

    @pytest.mark.asyncio
    async def test_authentication_errors_carry_bearer_challenge(
        self, mock_request: MagicMock
    ) -> None:
        unauthorized = await app_exception_handler(mock_request, InvalidTokenError())
        forbidden = await app_exception_handler(mock_request, InactiveUserError())

        assert unauthorized.headers["www-authenticate"] == "Bearer"
        assert "www-authenticate" not in forbidden.headers

    @pytest.mark.asyncio
    async def test_invalid_reference_details(self, mock_request: MagicMock) -> None:
        response = await app_exception_handler(
            mock_request, InvalidReferenceError("Account", 12)
        )

        assert _body(response)["error"]["details"] == {"resource": "account", "id": 12}

    @pytest.mark.asyncio
    async def test_handles_missing_request_id(self) -> None:
        """Handler works when request_id is not set."""
        request = MagicMock(spec=Request)
        request.state = MagicMock(spec=[])

        response = await app_exception_handler(request, InvalidTokenError())

        assert _body(response)["meta"]["request_id"] is None


class TestValidationExceptionHandler:
    """Tests for validation_exception_handler."""

    @pytest.mark.asyncio
    async def test_formats_validation_errors(self, mock_request: MagicMock) -> None:
        exc = MagicMock(spec=RequestValidationError)
        exc.errors.return_value = [
            {"loc": ("body", "amount"), "msg": "Too small", "type": "greater_than_equal"},
            {"loc": ("body", "due_day"), "msg": "Too big", "type": "less_than_equal"},
        ]

        response = await validation_exception_handler(mock_request, exc)

        body = _body(response)
        assert response.status_code == 422
        assert body["error"]["code"] == "VALIDATION_ERROR"
        assert [d["field"] for d in body["error"]["details"]] == [
            "body.amount",
            "body.due_day",
        ]


class TestGeneralExceptionHandler:
    """Tests for general_exception_handler."""

    @pytest.mark.asyncio
    async def test_hides_details_in_production(self, mock_request: MagicMock) -> None:
        exc = RuntimeError("connection refused on db-01")

        with patch("src.core.handlers.settings") as mock_settings:
            mock_settings.debug = False
            response = await general_exception_handler(mock_request, exc)

        body = _body(response)
        assert response.status_code == 500
        assert body["error"]["code"] == "INTERNAL_ERROR"
        assert "db-01" not in body["error"]["message"]

    @pytest.mark.asyncio
    async def test_shows_details_in_debug(self, mock_request: MagicMock) -> None:
        exc = RuntimeError("Debug error message")

        with patch("src.core.handlers.settings") as mock_settings:
            mock_settings.debug = True
            response = await general_exception_handler(mock_request, exc)

        assert _body(response)["error"]["message"] == "Debug error message"


class TestRateLimitHandler:
    """Tests for rate_limit_handler."""

    @pytest.mark.asyncio
    async def test_returns_429(self, mock_request: MagicMock) -> None:
        exc = MagicMock(spec=RateLimitExceeded)
        exc.detail = "5 per 15 minute"

        response = await rate_limit_handler(mock_request, exc)

        body = _body(response)
        assert response.status_code == 429
        assert body["error"]["code"] == "RATE_LIMIT_EXCEEDED"
        assert body["error"]["details"]["limit"] == "5 per 15 minute"

    @pytest.mark.asyncio
    async def test_handles_missing_client(self) -> None:
        request = MagicMock(spec=Request)
        request.state.request_id = "req-1"
        request.client = None
        exc = MagicMock(spec=RateLimitExceeded)
        exc.detail = "3 per 1 hour"

        response = await rate_limit_handler(request, exc)

        assert response.status_code == 429
