"""Unit tests for DomainError to Problem Details mapping.

Tests cover:
- Status by error code (423 lock, 403 risk denial) before status by class
- Problem Details members and the per-field ``errors`` list
- WWW-Authenticate on 401 responses only
"""

import json

import pytest
from fastapi import Request

from src.core.enums import ErrorCode
from src.core.errors import (
    AuthenticationError,
    ConflictError,
    DomainError,
    NotFoundError,
    ValidationError,
)
from src.presentation.error_mapping import ErrorResponseBuilder, status_for


def make_request(path: str = "/api/v1/sessions") -> Request:
    scope = {"type": "http", "method": "POST", "path": path, "headers": [], "query_string": b""}
    return Request(scope)


@pytest.mark.unit
class TestStatusFor:
    @pytest.mark.parametrize(
        ("error", "expected"),
        [
            (AuthenticationError(code=ErrorCode.ACCOUNT_LOCKED, message="locked"), 423),
            (AuthenticationError(code=ErrorCode.LOGIN_DENIED_BY_RISK, message="denied"), 403),
            (AuthenticationError(code=ErrorCode.TOKEN_INVALID, message="bad"), 401),
            (ValidationError(code=ErrorCode.PASSWORD_TOO_WEAK, message="weak"), 400),
            (
                NotFoundError(
                    code=ErrorCode.SESSION_NOT_FOUND,
                    message="Session not found",
                    resource_type="Session",
                    resource_id="x",
                ),
                404,
            ),
            (
                ConflictError(
                    code=ErrorCode.EMAIL_ALREADY_EXISTS, message="taken", resource_type="User"
                ),
                409,
            ),
            (DomainError(code=ErrorCode.TOKEN_INVALID, message="plain"), 500),
        ],
    )
    def test_status(self, error, expected):
        assert status_for(error) == expected


@pytest.mark.unit
class TestErrorResponseBuilder:
    def test_validation_problem(self):
        error = ValidationError(
            code=ErrorCode.PASSWORD_TOO_WEAK,
            message="Password must contain a digit",
            field="new_password",
        )

        response = ErrorResponseBuilder.from_domain_error(error, make_request("/password"))

        body = json.loads(response.body)
        assert response.status_code == 400
        assert body["type"] == f"/errors/{ErrorCode.PASSWORD_TOO_WEAK.value}"
        assert body["title"] == "Validation Failed"
        assert body["detail"] == "Password must contain a digit"
        assert body["instance"] == "/password"
        assert body["errors"] == [
            {
                "field": "new_password",
                "code": ErrorCode.PASSWORD_TOO_WEAK.value,
                "message": "Password must contain a digit",
            }
        ]
        assert "www-authenticate" not in response.headers

    def test_unauthenticated_problem_has_challenge_header(self):
        error = AuthenticationError(
            code=ErrorCode.INVALID_CREDENTIALS, message="Invalid email or password"
        )

        response = ErrorResponseBuilder.from_domain_error(error, make_request())

        assert response.status_code == 401
        assert response.headers["www-authenticate"] == "Bearer"
        assert "errors" not in json.loads(response.body)

    def test_locked_account(self):
        error = AuthenticationError(
            code=ErrorCode.ACCOUNT_LOCKED, message="Account locked. Try again in 120 minutes."
        )

        response = ErrorResponseBuilder.from_domain_error(error, make_request())

        body = json.loads(response.body)
        assert response.status_code == 423
        assert body["title"] == "Account Locked"
        assert "www-authenticate" not in response.headers
