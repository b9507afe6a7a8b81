"""Tests for api/errors.py - exception to envelope mapping."""

import pytest
from fastapi import FastAPI
from starlette.testclient import TestClient

from api.errors import register_error_handlers
from auth.exceptions import (
    EmailNotVerifiedError,
    InvalidCredentialsError,
    MalformedOtpError,
    PasswordMismatchError,
    ValidationFailedError,
    VerificationInProgressError,
)


ERRORS = {
    "credentials": InvalidCredentialsError("bad"),
    "unverified": EmailNotVerifiedError("Please verify your email"),
    "otp": MalformedOtpError("Please enter 6 digits"),
    "mismatch": PasswordMismatchError(),
    "field": ValidationFailedError("username", "At least 3 characters"),
    "busy": VerificationInProgressError("busy"),
    "value": ValueError("bad value"),
    "crash": RuntimeError("boom"),
}


@pytest.fixture
def client():
    app = FastAPI()
    register_error_handlers(app)

    @app.get("/raise/{name}")
    async def raise_error(name: str):
        raise ERRORS[name]

    return TestClient(app, raise_server_exceptions=False)


class TestAuthErrorMapping:
    """AuthError kinds map to status and error code."""

    @pytest.mark.parametrize("name,status,code", [
        ("credentials", 401, "INVALID_CREDENTIALS"),
        ("unverified", 403, "EMAIL_NOT_VERIFIED"),
        ("busy", 409, "VERIFICATION_IN_PROGRESS"),
        ("otp", 422, "MALFORMED_OTP"),
        ("mismatch", 422, "PASSWORD_MISMATCH"),
        ("field", 422, "VALIDATION_ERROR"),
    ])
    def test_status_and_code(self, client, name, status, code):
        """Each kind gets its HTTP status and envelope code."""
        response = client.get(f"/raise/{name}")

        assert response.status_code == status
        body = response.json()
        assert body["success"] is False
        assert body["error"]["code"] == code

    def test_field_included(self, client):
        """Field-level errors report the field and message."""
        error = client.get("/raise/field").json()["error"]
        assert error["field"] == "username"
        assert error["message"] == "At least 3 characters"


class TestGenericErrors:
    """Fallback handlers for non-auth errors."""

    def test_value_error_is_400(self, client):
        """ValueError becomes INVALID_REQUEST."""
        response = client.get("/raise/value")
        assert response.status_code == 400
        assert response.json()["error"]["code"] == "INVALID_REQUEST"

    def test_unhandled_is_500_without_details(self, client):
        """Unexpected errors hide their message behind a 500."""
        response = client.get("/raise/crash")

        assert response.status_code == 500
        body = response.json()
        assert body["error"]["code"] == "INTERNAL_ERROR"
        assert "boom" not in body["error"]["message"]
