"""Tests for api/base.py - response envelope."""

from datetime import timezone

from api.base import (
    success_response,
    error_response,
    ErrorCodes,
)
from utils.request_context import request_context


class TestSuccessResponse:
    """success_response envelope shape."""

    def test_structure(self):
        """Data is carried and error stays empty."""
        resp = success_response({"route": "/dashboard"})
        assert resp.success is True
        assert resp.data == {"route": "/dashboard"}
        assert resp.error is None

    def test_timestamp_is_utc(self):
        """meta.timestamp is timezone-aware UTC."""
        assert success_response({}).meta.timestamp.tzinfo == timezone.utc


class TestErrorResponse:
    """error_response envelope shape."""

    def test_structure(self):
        """Code and message land in error, data stays empty."""
        resp = error_response(ErrorCodes.EMAIL_NOT_VERIFIED, "Please verify your email")
        assert resp.success is False
        assert resp.data is None
        assert resp.error.code == "EMAIL_NOT_VERIFIED"
        assert resp.error.message == "Please verify your email"
        assert resp.error.field is None

    def test_field_carried(self):
        """The offending form field is reported when given."""
        resp = error_response(ErrorCodes.PASSWORD_MISMATCH, "Passwords don't match", field="confirmPassword")
        assert resp.error.field == "confirmPassword"

    def test_serializes_to_json(self):
        """JSON dump renders the timestamp as a string."""
        data = error_response(ErrorCodes.MALFORMED_OTP, "Please enter 6 digits").model_dump(mode="json")
        assert isinstance(data["meta"]["timestamp"], str)


class TestRequestId:
    """meta.request_id follows the bound request context."""

    def test_fresh_id_outside_request(self):
        """Without a bound ID each envelope gets its own."""
        first = success_response({}).meta.request_id
        second = success_response({}).meta.request_id
        assert first and second and first != second

    def test_bound_id_reused(self):
        """Both envelope kinds reuse the bound ID."""
        with request_context("ui-1234"):
            assert success_response({}).meta.request_id == "ui-1234"
            assert error_response("ERR", "msg").meta.request_id == "ui-1234"

    def test_binding_released_after_context(self):
        """Leaving the context drops the bound ID."""
        with request_context("ui-1234"):
            pass
        assert success_response({}).meta.request_id != "ui-1234"
