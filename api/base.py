"""Response envelope shared by every route, plus the error code catalogue."""

from typing import Any
from datetime import datetime
from uuid import uuid4

from pydantic import BaseModel, Field

from utils.request_context import get_request_id
from utils.timezone import now_utc


class APIError(BaseModel):
    """What went wrong, and for form errors, where."""

    code: str = Field(..., description="Machine-readable error code")
    message: str = Field(..., description="Message shown to the user")
    field: str | None = Field(default=None, description="Offending form field, if any")


class APIMeta(BaseModel):
    timestamp: datetime = Field(..., description="Response timestamp (UTC)")
    request_id: str = Field(..., description="Matches the X-Request-ID response header")


class APIResponse(BaseModel):
    """
    Envelope for all API endpoints.

    Exactly one of data/error is set, depending on success. Workflow routes
    put a state snapshot in data so the UI can re-render from one response.
    """

    success: bool
    data: Any | None = None
    error: APIError | None = None
    meta: APIMeta


def _meta() -> APIMeta:
    # Inside a request the middleware's ID is reused; otherwise mint one
    return APIMeta(timestamp=now_utc(), request_id=get_request_id() or str(uuid4()))


def success_response(data: Any) -> APIResponse:
    return APIResponse(success=True, data=data, meta=_meta())


def error_response(code: str, message: str, field: str | None = None) -> APIResponse:
    return APIResponse(
        success=False,
        error=APIError(code=code, message=message, field=field),
        meta=_meta(),
    )


class ErrorCodes:
    """Error codes reported in APIError.code."""

    # Login
    INVALID_CREDENTIALS = "INVALID_CREDENTIALS"

    # Verification
    EMAIL_NOT_VERIFIED = "EMAIL_NOT_VERIFIED"
    MALFORMED_OTP = "MALFORMED_OTP"
    VERIFICATION_IN_PROGRESS = "VERIFICATION_IN_PROGRESS"

    # Form validation
    PASSWORD_MISMATCH = "PASSWORD_MISMATCH"
    VALIDATION_ERROR = "VALIDATION_ERROR"
    INVALID_REQUEST = "INVALID_REQUEST"

    # Infrastructure
    INTERNAL_ERROR = "INTERNAL_ERROR"
