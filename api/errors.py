"""Exception handlers turning workflow errors into response envelopes."""

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from starlette.responses import JSONResponse

from api.base import error_response, ErrorCodes
from auth.exceptions import AuthError, AuthErrorKind

logger = logging.getLogger(__name__)

# kind -> (HTTP status, error code)
AUTH_ERROR_STATUS = {
    AuthErrorKind.INVALID_CREDENTIALS: (401, ErrorCodes.INVALID_CREDENTIALS),
    AuthErrorKind.EMAIL_NOT_VERIFIED: (403, ErrorCodes.EMAIL_NOT_VERIFIED),
    AuthErrorKind.VERIFICATION_IN_PROGRESS: (409, ErrorCodes.VERIFICATION_IN_PROGRESS),
    AuthErrorKind.MALFORMED_OTP: (422, ErrorCodes.MALFORMED_OTP),
    AuthErrorKind.PASSWORD_MISMATCH: (422, ErrorCodes.PASSWORD_MISMATCH),
    AuthErrorKind.VALIDATION_FAILED: (422, ErrorCodes.VALIDATION_ERROR),
}


def _envelope(status_code: int, code: str, message: str, field: str | None = None) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=error_response(code, message, field=field).model_dump(mode="json"),
    )


def register_error_handlers(app: FastAPI) -> None:
    """
    Install handlers on app.

    AuthError subclasses are user-recoverable and map through
    AUTH_ERROR_STATUS. Anything unexpected becomes a 500 whose message
    never echoes internals.
    """

    @app.exception_handler(AuthError)
    async def auth_error_handler(request: Request, exc: AuthError):
        status_code, code = AUTH_ERROR_STATUS[exc.kind]
        logger.info(f"{request.method} {request.url.path} rejected: {exc.kind.value}")
        return _envelope(status_code, code, str(exc), getattr(exc, "field", None))

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        return _envelope(422, ErrorCodes.VALIDATION_ERROR, str(exc.errors()))

    @app.exception_handler(ValueError)
    async def value_error_handler(request: Request, exc: ValueError):
        return _envelope(400, ErrorCodes.INVALID_REQUEST, str(exc))

    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception):
        logger.exception(f"Unhandled exception on {request.method} {request.url.path}")
        return _envelope(500, ErrorCodes.INTERNAL_ERROR, "An internal error occurred")
