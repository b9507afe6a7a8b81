"""Typed exceptions for auth failures.

Every failure is recoverable by the user: nothing here is retried
automatically and nothing is fatal to the process.
"""

from enum import Enum


class AuthErrorKind(str, Enum):
    """Machine-readable failure kinds shared by exceptions and result objects."""

    INVALID_CREDENTIALS = "invalid_credentials"
    EMAIL_NOT_VERIFIED = "email_not_verified"
    MALFORMED_OTP = "malformed_otp"
    PASSWORD_MISMATCH = "password_mismatch"
    VALIDATION_FAILED = "validation_failed"
    VERIFICATION_IN_PROGRESS = "verification_in_progress"


class AuthError(Exception):
    """Base class for authentication/verification errors."""

    kind: AuthErrorKind = AuthErrorKind.VALIDATION_FAILED


class InvalidCredentialsError(AuthError):
    """Identifier format or password length check failed at login."""

    kind = AuthErrorKind.INVALID_CREDENTIALS


class EmailNotVerifiedError(AuthError):
    """Registration submitted before the email passed OTP verification."""

    kind = AuthErrorKind.EMAIL_NOT_VERIFIED


class MalformedOtpError(AuthError):
    """OTP code is not exactly 6 digits."""

    kind = AuthErrorKind.MALFORMED_OTP


class PasswordMismatchError(AuthError):
    """Password and confirmation differ."""

    kind = AuthErrorKind.PASSWORD_MISMATCH

    def __init__(self, field: str = "confirmPassword"):
        self.field = field
        super().__init__("Passwords don't match")


class ValidationFailedError(AuthError):
    """A field-level rule was violated."""

    kind = AuthErrorKind.VALIDATION_FAILED

    def __init__(self, field: str, message: str | None = None):
        self.field = field
        super().__init__(message or f"Invalid value for {field}")


class VerificationInProgressError(AuthError):
    """
    A submission is still waiting on its simulated delay.

    Raised instead of starting a second, overlapping timer.
    """

    kind = AuthErrorKind.VERIFICATION_IN_PROGRESS
