"""Authentication, verification and registration modules."""

from auth.exceptions import (
    AuthError,
    AuthErrorKind,
    InvalidCredentialsError,
    EmailNotVerifiedError,
    MalformedOtpError,
    PasswordMismatchError,
    ValidationFailedError,
    VerificationInProgressError,
)
from auth.types import (
    Session,
    SessionSnapshot,
    RegistrationFields,
    SubmissionState,
    Notice,
    NoticeKind,
)
from auth.config import AuthConfig
from auth.validators import validate_identifier, validate_password, is_valid_otp
from auth.security_logger import SecurityLogger, SecurityEvent
from auth.session import SessionManager, LoginResult
from auth.service import AuthService
from auth.verification import EmailVerification, PasswordReset
from auth.registration import RegistrationOrchestrator
from auth.ui_ports import Navigator, Notifier, RouteTracker, NoticeBoard
