"""Pydantic models for auth domain."""

from datetime import date
from enum import Enum

from pydantic import BaseModel, Field

from core.workflow import WorkflowState


class Session(BaseModel):
    """A time-limited client session."""

    active: bool
    expires_at_ms: int = Field(..., description="Expiry as epoch milliseconds")


class SessionSnapshot(BaseModel):
    """Read-only session view for rendering."""

    active: bool
    remaining_seconds: int = Field(..., ge=0)
    greeting: str | None = None


class LoginRequest(BaseModel):
    """Request payload for login."""

    identifier: str
    password: str


class PasswordResetRequest(BaseModel):
    """Request payload for the reset-password dialog."""

    new_password: str
    confirm_password: str


class OtpRequest(BaseModel):
    """Request payload for OTP submission."""

    code: str


class EmailUpdate(BaseModel):
    email: str


class DateOfBirthUpdate(BaseModel):
    """Any subset of the three selectors; unset parts keep their value."""

    day: int | None = Field(default=None, ge=1, le=31)
    month: int | None = Field(default=None, ge=1, le=12)
    year: int | None = None


class RegistrationFields(BaseModel):
    """Identity fields of one registration attempt."""

    username: str = ""
    email: str = ""
    date_of_birth: date | None = None
    password: str = ""
    confirm_password: str = ""


class SubmissionState(str, Enum):
    """Lifecycle of a registration attempt."""

    EDITING = "editing"
    SUBMITTING = "submitting"
    COMPLETED = "completed"


class VerificationSnapshot(BaseModel):
    """Read-only view of a verification dialog."""

    open: bool
    state: WorkflowState
    input_value: str = ""
    succeeded: bool = False
    message: str | None = None


class RegistrationSnapshot(BaseModel):
    """Read-only view of the registration form."""

    submission_state: SubmissionState
    email: str
    email_verified: bool
    date_of_birth: date | None = None
    field_errors: dict[str, str] = Field(default_factory=dict)
    error_message: str | None = None
    otp: VerificationSnapshot


class NoticeKind(str, Enum):
    SUCCESS = "success"
    ERROR = "error"
    INFO = "info"


class Notice(BaseModel):
    """A transient notification shown to the user."""

    kind: NoticeKind
    title: str
    message: str
    duration_ms: int
    shown_at_ms: int


class UiSnapshot(BaseModel):
    """What the UI layer should currently render."""

    route: str
    notices: list[Notice] = Field(default_factory=list)
