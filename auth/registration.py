"""Registration orchestration.

One RegistrationOrchestrator owns one registration attempt:

    EDITING --(fields valid AND email verified)--> SUBMITTING
    SUBMITTING --(completion delay)--> COMPLETED --(redirect delay)--> login

Field checks run first, in a fixed order, then the email-verified gate.
Verification is tied to the exact email value: editing the email drops any
previous result and cancels a check still in flight.
"""

import logging
from datetime import date
from typing import Callable

from auth.config import AuthConfig
from auth.exceptions import (
    EmailNotVerifiedError,
    PasswordMismatchError,
    ValidationFailedError,
    VerificationInProgressError,
)
from auth.security_logger import SecurityLogger, SecurityEvent
from auth.types import (
    NoticeKind,
    RegistrationFields,
    RegistrationSnapshot,
    SubmissionState,
)
from auth.ui_ports import Navigator, Notifier
from auth.validators import (
    USERNAME_CHARS,
    clamp_day,
    days_in_month,
    is_email,
    passwords_match,
)
from auth.verification import EmailVerification
from core.event_bus import EventBus
from core.events import AccountRegistered
from core.scheduler import Scheduler, TimerHandle
from core.workflow import WorkflowState
from utils.timezone import from_ms

logger = logging.getLogger(__name__)

VERIFY_EMAIL_MESSAGE = "Please verify your email"
REGISTERED_MESSAGE = "Successfully registered."


def validate_registration_fields(
    fields: RegistrationFields,
    config: AuthConfig,
    today: date | None = None,
) -> dict[str, str]:
    """
    Field-level errors keyed by field name, in check order.

    Order: username, email, password, confirmPassword, dateOfBirth.
    An empty dict means every field passes.
    """
    errors: dict[str, str] = {}

    username = fields.username
    if len(username) < config.username_min_length:
        errors["username"] = f"At least {config.username_min_length} characters"
    elif len(username) > config.username_max_length:
        errors["username"] = f"Less than {config.username_max_length} characters"
    elif USERNAME_CHARS.fullmatch(username) is None:
        errors["username"] = "Only letters, numbers, underscores, dashes and periods"

    if not is_email(fields.email):
        errors["email"] = "Invalid email address"

    if len(fields.password) < config.password_min_length:
        errors["password"] = f"At least {config.password_min_length} characters"

    if len(fields.confirm_password) < config.password_min_length:
        errors["confirmPassword"] = "Please confirm your password"
    elif not passwords_match(fields.password, fields.confirm_password):
        errors["confirmPassword"] = "Passwords don't match"

    dob = fields.date_of_birth
    if dob is None:
        errors["dateOfBirth"] = "Date of birth is required"
    elif dob.year < config.min_birth_year or (today is not None and dob > today):
        errors["dateOfBirth"] = "Date of birth is out of range"

    return errors


class DateOfBirthSelector:
    """Day/month/year selectors with the day clamped to the month length.

    Starts at 1 January 2000; the date only counts as entered once the user
    has touched one of the selectors.
    """

    def __init__(self, min_year: int, max_year: int):
        self.min_year = min_year
        self.max_year = max_year
        self.day = 1
        self.month = 1
        self.year = 2000
        self.touched = False

    def select(
        self,
        day: int | None = None,
        month: int | None = None,
        year: int | None = None,
    ) -> date:
        """Change any of the selectors and return the resulting date.

        A rejected selection leaves every selector as it was.
        """
        new_year = self.year if year is None else year
        new_month = self.month if month is None else month

        if not self.min_year <= new_year <= self.max_year:
            raise ValidationFailedError(
                "dateOfBirth", f"Year must be between {self.min_year} and {self.max_year}"
            )
        if not 1 <= new_month <= 12:
            raise ValidationFailedError("dateOfBirth", "Month must be between 1 and 12")

        if day is None:
            new_day = clamp_day(self.day, new_month, new_year)
        elif 1 <= day <= days_in_month(new_month, new_year):
            new_day = day
        else:
            raise ValidationFailedError("dateOfBirth", f"Invalid day {day}")

        self.year, self.month, self.day = new_year, new_month, new_day
        self.touched = True
        return self.value

    @property
    def value(self) -> date:
        return date(self.year, self.month, self.day)

    @property
    def selected(self) -> date | None:
        return self.value if self.touched else None

    def year_options(self) -> list[int]:
        """Newest first, as the selector lists them."""
        return list(range(self.max_year, self.min_year - 1, -1))

    def day_options(self) -> list[int]:
        return list(range(1, days_in_month(self.month, self.year) + 1))


class RegistrationOrchestrator:
    """Sequences field validation, the email gate, and delayed completion."""

    def __init__(
        self,
        config: AuthConfig,
        scheduler: Scheduler,
        navigator: Navigator,
        notifier: Notifier,
        event_bus: EventBus,
        security_logger: SecurityLogger,
        register_handler: Callable[[str, str], None] | None = None,
    ):
        self._config = config
        self._scheduler = scheduler
        self._navigator = navigator
        self._notifier = notifier
        self._event_bus = event_bus
        self._security_logger = security_logger
        self._register_handler = register_handler

        self.verification = EmailVerification(
            config,
            scheduler,
            event_bus,
            security_logger,
            on_verified=self._handle_email_verified,
        )
        self._timers: list[TimerHandle] = []
        self._reset_attempt()

    def _reset_attempt(self) -> None:
        self.fields = RegistrationFields()
        self.email_verified = False
        self.submission_state = SubmissionState.EDITING
        self.field_errors: dict[str, str] = {}
        self.error_message: str | None = None
        self.dob = DateOfBirthSelector(self._config.min_birth_year, self._today().year)

    def _today(self) -> date:
        return from_ms(self._scheduler.now_ms()).date()

    # -------------------------------------------------------------------------
    # Attempt lifecycle
    # -------------------------------------------------------------------------

    def start(self) -> None:
        """Begin a fresh attempt (form entered). Anything pending is dropped."""
        self.abandon()
        self._reset_attempt()

    def abandon(self) -> None:
        """Cancel every pending timer owned by this attempt."""
        for timer in self._timers:
            timer.cancel()
        self._timers = []
        self.verification.invalidate()

    # -------------------------------------------------------------------------
    # Editing
    # -------------------------------------------------------------------------

    def set_email(self, email: str) -> None:
        """Edit the email. A different value needs fresh verification."""
        self._require_editing()
        if email == self.fields.email:
            return
        self.fields = self.fields.model_copy(update={"email": email})
        if self.email_verified or self.verification.email:
            logger.info("Email changed, verification invalidated")
        self.email_verified = False
        self.verification.invalidate()

    def update_fields(self, **changes) -> None:
        """Edit any identity fields. Email edits go through set_email."""
        self._require_editing()
        if "email" in changes:
            self.set_email(changes.pop("email"))
        if "date_of_birth" in changes:
            dob = changes.pop("date_of_birth")
            if dob is None:
                changes["date_of_birth"] = None
            else:
                self.select_date_of_birth(day=dob.day, month=dob.month, year=dob.year)
        if changes:
            self.fields = self.fields.model_copy(update=changes)

    def select_date_of_birth(
        self,
        day: int | None = None,
        month: int | None = None,
        year: int | None = None,
    ) -> date:
        self._require_editing()
        selected = self.dob.select(day=day, month=month, year=year)
        self.fields = self.fields.model_copy(update={"date_of_birth": selected})
        return selected

    def _require_editing(self) -> None:
        if self.submission_state == SubmissionState.SUBMITTING:
            raise VerificationInProgressError("Registration is being submitted")
        if self.submission_state == SubmissionState.COMPLETED:
            raise ValidationFailedError("form", "Registration already completed")

    # -------------------------------------------------------------------------
    # Email verification gate
    # -------------------------------------------------------------------------

    def open_verification(self) -> None:
        """Open the OTP dialog for the current email."""
        self._require_editing()
        if self.email_verified:
            raise ValidationFailedError("email", "Email already verified")
        self.verification.open(self.fields.email)

    def submit_otp(self, code: str) -> WorkflowState:
        """Submit an OTP for the current email, opening the dialog if needed."""
        if not self.verification.is_open or self.verification.email != self.fields.email:
            self.open_verification()
        return self.verification.submit_otp(code)

    def _handle_email_verified(self, email: str) -> None:
        # A check that finished for an email no longer in the form is stale
        if email != self.fields.email:
            logger.info("Ignoring verification for superseded email")
            return
        self.email_verified = True

    # -------------------------------------------------------------------------
    # Submission
    # -------------------------------------------------------------------------

    def submit_registration(self, fields: RegistrationFields | None = None) -> SubmissionState:
        """
        Submit the form.

        Raises (state stays EDITING, no timer started):
            ValidationFailedError: First failing field in check order.
            PasswordMismatchError: Confirmation differs from password.
            EmailNotVerifiedError: Fields pass but the email is unverified.
            VerificationInProgressError: Already submitting.
        """
        self._require_editing()
        if fields is not None:
            self.update_fields(**fields.model_dump())

        self.field_errors = validate_registration_fields(
            self.fields, self._config, today=self._today()
        )
        if self.field_errors:
            field, message = next(iter(self.field_errors.items()))
            self._security_logger.log(
                SecurityEvent.REGISTRATION_REJECTED,
                email=self.fields.email,
                details={"reason": "validation_failed", "field": field},
            )
            if field == "confirmPassword" and message == "Passwords don't match":
                raise PasswordMismatchError(field)
            raise ValidationFailedError(field, message)

        if not self.email_verified:
            self.error_message = VERIFY_EMAIL_MESSAGE
            self._security_logger.log(
                SecurityEvent.REGISTRATION_REJECTED,
                email=self.fields.email,
                details={"reason": "email_not_verified"},
            )
            raise EmailNotVerifiedError(VERIFY_EMAIL_MESSAGE)

        self.error_message = None
        self.submission_state = SubmissionState.SUBMITTING
        self._timers.append(
            self._scheduler.schedule_once(
                self._config.registration_completion_delay_ms, self._complete
            )
        )
        logger.info(f"Registration submitted for {self.fields.email}")
        return self.submission_state

    def _complete(self) -> None:
        email, password = self.fields.email, self.fields.password
        if self._register_handler is not None:
            # The attempt completes either way so the form never stays locked
            try:
                self._register_handler(email, password)
            except Exception:
                logger.exception(f"Register handler failed for {email}")

        self.submission_state = SubmissionState.COMPLETED
        self._notifier.show_transient(
            NoticeKind.SUCCESS,
            REGISTERED_MESSAGE,
            self._config.notice_duration_ms,
            title="Success",
        )
        self._security_logger.log(SecurityEvent.REGISTRATION_COMPLETED, email=email)
        self._event_bus.publish(AccountRegistered.create(self.fields.username, email))

        self._timers.append(
            self._scheduler.schedule_once(
                self._config.registration_redirect_delay_ms, self._redirect_to_login
            )
        )

    def _redirect_to_login(self) -> None:
        self._navigator.go_to(self._config.login_route)

    def snapshot(self) -> RegistrationSnapshot:
        return RegistrationSnapshot(
            submission_state=self.submission_state,
            email=self.fields.email,
            email_verified=self.email_verified,
            date_of_birth=self.fields.date_of_birth,
            field_errors=dict(self.field_errors),
            error_message=self.error_message,
            otp=self.verification.snapshot(),
        )
