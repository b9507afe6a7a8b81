"""Dialog hosts for the two async verification workflows.

EmailVerification drives the OTP check that gates registration.
PasswordReset drives the forgot-password dialog on the login page.

Both reset their workflow whenever the dialog is (re)opened, reject a
second submission while one is in flight, and close themselves once the
auto-close delay after success has elapsed.
"""

import logging
from typing import Callable

from auth.config import AuthConfig
from auth.exceptions import (
    PasswordMismatchError,
    ValidationFailedError,
    VerificationInProgressError,
)
from auth.security_logger import SecurityLogger, SecurityEvent
from auth.types import NoticeKind, VerificationSnapshot
from auth.ui_ports import Notifier
from auth.validators import is_email, is_valid_otp, passwords_match
from core.event_bus import EventBus
from core.events import EmailVerified, PasswordResetCompleted
from core.scheduler import Scheduler
from core.workflow import AsyncActionWorkflow, WorkflowState, always_valid

logger = logging.getLogger(__name__)

OTP_PROMPT = "Enter your OTP code"
OTP_MALFORMED_HINT = "Please enter {length} digits"
RESET_SUCCESS_MESSAGE = "Password reset successfully."


class EmailVerification:
    """OTP dialog bound to one email address at a time."""

    def __init__(
        self,
        config: AuthConfig,
        scheduler: Scheduler,
        event_bus: EventBus,
        security_logger: SecurityLogger,
        on_verified: Callable[[str], None] | None = None,
    ):
        self._config = config
        self._event_bus = event_bus
        self._security_logger = security_logger
        self._on_verified = on_verified

        self.is_open = False
        self.email = ""
        self.show_error = False
        self.workflow = AsyncActionWorkflow(
            name="email-otp",
            scheduler=scheduler,
            validate=lambda code: is_valid_otp(code, config.otp_length),
            delay_ms=config.otp_submit_delay_ms,
            auto_close_delay_ms=config.otp_auto_close_delay_ms,
            on_success=self._handle_success,
            on_failure=self._handle_failure,
            on_auto_close=self._handle_auto_close,
        )

    @property
    def state(self) -> WorkflowState:
        return self.workflow.state

    def open(self, email: str) -> None:
        """Open the dialog for email, starting from a clean IDLE state."""
        if not is_email(email):
            raise ValidationFailedError("email", "Invalid email address")
        self.workflow.reset()
        self.email = email
        self.is_open = True
        self.show_error = False

    def close(self) -> None:
        """Close the dialog, dropping anything still in flight."""
        self.workflow.reset()
        self.is_open = False

    def invalidate(self) -> None:
        """Forget any result. Used when the email being verified changes."""
        self.workflow.discard()
        self.is_open = False
        self.show_error = False
        self.email = ""

    def submit_otp(self, code: str) -> WorkflowState:
        """
        Submit an OTP code.

        A malformed code fails immediately (state FAILED). A well-formed one
        enters SUBMITTING and succeeds after the configured delay.

        Raises:
            VerificationInProgressError: If a code is already being checked.
        """
        if self.workflow.busy:
            raise VerificationInProgressError("Verification already in progress")
        self.show_error = False
        return self.workflow.submit(code)

    def _handle_failure(self, code: str) -> None:
        self.show_error = True
        self._security_logger.log(
            SecurityEvent.EMAIL_VERIFICATION_FAILED,
            email=self.email,
            details={"reason": "malformed_otp", "length": len(code)},
        )

    def _handle_success(self, code: str) -> None:
        self.show_error = False
        self._security_logger.log(SecurityEvent.EMAIL_VERIFIED, email=self.email)
        self._event_bus.publish(EmailVerified.create(self.email))
        if self._on_verified is not None:
            self._on_verified(self.email)

    def _handle_auto_close(self) -> None:
        self.is_open = False

    @property
    def message(self) -> str:
        """Hint line under the OTP input."""
        if self.show_error:
            return OTP_MALFORMED_HINT.format(length=self._config.otp_length)
        if not self.workflow.input_value:
            return OTP_PROMPT
        return f"You entered: {self.workflow.input_value}"

    def snapshot(self) -> VerificationSnapshot:
        return VerificationSnapshot(
            open=self.is_open,
            state=self.workflow.state,
            input_value=self.workflow.input_value,
            succeeded=self.workflow.result_flag,
            message=self.message,
        )


class PasswordReset:
    """Forgot-password dialog: form checks, then a delayed, always-successful reset."""

    def __init__(
        self,
        config: AuthConfig,
        scheduler: Scheduler,
        notifier: Notifier,
        event_bus: EventBus,
        security_logger: SecurityLogger,
    ):
        self._config = config
        self._notifier = notifier
        self._event_bus = event_bus
        self._security_logger = security_logger

        self.is_open = False
        self.workflow = AsyncActionWorkflow(
            name="password-reset",
            scheduler=scheduler,
            validate=always_valid,
            delay_ms=config.reset_submit_delay_ms,
            auto_close_delay_ms=config.reset_auto_close_delay_ms,
            on_success=self._handle_success,
            on_auto_close=self._handle_auto_close,
        )

    @property
    def state(self) -> WorkflowState:
        return self.workflow.state

    def open(self) -> None:
        self.workflow.reset()
        self.is_open = True

    def close(self) -> None:
        self.workflow.reset()
        self.is_open = False

    def submit(self, new_password: str, confirm_password: str) -> WorkflowState:
        """
        Submit the reset form.

        Raises:
            VerificationInProgressError: If a reset is already in flight.
            ValidationFailedError: If the new password is too short.
            PasswordMismatchError: If the confirmation differs.
        """
        if self.workflow.busy:
            raise VerificationInProgressError("Password reset already in progress")

        min_length = self._config.password_min_length
        if len(new_password) < min_length:
            raise ValidationFailedError(
                "newPassword", f"Password must be at least {min_length} characters"
            )
        if not passwords_match(new_password, confirm_password):
            raise PasswordMismatchError("confirmPassword")

        if not self.is_open:
            self.open()
        return self.workflow.submit(new_password)

    def _handle_success(self, _: str) -> None:
        # The simulated backend has the password now; don't keep it around
        self.workflow.input_value = ""
        self._notifier.show_transient(
            NoticeKind.SUCCESS,
            RESET_SUCCESS_MESSAGE,
            self._config.reset_auto_close_delay_ms,
            title="Success",
        )
        self._security_logger.log(SecurityEvent.PASSWORD_RESET)
        self._event_bus.publish(PasswordResetCompleted.create())

    def _handle_auto_close(self) -> None:
        self.is_open = False

    @property
    def button_label(self) -> str:
        if self.workflow.state == WorkflowState.SUBMITTING:
            return "Resetting..."
        if self.workflow.state == WorkflowState.SUCCEEDED and not self.workflow.auto_closed:
            return "Changed"
        return "Reset Password"

    def snapshot(self) -> VerificationSnapshot:
        return VerificationSnapshot(
            open=self.is_open,
            state=self.workflow.state,
            succeeded=self.workflow.state == WorkflowState.SUCCEEDED,
            message=self.button_label,
        )
