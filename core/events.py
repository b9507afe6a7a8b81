"""
Domain events for the authentication workflow.

Immutable event objects that represent state changes in sessions, email
verification, password reset and registration. A component publishes what
happened; the navigation hand-off, the security trail and any UI layer react
without the publisher knowing who's listening.

Event Categories:
- SessionEvent: Session lifecycle (start, expiry, explicit end)
- VerificationEvent: Async verification outcomes (email OTP, password reset)
- RegistrationEvent: Account creation

Events never carry passwords.
"""

from dataclasses import dataclass, field
from datetime import datetime
from uuid import uuid4

from utils.timezone import now_utc


@dataclass(frozen=True, kw_only=True)
class AuthEvent:
    """Base class for all auth domain events."""
    event_id: str = field(default_factory=lambda: str(uuid4()))
    occurred_at: datetime = field(default_factory=now_utc)


# =============================================================================
# SESSION EVENTS
# =============================================================================


@dataclass(frozen=True)
class SessionEvent(AuthEvent):
    """Events related to session lifecycle."""
    pass


@dataclass(frozen=True)
class SessionStarted(SessionEvent):
    """A session was issued after a successful credential check."""
    identifier: str = ""
    expires_at_ms: int = 0

    @classmethod
    def create(cls, identifier: str, expires_at_ms: int) -> "SessionStarted":
        return cls(identifier=identifier, expires_at_ms=expires_at_ms)


@dataclass(frozen=True)
class SessionExpired(SessionEvent):
    """The session countdown reached zero. Fired exactly once per session."""
    expires_at_ms: int = 0

    @classmethod
    def create(cls, expires_at_ms: int) -> "SessionExpired":
        return cls(expires_at_ms=expires_at_ms)


@dataclass(frozen=True)
class SessionEnded(SessionEvent):
    """The session was revoked explicitly (logout)."""

    @classmethod
    def create(cls) -> "SessionEnded":
        return cls()


# =============================================================================
# VERIFICATION EVENTS
# =============================================================================


@dataclass(frozen=True)
class VerificationEvent(AuthEvent):
    """Events related to async verification workflows."""
    pass


@dataclass(frozen=True)
class EmailVerified(VerificationEvent):
    """An OTP code was accepted for an email address."""
    email: str = ""

    @classmethod
    def create(cls, email: str) -> "EmailVerified":
        return cls(email=email)


@dataclass(frozen=True)
class PasswordResetCompleted(VerificationEvent):
    """A password reset submission completed."""

    @classmethod
    def create(cls) -> "PasswordResetCompleted":
        return cls()


# =============================================================================
# REGISTRATION EVENTS
# =============================================================================


@dataclass(frozen=True)
class RegistrationEvent(AuthEvent):
    """Events related to account registration."""
    pass


@dataclass(frozen=True)
class AccountRegistered(RegistrationEvent):
    """A registration attempt completed and was handed off."""
    username: str = ""
    email: str = ""

    @classmethod
    def create(cls, username: str, email: str) -> "AccountRegistered":
        return cls(username=username, email=email)
