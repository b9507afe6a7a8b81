"""Tests for domain event models."""

from dataclasses import FrozenInstanceError
from datetime import timezone
from uuid import UUID

import pytest

from core.events import (
    AuthEvent,
    SessionEvent, SessionStarted, SessionExpired, SessionEnded,
    VerificationEvent, EmailVerified, PasswordResetCompleted,
    RegistrationEvent, AccountRegistered,
)
from utils.timezone import now_utc


def _all_events():
    return [
        SessionStarted.create(identifier="jane_doe", expires_at_ms=60_000),
        SessionExpired.create(expires_at_ms=60_000),
        SessionEnded.create(),
        EmailVerified.create("jane@example.com"),
        PasswordResetCompleted.create(),
        AccountRegistered.create("jane_doe", "jane@example.com"),
    ]


# =============================================================================
# CONSTRUCTION VIA .create() FACTORY
# =============================================================================


class TestSessionEventFactory:
    """Session event payloads."""

    def test_session_started_carries_identifier_and_expiry(self):
        """SessionStarted keeps identifier and expiry."""
        event = SessionStarted.create(identifier="jane_doe", expires_at_ms=60_000)
        assert event.identifier == "jane_doe"
        assert event.expires_at_ms == 60_000

    def test_session_expired_carries_expiry(self):
        """SessionExpired keeps the expiry stamp."""
        assert SessionExpired.create(expires_at_ms=42).expires_at_ms == 42


class TestVerificationEventFactory:
    """Verification event payloads."""

    def test_email_verified_carries_email(self):
        """EmailVerified keeps the email."""
        assert EmailVerified.create("jane@example.com").email == "jane@example.com"


class TestRegistrationEventFactory:
    """Registration event payloads."""

    def test_account_registered_carries_identity_only(self):
        """AccountRegistered has username and email only."""
        event = AccountRegistered.create("jane_doe", "jane@example.com")
        assert (event.username, event.email) == ("jane_doe", "jane@example.com")
        assert not hasattr(event, "password")


class TestHierarchy:
    """Category base classes."""

    @pytest.mark.parametrize("event_class,group", [
        (SessionStarted, SessionEvent),
        (SessionExpired, SessionEvent),
        (SessionEnded, SessionEvent),
        (EmailVerified, VerificationEvent),
        (PasswordResetCompleted, VerificationEvent),
        (AccountRegistered, RegistrationEvent),
    ])
    def test_grouped_under_category(self, event_class, group):
        """Each event sits under its category."""
        assert issubclass(event_class, group)
        assert issubclass(event_class, AuthEvent)


# =============================================================================
# AUTO-GENERATED METADATA
# =============================================================================


class TestEventId:
    """Generated event IDs."""

    def test_is_valid_uuid4_string(self):
        """event_id parses as a UUID4."""
        event = SessionEnded.create()
        parsed = UUID(event.event_id, version=4)
        assert str(parsed) == event.event_id

    def test_unique_across_events(self):
        """Two events never share an ID."""
        ids = {SessionEnded.create().event_id for _ in range(10)}
        assert len(ids) == 10


class TestOccurredAt:
    """Event timestamps."""

    def test_bounded_by_wall_clock(self):
        """occurred_at lies between before and after."""
        before = now_utc()
        event = PasswordResetCompleted.create()
        after = now_utc()
        assert before <= event.occurred_at <= after

    def test_all_event_types_generate_utc_occurred_at(self):
        """Every event type stamps UTC."""
        for event in _all_events():
            assert event.occurred_at.tzinfo == timezone.utc, (
                f"{type(event).__name__}.occurred_at.tzinfo is {event.occurred_at.tzinfo!r}, expected UTC"
            )
            UUID(event.event_id, version=4)  # valid UUID4


# =============================================================================
# IMMUTABILITY
# =============================================================================


class TestFrozenFields:
    """Events are immutable."""

    def test_cannot_reassign_payload(self):
        """Payload fields are read-only."""
        event = EmailVerified.create("jane@example.com")
        with pytest.raises(FrozenInstanceError):
            event.email = "other@example.com"

    def test_cannot_reassign_event_id(self):
        """event_id is read-only."""
        event = SessionEnded.create()
        with pytest.raises(FrozenInstanceError):
            event.event_id = "x"
