"""Security event logging for the auth audit trail.

Append-only, in-process trail mirrored to the "auth.security" logger.
Passwords never reach it.
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any

from utils.timezone import now_utc

logger = logging.getLogger("auth.security")


class SecurityEvent(Enum):
    """Auth security event types."""

    LOGIN_SUCCEEDED = "login_succeeded"
    LOGIN_FAILED = "login_failed"
    SESSION_CREATED = "session_created"
    SESSION_RESTORED = "session_restored"
    SESSION_EXPIRED = "session_expired"
    SESSION_REVOKED = "session_revoked"
    EMAIL_VERIFICATION_FAILED = "email_verification_failed"
    EMAIL_VERIFIED = "email_verified"
    PASSWORD_RESET = "password_reset"
    REGISTRATION_REJECTED = "registration_rejected"
    REGISTRATION_COMPLETED = "registration_completed"


@dataclass(frozen=True)
class SecurityRecord:
    """One entry in the trail."""

    event: SecurityEvent
    created_at: datetime
    email: str | None = None
    identifier: str | None = None
    details: dict[str, Any] = field(default_factory=dict)


class SecurityLogger:
    """Append-only security event logger."""

    def __init__(self, max_records: int = 10_000):
        self._records: list[SecurityRecord] = []
        self._max_records = max_records

    def log(
        self,
        event: SecurityEvent,
        email: str | None = None,
        identifier: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Record security event."""
        record = SecurityRecord(
            event=event,
            created_at=now_utc(),
            email=email,
            identifier=identifier,
            details=details or {},
        )
        self._records.append(record)
        # Oldest entries fall off once the cap is reached
        if len(self._records) > self._max_records:
            del self._records[: len(self._records) - self._max_records]

        logger.info(
            "%s email=%s identifier=%s details=%s",
            event.value,
            email,
            identifier,
            record.details,
        )

    def get_recent_events(
        self,
        email: str | None = None,
        event_type: SecurityEvent | None = None,
        limit: int = 100,
    ) -> list[SecurityRecord]:
        """Query recent security events with optional filters, newest first."""
        matches = []
        for record in reversed(self._records):
            if email and record.email != email:
                continue
            if event_type and record.event != event_type:
                continue
            matches.append(record)
            if len(matches) >= limit:
                break
        return matches
