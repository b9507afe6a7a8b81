"""Session lifecycle management.

A session is two persisted keys: a logged-in flag and an epoch-millisecond
expiry stamp. While a session is active a periodic countdown calls tick();
the tick that finds no whole second left clears the session and publishes
SessionExpired exactly once.
"""

import logging
from dataclasses import dataclass

from auth.config import AuthConfig
from auth.exceptions import AuthErrorKind
from auth.security_logger import SecurityLogger, SecurityEvent
from auth.types import Session
from auth.validators import is_email, is_username, validate_password
from clients.memory_store import KeyValueStore
from core.event_bus import EventBus
from core.events import SessionEnded, SessionExpired, SessionStarted
from core.scheduler import Scheduler, TimerHandle

logger = logging.getLogger(__name__)


@dataclass
class LoginResult:
    """Result of a login attempt. Exactly one of session/error is set."""

    session: Session | None = None
    error: AuthErrorKind | None = None

    @property
    def ok(self) -> bool:
        return self.session is not None


class SessionManager:
    """Session lifecycle: issue, count down, expire, revoke.

    Construct once per process, call init() to pick up a persisted session
    and teardown() to stop the countdown.
    """

    LOGGED_IN_KEY = "session:logged_in"
    EXPIRES_AT_KEY = "session:expires_at"

    def __init__(
        self,
        store: KeyValueStore,
        config: AuthConfig,
        scheduler: Scheduler,
        event_bus: EventBus,
        security_logger: SecurityLogger,
    ):
        self._store = store
        self._config = config
        self._scheduler = scheduler
        self._event_bus = event_bus
        self._security_logger = security_logger
        self._countdown: TimerHandle | None = None
        self.last_remaining = 0

    # -------------------------------------------------------------------------
    # Lifecycle
    # -------------------------------------------------------------------------

    def init(self) -> Session | None:
        """Load the persisted session, resuming its countdown if still live.

        A persisted session that already ran out is cleared silently: the
        expiry was never observed by this process, so no hook fires.
        """
        if not self.is_logged_in():
            return None

        remaining = self.remaining_seconds()
        if remaining == 0:
            logger.info("Discarding persisted session that expired while offline")
            self._clear()
            return None

        self._start_countdown()
        self.last_remaining = remaining
        self._security_logger.log(
            SecurityEvent.SESSION_RESTORED,
            details={"remaining_seconds": remaining},
        )
        return self.session()

    def teardown(self) -> None:
        """Stop the countdown. The persisted session is left in place."""
        self._stop_countdown()

    # -------------------------------------------------------------------------
    # Operations
    # -------------------------------------------------------------------------

    def login(self, identifier: str, password: str) -> LoginResult:
        """Check credentials and issue a session.

        Invalid credentials are reported in the result, never raised.
        """
        config = self._config
        identifier_ok = is_email(identifier) or is_username(
            identifier, config.username_min_length, config.username_max_length
        )
        valid = identifier_ok and validate_password(
            password, min_length=config.password_min_length
        )
        if not valid:
            self._security_logger.log(
                SecurityEvent.LOGIN_FAILED,
                identifier=identifier,
                details={"reason": "invalid_credentials"},
            )
            return LoginResult(error=AuthErrorKind.INVALID_CREDENTIALS)

        expires_at_ms = self._scheduler.now_ms() + self._config.session_ttl_ms
        self._store.set(self.LOGGED_IN_KEY, "true")
        self._store.set(self.EXPIRES_AT_KEY, str(expires_at_ms))
        self._start_countdown()
        self.last_remaining = self.remaining_seconds()

        self._security_logger.log(SecurityEvent.LOGIN_SUCCEEDED, identifier=identifier)
        self._security_logger.log(
            SecurityEvent.SESSION_CREATED,
            identifier=identifier,
            details={"expires_at_ms": expires_at_ms},
        )
        self._event_bus.publish(SessionStarted.create(identifier, expires_at_ms))

        return LoginResult(session=Session(active=True, expires_at_ms=expires_at_ms))

    def is_logged_in(self) -> bool:
        return self._store.get(self.LOGGED_IN_KEY) == "true"

    def session(self) -> Session | None:
        """The persisted session, or None when logged out."""
        expires_at_ms = self._expires_at_ms()
        if not self.is_logged_in() or expires_at_ms is None:
            return None
        return Session(active=True, expires_at_ms=expires_at_ms)

    def remaining_seconds(self) -> int:
        """Whole seconds left on the persisted session; 0 when there is none."""
        expires_at_ms = self._expires_at_ms()
        if expires_at_ms is None:
            return 0
        return max(0, (expires_at_ms - self._scheduler.now_ms()) // 1000)

    def tick(self) -> int:
        """Countdown step. Returns the remaining seconds.

        Expires the session when no whole second is left. Once the session
        is gone this is a no-op returning 0.
        """
        if not self.is_logged_in():
            self._stop_countdown()
            self.last_remaining = 0
            return 0

        remaining = self.remaining_seconds()
        self.last_remaining = remaining
        if remaining > 0:
            return remaining

        expires_at_ms = self._expires_at_ms() or 0
        self._clear()
        logger.info("Session expired")
        self._security_logger.log(
            SecurityEvent.SESSION_EXPIRED,
            details={"expires_at_ms": expires_at_ms},
        )
        self._event_bus.publish(SessionExpired.create(expires_at_ms))
        return 0

    def logout(self) -> bool:
        """Revoke the session. Safe to call when already logged out."""
        was_logged_in = self.is_logged_in()
        self._clear()
        self.last_remaining = 0

        if was_logged_in:
            self._security_logger.log(SecurityEvent.SESSION_REVOKED)
            self._event_bus.publish(SessionEnded.create())
        return True

    # -------------------------------------------------------------------------
    # Internals
    # -------------------------------------------------------------------------

    def _expires_at_ms(self) -> int | None:
        raw = self._store.get(self.EXPIRES_AT_KEY)
        if raw is None:
            return None
        try:
            return int(raw)
        except ValueError:
            logger.warning(f"Ignoring malformed session expiry: {raw!r}")
            return None

    def _start_countdown(self) -> None:
        self._stop_countdown()
        self._countdown = self._scheduler.schedule_periodic(
            self._config.countdown_period_ms, self.tick
        )

    def _stop_countdown(self) -> None:
        if self._countdown is not None:
            self._countdown.cancel()
            self._countdown = None

    def _clear(self) -> None:
        self._stop_countdown()
        self._store.delete(self.LOGGED_IN_KEY)
        self._store.delete(self.EXPIRES_AT_KEY)
