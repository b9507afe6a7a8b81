"""Authentication service - login, logout and route guarding."""

import logging

from auth.config import AuthConfig
from auth.session import LoginResult, SessionManager
from auth.types import NoticeKind, SessionSnapshot
from auth.ui_ports import Navigator, Notifier
from core.event_bus import EventBus
from core.events import SessionExpired
from core.scheduler import Scheduler
from utils.timezone import from_ms, to_local

logger = logging.getLogger(__name__)

LOGIN_FAILED_TITLE = "Login Failed"
LOGIN_FAILED_MESSAGE = "Email or password is incorrect. Please try again"


def greeting_for_hour(hour: int) -> str:
    """Dashboard greeting for a local hour (0-23)."""
    if 5 <= hour < 12:
        return "Good Morning"
    if 12 <= hour < 17:
        return "Good Afternoon"
    if 17 <= hour < 22:
        return "Good Evening"
    return "Good Night"


class AuthService:
    """Connects the session manager to navigation and notices.

    Handles:
    - Login (navigate to dashboard, or flash the failure notice)
    - Logout and session expiry (back to the login route)
    - Route guarding for the login and dashboard routes
    """

    def __init__(
        self,
        config: AuthConfig,
        session_manager: SessionManager,
        scheduler: Scheduler,
        navigator: Navigator,
        notifier: Notifier,
        event_bus: EventBus,
    ):
        self._config = config
        self._session_manager = session_manager
        self._scheduler = scheduler
        self._navigator = navigator
        self._notifier = notifier
        event_bus.subscribe(SessionExpired.__name__, self._handle_session_expired)

    def login(self, identifier: str, password: str) -> LoginResult:
        """Log in. The caller branches on result.ok; nothing is raised."""
        result = self._session_manager.login(identifier, password)

        if result.ok:
            self._navigator.go_to(self._config.dashboard_route)
        else:
            self._notifier.show_transient(
                NoticeKind.ERROR,
                LOGIN_FAILED_MESSAGE,
                self._config.notice_duration_ms,
                title=LOGIN_FAILED_TITLE,
            )
        return result

    def logout(self) -> bool:
        """Revoke the session and return to login. Idempotent."""
        self._session_manager.logout()
        self._navigator.go_to(self._config.login_route)
        return True

    def _handle_session_expired(self, event: SessionExpired) -> None:
        logger.info("Session expired, returning to login")
        self._navigator.go_to(self._config.login_route)

    def resolve_route(self, route: str) -> str:
        """Apply the route guards and return where the user ends up.

        Logged-in users skip the login page; anonymous users cannot see the
        dashboard.
        """
        logged_in = self._session_manager.is_logged_in()

        if route == self._config.login_route and logged_in:
            target = self._config.dashboard_route
        elif route == self._config.dashboard_route and not logged_in:
            target = self._config.login_route
        else:
            target = route

        self._navigator.go_to(target)
        return target

    def greeting(self) -> str:
        local = to_local(from_ms(self._scheduler.now_ms()), self._config.display_timezone)
        return greeting_for_hour(local.hour)

    def session_snapshot(self) -> SessionSnapshot:
        active = self._session_manager.is_logged_in()
        return SessionSnapshot(
            active=active,
            remaining_seconds=self._session_manager.remaining_seconds(),
            greeting=self.greeting() if active else None,
        )
