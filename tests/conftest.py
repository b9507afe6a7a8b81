"""Shared test fixtures for the auth workflow test suite."""

import pytest

from auth.config import AuthConfig
from auth.security_logger import SecurityLogger
from auth.session import SessionManager
from auth.ui_ports import NoticeBoard, RouteTracker
from clients.memory_store import MemoryStore
from core.event_bus import EventBus
from core.scheduler import VirtualScheduler
from tests.constants import START_MS


# =============================================================================
# INFRASTRUCTURE FIXTURES
# =============================================================================


@pytest.fixture
def config() -> AuthConfig:
    """Default config: 60s sessions, 2s simulated delays."""
    return AuthConfig()


@pytest.fixture
def scheduler() -> VirtualScheduler:
    """Virtual clock; tests move time with scheduler.advance(ms)."""
    return VirtualScheduler(start_ms=START_MS)


@pytest.fixture
def store() -> MemoryStore:
    return MemoryStore()


@pytest.fixture
def event_bus() -> EventBus:
    return EventBus()


@pytest.fixture
def security_logger() -> SecurityLogger:
    return SecurityLogger()


@pytest.fixture
def navigator(config) -> RouteTracker:
    return RouteTracker(config.login_route)


@pytest.fixture
def notices(scheduler) -> NoticeBoard:
    return NoticeBoard(scheduler)


@pytest.fixture
def session_manager(store, config, scheduler, event_bus, security_logger):
    """SessionManager over the in-memory store and virtual clock."""
    manager = SessionManager(store, config, scheduler, event_bus, security_logger)
    yield manager
    manager.teardown()


@pytest.fixture
def recorded_events(event_bus):
    """Collect every published event of the given class names."""

    def _record(*event_types: str) -> list:
        received = []
        for event_type in event_types:
            event_bus.subscribe(event_type, received.append)
        return received

    return _record
