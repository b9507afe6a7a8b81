"""Application wiring: one container per process, one FastAPI app over it."""

import asyncio
import logging
import os
from contextlib import asynccontextmanager
from dataclasses import dataclass
from typing import Callable

from dotenv import load_dotenv
from fastapi import FastAPI

from api.errors import register_error_handlers
from api.middleware import RequestIDMiddleware
from api.routes import create_auth_router, create_registration_router, create_ui_router
from auth.config import AuthConfig
from auth.registration import RegistrationOrchestrator
from auth.security_logger import SecurityLogger
from auth.service import AuthService
from auth.session import SessionManager
from auth.ui_ports import NoticeBoard, RouteTracker
from auth.verification import PasswordReset
from clients.memory_store import KeyValueStore, MemoryStore
from clients.valkey_client import ValkeyClient
from core.event_bus import EventBus
from core.scheduler import AsyncioScheduler, Scheduler

logger = logging.getLogger(__name__)


@dataclass
class AppContainer:
    """Every long-lived component, wired once per process."""

    config: AuthConfig
    scheduler: Scheduler
    store: KeyValueStore
    event_bus: EventBus
    security_logger: SecurityLogger
    navigator: RouteTracker
    notices: NoticeBoard
    session_manager: SessionManager
    auth_service: AuthService
    password_reset: PasswordReset
    registration: RegistrationOrchestrator

    def startup(self) -> None:
        """Resume a persisted session, if any."""
        self.session_manager.init()

    def shutdown(self) -> None:
        """Cancel every timer the container owns."""
        self.session_manager.teardown()
        self.registration.abandon()
        self.password_reset.close()
        self.notices.clear()


def _log_registration(email: str, password: str) -> None:
    logger.info(f"Account registered for {email}")


def build_store() -> KeyValueStore:
    """Valkey when VALKEY_URL is set, otherwise in-process memory."""
    url = os.getenv("VALKEY_URL")
    if url:
        return ValkeyClient(url)
    logger.info("VALKEY_URL not set, using in-memory session store")
    return MemoryStore()


def build_container(
    config: AuthConfig | None = None,
    scheduler: Scheduler | None = None,
    store: KeyValueStore | None = None,
    register_handler: Callable[[str, str], None] | None = None,
) -> AppContainer:
    """Wire the components. Anything not passed comes from the environment."""
    config = config or AuthConfig.from_env()
    scheduler = scheduler or AsyncioScheduler()
    store = store if store is not None else build_store()

    event_bus = EventBus()
    security_logger = SecurityLogger()
    navigator = RouteTracker(config.login_route)
    notices = NoticeBoard(scheduler)

    session_manager = SessionManager(store, config, scheduler, event_bus, security_logger)
    auth_service = AuthService(
        config, session_manager, scheduler, navigator, notices, event_bus
    )
    password_reset = PasswordReset(config, scheduler, notices, event_bus, security_logger)
    registration = RegistrationOrchestrator(
        config,
        scheduler,
        navigator,
        notices,
        event_bus,
        security_logger,
        register_handler=register_handler or _log_registration,
    )

    return AppContainer(
        config=config,
        scheduler=scheduler,
        store=store,
        event_bus=event_bus,
        security_logger=security_logger,
        navigator=navigator,
        notices=notices,
        session_manager=session_manager,
        auth_service=auth_service,
        password_reset=password_reset,
        registration=registration,
    )


def create_app(container: AppContainer | None = None) -> FastAPI:
    """Create the FastAPI app. Without a container, one is built from the environment."""
    if container is None:
        load_dotenv()
        container = build_container()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        if isinstance(container.scheduler, AsyncioScheduler):
            container.scheduler.bind(asyncio.get_running_loop())
        container.startup()
        yield
        container.shutdown()

    app = FastAPI(title="Functional Login", lifespan=lifespan)
    app.state.container = container
    app.add_middleware(RequestIDMiddleware)
    register_error_handlers(app)

    app.include_router(
        create_auth_router(container.auth_service, container.password_reset),
        prefix="/auth",
    )
    app.include_router(create_registration_router(container.registration), prefix="/register")
    app.include_router(create_ui_router(container.navigator, container.notices))

    @app.get("/health")
    async def health():
        return {"status": "ok"}

    return app
