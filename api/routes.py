"""HTTP routes for the auth workflow.

Thin adapters: each route calls one workflow operation and returns a
state snapshot for rendering. AuthError subclasses raised here are turned
into error envelopes by api.errors.
"""

from fastapi import APIRouter, Query
from fastapi.responses import JSONResponse

from api.base import success_response, error_response, ErrorCodes
from auth.exceptions import MalformedOtpError
from auth.registration import RegistrationOrchestrator
from auth.service import AuthService, LOGIN_FAILED_MESSAGE
from auth.types import (
    DateOfBirthUpdate,
    EmailUpdate,
    LoginRequest,
    OtpRequest,
    PasswordResetRequest,
    RegistrationFields,
    UiSnapshot,
)
from auth.ui_ports import NoticeBoard, RouteTracker
from auth.verification import PasswordReset
from core.workflow import WorkflowState


def create_auth_router(auth_service: AuthService, password_reset: PasswordReset) -> APIRouter:
    """Create auth router with injected services."""
    router = APIRouter(tags=["auth"])

    @router.post("/login")
    async def login(body: LoginRequest):
        """Log in. On failure nothing changes and the failure notice is shown."""
        result = auth_service.login(body.identifier, body.password)

        if not result.ok:
            return JSONResponse(
                status_code=401,
                content=error_response(
                    ErrorCodes.INVALID_CREDENTIALS,
                    LOGIN_FAILED_MESSAGE,
                ).model_dump(mode="json"),
            )

        return success_response({
            "session": result.session.model_dump(),
            "remaining_seconds": auth_service.session_snapshot().remaining_seconds,
        })

    @router.post("/logout")
    async def logout():
        """Logout - revoke session. Safe to repeat."""
        auth_service.logout()
        return success_response({"message": "Logged out successfully"})

    @router.get("/session")
    async def get_session():
        """Session status and countdown for the dashboard."""
        return success_response(auth_service.session_snapshot().model_dump())

    @router.get("/route")
    async def resolve_route(path: str = Query(...)):
        """Apply route guards to a navigation request."""
        return success_response({"route": auth_service.resolve_route(path)})

    @router.post("/password-reset/open")
    async def open_password_reset():
        password_reset.open()
        return success_response(password_reset.snapshot().model_dump(mode="json"))

    @router.post("/password-reset")
    async def submit_password_reset(body: PasswordResetRequest):
        password_reset.submit(body.new_password, body.confirm_password)
        return success_response(password_reset.snapshot().model_dump(mode="json"))

    @router.get("/password-reset")
    async def get_password_reset():
        return success_response(password_reset.snapshot().model_dump(mode="json"))

    return router


def create_registration_router(registration: RegistrationOrchestrator) -> APIRouter:
    """Create registration router with injected orchestrator."""
    router = APIRouter(tags=["registration"])

    def _snapshot():
        return success_response(registration.snapshot().model_dump(mode="json"))

    @router.post("/start")
    async def start_registration():
        """Enter the form: begins a fresh attempt."""
        registration.start()
        return _snapshot()

    @router.put("/email")
    async def update_email(body: EmailUpdate):
        registration.set_email(body.email)
        return _snapshot()

    @router.put("/date-of-birth")
    async def update_date_of_birth(body: DateOfBirthUpdate):
        registration.select_date_of_birth(day=body.day, month=body.month, year=body.year)
        return _snapshot()

    @router.post("/otp/open")
    async def open_otp():
        registration.open_verification()
        return _snapshot()

    @router.post("/otp")
    async def submit_otp(body: OtpRequest):
        """Submit an OTP. Malformed codes fail at once with MALFORMED_OTP."""
        state = registration.submit_otp(body.code)
        if state == WorkflowState.FAILED:
            raise MalformedOtpError(registration.verification.message)
        return _snapshot()

    @router.post("")
    async def submit_registration(body: RegistrationFields):
        registration.submit_registration(body)
        return _snapshot()

    @router.get("")
    async def get_registration():
        return _snapshot()

    return router


def create_ui_router(navigator: RouteTracker, notices: NoticeBoard) -> APIRouter:
    """Create router exposing navigation and notice hand-offs."""
    router = APIRouter(tags=["ui"])

    @router.get("/ui")
    async def get_ui_state():
        """Where the user should be and which notices are showing."""
        snapshot = UiSnapshot(route=navigator.current_route, notices=notices.active())
        return success_response(snapshot.model_dump(mode="json"))

    return router
