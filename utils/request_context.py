"""Carry the current request ID through the call stack using contextvars."""

from contextlib import contextmanager
from contextvars import ContextVar

_current_request_id: ContextVar[str | None] = ContextVar("current_request_id", default=None)


def get_request_id() -> str | None:
    """
    Request ID of the request being handled, or None outside a request.

    Response envelopes built outside HTTP handling (tests, scripts) simply
    get a fresh ID, so this is not fail-fast.
    """
    return _current_request_id.get()


def set_request_id(request_id: str) -> None:
    """Set by RequestIDMiddleware when a request arrives."""
    _current_request_id.set(request_id)


def clear_request_id() -> None:
    """Must run in a finally block so IDs never leak between requests."""
    _current_request_id.set(None)


@contextmanager
def request_context(request_id: str):
    """
    Temporarily bind a request ID.

    Example:
        with request_context("ui-1234"):
            response = success_response(data)  # meta.request_id == "ui-1234"
    """
    token = _current_request_id.set(request_id)
    try:
        yield
    finally:
        _current_request_id.reset(token)
