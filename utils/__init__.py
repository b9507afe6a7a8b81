"""Utility modules for cross-cutting concerns."""

from utils.timezone import now_utc, now_ms, from_ms, to_local
from utils.request_context import get_request_id, set_request_id, clear_request_id, request_context
