"""Time helpers. Internally everything is UTC or epoch milliseconds."""

from datetime import datetime, timezone
from zoneinfo import ZoneInfo


def now_utc() -> datetime:
    """Timezone-aware current UTC time. Never use naive datetime.now()."""
    return datetime.now(timezone.utc)


def now_ms() -> int:
    """Wall-clock epoch milliseconds, the unit session expiry is stored in."""
    return int(now_utc().timestamp() * 1000)


def from_ms(epoch_ms: int) -> datetime:
    return datetime.fromtimestamp(epoch_ms / 1000, tz=timezone.utc)


def to_local(dt: datetime, tz_name: str) -> datetime:
    """
    Convert an aware datetime to an IANA zone, for display only.

    Raises:
        ValueError: If dt is naive or tz_name is not a known zone
    """
    if dt.tzinfo is None:
        raise ValueError("Cannot localize a naive datetime")

    try:
        zone = ZoneInfo(tz_name)
    except KeyError:
        raise ValueError(f"Unknown timezone: {tz_name}")

    return dt.astimezone(zone)
