"""Credential validation predicates.

Single home for every identifier, password and OTP rule. Pure functions:
they return booleans and never raise, leaving user-facing messages to the
caller.
"""

import calendar
import re

EMAIL_PATTERN = re.compile(r"[^\s@]+@[^\s@]+\.[^\s@]+")
USERNAME_CHARS = re.compile(r"[A-Za-z0-9_.-]+")

USERNAME_MIN_LENGTH = 3
USERNAME_MAX_LENGTH = 20
PASSWORD_MIN_LENGTH = 8
OTP_LENGTH = 6


def is_email(value) -> bool:
    """True if value looks like local@domain.tld with no whitespace."""
    return isinstance(value, str) and EMAIL_PATTERN.fullmatch(value) is not None


def is_username(
    value,
    min_length: int = USERNAME_MIN_LENGTH,
    max_length: int = USERNAME_MAX_LENGTH,
) -> bool:
    """True if value is 3-20 characters from [A-Za-z0-9_.-]."""
    if not isinstance(value, str) or not min_length <= len(value) <= max_length:
        return False
    return USERNAME_CHARS.fullmatch(value) is not None


def validate_identifier(value) -> bool:
    """Login identifier: an email address or a username."""
    return is_email(value) or is_username(value)


def validate_password(
    value,
    confirmation: str | None = None,
    min_length: int = PASSWORD_MIN_LENGTH,
) -> bool:
    """
    Password strength check.

    Login passes only the password. Registration and reset also pass the
    confirmation field, which must be identical.
    """
    if not isinstance(value, str) or len(value) < min_length:
        return False
    if confirmation is not None:
        return passwords_match(value, confirmation)
    return True


def passwords_match(password: str, confirmation: str) -> bool:
    return password == confirmation


def is_valid_otp(code, length: int = OTP_LENGTH) -> bool:
    """Exactly `length` ASCII digits."""
    if not isinstance(code, str) or len(code) != length:
        return False
    return all("0" <= ch <= "9" for ch in code)


def days_in_month(month: int, year: int) -> int:
    """Number of days in a 1-based month, leap years included."""
    return calendar.monthrange(year, month)[1]


def clamp_day(day: int, month: int, year: int) -> int:
    """Pull day back into range when the month/year shrinks it (31 Jan -> Feb)."""
    return max(1, min(day, days_in_month(month, year)))
