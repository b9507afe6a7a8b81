"""Tests for auth/config.py - Auth configuration with validation."""

import pytest
from pydantic import ValidationError

from auth.config import AuthConfig


class TestAuthConfigDefaults:
    """Tests that AuthConfig has sensible defaults."""

    def test_session_defaults(self):
        """Sessions last 60 seconds with a one-second countdown."""
        config = AuthConfig()
        assert config.session_ttl_ms == 60_000
        assert config.countdown_period_ms == 1_000

    def test_otp_defaults(self):
        """OTP checks take 2s and close the dialog 1s later."""
        config = AuthConfig()
        assert config.otp_length == 6
        assert config.otp_submit_delay_ms == 2_000
        assert config.otp_auto_close_delay_ms == 1_000

    def test_reset_and_registration_delays(self):
        """Reset and registration use 2s delays."""
        config = AuthConfig()
        assert config.reset_submit_delay_ms == 2_000
        assert config.reset_auto_close_delay_ms == 2_000
        assert config.registration_completion_delay_ms == 2_000
        assert config.registration_redirect_delay_ms == 2_000

    def test_credential_rules(self):
        """Username and password length rules match the form."""
        config = AuthConfig()
        assert config.password_min_length == 8
        assert config.username_min_length == 3
        assert config.username_max_length == 20

    def test_routes(self):
        """Login, dashboard and register routes are configured."""
        config = AuthConfig()
        assert config.login_route == "/"
        assert config.dashboard_route == "/dashboard"


class TestAuthConfigValidation:
    """Tests that AuthConfig enforces validation bounds."""

    def test_session_ttl_min_bound(self):
        """A zero session TTL is rejected."""
        with pytest.raises(ValidationError):
            AuthConfig(session_ttl_ms=999)  # < 1s

    def test_negative_delay_rejected(self):
        """Delays cannot be negative."""
        with pytest.raises(ValidationError):
            AuthConfig(otp_submit_delay_ms=-1)

    def test_notice_duration_min_bound(self):
        """Notices must stay up for a positive duration."""
        with pytest.raises(ValidationError):
            AuthConfig(notice_duration_ms=499)

    def test_zero_delays_allowed(self):
        """Zero delays are valid for instant flows."""
        config = AuthConfig(otp_submit_delay_ms=0, reset_submit_delay_ms=0)
        assert config.otp_submit_delay_ms == 0


class TestAuthConfigFromEnv:
    """Environment overrides with the AUTH_ prefix."""

    def test_unset_env_keeps_defaults(self, monkeypatch):
        """No AUTH_ variables means default config."""
        monkeypatch.delenv("AUTH_SESSION_TTL_MS", raising=False)
        assert AuthConfig.from_env() == AuthConfig()

    def test_override_is_coerced(self, monkeypatch):
        """String env values are coerced to ints."""
        monkeypatch.setenv("AUTH_SESSION_TTL_MS", "120000")
        monkeypatch.setenv("AUTH_DISPLAY_TIMEZONE", "Europe/Berlin")

        config = AuthConfig.from_env()

        assert config.session_ttl_ms == 120_000
        assert config.display_timezone == "Europe/Berlin"

    def test_custom_prefix(self, monkeypatch):
        """A different prefix selects other variables."""
        monkeypatch.setenv("LOGIN_OTP_LENGTH", "8")
        assert AuthConfig.from_env(prefix="LOGIN_").otp_length == 8

    def test_out_of_bounds_env_rejected(self, monkeypatch):
        """Env values still go through field bounds."""
        monkeypatch.setenv("AUTH_COUNTDOWN_PERIOD_MS", "10")
        with pytest.raises(ValidationError):
            AuthConfig.from_env()
