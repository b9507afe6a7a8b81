"""Authentication configuration."""

import os

from pydantic import BaseModel, Field


class AuthConfig(BaseModel):
    """
    Authentication configuration.

    All durations are in milliseconds, matching the epoch-millisecond expiry
    stamp persisted for the session.
    """

    # Session settings
    session_ttl_ms: int = Field(
        default=60_000,
        description="Session lifetime from login",
        ge=1_000,
        le=86_400_000,
    )
    countdown_period_ms: int = Field(
        default=1_000,
        description="Period of the session countdown tick",
        ge=100,
        le=60_000,
    )

    # Email OTP verification
    otp_length: int = Field(default=6, ge=4, le=10)
    otp_submit_delay_ms: int = Field(
        default=2_000,
        description="Simulated latency of OTP verification",
        ge=0,
        le=60_000,
    )
    otp_auto_close_delay_ms: int = Field(
        default=1_000,
        description="How long the verified indicator shows before the dialog closes",
        ge=0,
        le=60_000,
    )

    # Password reset
    reset_submit_delay_ms: int = Field(default=2_000, ge=0, le=60_000)
    reset_auto_close_delay_ms: int = Field(default=2_000, ge=0, le=60_000)

    # Registration
    registration_completion_delay_ms: int = Field(
        default=2_000,
        description="Simulated latency of account creation",
        ge=0,
        le=60_000,
    )
    registration_redirect_delay_ms: int = Field(
        default=2_000,
        description="Delay between the success notice and the redirect to login",
        ge=0,
        le=60_000,
    )
    notice_duration_ms: int = Field(
        default=2_000,
        description="How long transient notices stay visible",
        ge=500,
        le=60_000,
    )

    # Credential rules
    password_min_length: int = Field(default=8, ge=1, le=128)
    username_min_length: int = Field(default=3, ge=1)
    username_max_length: int = Field(default=20, ge=1, le=255)
    min_birth_year: int = Field(default=1900, ge=1800)

    # Routes handed to the navigation layer
    login_route: str = Field(default="/")
    dashboard_route: str = Field(default="/dashboard")
    register_route: str = Field(default="/register")

    # Display
    display_timezone: str = Field(
        default="UTC",
        description="IANA timezone used for the dashboard greeting",
    )

    @classmethod
    def from_env(cls, prefix: str = "AUTH_") -> "AuthConfig":
        """
        Build config from environment variables.

        Each field maps to PREFIX + FIELD_NAME in upper case, e.g.
        AUTH_SESSION_TTL_MS. Unset variables keep their defaults; bounds
        are enforced by pydantic.
        """
        overrides = {}
        for name in cls.model_fields:
            value = os.getenv(f"{prefix}{name.upper()}")
            if value is not None:
                overrides[name] = value
        return cls(**overrides)
