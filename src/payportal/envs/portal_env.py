from __future__ import annotations

import os
from typing import Optional
from urllib.parse import urlparse

from pydantic import BaseModel, field_validator

from ..domain.errors import ConfigurationError


class Settings(BaseModel):
    """Typed portal settings built from environment variables."""

    payment_link_secret: str
    portal_base_url: str = "http://localhost:8000"
    # None keeps links valid until the secret rotates.
    payment_link_ttl_days: Optional[int] = None

    stripe_secret_key: str = ""
    stripe_api_base_url: str = "https://api.stripe.com"
    stripe_webhook_secret: str = ""

    sendgrid_api_key: str = ""
    sendgrid_api_base_url: str = "https://api.sendgrid.com"
    sendgrid_from_email: str = "noreply@payportal.local"

    api_host: str = "0.0.0.0"
    api_port: int = 8000
    api_debug: bool = False
    api_workers: int = 1
    api_cors_origins: list[str] = ["*"]

    app_name: str = "PayPortal"
    app_version: str = "1.0.0"

    @field_validator("payment_link_secret")
    @classmethod
    def validate_payment_link_secret(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("Payment link secret cannot be empty")
        return v

    @field_validator("portal_base_url", "stripe_api_base_url", "sendgrid_api_base_url")
    @classmethod
    def validate_base_url(cls, v: str) -> str:
        parsed = urlparse(v)
        if parsed.scheme not in {"http", "https"}:
            raise ValueError("Base URL must start with http:// or https://")
        if not parsed.netloc:
            raise ValueError("Base URL must include a host")
        return v.rstrip("/")

    @field_validator("payment_link_ttl_days")
    @classmethod
    def validate_ttl(cls, v: Optional[int]) -> Optional[int]:
        if v is not None and v <= 0:
            raise ValueError("Payment link TTL must be a positive number of days")
        return v


def get_settings() -> Settings:
    """Return settings sourced from env vars.

    Raises:
        ConfigurationError: if PAYMENT_LINK_SECRET is not set.
    """
    secret = os.environ.get("PAYMENT_LINK_SECRET")
    if not secret:
        raise ConfigurationError("PAYMENT_LINK_SECRET is required")

    ttl_str = os.environ.get("PAYMENT_LINK_TTL_DAYS")

    return Settings(
        payment_link_secret=secret,
        portal_base_url=os.environ.get("PORTAL_BASE_URL", "http://localhost:8000"),
        payment_link_ttl_days=int(ttl_str) if ttl_str else None,
        stripe_secret_key=os.environ.get("STRIPE_SECRET_KEY", ""),
        stripe_api_base_url=os.environ.get(
            "STRIPE_API_BASE_URL", "https://api.stripe.com"
        ),
        stripe_webhook_secret=os.environ.get("STRIPE_WEBHOOK_SECRET", ""),
        sendgrid_api_key=os.environ.get("SENDGRID_API_KEY", ""),
        sendgrid_api_base_url=os.environ.get(
            "SENDGRID_API_BASE_URL", "https://api.sendgrid.com"
        ),
        sendgrid_from_email=os.environ.get(
            "SENDGRID_FROM_EMAIL", "noreply@payportal.local"
        ),
        api_host=os.environ.get("PORTAL_API_HOST", "0.0.0.0"),
        api_port=int(os.environ.get("PORTAL_API_PORT", "8000")),
        api_debug=os.environ.get("PORTAL_API_DEBUG", "false").lower() == "true",
        api_workers=int(os.environ.get("PORTAL_API_WORKERS", "1")),
        api_cors_origins=os.environ.get("PORTAL_API_CORS_ORIGINS", "*").split(","),
        app_name=os.environ.get("PORTAL_APP_NAME", "PayPortal"),
        app_version=os.environ.get("PORTAL_APP_VERSION", "1.0.0"),
    )
