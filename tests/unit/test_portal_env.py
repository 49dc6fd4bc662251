"""Tests for environment-driven portal settings."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from payportal.domain.errors import ConfigurationError
from payportal.envs.portal_env import Settings, get_settings


@pytest.fixture
def clean_env(monkeypatch: pytest.MonkeyPatch) -> pytest.MonkeyPatch:
    for name in (
        "PAYMENT_LINK_SECRET",
        "PAYMENT_LINK_TTL_DAYS",
        "PORTAL_BASE_URL",
        "PORTAL_API_PORT",
        "PORTAL_API_DEBUG",
        "PORTAL_API_CORS_ORIGINS",
    ):
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


def test_missing_secret_is_a_configuration_error(clean_env: pytest.MonkeyPatch) -> None:
    with pytest.raises(ConfigurationError):
        get_settings()


def test_empty_secret_is_a_configuration_error(clean_env: pytest.MonkeyPatch) -> None:
    clean_env.setenv("PAYMENT_LINK_SECRET", "")
    with pytest.raises(ConfigurationError):
        get_settings()


def test_whitespace_secret_is_rejected() -> None:
    with pytest.raises(ValidationError):
        Settings(payment_link_secret="   ")


def test_settings_from_env(clean_env: pytest.MonkeyPatch) -> None:
    clean_env.setenv("PAYMENT_LINK_SECRET", "s3cret")
    clean_env.setenv("PAYMENT_LINK_TTL_DAYS", "30")
    clean_env.setenv("PORTAL_BASE_URL", "https://pay.example.com/")
    clean_env.setenv("PORTAL_API_PORT", "9000")
    clean_env.setenv("PORTAL_API_DEBUG", "TRUE")
    clean_env.setenv("PORTAL_API_CORS_ORIGINS", "https://a.example,https://b.example")

    settings = get_settings()

    assert settings.payment_link_secret == "s3cret"
    assert settings.payment_link_ttl_days == 30
    assert settings.portal_base_url == "https://pay.example.com"
    assert settings.api_port == 9000
    assert settings.api_debug is True
    assert settings.api_cors_origins == ["https://a.example", "https://b.example"]


def test_defaults_keep_links_valid_indefinitely(clean_env: pytest.MonkeyPatch) -> None:
    clean_env.setenv("PAYMENT_LINK_SECRET", "s3cret")
    assert get_settings().payment_link_ttl_days is None


@pytest.mark.parametrize("ttl", [0, -1])
def test_non_positive_ttl_is_rejected(ttl: int) -> None:
    with pytest.raises(ValidationError):
        Settings(payment_link_secret="s3cret", payment_link_ttl_days=ttl)


@pytest.mark.parametrize("url", ["pay.example.com", "ftp://pay.example.com", "https://"])
def test_invalid_base_url_is_rejected(url: str) -> None:
    with pytest.raises(ValidationError):
        Settings(payment_link_secret="s3cret", portal_base_url=url)
