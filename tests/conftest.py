"""Shared pytest fixtures for payment link tests."""

from __future__ import annotations

import pytest

from payportal.crypto.payment_link import PaymentLinkCodec
from payportal.domain.payment_link import PaymentLinkParameters

TEST_SECRET = "test-secret"
BASE_URL = "https://pay.example.com"


@pytest.fixture
def secret() -> str:
    return TEST_SECRET


@pytest.fixture
def codec(secret: str) -> PaymentLinkCodec:
    return PaymentLinkCodec(secret)


@pytest.fixture
def base_url() -> str:
    return BASE_URL


@pytest.fixture
def retainer_params() -> PaymentLinkParameters:
    """The monthly retainer invoice used across codec scenarios."""
    return PaymentLinkParameters(
        cid="cus_ABC123",
        amt="99900",
        currency="usd",
        invoice_date="2025-10-01",
        invoice_desc="Monthly Retainer",
    )
