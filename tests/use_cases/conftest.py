"""Pytest fixtures for use case tests."""

from __future__ import annotations

from datetime import date

import pytest

from payportal.application.use_cases.checkout import CheckoutService
from payportal.application.use_cases.customers import CustomerDirectoryService
from payportal.application.use_cases.payment_link import PaymentLinkService
from payportal.crypto.payment_link import PaymentLinkCodec
from payportal.domain.entities import Customer
from tests.fixtures import InMemoryEmailSender, InMemoryPaymentProvider

TODAY = date(2025, 10, 1)


@pytest.fixture
def email_sender() -> InMemoryEmailSender:
    return InMemoryEmailSender()


@pytest.fixture
def payment_provider() -> InMemoryPaymentProvider:
    provider = InMemoryPaymentProvider()
    provider.add_customer(
        Customer(
            id="cus_ABC123",
            email="ada@example.com",
            name="Ada Lovelace",
            created=1_700_000_000,
            metadata={"tier": "gold"},
        )
    )
    return provider


@pytest.fixture
def payment_link_service(
    codec: PaymentLinkCodec, base_url: str, email_sender: InMemoryEmailSender
) -> PaymentLinkService:
    return PaymentLinkService(
        codec, base_url, email_sender=email_sender, today=lambda: TODAY
    )


@pytest.fixture
def checkout_service(
    payment_link_service: PaymentLinkService,
    payment_provider: InMemoryPaymentProvider,
) -> CheckoutService:
    return CheckoutService(payment_link_service, lambda: payment_provider)


@pytest.fixture
def customer_directory_service(
    payment_provider: InMemoryPaymentProvider,
) -> CustomerDirectoryService:
    return CustomerDirectoryService(lambda: payment_provider)
