"""Use case tests for PaymentLinkService."""

from __future__ import annotations

from datetime import date, timedelta
from urllib.parse import urlsplit

import pytest

from payportal.application.dtos import BuildPaymentLinkRequestDTO, SendPaymentLinkEmailDTO
from payportal.application.use_cases.payment_link import PaymentLinkService
from payportal.crypto.payment_link import PaymentLinkCodec
from payportal.domain.errors import (
    INVALID_LINK_MESSAGE,
    EmailDeliveryError,
    InvalidPaymentLinkError,
)
from payportal.domain.payment_link import PaymentLinkParameters
from tests.fixtures import InMemoryEmailSender

TODAY = date(2025, 10, 1)


def _request(**overrides) -> BuildPaymentLinkRequestDTO:
    data = dict(
        customer_id="cus_ABC123",
        amount="999.00",
        currency="usd",
        invoice_date="2025-10-01",
        invoice_description="Invoice #5 & Co.",
    )
    data.update(overrides)
    return BuildPaymentLinkRequestDTO(**data)


def _query(url: str) -> str:
    return urlsplit(url).query


def test_build_link_signs_minor_units(
    payment_link_service: PaymentLinkService, codec: PaymentLinkCodec
) -> None:
    result = payment_link_service.build_link(_request())

    assert result.url.startswith("https://pay.example.com/pay?cid=cus_ABC123&amt=99900&")
    assert result.amt == "99900"
    assert result.invoice_desc == "Invoice #5 & Co."
    assert result.expires_at is None
    assert codec.verify_url(result.url)
    assert result.url.endswith(f"&sig={result.signature}")


def test_built_link_verifies(payment_link_service: PaymentLinkService) -> None:
    result = payment_link_service.build_link(_request())

    details = payment_link_service.verify_link(_query(result.url))

    assert details.cid == "cus_ABC123"
    assert details.amt == "99900"
    assert details.invoice_desc == "Invoice #5 & Co."


def test_tampered_link_is_rejected_with_generic_message(
    payment_link_service: PaymentLinkService,
) -> None:
    query = _query(payment_link_service.build_link(_request()).url)

    with pytest.raises(InvalidPaymentLinkError) as exc_info:
        payment_link_service.verify_link(query.replace("amt=99900", "amt=1"))

    assert str(exc_info.value) == INVALID_LINK_MESSAGE


def test_malformed_link_is_rejected_with_generic_message(
    payment_link_service: PaymentLinkService,
) -> None:
    with pytest.raises(InvalidPaymentLinkError, match="Invalid or tampered"):
        payment_link_service.verify_link("cid=cus_ABC123&amt=99900")


def test_ttl_adds_signed_expiry(codec: PaymentLinkCodec, base_url: str) -> None:
    service = PaymentLinkService(codec, base_url, ttl_days=30, today=lambda: TODAY)

    result = service.build_link(_request())

    assert result.expires_at == (TODAY + timedelta(days=30)).isoformat()
    assert "&exp=2025-10-31&" in result.url
    assert service.verify_link(_query(result.url)).expires_at == "2025-10-31"


def test_link_is_valid_on_expiry_day_and_rejected_after(
    codec: PaymentLinkCodec, base_url: str
) -> None:
    builder = PaymentLinkService(codec, base_url, ttl_days=1, today=lambda: TODAY)
    query = _query(builder.build_link(_request()).url)

    on_expiry = PaymentLinkService(
        codec, base_url, today=lambda: TODAY + timedelta(days=1)
    )
    after_expiry = PaymentLinkService(
        codec, base_url, today=lambda: TODAY + timedelta(days=2)
    )

    assert on_expiry.verify_link(query).cid == "cus_ABC123"
    with pytest.raises(InvalidPaymentLinkError):
        after_expiry.verify_link(query)


def test_stripping_expiry_invalidates_the_link(
    codec: PaymentLinkCodec, base_url: str
) -> None:
    service = PaymentLinkService(codec, base_url, ttl_days=1, today=lambda: TODAY)
    query = _query(service.build_link(_request()).url)
    stripped = "&".join(p for p in query.split("&") if not p.startswith("exp="))

    with pytest.raises(InvalidPaymentLinkError):
        service.verify_link(stripped)


def test_unparseable_signed_expiry_is_treated_as_expired(
    codec: PaymentLinkCodec, base_url: str
) -> None:
    params = PaymentLinkParameters(
        cid="cus_ABC123",
        amt="100",
        currency="usd",
        invoice_date="2025-10-01",
        invoice_desc="x",
        expires_at="someday",
    )
    service = PaymentLinkService(codec, base_url, today=lambda: TODAY)

    with pytest.raises(InvalidPaymentLinkError):
        service.verify_link(_query(codec.build_url(params, base_url)))


@pytest.mark.asyncio
async def test_send_link_email_uses_url_verbatim(
    payment_link_service: PaymentLinkService, email_sender: InMemoryEmailSender
) -> None:
    url = payment_link_service.build_link(_request()).url
    dto = SendPaymentLinkEmailDTO(
        customer_email="ada@example.com",
        customer_name="Ada",
        business_name="Acme",
        amount="99900",
        currency="usd",
        payment_url=url,
        invoice_description="Invoice #5 & Co.",
        invoice_date=date(2025, 10, 1),
    )

    result = await payment_link_service.send_link_email(dto)

    assert result.success is True
    assert result.recipient == "ada@example.com"
    assert len(email_sender.sent) == 1
    message = email_sender.sent[0]
    assert message.to == "ada@example.com"
    assert message.subject == "Payment Request - $999.00"
    assert url in message.text
    assert "Business: Acme" in message.text


@pytest.mark.asyncio
async def test_send_link_email_propagates_delivery_errors(
    codec: PaymentLinkCodec, base_url: str
) -> None:
    service = PaymentLinkService(
        codec, base_url, email_sender=InMemoryEmailSender(fail=True)
    )
    dto = SendPaymentLinkEmailDTO(
        customer_email="ada@example.com",
        customer_name="Ada",
        amount="100",
        currency="usd",
        payment_url="https://pay.example.com/pay",
        invoice_description="x",
        invoice_date=date(2025, 10, 1),
    )

    with pytest.raises(EmailDeliveryError):
        await service.send_link_email(dto)
