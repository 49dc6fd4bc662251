"""Use cases for building, verifying and emailing signed payment links."""

from __future__ import annotations

import logging
from datetime import date, timedelta
from typing import Callable, Optional

from ...crypto.payment_link import PaymentLinkCodec
from ...domain.entities import EmailMessage
from ...domain.errors import InvalidPaymentLinkError, MalformedPaymentLinkError
from ...domain.payment_link import PaymentLinkParameters
from ...domain.shared import EmailSenderProtocol
from ..dtos import (
    BuildPaymentLinkRequestDTO,
    EmailSentResponseDTO,
    PaymentLinkDetailsDTO,
    PaymentLinkResponseDTO,
    SendPaymentLinkEmailDTO,
)
from ..email_templates import payment_link_html, payment_link_subject, payment_link_text

logger = logging.getLogger(__name__)


def _details(params: PaymentLinkParameters) -> PaymentLinkDetailsDTO:
    return PaymentLinkDetailsDTO.model_validate(params.model_dump())


class PaymentLinkService:
    """Builds links on the operator side and verifies them on the customer side."""

    def __init__(
        self,
        codec: PaymentLinkCodec,
        base_url: str,
        *,
        ttl_days: Optional[int] = None,
        email_sender: Optional[EmailSenderProtocol] = None,
        portal_name: str = "PayPortal",
        today: Callable[[], date] = date.today,
    ) -> None:
        self.codec = codec
        self.base_url = base_url
        self.ttl_days = ttl_days
        self.email_sender = email_sender
        self.portal_name = portal_name
        self._today = today

    def build_link(self, dto: BuildPaymentLinkRequestDTO) -> PaymentLinkResponseDTO:
        expires_at = None
        if self.ttl_days:
            expires_at = (self._today() + timedelta(days=self.ttl_days)).isoformat()

        params = PaymentLinkParameters(
            cid=dto.customer_id,
            amt=dto.amount_in_minor_units(),
            currency=dto.currency,
            invoice_date=dto.invoice_date.isoformat(),
            invoice_desc=dto.invoice_description,
            expires_at=expires_at,
        )
        url = self.codec.build_url(params, self.base_url)
        logger.info("Built payment link for customer %s", params.cid)
        return PaymentLinkResponseDTO(
            url=url,
            signature=self.codec.sign(params),
            **params.model_dump(),
        )

    def verify_query(self, query: str) -> PaymentLinkParameters:
        """Return the link parameters if the query carries a genuine, unexpired link.

        Raises:
            InvalidPaymentLinkError: for any failure, with a generic message.
        """
        try:
            params, signature = self.codec.parse_query(query)
        except MalformedPaymentLinkError:
            logger.info("Rejected payment link: malformed query")
            raise InvalidPaymentLinkError()

        if not self.codec.verify(params, signature):
            logger.info("Rejected payment link: signature mismatch")
            raise InvalidPaymentLinkError()

        if params.expires_at is not None and self._is_expired(params.expires_at):
            logger.info("Rejected payment link: expired")
            raise InvalidPaymentLinkError()

        return params

    def verify_link(self, query: str) -> PaymentLinkDetailsDTO:
        return _details(self.verify_query(query))

    def _is_expired(self, expires_at: str) -> bool:
        try:
            expiry = date.fromisoformat(expires_at)
        except ValueError:
            return True
        return expiry < self._today()

    async def send_link_email(self, dto: SendPaymentLinkEmailDTO) -> EmailSentResponseDTO:
        if self.email_sender is None:
            raise RuntimeError("Email sender is not configured")

        fields = dict(
            customer_name=dto.customer_name,
            amount=dto.amount,
            currency=dto.currency,
            payment_url=dto.payment_url,
            invoice_description=dto.invoice_description,
            invoice_date=dto.invoice_date,
            business_name=dto.business_name,
            expires_at=dto.expires_at,
            portal_name=self.portal_name,
        )
        message = EmailMessage(
            to=dto.customer_email,
            subject=payment_link_subject(dto.amount, dto.currency),
            text=payment_link_text(**fields),
            html=payment_link_html(**fields),
        )
        await self.email_sender.send_email(message)
        logger.info("Payment link email sent to %s", dto.customer_email)
        return EmailSentResponseDTO(success=True, recipient=dto.customer_email)
