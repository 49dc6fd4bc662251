"""Customer-facing checkout: customer lookup and payment intent creation."""

from __future__ import annotations

import logging

from ...domain.errors import CustomerNotFoundError
from ...domain.shared import PaymentProviderFactory
from ..dtos import (
    CreatePaymentIntentRequestDTO,
    CustomerDTO,
    PayPageResponseDTO,
    PaymentIntentResponseDTO,
    PaymentStatusDTO,
    validate_customer_id,
    validate_payment_intent_id,
)
from ..fees import calculate_fee, parse_minor_units
from .payment_link import PaymentLinkService

logger = logging.getLogger(__name__)

REPORTABLE_STATUSES = (
    "succeeded",
    "processing",
    "requires_action",
    "requires_payment_method",
    "canceled",
    "failed",
)

CHARGE_STATUS_OVERRIDES = {
    "failed": "failed",
    "pending": "processing",
    "succeeded": "succeeded",
}


class CheckoutService:
    """Service turning a verified payment link into a provider payment intent."""

    def __init__(
        self,
        payment_link_service: PaymentLinkService,
        payment_provider_factory: PaymentProviderFactory,
    ) -> None:
        self.payment_link_service = payment_link_service
        self.payment_provider_factory = payment_provider_factory

    async def get_customer(self, customer_id: str) -> CustomerDTO:
        validate_customer_id(customer_id)
        async with self.payment_provider_factory() as provider:
            customer = await provider.retrieve_customer(customer_id)
        return CustomerDTO.model_validate(customer.model_dump())

    async def get_pay_page(self, query: str) -> PayPageResponseDTO:
        """Verify an incoming link and load the customer it is addressed to."""
        link = self.payment_link_service.verify_link(query)
        customer = await self.get_customer(link.cid)
        return PayPageResponseDTO(link=link, customer=customer)

    async def create_payment_intent(
        self, dto: CreatePaymentIntentRequestDTO
    ) -> PaymentIntentResponseDTO:
        # Amounts come from the signed link, never from the client directly.
        params = self.payment_link_service.verify_query(dto.link_query)
        validate_customer_id(params.cid)
        fees = calculate_fee(parse_minor_units(params.amt), dto.payment_method)
        currency = params.currency.lower()

        metadata = {
            "source": "payment_portal",
            "invoice_date": params.invoice_date,
            "invoice_description": params.invoice_desc,
            "payment_method": dto.payment_method.value,
            "base_amount": str(fees.base_amount),
            "processing_fee": str(fees.processing_fee),
        }
        async with self.payment_provider_factory() as provider:
            intent = await provider.create_payment_intent(
                customer_id=params.cid,
                amount=fees.total_amount,
                currency=currency,
                description=params.invoice_desc,
                metadata=metadata,
            )

        logger.info(
            "Payment intent %s created for %s (%s, total %d)",
            intent.id,
            params.cid,
            dto.payment_method.value,
            fees.total_amount,
        )
        return PaymentIntentResponseDTO(
            client_secret=intent.client_secret,
            payment_intent_id=intent.id,
            customer_id=params.cid,
            base_amount=fees.base_amount,
            processing_fee=fees.processing_fee,
            amount=fees.total_amount,
            currency=currency,
            payment_method=dto.payment_method,
        )

    async def get_payment_status(self, payment_intent_id: str) -> PaymentStatusDTO:
        """Report the outcome of a payment for the success page.

        Bank debits stay `processing` at the intent level while their charge
        is pending, so the latest charge status takes precedence.
        """
        validate_payment_intent_id(payment_intent_id)
        async with self.payment_provider_factory() as provider:
            intent = await provider.retrieve_payment_intent(payment_intent_id)
            if intent.status not in REPORTABLE_STATUSES:
                raise ValueError(
                    f"Payment intent status is {intent.status}. "
                    f"Expected: {', '.join(REPORTABLE_STATUSES)}"
                )
            customer = None
            if intent.customer:
                try:
                    customer = await provider.retrieve_customer(intent.customer)
                except CustomerNotFoundError:
                    logger.info("Customer of payment %s no longer exists", intent.id)

        charge = intent.latest_charge
        status = intent.status
        failure_code = failure_message = receipt_url = None
        if charge is not None:
            status = CHARGE_STATUS_OVERRIDES.get(charge.status, status)
            receipt_url = charge.receipt_url
            if charge.status == "failed":
                failure_code = charge.failure_code
                failure_message = charge.failure_message

        return PaymentStatusDTO(
            payment_intent_id=intent.id,
            amount=intent.amount,
            currency=intent.currency,
            status=status,
            failure_code=failure_code,
            failure_message=failure_message,
            customer_email=customer.email if customer else None,
            customer_name=customer.name if customer else None,
            description=intent.description or "Payment",
            receipt_url=receipt_url,
            created=intent.created,
        )
