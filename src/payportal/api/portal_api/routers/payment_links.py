"""Payment link API routes (operator side)."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, status
from prometheus_client import Counter

from ....application.dtos import (
    BuildPaymentLinkRequestDTO,
    EmailSentResponseDTO,
    PaymentLinkDetailsDTO,
    PaymentLinkResponseDTO,
    SendPaymentLinkEmailDTO,
    VerifyPaymentLinkRequestDTO,
)
from ....application.use_cases.payment_link import PaymentLinkService
from ....domain.errors import EmailDeliveryError, InvalidPaymentLinkError
from ..dependencies import get_payment_link_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/payment-links", tags=["payment-links"])


payment_links_built_total = Counter(
    "payment_links_built_total",
    "Total signed payment links built",
)

payment_link_verifications_total = Counter(
    "payment_link_verifications_total",
    "Total payment link verifications",
    ["result"],
)


@router.post(
    "",
    response_model=PaymentLinkResponseDTO,
    status_code=status.HTTP_201_CREATED,
)
async def build_payment_link(
    payload: BuildPaymentLinkRequestDTO,
    service: PaymentLinkService = Depends(get_payment_link_service),
) -> PaymentLinkResponseDTO:
    result = service.build_link(payload)
    payment_links_built_total.inc()
    return result


@router.post(
    "/verify",
    response_model=PaymentLinkDetailsDTO,
    status_code=status.HTTP_200_OK,
)
async def verify_payment_link(
    payload: VerifyPaymentLinkRequestDTO,
    service: PaymentLinkService = Depends(get_payment_link_service),
) -> PaymentLinkDetailsDTO:
    try:
        result = service.verify_link(payload.query)
    except InvalidPaymentLinkError as e:
        payment_link_verifications_total.labels(result="rejected").inc()
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    payment_link_verifications_total.labels(result="accepted").inc()
    return result


@router.post(
    "/email",
    response_model=EmailSentResponseDTO,
    status_code=status.HTTP_200_OK,
)
async def send_payment_link_email(
    payload: SendPaymentLinkEmailDTO,
    service: PaymentLinkService = Depends(get_payment_link_service),
) -> EmailSentResponseDTO:
    try:
        return await service.send_link_email(payload)
    except EmailDeliveryError as e:
        logger.exception("Failed to send payment link email")
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=str(e))
