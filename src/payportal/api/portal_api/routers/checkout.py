"""Customer-facing checkout routes."""

from __future__ import annotations

import logging
import time

from fastapi import APIRouter, Depends, HTTPException, Path, Request, status
from prometheus_client import Counter, Histogram

from ....application.dtos import (
    CreatePaymentIntentRequestDTO,
    CustomerDTO,
    PayPageResponseDTO,
    PaymentIntentResponseDTO,
    PaymentStatusDTO,
)
from ....application.use_cases.checkout import CheckoutService
from ....domain.errors import (
    CustomerNotFoundError,
    InvalidPaymentLinkError,
    PaymentNotFoundError,
    PaymentProviderError,
)
from ..dependencies import get_checkout_service

logger = logging.getLogger(__name__)

# Mounted at the root so links resolve as {base_url}/pay?...
pay_router = APIRouter(tags=["checkout"])
router = APIRouter(tags=["checkout"])


payment_intent_requests_total = Counter(
    "payment_intent_requests_total",
    "Total payment intent creation requests",
    ["status"],
)

payment_intent_request_duration_seconds = Histogram(
    "payment_intent_request_duration_seconds",
    "Wall time to create a payment intent",
    ["status"],
)


@pay_router.get(
    "/pay",
    response_model=PayPageResponseDTO,
    status_code=status.HTTP_200_OK,
)
async def open_payment_link(
    request: Request,
    service: CheckoutService = Depends(get_checkout_service),
) -> PayPageResponseDTO:
    """Verify the signed link in the raw query string and load its customer."""
    try:
        return await service.get_pay_page(request.url.query)
    except InvalidPaymentLinkError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except CustomerNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    except PaymentProviderError:
        logger.exception("Failed to load customer for payment link")
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail="Failed to fetch customer details",
        )


@router.get(
    "/customers/{customer_id}",
    response_model=CustomerDTO,
    status_code=status.HTTP_200_OK,
)
async def get_customer(
    customer_id: str = Path(..., description="Payment provider customer id"),
    service: CheckoutService = Depends(get_checkout_service),
) -> CustomerDTO:
    try:
        return await service.get_customer(customer_id)
    except CustomerNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except PaymentProviderError:
        logger.exception("Failed to fetch customer %s", customer_id)
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail="Failed to fetch customer details",
        )


@router.post(
    "/payment-intents",
    response_model=PaymentIntentResponseDTO,
    status_code=status.HTTP_201_CREATED,
)
async def create_payment_intent(
    payload: CreatePaymentIntentRequestDTO,
    service: CheckoutService = Depends(get_checkout_service),
) -> PaymentIntentResponseDTO:
    start_time = time.perf_counter()
    try:
        result = await service.create_payment_intent(payload)
        _observe("success", start_time)
        return result
    except CustomerNotFoundError as e:
        _observe("client_error", start_time)
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    except ValueError as e:
        # Includes InvalidPaymentLinkError, whose message is generic.
        _observe("client_error", start_time)
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except PaymentProviderError as e:
        _observe("provider_error", start_time)
        logger.exception("Payment provider rejected payment intent")
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=str(e))


@router.get(
    "/payments/{payment_intent_id}",
    response_model=PaymentStatusDTO,
    status_code=status.HTTP_200_OK,
)
async def get_payment_status(
    payment_intent_id: str = Path(..., description="Payment provider intent id"),
    service: CheckoutService = Depends(get_checkout_service),
) -> PaymentStatusDTO:
    try:
        return await service.get_payment_status(payment_intent_id)
    except PaymentNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except PaymentProviderError:
        logger.exception("Failed to fetch payment %s", payment_intent_id)
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail="Failed to fetch payment",
        )


def _observe(status_label: str, start_time: float) -> None:
    payment_intent_requests_total.labels(status=status_label).inc()
    payment_intent_request_duration_seconds.labels(status=status_label).observe(
        time.perf_counter() - start_time
    )
