from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, Request, status

from ....application.dtos import WebhookAckDTO
from ....application.use_cases.webhooks import WebhookService
from ....domain.errors import WebhookSignatureError
from ..dependencies import get_webhook_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/webhooks", tags=["webhooks"])


@router.post(
    "/stripe",
    response_model=WebhookAckDTO,
    status_code=status.HTTP_200_OK,
)
async def stripe_webhook(
    request: Request,
    service: WebhookService = Depends(get_webhook_service),
) -> WebhookAckDTO:
    # Signature covers the exact raw bytes, so the body is not parsed first.
    payload = await request.body()
    try:
        return service.handle(payload, request.headers.get("stripe-signature"))
    except WebhookSignatureError as e:
        logger.warning("Webhook signature verification failed: %s", e)
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Webhook signature verification failed",
        )
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
