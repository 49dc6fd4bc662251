from __future__ import annotations

import json
import logging
from typing import Optional

from ...crypto.webhook_signature import DEFAULT_TOLERANCE_SECONDS, verify_webhook_signature
from ..dtos import WebhookAckDTO

logger = logging.getLogger(__name__)


class WebhookService:
    """Verifies and acknowledges Stripe webhook events.

    Stripe owns retries and the portal stores nothing, so events are only
    verified and logged.
    """

    def __init__(
        self, webhook_secret: str, tolerance: int = DEFAULT_TOLERANCE_SECONDS
    ) -> None:
        self.webhook_secret = webhook_secret
        self.tolerance = tolerance

    def handle(
        self, payload: bytes, signature_header: Optional[str], *, now: Optional[float] = None
    ) -> WebhookAckDTO:
        verify_webhook_signature(
            payload,
            signature_header,
            self.webhook_secret,
            tolerance=self.tolerance,
            now=now,
        )
        try:
            event = json.loads(payload.decode("utf-8"))
            event_type = event["type"]
            obj = event.get("data", {}).get("object", {})
        except (UnicodeDecodeError, json.JSONDecodeError, KeyError, TypeError, AttributeError) as e:
            raise ValueError("Invalid webhook payload") from e
        if not isinstance(obj, dict):
            obj = {}

        if event_type == "payment_intent.succeeded":
            logger.info(
                "PaymentIntent succeeded: %s (customer %s, amount %s)",
                obj.get("id"),
                obj.get("customer"),
                obj.get("amount"),
            )
        elif event_type == "payment_intent.payment_failed":
            error = obj.get("last_payment_error") or {}
            logger.warning(
                "PaymentIntent failed: %s (%s)", obj.get("id"), error.get("message")
            )
        else:
            logger.info("Unhandled event type: %s", event_type)

        return WebhookAckDTO(event_type=event_type)
