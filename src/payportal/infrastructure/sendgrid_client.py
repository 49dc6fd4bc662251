from __future__ import annotations

import logging
from typing import Any, Optional

import httpx

from ..domain.entities import EmailMessage
from ..domain.errors import EmailDeliveryError
from .http.http_client import AsyncHttpClient

logger = logging.getLogger(__name__)


def build_mail_payload(message: EmailMessage, default_from: str) -> dict[str, Any]:
    """Translate an EmailMessage into a SendGrid v3 `mail/send` body."""
    content = []
    if message.text:
        content.append({"type": "text/plain", "value": message.text})
    if message.html:
        content.append({"type": "text/html", "value": message.html})
    return {
        "personalizations": [{"to": [{"email": message.to}]}],
        "from": {"email": message.from_email or default_from},
        "subject": message.subject,
        "content": content,
    }


class AsyncSendGridClient:
    """Sends transactional email through the SendGrid v3 API."""

    def __init__(
        self,
        api_key: str,
        from_email: str,
        base_url: str = "https://api.sendgrid.com",
        timeout: float = 10.0,
        *,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self._api_key = api_key
        self._from_email = from_email
        self._base_url = base_url
        self._timeout = timeout
        self._transport = transport

    async def send_email(self, message: EmailMessage) -> None:
        if not self._api_key:
            raise EmailDeliveryError("SendGrid is not configured")

        payload = build_mail_payload(message, self._from_email)
        logger.info("Sending email to %s: %s", message.to, message.subject)
        try:
            async with AsyncHttpClient(
                self._base_url,
                timeout=self._timeout,
                headers={"Authorization": f"Bearer {self._api_key}"},
                transport=self._transport,
            ) as http:
                await http.post("/v3/mail/send", json=payload)
        except httpx.HTTPStatusError as e:
            logger.error(
                "SendGrid rejected email to %s (%s): %s",
                message.to,
                e.response.status_code,
                e.response.text,
            )
            raise EmailDeliveryError("Failed to send email") from e
        except httpx.RequestError as e:
            raise EmailDeliveryError(f"Could not reach SendGrid: {e}") from e
