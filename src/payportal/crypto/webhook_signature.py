from __future__ import annotations

import time
from typing import Optional

from cryptography.hazmat.primitives import constant_time, hashes, hmac

from ..domain.errors import WebhookSignatureError

DEFAULT_TOLERANCE_SECONDS = 300


def parse_signature_header(header: str) -> tuple[int, list[str]]:
    """Split a `Stripe-Signature` header into its timestamp and v1 signatures."""
    timestamp: Optional[int] = None
    signatures: list[str] = []
    for item in header.split(","):
        key, sep, value = item.strip().partition("=")
        if not sep:
            continue
        if key == "t":
            try:
                timestamp = int(value)
            except ValueError as e:
                raise WebhookSignatureError("Invalid timestamp in signature header") from e
        elif key == "v1":
            signatures.append(value)
    if timestamp is None:
        raise WebhookSignatureError("No timestamp in signature header")
    if not signatures:
        raise WebhookSignatureError("No v1 signature in signature header")
    return timestamp, signatures


def compute_webhook_signature(secret: str, timestamp: int, payload: bytes) -> str:
    mac = hmac.HMAC(secret.encode("utf-8"), hashes.SHA256())
    mac.update(f"{timestamp}.".encode("utf-8") + payload)
    return mac.finalize().hex()


def verify_webhook_signature(
    payload: bytes,
    header: Optional[str],
    secret: str,
    *,
    tolerance: int = DEFAULT_TOLERANCE_SECONDS,
    now: Optional[float] = None,
) -> None:
    """Verify a Stripe webhook payload against its `Stripe-Signature` header.

    Raises:
        WebhookSignatureError: if the header is missing or malformed, no
            signature matches, or the timestamp is outside the tolerance.
    """
    if not secret:
        raise WebhookSignatureError("Webhook secret is not configured")
    if not header:
        raise WebhookSignatureError("Missing stripe-signature header")

    timestamp, signatures = parse_signature_header(header)
    expected = compute_webhook_signature(secret, timestamp, payload).encode("ascii")

    if not any(
        constant_time.bytes_eq(expected, candidate.encode("utf-8"))
        for candidate in signatures
    ):
        raise WebhookSignatureError("No signature matches the expected signature")

    current = time.time() if now is None else now
    if tolerance > 0 and abs(current - timestamp) > tolerance:
        raise WebhookSignatureError("Timestamp outside the tolerance zone")
