"""HMAC-SHA256 signed payment links.

A payment link carries the payment parameters in its query string together
with a signature over their canonical form:

    {base_url}/pay?cid=..&amt=..&currency=..&invoiceDate=..&invoiceDesc=..&sig=..

The canonical message is the form-urlencoding of the fields in a fixed order,
so it has exactly one decoding and is independent of how a web framework
re-orders or re-parses the query string.
"""

from __future__ import annotations

import re
from typing import Optional
from urllib.parse import parse_qs, urlencode, urlsplit

from cryptography.exceptions import InvalidSignature
from cryptography.hazmat.primitives import hashes, hmac

from ..domain.errors import ConfigurationError, MalformedPaymentLinkError
from ..domain.payment_link import PaymentLinkParameters

PAY_PATH = "/pay"
SIGNATURE_FIELD = "sig"
EXPIRY_FIELD = "exp"

# (wire name, attribute name); the order is part of the canonical message.
SIGNED_FIELDS: tuple[tuple[str, str], ...] = (
    ("cid", "cid"),
    ("amt", "amt"),
    ("currency", "currency"),
    ("invoiceDate", "invoice_date"),
    ("invoiceDesc", "invoice_desc"),
)

_SIGNATURE_RE = re.compile(r"[0-9a-f]{64}")


def link_fields(params: PaymentLinkParameters) -> list[tuple[str, str]]:
    """Return the signed (wire name, value) pairs in canonical order."""
    fields = [(wire, getattr(params, attr)) for wire, attr in SIGNED_FIELDS]
    if params.expires_at is not None:
        fields.append((EXPIRY_FIELD, params.expires_at))
    return fields


def canonical_message(params: PaymentLinkParameters) -> str:
    """Encode the parameters exactly once as `key=value` pairs joined by `&`."""
    return urlencode(link_fields(params))


class PaymentLinkCodec:
    """Signs, verifies and serializes payment links with a shared secret."""

    def __init__(self, secret: str) -> None:
        if not secret:
            raise ConfigurationError("Payment link secret must not be empty")
        self._key = secret.encode("utf-8")

    def _mac(self, params: PaymentLinkParameters) -> hmac.HMAC:
        mac = hmac.HMAC(self._key, hashes.SHA256())
        mac.update(canonical_message(params).encode("utf-8"))
        return mac

    def sign(self, params: PaymentLinkParameters) -> str:
        """Return the lowercase hex HMAC-SHA256 signature of `params`."""
        return self._mac(params).finalize().hex()

    def verify(self, params: PaymentLinkParameters, signature: str) -> bool:
        """Return True only if `signature` is exactly the signature of `params`."""
        if not isinstance(signature, str) or not _SIGNATURE_RE.fullmatch(signature):
            return False
        try:
            self._mac(params).verify(bytes.fromhex(signature))
        except InvalidSignature:
            return False
        return True

    def build_url(self, params: PaymentLinkParameters, base_url: str) -> str:
        """Build `{base_url}/pay?...&sig=...` using the signing encoding."""
        query = urlencode(link_fields(params) + [(SIGNATURE_FIELD, self.sign(params))])
        return f"{base_url.rstrip('/')}{PAY_PATH}?{query}"

    def parse_query(self, query: str) -> tuple[PaymentLinkParameters, str]:
        """Decode a raw query string into parameters and the supplied signature.

        Raises:
            MalformedPaymentLinkError: if a required field is missing or repeated.
        """
        values = parse_qs(query.removeprefix("?"), keep_blank_values=True)
        return self.parse_fields(
            {key: items[0] if len(items) == 1 else items for key, items in values.items()}
        )

    def parse_fields(self, fields: dict) -> tuple[PaymentLinkParameters, str]:
        """Build parameters from already-decoded query fields."""
        decoded: dict[str, Optional[str]] = {}
        for wire, attr in SIGNED_FIELDS:
            decoded[attr] = _single(fields, wire, required=True)
        decoded["expires_at"] = _single(fields, EXPIRY_FIELD, required=False)
        signature = _single(fields, SIGNATURE_FIELD, required=True)
        return PaymentLinkParameters(**decoded), signature

    def parse_url(self, url: str) -> tuple[PaymentLinkParameters, str]:
        """Decode the query string of a complete payment URL."""
        return self.parse_query(urlsplit(url).query)

    def verify_url(self, url: str) -> bool:
        """Verify a complete payment URL; malformed links are simply invalid."""
        try:
            params, signature = self.parse_url(url)
        except MalformedPaymentLinkError:
            return False
        return self.verify(params, signature)


def _single(fields: dict, name: str, *, required: bool) -> Optional[str]:
    value = fields.get(name)
    if value is None:
        if required:
            raise MalformedPaymentLinkError(f"Missing required parameter: {name}")
        return None
    if not isinstance(value, str):
        raise MalformedPaymentLinkError(f"Parameter given more than once: {name}")
    return value
