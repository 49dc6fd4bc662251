"""Data Transfer Objects for the portal application layer."""

from __future__ import annotations

import re
from datetime import date
from decimal import Decimal, InvalidOperation
from typing import Optional

from pydantic import BaseModel, field_validator

from .fees import PaymentMethod, parse_minor_units

CUSTOMER_ID_PREFIX = "cus_"
PAYMENT_INTENT_ID_PREFIX = "pi_"

_CURRENCY_RE = re.compile(r"^[a-z]{3}$")
_EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


def validate_customer_id(v: str) -> str:
    if not v or not v.strip():
        raise ValueError("Customer ID is required")
    if not v.startswith(CUSTOMER_ID_PREFIX):
        raise ValueError(f'Customer ID must start with "{CUSTOMER_ID_PREFIX}"')
    return v


def validate_payment_intent_id(v: str) -> str:
    if not v or not v.strip():
        raise ValueError("payment_intent_id is required")
    if not v.startswith(PAYMENT_INTENT_ID_PREFIX):
        raise ValueError(
            f'Payment intent ID must start with "{PAYMENT_INTENT_ID_PREFIX}"'
        )
    return v


# Payment link DTOs
class BuildPaymentLinkRequestDTO(BaseModel):
    """Operator input for a new payment link. `amount` is in major units ("999.00")."""

    customer_id: str
    amount: str
    currency: str = "usd"
    invoice_date: date
    invoice_description: str

    @field_validator("customer_id")
    @classmethod
    def validate_customer_id(cls, v: str) -> str:
        return validate_customer_id(v.strip())

    @field_validator("amount")
    @classmethod
    def validate_amount(cls, v: str) -> str:
        try:
            value = Decimal(v.strip())
        except InvalidOperation as e:
            raise ValueError("Amount must be a positive number") from e
        if not value.is_finite() or value <= 0:
            raise ValueError("Amount must be a positive number")
        if value.as_tuple().exponent < -2:
            raise ValueError("Amount cannot have more than two decimal places")
        return v.strip()

    @field_validator("currency")
    @classmethod
    def validate_currency(cls, v: str) -> str:
        v = v.strip().lower()
        if not _CURRENCY_RE.match(v):
            raise ValueError("Currency must be a three letter ISO 4217 code")
        return v

    @field_validator("invoice_description")
    @classmethod
    def validate_invoice_description(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Invoice Description is required")
        return v

    def amount_in_minor_units(self) -> str:
        return str(int(Decimal(self.amount) * 100))


class PaymentLinkDetailsDTO(BaseModel):
    """Decoded, verified payment link parameters."""

    cid: str
    amt: str
    currency: str
    invoice_date: str
    invoice_desc: str
    expires_at: Optional[str] = None


class PaymentLinkResponseDTO(PaymentLinkDetailsDTO):
    url: str
    signature: str


class VerifyPaymentLinkRequestDTO(BaseModel):
    """Raw query string of an incoming payment link, with or without `?`."""

    query: str


class SendPaymentLinkEmailDTO(BaseModel):
    customer_email: str
    customer_name: str
    business_name: Optional[str] = None
    amount: str
    currency: str
    payment_url: str
    invoice_description: str
    invoice_date: date
    expires_at: Optional[date] = None

    @field_validator("customer_email")
    @classmethod
    def validate_customer_email(cls, v: str) -> str:
        v = v.strip()
        if not _EMAIL_RE.match(v):
            raise ValueError("Invalid customer email address")
        return v

    @field_validator("customer_name", "amount", "currency", "payment_url", "invoice_description")
    @classmethod
    def validate_required(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("Missing required field")
        return v

    @field_validator("amount")
    @classmethod
    def validate_minor_units(cls, v: str) -> str:
        parse_minor_units(v)
        return v


class EmailSentResponseDTO(BaseModel):
    success: bool
    recipient: str


# Customer / checkout DTOs
class CustomerDTO(BaseModel):
    id: str
    email: Optional[str] = None
    name: Optional[str] = None
    business_name: Optional[str] = None
    phone: Optional[str] = None
    created: Optional[int] = None
    metadata: dict[str, str] = {}


class CustomerListDTO(BaseModel):
    customers: list[CustomerDTO]
    total: int
    has_more: Optional[bool] = None


class PayPageResponseDTO(BaseModel):
    """Everything the customer-facing pay page needs after verification."""

    link: PaymentLinkDetailsDTO
    customer: CustomerDTO


class CreatePaymentIntentRequestDTO(BaseModel):
    """The pay page re-submits the signed link so the amount cannot be altered."""

    link_query: str
    payment_method: PaymentMethod


class PaymentIntentResponseDTO(BaseModel):
    client_secret: str
    payment_intent_id: str
    customer_id: str
    base_amount: int
    processing_fee: int
    amount: int
    currency: str
    payment_method: PaymentMethod


class PaymentStatusDTO(BaseModel):
    """Outcome of a payment as shown on the success page."""

    payment_intent_id: str
    amount: int
    currency: str
    status: str
    failure_code: Optional[str] = None
    failure_message: Optional[str] = None
    customer_email: Optional[str] = None
    customer_name: Optional[str] = None
    description: str = "Payment"
    receipt_url: Optional[str] = None
    created: Optional[int] = None


class WebhookAckDTO(BaseModel):
    received: bool = True
    event_type: str
