"""Domain entities for the external collaborators the portal talks to."""

from __future__ import annotations

from typing import Any, Optional

from pydantic import BaseModel, field_validator


class Customer(BaseModel):
    """Customer as held by the payment provider."""

    id: str
    email: Optional[str] = None
    name: Optional[str] = None
    business_name: Optional[str] = None
    phone: Optional[str] = None
    created: Optional[int] = None
    metadata: dict[str, str] = {}
    deleted: bool = False


class CustomerPage(BaseModel):
    customers: list[Customer] = []
    has_more: bool = False


class Charge(BaseModel):
    """The latest charge attempt behind a payment intent."""

    id: str
    status: str
    receipt_url: Optional[str] = None
    failure_code: Optional[str] = None
    failure_message: Optional[str] = None


class PaymentIntent(BaseModel):
    id: str
    client_secret: Optional[str] = None
    amount: int
    currency: str
    customer: Optional[str] = None
    status: Optional[str] = None
    description: Optional[str] = None
    created: Optional[int] = None
    latest_charge: Optional[Charge] = None

    @field_validator("latest_charge", mode="before")
    @classmethod
    def drop_unexpanded_charge(cls, v: Any) -> Any:
        # Without `expand[]=latest_charge` Stripe sends only the charge id.
        if isinstance(v, str):
            return None
        return v


class EmailMessage(BaseModel):
    to: str
    subject: str
    text: str = ""
    html: str = ""
    from_email: Optional[str] = None
