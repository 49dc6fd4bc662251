"""Pure processing-fee rules for the two supported payment methods.

All amounts are integers in minor units (e.g. cents).
"""

from __future__ import annotations

import re
from decimal import ROUND_HALF_UP, Decimal
from enum import Enum

from pydantic import BaseModel

CARD_FEE_RATE = Decimal("0.03")
ACH_FEE_RATE = Decimal("0.008")
ACH_FEE_CAP = 500

_DIGITS_RE = re.compile(r"[0-9]+")


class PaymentMethod(str, Enum):
    CARD = "card"
    BANK = "bank"


class FeeBreakdown(BaseModel):
    base_amount: int
    processing_fee: int
    total_amount: int


def _percent_of(amount: int, rate: Decimal) -> int:
    return int((Decimal(amount) * rate).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def parse_minor_units(amt: str) -> int:
    """Parse a signed `amt` value. Raises ValueError unless it is a positive integer."""
    if not _DIGITS_RE.fullmatch(amt):
        raise ValueError(f"Amount must be a positive integer in minor units, got {amt!r}")
    value = int(amt)
    if value <= 0:
        raise ValueError("Amount must be greater than zero")
    return value


def card_fee(base_amount: int) -> FeeBreakdown:
    """3% card processing fee."""
    fee = _percent_of(base_amount, CARD_FEE_RATE)
    return FeeBreakdown(
        base_amount=base_amount, processing_fee=fee, total_amount=base_amount + fee
    )


def ach_fee(base_amount: int) -> FeeBreakdown:
    """0.8% bank transfer fee, capped at ACH_FEE_CAP."""
    fee = min(_percent_of(base_amount, ACH_FEE_RATE), ACH_FEE_CAP)
    return FeeBreakdown(
        base_amount=base_amount, processing_fee=fee, total_amount=base_amount + fee
    )


def calculate_fee(base_amount: int, method: PaymentMethod) -> FeeBreakdown:
    if method is PaymentMethod.CARD:
        return card_fee(base_amount)
    return ach_fee(base_amount)
