from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict


class PaymentLinkParameters(BaseModel):
    """The payload bound by a payment link signature.

    Every value is kept as the raw string the operator entered. Format rules
    (customer prefix, positive amount) are enforced by the callers, not here.
    """

    model_config = ConfigDict(frozen=True)

    cid: str
    amt: str
    currency: str
    invoice_date: str
    invoice_desc: str
    expires_at: Optional[str] = None
