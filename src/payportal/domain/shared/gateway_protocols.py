"""Protocol interfaces for the payment provider and email gateway.

Services accept any implementation satisfying these protocols, so tests can
inject in-memory fakes instead of calling Stripe or SendGrid.
"""

from __future__ import annotations

from types import TracebackType
from typing import Callable, Optional, Protocol, Type

from ..entities import Customer, CustomerPage, EmailMessage, PaymentIntent


class PaymentProviderProtocol(Protocol):
    """Contract for the payment provider (Stripe in production)."""

    async def retrieve_customer(self, customer_id: str) -> Customer:
        """Fetch a customer.

        Raises:
            CustomerNotFoundError: if the provider does not know the customer.
            PaymentProviderError: on any other provider failure.
        """
        ...

    async def create_payment_intent(
        self,
        *,
        customer_id: str,
        amount: int,
        currency: str,
        description: str,
        metadata: dict[str, str],
    ) -> PaymentIntent:
        """Create a payment intent with automatic payment methods enabled."""
        ...

    async def retrieve_payment_intent(self, payment_intent_id: str) -> PaymentIntent:
        """Fetch a payment intent with its latest charge expanded.

        Raises:
            PaymentNotFoundError: if the provider does not know the intent.
            PaymentProviderError: on any other provider failure.
        """
        ...

    async def search_customers(self, query: str, *, limit: int = 10) -> list[Customer]:
        """Customers whose email or name matches `query` exactly."""
        ...

    async def list_customers(self, *, limit: int = 100) -> CustomerPage:
        ...

    async def aclose(self) -> None:
        ...

    async def __aenter__(self: "PaymentProviderProtocol") -> "PaymentProviderProtocol":
        ...

    async def __aexit__(
        self,
        exc_type: Optional[Type[BaseException]],
        exc_val: Optional[BaseException],
        exc_tb: Optional[TracebackType],
    ) -> None:
        ...


class EmailSenderProtocol(Protocol):
    """Contract for the transactional email gateway (SendGrid in production)."""

    async def send_email(self, message: EmailMessage) -> None:
        """Deliver a message.

        Raises:
            EmailDeliveryError: if the gateway rejects the message.
        """
        ...


# Creates a fresh provider client per use, closed via `async with`.
PaymentProviderFactory = Callable[[], PaymentProviderProtocol]
