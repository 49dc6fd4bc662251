from __future__ import annotations

import logging
from typing import Any, Optional, Type
from types import TracebackType

import httpx

from ..domain.entities import Customer, CustomerPage, PaymentIntent
from ..domain.errors import (
    CustomerNotFoundError,
    PaymentNotFoundError,
    PaymentProviderError,
)
from .http.http_client import AsyncHttpClient

logger = logging.getLogger(__name__)

STRIPE_API_VERSION = "2025-09-30.clover"


def _error_message(exc: httpx.HTTPStatusError) -> str:
    try:
        return exc.response.json()["error"]["message"]
    except Exception:
        return exc.response.text or str(exc)


def flatten_form(data: dict[str, Any], prefix: str = "") -> dict[str, str]:
    """Flatten nested dicts into Stripe's bracketed form keys (`metadata[key]`)."""
    flat: dict[str, str] = {}
    for key, value in data.items():
        name = f"{prefix}[{key}]" if prefix else key
        if isinstance(value, dict):
            flat.update(flatten_form(value, name))
        elif isinstance(value, bool):
            flat[name] = "true" if value else "false"
        elif value is not None:
            flat[name] = str(value)
    return flat


def customer_search_query(term: str) -> str:
    """Stripe search clause matching `term` against email or name."""
    quoted = term.replace("\\", "\\\\").replace('"', '\\"')
    return f'email:"{quoted}" OR name:"{quoted}"'


def _customers(body: dict[str, Any]) -> list[Customer]:
    customers = [Customer.model_validate(item) for item in body.get("data", [])]
    return [c for c in customers if not c.deleted]


class AsyncStripeClient:
    """Asynchronous client for the subset of the Stripe REST API the portal uses."""

    def __init__(
        self,
        secret_key: str,
        base_url: str = "https://api.stripe.com",
        timeout: float = 10.0,
        *,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        if not secret_key:
            raise PaymentProviderError("Stripe is not configured")
        self._http = AsyncHttpClient(
            f"{base_url.rstrip('/')}/v1",
            timeout=timeout,
            headers={
                "Authorization": f"Bearer {secret_key}",
                "Stripe-Version": STRIPE_API_VERSION,
            },
            transport=transport,
        )

    async def retrieve_customer(self, customer_id: str) -> Customer:
        try:
            resp = await self._http.get(f"/customers/{customer_id}")
        except httpx.HTTPStatusError as e:
            if e.response.status_code == 404:
                raise CustomerNotFoundError("Customer not found") from e
            raise PaymentProviderError(_error_message(e)) from e
        except httpx.RequestError as e:
            raise PaymentProviderError(f"Could not reach Stripe: {e}") from e

        customer = Customer.model_validate(resp.json())
        if customer.deleted:
            raise CustomerNotFoundError("Customer has been deleted")
        return customer

    async def create_payment_intent(
        self,
        *,
        customer_id: str,
        amount: int,
        currency: str,
        description: str,
        metadata: dict[str, str],
    ) -> PaymentIntent:
        form = flatten_form(
            {
                "amount": amount,
                "currency": currency.lower(),
                "customer": customer_id,
                "description": description,
                "metadata": metadata,
                "automatic_payment_methods": {"enabled": True},
            }
        )
        try:
            resp = await self._http.post("/payment_intents", data=form)
        except httpx.HTTPStatusError as e:
            raise PaymentProviderError(_error_message(e)) from e
        except httpx.RequestError as e:
            raise PaymentProviderError(f"Could not reach Stripe: {e}") from e

        intent = PaymentIntent.model_validate(resp.json())
        logger.info("Created payment intent %s for customer %s", intent.id, customer_id)
        return intent

    async def retrieve_payment_intent(self, payment_intent_id: str) -> PaymentIntent:
        try:
            resp = await self._http.get(
                f"/payment_intents/{payment_intent_id}",
                params={"expand[]": "latest_charge"},
            )
        except httpx.HTTPStatusError as e:
            if e.response.status_code == 404:
                raise PaymentNotFoundError("Payment not found") from e
            raise PaymentProviderError(_error_message(e)) from e
        except httpx.RequestError as e:
            raise PaymentProviderError(f"Could not reach Stripe: {e}") from e

        return PaymentIntent.model_validate(resp.json())

    async def search_customers(self, query: str, *, limit: int = 10) -> list[Customer]:
        params = {"query": customer_search_query(query), "limit": str(limit)}
        try:
            resp = await self._http.get("/customers/search", params=params)
        except httpx.HTTPStatusError as e:
            raise PaymentProviderError(_error_message(e)) from e
        except httpx.RequestError as e:
            raise PaymentProviderError(f"Could not reach Stripe: {e}") from e

        return _customers(resp.json())

    async def list_customers(self, *, limit: int = 100) -> CustomerPage:
        try:
            resp = await self._http.get("/customers", params={"limit": str(limit)})
        except httpx.HTTPStatusError as e:
            raise PaymentProviderError(_error_message(e)) from e
        except httpx.RequestError as e:
            raise PaymentProviderError(f"Could not reach Stripe: {e}") from e

        body = resp.json()
        return CustomerPage(
            customers=_customers(body), has_more=bool(body.get("has_more"))
        )

    async def aclose(self) -> None:
        await self._http.aclose()

    async def __aenter__(self) -> "AsyncStripeClient":
        return self

    async def __aexit__(
        self,
        exc_type: Optional[Type[BaseException]],
        exc_val: Optional[BaseException],
        exc_tb: Optional[TracebackType],
    ) -> None:
        await self.aclose()
