"""Operator-side customer lookup used to pick the customer a link is signed for."""

from __future__ import annotations

import logging
from typing import Optional

from ...domain.shared import PaymentProviderFactory
from ..dtos import CustomerDTO, CustomerListDTO

logger = logging.getLogger(__name__)

MIN_SEARCH_LENGTH = 2
SEARCH_LIMIT = 10
MAX_LIST_LIMIT = 100


class CustomerDirectoryService:
    def __init__(self, payment_provider_factory: PaymentProviderFactory) -> None:
        self.payment_provider_factory = payment_provider_factory

    async def search_customers(self, query: Optional[str]) -> CustomerListDTO:
        """Customers whose email or name matches `query`.

        Raises:
            ValueError: if the trimmed query is shorter than two characters.
        """
        term = (query or "").strip()
        if len(term) < MIN_SEARCH_LENGTH:
            raise ValueError(
                f"Search query must be at least {MIN_SEARCH_LENGTH} characters"
            )

        async with self.payment_provider_factory() as provider:
            customers = await provider.search_customers(term, limit=SEARCH_LIMIT)

        logger.info("Customer search returned %d result(s)", len(customers))
        dtos = [CustomerDTO.model_validate(c.model_dump()) for c in customers]
        return CustomerListDTO(customers=dtos, total=len(dtos))

    async def list_customers(self, limit: int = MAX_LIST_LIMIT) -> CustomerListDTO:
        limit = max(1, min(limit, MAX_LIST_LIMIT))
        async with self.payment_provider_factory() as provider:
            page = await provider.list_customers(limit=limit)

        dtos = [CustomerDTO.model_validate(c.model_dump()) for c in page.customers]
        return CustomerListDTO(customers=dtos, total=len(dtos), has_more=page.has_more)
