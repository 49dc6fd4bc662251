"""Operator customer directory routes."""

from __future__ import annotations

import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status

from ....application.dtos import CustomerListDTO
from ....application.use_cases.customers import (
    MAX_LIST_LIMIT,
    CustomerDirectoryService,
)
from ....domain.errors import PaymentProviderError
from ..dependencies import get_customer_directory_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/customers", tags=["customers"])


@router.get(
    "",
    response_model=CustomerListDTO,
    status_code=status.HTTP_200_OK,
)
async def find_customers(
    q: Optional[str] = Query(None, description="Email or name to search for"),
    limit: int = Query(MAX_LIST_LIMIT, ge=1),
    service: CustomerDirectoryService = Depends(get_customer_directory_service),
) -> CustomerListDTO:
    """Search customers when `q` is given, otherwise list the most recent ones."""
    try:
        if q is None:
            return await service.list_customers(limit)
        return await service.search_customers(q)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except PaymentProviderError:
        logger.exception("Failed to fetch customers")
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail="Failed to fetch customers",
        )
