"""Price routes.

Routes:
- GET  /v1/prices/{store_id}/{article_id} - Reconciled prices for an article page
- POST /v1/prices/admin/clear-cache       - Discard memoized responses
"""

from __future__ import annotations

import structlog
from fastapi import APIRouter, Depends, HTTPException, Query
from fastapi.responses import PlainTextResponse

from priceservice.config import PaginationConfig
from priceservice.models import ErrorResponse, PriceResponse
from priceservice.service import PriceService
from priceservice.web.dependencies import get_pagination, get_price_service

logger = structlog.get_logger(__name__)

router = APIRouter(prefix="/v1/prices", tags=["Pricing API"])


@router.get(
    "/{store_id}/{article_id}",
    response_model=PriceResponse,
    summary="Get prices for a specific store and article",
    description=(
        "Returns the prices for the specified store and article IDs with pagination "
        "support. Prices on the requested page that overlap in time with a different "
        "amount are flagged as overlapped; overlapping prices with the same amount "
        "are merged."
    ),
    responses={
        404: {"model": ErrorResponse, "description": "Prices not found"},
        500: {"model": ErrorResponse, "description": "Internal server error"},
    },
)
async def get_prices(
    store_id: str,
    article_id: str,
    page: int = Query(default=1, ge=1),
    page_size: int | None = Query(default=None, ge=1, alias="pageSize"),
    pagination: PaginationConfig = Depends(get_pagination),
    service: PriceService = Depends(get_price_service),
):
    """Get reconciled prices for a store/article pair."""
    size = page_size or pagination.default_page_size
    if size > pagination.max_page_size:
        raise HTTPException(
            status_code=422,
            detail=f"pageSize must not exceed {pagination.max_page_size}",
        )

    logger.info(
        "prices_request",
        store_id=store_id,
        article_id=article_id,
        page=page,
        page_size=size,
    )
    return await service.get_prices(store_id, article_id, page, size)


@router.post(
    "/admin/clear-cache",
    response_class=PlainTextResponse,
    summary="Clear price cache",
    description="Administrative endpoint to clear the price cache",
)
async def clear_cache(service: PriceService = Depends(get_price_service)):
    """Discard every memoized price response."""
    logger.info("clear_cache_request")
    await service.clear_cache()
    return "Cache cleared successfully"
