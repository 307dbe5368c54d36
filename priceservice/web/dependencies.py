"""Shared dependencies for pricing web routes.

Dependencies are injected using FastAPI's Depends() system and can be swapped
in tests through ``app.dependency_overrides``.

Usage:
    from fastapi import Depends
    from priceservice.web.dependencies import get_price_service

    @router.get("/prices")
    async def prices(service: PriceService = Depends(get_price_service)):
        ...
"""

from __future__ import annotations

from priceservice.config import PaginationConfig, get_config
from priceservice.db.connection import get_session_factory
from priceservice.service import PriceService, build_cache

# Global singleton for the service (owns the response cache)
_price_service: PriceService | None = None


def get_price_service() -> PriceService:
    """Get the PriceService instance.

    This is a singleton so that every request shares one response cache.
    """
    global _price_service
    if _price_service is None:
        config = get_config()
        _price_service = PriceService(
            session_factory=get_session_factory(),
            cache=build_cache(config.cache),
            strategy=config.reconcile.strategy,
        )
    return _price_service


def reset_price_service() -> None:
    """Forget the service singleton (called when the database engine is disposed)."""
    global _price_service
    _price_service = None


def get_pagination() -> PaginationConfig:
    """Page size bounds from configuration."""
    return get_config().pagination
