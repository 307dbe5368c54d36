"""Price lookup service.

Fetches one page of an article's prices, reconciles them and wraps the result
in the response envelope. Responses can be memoized per
(store, article, page, page size) when a cache is configured.
"""

from __future__ import annotations

from collections.abc import Sequence
from datetime import datetime, timezone

import structlog
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from priceservice.db.price_queries import fetch_price_page, find_article
from priceservice.models import (
    Article,
    Meta,
    PricedInterval,
    PriceOut,
    PriceResponse,
    Properties,
)
from priceservice.reconcile import reconcile
from priceservice.service.cache import CacheKey, ResponseCache
from priceservice.service.exceptions import PriceNotFoundError

logger = structlog.get_logger(__name__)


class PriceService:
    """Answers price requests for a store/article pair."""

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        cache: ResponseCache | None = None,
        strategy: str = "pairwise",
    ):
        """Initialize the service.

        Args:
            session_factory: Factory for database sessions
            cache: Response cache, or None to always hit the database
            strategy: Conflict marking algorithm passed to reconcile()
        """
        self.session_factory = session_factory
        self.cache = cache
        self.strategy = strategy

    async def get_prices(
        self,
        store_id: str,
        article_id: str,
        page: int = 1,
        page_size: int = 10,
    ) -> PriceResponse:
        """Get reconciled prices for a store and article.

        Args:
            store_id: Store identifier
            article_id: Article identifier
            page: 1-based page number
            page_size: Number of stored prices per page

        Returns:
            PriceResponse envelope

        Raises:
            PriceNotFoundError: If the article is unknown or the page is empty
        """
        logger.debug(
            "prices_requested",
            store_id=store_id,
            article_id=article_id,
            page=page,
            page_size=page_size,
        )

        cache_key: CacheKey = (store_id, article_id, page, page_size)
        if self.cache is not None:
            cached = await self.cache.get(cache_key)
            if cached is not None:
                logger.debug("prices_cache_hit", key=cache_key)
                return cached

        async with self.session_factory() as session:
            article = await find_article(session, store_id, article_id)
            if article is None:
                raise PriceNotFoundError()

            intervals = await fetch_price_page(
                session, store_id, article_id, page, page_size
            )

        if not intervals:
            raise PriceNotFoundError()

        reconciled = reconcile(intervals, strategy=self.strategy)
        response = build_price_response(article, reconciled, page, page_size)

        if self.cache is not None:
            await self.cache.set(cache_key, response)

        return response

    async def clear_cache(self) -> int:
        """Discard memoized responses. Returns the number of entries dropped."""
        if self.cache is None:
            logger.info("price_cache_disabled")
            return 0

        removed = await self.cache.clear()
        logger.info("price_cache_cleared", removed=removed)
        return removed


def build_price_response(
    article: Article,
    prices: Sequence[PricedInterval],
    page: int,
    page_size: int,
) -> PriceResponse:
    """Assemble the response envelope for reconciled prices."""
    return PriceResponse(
        generated_date=datetime.now(timezone.utc),
        article=article.article_id,
        store=article.store_id,
        meta=Meta(page=page, size=page_size),
        properties=Properties(
            uom=article.uom,
            description=article.description,
            brand=article.brand,
            model=article.model,
        ),
        prices=[PriceOut.from_interval(interval) for interval in prices],
    )
