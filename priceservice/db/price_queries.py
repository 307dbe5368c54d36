"""Article and price lookups.

Prices are read one page at a time and returned as PricedInterval values,
ready for reconciliation.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from priceservice.db.models import ArticleModel, PriceModel
from priceservice.models import Article, PricedInterval


async def find_article(
    session: AsyncSession,
    store_id: str,
    article_id: str,
) -> Optional[Article]:
    """Look up an article by its store and article identifiers.

    Args:
        session: Database session
        store_id: Store identifier
        article_id: Article identifier within the store

    Returns:
        Article if found, None otherwise
    """
    stmt = select(ArticleModel).where(
        ArticleModel.store_id == store_id,
        ArticleModel.article_id == article_id,
    )

    result = await session.execute(stmt)
    row = result.scalar_one_or_none()

    if row is None:
        return None

    return Article(
        article_id=row.article_id,
        store_id=row.store_id,
        uom=row.uom,
        description=row.description,
        brand=row.brand,
        model=row.model,
    )


async def fetch_price_page(
    session: AsyncSession,
    store_id: str,
    article_id: str,
    page: int = 1,
    page_size: int = 10,
) -> list[PricedInterval]:
    """Fetch one page of an article's prices.

    Rows are ordered by primary key so that a given page always holds the same
    prices.

    Args:
        session: Database session
        store_id: Store identifier
        article_id: Article identifier within the store
        page: 1-based page number (values below 1 read the first page)
        page_size: Number of prices per page

    Returns:
        PricedInterval list (empty if the page holds no prices)
    """
    offset = (max(page, 1) - 1) * page_size

    stmt = (
        select(PriceModel)
        .join(ArticleModel, PriceModel.article_pk == ArticleModel.id)
        .where(
            ArticleModel.store_id == store_id,
            ArticleModel.article_id == article_id,
        )
        .order_by(PriceModel.id)
        .offset(offset)
        .limit(page_size)
    )

    result = await session.execute(stmt)
    rows = result.scalars().all()

    return [_row_to_interval(row) for row in rows]


def _row_to_interval(row: PriceModel) -> PricedInterval:
    """Convert database row to a PricedInterval."""
    return PricedInterval(
        kind=row.type,
        subkind=row.subtype,
        currency=row.currency,
        amount=row.amount,
        valid_from=_as_utc(row.valid_from),
        valid_to=_as_utc(row.valid_to),
    )


def _as_utc(value: datetime) -> datetime:
    # SQLite hands timestamps back without an offset; they are stored in UTC
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value
