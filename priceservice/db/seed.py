"""Sample articles and prices for development and demos.

The data covers the interesting reconciliation cases: overlapping prices with
different amounts, disjoint prices, overlapping prices with equal amounts and
an article that has no prices at all.
"""

from __future__ import annotations

from datetime import datetime, timezone
from decimal import Decimal

import structlog
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from priceservice.db.models import ArticleModel, PriceModel

logger = structlog.get_logger(__name__)


def _ts(value: str) -> datetime:
    return datetime.fromisoformat(value.replace("Z", "+00:00")).astimezone(timezone.utc)


def _price(kind: str, subkind: str, amount: str, valid_from: str, valid_to: str) -> PriceModel:
    return PriceModel(
        type=kind,
        subtype=subkind,
        currency="CAD",
        amount=Decimal(amount),
        valid_from=_ts(valid_from),
        valid_to=_ts(valid_to),
    )


SAMPLE_ARTICLES = [
    {
        "article": {
            "article_id": "1000102674",
            "store_id": "7001",
            "uom": "EA",
            "description": "WH Halifax Passage Lever in Satin Nickel",
            "brand": "Weiser",
            "model": "9GLA1010",
        },
        "prices": [
            ("retail", "regular", "30.0", "2023-12-31T23:59:59Z", "9999-12-31T23:59:59Z"),
            ("retail", "discounted", "27.0", "2023-12-21T23:59:59Z", "2025-12-31T23:59:58Z"),
            ("retail", "discounted", "26.5", "2023-12-21T23:59:59Z", "2025-12-25T23:59:58Z"),
        ],
    },
    {
        "article": {
            "article_id": "1000203345",
            "store_id": "7001",
            "uom": "PC",
            "description": "Bathroom Faucet Chrome Finish",
            "brand": "Delta",
            "model": "DF2233",
        },
        "prices": [
            ("retail", "regular", "89.99", "2023-01-01T00:00:00Z", "2023-10-31T23:59:59Z"),
            ("retail", "discounted", "75.50", "2023-11-20T00:00:00Z", "2024-01-10T23:59:59Z"),
        ],
    },
    {
        "article": {
            "article_id": "9999999999",
            "store_id": "9999",
            "uom": "EA",
            "description": "Test article with no prices",
            "brand": "Test Brand",
            "model": "TEST123",
        },
        "prices": [],
    },
    {
        "article": {
            "article_id": "2000000001",
            "store_id": "8001",
            "uom": "EA",
            "description": "Overlap Test Article",
            "brand": "Test Brand",
            "model": "OV100",
        },
        "prices": [
            ("retail", "non-overlapping-1", "50.0", "2023-01-01T00:00:00Z", "2023-06-30T23:59:59Z"),
            ("retail", "non-overlapping-2", "55.0", "2023-07-01T00:00:00Z", "2023-12-31T23:59:59Z"),
            ("retail", "same-amount", "60.0", "2024-01-01T00:00:00Z", "2024-06-30T23:59:59Z"),
            ("retail", "same-amount", "60.0", "2024-06-01T00:00:00Z", "2024-08-31T23:59:59Z"),
            ("retail", "different-amount", "70.0", "2024-10-01T00:00:00Z", "2025-03-31T23:59:59Z"),
            ("retail", "different-amount", "65.0", "2025-01-01T00:00:00Z", "2025-06-30T23:59:59Z"),
        ],
    },
]


async def seed_sample_data(session: AsyncSession) -> int:
    """Insert the sample articles unless the articles table already has rows.

    Args:
        session: Database session (caller commits)

    Returns:
        Number of articles inserted
    """
    existing = (await session.execute(select(func.count(ArticleModel.id)))).scalar_one()
    if existing:
        logger.info("seed_skipped", existing_articles=existing)
        return 0

    price_count = 0
    for entry in SAMPLE_ARTICLES:
        article = ArticleModel(**entry["article"])
        article.prices = [_price(*values) for values in entry["prices"]]
        price_count += len(article.prices)
        session.add(article)

    await session.flush()
    logger.info("seed_loaded", articles=len(SAMPLE_ARTICLES), prices=price_count)
    return len(SAMPLE_ARTICLES)
