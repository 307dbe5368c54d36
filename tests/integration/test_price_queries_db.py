"""Integration tests for article/price queries against a real SQLite database."""

from __future__ import annotations

from datetime import datetime, timezone
from decimal import Decimal

import pytest
import pytest_asyncio
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import async_sessionmaker, create_async_engine

from priceservice.db.models import ArticleModel, Base, PriceModel
from priceservice.db.price_queries import fetch_price_page, find_article
from priceservice.db.seed import SAMPLE_ARTICLES, seed_sample_data
from priceservice.service import PriceNotFoundError, PriceService


@pytest_asyncio.fixture()
async def engine():
    """Create in-memory database for testing."""
    engine = create_async_engine("sqlite+aiosqlite:///:memory:")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    try:
        yield engine
    finally:
        await engine.dispose()


@pytest_asyncio.fixture()
async def session_factory(engine):
    factory = async_sessionmaker(engine, expire_on_commit=False)
    async with factory() as session:
        await seed_sample_data(session)
        await session.commit()
    return factory


@pytest.mark.asyncio
async def test_seed_is_idempotent(session_factory):
    async with session_factory() as session:
        assert await seed_sample_data(session) == 0
        articles = (await session.execute(select(ArticleModel))).scalars().all()

    assert len(articles) == len(SAMPLE_ARTICLES)


@pytest.mark.asyncio
async def test_find_article(session_factory):
    async with session_factory() as session:
        article = await find_article(session, "7001", "1000102674")
        missing = await find_article(session, "7001", "9999999")

    assert article is not None
    assert article.brand == "Weiser"
    assert article.uom == "EA"
    assert missing is None


@pytest.mark.asyncio
async def test_fetch_price_page_returns_utc_intervals(session_factory):
    async with session_factory() as session:
        intervals = await fetch_price_page(session, "7001", "1000203345")

    assert len(intervals) == 2
    regular = intervals[0]
    assert regular.subkind == "regular"
    assert regular.amount == Decimal("89.99")
    assert regular.valid_from == datetime(2023, 1, 1, tzinfo=timezone.utc)
    assert regular.valid_to == datetime(2023, 10, 31, 23, 59, 59, tzinfo=timezone.utc)
    assert regular.conflicted is False


@pytest.mark.asyncio
async def test_fetch_price_page_paginates_in_insert_order(session_factory):
    async with session_factory() as session:
        first = await fetch_price_page(session, "8001", "2000000001", page=1, page_size=4)
        second = await fetch_price_page(session, "8001", "2000000001", page=2, page_size=4)
        third = await fetch_price_page(session, "8001", "2000000001", page=3, page_size=4)

    assert [p.subkind for p in first] == [
        "non-overlapping-1",
        "non-overlapping-2",
        "same-amount",
        "same-amount",
    ]
    assert [p.subkind for p in second] == ["different-amount", "different-amount"]
    assert third == []


@pytest.mark.asyncio
async def test_article_without_prices(session_factory):
    async with session_factory() as session:
        assert await find_article(session, "9999", "9999999999") is not None
        assert await fetch_price_page(session, "9999", "9999999999") == []


@pytest.mark.asyncio
async def test_invalid_period_rejected(engine):
    factory = async_sessionmaker(engine, expire_on_commit=False)
    async with factory() as session:
        article = ArticleModel(article_id="1", store_id="1")
        article.prices = [
            PriceModel(
                type="retail",
                subtype="regular",
                currency="CAD",
                amount=Decimal("1.00"),
                valid_from=datetime(2024, 2, 1, tzinfo=timezone.utc),
                valid_to=datetime(2024, 1, 1, tzinfo=timezone.utc),
            )
        ]
        session.add(article)

        with pytest.raises(IntegrityError):
            await session.commit()


class TestPriceServiceWithDatabase:
    @pytest.mark.asyncio
    async def test_overlap_article(self, session_factory):
        service = PriceService(session_factory)

        response = await service.get_prices("8001", "2000000001", 1, 10)

        by_subtype = {}
        for price in response.prices:
            by_subtype.setdefault(price.subtype, []).append(price)

        assert len(response.prices) == 5
        assert not any(p.overlapped for p in by_subtype["non-overlapping-1"])
        assert not any(p.overlapped for p in by_subtype["non-overlapping-2"])

        [merged] = by_subtype["same-amount"]
        assert merged.valid_from == datetime(2024, 1, 1, tzinfo=timezone.utc)
        assert merged.valid_to == datetime(2024, 8, 31, 23, 59, 59, tzinfo=timezone.utc)
        assert merged.overlapped is False

        assert len(by_subtype["different-amount"]) == 2
        assert all(p.overlapped for p in by_subtype["different-amount"])

    @pytest.mark.asyncio
    async def test_empty_page_is_not_found(self, session_factory):
        service = PriceService(session_factory)

        with pytest.raises(PriceNotFoundError):
            await service.get_prices("8001", "2000000001", page=3, page_size=4)

    @pytest.mark.asyncio
    async def test_article_without_prices_is_not_found(self, session_factory):
        service = PriceService(session_factory)

        with pytest.raises(PriceNotFoundError):
            await service.get_prices("9999", "9999999999")
