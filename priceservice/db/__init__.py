"""Database layer for the pricing service with async SQLAlchemy."""

from priceservice.db.connection import get_session, init_db
from priceservice.db.models import ArticleModel, Base, PriceModel

__all__ = [
    "Base",
    "ArticleModel",
    "PriceModel",
    "get_session",
    "init_db",
]
