"""Pydantic models for the pricing service.

PricedInterval is the only type the reconciliation core works with. The
remaining models describe the HTTP response envelope and are assembled by
the service layer.
"""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import Annotated

from pydantic import AwareDatetime, BaseModel, ConfigDict, Field, PlainSerializer

IntervalKey = tuple[str, str, str, Decimal]

# Numeric(10, 2) amounts are exact as JSON numbers
JsonAmount = Annotated[Decimal, PlainSerializer(float, return_type=float, when_used="json")]


class PricedInterval(BaseModel):
    """A price that applies to one article over a half-open time range."""

    model_config = ConfigDict(frozen=True)

    kind: str  # "retail"
    subkind: str  # "regular", "discounted"
    currency: str
    amount: Decimal
    valid_from: AwareDatetime
    valid_to: AwareDatetime
    conflicted: bool = False

    @property
    def key(self) -> IntervalKey:
        """Identity key deciding which intervals may be merged."""
        return (self.kind, self.subkind, self.currency, self.amount)

    def overlaps(self, other: PricedInterval) -> bool:
        return self.valid_from < other.valid_to and other.valid_from < self.valid_to


class Article(BaseModel):
    """Article metadata as stored for a store."""

    article_id: str
    store_id: str
    uom: str | None = None
    description: str | None = None
    brand: str | None = None
    model: str | None = None


# ============================================================================
# Response envelope
# ============================================================================


class PriceOut(BaseModel):
    """One reconciled price in the response."""

    model_config = ConfigDict(populate_by_name=True)

    type: str
    subtype: str
    currency: str
    amount: JsonAmount
    valid_from: datetime = Field(alias="validFrom")
    valid_to: datetime = Field(alias="validTo")
    overlapped: bool = False

    @classmethod
    def from_interval(cls, interval: PricedInterval) -> PriceOut:
        return cls(
            type=interval.kind,
            subtype=interval.subkind,
            currency=interval.currency,
            amount=interval.amount,
            valid_from=interval.valid_from,
            valid_to=interval.valid_to,
            overlapped=interval.conflicted,
        )


class Meta(BaseModel):
    """Pagination echo."""

    page: int
    size: int


class Properties(BaseModel):
    uom: str | None = None
    description: str | None = None
    brand: str | None = None
    model: str | None = None


class PriceResponse(BaseModel):
    """Prices for one article page, reconciled."""

    generated_date: datetime
    article: str
    store: str
    meta: Meta
    properties: Properties
    prices: list[PriceOut]

    class Config:
        json_schema_extra = {
            "example": {
                "generated_date": "2024-05-01T10:00:00Z",
                "article": "1000102674",
                "store": "7001",
                "meta": {"page": 1, "size": 10},
                "properties": {
                    "uom": "EA",
                    "description": "WH Halifax Passage Lever in Satin Nickel",
                    "brand": "Weiser",
                    "model": "9GLA1010",
                },
                "prices": [
                    {
                        "type": "retail",
                        "subtype": "discounted",
                        "currency": "CAD",
                        "amount": 27.0,
                        "validFrom": "2023-12-21T23:59:59Z",
                        "validTo": "2025-12-31T23:59:58Z",
                        "overlapped": True,
                    }
                ],
            }
        }


class ErrorResponse(BaseModel):
    """Problem-style error body returned by the exception handlers."""

    type: str
    title: str
    status: int
    detail: str
