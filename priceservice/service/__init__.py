"""Price lookup service, response cache and domain errors."""

from priceservice.service.cache import (
    InMemoryResponseCache,
    RedisResponseCache,
    ResponseCache,
    build_cache,
)
from priceservice.service.exceptions import PriceNotFoundError
from priceservice.service.prices import PriceService, build_price_response

__all__ = [
    "InMemoryResponseCache",
    "PriceNotFoundError",
    "PriceService",
    "RedisResponseCache",
    "ResponseCache",
    "build_cache",
    "build_price_response",
]
