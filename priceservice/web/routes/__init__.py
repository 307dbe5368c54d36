"""Pricing service route modules.

Each module exports a `router` object (APIRouter instance) that the app
factory in priceservice.web.app includes.

Usage:
    from priceservice.web.routes import prices
    app.include_router(prices.router)
"""

from priceservice.web.routes import health, prices

__all__ = [
    "health",
    "prices",
]
