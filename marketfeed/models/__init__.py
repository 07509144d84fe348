"""
Shared Pydantic data models for the market data adapter.

All models use Decimal for financial precision.

Modules:
    market: Raw asset/market records and the canonical Market
    ticker: Raw ticker payload and canonical TickerSnapshot
    orderbook: Order book snapshots and price levels

Example:
    >>> from marketfeed.models import Market, TickerSnapshot, OrderBookSnapshot
"""

# Market models
from marketfeed.models.market import (
    AssetRecord,
    Market,
    MarketRecord,
    PreparedAsset,
)

# Ticker models
from marketfeed.models.ticker import (
    RawTicker,
    TickerSnapshot,
)

# Order book models
from marketfeed.models.orderbook import (
    OrderBookSnapshot,
    PriceLevel,
)

__all__ = [
    # Market
    "AssetRecord",
    "MarketRecord",
    "PreparedAsset",
    "Market",
    # Ticker
    "RawTicker",
    "TickerSnapshot",
    # Order book
    "PriceLevel",
    "OrderBookSnapshot",
]
