"""
Ticker data models.

This module defines the raw ticker payload returned by the venue and the
canonical ticker snapshot produced by the normalizer. All financial values
use Decimal for precision.

Models:
    RawTicker: Ticker entry as returned by the venue
    TickerSnapshot: Canonical point-in-time ticker for one market

Raw Ticker Format:
    {
        "base": 63488,
        "counter": 65283,
        "name": "XBT-USD",
        "last": 62000000,
        "bid": 61990000,
        "ask": 62010000,
        "high": 63000000,
        "low": 61000000,
        "volume": 1234,
        "time": 1523444555000000
    }
"""

from datetime import datetime, timezone
from decimal import Decimal
from typing import Any, Dict, Optional

from pydantic import BaseModel, Field


class RawTicker(BaseModel):
    """
    Ticker entry as returned by the venue.

    Attributes:
        name: Venue market name, used to find the market when none is given.
        base: Base asset id.
        counter: Quote asset id.
        time: Snapshot time in epoch microseconds.
        last: Last traded price.
        bid: Best bid price.
        ask: Best ask price.
        high: Session high.
        low: Session low.
        volume: Traded volume in base currency.
    """

    model_config = {"frozen": True, "extra": "ignore"}

    name: Optional[str] = None
    base: Optional[int] = None
    counter: Optional[int] = None
    time: Optional[int] = Field(default=None, description="Epoch microseconds")
    last: Optional[Decimal] = None
    bid: Optional[Decimal] = None
    ask: Optional[Decimal] = None
    high: Optional[Decimal] = None
    low: Optional[Decimal] = None
    volume: Optional[Decimal] = None


class TickerSnapshot(BaseModel):
    """
    Canonical ticker for one market.

    Fields the venue does not supply (bid/ask volume, vwap, open, previous
    close, change, percentage, average, quote volume) are always None; they
    are never inferred from other fields.

    Attributes:
        symbol: Canonical "BASE/QUOTE" symbol.
        timestamp: Snapshot time in whole epoch seconds.
        high: Session high.
        low: Session low.
        bid: Best bid price.
        ask: Best ask price.
        last: Last traded price.
        close: Same as last.
        base_volume: Volume in base currency.
        info: Raw ticker payload.

    Example:
        >>> ticker = TickerSnapshot(
        ...     symbol="BTC/USD",
        ...     timestamp=1523444555,
        ...     last=Decimal("62000000"),
        ...     close=Decimal("62000000"),
        ... )
    """

    model_config = {"frozen": True, "extra": "forbid"}

    symbol: str = Field(..., min_length=3, description="Canonical symbol")
    timestamp: Optional[int] = Field(default=None, description="Epoch seconds")

    high: Optional[Decimal] = None
    low: Optional[Decimal] = None
    bid: Optional[Decimal] = None
    bid_volume: Optional[Decimal] = None
    ask: Optional[Decimal] = None
    ask_volume: Optional[Decimal] = None
    vwap: Optional[Decimal] = None
    open: Optional[Decimal] = None
    close: Optional[Decimal] = None
    last: Optional[Decimal] = None
    previous_close: Optional[Decimal] = None
    change: Optional[Decimal] = None
    percentage: Optional[Decimal] = None
    average: Optional[Decimal] = None
    base_volume: Optional[Decimal] = None
    quote_volume: Optional[Decimal] = None

    info: Dict[str, Any] = Field(default_factory=dict, description="Raw payload")

    @property
    def as_datetime(self) -> Optional[datetime]:
        """UTC datetime of the snapshot, or None if the venue sent no time."""
        if self.timestamp is None:
            return None
        return datetime.fromtimestamp(self.timestamp, tz=timezone.utc)

    @property
    def spread(self) -> Optional[Decimal]:
        """
        Absolute bid/ask spread.

        Returns:
            Optional[Decimal]: ask - bid, or None if either side is missing.
        """
        if self.bid is None or self.ask is None:
            return None
        return self.ask - self.bid
