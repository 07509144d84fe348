"""
Canonical order book models.

Prices and quantities are Decimal. A snapshot is immutable once built and
rejects level lists that are not ordered most-aggressive first.
"""

from decimal import Decimal
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field, computed_field, model_validator


class PriceLevel(BaseModel):
    """One ``[price, quantity]`` level of a book side."""

    model_config = {"frozen": True, "extra": "ignore"}

    price: Decimal = Field(..., ge=Decimal("0"), description="Quote currency price")
    quantity: Decimal = Field(..., ge=Decimal("0"), description="Base currency amount")


class OrderBookSnapshot(BaseModel):
    """
    Order book of one market at one point in time.

    Attributes:
        symbol: Canonical "BASE/QUOTE" symbol.
        timestamp: Epoch seconds, when the venue reports one.
        nonce: Venue sequence number, when the venue reports one.
        bids: Highest price first.
        asks: Lowest price first.
        info: Raw depth payload.

    Example:
        >>> book = OrderBookSnapshot(
        ...     symbol="BTC/USD",
        ...     bids=[PriceLevel(price=Decimal("100"), quantity=Decimal("2"))],
        ...     asks=[PriceLevel(price=Decimal("101"), quantity=Decimal("1"))],
        ... )
        >>> book.mid_price
        Decimal('100.5')
    """

    model_config = {"frozen": True, "extra": "forbid"}

    symbol: str = Field(..., min_length=3)
    timestamp: Optional[int] = None
    nonce: Optional[int] = None
    bids: List[PriceLevel] = Field(default_factory=list)
    asks: List[PriceLevel] = Field(default_factory=list)
    info: Dict[str, Any] = Field(default_factory=dict)

    @model_validator(mode="after")
    def check_side_ordering(self) -> "OrderBookSnapshot":
        for better, worse in zip(self.bids, self.bids[1:]):
            if better.price < worse.price:
                raise ValueError(f"bids out of order: {better.price} before {worse.price}")
        for better, worse in zip(self.asks, self.asks[1:]):
            if better.price > worse.price:
                raise ValueError(f"asks out of order: {better.price} before {worse.price}")
        return self

    @computed_field  # type: ignore[misc]
    @property
    def best_bid(self) -> Optional[Decimal]:
        return self.bids[0].price if self.bids else None

    @computed_field  # type: ignore[misc]
    @property
    def best_ask(self) -> Optional[Decimal]:
        return self.asks[0].price if self.asks else None

    @computed_field  # type: ignore[misc]
    @property
    def mid_price(self) -> Optional[Decimal]:
        """Midpoint of the touch, or None when a side is empty."""
        if self.best_bid is None or self.best_ask is None:
            return None
        return (self.best_bid + self.best_ask) / 2

    @computed_field  # type: ignore[misc]
    @property
    def spread(self) -> Optional[Decimal]:
        """best_ask - best_bid, or None when a side is empty."""
        if self.best_bid is None or self.best_ask is None:
            return None
        return self.best_ask - self.best_bid

    @property
    def is_crossed(self) -> bool:
        """True when the best bid is at or above the best ask."""
        if self.best_bid is None or self.best_ask is None:
            return False
        return self.best_bid >= self.best_ask
