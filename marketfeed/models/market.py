"""
Asset and market data models.

This module defines the raw shapes returned by the venue's asset and market
endpoints, the intermediate asset index used while joining them, and the
canonical Market model exposed to callers.

Models:
    AssetRecord: One entry of the venue asset list
    MarketRecord: One entry of the venue market list (references two assets)
    PreparedAsset: Asset fields copied into the join index
    Market: Canonical trading pair produced by the resolver

Raw Asset Format:
    {"id": 1, "name": "XBT", "spot_name": "BTC", "spot_id": 1, "scale": 10000}

Raw Market Format:
    {"name": "XBT-USD", "base": 1, "counter": 2, "expires": 1546300800000}
"""

from typing import Any, Dict, Optional

from pydantic import BaseModel, Field, model_validator


class AssetRecord(BaseModel):
    """
    Asset as returned by the venue asset list.

    Attributes:
        id: Venue-internal integer asset id.
        name: Venue asset name.
        spot_name: Name of the spot asset this asset settles in, if any.
        spot_id: Id of the spot asset, if any.
        scale: Integer scale the venue applies to quantities, as a string.
    """

    model_config = {"frozen": True, "extra": "ignore", "coerce_numbers_to_str": True}

    id: int = Field(..., description="Venue asset id")
    name: str = Field(..., description="Venue asset name")
    spot_name: Optional[str] = Field(default=None, description="Spot asset name")
    spot_id: Optional[str] = Field(default=None, description="Spot asset id")
    scale: Optional[str] = Field(default=None, description="Quantity scale")


class MarketRecord(BaseModel):
    """
    Market as returned by the venue market list.

    Attributes:
        name: Venue market name (e.g., "XBT-USD").
        base: Asset id of the base currency.
        counter: Asset id of the quote currency.
        expires: Expiry time in epoch milliseconds; None for perpetual markets.
    """

    model_config = {"frozen": True, "extra": "ignore"}

    name: str = Field(..., description="Venue market name")
    base: int = Field(..., description="Base asset id")
    counter: int = Field(..., description="Quote (counter) asset id")
    expires: Optional[int] = Field(default=None, description="Expiry, epoch ms")


class PreparedAsset(BaseModel):
    """Asset fields kept in the join index, keyed by asset id."""

    model_config = {"frozen": True, "extra": "forbid"}

    name: str
    spot_name: Optional[str] = None
    spot_id: Optional[str] = None
    scale: Optional[str] = None

    @property
    def code_name(self) -> str:
        """Name used for the currency code: spot name when known, else name."""
        return self.spot_name if self.spot_name is not None else self.name


class Market(BaseModel):
    """
    Canonical trading pair.

    Attributes:
        id: Venue market name, used to match ticker payloads.
        symbol: Canonical "BASE/QUOTE" symbol.
        base: Canonical base currency code.
        quote: Canonical quote currency code.
        base_id: Venue id of the base asset.
        quote_id: Venue id of the quote asset.
        active: False once the market's expiry time has passed.
        precision: Not provided by this venue.
        limits: Not provided by this venue.
        info: Raw asset and market collections plus the prepared asset index.

    Example:
        >>> market = Market(
        ...     id="XBT-USD", symbol="BTC/USD", base="BTC", quote="USD",
        ...     base_id=1, quote_id=2, active=True,
        ... )
    """

    model_config = {"frozen": True, "extra": "forbid"}

    id: str = Field(..., min_length=1, description="Venue market name")
    symbol: str = Field(..., min_length=3, description="Canonical BASE/QUOTE symbol")
    base: str = Field(..., min_length=1, description="Base currency code")
    quote: str = Field(..., min_length=1, description="Quote currency code")
    base_id: int = Field(..., description="Base asset id")
    quote_id: int = Field(..., description="Quote asset id")
    active: bool = Field(default=True, description="Whether the market trades")
    precision: Optional[Dict[str, Any]] = None
    limits: Optional[Dict[str, Any]] = None
    info: Dict[str, Any] = Field(default_factory=dict, description="Raw payloads")

    @model_validator(mode="after")
    def validate_symbol(self) -> "Market":
        """Ensure symbol is composed from base and quote."""
        expected = f"{self.base}/{self.quote}"
        if self.symbol != expected:
            raise ValueError(f"Symbol {self.symbol!r} does not match {expected!r}")
        return self
