"""
CoinFlex ticker normalizer.

Converts CoinFlex ticker payloads to the canonical TickerSnapshot.

CoinFlex Ticker Format:
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
        "time": 1523444555000000      // epoch microseconds
    }

Field Mapping:
    last   -> last, close
    volume -> base_volume
    time   -> timestamp (whole seconds, truncated)

CoinFlex does not report bid/ask volume, vwap, open, previous close, change,
percentage, average or quote volume; those fields are always None.
"""

from typing import Any, Callable, Dict, Optional

import structlog
from pydantic import ValidationError

from marketfeed.exceptions import InvalidResponseError, MarketNotFoundError
from marketfeed.models.market import Market
from marketfeed.models.ticker import RawTicker, TickerSnapshot
from marketfeed.utils.time import microseconds_to_seconds

logger = structlog.get_logger(__name__)

MarketFinder = Callable[[str], Market]


class CoinFlexNormalizer:
    """
    Normalizes CoinFlex ticker payloads.

    A ticker carries only the venue market name, so when no market is given
    the normalizer asks ``find_market`` to resolve that name against the
    caller's market cache.

    Example:
        >>> normalizer = CoinFlexNormalizer(find_market=cache.find_market)
        >>> ticker = normalizer.normalize_ticker(raw_ticker)
        >>> ticker.symbol
        'BTC/USD'
    """

    def __init__(self, find_market: Optional[MarketFinder] = None):
        """
        Initialize normalizer.

        Args:
            find_market: Resolves a venue market name to a Market; raises
                MarketNotFoundError when the name is unknown.
        """
        self._find_market = find_market

    def normalize_ticker(
        self,
        raw_ticker: Dict[str, Any],
        market: Optional[Market] = None,
    ) -> TickerSnapshot:
        """
        Normalize a CoinFlex ticker to TickerSnapshot.

        Args:
            raw_ticker: Raw ticker payload.
            market: Market the ticker belongs to. When None the market is
                looked up by the payload's ``name``.

        Returns:
            TickerSnapshot: Normalized ticker. Same input, same output.

        Raises:
            MarketNotFoundError: If no market is given and the payload's name
                cannot be resolved.
            InvalidResponseError: If the payload has invalid values.
        """
        try:
            ticker = RawTicker.model_validate(raw_ticker)
        except ValidationError as e:
            logger.error(
                "ticker_normalization_failed_invalid_data",
                exchange="coinflex",
                error=str(e),
            )
            raise InvalidResponseError(f"Invalid data in CoinFlex ticker: {e}") from e

        if market is None:
            market = self._resolve_market(ticker.name)

        timestamp = None
        if ticker.time is not None:
            timestamp = microseconds_to_seconds(ticker.time)

        snapshot = TickerSnapshot(
            symbol=market.symbol,
            timestamp=timestamp,
            high=ticker.high,
            low=ticker.low,
            bid=ticker.bid,
            ask=ticker.ask,
            close=ticker.last,
            last=ticker.last,
            base_volume=ticker.volume,
            info=raw_ticker,
        )

        logger.debug(
            "normalized_ticker",
            exchange="coinflex",
            symbol=snapshot.symbol,
            last=str(snapshot.last) if snapshot.last is not None else None,
        )

        return snapshot

    def _resolve_market(self, name: Optional[str]) -> Market:
        """Look up the market for a ticker that arrived without one."""
        if name is None or self._find_market is None:
            logger.error(
                "ticker_market_unresolvable",
                exchange="coinflex",
                name=name,
                has_finder=self._find_market is not None,
            )
            raise MarketNotFoundError(str(name))

        try:
            return self._find_market(name)
        except MarketNotFoundError:
            logger.error("ticker_market_not_found", exchange="coinflex", name=name)
            raise
