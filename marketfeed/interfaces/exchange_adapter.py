"""
Abstract base class for exchange adapters.

This module defines the ExchangeAdapter interface that venue adapters expose
to the multi-exchange layer. Adapters turn venue REST responses into the
unified models (Market, TickerSnapshot, OrderBookSnapshot).

Every operation except ``fetch_markets`` needs the market cache. Adapters
populate it on first use through ``load_markets``.

Example:
    >>> adapter = CoinFlexAdapter(config)
    >>> ticker = await adapter.fetch_ticker("BTC/USD")
    >>> print(ticker.bid, ticker.ask)
"""

from abc import ABC, abstractmethod
from typing import Dict, List, Optional

from marketfeed.models.market import Market
from marketfeed.models.orderbook import OrderBookSnapshot
from marketfeed.models.ticker import TickerSnapshot


class ExchangeAdapter(ABC):
    """
    Abstract base class for exchange adapters.

    Attributes:
        exchange_name: Lowercase exchange identifier (e.g., "coinflex").

    Note:
        All financial values in returned models use Decimal for precision.
    """

    @property
    @abstractmethod
    def exchange_name(self) -> str:
        """
        Return the lowercase exchange identifier.

        Returns:
            str: Lowercase exchange id (e.g., "coinflex").
        """
        pass

    @abstractmethod
    async def load_markets(self, reload: bool = False) -> Dict[str, Market]:
        """
        Populate the market cache if it is empty, or always when reload is set.

        Returns:
            Dict[str, Market]: Markets keyed by canonical symbol.

        Raises:
            LookupFailure: If the venue data cannot be joined.
            TransportError: If a request fails.
        """
        pass

    @abstractmethod
    async def fetch_markets(self) -> List[Market]:
        """
        Fetch and normalize every market listed by the venue.

        Returns:
            List[Market]: Markets in venue order.

        Raises:
            LookupFailure: If a market references an unknown asset.
            TransportError: If a request fails.
        """
        pass

    @abstractmethod
    async def fetch_tickers(
        self, symbols: Optional[List[str]] = None
    ) -> Dict[str, TickerSnapshot]:
        """
        Fetch tickers for all markets.

        Args:
            symbols: Restrict the result to these symbols; None for all.

        Returns:
            Dict[str, TickerSnapshot]: Tickers keyed by canonical symbol.

        Raises:
            LookupFailure: If a ticker's market cannot be resolved.
            TransportError: If the request fails.
        """
        pass

    @abstractmethod
    async def fetch_ticker(self, symbol: str) -> TickerSnapshot:
        """
        Fetch the ticker of one market.

        Args:
            symbol: Canonical symbol (e.g., "BTC/USD").

        Raises:
            MarketNotFoundError: If the symbol is unknown.
            TransportError: If the request fails.
        """
        pass

    @abstractmethod
    async def fetch_order_book(
        self, symbol: str, limit: Optional[int] = None
    ) -> OrderBookSnapshot:
        """
        Fetch the order book of one market.

        Args:
            symbol: Canonical symbol (e.g., "BTC/USD").
            limit: Maximum levels per side; None for everything returned.

        Raises:
            MarketNotFoundError: If the symbol is unknown.
            TransportError: If the request fails.
        """
        pass

    @abstractmethod
    async def close(self) -> None:
        """
        Release network resources.

        Must be safe to call more than once.
        """
        pass

    def __repr__(self) -> str:
        """Return string representation of adapter."""
        return f"{self.__class__.__name__}(exchange={self.exchange_name})"
