"""
Market cache.

Holds the markets produced by one refresh, indexed by canonical symbol and by
venue market id. A cache is never mutated after construction; the adapter
replaces it wholesale on refresh, so readers holding the old reference keep a
consistent view.
"""

from types import MappingProxyType
from typing import Iterator, List, Mapping, Sequence

from marketfeed.exceptions import MarketNotFoundError
from marketfeed.models.market import Market


class MarketCache:
    """
    Immutable index of markets.

    When two markets share a symbol (or an id) the later one wins in that
    index; ``markets`` keeps every market in venue order.

    Example:
        >>> cache = MarketCache(markets)
        >>> cache.market("BTC/USD").id
        'XBT-USD'
        >>> cache.find_market("XBT-USD").symbol
        'BTC/USD'
    """

    def __init__(self, markets: Sequence[Market]):
        self._markets = tuple(markets)
        self._by_symbol: Mapping[str, Market] = MappingProxyType(
            {market.symbol: market for market in self._markets}
        )
        self._by_id: Mapping[str, Market] = MappingProxyType(
            {market.id: market for market in self._markets}
        )

    @property
    def markets(self) -> List[Market]:
        """All markets in the order the venue listed them."""
        return list(self._markets)

    @property
    def symbols(self) -> List[str]:
        """Canonical symbols, sorted."""
        return sorted(self._by_symbol)

    @property
    def ids(self) -> List[str]:
        """Venue market ids, sorted."""
        return sorted(self._by_id)

    def market(self, symbol: str) -> Market:
        """
        Return the market for a canonical symbol.

        Raises:
            MarketNotFoundError: If the symbol is unknown.
        """
        try:
            return self._by_symbol[symbol]
        except KeyError:
            raise MarketNotFoundError(symbol) from None

    def find_market(self, market_id: str) -> Market:
        """
        Return the market for a venue market id (e.g. "XBT-USD").

        Raises:
            MarketNotFoundError: If the id is unknown.
        """
        try:
            return self._by_id[market_id]
        except KeyError:
            raise MarketNotFoundError(market_id) from None

    def __contains__(self, symbol: object) -> bool:
        return symbol in self._by_symbol

    def __iter__(self) -> Iterator[Market]:
        return iter(self._markets)

    def __len__(self) -> int:
        return len(self._markets)

    def __repr__(self) -> str:
        return f"MarketCache(markets={len(self._markets)})"
