"""
CoinFlex exchange adapter.

This package provides CoinFlex REST integration: asset/market resolution,
ticker normalization, order book fetching and request signing.

Components:
    - resolve_markets: Joins the asset and market lists into canonical markets
    - CoinFlexNormalizer: Ticker payload converter
    - CoinFlexSigner: URL construction and Basic authentication
    - CoinFlexAdapter: Main adapter implementing ExchangeAdapter interface

Example:
    >>> from marketfeed.adapters.coinflex import CoinFlexAdapter
    >>> from marketfeed.config.loader import load_config
    >>>
    >>> config = load_config()
    >>> async with CoinFlexAdapter(config.get_exchange("coinflex")) as adapter:
    ...     tickers = await adapter.fetch_tickers()
    ...     print(tickers["BTC/USD"].last)
"""

from marketfeed.adapters.coinflex.adapter import CoinFlexAdapter
from marketfeed.adapters.coinflex.normalizer import CoinFlexNormalizer
from marketfeed.adapters.coinflex.resolver import prepare_assets, resolve_markets
from marketfeed.adapters.coinflex.signer import CoinFlexSigner, SignedRequest

__all__ = [
    "CoinFlexAdapter",
    "CoinFlexNormalizer",
    "CoinFlexSigner",
    "SignedRequest",
    "prepare_assets",
    "resolve_markets",
]
