"""
marketfeed: venue market data normalization.

Normalizes a trading venue's REST responses (assets, markets, tickers,
order book depth) into a venue-agnostic model and signs requests for the
venue's private endpoints.

This package provides:
- Data models for markets, tickers and order books
- The ExchangeAdapter interface and the CoinFlex adapter
- A generic REST runtime (transport, market cache, currency codes)
- Configuration management
"""

__version__ = "0.1.0"
