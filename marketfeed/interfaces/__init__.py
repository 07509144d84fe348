"""
Abstract interfaces for the market data adapter.

The key interface is ExchangeAdapter, which defines the contract every venue
adapter exposes to the multi-exchange layer.

Modules:
    exchange_adapter: ExchangeAdapter ABC for exchange integrations
"""

from marketfeed.interfaces.exchange_adapter import ExchangeAdapter

__all__: list[str] = [
    "ExchangeAdapter",
]
