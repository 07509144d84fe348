"""
Exchange adapters for the market data layer.

Each adapter turns one venue's REST responses into the unified models and
implements the ExchangeAdapter interface.

Supported Exchanges:
    - CoinFlex (spot and futures markets)
"""

__all__: list[str] = []
