"""
Service entry points for the market data adapter.

Services:
    snapshot: One-shot market, ticker and order book snapshot
"""
