"""
Generic REST runtime used by venue adapters.

These pieces are venue-agnostic and are injected into adapters rather than
inherited, so adapters can be unit tested without network access.

Components:
    - Transport / AiohttpTransport: HTTP request execution
    - CurrencyCodeMapper: Currency code canonicalization
    - MarketCache: Immutable market index by symbol and venue id
    - parse_order_book: Generic depth payload parser
    - implode_params / extract_params / omit: Request path helpers
"""

from marketfeed.runtime.currency import DEFAULT_COMMON_CURRENCIES, CurrencyCodeMapper
from marketfeed.runtime.market_cache import MarketCache
from marketfeed.runtime.orderbook import parse_order_book
from marketfeed.runtime.params import extract_params, implode_params, omit
from marketfeed.runtime.transport import AiohttpTransport, Transport

__all__ = [
    "AiohttpTransport",
    "CurrencyCodeMapper",
    "DEFAULT_COMMON_CURRENCIES",
    "MarketCache",
    "Transport",
    "extract_params",
    "implode_params",
    "omit",
    "parse_order_book",
]
