"""
Generic order book parser.

Turns a depth payload holding two lists of ``[price, size, ...]`` entries into
an OrderBookSnapshot. Venue adapters pass their raw payload straight through;
the key names and entry positions are parameters so the same parser serves
any venue that uses this layout.
"""

from decimal import Decimal, InvalidOperation
from typing import Any, List, Mapping, Optional, Sequence

import structlog

from marketfeed.exceptions import InvalidResponseError
from marketfeed.models.orderbook import OrderBookSnapshot, PriceLevel

logger = structlog.get_logger(__name__)


def _parse_levels(
    entries: Sequence[Sequence[Any]],
    price_key: int,
    amount_key: int,
) -> List[PriceLevel]:
    levels: List[PriceLevel] = []
    for entry in entries:
        price = Decimal(str(entry[price_key]))
        quantity = Decimal(str(entry[amount_key]))
        # Skip zero quantity levels
        if quantity > 0:
            levels.append(PriceLevel(price=price, quantity=quantity))
    return levels


def parse_order_book(
    raw: Mapping[str, Any],
    symbol: str,
    timestamp: Optional[int] = None,
    nonce: Optional[int] = None,
    bids_key: str = "bids",
    asks_key: str = "asks",
    price_key: int = 0,
    amount_key: int = 1,
    limit: Optional[int] = None,
) -> OrderBookSnapshot:
    """
    Parse a raw depth payload into an OrderBookSnapshot.

    Args:
        raw: Depth payload, e.g. ``{"bids": [[p, q], ...], "asks": [[p, q], ...]}``.
        symbol: Canonical symbol of the market.
        timestamp: Snapshot time in epoch seconds, if known.
        nonce: Venue sequence number of the payload, if known.
        bids_key: Payload key holding bid entries.
        asks_key: Payload key holding ask entries.
        price_key: Position of the price inside an entry.
        amount_key: Position of the size inside an entry.
        limit: Keep at most this many levels per side after sorting.

    Returns:
        OrderBookSnapshot: Bids sorted highest first, asks lowest first.

    Raises:
        InvalidResponseError: If entries are malformed.

    Example:
        >>> book = parse_order_book(
        ...     {"bids": [["100", "1"]], "asks": [["101", "2"]]}, symbol="BTC/USD"
        ... )
        >>> book.best_bid
        Decimal('100')
    """
    if limit is not None and limit < 1:
        raise ValueError(f"limit must be positive, got {limit}")

    try:
        bids = _parse_levels(raw.get(bids_key) or [], price_key, amount_key)
        asks = _parse_levels(raw.get(asks_key) or [], price_key, amount_key)
    except (IndexError, TypeError, InvalidOperation, ValueError) as e:
        logger.error(
            "orderbook_parse_failed",
            symbol=symbol,
            error=str(e),
        )
        raise InvalidResponseError(f"Invalid depth payload for {symbol}: {e}") from e

    bids.sort(key=lambda x: x.price, reverse=True)
    asks.sort(key=lambda x: x.price)

    if limit is not None:
        bids = bids[:limit]
        asks = asks[:limit]

    return OrderBookSnapshot(
        symbol=symbol,
        timestamp=timestamp,
        nonce=nonce,
        bids=bids,
        asks=asks,
        info=dict(raw),
    )
