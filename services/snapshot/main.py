"""
Snapshot service entry point.

Loads configuration, fetches CoinFlex markets and tickers once, optionally
fetches the order book of one symbol, and logs the results as structured
events.

Usage:
    python -m services.snapshot.main

Environment Variables:
    CONFIG_PATH: Configuration directory (default: config)
    LOG_LEVEL: Logging level (default: from features.yaml)
    SNAPSHOT_SYMBOL: Symbol whose order book to fetch (e.g. BTC/USD)
    SNAPSHOT_DEPTH: Order book levels per side (default: 10)
"""

import asyncio
import os
import sys

import structlog

from marketfeed.adapters.coinflex import CoinFlexAdapter
from marketfeed.config import ConfigLoadError, load_config
from marketfeed.exceptions import MarketFeedError
from marketfeed.logging_config import setup_logging

logger = structlog.get_logger(__name__)


async def run_snapshot(adapter: CoinFlexAdapter, symbol: str | None, depth: int) -> None:
    """Fetch markets, tickers and optionally one order book, logging each."""
    markets = await adapter.load_markets()
    logger.info(
        "snapshot_markets",
        exchange=adapter.exchange_name,
        symbols=sorted(markets),
        inactive=sorted(s for s, m in markets.items() if not m.active),
    )

    tickers = await adapter.fetch_tickers()
    for symbol_key, ticker in sorted(tickers.items()):
        logger.info(
            "snapshot_ticker",
            symbol=symbol_key,
            bid=str(ticker.bid) if ticker.bid is not None else None,
            ask=str(ticker.ask) if ticker.ask is not None else None,
            last=str(ticker.last) if ticker.last is not None else None,
            timestamp=ticker.timestamp,
        )

    if symbol:
        book = await adapter.fetch_order_book(symbol, limit=depth)
        logger.info(
            "snapshot_orderbook",
            symbol=book.symbol,
            best_bid=str(book.best_bid) if book.best_bid is not None else None,
            best_ask=str(book.best_ask) if book.best_ask is not None else None,
            bids_count=len(book.bids),
            asks_count=len(book.asks),
        )


async def main() -> None:
    """Main entry point."""
    config_path = os.getenv("CONFIG_PATH", "config")

    try:
        config = load_config(config_path)
    except ConfigLoadError as e:
        setup_logging()
        logger.error("config_load_failed", config_path=config_path, error=e.message)
        sys.exit(1)

    setup_logging(config.log_level, config.features.logging.format)
    logger.info("snapshot_service_starting", version="0.1.0", config_path=config_path)

    exchange_config = config.get_exchange("coinflex")
    adapter = CoinFlexAdapter(
        exchange_config,
        credentials=config.get_credentials("coinflex"),
    )

    try:
        await run_snapshot(
            adapter,
            symbol=os.getenv("SNAPSHOT_SYMBOL"),
            depth=int(os.getenv("SNAPSHOT_DEPTH", "10")),
        )
    except MarketFeedError as e:
        logger.error("snapshot_failed", error=str(e), error_type=type(e).__name__)
        sys.exit(1)
    finally:
        await adapter.close()


if __name__ == "__main__":
    asyncio.run(main())
