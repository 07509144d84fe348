"""Tests for the CoinFlex adapter against an in-memory transport."""

from decimal import Decimal
from typing import Any, Dict, List

import pytest

from marketfeed.adapters.coinflex import CoinFlexAdapter
from marketfeed.config.models import Credentials, ExchangeConfig
from marketfeed.exceptions import (
    AssetNotFoundError,
    InvalidResponseError,
    MarketNotFoundError,
    MissingCredentialsError,
    PrivateApiDisabledError,
    TransportError,
)
from marketfeed.interfaces import ExchangeAdapter

NOW_MS = 1_600_000_000_000


def test_identity(adapter: CoinFlexAdapter) -> None:
    assert isinstance(adapter, ExchangeAdapter)
    assert adapter.exchange_name == "coinflex"
    assert adapter.config.name == "CoinFlex"
    assert adapter.config.countries == ["SC"]
    assert adapter.config.connection.rate_limit_ms == 2000
    assert repr(adapter) == "CoinFlexAdapter(exchange=coinflex)"


class TestMarkets:
    @pytest.mark.asyncio
    async def test_fetch_markets_sequential_assets_then_markets(
        self, adapter: CoinFlexAdapter, transport: Any
    ) -> None:
        markets = await adapter.fetch_markets()

        assert transport.paths == ["assets/", "markets/"]
        assert [m.symbol for m in markets] == ["BTC/USD", "XBTJUN/USD"]
        assert [m.active for m in markets] == [True, False]

    @pytest.mark.asyncio
    async def test_load_markets_is_cached(self, adapter: CoinFlexAdapter, transport: Any) -> None:
        first = await adapter.load_markets()
        second = await adapter.load_markets()

        assert set(first) == {"BTC/USD", "XBTJUN/USD"}
        assert first == second
        assert transport.paths == ["assets/", "markets/"]

    @pytest.mark.asyncio
    async def test_reload_replaces_cache(
        self, adapter: CoinFlexAdapter, transport: Any, responses: Dict[str, Any]
    ) -> None:
        await adapter.load_markets()
        old_cache = adapter.markets

        responses["markets/"] = [{"name": "XBT-USD", "base": 1, "counter": 2}]
        await adapter.load_markets(reload=True)

        assert adapter.markets is not old_cache
        assert adapter.markets.symbols == ["BTC/USD"]
        assert old_cache.symbols == ["BTC/USD", "XBTJUN/USD"]

    @pytest.mark.asyncio
    async def test_unknown_asset_fails_and_keeps_no_cache(
        self, adapter: CoinFlexAdapter, responses: Dict[str, Any]
    ) -> None:
        responses["markets/"] = [{"name": "ETH-USD", "base": 9, "counter": 2}]

        with pytest.raises(AssetNotFoundError):
            await adapter.load_markets()

        assert adapter.markets is None

    @pytest.mark.asyncio
    async def test_non_list_payload_rejected(
        self, adapter: CoinFlexAdapter, responses: Dict[str, Any]
    ) -> None:
        responses["assets/"] = {"error": "maintenance"}

        with pytest.raises(InvalidResponseError):
            await adapter.fetch_markets()

    @pytest.mark.asyncio
    async def test_clock_decides_activity(self, transport: Any) -> None:
        adapter = CoinFlexAdapter(transport=transport, clock=lambda: 0)

        markets = await adapter.fetch_markets()

        assert all(market.active for market in markets)


class TestTickers:
    @pytest.mark.asyncio
    async def test_fetch_tickers_keyed_by_symbol(
        self, adapter: CoinFlexAdapter, transport: Any
    ) -> None:
        tickers = await adapter.fetch_tickers()

        assert set(tickers) == {"BTC/USD", "XBTJUN/USD"}
        assert tickers["BTC/USD"].timestamp == 1_500_000
        assert tickers["XBTJUN/USD"].last == Decimal("61500000")
        assert transport.paths == ["assets/", "markets/", "tickers/"]

    @pytest.mark.asyncio
    async def test_symbols_filter(self, adapter: CoinFlexAdapter) -> None:
        tickers = await adapter.fetch_tickers(["BTC/USD"])

        assert list(tickers) == ["BTC/USD"]

    @pytest.mark.asyncio
    async def test_duplicate_symbol_last_ticker_wins(
        self,
        adapter: CoinFlexAdapter,
        responses: Dict[str, Any],
        raw_tickers: List[Dict[str, Any]],
    ) -> None:
        later = dict(raw_tickers[0], last=1, time=2_000_000)
        responses["tickers/"] = [raw_tickers[0], later]

        tickers = await adapter.fetch_tickers()

        assert list(tickers) == ["BTC/USD"]
        assert tickers["BTC/USD"].last == Decimal("1")
        assert tickers["BTC/USD"].timestamp == 2

    @pytest.mark.asyncio
    async def test_unresolvable_ticker_fails_whole_call(
        self, adapter: CoinFlexAdapter, responses: Dict[str, Any], raw_tickers: List[Dict[str, Any]]
    ) -> None:
        responses["tickers/"] = raw_tickers + [{"name": "ETH-USD", "last": 1}]

        with pytest.raises(MarketNotFoundError):
            await adapter.fetch_tickers()

    @pytest.mark.asyncio
    async def test_fetch_ticker_uses_asset_ids(
        self, adapter: CoinFlexAdapter, transport: Any
    ) -> None:
        ticker = await adapter.fetch_ticker("BTC/USD")

        assert ticker.symbol == "BTC/USD"
        assert ticker.bid == Decimal("61990000")
        method, url, headers, _ = transport.calls[-1]
        assert method == "GET"
        assert url == "https://webapi.coinflex.com/tickers/1:2"
        assert headers is None

    @pytest.mark.asyncio
    async def test_fetch_ticker_unknown_symbol(self, adapter: CoinFlexAdapter) -> None:
        with pytest.raises(MarketNotFoundError):
            await adapter.fetch_ticker("ETH/USD")

    @pytest.mark.asyncio
    async def test_transport_failure_propagates(
        self, adapter: CoinFlexAdapter, responses: Dict[str, Any]
    ) -> None:
        responses["tickers/"] = TransportError("boom", url="tickers/", status=502)

        with pytest.raises(TransportError):
            await adapter.fetch_tickers()


class TestOrderBook:
    @pytest.mark.asyncio
    async def test_fetch_order_book(self, adapter: CoinFlexAdapter, transport: Any) -> None:
        book = await adapter.fetch_order_book("BTC/USD")

        assert transport.paths[-1] == "depth/1:2"
        assert book.symbol == "BTC/USD"
        assert book.best_bid == Decimal("61990000")
        assert book.best_ask == Decimal("62010000")
        assert len(book.bids) == 3
        assert len(book.asks) == 3

    @pytest.mark.asyncio
    async def test_limit(self, adapter: CoinFlexAdapter) -> None:
        book = await adapter.fetch_order_book("BTC/USD", limit=1)

        assert len(book.bids) == 1
        assert len(book.asks) == 1

    def test_market_before_load_raises(self, adapter: CoinFlexAdapter) -> None:
        with pytest.raises(RuntimeError):
            adapter.market("BTC/USD")


class TestPrivate:
    @pytest.mark.asyncio
    async def test_disabled_by_default(self, adapter: CoinFlexAdapter, transport: Any) -> None:
        with pytest.raises(PrivateApiDisabledError):
            await adapter.fetch_balances_raw()

        assert transport.calls == []

    @pytest.mark.asyncio
    async def test_missing_credentials_before_network(self, transport: Any) -> None:
        adapter = CoinFlexAdapter(
            ExchangeConfig(private_api_enabled=True),
            credentials=Credentials(uid="U"),
            transport=transport,
        )

        with pytest.raises(MissingCredentialsError):
            await adapter.fetch_balances_raw()

        assert transport.calls == []

    @pytest.mark.asyncio
    async def test_balances_raw_payload_with_basic_auth(
        self, transport: Any, credentials: Credentials, responses: Dict[str, Any]
    ) -> None:
        adapter = CoinFlexAdapter(
            ExchangeConfig(private_api_enabled=True),
            credentials=credentials,
            transport=transport,
        )

        balances = await adapter.fetch_balances_raw()

        assert balances is responses["balances/"]
        _, url, headers, _ = transport.calls[-1]
        assert url == "https://webapi.coinflex.com/balances/"
        assert headers == {"Authorization": "Basic VS9LOlA="}


@pytest.mark.asyncio
async def test_close_and_context_manager(transport: Any) -> None:
    async with CoinFlexAdapter(transport=transport) as adapter:
        assert adapter.exchange_name == "coinflex"

    assert transport.closed is True
