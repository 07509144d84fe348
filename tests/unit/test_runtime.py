"""Tests for the generic REST runtime helpers."""

from decimal import Decimal

import pytest

from marketfeed.exceptions import InvalidResponseError, MarketNotFoundError
from marketfeed.models.market import Market
from marketfeed.runtime import (
    CurrencyCodeMapper,
    MarketCache,
    extract_params,
    implode_params,
    omit,
    parse_order_book,
)
from marketfeed.runtime.transport import DEFAULT_RETRY_AFTER, parse_retry_after


def make_market(market_id: str, base: str, quote: str, base_id: int = 1, quote_id: int = 2) -> Market:
    return Market(
        id=market_id,
        symbol=f"{base}/{quote}",
        base=base,
        quote=quote,
        base_id=base_id,
        quote_id=quote_id,
    )


class TestParams:
    def test_extract_params(self) -> None:
        assert extract_params("tickers/{base}:{counter}") == ["base", "counter"]
        assert extract_params("assets/") == []

    def test_implode_params(self) -> None:
        assert implode_params("depth/{base}:{counter}", {"base": 63488, "counter": 65283}) == (
            "depth/63488:65283"
        )

    def test_implode_leaves_unknown_placeholders(self) -> None:
        assert implode_params("depth/{base}:{counter}", {"base": 1}) == "depth/1:{counter}"

    def test_omit(self) -> None:
        assert omit({"base": 1, "counter": 2, "limit": 5}, ["base", "counter"]) == {"limit": 5}


class TestCurrencyCodeMapper:
    @pytest.mark.parametrize(
        "code, expected",
        [("XBT", "BTC"), ("xbt", "BTC"), ("BCC", "BCH"), ("DRK", "DASH"), ("usd", "USD")],
    )
    def test_default_aliases(self, code: str, expected: str) -> None:
        assert CurrencyCodeMapper()(code) == expected

    def test_custom_aliases_replace_defaults(self) -> None:
        mapper = CurrencyCodeMapper({"flx": "flex"})

        assert mapper("FLX") == "FLEX"
        assert mapper("XBT") == "XBT"


class TestMarketCache:
    def test_lookup_by_symbol_and_id(self) -> None:
        cache = MarketCache([make_market("XBT-USD", "BTC", "USD")])

        assert cache.market("BTC/USD").id == "XBT-USD"
        assert cache.find_market("XBT-USD").symbol == "BTC/USD"
        assert "BTC/USD" in cache
        assert len(cache) == 1
        assert cache.symbols == ["BTC/USD"]
        assert cache.ids == ["XBT-USD"]

    def test_unknown_symbol_raises(self) -> None:
        cache = MarketCache([])

        with pytest.raises(MarketNotFoundError):
            cache.market("ETH/USD")
        with pytest.raises(MarketNotFoundError):
            cache.find_market("ETH-USD")

    def test_duplicate_symbol_last_wins_in_index(self) -> None:
        first = make_market("XBT-USD", "BTC", "USD")
        second = make_market("BTC-USD", "BTC", "USD", base_id=3)
        cache = MarketCache([first, second])

        assert cache.market("BTC/USD") is second
        assert cache.markets == [first, second]

    def test_source_list_changes_do_not_leak(self) -> None:
        markets = [make_market("XBT-USD", "BTC", "USD")]
        cache = MarketCache(markets)
        markets.append(make_market("ETH-USD", "ETH", "USD"))

        assert len(cache) == 1
        assert "ETH/USD" not in cache


class TestParseOrderBook:
    def test_sorted_most_aggressive_first(self) -> None:
        book = parse_order_book(
            {"bids": [[99, 1], [100, 2]], "asks": [[102, 1], [101, 3]]},
            symbol="BTC/USD",
        )

        assert [level.price for level in book.bids] == [Decimal("100"), Decimal("99")]
        assert [level.price for level in book.asks] == [Decimal("101"), Decimal("102")]
        assert book.best_bid == Decimal("100")
        assert book.best_ask == Decimal("101")
        assert book.spread == Decimal("1")
        assert book.mid_price == Decimal("100.5")
        assert book.is_crossed is False

    def test_zero_quantity_levels_dropped(self) -> None:
        book = parse_order_book({"bids": [[100, 0], [99, 1]], "asks": []}, symbol="BTC/USD")

        assert [level.price for level in book.bids] == [Decimal("99")]
        assert book.asks == []
        assert book.mid_price is None

    def test_limit_truncates_each_side(self) -> None:
        book = parse_order_book(
            {"bids": [[100, 1], [99, 1], [98, 1]], "asks": [[101, 1], [102, 1], [103, 1]]},
            symbol="BTC/USD",
            limit=2,
        )

        assert len(book.bids) == 2
        assert len(book.asks) == 2
        assert book.bids[-1].price == Decimal("99")
        assert book.asks[-1].price == Decimal("102")

    def test_invalid_limit(self) -> None:
        with pytest.raises(ValueError):
            parse_order_book({"bids": [], "asks": []}, symbol="BTC/USD", limit=0)

    def test_custom_keys(self) -> None:
        book = parse_order_book(
            {"b": [["1", "5", "ignored"]], "a": [["2", "6", "ignored"]]},
            symbol="BTC/USD",
            bids_key="b",
            asks_key="a",
        )

        assert book.bids[0].quantity == Decimal("5")
        assert book.asks[0].quantity == Decimal("6")

    def test_missing_sides_are_empty(self) -> None:
        book = parse_order_book({}, symbol="BTC/USD")

        assert book.bids == []
        assert book.asks == []

    def test_malformed_entry_raises(self) -> None:
        with pytest.raises(InvalidResponseError):
            parse_order_book({"bids": [[100]], "asks": []}, symbol="BTC/USD")

    def test_raw_payload_kept(self) -> None:
        raw = {"bids": [[100, 1]], "asks": [[101, 1]]}

        assert parse_order_book(raw, symbol="BTC/USD").info == raw


class TestParseOrderBookMetadata:
    def test_timestamp_and_nonce_carried(self) -> None:
        book = parse_order_book(
            {"bids": [[100, 1]], "asks": [[101, 1]]},
            symbol="BTC/USD",
            timestamp=1_500_000,
            nonce=42,
        )

        assert book.timestamp == 1_500_000
        assert book.nonce == 42

    def test_nonce_defaults_to_none(self) -> None:
        book = parse_order_book({"bids": [], "asks": []}, symbol="BTC/USD")

        assert book.nonce is None


class TestRetryAfter:
    @pytest.mark.parametrize(
        "header, expected",
        [
            ("7", 7),
            (" 12 ", 12),
            ("-3", 0),
            (None, DEFAULT_RETRY_AFTER),
            ("Wed, 21 Oct 2015 07:28:00 GMT", DEFAULT_RETRY_AFTER),
            ("soon", DEFAULT_RETRY_AFTER),
        ],
    )
    def test_parse_retry_after(self, header: str | None, expected: int) -> None:
        assert parse_retry_after(header) == expected
