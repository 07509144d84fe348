"""Shared fixtures: sample CoinFlex payloads and an in-memory transport."""

from typing import Any, Dict, List, Optional, Tuple
from urllib.parse import urlsplit

import pytest

from marketfeed.adapters.coinflex import CoinFlexAdapter
from marketfeed.config.models import Credentials, ExchangeConfig

NOW_MS = 1_600_000_000_000


class FakeTransport:
    """Transport that answers from a path -> payload table and records calls."""

    def __init__(self, responses: Dict[str, Any]):
        self.responses = responses
        self.calls: List[Tuple[str, str, Optional[Dict[str, str]], Any]] = []
        self.closed = False

    async def request(
        self,
        method: str,
        url: str,
        headers: Optional[Dict[str, str]] = None,
        body: Optional[Any] = None,
    ) -> Any:
        self.calls.append((method, url, headers, body))
        path = urlsplit(url).path.lstrip("/")
        response = self.responses[path]
        if isinstance(response, Exception):
            raise response
        return response

    async def close(self) -> None:
        self.closed = True

    @property
    def paths(self) -> List[str]:
        return [urlsplit(url).path.lstrip("/") for _, url, _, _ in self.calls]


@pytest.fixture()
def raw_assets() -> List[Dict[str, Any]]:
    """CoinFlex asset list: XBT settles in BTC, USD and a futures asset."""
    return [
        {"id": 1, "name": "XBT", "spot_name": "BTC", "spot_id": 1, "scale": 10000},
        {"id": 2, "name": "USD", "spot_name": None, "spot_id": None, "scale": 10000},
        {"id": 3, "name": "XBTJUN", "scale": 10000},
    ]


@pytest.fixture()
def raw_markets() -> List[Dict[str, Any]]:
    """CoinFlex market list: a spot market and an expired future."""
    return [
        {"name": "XBT-USD", "base": 1, "counter": 2},
        {"name": "XBTJUN-USD", "base": 3, "counter": 2, "expires": NOW_MS - 1},
    ]


@pytest.fixture()
def raw_tickers() -> List[Dict[str, Any]]:
    """CoinFlex ticker list matching raw_markets."""
    return [
        {
            "base": 1,
            "counter": 2,
            "name": "XBT-USD",
            "last": 62000000,
            "bid": 61990000,
            "ask": 62010000,
            "high": 63000000,
            "low": 61000000,
            "volume": 1234,
            "time": 1_500_000_500_000,
        },
        {
            "base": 3,
            "counter": 2,
            "name": "XBTJUN-USD",
            "last": 61500000,
            "time": 1_500_000_900_000,
        },
    ]


@pytest.fixture()
def raw_depth() -> Dict[str, Any]:
    """CoinFlex depth payload, deliberately unsorted."""
    return {
        "bids": [[61980000, 2], [61990000, 1], [61970000, 0], [61960000, 5]],
        "asks": [[62020000, 3], [62010000, 4], [62030000, 1]],
    }


@pytest.fixture()
def responses(
    raw_assets: List[Dict[str, Any]],
    raw_markets: List[Dict[str, Any]],
    raw_tickers: List[Dict[str, Any]],
    raw_depth: Dict[str, Any],
) -> Dict[str, Any]:
    """Endpoint path -> payload table for FakeTransport."""
    return {
        "assets/": raw_assets,
        "markets/": raw_markets,
        "tickers/": raw_tickers,
        "tickers/1:2": raw_tickers[0],
        "depth/1:2": raw_depth,
        "balances/": [{"id": 2, "available": 100000}],
    }


@pytest.fixture()
def transport(responses: Dict[str, Any]) -> FakeTransport:
    """In-memory transport serving the sample payloads."""
    return FakeTransport(responses)


@pytest.fixture()
def credentials() -> Credentials:
    """Complete credentials."""
    return Credentials(uid="U", api_key="K", private_key="P")


@pytest.fixture()
def adapter(transport: FakeTransport) -> CoinFlexAdapter:
    """Public-only adapter with a pinned clock."""
    return CoinFlexAdapter(ExchangeConfig(), transport=transport, clock=lambda: NOW_MS)
