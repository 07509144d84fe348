"""
CoinFlex exchange adapter.

Main adapter implementing the ExchangeAdapter interface. Coordinates request
signing, the injected transport, the asset/market resolver, the ticker
normalizer and the generic order book parser.

Endpoints:
    Base URL: https://webapi.coinflex.com
    Assets:    GET /assets/
    Markets:   GET /markets/
    Tickers:   GET /tickers/
    Ticker:    GET /tickers/{base}:{counter}
    Depth:     GET /depth/{base}:{counter}
    Balances:  GET /balances/            (private, Basic auth)

``{base}`` and ``{counter}`` are the integer asset ids of the market.

Data Flow:
    fetch_markets: assets/ then markets/ (sequential) -> resolver -> markets
    load_markets:  fetch_markets once, swap in a new MarketCache
    fetch_ticker(s)/fetch_order_book: cached market -> request -> normalize

Example:
    >>> from marketfeed.adapters.coinflex import CoinFlexAdapter
    >>> from marketfeed.config import load_config
    >>>
    >>> config = load_config()
    >>> adapter = CoinFlexAdapter(
    ...     config.get_exchange("coinflex"),
    ...     credentials=config.get_credentials("coinflex"),
    ... )
    >>> ticker = await adapter.fetch_ticker("BTC/USD")
    >>> await adapter.close()
"""

from typing import Any, Callable, Dict, List, Optional

import structlog

from marketfeed.adapters.coinflex.normalizer import CoinFlexNormalizer
from marketfeed.adapters.coinflex.resolver import resolve_markets
from marketfeed.adapters.coinflex.signer import CoinFlexSigner
from marketfeed.config.models import ApiAccess, Credentials, ExchangeConfig
from marketfeed.exceptions import InvalidResponseError, PrivateApiDisabledError
from marketfeed.interfaces.exchange_adapter import ExchangeAdapter
from marketfeed.models.market import Market
from marketfeed.models.orderbook import OrderBookSnapshot
from marketfeed.models.ticker import TickerSnapshot
from marketfeed.runtime.currency import CurrencyCodeMapper
from marketfeed.runtime.market_cache import MarketCache
from marketfeed.runtime.orderbook import parse_order_book
from marketfeed.runtime.transport import AiohttpTransport, Transport
from marketfeed.utils.time import Clock, milliseconds

logger = structlog.get_logger(__name__)

ASSETS_PATH = "assets/"
MARKETS_PATH = "markets/"
TICKERS_PATH = "tickers/"
TICKER_PATH = "tickers/{base}:{counter}"
DEPTH_PATH = "depth/{base}:{counter}"
BALANCES_PATH = "balances/"


class CoinFlexAdapter(ExchangeAdapter):
    """
    CoinFlex exchange adapter implementing ExchangeAdapter interface.

    Transport, clock and currency-code mapping are injected; defaults are an
    AiohttpTransport built from the exchange config, the system clock, and a
    CurrencyCodeMapper using the config's currency aliases.

    Private endpoints are only reachable when ``private_api_enabled`` is set
    in the exchange config.

    Attributes:
        exchange_name: Exchange id from config ("coinflex").
        markets: Current MarketCache, or None before the first load.
    """

    def __init__(
        self,
        exchange_config: Optional[ExchangeConfig] = None,
        credentials: Optional[Credentials] = None,
        transport: Optional[Transport] = None,
        clock: Clock = milliseconds,
        currency_code: Optional[Callable[[str], str]] = None,
    ):
        """
        Initialize CoinFlex adapter.

        Args:
            exchange_config: Exchange configuration; defaults to CoinFlex defaults.
            credentials: Credentials for private endpoints.
            transport: Performs HTTP requests.
            clock: Returns the current time in epoch milliseconds.
            currency_code: Maps venue currency names to canonical codes.
        """
        self._config = exchange_config or ExchangeConfig()
        self._transport: Transport = transport or AiohttpTransport(
            rate_limit_ms=self._config.connection.rate_limit_ms,
            timeout_seconds=self._config.connection.timeout_seconds,
            user_agent=self._config.connection.user_agent,
            exchange=self._config.id,
        )
        self._clock = clock
        self._currency_code = currency_code or CurrencyCodeMapper(
            self._config.common_currencies
        )
        self._signer = CoinFlexSigner(self._config, credentials)
        self._normalizer = CoinFlexNormalizer(find_market=self._find_market)

        self._markets: Optional[MarketCache] = None

        logger.info(
            "coinflex_adapter_initialized",
            exchange=self._config.id,
            base_url=self._config.get_api_url(ApiAccess.PUBLIC),
            private_api_enabled=self._config.private_api_enabled,
        )

    @property
    def exchange_name(self) -> str:
        """Return exchange identifier."""
        return self._config.id

    @property
    def config(self) -> ExchangeConfig:
        """Exchange configuration."""
        return self._config

    @property
    def markets(self) -> Optional[MarketCache]:
        """Current market cache, or None before the first load."""
        return self._markets

    async def _request(
        self,
        path: str,
        api: ApiAccess = ApiAccess.PUBLIC,
        method: str = "GET",
        params: Optional[Dict[str, Any]] = None,
    ) -> Any:
        """Sign a request and hand it to the transport."""
        if api is ApiAccess.PRIVATE and not self._config.private_api_enabled:
            raise PrivateApiDisabledError(
                f"Private endpoint {path!r} called but private API is disabled for "
                f"{self._config.id}"
            )

        signed = self._signer.sign(path, api=api, method=method, params=params)
        return await self._transport.request(
            signed.method,
            signed.url,
            headers=signed.headers,
            body=signed.body,
        )

    async def _request_list(self, path: str) -> List[Any]:
        response = await self._request(path)
        if not isinstance(response, list):
            logger.error(
                "rest_unexpected_payload",
                exchange=self._config.id,
                path=path,
                expected="list",
                received=type(response).__name__,
            )
            raise InvalidResponseError(f"Expected a list from {path}, got {type(response).__name__}")
        return response

    async def _request_object(self, path: str, params: Dict[str, Any]) -> Dict[str, Any]:
        response = await self._request(path, params=params)
        if not isinstance(response, dict):
            logger.error(
                "rest_unexpected_payload",
                exchange=self._config.id,
                path=path,
                expected="object",
                received=type(response).__name__,
            )
            raise InvalidResponseError(f"Expected an object from {path}, got {type(response).__name__}")
        return response

    def _find_market(self, market_id: str) -> Market:
        """Resolve a venue market name against the current cache."""
        return self._require_markets().find_market(market_id)

    def _require_markets(self) -> MarketCache:
        if self._markets is None:
            raise RuntimeError("Markets not loaded; call load_markets() first")
        return self._markets

    async def fetch_markets(self) -> List[Market]:
        """
        Fetch assets and markets and join them.

        Assets are fetched before markets; the two calls never overlap.
        """
        assets = await self._request_list(ASSETS_PATH)
        markets = await self._request_list(MARKETS_PATH)

        result = resolve_markets(assets, markets, self._clock(), self._currency_code)

        logger.info(
            "markets_fetched",
            exchange=self._config.id,
            markets_count=len(result),
            active_count=sum(1 for market in result if market.active),
        )

        return result

    async def load_markets(self, reload: bool = False) -> Dict[str, Market]:
        """
        Populate the market cache.

        The cache is replaced by a new MarketCache in one assignment, never
        updated in place.
        """
        if self._markets is None or reload:
            self._markets = MarketCache(await self.fetch_markets())
        return {market.symbol: market for market in self._markets}

    def market(self, symbol: str) -> Market:
        """
        Return the cached market for a canonical symbol.

        Raises:
            RuntimeError: If markets are not loaded.
            MarketNotFoundError: If the symbol is unknown.
        """
        return self._require_markets().market(symbol)

    async def fetch_tickers(
        self, symbols: Optional[List[str]] = None
    ) -> Dict[str, TickerSnapshot]:
        """
        Fetch every ticker and key it by canonical symbol.

        Each ticker is matched to its market by venue name. When two tickers
        resolve to the same symbol the later one in the response wins.
        """
        await self.load_markets()
        response = await self._request_list(TICKERS_PATH)

        wanted = set(symbols) if symbols is not None else None
        result: Dict[str, TickerSnapshot] = {}
        for raw_ticker in response:
            ticker = self._normalizer.normalize_ticker(raw_ticker)
            if wanted is not None and ticker.symbol not in wanted:
                continue
            if ticker.symbol in result:
                logger.debug(
                    "ticker_symbol_overwritten",
                    exchange=self._config.id,
                    symbol=ticker.symbol,
                    name=raw_ticker.get("name"),
                )
            result[ticker.symbol] = ticker

        logger.debug(
            "tickers_fetched",
            exchange=self._config.id,
            received=len(response),
            returned=len(result),
        )

        return result

    async def fetch_ticker(self, symbol: str) -> TickerSnapshot:
        """Fetch the ticker of one market by its base/counter asset ids."""
        await self.load_markets()
        market = self.market(symbol)
        response = await self._request_object(
            TICKER_PATH,
            {"base": market.base_id, "counter": market.quote_id},
        )
        return self._normalizer.normalize_ticker(response, market)

    async def fetch_order_book(
        self, symbol: str, limit: Optional[int] = None
    ) -> OrderBookSnapshot:
        """
        Fetch the depth of one market.

        The raw payload goes to the generic parser unmodified; ``limit``
        truncates each side after sorting.
        """
        await self.load_markets()
        market = self.market(symbol)
        response = await self._request_object(
            DEPTH_PATH,
            {"base": market.base_id, "counter": market.quote_id},
        )
        snapshot = parse_order_book(response, market.symbol, limit=limit)

        logger.debug(
            "orderbook_fetched",
            exchange=self._config.id,
            symbol=market.symbol,
            bids_count=len(snapshot.bids),
            asks_count=len(snapshot.asks),
        )

        return snapshot

    async def fetch_balances_raw(self) -> Any:
        """
        Fetch the raw balances payload.

        The payload is returned as received; balances are not normalized.

        Raises:
            PrivateApiDisabledError: If private endpoints are disabled.
            MissingCredentialsError: If credentials are incomplete.
        """
        return await self._request(BALANCES_PATH, api=ApiAccess.PRIVATE)

    async def close(self) -> None:
        """Close the transport."""
        await self._transport.close()
        logger.info("coinflex_adapter_closed", exchange=self._config.id)

    async def __aenter__(self) -> "CoinFlexAdapter":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.close()
