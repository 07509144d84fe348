"""
HTTP transport.

The adapter core never talks to the network itself; it hands a fully signed
request (url, method, headers, body) to a Transport and normalizes whatever
JSON comes back. AiohttpTransport is the default implementation.

Rate Limits:
    Requests are spaced at least ``rate_limit_ms`` apart using simple
    time-based throttling. CoinFlex asks for one request every 2 seconds.

Error Mapping:
    HTTP 429              -> RateLimitError
    HTTP >= 400           -> TransportError
    aiohttp.ClientError   -> TransportError
    asyncio.TimeoutError  -> TransportError
    Body is not JSON      -> TransportError
"""

import asyncio
from typing import Any, Dict, Optional, Protocol

import aiohttp
import structlog

from marketfeed.exceptions import RateLimitError, TransportError

logger = structlog.get_logger(__name__)

DEFAULT_RETRY_AFTER = 60


def parse_retry_after(value: Optional[str]) -> int:
    """
    Seconds to wait from a Retry-After header.

    Only the delay-seconds form is understood; a missing header, an HTTP-date
    or garbage gives DEFAULT_RETRY_AFTER.
    """
    if value is None:
        return DEFAULT_RETRY_AFTER
    try:
        return max(0, int(value.strip()))
    except ValueError:
        return DEFAULT_RETRY_AFTER


class Transport(Protocol):
    """Performs one HTTP request and returns the decoded JSON body."""

    async def request(
        self,
        method: str,
        url: str,
        headers: Optional[Dict[str, str]] = None,
        body: Optional[Any] = None,
    ) -> Any:
        ...

    async def close(self) -> None:
        ...


class AiohttpTransport:
    """
    aiohttp-backed Transport with request throttling.

    Attributes:
        rate_limit_ms: Minimum interval between requests in milliseconds.
        timeout_seconds: Total request timeout.

    Example:
        >>> transport = AiohttpTransport(rate_limit_ms=2000)
        >>> assets = await transport.request("GET", "https://webapi.coinflex.com/assets/")
        >>> await transport.close()
    """

    def __init__(
        self,
        rate_limit_ms: int = 2000,
        timeout_seconds: int = 10,
        user_agent: str = "marketfeed/0.1",
        exchange: str = "coinflex",
    ):
        """
        Initialize transport.

        Args:
            rate_limit_ms: Minimum interval between requests in milliseconds.
            timeout_seconds: Request timeout in seconds.
            user_agent: User-Agent header sent with every request.
            exchange: Exchange id used in log events.
        """
        self.rate_limit_ms = rate_limit_ms
        self.timeout_seconds = timeout_seconds
        self.user_agent = user_agent
        self.exchange = exchange

        self._session: Optional[aiohttp.ClientSession] = None
        self._last_request_time: Optional[float] = None
        self._request_interval = rate_limit_ms / 1000.0

        logger.info(
            "transport_initialized",
            exchange=exchange,
            rate_limit_ms=rate_limit_ms,
            timeout_seconds=timeout_seconds,
        )

    async def _ensure_session(self) -> aiohttp.ClientSession:
        """Ensure aiohttp session is created."""
        if self._session is None or self._session.closed:
            timeout = aiohttp.ClientTimeout(total=self.timeout_seconds)
            self._session = aiohttp.ClientSession(
                timeout=timeout,
                headers={"User-Agent": self.user_agent},
            )
        return self._session

    async def close(self) -> None:
        """Close the HTTP session."""
        if self._session and not self._session.closed:
            await self._session.close()
            logger.debug("transport_session_closed", exchange=self.exchange)

    async def _throttle(self) -> None:
        """Ensure minimum interval between requests."""
        loop = asyncio.get_running_loop()
        if self._last_request_time is not None:
            time_since_last = loop.time() - self._last_request_time
            if time_since_last < self._request_interval:
                await asyncio.sleep(self._request_interval - time_since_last)

        self._last_request_time = loop.time()

    async def request(
        self,
        method: str,
        url: str,
        headers: Optional[Dict[str, str]] = None,
        body: Optional[Any] = None,
    ) -> Any:
        """
        Make HTTP request with throttling and error handling.

        Args:
            method: HTTP method.
            url: Absolute URL including any query string.
            headers: Extra request headers.
            body: Request body, sent as-is.

        Returns:
            Any: Parsed JSON response.

        Raises:
            RateLimitError: If rate limited by the venue.
            TransportError: If the request fails or the body is not JSON.
        """
        await self._throttle()

        session = await self._ensure_session()

        try:
            async with session.request(method, url, headers=headers, data=body) as response:
                if response.status == 429:
                    retry_after = parse_retry_after(response.headers.get("Retry-After"))
                    logger.warning(
                        "rest_rate_limited",
                        exchange=self.exchange,
                        url=url,
                        retry_after=retry_after,
                    )
                    raise RateLimitError(
                        f"Rate limited, retry after {retry_after}s",
                        url=url,
                        retry_after=retry_after,
                    )

                if response.status >= 400:
                    error_text = await response.text()
                    logger.error(
                        "rest_request_failed",
                        exchange=self.exchange,
                        url=url,
                        status=response.status,
                        error=error_text,
                    )
                    raise TransportError(
                        f"REST request failed with status {response.status}: {error_text}",
                        url=url,
                        status=response.status,
                    )

                try:
                    data = await response.json(content_type=None)
                except ValueError as e:
                    logger.error(
                        "rest_invalid_json", exchange=self.exchange, url=url, error=str(e)
                    )
                    raise TransportError(
                        f"REST response is not valid JSON: {e}",
                        url=url,
                        status=response.status,
                    ) from e

                logger.debug(
                    "rest_request_completed",
                    exchange=self.exchange,
                    method=method,
                    url=url,
                    status=response.status,
                )

                return data

        except aiohttp.ClientError as e:
            logger.error("rest_client_error", exchange=self.exchange, url=url, error=str(e))
            raise TransportError(f"REST request failed: {e}", url=url) from e
        except asyncio.TimeoutError as e:
            logger.error(
                "rest_timeout",
                exchange=self.exchange,
                url=url,
                timeout=self.timeout_seconds,
            )
            raise TransportError(
                f"REST request timeout after {self.timeout_seconds}s", url=url
            ) from e

    def __repr__(self) -> str:
        """Return string representation."""
        return (
            f"AiohttpTransport(exchange={self.exchange}, "
            f"rate_limit_ms={self.rate_limit_ms})"
        )
