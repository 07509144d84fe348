"""
Exception hierarchy for the market data adapter.

Every error raised by the adapter derives from MarketFeedError so callers can
catch adapter failures in one place while still distinguishing the cause.

Hierarchy:
    MarketFeedError
    ├── LookupFailure
    │   ├── AssetNotFoundError      - market references an unknown asset id
    │   └── MarketNotFoundError     - symbol or venue market name not cached
    ├── MissingCredentialsError     - private call without full credentials
    ├── PrivateApiDisabledError     - private call on a public-only venue
    ├── InvalidResponseError        - payload failed validation
    └── TransportError              - HTTP/network failure (ConnectionError)
        └── RateLimitError          - venue answered 429
"""

from typing import List, Optional


class MarketFeedError(Exception):
    """Base class for all adapter errors."""

    pass


class LookupFailure(MarketFeedError, LookupError):
    """
    Raised when an identifier cannot be resolved against an index.

    Attributes:
        key: The identifier that failed to resolve.
    """

    def __init__(self, message: str, key: object):
        self.key = key
        super().__init__(message)


class AssetNotFoundError(LookupFailure):
    """
    Raised when a market references an asset id missing from the asset list.

    Attributes:
        asset_id: The unknown asset id.
        market_name: Venue name of the market that referenced it.
    """

    def __init__(self, asset_id: int, market_name: Optional[str] = None):
        self.asset_id = asset_id
        self.market_name = market_name
        super().__init__(
            f"Asset id {asset_id} referenced by market {market_name!r} "
            "is not in the asset list",
            key=asset_id,
        )


class MarketNotFoundError(LookupFailure):
    """Raised when a symbol or venue market id is not in the market cache."""

    def __init__(self, key: str):
        super().__init__(f"Market not found: {key!r}", key=key)


class MissingCredentialsError(MarketFeedError):
    """
    Raised before a private request when credentials are incomplete.

    Attributes:
        missing: Names of the credential fields that are absent.
    """

    def __init__(self, missing: List[str]):
        self.missing = list(missing)
        super().__init__(
            "Private request requires credentials: " + ", ".join(self.missing)
        )


class PrivateApiDisabledError(MarketFeedError):
    """Raised when a private endpoint is called on a public-only configuration."""

    pass


class InvalidResponseError(MarketFeedError, ValueError):
    """Raised when a venue payload does not have the expected shape."""

    pass


class TransportError(MarketFeedError, ConnectionError):
    """
    Raised when the HTTP request itself fails.

    Attributes:
        url: Requested URL.
        status: HTTP status code, if a response was received.
    """

    def __init__(self, message: str, url: str = "", status: Optional[int] = None):
        self.url = url
        self.status = status
        super().__init__(message)


class RateLimitError(TransportError):
    """Raised when the venue rejects a request with HTTP 429."""

    def __init__(self, message: str, url: str = "", retry_after: int = 60):
        self.retry_after = retry_after
        super().__init__(message, url=url, status=429)
