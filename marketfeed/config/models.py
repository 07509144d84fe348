"""
Pydantic models for application configuration.

This module defines all configuration models that are validated when loading
YAML configuration files. The models ensure type safety and provide sensible
defaults for optional settings.

Configuration files:
    - config/exchanges.yaml: Exchange identity, URLs and connection settings
    - config/features.yaml: Logging and other system settings

Example:
    >>> from marketfeed.config.models import AppConfig
    >>> config = AppConfig(exchanges={"coinflex": ExchangeConfig()})
    >>> config.get_exchange("coinflex").connection.rate_limit_ms
    2000
"""

from enum import Enum
from typing import Dict, List, Optional

from pydantic import BaseModel, Field, field_validator


# =============================================================================
# ENUMS
# =============================================================================


class ApiAccess(str, Enum):
    """Access level of an endpoint group."""

    PUBLIC = "public"
    PRIVATE = "private"


class LogFormat(str, Enum):
    """Logging format options."""

    JSON = "json"
    TEXT = "text"


class LogLevel(str, Enum):
    """Logging level options."""

    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


# =============================================================================
# EXCHANGE CONFIGURATION
# =============================================================================


class ApiUrls(BaseModel):
    """REST API base URLs per access level."""

    model_config = {"frozen": True, "extra": "forbid"}

    public: str = Field(
        default="https://webapi.coinflex.com",
        description="Base URL for public endpoints",
    )
    private: str = Field(
        default="https://webapi.coinflex.com",
        description="Base URL for private endpoints",
    )

    @field_validator("public", "private")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        """Base URLs are joined with '/' + path, so drop a trailing slash."""
        return v.rstrip("/")


class ExchangeUrls(BaseModel):
    """Reference and API URLs for an exchange."""

    model_config = {"frozen": True, "extra": "forbid"}

    www: Optional[str] = Field(default="https://coinflex.com/")
    api: ApiUrls = Field(default_factory=ApiUrls)
    fees: Optional[str] = Field(default="https://coinflex.com/fees/")
    doc: List[str] = Field(
        default_factory=lambda: [
            "https://github.com/coinflex-exchange/API/blob/master/REST.md",
        ]
    )


class ConnectionSettings(BaseModel):
    """Connection settings for an exchange."""

    model_config = {"frozen": True, "extra": "forbid"}

    rate_limit_ms: int = Field(
        default=2000,
        description="Minimum interval between REST requests in milliseconds",
        ge=1,
        le=60000,
    )
    timeout_seconds: int = Field(
        default=10,
        description="REST request timeout",
        ge=1,
        le=120,
    )
    user_agent: str = Field(
        default="marketfeed/0.1",
        description="User-Agent header for REST requests",
        min_length=1,
    )


class ExchangeConfig(BaseModel):
    """Configuration for a single exchange."""

    model_config = {"frozen": True, "extra": "forbid"}

    id: str = Field(default="coinflex", min_length=1, description="Exchange id")
    name: str = Field(default="CoinFlex", min_length=1, description="Display name")
    countries: List[str] = Field(default_factory=lambda: ["SC"])
    enabled: bool = Field(
        default=True,
        description="Whether this exchange is enabled",
    )
    urls: ExchangeUrls = Field(
        default_factory=ExchangeUrls,
        description="Reference and REST API URLs",
    )
    connection: ConnectionSettings = Field(
        default_factory=ConnectionSettings,
        description="Connection settings",
    )
    private_api_enabled: bool = Field(
        default=False,
        description="Allow private (credentialed) endpoints; False for public-only use",
    )
    common_currencies: Optional[Dict[str, str]] = Field(
        default=None,
        description="Venue currency code -> canonical code; None uses the built-in table",
    )

    def get_api_url(self, api: ApiAccess | str = ApiAccess.PUBLIC) -> str:
        """
        Get the REST base URL for an access level.

        Args:
            api: "public" or "private".

        Returns:
            str: Base URL without trailing slash.

        Raises:
            ValueError: If api is not a known access level.
        """
        access = ApiAccess(api)
        if access is ApiAccess.PRIVATE:
            return self.urls.api.private
        return self.urls.api.public


class Credentials(BaseModel):
    """
    API credentials for private endpoints.

    All fields may be absent at load time; private requests check for
    completeness before any network call.
    """

    model_config = {"frozen": True, "extra": "forbid"}

    uid: Optional[str] = Field(default=None, description="Account user id")
    api_key: Optional[str] = Field(default=None, description="API key")
    private_key: Optional[str] = Field(default=None, description="Private key (password)")

    def missing(self) -> List[str]:
        """Return the names of empty credential fields."""
        return [
            name
            for name in ("uid", "api_key", "private_key")
            if not getattr(self, name)
        ]

    @property
    def is_complete(self) -> bool:
        """True when every credential field is set."""
        return not self.missing()

    def __repr__(self) -> str:
        present = [name for name in ("uid", "api_key", "private_key") if getattr(self, name)]
        return f"Credentials(present={present})"

    __str__ = __repr__


# =============================================================================
# FEATURES CONFIGURATION
# =============================================================================


class LoggingConfig(BaseModel):
    """Logging configuration."""

    model_config = {"frozen": True, "extra": "forbid"}

    format: LogFormat = Field(
        default=LogFormat.JSON,
        description="Log output format",
    )
    level: LogLevel = Field(
        default=LogLevel.INFO,
        description="Default log level",
    )


class FeaturesConfig(BaseModel):
    """System settings from features.yaml."""

    model_config = {"frozen": True, "extra": "forbid"}

    logging: LoggingConfig = Field(default_factory=LoggingConfig)


# =============================================================================
# ROOT CONFIGURATION
# =============================================================================


class AppConfig(BaseModel):
    """
    Root application configuration.

    Attributes:
        exchanges: Exchange settings keyed by exchange id.
        features: System settings.
        credentials: Credentials keyed by exchange id (from environment).
        log_level: Effective log level (LOG_LEVEL overrides features.yaml).
    """

    model_config = {"frozen": True, "extra": "forbid"}

    exchanges: Dict[str, ExchangeConfig] = Field(..., min_length=1)
    features: FeaturesConfig = Field(default_factory=FeaturesConfig)
    credentials: Dict[str, Credentials] = Field(default_factory=dict)
    log_level: LogLevel = Field(default=LogLevel.INFO)

    def get_exchange(self, exchange_id: str) -> ExchangeConfig:
        """
        Get configuration for an exchange.

        Raises:
            KeyError: If the exchange is not configured.
        """
        if exchange_id not in self.exchanges:
            raise KeyError(f"Exchange not configured: {exchange_id}")
        return self.exchanges[exchange_id]

    def get_credentials(self, exchange_id: str) -> Credentials:
        """Get credentials for an exchange; empty Credentials if none were set."""
        return self.credentials.get(exchange_id, Credentials())

    def get_enabled_exchanges(self) -> List[str]:
        """Return ids of enabled exchanges."""
        return [name for name, cfg in self.exchanges.items() if cfg.enabled]
