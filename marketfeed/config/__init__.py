"""
Configuration for the market data adapter.

Exchange identity, endpoints and connection settings come from
``config/exchanges.yaml``; logging settings from ``config/features.yaml``.
Credentials and the log level override are read from the environment.

Example:
    >>> from marketfeed.config import load_config
    >>> config = load_config()
    >>> config.get_exchange("coinflex").name
    'CoinFlex'
"""

from marketfeed.config.loader import ConfigLoadError, ConfigLoader, load_config
from marketfeed.config.models import (
    ApiAccess,
    ApiUrls,
    AppConfig,
    ConnectionSettings,
    Credentials,
    ExchangeConfig,
    ExchangeUrls,
    FeaturesConfig,
    LogFormat,
    LoggingConfig,
    LogLevel,
)

__all__: list[str] = [
    "ApiAccess",
    "ApiUrls",
    "AppConfig",
    "ConfigLoadError",
    "ConfigLoader",
    "ConnectionSettings",
    "Credentials",
    "ExchangeConfig",
    "ExchangeUrls",
    "FeaturesConfig",
    "LogFormat",
    "LogLevel",
    "LoggingConfig",
    "load_config",
]
