"""
YAML configuration loader.

Reads ``exchanges.yaml`` and ``features.yaml`` from a config directory,
validates them into the pydantic models of ``marketfeed.config.models`` and
layers environment overrides on top.

Environment:
    LOG_LEVEL: Overrides ``logging.level`` from features.yaml. Unknown values
        are ignored.
    <ID>_UID, <ID>_API_KEY, <ID>_PRIVATE_KEY: Credentials for exchange <ID>
        (e.g. COINFLEX_API_KEY). Secrets are only ever read from the
        environment, never from YAML.

Example:
    >>> from marketfeed.config.loader import load_config
    >>> load_config("config").get_enabled_exchanges()
    ['coinflex']
"""

import os
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

import yaml
from pydantic import ValidationError

from marketfeed.config.models import (
    AppConfig,
    Credentials,
    ExchangeConfig,
    FeaturesConfig,
    LogLevel,
)

EXCHANGES_FILE = "exchanges.yaml"
FEATURES_FILE = "features.yaml"


class ConfigLoadError(Exception):
    """
    Configuration could not be read or validated.

    Attributes:
        message: What went wrong.
        file_path: Offending file or directory, when known.
        cause: Underlying exception, when there is one.
    """

    def __init__(
        self,
        message: str,
        file_path: Optional[Path] = None,
        cause: Optional[Exception] = None,
    ):
        self.message = message
        self.file_path = file_path
        self.cause = cause
        super().__init__(message)


class ConfigLoader:
    """
    Builds an AppConfig from a config directory and an environment mapping.

    Example:
        >>> loader = ConfigLoader("config", environ={"COINFLEX_UID": "42"})
        >>> loader.load().get_credentials("coinflex").uid
        '42'
    """

    def __init__(
        self,
        config_dir: Path | str = "config",
        environ: Optional[Mapping[str, str]] = None,
    ):
        """
        Args:
            config_dir: Directory holding the YAML files.
            environ: Source of overrides and credentials; os.environ if None.

        Raises:
            ConfigLoadError: If ``config_dir`` is missing or not a directory.
        """
        self.config_dir = Path(config_dir)
        self.environ: Mapping[str, str] = os.environ if environ is None else environ

        if not self.config_dir.is_dir():
            reason = "not a directory" if self.config_dir.exists() else "not found"
            raise ConfigLoadError(
                f"Configuration directory {reason}: {self.config_dir}",
                file_path=self.config_dir,
            )

    def _read_mapping(self, filename: str) -> Dict[str, Any]:
        """Parse one YAML file that must hold a non-empty top-level mapping."""
        path = self.config_dir / filename
        if not path.is_file():
            raise ConfigLoadError(f"Configuration file not found: {path}", file_path=path)

        try:
            document = yaml.safe_load(path.read_text(encoding="utf-8"))
        except yaml.YAMLError as e:
            raise ConfigLoadError(f"Invalid YAML in {path}: {e}", file_path=path, cause=e) from e
        except OSError as e:
            raise ConfigLoadError(f"Cannot read {path}: {e}", file_path=path, cause=e) from e

        if not isinstance(document, dict) or not document:
            raise ConfigLoadError(
                f"Configuration file must be a non-empty mapping: {path}",
                file_path=path,
            )
        return document

    def _exchanges(self) -> Dict[str, ExchangeConfig]:
        """
        Validate every entry under ``exchanges:``.

        Entries are keyed by exchange id. An entry may repeat its id, but it
        has to agree with the key.
        """
        path = self.config_dir / EXCHANGES_FILE
        section = self._read_mapping(EXCHANGES_FILE).get("exchanges") or {}

        result: Dict[str, ExchangeConfig] = {}
        for key, entry in section.items():
            entry = dict(entry or {})
            if entry.setdefault("id", key) != key:
                raise ConfigLoadError(
                    f"Exchange key {key!r} does not match id {entry['id']!r}",
                    file_path=path,
                )
            try:
                result[key] = ExchangeConfig.model_validate(entry)
            except ValidationError as e:
                raise ConfigLoadError(
                    f"Invalid exchange configuration for {key!r}: {e}",
                    file_path=path,
                    cause=e,
                ) from e

        if not result:
            raise ConfigLoadError(f"No exchanges configured in {EXCHANGES_FILE}", file_path=path)
        return result

    def _features(self) -> FeaturesConfig:
        document = self._read_mapping(FEATURES_FILE)
        logging_section = dict(document.get("logging") or {})
        if "level" in logging_section:
            logging_section["level"] = str(logging_section["level"]).upper()

        try:
            return FeaturesConfig.model_validate({**document, "logging": logging_section})
        except ValidationError as e:
            raise ConfigLoadError(
                f"Invalid features configuration: {e}",
                file_path=self.config_dir / FEATURES_FILE,
                cause=e,
            ) from e

    def _credentials(self, exchange_id: str) -> Credentials:
        """Read ``<ID>_UID``/``_API_KEY``/``_PRIVATE_KEY``; blank counts as unset."""
        prefix = exchange_id.upper().replace("-", "_")

        def read(suffix: str) -> Optional[str]:
            return self.environ.get(f"{prefix}_{suffix}") or None

        return Credentials(uid=read("UID"), api_key=read("API_KEY"), private_key=read("PRIVATE_KEY"))

    def _log_level(self, configured: LogLevel) -> LogLevel:
        override = (self.environ.get("LOG_LEVEL") or "").upper()
        if override in LogLevel.__members__:
            return LogLevel(override)
        return configured

    def load(self) -> AppConfig:
        """
        Load, validate and merge all configuration sources.

        Raises:
            ConfigLoadError: On any missing, malformed or invalid input.
        """
        exchanges = self._exchanges()
        features = self._features()

        try:
            return AppConfig(
                exchanges=exchanges,
                features=features,
                credentials={key: self._credentials(key) for key in exchanges},
                log_level=self._log_level(features.logging.level),
            )
        except ValidationError as e:
            raise ConfigLoadError(f"Configuration validation failed: {e}", cause=e) from e


def load_config(config_dir: Path | str = "config") -> AppConfig:
    """Load configuration from ``config_dir`` using os.environ for overrides."""
    return ConfigLoader(config_dir).load()
