"""Configuration management for mbclient."""

from __future__ import annotations

import tomllib
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any, ClassVar

from mbclient.config.paths import default_config_path
from mbclient.errors import ConfigurationError
from mbclient.platform.logging import logger

MUSICBRAINZ_URL_DEFAULT = "https://musicbrainz.org/ws/2"
COVERART_URL_DEFAULT = "https://coverartarchive.org"
RATE_LIMIT_INTERVAL_MS_DEFAULT = 1000
TIMEOUT_SECONDS_DEFAULT = 15.0


@dataclass
class Config:
    """Client configuration."""

    # Service endpoints, overridable for mirrors and local test servers
    musicbrainz_url: str = MUSICBRAINZ_URL_DEFAULT
    coverart_url: str = COVERART_URL_DEFAULT

    # User-Agent identity, see
    # https://musicbrainz.org/doc/MusicBrainz_API/Rate_Limiting#Provide_meaningful_User-Agent_strings
    app_name: str | None = None
    app_version: str | None = None
    contact: str | None = None
    user_agent: str | None = None

    # Shared limiter used by the asyncio client
    rate_limit_enabled: bool = True
    rate_limit_interval_ms: int = RATE_LIMIT_INTERVAL_MS_DEFAULT

    timeout_seconds: float = TIMEOUT_SECONDS_DEFAULT

    # Singleton instance
    _instance: ClassVar["Config | None"] = None
    _loaded_from: ClassVar[Path | None] = None

    def __post_init__(self) -> None:
        """Validate numeric bounds and normalise endpoint URLs."""

        if isinstance(self.rate_limit_interval_ms, bool) or not isinstance(
            self.rate_limit_interval_ms, int
        ):
            raise ConfigurationError("rate_limit_interval_ms must be an integer")
        if self.rate_limit_interval_ms < 0:
            raise ConfigurationError("rate_limit_interval_ms must not be negative")
        if not isinstance(self.timeout_seconds, (int, float)) or self.timeout_seconds <= 0:
            raise ConfigurationError("timeout_seconds must be a positive number")

        self.musicbrainz_url = self.musicbrainz_url.strip().rstrip("/")
        self.coverart_url = self.coverart_url.strip().rstrip("/")
        if not self.musicbrainz_url or not self.coverart_url:
            raise ConfigurationError("Service URLs must not be empty")

    @property
    def rate_limit_interval(self) -> float:
        """Return the limiter interval in seconds."""

        return self.rate_limit_interval_ms / 1000.0

    @classmethod
    def from_mapping(cls, data: dict[str, Any]) -> "Config":
        """Build a config from parsed TOML, ignoring unknown keys with a warning."""

        known = {f.name for f in fields(cls)}
        values: dict[str, Any] = {}
        for key, value in data.items():
            if key not in known:
                logger.warning("Ignoring unknown configuration key '%s'", key)
                continue
            values[key] = value

        try:
            return cls(**values)
        except TypeError as exc:
            raise ConfigurationError(f"Invalid configuration: {exc}") from exc

    @classmethod
    def load(cls, path: Path | None = None) -> "Config":
        """Load configuration from file.

        Args:
            path: Explicit config file. Defaults to ``default_config_path()``.

        Returns:
            Config: Loaded configuration object, defaults when no file exists.

        Raises:
            ConfigurationError: If the file cannot be parsed or holds invalid values.
        """
        if path is None and cls._instance is not None:
            return cls._instance

        config_file = path or default_config_path()

        if not config_file.exists():
            logger.debug("No configuration file at %s, using defaults", config_file)
            instance = cls()
        else:
            try:
                with open(config_file, "rb") as f:
                    config_dict = tomllib.load(f)
            except tomllib.TOMLDecodeError as exc:
                logger.error("Failed to parse configuration %s: %s", config_file, exc)
                raise ConfigurationError(f"Cannot parse {config_file}: {exc}") from exc

            instance = cls.from_mapping(config_dict)
            logger.debug("Configuration loaded from %s", config_file)

        if path is None:
            cls._instance = instance
            cls._loaded_from = config_file
        return instance


# Global configuration instance
config = Config.load()
