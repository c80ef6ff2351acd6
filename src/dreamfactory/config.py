"""
Configuration management for the DreamFactory client.

Settings are resolved from several sources with the following precedence
(highest to lowest):

1. Explicit keyword overrides passed to ``Config.load``
2. Environment variables (DREAMFACTORY_URL, DREAMFACTORY_API_KEY, ...)
3. The ``[dreamfactory]`` section of an INI file, when a path is given
4. Default values

The configuration is immutable once created, so every component built from
it sees the same values for the lifetime of the client.

Example:
    config = Config.load(api_key="abc123")
    print(config.base_url)     # "http://localhost" unless overridden
    print(config.api_version)  # RestApiVersion.V2
"""

from __future__ import annotations

import configparser
import logging
import os
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any

from dreamfactory.http.address import RestApiVersion

# =============================================================================
# DEFAULT CONFIGURATION VALUES
# =============================================================================

DEFAULT_BASE_URL = "http://localhost"
DEFAULT_API_VERSION = RestApiVersion.V2
DEFAULT_TIMEOUT = 30.0
DEFAULT_LOG_LEVEL = "WARNING"

# Environment variable names for configuration.
ENV_BASE_URL = "DREAMFACTORY_URL"
ENV_API_VERSION = "DREAMFACTORY_API_VERSION"
ENV_API_KEY = "DREAMFACTORY_API_KEY"
ENV_TIMEOUT = "DREAMFACTORY_TIMEOUT"
ENV_IMPLICIT_REFRESH = "DREAMFACTORY_IMPLICIT_REFRESH"
ENV_LOG_LEVEL = "DREAMFACTORY_LOG_LEVEL"

# INI section read by Config.load(path=...)
INI_SECTION = "dreamfactory"


def _parse_bool(value: str) -> bool:
    """Parse a string value to boolean."""
    return value.strip().lower() in ("true", "yes", "1", "on", "enabled")


# =============================================================================
# CONFIGURATION DATACLASS
# =============================================================================


@dataclass(frozen=True)
class Config:
    """
    Immutable configuration container for a DreamFactory client.

    Attributes:
        base_url: Base URL of the DreamFactory instance, without the ``/api``
                  suffix (e.g. "https://df.example.com").
        api_version: REST API version segment used for every request.
        api_key: Optional application API key, sent on every request.
        timeout: Transport timeout in seconds, applied to all calls.
        implicit_session_refresh: When True, asking for the current session
                  while anonymous queries the server instead of failing.
        log_level: Level applied to the ``dreamfactory`` logger by
                   ``configure_logging``.
    """

    base_url: str = DEFAULT_BASE_URL
    api_version: RestApiVersion = DEFAULT_API_VERSION
    api_key: str | None = None
    timeout: float = DEFAULT_TIMEOUT
    implicit_session_refresh: bool = False
    log_level: str = DEFAULT_LOG_LEVEL

    def __post_init__(self) -> None:
        """
        Validate configuration values after initialization.

        Raises:
            ValueError: If base_url is empty, timeout is not positive or the
                        API version is unknown.
        """
        if not self.base_url:
            raise ValueError("base_url cannot be empty")

        if self.timeout <= 0:
            raise ValueError("timeout must be a positive number")

        # Accept the raw version string ("v2") as well as the enum member
        if not isinstance(self.api_version, RestApiVersion):
            object.__setattr__(self, "api_version", RestApiVersion.parse(self.api_version))

    @classmethod
    def load(cls, path: str | Path | None = None, **overrides: Any) -> Config:
        """
        Build a Config from an INI file, the environment and overrides.

        Args:
            path: Optional INI file with a ``[dreamfactory]`` section.
            **overrides: Field values that win over every other source.
                         ``None`` values are ignored.

        Returns:
            Config: A fully populated configuration object.

        Example:
            config = Config.load("client.ini", timeout=5.0)
        """
        values: dict[str, Any] = {}

        if path is not None:
            values.update(_load_from_ini(Path(path)))

        values.update(_load_from_env())

        known = {f.name for f in fields(cls)}
        for key, value in overrides.items():
            if key not in known:
                raise TypeError(f"Unknown configuration option: {key}")
            if value is not None:
                values[key] = value

        if "base_url" in values:
            values["base_url"] = str(values["base_url"]).rstrip("/")

        return cls(**values)


# =============================================================================
# CONFIGURATION LOADING
# =============================================================================


def _load_from_ini(path: Path) -> dict[str, Any]:
    """Read the ``[dreamfactory]`` section of an INI file."""
    parser = configparser.ConfigParser()
    parser.read(path)
    if not parser.has_section(INI_SECTION):
        return {}

    values: dict[str, Any] = {}
    section = parser[INI_SECTION]
    if "base_url" in section:
        values["base_url"] = section.get("base_url")
    if "api_version" in section:
        values["api_version"] = section.get("api_version")
    if "api_key" in section:
        values["api_key"] = section.get("api_key")
    if "timeout" in section:
        values["timeout"] = section.getfloat("timeout")
    if "implicit_session_refresh" in section:
        values["implicit_session_refresh"] = section.getboolean("implicit_session_refresh")
    if "log_level" in section:
        values["log_level"] = section.get("log_level").upper()
    return values


def _load_from_env() -> dict[str, Any]:
    """Collect configuration values from environment variables."""
    values: dict[str, Any] = {}
    if env_url := os.getenv(ENV_BASE_URL):
        values["base_url"] = env_url
    if env_version := os.getenv(ENV_API_VERSION):
        values["api_version"] = env_version
    if env_key := os.getenv(ENV_API_KEY):
        values["api_key"] = env_key
    if env_timeout := os.getenv(ENV_TIMEOUT):
        values["timeout"] = float(env_timeout)
    if env_refresh := os.getenv(ENV_IMPLICIT_REFRESH):
        values["implicit_session_refresh"] = _parse_bool(env_refresh)
    if env_log := os.getenv(ENV_LOG_LEVEL):
        values["log_level"] = env_log.upper()
    return values


def configure_logging(config: Config) -> logging.Logger:
    """
    Apply ``config.log_level`` to the package logger.

    Handlers are left to the host application; this only sets the level.

    Returns:
        logging.Logger: The ``dreamfactory`` logger.
    """
    logger = logging.getLogger("dreamfactory")
    logger.setLevel(config.log_level.upper())
    return logger
