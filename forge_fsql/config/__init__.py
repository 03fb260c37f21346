"""Configuration management."""

from .config import (
    Config,
    ConfigError,
    EndpointConfig,
    SessionConfig,
    LoggingConfig,
    URL_ENV_VAR,
    load_config,
)

__all__ = [
    "Config",
    "ConfigError",
    "EndpointConfig",
    "SessionConfig",
    "LoggingConfig",
    "URL_ENV_VAR",
    "load_config",
]
