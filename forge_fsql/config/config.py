"""Configuration management for the fsql session."""

from dataclasses import dataclass, field, fields, replace
from typing import Any, Optional, Type
import yaml
from pathlib import Path

URL_ENV_VAR = "FORGE_SQL_WEBTRIGGER"
DEFAULT_HISTORY_FILE = "~/.forge_sql_history"


class ConfigError(ValueError):
    """Raised when a configuration file has an invalid shape."""


@dataclass
class EndpointConfig:
    """Remote query endpoint settings."""

    url: Optional[str] = None
    timeout: float = 30.0  # seconds


@dataclass
class SessionConfig:
    """Interactive session settings."""

    skip_schema_load: bool = False
    history_file: str = DEFAULT_HISTORY_FILE
    history_size: int = 1000

    def history_path(self) -> Path:
        return Path(self.history_file).expanduser()


@dataclass
class LoggingConfig:
    """Logging settings."""

    level: str = "WARNING"
    structured: bool = False
    file: Optional[str] = None


@dataclass
class Config:
    """Main configuration class."""

    endpoint: EndpointConfig = field(default_factory=EndpointConfig)
    session: SessionConfig = field(default_factory=SessionConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    def resolve(
        self,
        url: Optional[str] = None,
        timeout: Optional[float] = None,
        skip_schema_load: bool = False,
        history_file: Optional[str] = None,
        log_level: Optional[str] = None,
        log_file: Optional[str] = None,
    ) -> "Config":
        """Return a copy with command-line overrides applied.

        ``None`` leaves the configured value in place; ``skip_schema_load``
        can only switch preloading off, never back on.
        """
        endpoint = replace(
            self.endpoint,
            url=url if url is not None else self.endpoint.url,
            timeout=timeout if timeout is not None else self.endpoint.timeout,
        )
        session = replace(
            self.session,
            skip_schema_load=skip_schema_load or self.session.skip_schema_load,
            history_file=history_file or self.session.history_file,
        )
        logging_config = replace(
            self.logging,
            level=log_level or self.logging.level,
            file=log_file or self.logging.file,
        )
        return Config(endpoint=endpoint, session=session, logging=logging_config)


def load_config(config_path: str) -> Config:
    """Load configuration from YAML file.

    Args:
        config_path: Path to YAML configuration file

    Returns:
        Parsed configuration

    Example YAML format:
        endpoint:
          url: https://example.atlassian-dev.net/x1/webtrigger
          timeout: 30

        session:
          skip_schema_load: false
          history_file: ~/.forge_sql_history
          history_size: 1000

        logging:
          level: INFO
          structured: false
          file: /tmp/fsql.log
    """
    path = Path(config_path)
    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    with open(path, "r") as f:
        data = yaml.safe_load(f)

    if data is None:
        return Config()
    if not isinstance(data, dict):
        raise ConfigError(f"Config file must contain a mapping: {config_path}")

    unknown = set(data) - {"endpoint", "session", "logging"}
    if unknown:
        raise ConfigError(f"Unknown config sections: {', '.join(sorted(unknown))}")

    endpoint = _build_section(EndpointConfig, "endpoint", data.get("endpoint"))
    _validate_timeout(endpoint.timeout)
    session = _build_section(SessionConfig, "session", data.get("session"))
    logging_config = _build_section(LoggingConfig, "logging", data.get("logging"))

    return Config(endpoint=endpoint, session=session, logging=logging_config)


def _build_section(section_cls: Type, name: str, section_data: Any):
    if section_data is None:
        return section_cls()
    if not isinstance(section_data, dict):
        raise ConfigError(f"Config section '{name}' must be a mapping")

    allowed = {f.name for f in fields(section_cls)}
    unknown = set(section_data) - allowed
    if unknown:
        raise ConfigError(
            f"Unknown keys in '{name}' section: {', '.join(sorted(unknown))}"
        )

    return section_cls(**section_data)


def _validate_timeout(timeout: Any) -> None:
    # requests rejects non-numeric and non-positive timeouts at send time
    if isinstance(timeout, bool) or not isinstance(timeout, (int, float)):
        raise ConfigError(f"endpoint.timeout must be a number of seconds, got {timeout!r}")
    if timeout <= 0:
        raise ConfigError(f"endpoint.timeout must be greater than 0, got {timeout}")
