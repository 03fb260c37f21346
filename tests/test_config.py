"""Tests for configuration loading."""

import pytest
import tempfile
from pathlib import Path
from forge_fsql.config import Config, ConfigError, load_config


def _write_config(text):
    with tempfile.NamedTemporaryFile(mode='w', suffix='.yaml', delete=False) as f:
        f.write(text)
        return f.name


def test_load_full_config():
    """Test loading every section."""
    config_path = _write_config("""
endpoint:
  url: https://example.net/x1/webtrigger
  timeout: 5
session:
  skip_schema_load: true
  history_file: ~/custom_history
  history_size: 50
logging:
  level: DEBUG
  structured: true
  file: /tmp/fsql.log
""")
    try:
        config = load_config(config_path)

        assert config.endpoint.url == "https://example.net/x1/webtrigger"
        assert config.endpoint.timeout == 5
        assert config.session.skip_schema_load is True
        assert config.session.history_size == 50
        assert config.session.history_path() == Path("~/custom_history").expanduser()
        assert config.logging.level == "DEBUG"
        assert config.logging.structured is True
        assert config.logging.file == "/tmp/fsql.log"
    finally:
        Path(config_path).unlink()


def test_load_minimal_config():
    """Test loading minimal configuration with defaults."""
    config_path = _write_config("""
endpoint:
  url: https://example.net/hook
""")
    try:
        config = load_config(config_path)

        assert config.endpoint.url == "https://example.net/hook"
        assert config.endpoint.timeout == 30.0
        assert config.session.skip_schema_load is False
        assert config.session.history_size == 1000
        assert config.logging.level == "WARNING"
    finally:
        Path(config_path).unlink()


def test_empty_config_gives_defaults():
    """An empty document is the default configuration."""
    config_path = _write_config("")
    try:
        assert load_config(config_path) == Config()
    finally:
        Path(config_path).unlink()


def test_missing_config_file():
    """A missing file raises FileNotFoundError."""
    with pytest.raises(FileNotFoundError):
        load_config("/nonexistent/fsql.yaml")


@pytest.mark.parametrize(
    "text, message",
    [
        ("- a\n- b\n", "must contain a mapping"),
        ("database:\n  host: x\n", "Unknown config sections: database"),
        ("endpoint: https://x\n", "'endpoint' must be a mapping"),
        ("session:\n  colour: red\n", "Unknown keys in 'session' section: colour"),
    ],
)
def test_invalid_config_shapes(text, message):
    """Malformed documents raise ConfigError."""
    config_path = _write_config(text)
    try:
        with pytest.raises(ConfigError, match=message):
            load_config(config_path)
    finally:
        Path(config_path).unlink()


def test_resolve_overrides_take_precedence():
    """Command-line values replace configured ones."""
    config = Config()
    config.endpoint.url = "https://from-file"
    resolved = config.resolve(
        url="https://from-cli",
        timeout=2.5,
        skip_schema_load=True,
        history_file="/tmp/h",
        log_level="INFO",
        log_file="/tmp/log",
    )

    assert resolved.endpoint.url == "https://from-cli"
    assert resolved.endpoint.timeout == 2.5
    assert resolved.session.skip_schema_load is True
    assert resolved.session.history_file == "/tmp/h"
    assert resolved.logging.level == "INFO"
    assert resolved.logging.file == "/tmp/log"
    assert config.endpoint.url == "https://from-file"


def test_resolve_without_overrides_keeps_config():
    """Unset overrides leave the configured values alone."""
    config = Config()
    config.endpoint.url = "https://from-file"
    config.session.skip_schema_load = True

    resolved = config.resolve()

    assert resolved == config
    assert resolved.session.skip_schema_load is True


@pytest.mark.parametrize(
    "timeout, message",
    [
        ("0", "must be greater than 0"),
        ("-5", "must be greater than 0"),
        ('"30"', "must be a number of seconds"),
        ("true", "must be a number of seconds"),
    ],
)
def test_invalid_endpoint_timeout(timeout, message):
    """Timeouts requests would refuse are rejected when the file is loaded."""
    config_path = _write_config(f"endpoint:\n  timeout: {timeout}\n")
    try:
        with pytest.raises(ConfigError, match=message):
            load_config(config_path)
    finally:
        Path(config_path).unlink()


def test_fractional_endpoint_timeout_is_accepted():
    """Sub-second timeouts are valid."""
    config_path = _write_config("endpoint:\n  timeout: 0.5\n")
    try:
        assert load_config(config_path).endpoint.timeout == 0.5
    finally:
        Path(config_path).unlink()
