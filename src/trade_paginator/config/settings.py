"""Configuration settings for the trade paginator."""

import os
import yaml
from dataclasses import dataclass, field
from typing import Any, Dict, Optional


DEFAULT_BASE_URL = "https://www.mercadobitcoin.net/api/BTC/trades/"
DEFAULT_START_CURSOR = 770000


def _check_int(name: str, value: Any, minimum: int) -> None:
    # bool is an int subclass; reject it explicitly
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValueError(f"{name} must be an integer, got {value!r}")
    if value < minimum:
        raise ValueError(f"{name} must be >= {minimum}, got {value}")


@dataclass(frozen=True)
class PaginationConfig:
    """Retry, timeout and throttle settings owned by one Paginator."""
    max_retries: int = 4
    retry_delay_ms: int = 1000
    request_timeout_ms: int = 1000
    throttle_ms: int = 200

    def __post_init__(self):
        _check_int("max_retries", self.max_retries, 1)
        _check_int("retry_delay_ms", self.retry_delay_ms, 0)
        _check_int("request_timeout_ms", self.request_timeout_ms, 0)
        _check_int("throttle_ms", self.throttle_ms, 0)

    @property
    def retry_delay_seconds(self) -> float:
        return self.retry_delay_ms / 1000.0

    @property
    def throttle_seconds(self) -> float:
        return self.throttle_ms / 1000.0


@dataclass
class TransportConfig:
    """HTTP endpoint configuration."""
    base_url: str = DEFAULT_BASE_URL
    start_cursor: int = DEFAULT_START_CURSOR
    user_agent: str = "trade-paginator/1.0"

    def __post_init__(self):
        if not self.base_url:
            raise ValueError("base_url must not be empty")
        # values coming from env substitution arrive as strings
        if isinstance(self.start_cursor, str):
            self.start_cursor = int(self.start_cursor)
        _check_int("start_cursor", self.start_cursor, 0)


@dataclass
class LoggingConfig:
    """Logging configuration."""
    level: str = "INFO"
    format: str = "text"
    output: str = "stdout"


@dataclass
class AppConfig:
    """Main configuration for the trade paginator."""
    transport: TransportConfig = field(default_factory=TransportConfig)
    pagination: PaginationConfig = field(default_factory=PaginationConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)


def load_config(config_file: Optional[str] = None) -> AppConfig:
    """
    Load configuration from a YAML file.

    Missing sections (or a missing file when ``config_file`` is None) fall
    back to the dataclass defaults.
    """
    config_data: Dict[str, Any] = {}

    if config_file is not None:
        with open(config_file, 'r') as f:
            config_data = yaml.safe_load(f) or {}

    # Environment variable substitution
    config_data = _substitute_env_vars(config_data)

    pagination_data = {
        key: _coerce_int(value)
        for key, value in (config_data.get('pagination') or {}).items()
    }

    return AppConfig(
        transport=TransportConfig(**(config_data.get('transport') or {})),
        pagination=PaginationConfig(**pagination_data),
        logging=LoggingConfig(**(config_data.get('logging') or {})),
    )


def _coerce_int(value):
    if isinstance(value, str) and value.strip().lstrip('-').isdigit():
        return int(value)
    return value


def _substitute_env_vars(data):
    """Recursively substitute environment variables in configuration."""
    if isinstance(data, dict):
        return {key: _substitute_env_vars(value) for key, value in data.items()}
    elif isinstance(data, list):
        return [_substitute_env_vars(item) for item in data]
    elif isinstance(data, str) and data.startswith('${') and data.endswith('}'):
        # Extract environment variable name and default value
        env_spec = data[2:-1]

        if ':' in env_spec:
            env_name, default_value = env_spec.split(':', 1)
        else:
            env_name, default_value = env_spec, None

        return os.getenv(env_name, default_value)
    else:
        return data
