"""Tests for configuration loading and validation."""

import dataclasses
import pytest

from trade_paginator.config.settings import (
    DEFAULT_BASE_URL,
    AppConfig,
    PaginationConfig,
    TransportConfig,
    load_config,
)


class TestPaginationConfig:

    def test_defaults(self):
        config = PaginationConfig()
        assert dataclasses.asdict(config) == {
            'max_retries': 4,
            'retry_delay_ms': 1000,
            'request_timeout_ms': 1000,
            'throttle_ms': 200,
        }

    def test_overrides_are_independent(self):
        config = PaginationConfig(max_retries=2, throttle_ms=10)
        assert config.max_retries == 2
        assert config.throttle_ms == 10
        assert config.retry_delay_ms == 1000
        assert config.request_timeout_ms == 1000

    def test_seconds_conversion(self):
        config = PaginationConfig(retry_delay_ms=100, throttle_ms=250)
        assert config.retry_delay_seconds == 0.1
        assert config.throttle_seconds == 0.25

    def test_immutable(self):
        config = PaginationConfig()
        with pytest.raises(dataclasses.FrozenInstanceError):
            config.max_retries = 10

    @pytest.mark.parametrize("kwargs", [
        {'max_retries': 0},
        {'retry_delay_ms': -1},
        {'request_timeout_ms': -5},
        {'throttle_ms': -1},
        {'max_retries': True},
        {'throttle_ms': 1.5},
    ])
    def test_validation(self, kwargs):
        with pytest.raises(ValueError):
            PaginationConfig(**kwargs)


class TestTransportConfig:

    def test_defaults(self):
        config = TransportConfig()
        assert config.base_url == DEFAULT_BASE_URL
        assert config.start_cursor == 770000

    def test_string_cursor_is_converted(self):
        assert TransportConfig(start_cursor="3706").start_cursor == 3706

    def test_negative_cursor_rejected(self):
        with pytest.raises(ValueError):
            TransportConfig(start_cursor=-1)

    def test_empty_base_url_rejected(self):
        with pytest.raises(ValueError):
            TransportConfig(base_url="")


class TestLoadConfig:

    def test_no_file_gives_defaults(self):
        assert load_config(None) == AppConfig()

    def test_load_yaml(self, tmp_path):
        config_file = tmp_path / "config.yaml"
        config_file.write_text(
            "transport:\n"
            "  base_url: https://example.com/api/trades/\n"
            "  start_cursor: 10\n"
            "pagination:\n"
            "  max_retries: 2\n"
            "  throttle_ms: 5\n"
            "logging:\n"
            "  level: DEBUG\n"
            "  format: json\n"
        )

        config = load_config(str(config_file))

        assert config.transport.base_url == "https://example.com/api/trades/"
        assert config.transport.start_cursor == 10
        assert config.pagination == PaginationConfig(max_retries=2, throttle_ms=5)
        assert config.logging.level == "DEBUG"
        assert config.logging.format == "json"
        assert config.logging.output == "stdout"

    def test_env_substitution(self, tmp_path, monkeypatch):
        monkeypatch.setenv("TEST_TRADES_URL", "https://env.example.com/trades/")
        monkeypatch.delenv("TEST_MAX_RETRIES", raising=False)
        monkeypatch.delenv("TEST_START", raising=False)
        config_file = tmp_path / "config.yaml"
        config_file.write_text(
            "transport:\n"
            "  base_url: ${TEST_TRADES_URL}\n"
            "  start_cursor: ${TEST_START:42}\n"
            "pagination:\n"
            "  max_retries: ${TEST_MAX_RETRIES:7}\n"
        )

        config = load_config(str(config_file))

        assert config.transport.base_url == "https://env.example.com/trades/"
        assert config.transport.start_cursor == 42
        assert config.pagination.max_retries == 7

    def test_empty_file(self, tmp_path):
        config_file = tmp_path / "empty.yaml"
        config_file.write_text("")
        assert load_config(str(config_file)) == AppConfig()

    def test_invalid_values_rejected(self, tmp_path):
        config_file = tmp_path / "config.yaml"
        config_file.write_text("pagination:\n  max_retries: 0\n")
        with pytest.raises(ValueError):
            load_config(str(config_file))
