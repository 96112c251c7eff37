"""Tests for configuration loading."""

import pytest
from pydantic import ValidationError

from marketpulse.config import get_config_path, load_config, load_config_file
from marketpulse.models.config import DEFAULT_STOCK_SYMBOLS, MarketPulseConfig


class TestMarketPulseConfig:
    def test_defaults(self):
        config = MarketPulseConfig()
        assert config.coingecko.base_url == "https://api.coingecko.com/api/v3"
        assert config.fmp.api_key == "demo"
        assert config.vs_currency == "usd"
        assert config.stock_symbols == DEFAULT_STOCK_SYMBOLS
        assert config.table.crypto_page_size == 10
        assert config.table.stocks_page_size == 5

    def test_from_yaml_merges_provider_overrides(self):
        data = {
            "coingecko": {"api_key": "cg-key", "rate_limit": {"requests_per_second": 1.0}},
            "stock_symbols": ["IBM"],
        }
        config = MarketPulseConfig.from_yaml(data)

        assert config.coingecko.api_key == "cg-key"
        assert config.coingecko.base_url == "https://api.coingecko.com/api/v3"
        assert config.coingecko.rate_limit.requests_per_second == 1.0
        assert config.coingecko.retry.max_attempts == 3
        assert config.stock_symbols == ["IBM"]
        assert config.vs_currency == "usd"

    def test_from_yaml_does_not_mutate_input(self):
        data = {"fmp": {"retry": {"max_attempts": 5}}}
        MarketPulseConfig.from_yaml(data)
        assert data == {"fmp": {"retry": {"max_attempts": 5}}}

    def test_from_yaml_empty_section(self):
        config = MarketPulseConfig.from_yaml({"alphavantage": None, "table": None})
        assert config.alphavantage.base_url == "https://www.alphavantage.co"
        assert config.table.crypto_page_size == 10

    def test_invalid_page_size(self):
        with pytest.raises(ValidationError):
            MarketPulseConfig.from_yaml({"table": {"crypto_page_size": 0}})


class TestLoadConfig:
    def test_sample_config_parses(self):
        config = MarketPulseConfig.from_yaml(load_config("marketpulse.sample"))
        assert config.alphavantage.base_url == "https://www.alphavantage.co"
        assert len(config.stock_symbols) == 20

    def test_missing_config_names_sample(self):
        with pytest.raises(FileNotFoundError, match="does-not-exist.sample.yaml"):
            load_config("does-not-exist")

    def test_load_config_file(self, tmp_path):
        path = tmp_path / "custom.yaml"
        path.write_text("vs_currency: eur\n")
        assert load_config_file(path) == {"vs_currency": "eur"}

    def test_load_empty_file(self, tmp_path):
        path = tmp_path / "empty.yaml"
        path.write_text("")
        assert load_config_file(path) == {}

    def test_load_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_config_file(tmp_path / "nope.yaml")

    def test_config_path(self):
        assert get_config_path("seeds").name == "seeds.yaml"
