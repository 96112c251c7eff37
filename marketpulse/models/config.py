"""Configuration models for provider clients and table views."""

from typing import Any

from pydantic import BaseModel, Field


class RateLimitConfig(BaseModel):
    """Rate limiting configuration."""

    requests_per_second: float = Field(default=2.0, ge=0.0, le=10.0)


class RetryConfig(BaseModel):
    """Retry configuration."""

    max_attempts: int = Field(default=3, ge=1, le=10)
    backoff_multiplier: float = Field(default=2.0, ge=1.0)
    initial_delay: float = Field(default=1.0, ge=0.0)


class ProviderConfig(BaseModel):
    """Connection settings for a single market-data provider."""

    base_url: str
    api_key: str | None = Field(default=None)
    headers: dict[str, str] = Field(default_factory=dict)
    rate_limit: RateLimitConfig = Field(default_factory=RateLimitConfig)
    retry: RetryConfig = Field(default_factory=RetryConfig)
    timeout: float = Field(default=15.0, ge=1.0)


class TableConfig(BaseModel):
    """Default table settings per view."""

    crypto_page_size: int = Field(default=10, ge=1)
    stocks_page_size: int = Field(default=5, ge=1)
    page_size_options: list[int] = Field(default_factory=lambda: [5, 10, 20, 50])
    listing_page_size: int = Field(default=100, ge=1, le=250)


DEFAULT_STOCK_SYMBOLS = [
    "AAPL", "MSFT", "GOOGL", "AMZN", "TSLA", "META", "NVDA", "JPM", "V", "WMT",
    "PG", "JNJ", "UNH", "HD", "MA", "BAC", "PFE", "CSCO", "ADBE", "CRM",
]


class MarketPulseConfig(BaseModel):
    """Top-level dashboard configuration."""

    coingecko: ProviderConfig = Field(
        default_factory=lambda: ProviderConfig(
            base_url="https://api.coingecko.com/api/v3",
            rate_limit=RateLimitConfig(requests_per_second=0.5),
        )
    )
    fmp: ProviderConfig = Field(
        default_factory=lambda: ProviderConfig(
            base_url="https://financialmodelingprep.com/api/v3",
            api_key="demo",
        )
    )
    alphavantage: ProviderConfig = Field(
        default_factory=lambda: ProviderConfig(
            base_url="https://www.alphavantage.co",
            api_key="demo",
            rate_limit=RateLimitConfig(requests_per_second=0.2),
        )
    )
    vs_currency: str = Field(default="usd")
    stock_symbols: list[str] = Field(default_factory=lambda: list(DEFAULT_STOCK_SYMBOLS))
    table: TableConfig = Field(default_factory=TableConfig)

    @classmethod
    def from_yaml(cls, data: dict[str, Any]) -> "MarketPulseConfig":
        """Create config from parsed YAML data.

        Provider sections are merged over the built-in defaults so a config
        file only needs to name the values it changes.
        """
        defaults = cls()
        config_data: dict[str, Any] = {
            "vs_currency": data.get("vs_currency"),
            "stock_symbols": data.get("stock_symbols"),
        }

        for provider in ("coingecko", "fmp", "alphavantage"):
            if provider in data:
                base = getattr(defaults, provider).model_dump()
                override = dict(data[provider] or {})
                for nested in ("rate_limit", "retry"):
                    if nested in override:
                        base[nested] = {**base[nested], **override.pop(nested)}
                base.update(override)
                config_data[provider] = ProviderConfig(**base)

        if "table" in data:
            config_data["table"] = TableConfig(**(data["table"] or {}))

        # Filter out None values
        config_data = {k: v for k, v in config_data.items() if v is not None}

        return cls(**config_data)
