"""Shared test helpers for records, configs and mocked HTTP transports."""

from collections.abc import Callable

import httpx

from marketpulse.models.config import MarketPulseConfig, ProviderConfig, RateLimitConfig, RetryConfig
from marketpulse.models.market import ListingRecord


def make_record(
    name: str,
    symbol: str | None = None,
    price: float = 1.0,
    market_cap: float | None = None,
    change_percent_24h: float | None = 0.0,
    volume: float | None = None,
    asset_class: str = "crypto",
    id: str | None = None,
    **kwargs,
) -> ListingRecord:
    symbol = symbol or name[:3].upper()
    return ListingRecord(
        id=id or name.lower().replace(" ", "-"),
        asset_class=asset_class,
        name=name,
        symbol=symbol,
        price=price,
        market_cap=market_cap,
        change_percent_24h=change_percent_24h,
        volume=volume,
        **kwargs,
    )


def make_records(n: int) -> list[ListingRecord]:
    """``n`` records with distinct names, prices and caps."""
    return [
        make_record(f"Coin {i:02d}", f"C{i:02d}", price=float(i + 1), market_cap=float((i + 1) * 1000))
        for i in range(n)
    ]


def provider_config(base_url: str) -> ProviderConfig:
    """Provider config with no rate limiting and a single attempt."""
    return ProviderConfig(
        base_url=base_url,
        api_key="test-key",
        rate_limit=RateLimitConfig(requests_per_second=0),
        retry=RetryConfig(max_attempts=1, initial_delay=0),
    )


def make_config() -> MarketPulseConfig:
    return MarketPulseConfig(
        coingecko=provider_config("https://api.coingecko.test/api/v3"),
        fmp=provider_config("https://fmp.test/api/v3"),
        alphavantage=provider_config("https://alphavantage.test"),
        stock_symbols=["AAPL", "MSFT"],
    )


def mock_transport(handler: Callable[[httpx.Request], httpx.Response]) -> httpx.MockTransport:
    return httpx.MockTransport(handler)


def json_response(payload, status_code: int = 200) -> httpx.Response:
    return httpx.Response(status_code, json=payload)
