"""Data models for market listings, detail views and configuration."""

from .market import AssetClass, DetailRecord, ListingRecord, PricePoint
from .raw import (
    RawAlphaVantageOverview,
    RawAlphaVantageDailySeries,
    RawAlphaVantageQuote,
    RawCoinGeckoCoin,
    RawCoinGeckoMarket,
    RawCoinGeckoMarketChart,
    RawFmpQuote,
)
from .view import (
    DetailStatus,
    DetailViewState,
    FetchResult,
    PageLink,
    PageWindow,
    SortDirective,
    TablePage,
    TableState,
)
from .config import MarketPulseConfig, ProviderConfig, RateLimitConfig, RetryConfig, TableConfig

__all__ = [
    "AssetClass",
    "DetailRecord",
    "ListingRecord",
    "PricePoint",
    "RawAlphaVantageOverview",
    "RawAlphaVantageDailySeries",
    "RawAlphaVantageQuote",
    "RawCoinGeckoCoin",
    "RawCoinGeckoMarket",
    "RawCoinGeckoMarketChart",
    "RawFmpQuote",
    "DetailStatus",
    "DetailViewState",
    "FetchResult",
    "PageLink",
    "PageWindow",
    "SortDirective",
    "TablePage",
    "TableState",
    "MarketPulseConfig",
    "ProviderConfig",
    "RateLimitConfig",
    "RetryConfig",
    "TableConfig",
]
