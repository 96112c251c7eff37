"""Equity (FMP / Alpha Vantage) fetcher module."""

from .client import AlphaVantageClient, FmpClient
from .fetcher import StockFetcher

__all__ = ["AlphaVantageClient", "FmpClient", "StockFetcher"]
