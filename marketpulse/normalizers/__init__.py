"""Data normalizers for converting provider-specific payloads to unified models."""

from .coingecko import normalize_coingecko_chart, normalize_coingecko_coin, normalize_coingecko_market
from .stocks import (
    normalize_alphavantage_partial,
    normalize_alphavantage_profile,
    normalize_alphavantage_series,
    normalize_fmp_quote,
)

__all__ = [
    "normalize_coingecko_chart",
    "normalize_coingecko_coin",
    "normalize_coingecko_market",
    "normalize_alphavantage_partial",
    "normalize_alphavantage_profile",
    "normalize_alphavantage_series",
    "normalize_fmp_quote",
]
