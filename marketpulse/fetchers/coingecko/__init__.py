"""CoinGecko (cryptocurrency) fetcher module."""

from .client import CoinGeckoClient
from .fetcher import CryptoFetcher

__all__ = ["CoinGeckoClient", "CryptoFetcher"]
