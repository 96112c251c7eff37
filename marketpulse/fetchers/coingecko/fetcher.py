"""Crypto listings, profiles and price history with fallback data."""

import logging
from typing import Any

from marketpulse.fetchers.base import MalformedResponse, MarketDataError, NotFound
from marketpulse.fetchers.fallback import (
    CRYPTO_RANGE_DAYS,
    DEFAULT_CRYPTO_RANGE,
    FALLBACK_ADVISORY,
    SERIES_ADVISORY,
    fallback_crypto_listings,
    fallback_crypto_profile,
    fallback_series,
)
from marketpulse.models.config import MarketPulseConfig
from marketpulse.models.market import DetailRecord, ListingRecord, PricePoint
from marketpulse.models.raw import RawCoinGeckoCoin, RawCoinGeckoMarket, RawCoinGeckoMarketChart
from marketpulse.models.view import FetchResult
from marketpulse.normalizers.coingecko import (
    normalize_coingecko_chart,
    normalize_coingecko_coin,
    normalize_coingecko_market,
)

from .client import CoinGeckoClient


logger = logging.getLogger(__name__)


class CryptoFetcher:
    """Fetch-and-fallback boundary for the crypto views.

    Every method resolves to displayable data. Provider failures are replaced
    with sample data plus an advisory; only ``NotFound`` from
    ``fetch_detail`` propagates.
    """

    range_days = CRYPTO_RANGE_DAYS
    default_range = DEFAULT_CRYPTO_RANGE

    # Maximum row errors to log individually
    MAX_ERROR_SAMPLES = 10

    def __init__(self, config: MarketPulseConfig, client: CoinGeckoClient | None = None):
        self.config = config
        self.client = client or CoinGeckoClient(config.coingecko)

    def close(self) -> None:
        """Close resources."""
        self.client.close()

    def __enter__(self) -> "CryptoFetcher":
        return self

    def __exit__(self, *args: Any) -> None:
        self.close()

    def _parse_markets(self, rows: list[dict[str, Any]]) -> list[ListingRecord]:
        records = []
        errors = 0
        for row in rows:
            try:
                records.append(normalize_coingecko_market(RawCoinGeckoMarket.model_validate(row)))
            except ValueError as e:
                errors += 1
                if errors <= self.MAX_ERROR_SAMPLES:
                    row_id = row.get("id", "?") if isinstance(row, dict) else "?"
                    logger.warning(f"Skipping market row {row_id}: {e}")

        if rows and not records:
            raise MalformedResponse(f"None of {len(rows)} market rows could be parsed")

        return records

    def fetch_listings(self, page: int = 1) -> FetchResult[list[ListingRecord]]:
        """Fetch the market overview table."""
        try:
            rows = self.client.fetch_markets(
                page=page,
                per_page=self.config.table.listing_page_size,
                vs_currency=self.config.vs_currency,
            )
            if not rows:
                raise MalformedResponse("Empty market listing")
            records = self._parse_markets(rows)
        except MarketDataError as e:
            logger.warning(f"Crypto listings unavailable ({e}); using fallback data")
            return FetchResult(fallback_crypto_listings(), FALLBACK_ADVISORY, is_fallback=True)

        logger.info(f"Fetched {len(records)} crypto listings")
        return FetchResult(records)

    def fetch_detail(self, coin_id: str) -> FetchResult[DetailRecord]:
        """Fetch one coin profile.

        Raises:
            NotFound: If CoinGecko does not know ``coin_id``
        """
        try:
            data = self.client.fetch_coin(coin_id)
            try:
                record = normalize_coingecko_coin(
                    RawCoinGeckoCoin.model_validate(data), self.config.vs_currency
                )
            except ValueError as e:
                raise MalformedResponse(f"Invalid coin payload: {e}") from e
        except NotFound:
            logger.info(f"Coin not found: {coin_id}")
            raise
        except MarketDataError as e:
            logger.warning(f"Coin profile for {coin_id} unavailable ({e}); using fallback data")
            return FetchResult(fallback_crypto_profile(coin_id), FALLBACK_ADVISORY, is_fallback=True)

        return FetchResult(record)

    def fetch_series(self, coin_id: str, range_key: str) -> FetchResult[list[PricePoint]]:
        """Fetch the price history for a detail-view range ('1' .. '365', 'max')."""
        try:
            data = self.client.fetch_market_chart(coin_id, range_key, self.config.vs_currency)
            try:
                points = normalize_coingecko_chart(RawCoinGeckoMarketChart.model_validate(data))
            except ValueError as e:
                raise MalformedResponse(f"Invalid market chart: {e}") from e
            if not points:
                raise MalformedResponse("Empty price series")
        except MarketDataError as e:
            logger.warning(f"Price history for {coin_id} unavailable ({e}); simulating")
            points = fallback_series(range_key, self.range_days, self.default_range)
            return FetchResult(points, SERIES_ADVISORY, is_fallback=True)

        logger.debug(f"Fetched {len(points)} price points for {coin_id} ({range_key})")
        return FetchResult(points)
