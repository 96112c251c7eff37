"""Equity listings, profiles and price history with fallback data."""

import logging
from typing import Any

from marketpulse.fetchers.base import MalformedResponse, MarketDataError, NotFound
from marketpulse.fetchers.fallback import (
    DEFAULT_STOCK_RANGE,
    FALLBACK_ADVISORY,
    PARTIAL_ADVISORY,
    SERIES_ADVISORY,
    STOCK_RANGE_DAYS,
    fallback_series,
    fallback_stock_listings,
    fallback_stock_profile,
)
from marketpulse.models.config import MarketPulseConfig
from marketpulse.models.market import DetailRecord, ListingRecord, PricePoint
from marketpulse.models.raw import (
    RawAlphaVantageDailySeries,
    RawAlphaVantageOverview,
    RawAlphaVantageQuote,
    RawFmpQuote,
)
from marketpulse.models.view import FetchResult
from marketpulse.normalizers.stocks import (
    normalize_alphavantage_partial,
    normalize_alphavantage_profile,
    normalize_alphavantage_series,
    normalize_fmp_quote,
)

from .client import AlphaVantageClient, FmpClient


logger = logging.getLogger(__name__)


class StockFetcher:
    """Fetch-and-fallback boundary for the equity views.

    Listings come from FMP; profiles and history from Alpha Vantage.
    """

    range_days = STOCK_RANGE_DAYS
    default_range = DEFAULT_STOCK_RANGE

    # Ranges that need Alpha Vantage's full history rather than the last 100 days
    FULL_HISTORY_RANGES = ("1year", "5years")

    def __init__(
        self,
        config: MarketPulseConfig,
        quotes_client: FmpClient | None = None,
        profile_client: AlphaVantageClient | None = None,
    ):
        self.config = config
        self.quotes_client = quotes_client or FmpClient(config.fmp)
        self.profile_client = profile_client or AlphaVantageClient(config.alphavantage)

    def close(self) -> None:
        """Close resources."""
        self.quotes_client.close()
        self.profile_client.close()

    def __enter__(self) -> "StockFetcher":
        return self

    def __exit__(self, *args: Any) -> None:
        self.close()

    def fetch_listings(self) -> FetchResult[list[ListingRecord]]:
        """Fetch quotes for the configured symbol list."""
        try:
            rows = self.quotes_client.fetch_quotes(self.config.stock_symbols)
            if not rows:
                raise MalformedResponse("Empty quote list")

            records = []
            for row in rows:
                try:
                    records.append(normalize_fmp_quote(RawFmpQuote.model_validate(row)))
                except ValueError as e:
                    logger.warning(f"Skipping quote row: {e}")

            if not records:
                raise MalformedResponse(f"None of {len(rows)} quote rows could be parsed")
        except MarketDataError as e:
            logger.warning(f"Stock quotes unavailable ({e}); using fallback data")
            return FetchResult(fallback_stock_listings(), FALLBACK_ADVISORY, is_fallback=True)

        logger.info(f"Fetched {len(records)} stock quotes")
        return FetchResult(records)

    def fetch_detail(self, symbol: str) -> FetchResult[DetailRecord]:
        """Fetch a company profile.

        A live quote with a throttled overview yields a partial profile.

        Raises:
            NotFound: If Alpha Vantage returns an empty quote for ``symbol``
        """
        try:
            raw_quote = self.profile_client.fetch_global_quote(symbol)
            try:
                quote = RawAlphaVantageQuote.model_validate(raw_quote)
            except ValueError as e:
                raise MalformedResponse(f"Invalid quote payload: {e}") from e
        except NotFound:
            logger.info(f"Stock not found: {symbol}")
            raise
        except MarketDataError as e:
            logger.warning(f"Quote for {symbol} unavailable ({e}); using fallback data")
            return FetchResult(fallback_stock_profile(symbol), FALLBACK_ADVISORY, is_fallback=True)

        try:
            overview = RawAlphaVantageOverview.model_validate(
                self.profile_client.fetch_overview(symbol)
            )
        except (MarketDataError, ValueError) as e:
            logger.warning(f"Overview for {symbol} unavailable ({e}); using partial data")
            return FetchResult(
                normalize_alphavantage_partial(symbol, quote), PARTIAL_ADVISORY, is_fallback=True
            )

        return FetchResult(normalize_alphavantage_profile(quote, overview))

    def fetch_series(self, symbol: str, range_key: str) -> FetchResult[list[PricePoint]]:
        """Fetch daily closes for a detail-view range ('1month' .. '5years')."""
        outputsize = "full" if range_key in self.FULL_HISTORY_RANGES else "compact"

        try:
            series = self.profile_client.fetch_daily_series(symbol, outputsize)
            try:
                points = normalize_alphavantage_series(
                    RawAlphaVantageDailySeries.model_validate(series), range_key
                )
            except ValueError as e:
                raise MalformedResponse(f"Invalid daily series: {e}") from e
            if not points:
                raise MalformedResponse(f"No data points within {range_key}")
        except MarketDataError as e:
            logger.warning(f"Price history for {symbol} unavailable ({e}); simulating")
            points = fallback_series(range_key, self.range_days, self.default_range)
            return FetchResult(points, SERIES_ADVISORY, is_fallback=True)

        logger.debug(f"Fetched {len(points)} price points for {symbol} ({range_key})")
        return FetchResult(points)
