"""Equity record normalization (Financial Modeling Prep, Alpha Vantage)."""

import calendar
from datetime import date, datetime, time, timezone

from marketpulse.fetchers.fallback import company_name, company_sector, sample_description
from marketpulse.models.market import DetailRecord, ListingRecord, PricePoint
from marketpulse.models.raw import (
    RawAlphaVantageDailySeries,
    RawAlphaVantageOverview,
    RawAlphaVantageQuote,
    RawFmpQuote,
)


# Months covered by each detail-view range
RANGE_MONTHS = {
    "1month": 1,
    "3months": 3,
    "6months": 6,
    "1year": 12,
    "5years": 60,
}

# Alpha Vantage placeholders for missing values
_MISSING = {"", "none", "-", "n/a", "null"}


def _parse_float(value: str | None) -> float | None:
    if value is None or value.strip().lower() in _MISSING:
        return None
    try:
        return float(value)
    except ValueError:
        return None


def _parse_int(value: str | None) -> int | None:
    parsed = _parse_float(value)
    return int(parsed) if parsed is not None else None


def _text(value: str | None) -> str | None:
    if value is None or value.strip().lower() in _MISSING:
        return None
    return value


def normalize_fmp_quote(raw: RawFmpQuote) -> ListingRecord:
    """Normalize an FMP quote row to a ListingRecord.

    Raises:
        ValueError: If the row carries no price
    """
    if raw.price is None:
        raise ValueError(f"Cannot extract price from record: {raw.symbol}")

    return ListingRecord(
        id=raw.symbol,
        asset_class="stock",
        name=raw.name or company_name(raw.symbol),
        symbol=raw.symbol,
        price=raw.price,
        change=raw.change,
        change_percent_24h=raw.changesPercentage,
        market_cap=raw.marketCap,
        volume=raw.volume,
        sector=raw.sector or "N/A",
    )


def normalize_alphavantage_profile(
    quote: RawAlphaVantageQuote,
    overview: RawAlphaVantageOverview,
) -> DetailRecord:
    """Combine a live quote and company overview into a DetailRecord."""
    symbol = overview.Symbol.upper()
    name = _text(overview.Name) or company_name(symbol)
    low = _parse_float(overview.WeekLow52)
    high = _parse_float(overview.WeekHigh52)

    return DetailRecord(
        id=symbol,
        asset_class="stock",
        name=name,
        symbol=symbol,
        price=quote.price,
        change=quote.change,
        change_percent_24h=quote.change_percent_value,
        market_cap=_parse_float(overview.MarketCapitalization),
        volume=quote.volume,
        sector=_text(overview.Sector) or company_sector(symbol),
        industry=_text(overview.Industry) or "N/A",
        exchange=_text(overview.Exchange) or "N/A",
        description=_text(overview.Description) or f"No description available for {name}.",
        ceo="N/A",
        website=_text(overview.OfficialSite) or "N/A",
        employees=_parse_int(overview.FullTimeEmployees) or 0,
        beta=_parse_float(overview.Beta) or 1.0,
        avg_volume=quote.volume,
        last_dividend=_parse_float(overview.DividendYield) or 0.0,
        range_52w=f"{low:.2f} - {high:.2f}" if low is not None and high is not None else "N/A",
        last_updated=datetime.now(timezone.utc),
    )


def normalize_alphavantage_partial(symbol: str, quote: RawAlphaVantageQuote) -> DetailRecord:
    """Build a DetailRecord from a live quote plus sample company metadata.

    Used when the overview endpoint is rate-limited but the quote succeeded.
    """
    upper = symbol.upper()
    name = company_name(upper)
    sector = company_sector(upper)

    return DetailRecord(
        id=upper,
        asset_class="stock",
        name=name,
        symbol=upper,
        price=quote.price,
        change=quote.change,
        change_percent_24h=quote.change_percent_value,
        market_cap=None,
        volume=quote.volume,
        sector=sector,
        industry=sector,
        exchange="NASDAQ",
        description=sample_description(name, "stock"),
        ceo="N/A",
        website="https://example.com",
        employees=0,
        beta=1.0,
        avg_volume=quote.volume,
        last_dividend=0.0,
        range_52w="N/A",
        last_updated=datetime.now(timezone.utc),
    )


def subtract_months(day: date, months: int) -> date:
    """Same day ``months`` earlier, clamped to the end of shorter months."""
    month_index = day.year * 12 + (day.month - 1) - months
    year, month = divmod(month_index, 12)
    month += 1
    last_day = calendar.monthrange(year, month)[1]
    return date(year, month, min(day.day, last_day))


def range_cutoff(range_key: str, today: date | None = None) -> date:
    """Earliest date included in ``range_key``; unknown ranges mean one year."""
    today = today or datetime.now(timezone.utc).date()
    return subtract_months(today, RANGE_MONTHS.get(range_key, 12))


def normalize_alphavantage_series(
    raw: RawAlphaVantageDailySeries,
    range_key: str,
    today: date | None = None,
) -> list[PricePoint]:
    """Convert ``Time Series (Daily)`` to closing prices within the range.

    Raises:
        ValueError: If a row has no parsable close
    """
    cutoff = range_cutoff(range_key, today)
    points = []

    for day in sorted(raw.root):
        if day < cutoff:
            continue
        close = _parse_float(raw.root[day].close)
        if close is None:
            raise ValueError(f"Missing close for {day.isoformat()}")
        points.append(
            PricePoint(
                timestamp=datetime.combine(day, time.min, tzinfo=timezone.utc),
                price=close,
            )
        )

    return points
