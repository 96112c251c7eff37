"""Synthetic data substituted when a provider fails.

Known identifiers get the fixed values from ``config/seeds.yaml``; anything
else gets pseudo-random values within plausible ranges.
"""

import logging
import random
from datetime import date, datetime, time, timedelta, timezone
from functools import lru_cache
from typing import Any

from marketpulse.config import load_config
from marketpulse.models.market import DetailRecord, ListingRecord, PricePoint


logger = logging.getLogger(__name__)


FALLBACK_ADVISORY = "API access limited. Using sample data for demonstration purposes."
PARTIAL_ADVISORY = "Limited API data available. Using partial real data with some sample data."
SERIES_ADVISORY = "Historical data unavailable. Showing a simulated price series."

FALLBACK_BASE_PRICE = 150.0
FALLBACK_VOLATILITY = 0.02

# Detail-view ranges and the number of days each one covers
STOCK_RANGE_DAYS = {
    "1month": 30,
    "3months": 90,
    "6months": 180,
    "1year": 365,
    "5years": 1825,
}
DEFAULT_STOCK_RANGE = "1year"

CRYPTO_RANGE_DAYS = {
    "1": 1,
    "7": 7,
    "30": 30,
    "90": 90,
    "180": 180,
    "365": 365,
    "max": 1825,
}
DEFAULT_CRYPTO_RANGE = "365"


@lru_cache(maxsize=1)
def load_seeds() -> dict[str, Any]:
    """Load the fallback seed table."""
    return load_config("seeds")


def _rng_for(identifier: str, known: bool) -> random.Random:
    """Deterministic generator for known identifiers, fresh one otherwise."""
    return random.Random(identifier) if known else random.Random()


def generate_price_series(
    days: int,
    base_price: float = FALLBACK_BASE_PRICE,
    volatility: float = FALLBACK_VOLATILITY,
    *,
    rng: random.Random | None = None,
    end: date | None = None,
) -> list[PricePoint]:
    """Bounded random walk with one point per day over ``[end - days, end]``.

    Both ends are inclusive, so ``days=30`` yields 31 points. Each step moves
    the price by at most ``volatility / 2`` of its current value, which keeps
    every price positive.
    """
    if days < 0:
        raise ValueError(f"days must be non-negative, got {days}")

    rng = rng or random.Random()
    end = end or datetime.now(timezone.utc).date()
    price = base_price
    points = []

    for offset in range(days, -1, -1):
        day = end - timedelta(days=offset)
        price += price * volatility * (rng.random() - 0.5)
        points.append(
            PricePoint(
                timestamp=datetime.combine(day, time.min, tzinfo=timezone.utc),
                price=price,
            )
        )

    return points


def fallback_stock_listings() -> list[ListingRecord]:
    """Fixed listing table for the stock overview."""
    seeds = load_seeds()["stocks"]["listings"]
    return [
        ListingRecord(
            id=symbol,
            asset_class="stock",
            name=row["name"],
            symbol=symbol,
            price=row["price"],
            change=row["change"],
            change_percent_24h=row["change_percent"],
            market_cap=row["market_cap"],
            volume=row["volume"],
            sector=row["sector"],
        )
        for symbol, row in seeds.items()
    ]


def fallback_crypto_listings() -> list[ListingRecord]:
    """Fixed listing table for the crypto overview."""
    seeds = load_seeds()["crypto"]["listings"]
    return [
        ListingRecord(
            id=coin_id,
            asset_class="crypto",
            name=row["name"],
            symbol=row["symbol"].upper(),
            price=row["price"],
            change_percent_24h=row["change_percent"],
            market_cap=row["market_cap"],
            volume=row["volume"],
        )
        for coin_id, row in seeds.items()
    ]


def company_name(symbol: str) -> str:
    """Known company name for a ticker, or a generic '<SYMBOL> Inc.'."""
    companies = load_seeds()["stocks"]["companies"]
    upper = symbol.upper()
    if upper in companies:
        return companies[upper]["name"]
    return f"{upper} Inc."


def company_sector(symbol: str) -> str:
    """Known sector for a ticker, or the default sector."""
    stocks = load_seeds()["stocks"]
    company = stocks["companies"].get(symbol.upper())
    if company:
        return company["sector"]
    return stocks["defaults"]["sector"]


def sample_description(name: str, asset_class: str = "stock") -> str:
    section = "stocks" if asset_class == "stock" else "crypto"
    return load_seeds()[section]["defaults"]["description"].format(name=name)


def fallback_stock_profile(symbol: str, rng: random.Random | None = None) -> DetailRecord:
    """Complete placeholder profile for a ticker.

    Every field is populated, including for symbols the seed table does not
    know.
    """
    stocks = load_seeds()["stocks"]
    upper = symbol.upper()
    listing = stocks["listings"].get(upper)
    known = listing is not None or upper in stocks["companies"]
    rng = rng or _rng_for(upper, known)
    defaults = stocks["defaults"]
    name = company_name(upper)
    sector = company_sector(upper)

    if listing:
        price = listing["price"]
        change = listing["change"]
        change_percent = listing["change_percent"]
        market_cap = listing["market_cap"]
        volume = listing["volume"]
    else:
        price = 150 + rng.random() * 300
        change = (rng.random() - 0.5) * 10
        change_percent = (rng.random() - 0.5) * 5
        market_cap = rng.random() * 1_000_000_000_000
        volume = rng.random() * 50_000_000

    low = 100 + rng.random() * 50
    high = 200 + rng.random() * 100

    return DetailRecord(
        id=upper,
        asset_class="stock",
        name=name,
        symbol=upper,
        price=price,
        change=change,
        change_percent_24h=change_percent,
        market_cap=market_cap,
        volume=volume,
        sector=sector,
        industry=sector,
        exchange=defaults["exchange"],
        description=sample_description(name, "stock"),
        ceo=defaults["ceo"],
        website=defaults["website"],
        employees=int(rng.random() * 100_000),
        beta=1 + rng.random(),
        avg_volume=rng.random() * 20_000_000,
        last_dividend=rng.random() * 5,
        range_52w=f"{low:.2f} - {high:.2f}",
        last_updated=datetime.now(timezone.utc),
    )


def fallback_crypto_profile(coin_id: str, rng: random.Random | None = None) -> DetailRecord:
    """Complete placeholder profile for a CoinGecko coin id."""
    crypto = load_seeds()["crypto"]
    key = coin_id.lower()
    listing = crypto["listings"].get(key)
    extras = crypto["profiles"].get(key, {})
    rng = rng or _rng_for(key, listing is not None)
    now = datetime.now(timezone.utc)

    if listing:
        name = listing["name"]
        symbol = listing["symbol"].upper()
        price = listing["price"]
        change_percent = listing["change_percent"]
        market_cap = listing["market_cap"]
        volume = listing["volume"]
    else:
        name = key.replace("-", " ").title()
        symbol = key[:4].upper()
        price = 0.01 + rng.random() * 100
        change_percent = (rng.random() - 0.5) * 10
        market_cap = rng.random() * 10_000_000_000
        volume = rng.random() * 500_000_000

    circulating = extras.get("circulating_supply") or market_cap / price

    return DetailRecord(
        id=key,
        asset_class="crypto",
        name=name,
        symbol=symbol,
        price=price,
        change=price * change_percent / 100,
        change_percent_24h=change_percent,
        market_cap=market_cap,
        volume=volume,
        description=sample_description(name, "crypto"),
        ath=extras.get("ath") or price * (1 + rng.random()),
        ath_date=extras.get("ath_date") or now - timedelta(days=rng.randint(30, 900)),
        atl=extras.get("atl") or price * rng.random() * 0.1,
        atl_date=extras.get("atl_date") or now - timedelta(days=rng.randint(900, 3000)),
        circulating_supply=circulating,
        total_supply=extras.get("total_supply") or circulating,
        max_supply=extras.get("max_supply"),
        last_updated=now,
    )


def fallback_series(range_key: str, range_days: dict[str, int], default_range: str) -> list[PricePoint]:
    """Random-walk series covering ``range_key``."""
    days = range_days.get(range_key)
    if days is None:
        logger.warning(f"Unknown range {range_key!r}, using {default_range!r}")
        days = range_days[default_range]
    return generate_price_series(days)
