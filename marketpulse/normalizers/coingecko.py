"""CoinGecko record normalization to the unified market models."""

from datetime import datetime, timezone

from marketpulse.models.market import DetailRecord, ListingRecord, PricePoint
from marketpulse.models.raw import RawCoinGeckoCoin, RawCoinGeckoMarket, RawCoinGeckoMarketChart


def normalize_coingecko_market(raw: RawCoinGeckoMarket) -> ListingRecord:
    """Normalize a ``/coins/markets`` row to a ListingRecord.

    Raises:
        ValueError: If the row carries no current price
    """
    if raw.current_price is None:
        raise ValueError(f"Cannot extract price from record: {raw.id}")

    return ListingRecord(
        id=raw.id,
        asset_class="crypto",
        name=raw.name,
        symbol=raw.symbol.upper(),
        price=raw.current_price,
        change=raw.price_change_24h,
        change_percent_24h=raw.price_change_percentage_24h,
        market_cap=raw.market_cap,
        volume=raw.total_volume,
        image=raw.image,
    )


def normalize_coingecko_coin(raw: RawCoinGeckoCoin, vs_currency: str = "usd") -> DetailRecord:
    """Normalize a ``/coins/{id}`` response to a DetailRecord.

    Currency-keyed values are read for ``vs_currency``.

    Raises:
        ValueError: If the coin carries no price in ``vs_currency``
    """
    md = raw.market_data
    price = md.current_price.get(vs_currency)
    if price is None:
        raise ValueError(f"No {vs_currency} price for {raw.id}")

    categories = [c for c in raw.categories if c]

    return DetailRecord(
        id=raw.id,
        asset_class="crypto",
        name=raw.name,
        symbol=raw.symbol.upper(),
        price=price,
        change=md.price_change_24h,
        change_percent_24h=md.price_change_percentage_24h,
        market_cap=md.market_cap.get(vs_currency),
        volume=md.total_volume.get(vs_currency),
        image=raw.image.get("large"),
        sector=categories[0] if categories else None,
        description=raw.description.get("en") or "",
        ath=md.ath.get(vs_currency),
        ath_date=md.ath_date.get(vs_currency),
        atl=md.atl.get(vs_currency),
        atl_date=md.atl_date.get(vs_currency),
        circulating_supply=md.circulating_supply,
        total_supply=md.total_supply,
        max_supply=md.max_supply,
        last_updated=raw.last_updated,
    )


def normalize_coingecko_chart(raw: RawCoinGeckoMarketChart) -> list[PricePoint]:
    """Convert ``[timestamp_ms, price]`` pairs to an ascending PricePoint list."""
    points = [
        PricePoint(
            timestamp=datetime.fromtimestamp(ts / 1000, tz=timezone.utc),
            price=price,
        )
        for ts, price in raw.prices
    ]
    points.sort(key=lambda p: p.timestamp)
    return points
