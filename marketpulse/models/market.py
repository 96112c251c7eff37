"""Unified market data models shared by every provider."""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field


AssetClass = Literal["crypto", "stock"]


class ListingRecord(BaseModel):
    """One row in a market overview table.

    Immutable snapshot; a refresh replaces the whole record set.
    """

    model_config = ConfigDict(frozen=True)

    id: str = Field(description="Provider identifier (CoinGecko id or ticker)")
    asset_class: AssetClass = Field(description="crypto or stock")
    name: str = Field(description="Display name (e.g., 'Bitcoin')")
    symbol: str = Field(description="Ticker symbol (e.g., 'BTC')")
    price: float = Field(description="Current price in quote currency")
    change_percent_24h: float | None = Field(default=None, description="24h change in percent")
    market_cap: float | None = Field(default=None, description="Market capitalization")
    volume: float | None = Field(default=None, description="Trading volume")

    change: float | None = Field(default=None, description="Absolute price change")
    sector: str | None = Field(default=None)
    image: str | None = Field(default=None, description="Logo URL")


class DetailRecord(ListingRecord):
    """Full profile of a single asset for the detail view."""

    description: str = Field(default="")

    # Extrema
    ath: float | None = Field(default=None, description="All-time high")
    ath_date: datetime | None = Field(default=None)
    atl: float | None = Field(default=None, description="All-time low")
    atl_date: datetime | None = Field(default=None)

    # Supply figures
    circulating_supply: float | None = Field(default=None)
    total_supply: float | None = Field(default=None)
    max_supply: float | None = Field(default=None)

    # Company metadata
    industry: str | None = Field(default=None)
    exchange: str | None = Field(default=None)
    ceo: str | None = Field(default=None)
    website: str | None = Field(default=None)
    employees: int | None = Field(default=None)
    beta: float | None = Field(default=None)
    avg_volume: float | None = Field(default=None)
    last_dividend: float | None = Field(default=None)
    range_52w: str | None = Field(default=None, description="52-week range, 'low - high'")

    last_updated: datetime | None = Field(default=None)


class PricePoint(BaseModel):
    """A single (timestamp, price) observation of a price series."""

    model_config = ConfigDict(frozen=True)

    timestamp: datetime
    price: float
