"""Raw provider payload models.

Field names match the provider responses exactly.
"""

from datetime import date

from pydantic import BaseModel, ConfigDict, Field, RootModel


class RawCoinGeckoMarket(BaseModel):
    """Row from CoinGecko ``/coins/markets``."""

    model_config = ConfigDict(extra="allow")

    id: str
    symbol: str
    name: str
    image: str | None = Field(default=None)
    current_price: float | None = Field(default=None)
    market_cap: float | None = Field(default=None)
    total_volume: float | None = Field(default=None)
    price_change_24h: float | None = Field(default=None)
    price_change_percentage_24h: float | None = Field(default=None)


class RawCoinGeckoMarketData(BaseModel):
    """``market_data`` block of CoinGecko ``/coins/{id}``.

    Currency-keyed values are dicts such as ``{"usd": 67250.0}``.
    """

    model_config = ConfigDict(extra="allow")

    current_price: dict[str, float | None] = Field(default_factory=dict)
    market_cap: dict[str, float | None] = Field(default_factory=dict)
    total_volume: dict[str, float | None] = Field(default_factory=dict)
    ath: dict[str, float | None] = Field(default_factory=dict)
    ath_date: dict[str, str | None] = Field(default_factory=dict)
    atl: dict[str, float | None] = Field(default_factory=dict)
    atl_date: dict[str, str | None] = Field(default_factory=dict)
    price_change_24h: float | None = Field(default=None)
    price_change_percentage_24h: float | None = Field(default=None)
    circulating_supply: float | None = Field(default=None)
    total_supply: float | None = Field(default=None)
    max_supply: float | None = Field(default=None)


class RawCoinGeckoCoin(BaseModel):
    """Response from CoinGecko ``/coins/{id}``."""

    model_config = ConfigDict(extra="allow")

    id: str
    symbol: str
    name: str
    market_data: RawCoinGeckoMarketData
    description: dict[str, str | None] = Field(default_factory=dict)
    image: dict[str, str | None] = Field(default_factory=dict)
    categories: list[str | None] = Field(default_factory=list)
    last_updated: str | None = Field(default=None)


class RawCoinGeckoMarketChart(BaseModel):
    """Response from CoinGecko ``/coins/{id}/market_chart``.

    ``prices`` holds ``[timestamp_ms, price]`` pairs.
    """

    model_config = ConfigDict(extra="allow")

    prices: list[tuple[float, float]]


class RawFmpQuote(BaseModel):
    """Row from Financial Modeling Prep ``/quote/{symbols}``."""

    model_config = ConfigDict(extra="allow")

    symbol: str
    name: str | None = Field(default=None)
    price: float | None = Field(default=None)
    change: float | None = Field(default=None)
    changesPercentage: float | None = Field(default=None)
    marketCap: float | None = Field(default=None)
    volume: float | None = Field(default=None)
    avgVolume: float | None = Field(default=None)
    exchange: str | None = Field(default=None)
    sector: str | None = Field(default=None)


class RawAlphaVantageQuote(BaseModel):
    """``Global Quote`` object from Alpha Vantage ``GLOBAL_QUOTE``."""

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    symbol: str = Field(alias="01. symbol")
    price: float = Field(alias="05. price")
    volume: float | None = Field(default=None, alias="06. volume")
    change: float | None = Field(default=None, alias="09. change")
    change_percent: str | None = Field(default=None, alias="10. change percent")

    @property
    def change_percent_value(self) -> float | None:
        """Parse '0.6700%' into 0.67."""
        if not self.change_percent:
            return None
        try:
            return float(self.change_percent.replace("%", ""))
        except ValueError:
            return None


class RawAlphaVantageOverview(BaseModel):
    """Response from Alpha Vantage ``OVERVIEW``.

    Every value arrives as a string, with "None" or "-" for missing data.
    """

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    Symbol: str
    Name: str | None = Field(default=None)
    Description: str | None = Field(default=None)
    Exchange: str | None = Field(default=None)
    Sector: str | None = Field(default=None)
    Industry: str | None = Field(default=None)
    MarketCapitalization: str | None = Field(default=None)
    FullTimeEmployees: str | None = Field(default=None)
    Beta: str | None = Field(default=None)
    DividendYield: str | None = Field(default=None)
    OfficialSite: str | None = Field(default=None)
    WeekHigh52: str | None = Field(default=None, alias="52WeekHigh")
    WeekLow52: str | None = Field(default=None, alias="52WeekLow")


class RawAlphaVantageBar(BaseModel):
    """One day of ``Time Series (Daily)``; values are strings."""

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    close: str | None = Field(default=None, alias="4. close")


class RawAlphaVantageDailySeries(RootModel[dict[date, RawAlphaVantageBar]]):
    """``Time Series (Daily)`` keyed by ISO date."""
