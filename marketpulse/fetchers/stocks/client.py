"""Equity data clients: Financial Modeling Prep and Alpha Vantage."""

from typing import Any

from marketpulse.fetchers.base import MalformedResponse, NotFound, ProviderClient


class FmpClient(ProviderClient):
    """Client for the Financial Modeling Prep v3 quote API."""

    name = "fmp"

    def fetch_quotes(self, symbols: list[str]) -> list[dict[str, Any]]:
        """Fetch quotes for several symbols in one batch call.

        Returns:
            List of raw quote rows
        """
        if not symbols:
            return []

        data = self.get_json(
            f"/quote/{','.join(symbols)}",
            {"apikey": self.config.api_key or "demo"},
        )

        if not isinstance(data, list):
            # FMP reports auth and plan errors as {"Error Message": ...} with 200/401
            raise MalformedResponse("Expected a list of quotes", str(data)[:500])

        return data


class AlphaVantageClient(ProviderClient):
    """Client for the Alpha Vantage ``/query`` API.

    Alpha Vantage answers throttled requests with HTTP 200 and a "Note" or
    "Information" body; those are reported as MalformedResponse.
    """

    name = "alphavantage"

    # Keys Alpha Vantage uses for throttling and error notices
    NOTICE_KEYS = ("Note", "Information", "Error Message")

    def _query(self, function: str, symbol: str, **extra: Any) -> dict[str, Any]:
        params = {
            "function": function,
            "symbol": symbol.upper(),
            "apikey": self.config.api_key or "demo",
            **extra,
        }
        data = self.get_json("/query", params)

        if not isinstance(data, dict):
            raise MalformedResponse(f"{function}: expected an object", str(data)[:500])

        for key in self.NOTICE_KEYS:
            if key in data:
                raise MalformedResponse(f"{function}: {data[key]}", str(data)[:500])

        return data

    def fetch_global_quote(self, symbol: str) -> dict[str, Any]:
        """Fetch the latest quote for ``symbol``.

        Raises:
            NotFound: If the quote object is empty (unknown symbol)
            MalformedResponse: If the quote object is missing
        """
        data = self._query("GLOBAL_QUOTE", symbol)

        if "Global Quote" not in data:
            raise MalformedResponse("Response missing 'Global Quote' field", str(data)[:500])

        quote = data["Global Quote"]
        if not quote:
            raise NotFound(f"Stock not found: {symbol.upper()}")

        return quote

    def fetch_overview(self, symbol: str) -> dict[str, Any]:
        """Fetch the company overview for ``symbol``."""
        data = self._query("OVERVIEW", symbol)

        if not data.get("Symbol"):
            raise MalformedResponse("Overview missing 'Symbol' field", str(data)[:500])

        return data

    def fetch_daily_series(self, symbol: str, outputsize: str = "compact") -> dict[str, dict[str, Any]]:
        """Fetch daily OHLCV keyed by ISO date.

        Args:
            symbol: Ticker
            outputsize: 'compact' (last 100 days) or 'full' (up to 20 years)
        """
        data = self._query("TIME_SERIES_DAILY", symbol, outputsize=outputsize)

        series = data.get("Time Series (Daily)")
        if not series:
            raise MalformedResponse("No historical data available", str(data)[:500])

        return series
