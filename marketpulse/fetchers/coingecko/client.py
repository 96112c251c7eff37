"""CoinGecko REST client."""

from typing import Any

from marketpulse.fetchers.base import MalformedResponse, ProviderClient


class CoinGeckoClient(ProviderClient):
    """Client for the public CoinGecko v3 API."""

    name = "coingecko"

    def _auth_params(self) -> dict[str, Any]:
        if self.config.api_key:
            return {"x_cg_demo_api_key": self.config.api_key}
        return {}

    def fetch_markets(
        self,
        page: int = 1,
        per_page: int = 100,
        vs_currency: str = "usd",
    ) -> list[dict[str, Any]]:
        """Fetch one page of market listings ordered by market cap.

        Args:
            page: Page number (1-indexed)
            per_page: Rows per page (max 250)
            vs_currency: Quote currency

        Returns:
            List of raw market rows
        """
        params = {
            "vs_currency": vs_currency,
            "order": "market_cap_desc",
            "per_page": per_page,
            "page": page,
            "sparkline": "false",
            "price_change_percentage": "24h",
            **self._auth_params(),
        }
        data = self.get_json("/coins/markets", params)

        if not isinstance(data, list):
            raise MalformedResponse("Expected a list of markets", str(data)[:500])

        return data

    def fetch_coin(self, coin_id: str) -> dict[str, Any]:
        """Fetch a single coin profile with market data."""
        params = {
            "localization": "false",
            "tickers": "false",
            "market_data": "true",
            "community_data": "false",
            "developer_data": "false",
            **self._auth_params(),
        }
        data = self.get_json(f"/coins/{coin_id}", params)

        if not isinstance(data, dict) or "market_data" not in data:
            raise MalformedResponse("Response missing 'market_data' field", str(data)[:500])

        return data

    def fetch_market_chart(
        self,
        coin_id: str,
        days: str,
        vs_currency: str = "usd",
    ) -> dict[str, Any]:
        """Fetch the price history for ``days`` (a day count or 'max')."""
        params = {"vs_currency": vs_currency, "days": days, **self._auth_params()}
        data = self.get_json(f"/coins/{coin_id}/market_chart", params)

        if not isinstance(data, dict) or "prices" not in data:
            raise MalformedResponse("Response missing 'prices' field", str(data)[:500])

        return data
