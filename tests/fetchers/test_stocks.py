"""Tests for the equity clients and stock fetcher."""

from datetime import date, timedelta

import httpx
import pytest

from marketpulse.fetchers.base import MalformedResponse, NotFound
from marketpulse.fetchers.fallback import FALLBACK_ADVISORY, PARTIAL_ADVISORY, SERIES_ADVISORY
from marketpulse.fetchers.stocks import AlphaVantageClient, FmpClient, StockFetcher
from tests.helpers import json_response, make_config, mock_transport


FMP_QUOTES = [
    {
        "symbol": "AAPL",
        "name": "Apple Inc.",
        "price": 190.1,
        "change": 2.5,
        "changesPercentage": 1.33,
        "marketCap": 2950000000000,
        "volume": 51000000,
    },
    {
        "symbol": "MSFT",
        "name": "Microsoft Corporation",
        "price": 420.0,
        "change": -1.0,
        "changesPercentage": -0.24,
        "marketCap": 3110000000000,
        "volume": 20000000,
    },
]

GLOBAL_QUOTE = {
    "Global Quote": {
        "01. symbol": "AAPL",
        "05. price": "190.1000",
        "06. volume": "51000000",
        "09. change": "2.5000",
        "10. change percent": "1.3330%",
    }
}

OVERVIEW = {
    "Symbol": "AAPL",
    "Name": "Apple Inc",
    "Description": "Apple designs consumer electronics.",
    "Exchange": "NASDAQ",
    "Sector": "TECHNOLOGY",
    "Industry": "ELECTRONIC COMPUTERS",
    "MarketCapitalization": "2950000000000",
    "FullTimeEmployees": "161000",
    "Beta": "1.24",
    "DividendYield": "0.0051",
    "OfficialSite": "https://www.apple.com",
    "52WeekHigh": "199.62",
    "52WeekLow": "164.08",
}

THROTTLED = {"Note": "Thank you for using Alpha Vantage! Our standard API rate limit is 25 requests per day."}


def daily_series(days: int, end: date | None = None) -> dict:
    end = end or date.today()
    return {
        "Time Series (Daily)": {
            (end - timedelta(days=i)).isoformat(): {"4. close": f"{100 + i}.00"}
            for i in range(days)
        }
    }


def alphavantage_handler(responses: dict[str, httpx.Response]):
    """Handler answering by the ``function`` query parameter."""

    def handler(request: httpx.Request) -> httpx.Response:
        return responses.get(request.url.params["function"], httpx.Response(500))

    return handler


def make_fetcher(fmp=None, alphavantage=None) -> StockFetcher:
    config = make_config()
    fmp_handler = fmp or (lambda r: httpx.Response(500))
    return StockFetcher(
        config,
        quotes_client=FmpClient(config.fmp, transport=mock_transport(fmp_handler)),
        profile_client=AlphaVantageClient(
            config.alphavantage, transport=mock_transport(alphavantage_handler(alphavantage or {}))
        ),
    )


class TestFmpClient:
    def test_batch_quote_request(self):
        seen = {}

        def handler(request):
            seen["request"] = request
            return json_response(FMP_QUOTES)

        config = make_config()
        FmpClient(config.fmp, transport=mock_transport(handler)).fetch_quotes(["AAPL", "MSFT"])

        assert seen["request"].url.path == "/api/v3/quote/AAPL,MSFT"
        assert seen["request"].url.params["apikey"] == "test-key"

    def test_no_symbols_no_request(self):
        def handler(request):
            raise AssertionError("unexpected request")

        config = make_config()
        assert FmpClient(config.fmp, transport=mock_transport(handler)).fetch_quotes([]) == []

    def test_error_object(self):
        config = make_config()
        transport = mock_transport(lambda r: json_response({"Error Message": "Invalid API KEY."}))
        with pytest.raises(MalformedResponse):
            FmpClient(config.fmp, transport=transport).fetch_quotes(["AAPL"])


class TestAlphaVantageClient:
    def _client(self, payload) -> AlphaVantageClient:
        config = make_config()
        return AlphaVantageClient(config.alphavantage, transport=mock_transport(lambda r: json_response(payload)))

    def test_global_quote(self):
        assert self._client(GLOBAL_QUOTE).fetch_global_quote("aapl")["01. symbol"] == "AAPL"

    def test_empty_quote_is_not_found(self):
        with pytest.raises(NotFound):
            self._client({"Global Quote": {}}).fetch_global_quote("ZZZZ")

    def test_throttle_note_is_malformed(self):
        with pytest.raises(MalformedResponse):
            self._client(THROTTLED).fetch_global_quote("AAPL")

    def test_information_notice_is_malformed(self):
        with pytest.raises(MalformedResponse):
            self._client({"Information": "premium endpoint"}).fetch_overview("AAPL")

    def test_overview_requires_symbol(self):
        with pytest.raises(MalformedResponse):
            self._client({}).fetch_overview("AAPL")

    def test_daily_series_missing(self):
        with pytest.raises(MalformedResponse):
            self._client({"Meta Data": {}}).fetch_daily_series("AAPL")

    def test_query_params(self):
        seen = {}

        def handler(request):
            seen["params"] = request.url.params
            return json_response(daily_series(3))

        config = make_config()
        client = AlphaVantageClient(config.alphavantage, transport=mock_transport(handler))
        client.fetch_daily_series("msft", outputsize="full")

        assert seen["params"]["function"] == "TIME_SERIES_DAILY"
        assert seen["params"]["symbol"] == "MSFT"
        assert seen["params"]["outputsize"] == "full"


class TestFetchListings:
    def test_live_quotes(self):
        result = make_fetcher(fmp=lambda r: json_response(FMP_QUOTES)).fetch_listings()
        assert not result.is_fallback
        assert [r.symbol for r in result.data] == ["AAPL", "MSFT"]
        assert result.data[0].change_percent_24h == 1.33
        assert result.data[0].sector == "N/A"

    def test_failure_uses_sample_table(self):
        result = make_fetcher().fetch_listings()
        assert result.is_fallback
        assert result.advisory == FALLBACK_ADVISORY
        assert len(result.data) == 12


class TestFetchDetail:
    def test_full_profile(self):
        fetcher = make_fetcher(
            alphavantage={
                "GLOBAL_QUOTE": json_response(GLOBAL_QUOTE),
                "OVERVIEW": json_response(OVERVIEW),
            }
        )
        result = fetcher.fetch_detail("AAPL")
        profile = result.data

        assert not result.is_fallback
        assert profile.price == 190.1
        assert profile.change_percent_24h == pytest.approx(1.333)
        assert profile.sector == "TECHNOLOGY"
        assert profile.employees == 161000
        assert profile.beta == 1.24
        assert profile.range_52w == "164.08 - 199.62"
        assert profile.ceo == "N/A"

    def test_unknown_symbol_propagates(self):
        fetcher = make_fetcher(alphavantage={"GLOBAL_QUOTE": json_response({"Global Quote": {}})})
        with pytest.raises(NotFound):
            fetcher.fetch_detail("ZZZZ")

    def test_throttled_quote_uses_sample_profile(self):
        fetcher = make_fetcher(alphavantage={"GLOBAL_QUOTE": json_response(THROTTLED)})
        result = fetcher.fetch_detail("AAPL")
        assert result.is_fallback
        assert result.advisory == FALLBACK_ADVISORY
        assert result.data.name == "Apple Inc."

    def test_throttled_overview_gives_partial_profile(self):
        fetcher = make_fetcher(
            alphavantage={
                "GLOBAL_QUOTE": json_response(GLOBAL_QUOTE),
                "OVERVIEW": json_response(THROTTLED),
            }
        )
        result = fetcher.fetch_detail("AAPL")

        assert result.is_fallback
        assert result.advisory == PARTIAL_ADVISORY
        # live price, sample metadata
        assert result.data.price == 190.1
        assert result.data.name == "Apple Inc."
        assert result.data.sector == "Technology"


class TestFetchSeries:
    def test_series_filtered_to_range(self):
        fetcher = make_fetcher(alphavantage={"TIME_SERIES_DAILY": json_response(daily_series(100))})
        result = fetcher.fetch_series("AAPL", "1month")

        assert not result.is_fallback
        assert 28 <= len(result.data) <= 32
        timestamps = [p.timestamp for p in result.data]
        assert timestamps == sorted(timestamps)

    def test_failure_simulates_series(self):
        fetcher = make_fetcher(alphavantage={"TIME_SERIES_DAILY": json_response(THROTTLED)})
        result = fetcher.fetch_series("AAPL", "3months")
        assert result.is_fallback
        assert result.advisory == SERIES_ADVISORY
        assert len(result.data) == 91

    def test_nothing_in_range_simulates(self):
        old = daily_series(5, end=date.today() - timedelta(days=400))
        fetcher = make_fetcher(alphavantage={"TIME_SERIES_DAILY": json_response(old)})
        result = fetcher.fetch_series("AAPL", "6months")
        assert result.is_fallback

    def test_non_object_rows_simulate(self):
        payload = {"Time Series (Daily)": {date.today().isoformat(): "garbage"}}
        fetcher = make_fetcher(alphavantage={"TIME_SERIES_DAILY": json_response(payload)})
        result = fetcher.fetch_series("AAPL", "1month")

        assert result.is_fallback
        assert result.advisory == SERIES_ADVISORY
        assert len(result.data) == 31

    def test_list_shaped_series_simulates(self):
        payload = {"Time Series (Daily)": [{"4. close": "1"}]}
        fetcher = make_fetcher(alphavantage={"TIME_SERIES_DAILY": json_response(payload)})
        result = fetcher.fetch_series("AAPL", "1month")

        assert result.is_fallback
        assert result.advisory == SERIES_ADVISORY
