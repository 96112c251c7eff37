"""Tests for the detail view state machine."""

from datetime import datetime, timezone

import pytest

from marketpulse.controllers.detail import DetailViewController
from marketpulse.fetchers.base import NotFound
from marketpulse.models.market import DetailRecord, PricePoint
from marketpulse.models.view import DetailStatus, FetchResult


def _profile(entity_id: str = "bitcoin") -> DetailRecord:
    return DetailRecord(
        id=entity_id, asset_class="crypto", name=entity_id.title(), symbol="BTC", price=100.0
    )


def _series(n: int) -> list[PricePoint]:
    return [
        PricePoint(timestamp=datetime(2025, 1, i + 1, tzinfo=timezone.utc), price=100.0 + i)
        for i in range(n)
    ]


class FakeFetcher:
    range_days = {"7": 7, "30": 30, "365": 365}
    default_range = "365"

    def __init__(self):
        self.detail_calls: list[str] = []
        self.series_calls: list[tuple[str, str]] = []
        self.detail_error: Exception | None = None
        self.series_error: Exception | None = None
        self.profile_advisory: str | None = None
        self.series_advisory: str | None = None
        self.on_detail = None

    def fetch_detail(self, entity_id):
        self.detail_calls.append(entity_id)
        if self.on_detail:
            self.on_detail()
        if self.detail_error:
            raise self.detail_error
        return FetchResult(_profile(entity_id), self.profile_advisory)

    def fetch_series(self, entity_id, range_key):
        self.series_calls.append((entity_id, range_key))
        if self.series_error:
            raise self.series_error
        return FetchResult(_series(self.range_days[range_key]), self.series_advisory)


@pytest.fixture
def fetcher():
    return FakeFetcher()


class TestLoad:
    def test_initial_state_idle(self, fetcher):
        controller = DetailViewController(fetcher, "bitcoin")
        assert controller.state.status is DetailStatus.IDLE
        assert controller.state.range == "365"

    def test_load_ready(self, fetcher):
        state = DetailViewController(fetcher, "bitcoin").load()
        assert state.status is DetailStatus.READY
        assert state.profile.id == "bitcoin"
        assert len(state.series) == 365
        assert state.advisories == []

    def test_loading_state_during_fetch(self, fetcher):
        controller = DetailViewController(fetcher, "bitcoin")
        seen = []
        fetcher.on_detail = lambda: seen.append(controller.state.status)
        controller.load()
        assert seen == [DetailStatus.LOADING]

    def test_not_found(self, fetcher):
        fetcher.detail_error = NotFound("nope")
        state = DetailViewController(fetcher, "nope").load()
        assert state.status is DetailStatus.NOT_FOUND
        assert state.profile is None
        assert fetcher.series_calls == []

    def test_unexpected_error(self, fetcher):
        fetcher.detail_error = RuntimeError("boom")
        state = DetailViewController(fetcher, "bitcoin").load()
        assert state.status is DetailStatus.ERROR
        assert state.error == "boom"

    def test_advisories_collected(self, fetcher):
        fetcher.profile_advisory = "profile is sample data"
        fetcher.series_advisory = "series is simulated"
        state = DetailViewController(fetcher, "bitcoin").load()
        assert state.advisories == ["profile is sample data", "series is simulated"]

    def test_unknown_range_rejected(self, fetcher):
        with pytest.raises(ValueError, match="Unknown range"):
            DetailViewController(fetcher, "bitcoin", "2")

    def test_refresh_refetches_profile(self, fetcher):
        controller = DetailViewController(fetcher, "bitcoin")
        controller.load()
        controller.refresh()
        assert fetcher.detail_calls == ["bitcoin", "bitcoin"]

    def test_select_other_entity(self, fetcher):
        controller = DetailViewController(fetcher, "bitcoin", "30")
        controller.load()
        state = controller.select("ethereum")
        assert state.entity_id == "ethereum"
        assert state.profile.id == "ethereum"
        assert state.range == "30"


class TestRangeChange:
    def test_range_change_fetches_series_only(self, fetcher):
        controller = DetailViewController(fetcher, "bitcoin")
        controller.load()
        state = controller.set_range("7")
        assert state.status is DetailStatus.READY
        assert len(state.series) == 7
        assert fetcher.detail_calls == ["bitcoin"]
        assert fetcher.series_calls[-1] == ("bitcoin", "7")

    def test_range_change_before_load_only_records(self, fetcher):
        controller = DetailViewController(fetcher, "bitcoin")
        state = controller.set_range("30")
        assert state.range == "30"
        assert state.status is DetailStatus.IDLE
        assert fetcher.series_calls == []

    def test_series_loading_state(self, fetcher):
        controller = DetailViewController(fetcher, "bitcoin")
        controller.load()
        seen = []
        original = fetcher.fetch_series

        def spy(entity_id, range_key):
            seen.append(controller.state.status)
            return original(entity_id, range_key)

        fetcher.fetch_series = spy
        controller.set_range("30")
        assert seen == [DetailStatus.SERIES_LOADING]

    def test_series_advisory_replaced(self, fetcher):
        fetcher.series_advisory = "series is simulated"
        fetcher.profile_advisory = "profile is sample data"
        controller = DetailViewController(fetcher, "bitcoin")
        controller.load()
        fetcher.series_advisory = None
        state = controller.set_range("7")
        assert state.advisories == ["profile is sample data"]

    def test_range_change_error(self, fetcher):
        controller = DetailViewController(fetcher, "bitcoin")
        controller.load()
        fetcher.series_error = RuntimeError("series down")
        state = controller.set_range("7")
        assert state.status is DetailStatus.ERROR


class TestStaleResponses:
    def test_stale_load_is_dropped(self, fetcher):
        controller = DetailViewController(fetcher, "bitcoin")
        calls = {"n": 0}

        def reenter():
            # A newer load starts while the first one is still in flight
            calls["n"] += 1
            if calls["n"] == 1:
                fetcher.on_detail = None
                controller.select("ethereum")

        fetcher.on_detail = reenter
        state = controller.load()

        assert state.entity_id == "ethereum"
        assert state.profile.id == "ethereum"
        assert state.status is DetailStatus.READY
        # the stale load never fetched its series
        assert ("bitcoin", "365") not in fetcher.series_calls
