"""Detail view state machine.

    Idle -> Loading -> Ready | NotFound | Error
    Ready -> SeriesLoading -> Ready      (range change)

Every load takes a new generation token. Results that arrive for a token
which is no longer current are dropped, so a slow response can never
overwrite a newer one.
"""

import logging
from typing import Protocol

from marketpulse.fetchers.base import NotFound
from marketpulse.models.market import DetailRecord, PricePoint
from marketpulse.models.view import DetailStatus, DetailViewState, FetchResult


logger = logging.getLogger(__name__)


class DetailFetcher(Protocol):
    """What the detail view needs from a fetcher."""

    range_days: dict[str, int]
    default_range: str

    def fetch_detail(self, entity_id: str) -> FetchResult[DetailRecord]: ...

    def fetch_series(self, entity_id: str, range_key: str) -> FetchResult[list[PricePoint]]: ...


class DetailViewController:
    """Loads one entity's profile and price series."""

    def __init__(self, fetcher: DetailFetcher, entity_id: str, range_key: str | None = None):
        self.fetcher = fetcher
        range_key = range_key or fetcher.default_range
        self._check_range(range_key)
        self.state = DetailViewState(entity_id=entity_id, range=range_key)
        self._generation = 0
        self._profile_advisory: str | None = None

    @staticmethod
    def _advisories(*messages: str | None) -> list[str]:
        return [m for m in messages if m]

    def _check_range(self, range_key: str) -> None:
        if range_key not in self.fetcher.range_days:
            raise ValueError(
                f"Unknown range {range_key!r}. Choose from: {', '.join(self.fetcher.range_days)}"
            )

    def _next_token(self) -> int:
        self._generation += 1
        return self._generation

    def _is_current(self, token: int) -> bool:
        if token != self._generation:
            logger.debug(f"Dropping stale response (token {token}, current {self._generation})")
            return False
        return True

    def load(self) -> DetailViewState:
        """Fetch profile and series for the current entity and range."""
        token = self._next_token()
        entity_id = self.state.entity_id
        range_key = self.state.range
        self.state.status = DetailStatus.LOADING
        self.state.error = None

        try:
            profile = self.fetcher.fetch_detail(entity_id)
            if not self._is_current(token):
                return self.state
            series = self.fetcher.fetch_series(entity_id, range_key)
        except NotFound as e:
            if self._is_current(token):
                self.state.status = DetailStatus.NOT_FOUND
                self.state.profile = None
                self.state.series = []
                self.state.advisories = []
                self.state.error = str(e)
            return self.state
        except Exception as e:
            logger.exception(f"Failed to load detail view for {entity_id}")
            if self._is_current(token):
                self.state.status = DetailStatus.ERROR
                self.state.error = str(e)
            return self.state

        if self._is_current(token):
            self._profile_advisory = profile.advisory
            self.state.profile = profile.data
            self.state.series = series.data
            self.state.advisories = self._advisories(profile.advisory, series.advisory)
            self.state.status = DetailStatus.READY

        return self.state

    def refresh(self) -> DetailViewState:
        """Explicit refresh: reload everything."""
        return self.load()

    def select(self, entity_id: str) -> DetailViewState:
        """Switch to another entity and load it."""
        self.state = DetailViewState(entity_id=entity_id, range=self.state.range)
        return self.load()

    def set_range(self, range_key: str) -> DetailViewState:
        """Change the chart range.

        When the view is ready only the series is re-fetched; in any other
        state the range is just recorded for the next load.
        """
        self._check_range(range_key)
        self.state.range = range_key

        if self.state.status is not DetailStatus.READY:
            return self.state

        token = self._next_token()
        self.state.status = DetailStatus.SERIES_LOADING

        try:
            series = self.fetcher.fetch_series(self.state.entity_id, range_key)
        except Exception as e:
            logger.exception(f"Failed to load price series for {self.state.entity_id}")
            if self._is_current(token):
                self.state.status = DetailStatus.ERROR
                self.state.error = str(e)
            return self.state

        if self._is_current(token):
            self.state.series = series.data
            self.state.advisories = self._advisories(self._profile_advisory, series.advisory)
            self.state.status = DetailStatus.READY

        return self.state
