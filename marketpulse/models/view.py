"""View-state models for the table and detail views."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Generic, Literal, TypeVar

from .market import DetailRecord, ListingRecord, PricePoint


T = TypeVar("T")

SortDirection = Literal["ascending", "descending"]


@dataclass(frozen=True)
class SortDirective:
    """Active table sort. At most one is set at a time."""

    key: str
    direction: SortDirection = "ascending"

    @property
    def ascending(self) -> bool:
        return self.direction == "ascending"


@dataclass(frozen=True)
class PageWindow:
    """Pagination position derived from the filtered-set length."""

    page_size: int
    current_page: int
    total_pages: int

    @property
    def has_previous(self) -> bool:
        return self.current_page > 1

    @property
    def has_next(self) -> bool:
        return self.current_page < self.total_pages


@dataclass(frozen=True)
class PageLink:
    """One entry in the page-link strip; ``page`` is None for an ellipsis."""

    page: int | None
    is_active: bool = False

    @property
    def is_ellipsis(self) -> bool:
        return self.page is None


@dataclass(frozen=True)
class TableState:
    """State of one list view.

    Controller functions take a state and return a new one.
    """

    records: tuple[ListingRecord, ...] = ()
    query: str = ""
    sort: SortDirective | None = None
    page_size: int = 10
    current_page: int = 1


@dataclass(frozen=True)
class TablePage:
    """Rendered slice of a table view."""

    items: list[ListingRecord]
    window: PageWindow
    links: list[PageLink]
    filtered_count: int


@dataclass
class FetchResult(Generic[T]):
    """Data from a fetch plus an optional advisory when it was degraded."""

    data: T
    advisory: str | None = None
    is_fallback: bool = False


class DetailStatus(str, Enum):
    """Lifecycle of a detail view."""

    IDLE = "idle"
    LOADING = "loading"
    SERIES_LOADING = "series_loading"
    READY = "ready"
    NOT_FOUND = "not_found"
    ERROR = "error"


@dataclass
class DetailViewState:
    """State of one detail view."""

    entity_id: str
    range: str
    status: DetailStatus = DetailStatus.IDLE
    profile: DetailRecord | None = None
    series: list[PricePoint] = field(default_factory=list)
    advisories: list[str] = field(default_factory=list)
    error: str | None = None
