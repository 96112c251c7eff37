"""Filtering and sorting of listing tables.

All functions are pure: they take a ``TableState`` and return a new one.
Any change to the records, query or sort resets pagination to page 1.
"""

from collections.abc import Callable, Iterable, Mapping
from dataclasses import replace
from operator import attrgetter
from typing import Any

from marketpulse.models.market import ListingRecord
from marketpulse.models.view import SortDirective, TableState


Accessor = Callable[[ListingRecord], Any]

# Sort keys offered by the list views
SORT_FIELDS: dict[str, Accessor] = {
    "name": attrgetter("name"),
    "symbol": attrgetter("symbol"),
    "price": attrgetter("price"),
    "change": attrgetter("change"),
    "change_percent_24h": attrgetter("change_percent_24h"),
    "market_cap": attrgetter("market_cap"),
    "volume": attrgetter("volume"),
    "sector": attrgetter("sector"),
}


def _path_accessor(path: str) -> Accessor:
    """Accessor for a dotted attribute/mapping path; missing steps yield None."""
    parts = path.split(".")

    def get(record: ListingRecord) -> Any:
        value: Any = record
        for part in parts:
            if value is None:
                return None
            if isinstance(value, Mapping):
                value = value.get(part)
            else:
                value = getattr(value, part, None)
        return value

    return get


def resolve_accessor(key: str) -> Accessor:
    """Accessor for a sort key.

    Raises:
        ValueError: If ``key`` is neither a known sort field nor a path
            starting at a record field
    """
    if key in SORT_FIELDS:
        return SORT_FIELDS[key]
    if key.split(".")[0] in ListingRecord.model_fields:
        return _path_accessor(key)
    raise ValueError(f"Unknown sort key: {key!r}. Choose from: {', '.join(SORT_FIELDS)}")


def filter_records(records: Iterable[ListingRecord], query: str) -> list[ListingRecord]:
    """Case-insensitive substring match on name or symbol."""
    needle = query.strip().lower()
    if not needle:
        return list(records)
    return [r for r in records if needle in r.name.lower() or needle in r.symbol.lower()]


def sort_records(records: Iterable[ListingRecord], sort: SortDirective | None) -> list[ListingRecord]:
    """Stable sort on a single field.

    Missing values come first when ascending and last when descending, so the
    two directions are exact reverses of each other for distinct values.
    Without a directive the input order is kept.

    Raises:
        ValueError: If the key is unknown or its values are not comparable
    """
    records = list(records)
    if sort is None:
        return records

    accessor = resolve_accessor(sort.key)
    keyed = [(accessor(r), r) for r in records]
    present = [(v, r) for v, r in keyed if v is not None]
    missing = [r for v, r in keyed if v is None]

    try:
        ordered = [r for _, r in sorted(present, key=lambda pair: pair[0], reverse=not sort.ascending)]
    except TypeError as e:
        raise ValueError(f"Cannot sort by {sort.key!r}: {e}") from e
    return missing + ordered if sort.ascending else ordered + missing


def apply_filter_sort(state: TableState) -> list[ListingRecord]:
    """Filtered and sorted view of the state's records."""
    return sort_records(filter_records(state.records, state.query), state.sort)


def set_records(state: TableState, records: Iterable[ListingRecord]) -> TableState:
    """Replace the record set wholesale."""
    return replace(state, records=tuple(records), current_page=1)


def set_query(state: TableState, query: str) -> TableState:
    return replace(state, query=query, current_page=1)


def request_sort(state: TableState, key: str) -> TableState:
    """Select a sort column.

    Re-selecting the active column while ascending switches to descending;
    anything else sorts ascending.
    """
    direction = "ascending"
    if state.sort and state.sort.key == key and state.sort.ascending:
        direction = "descending"

    return set_sort(state, SortDirective(key, direction))


def set_sort(state: TableState, sort: SortDirective | None) -> TableState:
    """Set the directive directly (``None`` restores fetch order).

    The directive is checked against the current records, so a key whose
    values cannot be ordered is rejected here rather than at render time.
    """
    if sort is not None:
        sort_records(state.records, sort)
    return replace(state, sort=sort, current_page=1)
