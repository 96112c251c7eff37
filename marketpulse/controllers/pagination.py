"""Page slicing and navigation for listing tables."""

import math
from dataclasses import replace
from typing import Sequence, TypeVar

from marketpulse.models.view import PageLink, PageWindow, TablePage, TableState

from .table import apply_filter_sort


T = TypeVar("T")

# Interior page links shown between the first and last page
INTERIOR_LINKS = 3


def total_pages(count: int, page_size: int) -> int:
    """Number of pages for ``count`` items; never less than 1."""
    if page_size < 1:
        raise ValueError(f"page_size must be positive, got {page_size}")
    return max(1, math.ceil(count / page_size))


def paginate(items: Sequence[T], page_size: int, current_page: int) -> tuple[list[T], PageWindow]:
    """Slice out ``current_page``, clamped to the valid range."""
    pages = total_pages(len(items), page_size)
    page = min(max(current_page, 1), pages)
    start = (page - 1) * page_size
    return list(items[start:start + page_size]), PageWindow(page_size, page, pages)


def page_links(current_page: int, pages: int) -> list[PageLink]:
    """Build the page-link strip.

    The first and last page are always shown, with a window of up to three
    interior pages centered on the current one. Gaps become ellipsis entries.
    """
    links = [PageLink(1, current_page == 1)]
    if pages <= 1:
        return links

    start = max(2, current_page - INTERIOR_LINKS // 2)
    end = min(pages - 1, start + INTERIOR_LINKS - 1)
    if end - start < INTERIOR_LINKS - 1:
        start = max(2, end - INTERIOR_LINKS + 1)

    if start > 2:
        links.append(PageLink(None))
    links.extend(PageLink(page, page == current_page) for page in range(start, end + 1))
    if end < pages - 1:
        links.append(PageLink(None))

    links.append(PageLink(pages, current_page == pages))
    return links


def render_page(state: TableState) -> TablePage:
    """Filter, sort and slice the state into the page to display."""
    filtered = apply_filter_sort(state)
    items, window = paginate(filtered, state.page_size, state.current_page)
    return TablePage(
        items=items,
        window=window,
        links=page_links(window.current_page, window.total_pages),
        filtered_count=len(filtered),
    )


def page_count(state: TableState) -> int:
    return total_pages(len(apply_filter_sort(state)), state.page_size)


def go_to_page(state: TableState, page: int) -> TableState:
    """Move to ``page``; out-of-range requests leave the state unchanged."""
    if page < 1 or page > page_count(state):
        return state
    return replace(state, current_page=page)


def next_page(state: TableState) -> TableState:
    return go_to_page(state, state.current_page + 1)


def previous_page(state: TableState) -> TableState:
    return go_to_page(state, state.current_page - 1)


def set_page_size(state: TableState, page_size: int) -> TableState:
    """Change the page size and return to page 1."""
    if page_size < 1:
        raise ValueError(f"page_size must be positive, got {page_size}")
    return replace(state, page_size=page_size, current_page=1)
