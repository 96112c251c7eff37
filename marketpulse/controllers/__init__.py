"""View controllers: table filtering/sorting, pagination, detail view."""

from .detail import DetailFetcher, DetailViewController
from .pagination import (
    go_to_page,
    next_page,
    page_links,
    paginate,
    previous_page,
    render_page,
    set_page_size,
    total_pages,
)
from .table import (
    SORT_FIELDS,
    apply_filter_sort,
    filter_records,
    request_sort,
    set_query,
    set_records,
    set_sort,
    sort_records,
)

__all__ = [
    "DetailFetcher",
    "DetailViewController",
    "go_to_page",
    "next_page",
    "page_links",
    "paginate",
    "previous_page",
    "render_page",
    "set_page_size",
    "total_pages",
    "SORT_FIELDS",
    "apply_filter_sort",
    "filter_records",
    "request_sort",
    "set_query",
    "set_records",
    "set_sort",
    "sort_records",
]
