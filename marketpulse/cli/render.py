"""Rich rendering for list and detail views."""

from typing import Sequence

from rich.console import Console, Group
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from marketpulse.models.market import DetailRecord, PricePoint
from marketpulse.models.view import DetailViewState, SortDirective, TablePage


SPARK_CHARS = "▁▂▃▄▅▆▇█"


def format_price(num: float | None) -> str:
    """Currency format; sub-dollar prices keep up to six decimals."""
    if num is None:
        return "—"
    if abs(num) < 1:
        text = f"{num:,.6f}".rstrip("0")
        whole, _, frac = text.partition(".")
        return f"${whole}.{frac.ljust(4, '0')}"
    return f"${num:,.2f}"


def format_market_cap(num: float | None) -> str:
    if num is None:
        return "—"
    if num >= 1e12:
        return f"${num / 1e12:.2f}T"
    if num >= 1e9:
        return f"${num / 1e9:.2f}B"
    if num >= 1e6:
        return f"${num / 1e6:.2f}M"
    return f"${num:.2f}"


def format_compact(num: float | None) -> str:
    """Volumes and supplies: 1.23B, 4.56M, 7.89K."""
    if num is None:
        return "—"
    if num >= 1e9:
        return f"{num / 1e9:.2f}B"
    if num >= 1e6:
        return f"{num / 1e6:.2f}M"
    if num >= 1e3:
        return f"{num / 1e3:.2f}K"
    return f"{num:,.0f}"


def format_change(pct: float | None) -> Text:
    if pct is None:
        return Text("—")
    style = "green" if pct >= 0 else "red"
    arrow = "▲" if pct >= 0 else "▼"
    return Text(f"{arrow} {pct:+.2f}%", style=style)


def sparkline(values: Sequence[float], width: int = 60) -> str:
    """Downsample ``values`` into a one-line block chart."""
    if not values:
        return ""

    if len(values) > width:
        bucket = len(values) / width
        values = [values[min(int(i * bucket), len(values) - 1)] for i in range(width)]

    low, high = min(values), max(values)
    span = high - low
    if span == 0:
        return SPARK_CHARS[len(SPARK_CHARS) // 2] * len(values)

    last = len(SPARK_CHARS) - 1
    return "".join(SPARK_CHARS[round((v - low) / span * last)] for v in values)


def _header(label: str, key: str, sort: SortDirective | None) -> str:
    if sort and sort.key == key:
        return f"{label} {'↑' if sort.ascending else '↓'}"
    return label


def render_advisory(console: Console, advisory: str | None) -> None:
    if advisory:
        console.print(Panel(advisory, title="Notice", border_style="yellow"))


def render_table(
    console: Console,
    page: TablePage,
    *,
    title: str,
    sort: SortDirective | None = None,
    show_sector: bool = False,
) -> None:
    """Print one page of listings and the page-link strip."""
    table = Table(title=title, show_lines=False)
    offset = (page.window.current_page - 1) * page.window.page_size

    table.add_column("#", justify="right", style="dim")
    table.add_column(_header("Name", "name", sort))
    table.add_column(_header("Symbol", "symbol", sort), style="cyan")
    table.add_column(_header("Price", "price", sort), justify="right")
    table.add_column(_header("24h Change", "change_percent_24h", sort), justify="right")
    table.add_column(_header("Market Cap", "market_cap", sort), justify="right")
    table.add_column(_header("Volume", "volume", sort), justify="right")
    if show_sector:
        table.add_column(_header("Sector", "sector", sort))

    for i, record in enumerate(page.items, start=offset + 1):
        row = [
            str(i),
            record.name,
            record.symbol.upper(),
            format_price(record.price),
            format_change(record.change_percent_24h),
            format_market_cap(record.market_cap),
            format_compact(record.volume),
        ]
        if show_sector:
            row.append(record.sector or "N/A")
        table.add_row(*row)

    if not page.items:
        console.print("[yellow]No results found.[/yellow]")
    else:
        console.print(table)

    console.print(render_page_links(page))


def render_page_links(page: TablePage) -> Text:
    """'« 1 … 4 [5] 6 … 10 »' plus a 'showing x-y of n' summary."""
    text = Text()
    text.append("« ", style="dim" if not page.window.has_previous else "")
    for link in page.links:
        if link.is_ellipsis:
            text.append("… ", style="dim")
        elif link.is_active:
            text.append(f"[{link.page}] ", style="bold reverse")
        else:
            text.append(f"{link.page} ")
    text.append("»", style="dim" if not page.window.has_next else "")

    start = (page.window.current_page - 1) * page.window.page_size
    shown = len(page.items)
    first = start + 1 if shown else 0
    text.append(
        f"   Showing {first}-{start + shown} of {page.filtered_count}"
        f" · {page.window.page_size} per page",
        style="dim",
    )
    return text


def render_chart(series: list[PricePoint], range_label: str, width: int = 60) -> Panel:
    if not series:
        return Panel("No chart data available.", title=f"Price History ({range_label})")

    prices = [p.price for p in series]
    first, last = series[0], series[-1]
    change = (last.price - first.price) / first.price * 100 if first.price else 0.0
    body = Group(
        Text(sparkline(prices, width), style="green" if change >= 0 else "red"),
        Text(
            f"{first.timestamp:%b %d, %Y} → {last.timestamp:%b %d, %Y}   "
            f"low {format_price(min(prices))}  high {format_price(max(prices))}  "
            f"({change:+.2f}%)",
            style="dim",
        ),
    )
    return Panel(body, title=f"Price History ({range_label})")


def _profile_rows(profile: DetailRecord) -> list[tuple[str, str]]:
    rows = [
        ("Market Cap", format_market_cap(profile.market_cap)),
        ("24h Volume", format_compact(profile.volume)),
    ]

    if profile.asset_class == "crypto":
        rows += [
            ("Circulating Supply", format_compact(profile.circulating_supply)),
            ("Max Supply", format_compact(profile.max_supply) if profile.max_supply else "Unlimited"),
            ("All-Time High", _extreme(profile.ath, profile.ath_date)),
            ("All-Time Low", _extreme(profile.atl, profile.atl_date)),
        ]
    else:
        rows += [
            ("Sector", profile.sector or "N/A"),
            ("Industry", profile.industry or "N/A"),
            ("Exchange", profile.exchange or "N/A"),
            ("CEO", profile.ceo or "N/A"),
            ("Employees", f"{profile.employees:,}" if profile.employees else "N/A"),
            ("Beta", f"{profile.beta:.2f}" if profile.beta is not None else "N/A"),
            ("Avg Volume", format_compact(profile.avg_volume)),
            ("Dividend", f"{profile.last_dividend:.2f}" if profile.last_dividend is not None else "N/A"),
            ("52-Week Range", profile.range_52w or "N/A"),
            ("Website", profile.website or "N/A"),
        ]

    return rows


def _extreme(value: float | None, when) -> str:
    if value is None:
        return "—"
    if when is None:
        return format_price(value)
    return f"{format_price(value)} ({when:%b %d, %Y})"


def render_detail(console: Console, state: DetailViewState, range_label: str) -> None:
    """Print the detail page of a ready view."""
    profile = state.profile
    if profile is None:
        return

    for advisory in state.advisories:
        render_advisory(console, advisory)

    heading = Text()
    heading.append(f"{profile.name} ", style="bold")
    heading.append(f"({profile.symbol.upper()})", style="cyan")
    if profile.exchange:
        heading.append(f" • {profile.exchange}", style="dim")
    heading.append("\n")
    heading.append(format_price(profile.price), style="bold")
    heading.append("  ")
    heading.append_text(format_change(profile.change_percent_24h))
    console.print(heading)

    console.print(render_chart(state.series, range_label))

    stats = Table(show_header=False, box=None, pad_edge=False)
    stats.add_column(style="dim")
    stats.add_column(justify="right")
    for label, value in _profile_rows(profile):
        stats.add_row(label, value)
    console.print(Panel(stats, title="Market Stats"))

    if profile.description:
        console.print(Panel(profile.description, title=f"About {profile.name}"))
