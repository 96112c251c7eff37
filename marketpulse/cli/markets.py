"""List, detail and browse commands for each asset class."""

import logging
import sys
from collections.abc import Callable
from pathlib import Path
from typing import Annotated, Any, Optional

import orjson
import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.prompt import Prompt

from marketpulse.config import load_config, load_config_file
from marketpulse.controllers.detail import DetailViewController
from marketpulse.controllers.pagination import (
    go_to_page,
    next_page,
    page_count,
    previous_page,
    render_page,
    set_page_size,
)
from marketpulse.controllers.table import SORT_FIELDS, request_sort, set_query, set_records, set_sort
from marketpulse.fetchers.coingecko import CryptoFetcher
from marketpulse.fetchers.stocks import StockFetcher
from marketpulse.models.config import MarketPulseConfig
from marketpulse.models.view import DetailStatus, SortDirective, TablePage, TableState

from .render import render_advisory, render_detail, render_table


console = Console()
err_console = Console(stderr=True)
logger = logging.getLogger(__name__)

ConfigOption = Annotated[
    Optional[Path],
    typer.Option("--config", "-c", help="YAML config file (default: package marketpulse.yaml)"),
]
VerboseOption = Annotated[
    bool,
    typer.Option("--verbose", "-v", help="Enable verbose logging"),
]

# Labels for the detail-view range keys
RANGE_LABELS = {
    "1": "1D", "7": "7D", "30": "1M", "90": "3M", "180": "6M", "365": "1Y", "max": "Max",
    "1month": "1M", "3months": "3M", "6months": "6M", "1year": "1Y", "5years": "5Y",
}


def browse_help(page_size_options: list[int]) -> str:
    """Command reference printed under the browse table."""
    sizes = "/".join(str(size) for size in page_size_options)
    return (
        "[dim]n[/dim] next  [dim]p[/dim] prev  [dim]g N[/dim] go to page  "
        "[dim]/ TEXT[/dim] search  [dim]s KEY[/dim] sort  "
        f"[dim]z N[/dim] page size ({sizes})  "
        "[dim]r[/dim] refresh  [dim]q[/dim] quit"
    )


def setup_logging(verbose: bool = False) -> None:
    """Setup logging with rich handler."""
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=err_console, rich_tracebacks=True)],
    )


def load_app_config(config_path: Path | None) -> MarketPulseConfig:
    """Load the explicit config file, the packaged one, or built-in defaults."""
    if config_path is not None:
        try:
            data = load_config_file(config_path)
        except FileNotFoundError as e:
            console.print(f"[red]Error:[/red] {e}")
            raise typer.Exit(1)
        return MarketPulseConfig.from_yaml(data)

    try:
        return MarketPulseConfig.from_yaml(load_config("marketpulse"))
    except FileNotFoundError:
        logger.debug("No marketpulse.yaml found, using built-in defaults")
        return MarketPulseConfig()


def _page_payload(page: TablePage, advisory: str | None) -> dict[str, Any]:
    return {
        "page": page.window.current_page,
        "total_pages": page.window.total_pages,
        "page_size": page.window.page_size,
        "filtered_count": page.filtered_count,
        "advisory": advisory,
        "items": [r.model_dump(mode="json") for r in page.items],
    }


def build_market_app(
    *,
    name: str,
    title: str,
    fetcher_factory: Callable[[MarketPulseConfig], Any],
    default_page_size: Callable[[MarketPulseConfig], int],
    entity_label: str,
    noun: str,
    show_sector: bool = False,
) -> typer.Typer:
    """Create the ``list`` / ``show`` / ``browse`` command group for one asset class."""
    app = typer.Typer(help=f"{title} views", no_args_is_help=True)

    def load_listings(fetcher: Any, state: TableState) -> tuple[TableState, str | None]:
        with err_console.status(f"Fetching {name} listings..."):
            result = fetcher.fetch_listings()
        return set_records(state, result.data), result.advisory

    @app.command("list")
    def list_listings(
        query: Annotated[
            str,
            typer.Option("--query", "-q", help="Filter by name or symbol (case-insensitive)"),
        ] = "",
        sort: Annotated[
            Optional[str],
            typer.Option("--sort", "-s", help=f"Sort key: {', '.join(SORT_FIELDS)}"),
        ] = None,
        descending: Annotated[
            bool,
            typer.Option("--desc", help="Sort descending"),
        ] = False,
        page: Annotated[
            int,
            typer.Option("--page", "-p", help="Page number (1-indexed)"),
        ] = 1,
        page_size: Annotated[
            Optional[int],
            typer.Option("--page-size", "-n", help="Rows per page", min=1),
        ] = None,
        as_json: Annotated[
            bool,
            typer.Option("--json", help="Write the page as JSON to stdout"),
        ] = False,
        config: ConfigOption = None,
        verbose: VerboseOption = False,
    ) -> None:
        """Show the market overview table."""
        setup_logging(verbose)
        app_config = load_app_config(config)
        state = TableState(page_size=page_size or default_page_size(app_config))

        with fetcher_factory(app_config) as fetcher:
            state, advisory = load_listings(fetcher, state)

        try:
            if sort:
                state = set_sort(state, SortDirective(sort, "descending" if descending else "ascending"))
        except ValueError as e:
            console.print(f"[red]Error:[/red] {e}")
            raise typer.Exit(2)

        state = set_query(state, query)
        moved = go_to_page(state, page)
        if moved is state and page != state.current_page:
            logger.warning(f"Page {page} is out of range (1-{page_count(state)}), showing page 1")
        state = moved

        table_page = render_page(state)

        if as_json:
            sys.stdout.write(
                orjson.dumps(_page_payload(table_page, advisory), option=orjson.OPT_INDENT_2).decode()
            )
            sys.stdout.write("\n")
            return

        render_advisory(console, advisory)
        render_table(console, table_page, title=title, sort=state.sort, show_sector=show_sector)

    @app.command("show")
    def show_detail(
        entity_id: Annotated[str, typer.Argument(help=entity_label)],
        range_key: Annotated[
            Optional[str],
            typer.Option("--range", "-r", help="Chart range"),
        ] = None,
        interactive: Annotated[
            bool,
            typer.Option("--interactive", "-i", help="Prompt for range changes and refreshes"),
        ] = False,
        config: ConfigOption = None,
        verbose: VerboseOption = False,
    ) -> None:
        """Show the detail page with a price chart."""
        setup_logging(verbose)
        app_config = load_app_config(config)

        with fetcher_factory(app_config) as fetcher:
            try:
                controller = DetailViewController(fetcher, entity_id, range_key)
            except ValueError as e:
                console.print(f"[red]Error:[/red] {e}")
                raise typer.Exit(2)

            with err_console.status(f"Loading {entity_id}..."):
                state = controller.load()

            while True:
                if state.status is DetailStatus.NOT_FOUND:
                    console.print(f"[red]{noun} Not Found:[/red] {entity_id}")
                    raise typer.Exit(1)
                if state.status is DetailStatus.ERROR:
                    console.print(f"[red]Error:[/red] {state.error}")
                    raise typer.Exit(1)

                render_detail(console, state, RANGE_LABELS.get(state.range, state.range))

                if not interactive:
                    return

                choices = list(fetcher.range_days)
                answer = Prompt.ask(
                    f"Range ({', '.join(choices)}), [bold]r[/bold] refresh, [bold]q[/bold] quit",
                    default="q",
                    console=console,
                ).strip()

                if answer == "q":
                    return
                if answer == "r":
                    with err_console.status("Refreshing..."):
                        state = controller.refresh()
                elif answer in choices:
                    with err_console.status("Loading chart..."):
                        state = controller.set_range(answer)
                else:
                    console.print(f"[yellow]Unknown choice:[/yellow] {answer}")

    @app.command("browse")
    def browse(
        page_size: Annotated[
            Optional[int],
            typer.Option("--page-size", "-n", help="Rows per page", min=1),
        ] = None,
        config: ConfigOption = None,
        verbose: VerboseOption = False,
    ) -> None:
        """Interactively page, search and sort the overview table."""
        setup_logging(verbose)
        app_config = load_app_config(config)
        state = TableState(page_size=page_size or default_page_size(app_config))

        with fetcher_factory(app_config) as fetcher:
            state, advisory = load_listings(fetcher, state)

            while True:
                render_advisory(console, advisory)
                render_table(console, render_page(state), title=title, sort=state.sort, show_sector=show_sector)
                console.print(browse_help(app_config.table.page_size_options))

                command, _, arg = Prompt.ask(">", default="q", console=console).strip().partition(" ")
                arg = arg.strip()

                try:
                    if command == "q":
                        return
                    elif command == "n":
                        state = next_page(state)
                    elif command == "p":
                        state = previous_page(state)
                    elif command == "g":
                        state = go_to_page(state, int(arg))
                    elif command == "/":
                        state = set_query(state, arg)
                    elif command == "s":
                        state = request_sort(state, arg)
                    elif command == "z":
                        state = set_page_size(state, int(arg))
                    elif command == "r":
                        state, advisory = load_listings(fetcher, state)
                    else:
                        console.print(f"[yellow]Unknown command:[/yellow] {command}")
                except ValueError as e:
                    console.print(f"[red]Error:[/red] {e}")

    return app


crypto_app = build_market_app(
    name="crypto",
    title="Cryptocurrency Market",
    fetcher_factory=lambda config: CryptoFetcher(config),
    default_page_size=lambda config: config.table.crypto_page_size,
    entity_label="CoinGecko coin id (e.g., bitcoin)",
    noun="Cryptocurrency",
)

stocks_app = build_market_app(
    name="stocks",
    title="Stock Market",
    fetcher_factory=lambda config: StockFetcher(config),
    default_page_size=lambda config: config.table.stocks_page_size,
    entity_label="Ticker symbol (e.g., AAPL)",
    noun="Stock",
    show_sector=True,
)
