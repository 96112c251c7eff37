"""CLI entry point for marketpulse."""

import typer

from .markets import crypto_app, stocks_app

app = typer.Typer(
    name="marketpulse",
    help="Cryptocurrency and stock market dashboard for the terminal.",
    no_args_is_help=True,
)

# Register subcommands
app.add_typer(crypto_app, name="crypto", help="Cryptocurrency listings and details")
app.add_typer(stocks_app, name="stocks", help="Stock listings and details")


if __name__ == "__main__":
    app()
