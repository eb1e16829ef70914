"""Price Escalation CLI."""

import typer

from price_escalation.cli.calc import app as calc_app
from price_escalation.cli.db import app as db_app
from price_escalation.cli.index import app as index_app

app = typer.Typer(
    name="price-escalation",
    help="Price Escalation - HAM escalation with WPI / CPI-IW index resolution",
    no_args_is_help=True,
)

app.add_typer(calc_app, name="calc", help="Escalation calculations")
app.add_typer(index_app, name="index", help="Index lookup and refresh")
app.add_typer(db_app, name="db", help="Database operations")


@app.callback()
def main() -> None:
    """Price Escalation CLI."""
    pass


if __name__ == "__main__":
    app()
