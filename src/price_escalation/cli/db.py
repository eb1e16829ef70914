"""Database CLI commands for the index store."""

import asyncio
from pathlib import Path
from typing import Annotated

import asyncpg
import typer
from rich.console import Console
from rich.panel import Panel

from price_escalation.db.seed_data import seed_records
from price_escalation.store import PostgresIndexStore

app = typer.Typer(no_args_is_help=True)
console = Console()

DatabaseUrl = Annotated[
    str,
    typer.Option(
        "--database-url",
        "-d",
        envvar="ESCALATION_DATABASE_URL",
        help="Postgres DSN for the index store",
    ),
]


async def execute_schema(database_url: str, schema_sql: str) -> None:
    """Execute schema SQL against Postgres."""
    conn = await asyncpg.connect(database_url)
    try:
        await conn.execute(schema_sql)
    finally:
        await conn.close()


@app.command()
def setup_schema(database_url: DatabaseUrl) -> None:
    """Apply the index store schema.

    Creates the indices table with its (index_type, year, month) uniqueness
    constraint. Idempotent.
    """
    console.print(Panel.fit("Setting up Index Store Schema", style="bold blue"))

    # Load schema from package
    schema_path = Path(__file__).parent.parent / "db" / "schema.sql"
    if not schema_path.exists():
        console.print(f"[red]Error:[/red] Schema file not found: {schema_path}")
        raise typer.Exit(1)

    schema_sql = schema_path.read_text()

    with console.status("[bold green]Applying schema..."):
        try:
            asyncio.run(execute_schema(database_url, schema_sql))
        except Exception as e:
            console.print(f"[red]Error:[/red] {e}")
            raise typer.Exit(1) from None

    console.print("[green]✓[/green] Schema setup complete!")


@app.command()
def seed(database_url: DatabaseUrl) -> None:
    """Load the WPI and CPI-IW seed series.

    Existing records are left untouched, so remote-sourced values are never
    overwritten by seed values.
    """
    console.print(Panel.fit("Seeding Index Store", style="bold blue"))

    records = seed_records()

    async def insert() -> int:
        pool = await asyncpg.create_pool(database_url, min_size=1, max_size=2)
        try:
            return await PostgresIndexStore(pool).insert_missing(records)
        finally:
            await pool.close()

    with console.status("[bold green]Inserting seed records..."):
        try:
            inserted = asyncio.run(insert())
        except Exception as e:
            console.print(f"[red]Error:[/red] {e}")
            raise typer.Exit(1) from None

    console.print(
        f"[green]✓[/green] Seed complete: {inserted} inserted,"
        f" {len(records) - inserted} skipped"
    )


@app.command()
def check_connection(database_url: DatabaseUrl) -> None:
    """Test connection to Postgres."""
    console.print(Panel.fit("Testing Database Connection", style="bold blue"))

    async def test_connection() -> tuple[str, int]:
        conn = await asyncpg.connect(database_url)
        try:
            version = await conn.fetchval("SELECT version()")
            count = await conn.fetchval("SELECT COUNT(*) FROM indices")
            return version, count
        finally:
            await conn.close()

    with console.status("[bold green]Connecting..."):
        try:
            version, count = asyncio.run(test_connection())
        except Exception as e:
            console.print(f"[red]Error:[/red] {e}")
            raise typer.Exit(1) from None

    console.print("[green]✓[/green] Connected successfully!")
    console.print(f"  Version: [dim]{version}[/dim]")
    console.print(f"  Indices: [cyan]{count}[/cyan] rows")
